from __future__ import annotations

from typing import Tuple

import streamlit as st

from components.design_library import length_label
from config import (
    BACK_STYLE_LABELS,
    BACK_STYLES,
    BASE_STYLE_LABELS,
    BASE_STYLES,
    LENGTH_MAX,
    LENGTH_MIN,
    NECKLINE_LABELS,
    NECKLINES,
    PRESET_COLORS,
    STRAP_LABELS,
    STRAP_TYPES,
)
from rendering.colors import normalize_hex
from rendering.geometry import DressCustomizations


def _index_of(options, value, fallback: int = 0) -> int:
    return options.index(value) if value in options else fallback


def customization_panel(
    customizations: DressCustomizations,
    base_style: str,
    key: str = "panel",
) -> Tuple[DressCustomizations, str]:
    """Render the studio controls and return the (possibly) updated selection."""
    base_style = st.radio(
        "Dress style",
        BASE_STYLES,
        index=_index_of(BASE_STYLES, base_style),
        format_func=lambda v: BASE_STYLE_LABELS[v],
        horizontal=True,
        key=f"{key}_base_style",
    )

    length = st.slider(
        "Length",
        min_value=LENGTH_MIN,
        max_value=LENGTH_MAX,
        value=int(customizations.length),
        key=f"{key}_length",
    )
    st.caption(f"Length: **{length_label(length)}** · Mini · Midi · Maxi · Floor")

    col_a, col_b = st.columns(2)
    with col_a:
        strap_type = st.selectbox(
            "Straps",
            STRAP_TYPES,
            index=_index_of(STRAP_TYPES, customizations.strap_type),
            format_func=lambda v: STRAP_LABELS[v],
            key=f"{key}_strap",
        )
        neckline = st.selectbox(
            "Neckline",
            NECKLINES,
            index=_index_of(NECKLINES, customizations.neckline),
            format_func=lambda v: NECKLINE_LABELS[v],
            key=f"{key}_neckline",
        )
    with col_b:
        back_style = st.selectbox(
            "Back",
            BACK_STYLES,
            index=_index_of(BACK_STYLES, customizations.back_style),
            format_func=lambda v: BACK_STYLE_LABELS[v],
            key=f"{key}_back",
        )
        current = normalize_hex(customizations.color)
        palette = PRESET_COLORS if current in PRESET_COLORS else [current] + PRESET_COLORS
        swatch = st.selectbox("Palette", palette, index=palette.index(current), key=f"{key}_palette")
        color = st.color_picker("Custom color", value=swatch, key=f"{key}_color_{swatch}")

    updated = DressCustomizations(
        length=length,
        strap_type=strap_type,
        back_style=back_style,
        neckline=neckline,
        color=normalize_hex(color),
    )
    return updated, base_style


def reset_panel(key: str = "panel") -> None:
    """Drop widget state so the panel re-reads the studio's current design."""
    for state_key in [k for k in st.session_state.keys() if str(k).startswith(f"{key}_")]:
        del st.session_state[state_key]
