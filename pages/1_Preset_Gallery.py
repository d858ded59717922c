from pathlib import Path

import streamlit as st

from components.customization_panel import reset_panel
from components.design_library import DesignError, delete_design, load_presets, preview_scene, visible_designs
from components.ui_theme import apply_theme, design_card_caption, top_nav
from rendering.svg_export import scene_to_svg

st.set_page_config(page_title="Preset Gallery", page_icon="✨", layout="wide")
apply_theme()
top_nav()

st.title("Preset Gallery")
st.caption("Start from a preset or reopen one of your saved designs.")

base_dir = Path(__file__).resolve().parent.parent
presets = load_presets(base_dir)
own = st.session_state.get("own_designs", [])
designs = visible_designs(presets, own)

if not designs:
    st.info("No designs yet.")

cols = st.columns(4)
for i, design in enumerate(designs):
    with cols[i % 4]:
        scene = preview_scene(design, width=160, height=220)
        if scene is None:
            st.image(design.image_url, use_container_width=True)
        else:
            st.markdown(scene_to_svg(scene, id_prefix=f"d{design.id}-{i}-"), unsafe_allow_html=True)
        design_card_caption(design.name, design.base_style, design.parsed.color, design.is_preset)

        if st.button("Open in studio", key=f"open_{i}", use_container_width=True):
            st.session_state.studio_customizations = design.parsed.to_dict()
            st.session_state.studio_base_style = design.base_style
            st.session_state.studio_image_url = design.image_url
            # Presets open as a fresh copy; own designs are edited in place
            st.session_state.studio_design_id = None if design.is_preset else design.id
            st.session_state.studio_name = "" if design.is_preset else design.name
            reset_panel()
            st.switch_page("app.py")

        if not design.is_preset and st.button("Delete", key=f"delete_{i}", use_container_width=True):
            try:
                st.session_state.own_designs = delete_design(own, design.id)
                if st.session_state.get("studio_design_id") == design.id:
                    st.session_state.studio_design_id = None
                st.rerun()
            except DesignError as exc:
                st.error(str(exc))
