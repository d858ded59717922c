from __future__ import annotations

from pathlib import Path
import logging

from dotenv import load_dotenv
load_dotenv()

import streamlit as st

from components.customization_panel import customization_panel, reset_panel
from components.design_library import DesignError, new_design, next_design_id, update_design
from components.image_upload import ImageUploadError, image_to_data_url
from components.ui_theme import apply_theme, dress_stage, section_header, top_nav
from config import DEFAULT_BASE_STYLE, DEFAULT_CUSTOMIZATIONS
from rendering.geometry import parse_customizations
from rendering.raster import export_png
from rendering.renderer import render_dress
from rendering.svg_export import scene_to_svg

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="DressLab Studio", page_icon="👗", layout="wide")
apply_theme()

for key, default in {
    "studio_customizations": dict(DEFAULT_CUSTOMIZATIONS),
    "studio_base_style": DEFAULT_BASE_STYLE,
    "studio_view": "front",
    "studio_design_id": None,
    "studio_name": "",
    "studio_image_url": None,
    "own_designs": [],
    "selections": [],
}.items():
    if key not in st.session_state:
        st.session_state[key] = default

base_dir = Path(__file__).resolve().parent

top_nav()
st.title("Design Studio")
st.caption("Shape a dress from five choices, flip between front and back, and save it to your designs.")

customizations = parse_customizations(st.session_state.studio_customizations)

left, right = st.columns([2, 3])

with left:
    section_header("1) Customize", "Pick a silhouette, then adjust length, straps, neckline, back and color.")
    customizations, base_style = customization_panel(customizations, st.session_state.studio_base_style)
    st.session_state.studio_customizations = customizations.to_dict()
    st.session_state.studio_base_style = base_style

    with st.expander("Use a photo instead", expanded=bool(st.session_state.studio_image_url)):
        st.caption("A photo replaces the drawn preview for this design.")
        photo = st.file_uploader("Dress photo", type=["jpg", "jpeg", "png", "gif", "webp"])
        # Track which file we've already read to avoid re-applying it on every rerun
        if photo is not None and st.session_state.get("_last_photo_id") != f"{photo.name}_{photo.size}":
            st.session_state["_last_photo_id"] = f"{photo.name}_{photo.size}"
            try:
                st.session_state.studio_image_url = image_to_data_url(photo.name, photo.getvalue()).url
            except ImageUploadError as exc:
                st.error(str(exc))
        if st.session_state.studio_image_url and st.button("Remove photo", use_container_width=True):
            st.session_state.studio_image_url = None
            st.rerun()

with right:
    section_header("2) Preview", "The drawing updates as you change options.")
    view = st.radio(
        "View",
        ["front", "back"],
        index=0 if st.session_state.studio_view == "front" else 1,
        format_func=lambda v: f"{v.title()} view",
        horizontal=True,
    )
    st.session_state.studio_view = view

    if st.session_state.studio_image_url:
        st.image(st.session_state.studio_image_url, width=360)
    else:
        scene = render_dress(customizations, base_style, view, width=400, height=600)
        dress_stage(scene_to_svg(scene, id_prefix="studio-"))

        export = render_dress(customizations, base_style, view, width=800, height=1200)
        c_svg, c_png = st.columns(2)
        with c_svg:
            st.download_button(
                "Download SVG",
                data=scene_to_svg(export),
                file_name=f"dress-{base_style}-{view}.svg",
                mime="image/svg+xml",
                use_container_width=True,
            )
        with c_png:
            st.download_button(
                "Download PNG",
                data=export_png(customizations, base_style, view),
                file_name=f"dress-{base_style}-{view}.png",
                mime="image/png",
                use_container_width=True,
            )

section_header("3) Save", "Keep this design in your gallery for this session.")
name = st.text_input("Design name", value=st.session_state.studio_name, placeholder="e.g. Midnight gala")

c_save, c_new = st.columns(2)
with c_save:
    if st.button("Save design", type="primary", use_container_width=True):
        designs = st.session_state.own_designs
        if st.session_state.studio_design_id is not None:
            try:
                st.session_state.own_designs = update_design(
                    designs,
                    st.session_state.studio_design_id,
                    name=name,
                    base_style=base_style,
                    customizations=customizations,
                    image_url=st.session_state.studio_image_url or "",
                )
                st.success("Design updated.")
            except DesignError as exc:
                st.error(str(exc))
        else:
            design = new_design(
                next_design_id(designs),
                name,
                base_style,
                customizations,
                image_url=st.session_state.studio_image_url,
            )
            st.session_state.own_designs = designs + [design]
            st.session_state.studio_design_id = design.id
            st.session_state.studio_name = design.name
            st.success(f"Saved “{design.name}”.")
with c_new:
    if st.button("Start a new design", use_container_width=True):
        st.session_state.studio_customizations = dict(DEFAULT_CUSTOMIZATIONS)
        st.session_state.studio_base_style = DEFAULT_BASE_STYLE
        st.session_state.studio_design_id = None
        st.session_state.studio_name = ""
        st.session_state.studio_image_url = None
        reset_panel()
        st.rerun()

if st.button("Browse presets and saved designs", use_container_width=True):
    st.switch_page("pages/1_Preset_Gallery.py")
