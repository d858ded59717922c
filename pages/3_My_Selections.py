import streamlit as st

from components.dress_catalog import SelectionNotFound, remove_selection
from components.ui_theme import apply_theme, top_nav

st.set_page_config(page_title="My Selections", page_icon="💜", layout="wide")
apply_theme()
top_nav()

st.title("My Selections")

selections = st.session_state.get("selections", [])
if not selections:
    st.info("Nothing selected yet. Add dresses from the catalog.")
    if st.button("Go to catalog"):
        st.switch_page("pages/2_Dress_Catalog.py")

for sel in selections:
    with st.container(border=True):
        left, right = st.columns([1, 3])
        with left:
            if sel.get("dress_image_url"):
                st.image(sel["dress_image_url"], width=140)
        with right:
            st.markdown(f"**{sel.get('dress_name', 'Dress')}**")
            details = [sel.get("dress_category"), sel.get("dress_size"), sel.get("dress_color")]
            st.caption(" · ".join(d for d in details if d))
            if sel.get("dress_price") is not None:
                st.caption(f"💰 ${float(sel['dress_price']):.2f}")
            if sel.get("notes"):
                st.write(sel["notes"])
            if st.button("Remove", key=f"remove_{sel['id']}"):
                try:
                    st.session_state.selections = remove_selection(selections, sel["id"])
                except SelectionNotFound as exc:
                    st.error(str(exc))
                st.rerun()
