from pathlib import Path

import streamlit as st

from components.dress_catalog import (
    NEW_DRESS_DEFAULTS,
    CatalogError,
    DressFilter,
    DuplicateSelectionError,
    add_category,
    add_dress,
    add_selection,
    categories,
    delete_dress,
    filter_dresses,
    load_dresses,
    sizes,
    update_dress,
)
from components.ui_theme import apply_theme, section_header, top_nav

st.set_page_config(page_title="Dress Catalog", page_icon="🛍️", layout="wide")
apply_theme()
top_nav()

base_dir = Path(__file__).resolve().parent.parent
if "selections" not in st.session_state:
    st.session_state.selections = []
if "catalog" not in st.session_state:
    st.session_state.catalog = load_dresses(base_dir)
if "catalog_categories" not in st.session_state:
    st.session_state.catalog_categories = []

st.title("Dress Catalog")

dresses = st.session_state.catalog
category_names = categories(dresses, st.session_state.catalog_categories)


def _dress_form(prefix: str, values: dict) -> dict:
    """Shared create/edit form fields; returns the entered values."""
    f1, f2 = st.columns(2)
    with f1:
        name = st.text_input("Name", value=values["name"], key=f"{prefix}_name")
        options = category_names if values["category"] in category_names else category_names + [values["category"]]
        category = st.selectbox("Category", options, index=options.index(values["category"]), key=f"{prefix}_category")
        size = st.text_input("Size", value=values["size"], key=f"{prefix}_size")
        color = st.text_input("Color", value=values["color"], key=f"{prefix}_color")
    with f2:
        price = st.number_input("Price", min_value=0.0, value=float(values["price"]), step=1.0, key=f"{prefix}_price")
        in_stock = st.checkbox("In stock", value=bool(values["in_stock"]), key=f"{prefix}_stock")
        image_url = st.text_input("Image URL", value=values["image_url"], key=f"{prefix}_image")
        description = st.text_area("Description", value=values["description"], key=f"{prefix}_description")
    return {
        "name": name,
        "category": category,
        "size": size,
        "color": color,
        "price": price,
        "in_stock": in_stock,
        "image_url": image_url,
        "description": description,
    }


with st.expander("Manage catalog"):
    st.markdown("**Add a dress**")
    fields = _dress_form("new_dress", NEW_DRESS_DEFAULTS)
    if st.button("Create dress", type="primary"):
        try:
            st.session_state.catalog = add_dress(dresses, fields)
            st.rerun()
        except CatalogError as exc:
            st.error(str(exc))

    st.markdown("**Add a category**")
    c_name, c_desc, c_order = st.columns([2, 3, 1])
    with c_name:
        new_category = st.text_input("Category name", key="new_category_name")
    with c_desc:
        new_category_desc = st.text_input("Category description", key="new_category_desc")
    with c_order:
        new_category_order = st.number_input("Sort order", min_value=0, value=0, step=1, key="new_category_order")
    if st.button("Create category"):
        try:
            st.session_state.catalog_categories = add_category(
                st.session_state.catalog_categories, new_category, new_category_desc, int(new_category_order)
            )
            st.rerun()
        except CatalogError as exc:
            st.error(str(exc))

section_header("Filters", "Narrow the catalog by category, size, color, price or keyword.")
c1, c2, c3 = st.columns(3)
with c1:
    category = st.selectbox("Category", ["Any"] + category_names)
    search = st.text_input("Search", placeholder="e.g. satin")
with c2:
    size = st.selectbox("Size", ["Any"] + sizes(dresses))
    color = st.text_input("Color", placeholder="e.g. black")
with c3:
    max_catalog_price = max((d["price"] for d in dresses), default=0.0)
    price_range = st.slider(
        "Price",
        min_value=0.0,
        max_value=float(max(max_catalog_price, 1.0)),
        value=(0.0, float(max(max_catalog_price, 1.0))),
    )
    in_stock_only = st.checkbox("In stock only", value=False)

flt = DressFilter(
    category=None if category == "Any" else category,
    size=None if size == "Any" else size,
    color=color or None,
    min_price=price_range[0],
    max_price=price_range[1],
    search=search or None,
    in_stock=True if in_stock_only else None,
)
results = filter_dresses(dresses, flt)
st.caption(f"{len(results)} of {len(dresses)} dresses")

for dress in results:
    with st.container(border=True):
        left, right = st.columns([1, 2])
        with left:
            if dress.get("image_url"):
                st.image(dress["image_url"], width=220)
            else:
                st.info("No image available")
        with right:
            st.markdown(f"### {dress['name']}")
            st.caption(" · ".join(x for x in [dress["category"], dress["size"], dress["color"]] if x))
            st.write(dress["description"])
            st.caption(f"💰 ${dress['price']:.2f}" + ("" if dress["in_stock"] else " · out of stock"))
            notes = st.text_input("Notes", key=f"notes_{dress.get('id')}", placeholder="Optional")
            if st.button("Add to selections", key=f"select_{dress.get('id')}"):
                try:
                    st.session_state.selections = add_selection(st.session_state.selections, dress, notes)
                    st.success("Added to your selections.")
                except DuplicateSelectionError as exc:
                    st.warning(str(exc))

            with st.expander("Edit"):
                edited = _dress_form(f"edit_{dress['id']}", dress)
                c_save, c_delete = st.columns(2)
                with c_save:
                    if st.button("Save changes", key=f"save_{dress['id']}", use_container_width=True):
                        try:
                            st.session_state.catalog = update_dress(dresses, dress["id"], **edited)
                            st.rerun()
                        except CatalogError as exc:
                            st.error(str(exc))
                with c_delete:
                    if st.button("Delete dress", key=f"delete_{dress['id']}", use_container_width=True):
                        try:
                            st.session_state.catalog = delete_dress(dresses, dress["id"])
                            st.rerun()
                        except CatalogError as exc:
                            st.error(str(exc))
