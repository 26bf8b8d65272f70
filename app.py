import io
import logging

import pandas as pd
import streamlit as st
from PIL import Image
from streamlit_image_coordinates import streamlit_image_coordinates

from config import RAW_MAX, default_config
from export import layout_to_frame, to_csv, to_excel, to_json
from main_chart import StreamGraph
from raster import render_png, to_svg
from records import full_resolution_category, records_from_frame, sample_records

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Stream Explorer", layout="wide")

st.title("Stream Explorer")
st.markdown(
    "Upload a CSV with a `Date` column and one column per model. "
    "Click a stream to see that model's values month by month."
)

# Sidebar
derive_policy = st.sidebar.checkbox(
    "Pick full-resolution model from data",
    help="Use the model with the highest median as the raw-maximum detail axis "
         "instead of the configured one.",
)

uploaded = st.file_uploader("Upload a CSV", type=["csv"])


def _load_records(categories: list[str]):
    """Parse the upload, falling back to sample data when nothing is uploaded."""
    if uploaded is None:
        return sample_records(categories), "sample"
    try:
        df = pd.read_csv(uploaded)
        return records_from_frame(df, categories), f"{uploaded.name}:{uploaded.size}"
    except Exception as e:
        st.error(f"Could not read {uploaded.name}: {e}")
        return None, f"{uploaded.name}:error"


config = default_config()
records, data_key = _load_records(config.categories)
if derive_policy and records:
    chosen = full_resolution_category(records, config.categories)
    config.axis_policies = {chosen: RAW_MAX}
    st.sidebar.caption(f"Full-resolution model: {chosen}")

# Re-render only when the data or the axis policy changes.
render_key = (data_key, derive_policy)
if st.session_state.get("render_key") != render_key:
    graph = StreamGraph(config)
    graph.mount(records)
    st.session_state["graph"] = graph
    st.session_state["render_key"] = render_key
    st.session_state.pop("_last_chart_click", None)

graph: StreamGraph = st.session_state["graph"]
renderer = graph.renderer

if renderer.layout is None:
    st.info("No records to chart.")
    st.stop()

col_chart, col_detail = st.columns([3, 2])
with col_chart:
    chart_png = render_png(renderer.surface.root)
    coords = streamlit_image_coordinates(
        Image.open(io.BytesIO(chart_png)),
        width=int(config.width),
        key="chart_image",
        cursor="crosshair",
    )

# Process click — only act on NEW clicks, not replayed values.
if coords is not None:
    click_key = (coords["x"], coords["y"])
    if click_key != st.session_state.get("_last_chart_click"):
        st.session_state["_last_chart_click"] = click_key
        hovered = renderer.pointer(coords["x"], coords["y"])
        logger.info("Pointer at %s -> %s", click_key, hovered or "no layer")
        st.rerun()

with col_detail:
    if renderer.hover.active:
        st.image(render_png(renderer.detail.panel))
        pointer = renderer.hover.pointer
        st.caption(f"Anchored at ({pointer.client_x:.0f}, {pointer.client_y:.0f})")
        if st.button("Close detail"):
            renderer.pointer_exit()
            st.rerun()
    else:
        st.caption("Click a stream to inspect it.")

# Layout table
st.subheader("Stacked Layout")
st.dataframe(layout_to_frame(renderer.layout), use_container_width=True)

# Export buttons
st.subheader("Export")
col_csv, col_json, col_excel, col_svg = st.columns(4)
with col_csv:
    st.download_button(
        "CSV",
        data=to_csv(renderer.layout),
        file_name="streamgraph_layout.csv",
        mime="text/csv",
    )
with col_json:
    st.download_button(
        "JSON",
        data=to_json(renderer.layout),
        file_name="streamgraph_layout.json",
        mime="application/json",
    )
with col_excel:
    st.download_button(
        "Excel",
        data=to_excel(renderer.layout),
        file_name="streamgraph_layout.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
with col_svg:
    st.download_button(
        "SVG",
        data=to_svg(renderer.surface.root),
        file_name="streamgraph.svg",
        mime="image/svg+xml",
    )
