"""Streamlit page for previewing and downloading dyed amethyst variants."""

from __future__ import annotations

import json
from io import BytesIO
from typing import Dict, List

import numpy as np
import pandas as pd
import streamlit as st
from PIL import Image

from dye_engine import (
    Config,
    ConfigError,
    DyeColor,
    InvalidFilterCombination,
    dye_image,
    load_config,
    load_image_rgba_u8,
    parse_config,
)
from dye_engine.config import DEFAULT_CONFIG_PATH, filter_to_dict, output_name
from dye_engine.io import encode_png_bytes, write_zip

GRID_COLUMNS = 4


@st.cache_data
def load_default_config(mtime_ns: int) -> Config:
    _ = mtime_ns
    return load_config(DEFAULT_CONFIG_PATH)


def load_uploaded_config(uploaded) -> Config:
    try:
        data = json.loads(uploaded.getvalue().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"{uploaded.name}: invalid JSON ({exc})") from exc
    return parse_config(data)


def render_variants(config: Config, image: np.ndarray,
                    colors: List[DyeColor]) -> Dict[DyeColor, np.ndarray]:
    variants: Dict[DyeColor, np.ndarray] = {}
    for color in colors:
        try:
            variants[color] = dye_image(config.colors[color], image)
        except InvalidFilterCombination as exc:
            st.error(f"Configuration error for color {color}: {exc}")
    return variants


def build_zip(variants: Dict[DyeColor, np.ndarray]) -> bytes:
    buffer = BytesIO()
    write_zip(buffer, [(output_name(color, "png"), encode_png_bytes(img))
                       for color, img in variants.items()])
    return buffer.getvalue()


def show_filters(config: Config, color: DyeColor) -> None:
    filters = config.colors[color].filters
    if not filters:
        st.caption("No filters configured.")
        return
    df = pd.DataFrame([filter_to_dict(f) for f in filters])
    st.dataframe(df, width="content")


def main() -> None:
    st.set_page_config(page_title="Amethyst Colorizer", layout="wide")
    st.title("Amethyst Colorizer")

    uploaded_config = st.sidebar.file_uploader("Color configuration", type=["json"])
    try:
        if uploaded_config is None:
            config = load_default_config(DEFAULT_CONFIG_PATH.stat().st_mtime_ns)
        else:
            config = load_uploaded_config(uploaded_config)
    except ConfigError as exc:
        st.error(f"Invalid configuration: {exc}")
        st.stop()

    available = [color for color in DyeColor if color in config.colors]
    colors = st.sidebar.multiselect(
        "Dye colors", options=available, default=available,
        format_func=lambda color: color.value.replace("_", " ").title())

    uploaded = st.file_uploader("Upload PNG", type=["png"])
    if uploaded is None:
        st.info("Upload a texture to start.")
        return

    image = load_image_rgba_u8(Image.open(uploaded))
    st.subheader("Original")
    st.image(image, width="content")

    if not colors:
        st.info("Pick at least one dye color.")
        return

    with st.spinner("Dyeing..."):
        variants = render_variants(config, image, colors)

    st.subheader("Variants")
    grid = st.columns(GRID_COLUMNS)
    for index, (color, img) in enumerate(variants.items()):
        with grid[index % GRID_COLUMNS]:
            st.caption(str(color))
            st.image(img, width="stretch")

    if variants:
        st.download_button(
            "Download all (.zip)",
            data=build_zip(variants),
            file_name="amethyst_variants.zip",
            mime="application/zip",
        )

    st.subheader("Filter chain")
    inspected = st.selectbox("Color", options=colors, format_func=str)
    show_filters(config, inspected)


if __name__ == "__main__":
    main()
