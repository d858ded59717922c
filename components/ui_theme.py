from __future__ import annotations

import html

import streamlit as st

from config import BASE_STYLE_LABELS
from rendering.colors import normalize_hex


def apply_theme() -> None:
    st.markdown(
        """
        <style>
          @import url('https://fonts.googleapis.com/css2?family=DM+Sans:wght@400;500;600&family=Cormorant+Garamond:wght@500;600;700&display=swap');

          :root {
            --bg: #f7f4f8;
            --surface: #ffffff;
            --text: #1f1a24;
            --muted: #6c6473;
            --line: #e6dfea;
            --accent: #8e44ad;
            --accent-dark: #6f3387;
          }

          .stApp {
            background: var(--bg);
            color: var(--text);
            font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
          }

          .block-container {
            max-width: 1100px;
            padding-top: 1.0rem;
            padding-bottom: 2rem;
          }

          h1, h2, h3 {
            color: var(--text) !important;
            letter-spacing: -0.01em;
          }

          .top-nav {
            border-bottom: 1px solid var(--line);
            padding: 0.45rem 0;
            margin-bottom: 0.9rem;
          }

          .brand-mark {
            font-family: 'Cormorant Garamond', Georgia, serif;
            font-size: 1.45rem;
            font-weight: 700;
          }

          .section-card {
            border: 1px solid var(--line);
            border-radius: 14px;
            background: var(--surface);
            padding: 0.8rem 1rem;
            margin: 1rem 0 0.6rem 0;
          }

          .section-title {
            font-weight: 600;
            font-size: 1.05rem;
          }

          .section-hint {
            color: var(--muted);
            font-size: 0.9rem;
          }

          .dress-stage {
            display: flex;
            justify-content: center;
            background: linear-gradient(180deg, #ffffff 0%, #f1ecf4 100%);
            border: 1px solid var(--line);
            border-radius: 16px;
            padding: 0.8rem;
          }

          .design-card {
            border: 1px solid var(--line);
            border-radius: 12px;
            background: var(--surface);
            padding: 0.6rem;
            text-align: center;
          }

          .design-meta {
            color: var(--muted);
            font-size: 0.8rem;
          }

          .pill {
            display: inline-block;
            background: rgba(142, 68, 173, 0.12);
            color: var(--accent-dark);
            border-radius: 999px;
            padding: 0.1rem 0.55rem;
            font-size: 0.75rem;
            font-weight: 600;
          }

          .swatch {
            display: inline-block;
            width: 14px;
            height: 14px;
            border-radius: 50%;
            border: 1px solid var(--line);
            vertical-align: middle;
          }

          .stButton > button[kind="primary"] {
            background: var(--accent) !important;
            border: 0 !important;
            border-radius: 10px !important;
          }

          .stButton > button[kind="primary"]:hover {
            background: var(--accent-dark) !important;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


def top_nav() -> None:
    st.markdown(
        """
        <div class="top-nav">
          <div class="brand-mark">DressLab</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def section_header(title: str, hint: str) -> None:
    st.markdown(
        f"""
        <div class="section-card">
          <div class="section-title">{title}</div>
          <div class="section-hint">{hint}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def dress_stage(svg_markup: str) -> None:
    st.markdown(f"<div class='dress-stage'>{svg_markup}</div>", unsafe_allow_html=True)


def design_card_html(name: str, base_style: str, color: str, is_preset: bool) -> str:
    badge = "<span class='pill'>Preset</span>" if is_preset else ""
    style = html.escape(BASE_STYLE_LABELS.get(base_style, base_style))
    return f"""
        <div class="design-card">
          <div class="section-title">{html.escape(name)}</div>
          <div class="design-meta">{style} <span class="swatch" style="background:{normalize_hex(color)};"></span> {badge}</div>
        </div>
        """


def design_card_caption(name: str, base_style: str, color: str, is_preset: bool) -> None:
    st.markdown(design_card_html(name, base_style, color, is_preset), unsafe_allow_html=True)
