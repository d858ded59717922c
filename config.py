"""Centralized configuration for DressLab.

Single source of truth for the canvas anchors, customization enums, default
customization, palette, and shared constants. Every module that draws a
dress or offers a dress option should import from here.
"""
from __future__ import annotations

import os

# ── Canvas (reference coordinate space) ────────────────────────────────
# All geometry is built in this space; renderers scale it uniformly.

CANVAS_WIDTH = 400
CANVAS_HEIGHT = 600
CENTER_X = 200

SHOULDER_Y = 100
BUST_Y = 160
WAIST_Y = 220

WAIST_LEFT_X = 155
WAIST_RIGHT_X = 245
BASE_HALF_WIDTH = 60

# hem_y = HEM_BASE_Y + length / 100 * HEM_RANGE
HEM_BASE_Y = 180
HEM_RANGE = 380

LENGTH_MIN = 30
LENGTH_MAX = 100

# ── Customization enums (canonical set) ────────────────────────────────
# Used by: geometry dispatch tables, preset validation, Streamlit UI, CLI.

BASE_STYLES = ["a-line", "mermaid", "empire", "fit-flare", "sheath"]
STRAP_TYPES = ["strapless", "spaghetti", "thick", "halter", "off-shoulder"]
BACK_STYLES = ["closed", "open", "low-cut", "cross"]
NECKLINES = ["sweetheart", "v-neck", "scoop", "halter", "off-shoulder", "square"]
VIEW_MODES = ["front", "back"]

BASE_STYLES_SET = set(BASE_STYLES)
STRAP_TYPES_SET = set(STRAP_TYPES)
BACK_STYLES_SET = set(BACK_STYLES)
NECKLINES_SET = set(NECKLINES)

BASE_STYLE_LABELS = {
    "a-line": "A-Line",
    "mermaid": "Mermaid",
    "empire": "Empire",
    "fit-flare": "Fit & Flare",
    "sheath": "Sheath",
}
STRAP_LABELS = {
    "strapless": "Strapless",
    "spaghetti": "Spaghetti",
    "thick": "Thick Straps",
    "halter": "Halter",
    "off-shoulder": "Off-Shoulder",
}
BACK_STYLE_LABELS = {
    "closed": "Closed",
    "open": "Open Back",
    "low-cut": "Low Cut",
    "cross": "Cross Back",
}
NECKLINE_LABELS = {
    "sweetheart": "Sweetheart",
    "v-neck": "V-Neck",
    "scoop": "Scoop",
    "halter": "Halter",
    "off-shoulder": "Off-Shoulder",
    "square": "Square",
}

# (upper bound inclusive, label); anything above the last bound is floor length
LENGTH_LABELS = [
    (40, "Mini"),
    (55, "Above Knee"),
    (70, "Midi"),
    (85, "Below Knee"),
    (95, "Maxi"),
]
FLOOR_LENGTH_LABEL = "Floor Length"

# ── Defaults ───────────────────────────────────────────────────────────

DEFAULT_BASE_STYLE = "a-line"
DEFAULT_CUSTOMIZATIONS = {
    "length": 75,
    "strapType": "thick",
    "backStyle": "closed",
    "color": "#1a1a2e",
    "neckline": "sweetheart",
}

PRESET_COLORS = [
    "#1a1a2e", "#722f37", "#2d3436", "#e8d5b7", "#a8e6cf",
    "#dfe6e9", "#fab1a0", "#ffeaa7", "#81ecec", "#a29bfe",
    "#fd79a8", "#e17055", "#00b894", "#6c5ce7", "#fdcb6e",
    "#e84393", "#00cec9", "#0984e3", "#636e72", "#b2bec3",
]

# ── Shades (channel offsets applied to the base color) ────────────────

HIGHLIGHT_SHADE = 30
GRADIENT_SHADOW_SHADE = -15
ACCENT_SHADE = -20
SEAM_SHADE = -25
OUTLINE_SHADE = -30

MANNEQUIN_COLOR = "#d4a886"
MANNEQUIN_OPACITY = 0.15
LABEL_COLOR = "#666666"

# ── Uploads ────────────────────────────────────────────────────────────

UPLOAD_MAX_BYTES = 10 * 1024 * 1024
UPLOAD_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".webp"]

# ── Data location ──────────────────────────────────────────────────────
# Empty means "<project root>/data".
DATA_DIR = os.getenv("DRESSLAB_DATA_DIR", "")
