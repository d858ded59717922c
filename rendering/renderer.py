"""Dress renderer: composes geometry into an ordered, layered scene.

Layer order (bottom to top):
  mannequin, body, sheen, seam, hem, straps, back_details, label

The result depends only on (customizations, base_style, view, width, height).
"""
from __future__ import annotations

from typing import Any, Optional

from config import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    CENTER_X,
    GRADIENT_SHADOW_SHADE,
    HIGHLIGHT_SHADE,
    LABEL_COLOR,
    MANNEQUIN_COLOR,
    MANNEQUIN_OPACITY,
    OUTLINE_SHADE,
    SHOULDER_Y,
)
from rendering.colors import adjust_color, normalize_hex
from rendering.geometry import DressCustomizations, GeometryResult, build_geometry, parse_customizations
from rendering.scene import (
    Circle,
    DropShadow,
    Ellipse,
    FilledPath,
    GradientStop,
    Layer,
    LinearGradient,
    Line,
    Scene,
    Text,
)

LAYER_ORDER = ["mannequin", "body", "sheen", "seam", "hem", "straps", "back_details", "label"]

BODY_SHADOW = DropShadow(dx=2, dy=4, std_deviation=4, opacity=0.3)

SHEEN_GRADIENT = LinearGradient(
    id="fabricSheen",
    x1=0.3, y1=0.0, x2=0.7, y2=1.0,
    stops=(
        GradientStop(0.0, "#ffffff", 0.15),
        GradientStop(0.5, "#ffffff", 0.0),
        GradientStop(1.0, "#000000", 0.1),
    ),
)


def body_gradient(color: str) -> LinearGradient:
    """Diagonal light -> base -> dark fill for the dress body."""
    base = normalize_hex(color)
    return LinearGradient(
        id="dressGradient",
        x1=0.0, y1=0.0, x2=1.0, y2=1.0,
        stops=(
            GradientStop(0.0, adjust_color(base, HIGHLIGHT_SHADE)),
            GradientStop(0.5, base),
            GradientStop(1.0, adjust_color(base, GRADIENT_SHADOW_SHADE)),
        ),
    )


def _mannequin_layer() -> Layer:
    # Fixed hint of neck, shoulders and head; never affected by customizations.
    return Layer(
        "mannequin",
        (
            Ellipse(CENTER_X, SHOULDER_Y - 35, 12, 18, MANNEQUIN_COLOR),
            Line(160, SHOULDER_Y - 15, 240, SHOULDER_Y - 15, MANNEQUIN_COLOR, 8, linecap="round"),
            Circle(CENTER_X, SHOULDER_Y - 65, 22, MANNEQUIN_COLOR),
        ),
        opacity=MANNEQUIN_OPACITY,
    )


def compose_scene(geometry: GeometryResult, color: str, width: float, height: float) -> Scene:
    base = normalize_hex(color)
    label = "Back View" if geometry.view == "back" else "Front View"
    layers = (
        _mannequin_layer(),
        Layer(
            "body",
            (
                FilledPath(
                    geometry.body,
                    fill=body_gradient(base),
                    stroke=adjust_color(base, OUTLINE_SHADE),
                    stroke_width=1.5,
                    shadow=BODY_SHADOW,
                ),
            ),
        ),
        Layer("sheen", (FilledPath(geometry.body, fill=SHEEN_GRADIENT),)),
        Layer("seam", (geometry.seam,)),
        Layer("hem", (geometry.hem,)),
        Layer("straps", geometry.straps),
        Layer("back_details", geometry.back_details),
        Layer("label", (Text(CENTER_X, geometry.hem_y + 30, label, LABEL_COLOR, font_size=12),)),
    )
    return Scene(width=width, height=height, layers=layers)


def render_dress(
    customizations: DressCustomizations,
    base_style: str,
    view: str = "front",
    width: float = CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
) -> Scene:
    geometry = build_geometry(customizations, base_style, view)
    return compose_scene(geometry, customizations.color, width, height)


def render_stored_design(
    raw_customizations: Any,
    base_style: Optional[str],
    view: str = "front",
    width: float = CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
) -> Scene:
    """Render straight from a stored customizations blob, falling back to defaults."""
    return render_dress(parse_customizations(raw_customizations), base_style or "", view, width, height)
