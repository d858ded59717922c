"""Serialize a Scene to a standalone SVG document."""
from __future__ import annotations

from typing import Dict, List
from xml.sax.saxutils import escape, quoteattr

from rendering.scene import (
    Circle,
    DropShadow,
    Ellipse,
    FilledPath,
    Line,
    LinearGradient,
    Primitive,
    Scene,
    StrokedPath,
    Text,
    fmt_number,
)

SVG_NS = "http://www.w3.org/2000/svg"

_TEXT_ANCHORS = {"start", "middle", "end"}


def _attrs(**values) -> str:
    parts = []
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, float) or isinstance(value, int):
            value = fmt_number(value)
        parts.append(f"{key.rstrip('_').replace('_', '-')}={quoteattr(str(value))}")
    return " ".join(parts)


def _pct(value: float) -> str:
    return f"{fmt_number(value * 100)}%"


def _gradient_def(gradient: LinearGradient, prefix: str) -> str:
    stops = "".join(
        f"<stop {_attrs(offset=_pct(s.offset), stop_color=s.color, stop_opacity=s.opacity if s.opacity != 1 else None)}/>"
        for s in gradient.stops
    )
    head = _attrs(
        id=prefix + gradient.id,
        x1=_pct(gradient.x1), y1=_pct(gradient.y1), x2=_pct(gradient.x2), y2=_pct(gradient.y2),
    )
    return f"<linearGradient {head}>{stops}</linearGradient>"


def _shadow_def(shadow: DropShadow, filter_id: str) -> str:
    effect = _attrs(dx=shadow.dx, dy=shadow.dy, stdDeviation=shadow.std_deviation, flood_opacity=shadow.opacity)
    return f"<filter {_attrs(id=filter_id)}><feDropShadow {effect}/></filter>"


def _paint(fill, prefix: str) -> str:
    if isinstance(fill, LinearGradient):
        return f"url(#{prefix}{fill.id})"
    return fill


def _element(prim: Primitive, prefix: str, shadow_ids: Dict[DropShadow, str]) -> str:
    if isinstance(prim, FilledPath):
        filt = f"url(#{shadow_ids[prim.shadow]})" if prim.shadow is not None else None
        return "<path {}/>".format(_attrs(
            d=prim.path.to_d(),
            fill=_paint(prim.fill, prefix),
            stroke=prim.stroke,
            stroke_width=prim.stroke_width if prim.stroke else None,
            opacity=prim.opacity if prim.opacity != 1 else None,
            filter=filt,
        ))
    if isinstance(prim, StrokedPath):
        return "<path {}/>".format(_attrs(
            d=prim.path.to_d(),
            fill="none",
            stroke=prim.stroke,
            stroke_width=prim.stroke_width,
            opacity=prim.opacity if prim.opacity != 1 else None,
        ))
    if isinstance(prim, Line):
        return "<line {}/>".format(_attrs(
            x1=prim.x1, y1=prim.y1, x2=prim.x2, y2=prim.y2,
            stroke=prim.stroke, stroke_width=prim.stroke_width, stroke_linecap=prim.linecap,
        ))
    if isinstance(prim, Ellipse):
        return "<ellipse {}/>".format(_attrs(cx=prim.cx, cy=prim.cy, rx=prim.rx, ry=prim.ry, fill=prim.fill))
    if isinstance(prim, Circle):
        return "<circle {}/>".format(_attrs(cx=prim.cx, cy=prim.cy, r=prim.r, fill=prim.fill))
    if isinstance(prim, Text):
        anchor = prim.anchor if prim.anchor in _TEXT_ANCHORS else "middle"
        head = _attrs(
            x=prim.x, y=prim.y, text_anchor=anchor, fill=prim.fill,
            font_size=prim.font_size, font_family=prim.font_family,
        )
        return f"<text {head}>{escape(prim.text)}</text>"
    raise TypeError(f"Unsupported primitive: {type(prim).__name__}")


def scene_to_svg(scene: Scene, id_prefix: str = "") -> str:
    """Render the scene as SVG markup.

    `id_prefix` keeps gradient/filter ids unique when several documents are
    inlined into one HTML page.
    """
    shadow_ids: Dict[DropShadow, str] = {}
    for prim in scene.primitives():
        shadow = getattr(prim, "shadow", None)
        if shadow is not None and shadow not in shadow_ids:
            suffix = str(len(shadow_ids)) if shadow_ids else ""
            shadow_ids[shadow] = f"{id_prefix}dressShadow{suffix}"

    defs: List[str] = [_gradient_def(g, id_prefix) for g in scene.gradients()]
    defs.extend(_shadow_def(shadow, fid) for shadow, fid in shadow_ids.items())

    vx, vy, vw, vh = scene.view_box
    head = _attrs(
        xmlns=SVG_NS,
        viewBox=f"{fmt_number(vx)} {fmt_number(vy)} {fmt_number(vw)} {fmt_number(vh)}",
        width=scene.width,
        height=scene.height,
    )
    out = [f"<svg {head}>"]
    if defs:
        out.append("<defs>" + "".join(defs) + "</defs>")
    for layer in scene.layers:
        if not layer.primitives:
            continue
        group = _attrs(class_=f"layer-{layer.name}", opacity=layer.opacity if layer.opacity != 1 else None)
        body = "".join(_element(p, id_prefix, shadow_ids) for p in layer.primitives)
        out.append(f"<g {group}>{body}</g>")
    out.append("</svg>")
    return "\n".join(out)
