"""Rasterize a Scene with Pillow (PNG previews and downloads).

Paths are flattened to polygons, drawn at `supersample`x resolution and
downsampled with LANCZOS for smooth edges. Gradients follow the same
bounding-box vector as the SVG output.
"""
from __future__ import annotations

from functools import lru_cache
from io import BytesIO
from typing import Callable, List, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from rendering.colors import parse_hex
from rendering.geometry import DressCustomizations
from rendering.renderer import render_dress
from rendering.scene import (
    Circle,
    DropShadow,
    Ellipse,
    FilledPath,
    GradientStop,
    Line,
    LinearGradient,
    Primitive,
    Scene,
    StrokedPath,
    Text,
)

Transform = Callable[[float, float], Tuple[float, float]]

# Ramp rows [0, 256) are t < 0, [256, 512) cover t in [0, 1], the rest t > 1.
_RAMP_OFFSET = 256
_RAMP = Image.new("L", (1, 768))
_RAMP.putdata([max(0, min(255, r - _RAMP_OFFSET)) for r in range(768)])


@lru_cache(maxsize=16)
def _try_font(size: int):
    for cand in ("DejaVuSans.ttf", "arial.ttf"):
        try:
            return ImageFont.truetype(cand, size)
        except OSError:
            pass
    return ImageFont.load_default()


def _rgba(color: str, opacity: float = 1.0) -> Tuple[int, int, int, int]:
    return parse_hex(color) + (int(round(255 * max(0.0, min(1.0, opacity)))),)


def _fade(img: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1:
        return img
    alpha = img.getchannel("A").point(lambda a: int(a * max(0.0, opacity)))
    img.putalpha(alpha)
    return img


def _stop_luts(stops: Sequence[GradientStop]) -> List[List[int]]:
    """Per-channel 256-entry lookup tables (r, g, b, a) for t in [0, 1]."""
    ordered = sorted(stops, key=lambda s: s.offset)
    luts: List[List[int]] = [[], [], [], []]
    for i in range(256):
        t = i / 255
        lo = ordered[0]
        hi = ordered[-1]
        for a, b in zip(ordered, ordered[1:]):
            if a.offset <= t <= b.offset:
                lo, hi = a, b
                break
        if t <= ordered[0].offset:
            lo = hi = ordered[0]
        elif t >= ordered[-1].offset:
            lo = hi = ordered[-1]
        span = hi.offset - lo.offset
        k = (t - lo.offset) / span if span > 0 else 0.0
        c0, c1 = _rgba(lo.color, lo.opacity), _rgba(hi.color, hi.opacity)
        for ch in range(4):
            luts[ch].append(int(round(c0[ch] + (c1[ch] - c0[ch]) * k)))
    return luts


def _gradient_image(gradient: LinearGradient, bbox: Tuple[float, float, float, float], size) -> Image.Image:
    bx0, by0, bx1, by1 = bbox
    bw = max(bx1 - bx0, 1e-6)
    bh = max(by1 - by0, 1e-6)
    gdx = gradient.x2 - gradient.x1
    gdy = gradient.y2 - gradient.y1
    l2 = gdx * gdx + gdy * gdy or 1.0
    # t(x, y) = A*x + B*y + C over canvas pixels
    a = gdx / (bw * l2)
    b = gdy / (bh * l2)
    c = ((-bx0 / bw) - gradient.x1) * gdx / l2 + ((-by0 / bh) - gradient.y1) * gdy / l2
    tmap = _RAMP.transform(
        size,
        Image.Transform.AFFINE,
        (0, 0, 0.5, 255 * a, 255 * b, _RAMP_OFFSET + 255 * c),
        resample=Image.NEAREST,
    )
    bands = [tmap.point(lut) for lut in _stop_luts(gradient.stops)]
    return Image.merge("RGBA", bands)


def _polygons(prim, tf: Transform) -> List[Tuple[List[Tuple[float, float]], bool]]:
    return [([tf(x, y) for x, y in pts], closed) for pts, closed in prim.path.subpaths()]


def _bbox(polys) -> Tuple[float, float, float, float]:
    xs = [x for poly in polys for x, _ in poly]
    ys = [y for poly in polys for _, y in poly]
    return min(xs), min(ys), max(xs), max(ys)


def _shadow(mask: Image.Image, shadow: DropShadow, scale: float) -> Image.Image:
    offset = Image.new("L", mask.size, 0)
    offset.paste(mask, (int(round(shadow.dx * scale)), int(round(shadow.dy * scale))))
    blurred = offset.filter(ImageFilter.GaussianBlur(max(0.1, shadow.std_deviation * scale)))
    blurred = blurred.point(lambda a: int(a * shadow.opacity))
    layer = Image.new("RGBA", mask.size, (0, 0, 0, 0))
    layer.putalpha(blurred)
    return layer


def _draw_filled(canvas: Image.Image, prim: FilledPath, tf: Transform, scale: float) -> Image.Image:
    outlines = [(p, closed) for p, closed in _polygons(prim, tf) if len(p) > 2]
    if not outlines:
        return canvas
    polys = [p for p, _ in outlines]
    mask = Image.new("L", canvas.size, 0)
    dm = ImageDraw.Draw(mask)
    for poly in polys:
        dm.polygon(poly, fill=255)

    piece = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    if prim.shadow is not None:
        piece = Image.alpha_composite(piece, _shadow(mask, prim.shadow, scale))

    if isinstance(prim.fill, LinearGradient):
        fill_img = _gradient_image(prim.fill, _bbox(polys), canvas.size)
    else:
        fill_img = Image.new("RGBA", canvas.size, _rgba(prim.fill))
    body = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    body.paste(fill_img, (0, 0), mask)
    piece = Image.alpha_composite(piece, body)

    if prim.stroke:
        ds = ImageDraw.Draw(piece)
        width = max(1, int(round(prim.stroke_width * scale)))
        # open subpaths are filled as if closed but stroked without the closing edge
        for poly, closed in outlines:
            ds.line(poly + [poly[0]] if closed else poly, fill=_rgba(prim.stroke), width=width, joint="curve")
    return Image.alpha_composite(canvas, _fade(piece, prim.opacity))


def _draw_stroked(canvas: Image.Image, prim: StrokedPath, tf: Transform, scale: float) -> Image.Image:
    piece = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ds = ImageDraw.Draw(piece)
    width = max(1, int(round(prim.stroke_width * scale)))
    for pts, closed in prim.path.subpaths():
        poly = [tf(x, y) for x, y in pts]
        if closed:
            poly.append(poly[0])
        ds.line(poly, fill=_rgba(prim.stroke), width=width, joint="curve")
    return Image.alpha_composite(canvas, _fade(piece, prim.opacity))


def _draw_simple(canvas: Image.Image, prim: Primitive, tf: Transform, scale: float) -> Image.Image:
    d = ImageDraw.Draw(canvas)
    if isinstance(prim, Line):
        p0, p1 = tf(prim.x1, prim.y1), tf(prim.x2, prim.y2)
        width = max(1, int(round(prim.stroke_width * scale)))
        d.line([p0, p1], fill=_rgba(prim.stroke), width=width)
        if prim.linecap == "round":
            r = width / 2
            for x, y in (p0, p1):
                d.ellipse((x - r, y - r, x + r, y + r), fill=_rgba(prim.stroke))
    elif isinstance(prim, Ellipse):
        x, y = tf(prim.cx, prim.cy)
        rx, ry = prim.rx * scale, prim.ry * scale
        d.ellipse((x - rx, y - ry, x + rx, y + ry), fill=_rgba(prim.fill))
    elif isinstance(prim, Circle):
        x, y = tf(prim.cx, prim.cy)
        r = prim.r * scale
        d.ellipse((x - r, y - r, x + r, y + r), fill=_rgba(prim.fill))
    elif isinstance(prim, Text):
        font = _try_font(max(1, int(round(prim.font_size * scale))))
        x, y = tf(prim.x, prim.y)
        w = d.textlength(prim.text, font=font)
        if prim.anchor == "middle":
            x -= w / 2
        elif prim.anchor == "end":
            x -= w
        # y is the baseline
        d.text((x, y - prim.font_size * scale * 0.8), prim.text, fill=_rgba(prim.fill), font=font)
    else:
        raise TypeError(f"Unsupported primitive: {type(prim).__name__}")
    return canvas


def scene_to_image(scene: Scene, supersample: int = 2) -> Image.Image:
    """Draw the scene into an RGBA image of the scene's pixel size."""
    ss = max(1, int(supersample))
    out_w = max(1, int(round(scene.width)))
    out_h = max(1, int(round(scene.height)))
    size = (out_w * ss, out_h * ss)
    scale = scene.scale * ss
    vx, vy, vw, vh = scene.view_box
    off_x = (size[0] - vw * scale) / 2 - vx * scale
    off_y = (size[1] - vh * scale) / 2 - vy * scale

    def tf(x: float, y: float) -> Tuple[float, float]:
        return off_x + x * scale, off_y + y * scale

    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    for layer in scene.layers:
        if not layer.primitives:
            continue
        img = Image.new("RGBA", size, (0, 0, 0, 0))
        for prim in layer.primitives:
            if isinstance(prim, FilledPath):
                img = _draw_filled(img, prim, tf, scale)
            elif isinstance(prim, StrokedPath):
                img = _draw_stroked(img, prim, tf, scale)
            else:
                img = _draw_simple(img, prim, tf, scale)
        canvas = Image.alpha_composite(canvas, _fade(img, layer.opacity))

    if ss == 1:
        return canvas
    return canvas.resize((out_w, out_h), Image.LANCZOS)


def scene_to_png_bytes(scene: Scene, supersample: int = 2) -> bytes:
    buf = BytesIO()
    scene_to_image(scene, supersample).save(buf, format="PNG")
    return buf.getvalue()


@lru_cache(maxsize=32)
def export_png(
    customizations: DressCustomizations,
    base_style: str,
    view: str = "front",
    width: int = 800,
    height: int = 1200,
) -> bytes:
    """PNG download for one design and view, memoized per argument set."""
    return scene_to_png_bytes(render_dress(customizations, base_style, view, width, height))
