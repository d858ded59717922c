"""Dress geometry: maps a customization set and base style to paths and primitives.

All coordinates live in the 400x600 reference canvas (see config.py). Each
silhouette, neckline, back style and strap type is one small function in a
dispatch table; unknown keys fall back to a default rule instead of raising.
The builder holds no state, so it is safe to call from any thread.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from config import (
    ACCENT_SHADE,
    BASE_HALF_WIDTH,
    BUST_Y,
    CENTER_X,
    DEFAULT_CUSTOMIZATIONS,
    HEM_BASE_Y,
    HEM_RANGE,
    LENGTH_MAX,
    LENGTH_MIN,
    SEAM_SHADE,
    SHOULDER_Y,
    WAIST_LEFT_X,
    WAIST_RIGHT_X,
    WAIST_Y,
)
from rendering.colors import adjust_color, normalize_hex
from rendering.scene import FilledPath, Line, Path, PathBuilder, Primitive, StrokedPath

logger = logging.getLogger(__name__)

MERMAID_MID_CONTROL = 0.85
EMPIRE_WAIST_OFFSET = 20


@dataclass(frozen=True)
class DressCustomizations:
    length: float = DEFAULT_CUSTOMIZATIONS["length"]
    strap_type: str = DEFAULT_CUSTOMIZATIONS["strapType"]
    back_style: str = DEFAULT_CUSTOMIZATIONS["backStyle"]
    neckline: str = DEFAULT_CUSTOMIZATIONS["neckline"]
    color: str = DEFAULT_CUSTOMIZATIONS["color"]

    @classmethod
    def from_dict(cls, data: Dict) -> "DressCustomizations":
        """Build from the stored JSON shape (camelCase keys); snake_case is accepted too."""
        return cls(
            length=data.get("length", DEFAULT_CUSTOMIZATIONS["length"]),
            strap_type=data.get("strapType", data.get("strap_type", DEFAULT_CUSTOMIZATIONS["strapType"])),
            back_style=data.get("backStyle", data.get("back_style", DEFAULT_CUSTOMIZATIONS["backStyle"])),
            neckline=data.get("neckline", DEFAULT_CUSTOMIZATIONS["neckline"]),
            color=data.get("color", DEFAULT_CUSTOMIZATIONS["color"]),
        )

    def to_dict(self) -> Dict:
        return {
            "length": self.length,
            "strapType": self.strap_type,
            "backStyle": self.back_style,
            "color": self.color,
            "neckline": self.neckline,
        }


_KEY_ALIASES = {"strap_type": "strapType", "back_style": "backStyle"}


def clamp_length(length: float) -> float:
    return max(LENGTH_MIN, min(LENGTH_MAX, length))


def parse_customizations(raw: Any) -> DressCustomizations:
    """Decode a stored customizations blob (JSON text or dict).

    Malformed or missing data yields the default customization set; missing
    keys are filled from the defaults and length is clamped to the slider range.
    Never raises.
    """
    data = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Malformed customizations JSON, using defaults: %.80r", raw)
            return DressCustomizations()
    if not isinstance(data, dict):
        if raw is not None:
            logger.warning("Customizations must be a JSON object, got %s; using defaults", type(data).__name__)
        return DressCustomizations()

    merged = dict(DEFAULT_CUSTOMIZATIONS)
    merged.update({_KEY_ALIASES.get(k, k): v for k, v in data.items() if v is not None})
    try:
        length = float(merged["length"])
    except (TypeError, ValueError):
        logger.warning("Invalid dress length %r, using default", merged["length"])
        length = float(DEFAULT_CUSTOMIZATIONS["length"])
    if length != length:  # NaN
        length = float(DEFAULT_CUSTOMIZATIONS["length"])
    merged["length"] = clamp_length(length)

    for key in ("strapType", "backStyle", "neckline", "color"):
        if not isinstance(merged.get(key), str):
            merged[key] = DEFAULT_CUSTOMIZATIONS[key]
    return DressCustomizations.from_dict(merged)


@dataclass(frozen=True)
class SkirtWidth:
    left_hem: float
    right_hem: float
    mid_control: Optional[float] = None


@dataclass(frozen=True)
class GeometryResult:
    view: str
    hem_y: float
    skirt: SkirtWidth
    neckline: Path
    body: Path
    straps: Tuple[Primitive, ...]
    back_details: Tuple[Line, ...]
    seam: StrokedPath
    hem: StrokedPath
    tight_hip_y: Optional[float] = None
    empire_waist_y: Optional[float] = None


def hem_y_for_length(length: float) -> float:
    """length=30 -> 294 (short), length=100 -> 560 (floor)."""
    return HEM_BASE_Y + (length / 100) * HEM_RANGE


# ── Skirt width per base style ─────────────────────────────────────────

def _flared(length: float, factor: float) -> SkirtWidth:
    spread = BASE_HALF_WIDTH + length * factor
    return SkirtWidth(CENTER_X - spread, CENTER_X + spread)


def _mermaid_skirt(length: float) -> SkirtWidth:
    flare = 40 if length > 80 else 20
    spread = BASE_HALF_WIDTH + flare
    return SkirtWidth(CENTER_X - spread, CENTER_X + spread, MERMAID_MID_CONTROL)


def _sheath_skirt(length: float) -> SkirtWidth:
    spread = BASE_HALF_WIDTH + 10
    return SkirtWidth(CENTER_X - spread, CENTER_X + spread)


SKIRT_RULES: Dict[str, Callable[[float], SkirtWidth]] = {
    "a-line": lambda length: _flared(length, 0.6),
    "mermaid": _mermaid_skirt,
    "empire": lambda length: _flared(length, 0.7),
    "fit-flare": lambda length: _flared(length, 0.8),
    "sheath": _sheath_skirt,
}


def skirt_width(base_style: str, length: float) -> SkirtWidth:
    rule = SKIRT_RULES.get(base_style)
    if rule is None:
        return _flared(length, 0.5)
    return rule(length)


# ── Necklines (front view) ─────────────────────────────────────────────

def _sweetheart() -> Path:
    return (
        PathBuilder()
        .move_to(155, BUST_Y)
        .quad_to(165, BUST_Y - 15, 178, BUST_Y - 10)
        .quad_to(190, BUST_Y + 5, 200, BUST_Y - 5)
        .quad_to(210, BUST_Y + 5, 222, BUST_Y - 10)
        .quad_to(235, BUST_Y - 15, 245, BUST_Y)
        .build()
    )


def _v_neck() -> Path:
    return (
        PathBuilder()
        .move_to(155, BUST_Y - 10)
        .line_to(200, BUST_Y + 25)
        .line_to(245, BUST_Y - 10)
        .build()
    )


def _scoop() -> Path:
    return PathBuilder().move_to(155, BUST_Y - 10).quad_to(200, BUST_Y + 20, 245, BUST_Y - 10).build()


def _halter_neck() -> Path:
    return PathBuilder().move_to(165, BUST_Y).quad_to(200, BUST_Y + 10, 235, BUST_Y).build()


def _off_shoulder_neck() -> Path:
    return (
        PathBuilder()
        .move_to(140, BUST_Y + 10)
        .quad_to(170, BUST_Y - 5, 200, BUST_Y + 5)
        .quad_to(230, BUST_Y - 5, 260, BUST_Y + 10)
        .build()
    )


def _square() -> Path:
    return (
        PathBuilder()
        .move_to(155, BUST_Y - 10)
        .line_to(155, BUST_Y + 10)
        .line_to(245, BUST_Y + 10)
        .line_to(245, BUST_Y - 10)
        .build()
    )


def _default_neck() -> Path:
    return PathBuilder().move_to(155, BUST_Y).quad_to(200, BUST_Y + 15, 245, BUST_Y).build()


NECKLINE_RULES: Dict[str, Callable[[], Path]] = {
    "sweetheart": _sweetheart,
    "v-neck": _v_neck,
    "scoop": _scoop,
    "halter": _halter_neck,
    "off-shoulder": _off_shoulder_neck,
    "square": _square,
}


# ── Back necklines (back view) ─────────────────────────────────────────

def _open_back() -> Path:
    return (
        PathBuilder()
        .move_to(155, BUST_Y)
        .quad_to(175, BUST_Y + 30, 200, BUST_Y + 40)
        .quad_to(225, BUST_Y + 30, 245, BUST_Y)
        .build()
    )


def _low_cut_back() -> Path:
    return (
        PathBuilder()
        .move_to(155, BUST_Y)
        .quad_to(175, WAIST_Y + 10, 200, WAIST_Y + 20)
        .quad_to(225, WAIST_Y + 10, 245, BUST_Y)
        .build()
    )


def _cross_back() -> Path:
    return PathBuilder().move_to(155, BUST_Y).line_to(200, BUST_Y + 20).line_to(245, BUST_Y).build()


def _closed_back() -> Path:
    return PathBuilder().move_to(155, SHOULDER_Y + 20).quad_to(200, SHOULDER_Y + 30, 245, SHOULDER_Y + 20).build()


BACK_RULES: Dict[str, Callable[[], Path]] = {
    "open": _open_back,
    "low-cut": _low_cut_back,
    "cross": _cross_back,
    "closed": _closed_back,
}


def neckline_path(customizations: DressCustomizations, view: str = "front") -> Path:
    """Top edge of the bodice. The back view uses the back style instead of the neckline."""
    if view == "back":
        return BACK_RULES.get(customizations.back_style, _closed_back)()
    return NECKLINE_RULES.get(customizations.neckline, _default_neck)()


# ── Body outline ───────────────────────────────────────────────────────

def _mermaid_body(neck: Path, skirt: SkirtWidth, hem_y: float) -> Tuple[Path, float]:
    mid = skirt.mid_control if skirt.mid_control is not None else MERMAID_MID_CONTROL
    tight_hip_y = WAIST_Y + (hem_y - WAIST_Y) * mid
    outline = (
        PathBuilder()
        .line_to(WAIST_RIGHT_X, WAIST_Y)
        .quad_to(WAIST_RIGHT_X + 5, tight_hip_y, WAIST_RIGHT_X - 5, tight_hip_y)
        .quad_to(skirt.right_hem + 10, hem_y - 20, skirt.right_hem, hem_y)
        .line_to(skirt.left_hem, hem_y)
        .quad_to(skirt.left_hem - 10, hem_y - 20, WAIST_LEFT_X + 5, tight_hip_y)
        .quad_to(WAIST_LEFT_X - 5, tight_hip_y, WAIST_LEFT_X, WAIST_Y)
        .close()
        .build()
    )
    return neck.extend(outline), tight_hip_y


def _empire_body(neck: Path, skirt: SkirtWidth, hem_y: float) -> Tuple[Path, float]:
    empire_waist_y = BUST_Y + EMPIRE_WAIST_OFFSET
    mid_y = (empire_waist_y + hem_y) / 2
    outline = (
        PathBuilder()
        .line_to(WAIST_RIGHT_X - 10, empire_waist_y)
        .quad_to((WAIST_RIGHT_X + skirt.right_hem) / 2, mid_y, skirt.right_hem, hem_y)
        .line_to(skirt.left_hem, hem_y)
        .quad_to((WAIST_LEFT_X + skirt.left_hem) / 2, mid_y, WAIST_LEFT_X + 10, empire_waist_y)
        .close()
        .build()
    )
    return neck.extend(outline), empire_waist_y


def _tapered_body(neck: Path, skirt: SkirtWidth, hem_y: float) -> Path:
    mid_y = (WAIST_Y + hem_y) / 2
    outline = (
        PathBuilder()
        .line_to(WAIST_RIGHT_X, WAIST_Y)
        .quad_to((WAIST_RIGHT_X + skirt.right_hem) / 2, mid_y, skirt.right_hem, hem_y)
        .line_to(skirt.left_hem, hem_y)
        .quad_to((WAIST_LEFT_X + skirt.left_hem) / 2, mid_y, WAIST_LEFT_X, WAIST_Y)
        .close()
        .build()
    )
    return neck.extend(outline)


# ── Straps ─────────────────────────────────────────────────────────────

def _no_straps(color: str, accent: str) -> Tuple[Primitive, ...]:
    return ()


def _spaghetti_straps(color: str, accent: str) -> Tuple[Primitive, ...]:
    return (
        Line(170, BUST_Y - 8, 175, SHOULDER_Y - 20, accent, 2),
        Line(230, BUST_Y - 8, 225, SHOULDER_Y - 20, accent, 2),
    )


def _thick_straps(color: str, accent: str) -> Tuple[Primitive, ...]:
    left = (
        PathBuilder()
        .move_to(160, BUST_Y - 5)
        .quad_to(160, SHOULDER_Y - 10, 170, SHOULDER_Y - 20)
        .line_to(185, SHOULDER_Y - 20)
        .quad_to(175, SHOULDER_Y - 10, 175, BUST_Y - 5)
        .close()
        .build()
    )
    right = (
        PathBuilder()
        .move_to(240, BUST_Y - 5)
        .quad_to(240, SHOULDER_Y - 10, 230, SHOULDER_Y - 20)
        .line_to(215, SHOULDER_Y - 20)
        .quad_to(225, SHOULDER_Y - 10, 225, BUST_Y - 5)
        .close()
        .build()
    )
    return (
        FilledPath(left, fill=color, stroke=accent, stroke_width=1),
        FilledPath(right, fill=color, stroke=accent, stroke_width=1),
    )


def _halter_strap(color: str, accent: str) -> Tuple[Primitive, ...]:
    band = (
        PathBuilder()
        .move_to(170, BUST_Y)
        .quad_to(185, BUST_Y - 20, 200, SHOULDER_Y - 30)
        .quad_to(215, BUST_Y - 20, 230, BUST_Y)
        .build()
    )
    return (StrokedPath(band, accent, 4),)


def _off_shoulder_flourishes(color: str, accent: str) -> Tuple[Primitive, ...]:
    left = (
        PathBuilder()
        .move_to(140, BUST_Y + 10)
        .quad_to(130, BUST_Y + 5, 125, BUST_Y + 15)
        .quad_to(135, BUST_Y + 20, 155, BUST_Y + 5)
        .build()
    )
    right = (
        PathBuilder()
        .move_to(260, BUST_Y + 10)
        .quad_to(270, BUST_Y + 5, 275, BUST_Y + 15)
        .quad_to(265, BUST_Y + 20, 245, BUST_Y + 5)
        .build()
    )
    return (
        FilledPath(left, fill=color, stroke=accent, stroke_width=1),
        FilledPath(right, fill=color, stroke=accent, stroke_width=1),
    )


STRAP_RULES: Dict[str, Callable[[str, str], Tuple[Primitive, ...]]] = {
    "strapless": _no_straps,
    "spaghetti": _spaghetti_straps,
    "thick": _thick_straps,
    "halter": _halter_strap,
    "off-shoulder": _off_shoulder_flourishes,
}


def _cross_back_straps(accent: str) -> Tuple[Line, ...]:
    return (
        Line(165, SHOULDER_Y - 15, 235, BUST_Y + 20, accent, 3),
        Line(235, SHOULDER_Y - 15, 165, BUST_Y + 20, accent, 3),
    )


# ── Accents ────────────────────────────────────────────────────────────

def _seam_accent(base_style: str, color: str) -> StrokedPath:
    stroke = adjust_color(color, SEAM_SHADE)
    if base_style == "empire":
        y = BUST_Y + EMPIRE_WAIST_OFFSET
        path = PathBuilder().move_to(160, y).quad_to(CENTER_X, y + 8, 240, y).build()
        return StrokedPath(path, stroke, 1.5, opacity=0.6)
    path = PathBuilder().move_to(158, WAIST_Y).quad_to(CENTER_X, WAIST_Y + 8, 242, WAIST_Y).build()
    return StrokedPath(path, stroke, 1, opacity=0.6)


def _hem_accent(skirt: SkirtWidth, hem_y: float, color: str) -> StrokedPath:
    path = PathBuilder().move_to(skirt.left_hem, hem_y).quad_to(CENTER_X, hem_y + 5, skirt.right_hem, hem_y).build()
    return StrokedPath(path, adjust_color(color, ACCENT_SHADE), 1, opacity=0.4)


def build_geometry(
    customizations: DressCustomizations,
    base_style: str,
    view: str = "front",
) -> GeometryResult:
    """Compute every path and primitive for one render of one view."""
    view = "back" if view == "back" else "front"
    color = normalize_hex(customizations.color)
    accent = adjust_color(color, ACCENT_SHADE)

    hem_y = hem_y_for_length(customizations.length)
    skirt = skirt_width(base_style, customizations.length)
    neck = neckline_path(customizations, view)

    tight_hip_y = None
    empire_waist_y = None
    if base_style == "mermaid":
        body, tight_hip_y = _mermaid_body(neck, skirt, hem_y)
    elif base_style == "empire":
        body, empire_waist_y = _empire_body(neck, skirt, hem_y)
    else:
        body = _tapered_body(neck, skirt, hem_y)

    straps = STRAP_RULES.get(customizations.strap_type, _no_straps)(color, accent)

    back_details: Tuple[Line, ...] = ()
    if view == "back" and customizations.back_style == "cross":
        back_details = _cross_back_straps(accent)

    return GeometryResult(
        view=view,
        hem_y=hem_y,
        skirt=skirt,
        neckline=neck,
        body=body,
        straps=straps,
        back_details=back_details,
        seam=_seam_accent(base_style, color),
        hem=_hem_accent(skirt, hem_y, color),
        tight_hip_y=tight_hip_y,
        empire_waist_y=empire_waist_y,
    )
