"""Scene description: typed drawing primitives a rendering backend can consume.

Geometry is expressed in the 400x600 reference canvas. A `Scene` carries the
target pixel size; backends scale the reference space uniformly into it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from config import CANVAS_HEIGHT, CANVAS_WIDTH

Point = Tuple[float, float]


def fmt_number(value: float) -> str:
    """Compact number formatting for path data (465.0 -> '465')."""
    rounded = round(float(value), 3)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.3f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class Path:
    """Immutable path made of M / L / Q / Z commands."""

    commands: Tuple[Tuple[str, Tuple[float, ...]], ...] = ()

    def to_d(self) -> str:
        parts = []
        for op, args in self.commands:
            if op == "Z":
                parts.append("Z")
            elif op == "Q":
                cx, cy, x, y = args
                parts.append(f"Q {fmt_number(cx)},{fmt_number(cy)} {fmt_number(x)},{fmt_number(y)}")
            else:
                x, y = args
                parts.append(f"{op} {fmt_number(x)},{fmt_number(y)}")
        return " ".join(parts)

    def points(self) -> List[Point]:
        """Every coordinate in the path, control points included."""
        out: List[Point] = []
        for op, args in self.commands:
            for i in range(0, len(args), 2):
                out.append((args[i], args[i + 1]))
        return out

    def ops(self) -> List[str]:
        return [op for op, _ in self.commands]

    def extend(self, other: "Path") -> "Path":
        return Path(self.commands + other.commands)

    def subpaths(self, steps: int = 16) -> List[Tuple[List[Point], bool]]:
        """Flatten to polylines. Returns (points, closed) per subpath."""
        result: List[Tuple[List[Point], bool]] = []
        current: List[Point] = []
        start: Optional[Point] = None
        for op, args in self.commands:
            if op == "M":
                if len(current) > 1:
                    result.append((current, False))
                start = (args[0], args[1])
                current = [start]
            elif op == "L":
                current.append((args[0], args[1]))
            elif op == "Q":
                if not current:
                    continue
                x0, y0 = current[-1]
                cx, cy, x1, y1 = args
                for i in range(1, steps + 1):
                    t = i / steps
                    mt = 1 - t
                    current.append((
                        mt * mt * x0 + 2 * mt * t * cx + t * t * x1,
                        mt * mt * y0 + 2 * mt * t * cy + t * t * y1,
                    ))
            elif op == "Z":
                if current:
                    result.append((current, True))
                current = [start] if start is not None else []
        if len(current) > 1:
            result.append((current, False))
        return result


class PathBuilder:
    def __init__(self) -> None:
        self._commands: List[Tuple[str, Tuple[float, ...]]] = []

    def move_to(self, x: float, y: float) -> "PathBuilder":
        self._commands.append(("M", (x, y)))
        return self

    def line_to(self, x: float, y: float) -> "PathBuilder":
        self._commands.append(("L", (x, y)))
        return self

    def quad_to(self, cx: float, cy: float, x: float, y: float) -> "PathBuilder":
        self._commands.append(("Q", (cx, cy, x, y)))
        return self

    def close(self) -> "PathBuilder":
        self._commands.append(("Z", ()))
        return self

    def build(self) -> Path:
        return Path(tuple(self._commands))


# ── Paint ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GradientStop:
    offset: float
    color: str
    opacity: float = 1.0


@dataclass(frozen=True)
class LinearGradient:
    """Gradient vector in fractions of the filled shape's bounding box."""

    id: str
    x1: float
    y1: float
    x2: float
    y2: float
    stops: Tuple[GradientStop, ...]


@dataclass(frozen=True)
class DropShadow:
    dx: float = 2
    dy: float = 4
    std_deviation: float = 4
    opacity: float = 0.3


Paint = Union[str, LinearGradient]


# ── Primitives ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FilledPath:
    path: Path
    fill: Paint
    stroke: Optional[str] = None
    stroke_width: float = 0
    opacity: float = 1.0
    shadow: Optional[DropShadow] = None


@dataclass(frozen=True)
class StrokedPath:
    path: Path
    stroke: str
    stroke_width: float = 1
    opacity: float = 1.0


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float = 1
    linecap: Optional[str] = None


@dataclass(frozen=True)
class Ellipse:
    cx: float
    cy: float
    rx: float
    ry: float
    fill: str


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: str


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    fill: str
    font_size: float = 12
    anchor: str = "middle"
    font_family: str = "sans-serif"


Primitive = Union[FilledPath, StrokedPath, Line, Ellipse, Circle, Text]


@dataclass(frozen=True)
class Layer:
    name: str
    primitives: Tuple[Primitive, ...] = ()
    opacity: float = 1.0


@dataclass(frozen=True)
class Scene:
    width: float
    height: float
    layers: Tuple[Layer, ...] = ()
    view_box: Tuple[float, float, float, float] = field(
        default=(0, 0, CANVAS_WIDTH, CANVAS_HEIGHT)
    )

    @property
    def scale(self) -> float:
        return min(self.width / self.view_box[2], self.height / self.view_box[3])

    def layer(self, name: str) -> Layer:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(name)

    def layer_names(self) -> List[str]:
        return [layer.name for layer in self.layers]

    def primitives(self) -> Iterator[Primitive]:
        for layer in self.layers:
            yield from layer.primitives

    def gradients(self) -> List[LinearGradient]:
        seen = {}
        for prim in self.primitives():
            fill = getattr(prim, "fill", None)
            if isinstance(fill, LinearGradient) and fill.id not in seen:
                seen[fill.id] = fill
        return list(seen.values())
