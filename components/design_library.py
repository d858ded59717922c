"""Dress design library: preset loading, design records, and preview selection.

Supports two design sources:
- data/presets.json: bundled preset designs (read-only templates)
- designs created in the studio during a session (`new_design`)

A design's customizations are stored as a JSON string exactly as the API
layer persists them; `parse_customizations` turns that blob into a
`DressCustomizations`, falling back to the default set when it is malformed.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import (
    BACK_STYLES_SET,
    BASE_STYLES_SET,
    DATA_DIR,
    DEFAULT_BASE_STYLE,
    FLOOR_LENGTH_LABEL,
    LENGTH_LABELS,
    NECKLINES_SET,
    STRAP_TYPES_SET,
)
from rendering.geometry import DressCustomizations, parse_customizations
from rendering.renderer import render_dress
from rendering.scene import Scene

logger = logging.getLogger(__name__)

_HEX_COLOR_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")


class DesignError(ValueError):
    """Raised when a design operation is not allowed (e.g. editing a preset)."""


@dataclass(frozen=True)
class DressDesign:
    id: int
    name: str
    base_style: str = DEFAULT_BASE_STYLE
    customizations: str = "{}"
    image_url: Optional[str] = None
    is_preset: bool = False
    created_at: str = ""

    @property
    def parsed(self) -> DressCustomizations:
        return parse_customizations(self.customizations)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def data_dir(base_dir: Path) -> Path:
    return Path(DATA_DIR) if DATA_DIR else base_dir / "data"


def length_label(length: float) -> str:
    for upper, label in LENGTH_LABELS:
        if length <= upper:
            return label
    return FLOOR_LENGTH_LABEL


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _validate_design(design: DressDesign) -> List[str]:
    """Validate a design against the canonical option sets. Returns list of warnings."""
    warnings = []
    name = design.name or f"design[{design.id}]"

    if not design.name:
        warnings.append(f"{name}: missing required field 'name'")
    if design.base_style not in BASE_STYLES_SET:
        warnings.append(f"{name}: unknown base style '{design.base_style}'")

    try:
        raw = json.loads(design.customizations)
    except (TypeError, ValueError):
        warnings.append(f"{name}: customizations are not valid JSON")
        return warnings
    if not isinstance(raw, dict):
        warnings.append(f"{name}: customizations must be an object")
        return warnings

    if raw.get("strapType") not in STRAP_TYPES_SET:
        warnings.append(f"{name}: unknown strap type '{raw.get('strapType')}'")
    if raw.get("backStyle") not in BACK_STYLES_SET:
        warnings.append(f"{name}: unknown back style '{raw.get('backStyle')}'")
    if raw.get("neckline") not in NECKLINES_SET:
        warnings.append(f"{name}: unknown neckline '{raw.get('neckline')}'")
    if not isinstance(raw.get("color"), str) or not _HEX_COLOR_RE.match(raw["color"]):
        warnings.append(f"{name}: invalid color '{raw.get('color')}'")
    return warnings


def normalize_design(record: Dict, is_preset: bool = False) -> DressDesign:
    """Accept both the API's camelCase records and snake_case ones."""
    customizations = record.get("customizations", "{}")
    if isinstance(customizations, dict):
        customizations = json.dumps(customizations)
    elif not isinstance(customizations, str):
        customizations = "{}"

    return DressDesign(
        id=int(record.get("id", 0) or 0),
        name=str(record.get("name", "")),
        base_style=record.get("baseStyle", record.get("base_style")) or DEFAULT_BASE_STYLE,
        customizations=customizations,
        image_url=record.get("imageUrl", record.get("image_url")) or None,
        is_preset=bool(record.get("isPreset", record.get("is_preset", is_preset))),
        created_at=str(record.get("createdAt", record.get("created_at", "")) or ""),
    )


def load_presets(base_dir: Path) -> List[DressDesign]:
    presets_path = data_dir(base_dir) / "presets.json"
    if not presets_path.exists():
        logger.warning("No preset file at %s", presets_path)
        return []

    records = json.loads(presets_path.read_text(encoding="utf-8"))
    presets = [normalize_design(r, is_preset=True) for r in records]

    # Validate all presets and log warnings (non-blocking)
    all_warnings = []
    for design in presets:
        all_warnings.extend(_validate_design(design))
    if all_warnings:
        logger.warning("Preset validation found %d issues:", len(all_warnings))
        for w in all_warnings[:20]:  # cap log output
            logger.warning("  - %s", w)

    return sorted(presets, key=lambda d: d.name.lower())


def visible_designs(presets: List[DressDesign], own: List[DressDesign]) -> List[DressDesign]:
    """Presets first (by name), then the user's own designs newest first."""
    mine = sorted((d for d in own if not d.is_preset), key=lambda d: d.created_at, reverse=True)
    return sorted(presets, key=lambda d: d.name.lower()) + mine


def next_design_id(designs: List[DressDesign]) -> int:
    return max((d.id for d in designs), default=0) + 1


def new_design(
    design_id: int,
    name: str,
    base_style: str,
    customizations: DressCustomizations,
    image_url: Optional[str] = None,
) -> DressDesign:
    design = DressDesign(
        id=design_id,
        name=name.strip() or "Untitled design",
        base_style=base_style,
        customizations=json.dumps(customizations.to_dict()),
        image_url=image_url,
        is_preset=False,
        created_at=_now_iso(),
    )
    logger.info("Dress design %d created (%s)", design.id, design.base_style)
    return design


def _find_own(designs: List[DressDesign], design_id: int) -> int:
    for i, design in enumerate(designs):
        if design.id == design_id:
            if design.is_preset:
                raise DesignError("Presets cannot be changed")
            return i
    raise DesignError("Design not found")


def update_design(
    designs: List[DressDesign],
    design_id: int,
    name: Optional[str] = None,
    base_style: Optional[str] = None,
    customizations: Optional[DressCustomizations] = None,
    image_url: Optional[str] = None,
) -> List[DressDesign]:
    """Return a new list with only the provided fields changed."""
    idx = _find_own(designs, design_id)
    changes: Dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if base_style is not None:
        changes["base_style"] = base_style
    if customizations is not None:
        changes["customizations"] = json.dumps(customizations.to_dict())
    if image_url is not None:
        changes["image_url"] = image_url or None
    out = list(designs)
    out[idx] = replace(designs[idx], **changes)
    logger.info("Dress design %d updated", design_id)
    return out


def delete_design(designs: List[DressDesign], design_id: int) -> List[DressDesign]:
    idx = _find_own(designs, design_id)
    logger.info("Dress design %d deleted", design_id)
    return designs[:idx] + designs[idx + 1:]


def preview_scene(
    design: DressDesign,
    width: float = 160,
    height: float = 220,
    view: str = "front",
) -> Optional[Scene]:
    """Procedural preview, or None when the design carries its own image."""
    if design.image_url:
        return None
    return render_dress(design.parsed, design.base_style, view, width, height)
