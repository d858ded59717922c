"""Dress catalog and selections.

The catalog comes from data/dresses.json. The normalizer makes sure every
field the filters read exists with a sensible default, so filtering never
hits missing keys. Selections are the user's wishlist of catalog dresses.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from components.design_library import data_dir

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"name", "category"}
_TEXT_FIELDS = ("name", "description", "image_url", "category", "size", "color", "created_at")
_EDITABLE_FIELDS = {"name", "description", "image_url", "category", "size", "color", "price", "in_stock"}

# Form defaults for a new catalog entry
NEW_DRESS_DEFAULTS = {
    "name": "",
    "description": "",
    "image_url": "",
    "category": "General",
    "size": "M",
    "color": "Black",
    "price": 1.0,
    "in_stock": True,
}


class DuplicateSelectionError(ValueError):
    pass


class SelectionNotFound(ValueError):
    pass


class CatalogError(ValueError):
    """Raised when a catalog edit is rejected (missing name, bad price, duplicate category)."""


class DressNotFound(CatalogError):
    pass


@dataclass
class DressFilter:
    category: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search: Optional[str] = None
    in_stock: Optional[bool] = None


def _validate_dress(dress: Dict, index: int) -> List[str]:
    warnings = []
    name = dress.get("name") or f"dress[{index}]"
    for field in _REQUIRED_FIELDS:
        if not dress.get(field):
            warnings.append(f"{name}: missing required field '{field}'")
    if dress.get("price", 0) < 0:
        warnings.append(f"{name}: negative price {dress['price']}")
    return warnings


def normalize_dress(dress: Dict) -> Dict:
    out = dict(dress)

    # camelCase API records -> snake_case
    if "imageUrl" in out and not out.get("image_url"):
        out["image_url"] = out.pop("imageUrl")
    if "inStock" in out and "in_stock" not in out:
        out["in_stock"] = out.pop("inStock")
    if "createdAt" in out and not out.get("created_at"):
        out["created_at"] = out.pop("createdAt")

    try:
        out["price"] = float(out.get("price", 0) or 0)
    except (TypeError, ValueError):
        out["price"] = 0.0
    in_stock = out.get("in_stock")
    out["in_stock"] = True if in_stock is None else bool(in_stock)

    # explicit nulls become empty strings too
    for key in _TEXT_FIELDS:
        value = out.get(key)
        out[key] = "" if value is None else str(value)
    return out


def load_dresses(base_dir: Path) -> List[Dict]:
    path = data_dir(base_dir) / "dresses.json"
    if not path.exists():
        logger.warning("No dress catalog at %s", path)
        return []

    dresses = [normalize_dress(d) for d in json.loads(path.read_text(encoding="utf-8"))]

    all_warnings = []
    for i, dress in enumerate(dresses):
        all_warnings.extend(_validate_dress(dress, i))
    if all_warnings:
        logger.warning("Dress catalog validation found %d issues:", len(all_warnings))
        for w in all_warnings[:20]:
            logger.warning("  - %s", w)

    return dresses


def _same(a: str, b: str) -> bool:
    return str(a).strip().lower() == str(b).strip().lower()


def filter_dresses(dresses: List[Dict], flt: DressFilter) -> List[Dict]:
    """Apply every set criterion; newest dresses first."""
    out = []
    needle = (flt.search or "").strip().lower()
    for d in dresses:
        if flt.category and not _same(d["category"], flt.category):
            continue
        if flt.size and not _same(d["size"], flt.size):
            continue
        if flt.color and not _same(d["color"], flt.color):
            continue
        if flt.min_price is not None and d["price"] < flt.min_price:
            continue
        if flt.max_price is not None and d["price"] > flt.max_price:
            continue
        if flt.in_stock is not None and d["in_stock"] != flt.in_stock:
            continue
        if needle and needle not in d.get("name", "").lower() and needle not in d["description"].lower():
            continue
        out.append(d)
    return sorted(out, key=lambda d: d["created_at"], reverse=True)


def categories(dresses: List[Dict], extra: Optional[List[Dict]] = None) -> List[str]:
    """Distinct category names used by dresses, plus any managed category records."""
    names = {d["category"] for d in dresses if d.get("category")}
    names.update(c["name"] for c in extra or [] if c.get("name"))
    return sorted(names)


def sizes(dresses: List[Dict]) -> List[str]:
    return sorted({d["size"] for d in dresses if d.get("size")})


# ── Catalog management ────────────────────────────────────────────────

def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _check_fields(dress: Dict) -> None:
    if not str(dress.get("name") or "").strip():
        raise CatalogError("Name is required")
    if dress["price"] < 0:
        raise CatalogError("Price cannot be negative")


def _dress_index(dresses: List[Dict], dress_id: int) -> int:
    for i, dress in enumerate(dresses):
        if dress.get("id") == dress_id:
            return i
    raise DressNotFound("Dress not found")


def add_dress(dresses: List[Dict], fields: Dict) -> List[Dict]:
    """Return a new list with the dress appended under the next free id."""
    record = dict(NEW_DRESS_DEFAULTS)
    record.update({k: v for k, v in fields.items() if k in _EDITABLE_FIELDS})
    record["id"] = max((d.get("id") or 0 for d in dresses), default=0) + 1
    record["created_at"] = _now_iso()
    dress = normalize_dress(record)
    dress["name"] = dress["name"].strip()
    _check_fields(dress)
    logger.info("Dress %d created (%s)", dress["id"], dress["category"])
    return list(dresses) + [dress]


def update_dress(dresses: List[Dict], dress_id: int, **changes) -> List[Dict]:
    """Return a new list with only the given (non-None) fields changed."""
    idx = _dress_index(dresses, dress_id)
    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise CatalogError(f"Unknown dress fields: {', '.join(sorted(unknown))}")
    merged = dict(dresses[idx])
    merged.update({k: v for k, v in changes.items() if v is not None})
    dress = normalize_dress(merged)
    dress["name"] = dress["name"].strip()
    _check_fields(dress)
    dress["updated_at"] = _now_iso()
    out = list(dresses)
    out[idx] = dress
    logger.info("Dress %d updated", dress_id)
    return out


def delete_dress(dresses: List[Dict], dress_id: int) -> List[Dict]:
    idx = _dress_index(dresses, dress_id)
    logger.info("Dress %d deleted", dress_id)
    return dresses[:idx] + dresses[idx + 1:]


def add_category(
    category_records: List[Dict],
    name: str,
    description: str = "",
    sort_order: int = 0,
) -> List[Dict]:
    """Return category records with the new one added, ordered by sort order then name."""
    name = (name or "").strip()
    if not name:
        raise CatalogError("Category name is required")
    if any(_same(c["name"], name) for c in category_records):
        raise CatalogError(f"Category '{name}' already exists")
    record = {
        "id": max((c["id"] for c in category_records), default=0) + 1,
        "name": name,
        "description": description or "",
        "sort_order": int(sort_order),
    }
    logger.info("Category '%s' created", name)
    return sorted(list(category_records) + [record], key=lambda c: (c["sort_order"], c["name"].lower()))


# ── Selections ─────────────────────────────────────────────────────────

def add_selection(selections: List[Dict], dress: Dict, notes: str = "") -> List[Dict]:
    """Return a new list with the dress on top; a dress can be selected once."""
    if any(s["dress_id"] == dress.get("id") for s in selections):
        raise DuplicateSelectionError("Dress already in your selections")
    selection = {
        "id": max((s["id"] for s in selections), default=0) + 1,
        "dress_id": dress.get("id"),
        "notes": notes,
        "created_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
        "dress_name": dress.get("name"),
        "dress_image_url": dress.get("image_url"),
        "dress_price": dress.get("price"),
        "dress_category": dress.get("category"),
        "dress_size": dress.get("size"),
        "dress_color": dress.get("color"),
    }
    logger.info("Added dress %s to selections", dress.get("id"))
    return [selection] + list(selections)


def remove_selection(selections: List[Dict], selection_id: int) -> List[Dict]:
    kept = [s for s in selections if s["id"] != selection_id]
    if len(kept) == len(selections):
        raise SelectionNotFound("Selection not found")
    logger.info("Removed selection %s", selection_id)
    return kept
