from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv
load_dotenv(PROJECT_ROOT / ".env")

from components.design_library import load_presets
from config import BASE_STYLES, DEFAULT_BASE_STYLE, VIEW_MODES
from rendering.geometry import parse_customizations
from rendering.raster import scene_to_png_bytes
from rendering.renderer import render_dress
from rendering.svg_export import scene_to_svg

logger = logging.getLogger("render_design")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a dress design to SVG and/or PNG.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", help="Name of a bundled preset (case-insensitive).")
    source.add_argument("--customizations", help="Customizations JSON, e.g. '{\"length\": 60}'.")
    parser.add_argument("--style", choices=BASE_STYLES, help="Base style (overrides the preset's).")
    parser.add_argument("--view", choices=VIEW_MODES, default="front")
    parser.add_argument("--width", type=int, default=400)
    parser.add_argument("--height", type=int, default=600)
    parser.add_argument("--svg", type=Path, help="Write SVG here.")
    parser.add_argument("--png", type=Path, help="Write PNG here.")
    parser.add_argument("--list-presets", action="store_true", help="List preset names and exit.")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)

    if args.list_presets:
        for preset in load_presets(PROJECT_ROOT):
            print(f"{preset.name}  [{preset.base_style}]")
        return 0

    base_style = DEFAULT_BASE_STYLE
    raw = args.customizations
    if args.preset:
        matches = [p for p in load_presets(PROJECT_ROOT) if p.name.lower() == args.preset.lower()]
        if not matches:
            logger.error("Unknown preset: %s", args.preset)
            return 2
        base_style = matches[0].base_style
        raw = matches[0].customizations
    if args.style:
        base_style = args.style

    customizations = parse_customizations(raw)
    scene = render_dress(customizations, base_style, args.view, args.width, args.height)

    if not args.svg and not args.png:
        sys.stdout.write(scene_to_svg(scene) + "\n")
        return 0
    if args.svg:
        args.svg.parent.mkdir(parents=True, exist_ok=True)
        args.svg.write_text(scene_to_svg(scene), encoding="utf-8")
        logger.info("Wrote %s", args.svg)
    if args.png:
        args.png.parent.mkdir(parents=True, exist_ok=True)
        args.png.write_bytes(scene_to_png_bytes(scene))
        logger.info("Wrote %s", args.png)
    logger.info("Rendered %s %s view: %s", base_style, args.view, json.dumps(customizations.to_dict()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
