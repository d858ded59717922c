"""Tests for scene composition and the SVG / Pillow backends."""
from __future__ import annotations

import sys
import xml.etree.ElementTree as ET
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from rendering.geometry import DressCustomizations
from rendering.raster import export_png, scene_to_image, scene_to_png_bytes
from rendering.renderer import LAYER_ORDER, body_gradient, render_dress, render_stored_design
from rendering.scene import FilledPath, Layer, Line, PathBuilder, Scene, Text
from rendering.svg_export import SVG_NS, scene_to_svg


@pytest.fixture
def default_scene():
    return render_dress(DressCustomizations(), "a-line", "front")


@pytest.fixture
def cross_back_scene():
    return render_dress(DressCustomizations(back_style="cross"), "fit-flare", "back")


# ══════════════════════════════════════════════════════════════════════
# Scene composition
# ══════════════════════════════════════════════════════════════════════

class TestRenderDress:
    def test_layer_order(self, default_scene, cross_back_scene):
        assert default_scene.layer_names() == LAYER_ORDER
        assert cross_back_scene.layer_names() == LAYER_ORDER

    def test_mannequin_is_fixed(self, default_scene):
        other = render_dress(
            DressCustomizations(length=35, strap_type="strapless", color="#e84393"), "mermaid", "back"
        )
        assert default_scene.layer("mannequin") == other.layer("mannequin")
        assert default_scene.layer("mannequin").opacity == 0.15

    def test_body_gradient_shades(self):
        grad = body_gradient("#1a1a2e")
        assert grad.id == "dressGradient"
        assert [s.color for s in grad.stops] == ["#38384c", "#1a1a2e", "#0b0b1f"]

    def test_body_outline_and_shadow(self, default_scene):
        (body,) = default_scene.layer("body").primitives
        assert body.stroke == "#000010"
        assert body.stroke_width == 1.5
        assert body.shadow is not None

    def test_sheen_follows_body(self, default_scene):
        (body,) = default_scene.layer("body").primitives
        (sheen,) = default_scene.layer("sheen").primitives
        assert sheen.path == body.path
        assert sheen.fill.id == "fabricSheen"

    def test_label(self, default_scene, cross_back_scene):
        (front_label,) = default_scene.layer("label").primitives
        assert isinstance(front_label, Text)
        assert front_label.text == "Front View"
        assert front_label.y == pytest.approx(495)
        (back_label,) = cross_back_scene.layer("label").primitives
        assert back_label.text == "Back View"

    def test_strapless_has_empty_strap_layer(self):
        scene = render_dress(DressCustomizations(strap_type="strapless"), "sheath")
        assert scene.layer("straps").primitives == ()

    def test_cross_back_details(self, cross_back_scene):
        details = cross_back_scene.layer("back_details").primitives
        assert len(details) == 2
        assert all(isinstance(d, Line) for d in details)
        front = render_dress(DressCustomizations(back_style="cross"), "fit-flare", "front")
        assert front.layer("back_details").primitives == ()

    def test_size_only_scales(self, default_scene):
        small = render_dress(DressCustomizations(), "a-line", "front", 200, 300)
        assert small.scale == pytest.approx(0.5)
        assert default_scene.scale == pytest.approx(1.0)
        assert small.layers == default_scene.layers

    def test_deterministic(self):
        c = DressCustomizations(length=88, strap_type="halter", neckline="v-neck", color="#6c5ce7")
        assert render_dress(c, "mermaid", "back") == render_dress(c, "mermaid", "back")

    def test_stored_design_falls_back(self, default_scene):
        assert render_stored_design("{oops", "a-line") == default_scene
        assert render_stored_design(None, "a-line") == default_scene

    def test_unknown_layer_raises(self, default_scene):
        with pytest.raises(KeyError):
            default_scene.layer("sparkles")


# ══════════════════════════════════════════════════════════════════════
# SVG backend
# ══════════════════════════════════════════════════════════════════════

class TestSvgExport:
    def test_well_formed(self, default_scene):
        root = ET.fromstring(scene_to_svg(default_scene))
        assert root.tag == f"{{{SVG_NS}}}svg"
        assert root.get("viewBox") == "0 0 400 600"
        groups = [g.get("class") for g in root.iter(f"{{{SVG_NS}}}g")]
        assert groups == [
            "layer-mannequin", "layer-body", "layer-sheen", "layer-seam", "layer-hem", "layer-straps", "layer-label"
        ]

    def test_size_attributes(self):
        svg = scene_to_svg(render_dress(DressCustomizations(), "a-line", "front", 200, 300))
        assert 'width="200"' in svg
        assert 'height="300"' in svg
        assert 'viewBox="0 0 400 600"' in svg

    def test_defs_and_references(self, default_scene):
        svg = scene_to_svg(default_scene)
        assert 'id="dressGradient"' in svg
        assert 'id="fabricSheen"' in svg
        assert 'fill="url(#dressGradient)"' in svg
        assert 'filter="url(#dressShadow)"' in svg
        assert "<feDropShadow" in svg
        assert 'stroke-linecap="round"' in svg
        assert "Front View" in svg

    def test_body_path_data(self, default_scene):
        svg = scene_to_svg(default_scene)
        assert "L 245,220 Q 275,342.5 305,465 L 95,465 Q 125,342.5 155,220 Z" in svg

    def test_empty_layers_skipped(self):
        svg = scene_to_svg(render_dress(DressCustomizations(strap_type="strapless"), "a-line"))
        assert "layer-straps" not in svg
        assert "layer-back_details" not in svg

    def test_cross_back_lines(self, cross_back_scene):
        svg = scene_to_svg(cross_back_scene)
        assert 'class="layer-back_details"' in svg
        assert svg.count("<line ") == 3  # mannequin shoulders + two crossing straps

    def test_id_prefix(self, default_scene):
        svg = scene_to_svg(default_scene, id_prefix="p1-")
        assert 'id="p1-dressGradient"' in svg
        assert "url(#p1-dressGradient)" in svg
        assert "url(#p1-dressShadow)" in svg
        assert 'id="dressGradient"' not in svg

    def test_text_escaped(self):
        scene = Scene(100, 100, (Layer("label", (Text(50, 50, "<b>&", "#000000"),)),))
        svg = scene_to_svg(scene)
        assert "&lt;b&gt;&amp;" in svg
        ET.fromstring(svg)


# ══════════════════════════════════════════════════════════════════════
# Pillow backend
# ══════════════════════════════════════════════════════════════════════

class TestRaster:
    def test_image_size_and_mode(self):
        img = scene_to_image(render_dress(DressCustomizations(), "a-line", "front", 100, 150))
        assert img.size == (100, 150)
        assert img.mode == "RGBA"

    def test_body_pixels_painted(self):
        img = scene_to_image(render_dress(DressCustomizations(), "a-line", "front", 100, 150))
        r, g, b, a = img.getpixel((50, 87))
        assert a > 200
        assert max(r, g, b) < 120
        assert img.getpixel((0, 0))[3] == 0

    def test_uniform_scale_centers_content(self):
        img = scene_to_image(render_dress(DressCustomizations(), "a-line", "front", 300, 300))
        assert img.size == (300, 300)
        assert img.getpixel((10, 150))[3] == 0
        assert img.getpixel((150, 150))[3] > 200

    def test_color_changes_pixels(self):
        dark = scene_to_image(render_dress(DressCustomizations(color="#000000"), "sheath", "front", 100, 150))
        light = scene_to_image(render_dress(DressCustomizations(color="#ffffff"), "sheath", "front", 100, 150))
        assert sum(dark.getpixel((50, 87))[:3]) < sum(light.getpixel((50, 87))[:3])

    def test_png_bytes(self, cross_back_scene):
        data = scene_to_png_bytes(cross_back_scene)
        assert data[:8] == b"\x89PNG\r\n\x1a\n"

    def test_open_path_stroke_skips_closing_edge(self):
        vee = PathBuilder().move_to(100, 100).line_to(200, 300).line_to(300, 100).build()
        scene = Scene(400, 600, (Layer("body", (FilledPath(vee, "#ffffff", "#000000", 20),)),))
        img = scene_to_image(scene)
        # just inside the implied closing edge: fill only
        assert min(img.getpixel((200, 106))[:3]) > 240
        # on a drawn edge: stroke
        assert max(img.getpixel((150, 200))[:3]) < 60

    def test_closed_path_stroke_includes_closing_edge(self):
        tri = PathBuilder().move_to(100, 100).line_to(200, 300).line_to(300, 100).close().build()
        scene = Scene(400, 600, (Layer("body", (FilledPath(tri, "#ffffff", "#000000", 20),)),))
        assert max(scene_to_image(scene).getpixel((200, 106))[:3]) < 60


class TestExportPng:
    def test_memoized_per_design(self):
        c = DressCustomizations(length=64, strap_type="spaghetti", color="#00b894")
        first = export_png(c, "empire", "back", 100, 150)
        hits = export_png.cache_info().hits
        again = export_png(DressCustomizations(length=64, strap_type="spaghetti", color="#00b894"), "empire", "back", 100, 150)
        assert again is first
        assert export_png.cache_info().hits == hits + 1

    def test_matches_direct_render(self):
        c = DressCustomizations(neckline="square")
        assert export_png(c, "sheath", "front", 80, 120) == scene_to_png_bytes(
            render_dress(c, "sheath", "front", 80, 120)
        )

    def test_distinct_views_not_shared(self):
        c = DressCustomizations(back_style="cross")
        assert export_png(c, "a-line", "front", 80, 120) != export_png(c, "a-line", "back", 80, 120)
