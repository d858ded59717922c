"""Tests for the HTML snippets rendered by the theme helpers."""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from components.ui_theme import design_card_html


class TestDesignCardHtml:
    def test_color_normalized_in_style(self):
        out = design_card_html("Gala", "mermaid", "#ABC", False)
        assert "background:#aabbcc;" in out
        assert "Mermaid" in out

    def test_hostile_color_cannot_break_attribute(self):
        out = design_card_html("Gala", "a-line", 'red;" onmouseover="alert(1)', True)
        assert "onmouseover" not in out
        assert "background:#000000;" in out
        assert "Preset" in out

    def test_name_escaped(self):
        out = design_card_html("<script>x</script>", "a-line", "#1a1a2e", False)
        assert "<script>" not in out
        assert "&lt;script&gt;" in out
