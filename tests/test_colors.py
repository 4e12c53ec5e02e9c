"""
Layout Migrator — Color Parser Tests
"""

import pytest

from layout_migrator.colors import parse_color


class TestParseColor:
    """Tests for parse_color."""

    def test_short_hex(self):
        """#fff expands to opaque white."""
        c = parse_color("#fff")
        assert (c.r, c.g, c.b, c.a) == (255, 255, 255, 1)

    def test_long_hex(self):
        """#RRGGBB recovers exact channels."""
        c = parse_color("#1A2B3C")
        assert (c.r, c.g, c.b, c.a) == (26, 43, 60, 1)

    def test_hex_with_alpha(self):
        """#FF000080 is red at alpha 0.5 (128/255 rounded to two decimals)."""
        c = parse_color("#FF000080")
        assert (c.r, c.g, c.b) == (255, 0, 0)
        assert c.a == pytest.approx(0.5)

    @pytest.mark.parametrize(
        "digits",
        ["000", "abc", "123456", "fedcba", "00ff00cc"],
    )
    def test_hex_channels_round_trip(self, digits):
        """Channel values equal the hex digits they came from."""
        c = parse_color(f"#{digits}")
        full = "".join(ch * 2 for ch in digits) if len(digits) == 3 else digits
        assert (c.r, c.g, c.b) == (int(full[0:2], 16), int(full[2:4], 16), int(full[4:6], 16))

    def test_rgb(self):
        """rgb() yields opaque color."""
        c = parse_color("rgb(10, 20, 30)")
        assert (c.r, c.g, c.b, c.a) == (10, 20, 30, 1)

    def test_rgba(self):
        """rgba() keeps its alpha."""
        c = parse_color("rgba(10,20,30,0.25)")
        assert (c.r, c.g, c.b, c.a) == (10, 20, 30, 0.25)

    def test_channels_clamped(self):
        """Out-of-range channels clamp to 255 and alpha to 1."""
        c = parse_color("rgba(300, 0, 999, 7)")
        assert (c.r, c.g, c.b, c.a) == (255, 0, 255, 1)

    def test_named_case_insensitive(self):
        """Named colors ignore case and surrounding whitespace."""
        c = parse_color("  Grey ")
        assert (c.r, c.g, c.b) == (128, 128, 128)

    def test_transparent(self):
        """transparent has zero alpha."""
        assert parse_color("transparent").a == 0

    def test_unknown_falls_back_to_black(self, capsys):
        """Unrecognized input yields opaque black and logs a warning, never raises."""
        c = parse_color("chartreuse-ish")
        assert (c.r, c.g, c.b, c.a) == (0, 0, 0, 1)
        assert "[WARN]" in capsys.readouterr().out
