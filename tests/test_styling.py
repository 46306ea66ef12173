"""Tests for chatline.styling and chatline.palette."""

import re

import pytest
from rich.style import Style

from chatline.palette import SERVER_COLOR, SLOT_COUNT, sender_color, slot_color
from chatline.styling import MEMBERSHIP_STYLE, sender_style, style_line

HEX_RE = re.compile(r"^#[0-9A-F]{6}$")


class TestPalette:
    def test_hex_format(self):
        for slot in range(SLOT_COUNT):
            assert HEX_RE.match(slot_color(slot))

    def test_stable_per_sender(self):
        assert sender_color("Alice") == sender_color("Alice")

    def test_sender_color_in_palette(self):
        palette = {slot_color(slot) for slot in range(SLOT_COUNT)}
        for name in ("Alice", "Bob", "@carol:example.org", ""):
            assert sender_color(name) in palette

    def test_adjacent_slots_differ(self):
        assert slot_color(0) != slot_color(1)


class TestStyleLine:
    @pytest.mark.parametrize(
        "line",
        [
            "Alice\thi",
            "Alice\tcat.png: mxc://example.org/cat",
            "SERVER\tMaintenance at 5pm",
            "Bob (@bob:example.org) has joined the room",
            "Alice\tbody\twith\ttabs",
        ],
    )
    def test_plain_text_unchanged(self, line):
        assert style_line(line).plain == line

    def test_sender_span(self):
        text = style_line("Alice\thi")
        assert len(text.spans) == 1
        span = text.spans[0]
        assert (span.start, span.end) == (0, len("Alice"))
        assert span.style == Style(color=sender_color("Alice"), bold=True)

    def test_server_sender_color(self):
        assert sender_style("SERVER") == Style(color=SERVER_COLOR, bold=True)

    def test_membership_dimmed(self):
        text = style_line("Bob (@bob:example.org) has left the room")
        assert text.style == MEMBERSHIP_STYLE
        assert text.spans == []
