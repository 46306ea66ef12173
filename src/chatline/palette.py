"""Sender color palette using golden-angle spacing in HSL space.

Each sender ID maps to a stable slot; slot N gets hue seed + N * 137.508°,
so neighbouring slots are never adjacent on the wheel. The slot comes from
a content hash of the sender ID, not from Python's salted hash().
"""

import colorsys
import hashlib

GOLDEN_ANGLE = 137.508
SEED_HUE = 190.0
SLOT_COUNT = 38

# Foreground lightness/saturation for text on dark backgrounds
_FG_LIGHTNESS = 0.70
_FG_SATURATION = 0.75

SERVER_COLOR = "#E6C84C"


def _hsl_to_hex(h: float, s: float, lightness: float) -> str:
    """Convert HSL (h in 0-360, s/lightness in 0-1) to #RRGGBB hex string."""
    # colorsys uses h in 0-1
    r, g, b = colorsys.hls_to_rgb(h / 360.0, lightness, s)
    return "#{:02X}{:02X}{:02X}".format(
        int(round(r * 255)),
        int(round(g * 255)),
        int(round(b * 255)),
    )


def _slot(sender: str) -> int:
    digest = hashlib.blake2b(sender.encode("utf-8"), digest_size=4).digest()
    return int.from_bytes(digest, "big") % SLOT_COUNT


def slot_color(slot: int) -> str:
    """Foreground color for palette slot `slot`."""
    hue = (SEED_HUE + slot * GOLDEN_ANGLE) % 360
    return _hsl_to_hex(hue, _FG_SATURATION, _FG_LIGHTNESS)


def sender_color(sender: str) -> str:
    """Stable #RRGGBB foreground color for a sender name or ID."""
    return slot_color(_slot(sender))
