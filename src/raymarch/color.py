"""Additive RGB colour and the brightness-to-glyph quantizer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Color:
    """RGB triple; channels are nominally in [0, 1] but never clamped here."""

    r: float
    g: float
    b: float

    def scale(self, s: float) -> "Color":
        return Color(self.r * s, self.g * s, self.b * s)

    def add(self, other: "Color") -> "Color":
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def brightness(self) -> float:
        return (self.r + self.g + self.b) / 3.0


WHITE = Color(1.0, 1.0, 1.0)
RED = Color(1.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)
BLACK = Color(0.0, 0.0, 0.0)

# Ordered from dimmest to brightest.
CHARMAP: Tuple[str, ...] = (".", "-", "+", "*", "X", "M")
BACKGROUND = " "


def glyph_for_brightness(brightness: float) -> str:
    """Map a brightness value to a glyph from :data:`CHARMAP`.

    Values outside ``[0, 1)`` saturate to the background glyph rather than
    clamping to the ends of the palette, so an over-exposed surface renders
    blank instead of as ``'M'``. A NaN brightness raises ``ValueError``.
    """

    if brightness < 0.0 or brightness >= 1.0:
        return BACKGROUND
    index = int(brightness * len(CHARMAP))
    if index >= len(CHARMAP):
        return BACKGROUND
    return CHARMAP[index]


def glyph_for_color(color: Color) -> str:
    return glyph_for_brightness(color.brightness())
