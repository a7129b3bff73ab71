"""Video helpers for the CHIP-8 emulator."""

from __future__ import annotations

from .display import SCREEN_HEIGHT, SCREEN_WIDTH, Display, PixelChange
from .font import FONT_HEIGHT, FONT_SET, FONT_WIDTH, glyph_address
from .palette import MONOCHROME, PALETTES, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Display",
    "PixelChange",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "FONT_SET",
    "FONT_WIDTH",
    "FONT_HEIGHT",
    "glyph_address",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PALETTES",
    "validate_palette",
]
