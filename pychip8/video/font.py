"""Built-in 4x5 hex digit font for CHIP-8 programs."""

from __future__ import annotations

FONT_WIDTH = 4
FONT_HEIGHT = 5
GLYPH_BYTES = FONT_HEIGHT
FONT_BASE_ADDRESS = 0x000

# One row per byte, the glyph occupies the high nibble.
FONT_SET: bytes = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)


def glyph_address(digit: int) -> int:
    """Return the memory offset of the glyph for the low nibble of ``digit``."""

    return FONT_BASE_ADDRESS + (digit & 0x0F) * GLYPH_BYTES
