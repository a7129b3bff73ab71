"""Monochrome 64x32 framebuffer with an incremental change queue."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, NamedTuple, Sequence

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
SPRITE_WIDTH = 8


class PixelChange(NamedTuple):
    """A single pixel flip produced by a sprite draw."""

    x: int
    y: int
    value: int


class Display:
    """Pixel grid mutated by sprite draws and clears.

    Sprites are clipped: pixels that land beyond the right or bottom edge are
    dropped, they neither toggle anything nor count as a collision.
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)
        self._changes: Deque[PixelChange] = deque()
        self.redraw_requested = False

    def pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} display")
        return self._pixels[y * self.width + x]

    def rows(self) -> List[bytes]:
        return [
            bytes(self._pixels[row * self.width : (row + 1) * self.width])
            for row in range(self.height)
        ]

    def snapshot(self) -> bytes:
        return bytes(self._pixels)

    def is_blank(self) -> bool:
        return not any(self._pixels)

    def clear(self) -> None:
        """Blank the grid and ask the presenter for a full redraw."""

        self._pixels[:] = bytes(len(self._pixels))
        self._changes.clear()
        self.redraw_requested = True

    def reset(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self._changes.clear()
        self.redraw_requested = False

    def acknowledge_redraw(self) -> None:
        self.redraw_requested = False

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """XOR ``rows`` onto the grid at ``(x, y)``; return True on collision."""

        collision = False
        for row_offset, bits in enumerate(rows):
            py = y + row_offset
            if py >= self.height:
                break
            for column in range(SPRITE_WIDTH):
                if not bits & (0x80 >> column):
                    continue
                px = x + column
                if px >= self.width:
                    break
                offset = py * self.width + px
                value = self._pixels[offset] ^ 1
                self._pixels[offset] = value
                if value == 0:
                    collision = True
                self._changes.append(PixelChange(px, py, value))
        return collision

    @property
    def pending_changes(self) -> int:
        return len(self._changes)

    def drain_changes(self) -> List[PixelChange]:
        """Return queued flips in order and empty the queue."""

        changes = list(self._changes)
        self._changes.clear()
        return changes

