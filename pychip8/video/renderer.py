"""Frame rendering for the CHIP-8 display."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .display import Display, PixelChange
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """RGB frame buffer produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytearray = field(repr=False)

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Keep a scaled RGB copy of the display in sync with the machine.

    A pending redraw request (set when the screen is cleared) repaints the
    whole frame; otherwise only the queued pixel flips are applied.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        scale: int = 1,
        palette: Sequence[RGBColor] = MONOCHROME,
    ) -> None:
        if scale <= 0:
            raise ValueError("scale must be positive")
        self._width = width
        self._height = height
        self._scale = scale
        self._background, self._foreground = validate_palette(palette)
        self._frame = RenderResult(
            width * scale,
            height * scale,
            bytearray(self._background * (width * scale * height * scale)),
        )

    @property
    def frame(self) -> RenderResult:
        return self._frame

    def sync(self, display: Display) -> int:
        """Bring the frame up to date; return the number of cells repainted."""

        if display.redraw_requested:
            display.drain_changes()
            self.render_full(display)
            display.acknowledge_redraw()
            return self._width * self._height
        changes = display.drain_changes()
        self.apply_changes(changes)
        return len(changes)

    def render_full(self, display: Display) -> None:
        for y, row in enumerate(display.rows()):
            for x, value in enumerate(row):
                self._paint(x, y, value)

    def apply_changes(self, changes: Sequence[PixelChange]) -> None:
        for change in changes:
            self._paint(change.x, change.y, change.value)

    def _paint(self, x: int, y: int, value: int) -> None:
        color = bytes(self._foreground if value else self._background)
        scale = self._scale
        frame = self._frame
        for dy in range(scale):
            start = ((y * scale + dy) * frame.width + x * scale) * 3
            frame.pixels[start : start + 3 * scale] = color * scale
