"""Unit tests for the CHIP-8 frame renderer."""

from __future__ import annotations

import pytest

from pychip8.video import Display, Renderer
from pychip8.video.palette import AMBER, validate_palette

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def test_frame_starts_with_background() -> None:
    renderer = Renderer(64, 32)
    frame = renderer.frame

    assert (frame.width, frame.height) == (64, 32)
    assert frame.get_pixel(0, 0) == BLACK
    assert frame.get_pixel(63, 31) == BLACK


def test_sync_applies_incremental_changes() -> None:
    display = Display()
    renderer = Renderer(64, 32)
    display.draw_sprite(0, 0, [0b10000000])

    painted = renderer.sync(display)

    assert painted == 1
    assert renderer.frame.get_pixel(0, 0) == WHITE
    assert renderer.frame.get_pixel(1, 0) == BLACK
    assert display.pending_changes == 0


def test_sync_full_redraw_after_clear() -> None:
    display = Display()
    renderer = Renderer(64, 32)
    display.draw_sprite(0, 0, [0xFF])
    renderer.sync(display)

    display.clear()
    display.draw_sprite(10, 5, [0b10000000])
    painted = renderer.sync(display)

    assert painted == 64 * 32
    assert not display.redraw_requested
    assert renderer.frame.get_pixel(0, 0) == BLACK
    assert renderer.frame.get_pixel(10, 5) == WHITE


def test_scale_factor() -> None:
    display = Display()
    renderer = Renderer(64, 32, scale=3)
    display.draw_sprite(1, 0, [0b10000000])

    renderer.sync(display)

    frame = renderer.frame
    assert (frame.width, frame.height) == (192, 96)
    assert frame.get_pixel(2, 0) == BLACK
    assert frame.get_pixel(3, 0) == WHITE
    assert frame.get_pixel(5, 2) == WHITE
    assert frame.get_pixel(6, 0) == BLACK
    assert frame.get_pixel(3, 3) == BLACK


def test_custom_palette() -> None:
    display = Display()
    renderer = Renderer(64, 32, palette=AMBER)
    display.draw_sprite(0, 0, [0b10000000])

    renderer.sync(display)

    assert renderer.frame.get_pixel(0, 0) == AMBER[1]
    assert renderer.frame.get_pixel(1, 0) == AMBER[0]


def test_invalid_palette_and_scale() -> None:
    with pytest.raises(ValueError):
        validate_palette([(0, 0, 0)])
    with pytest.raises(ValueError):
        validate_palette([(0, 0), (1, 1, 1)])
    with pytest.raises(ValueError):
        Renderer(64, 32, scale=0)
