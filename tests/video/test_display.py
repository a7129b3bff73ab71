"""Tests for the CHIP-8 framebuffer."""

from __future__ import annotations

import pytest

from pychip8.video import Display, PixelChange


def test_display_starts_blank() -> None:
    display = Display()

    assert (display.width, display.height) == (64, 32)
    assert display.is_blank()
    assert not display.redraw_requested
    assert display.drain_changes() == []


def test_draw_queues_flips_in_order() -> None:
    display = Display()

    collision = display.draw_sprite(2, 1, [0b10100000])

    assert collision is False
    assert display.drain_changes() == [PixelChange(2, 1, 1), PixelChange(4, 1, 1)]
    assert display.drain_changes() == []


def test_overlapping_draw_reports_collision() -> None:
    display = Display()
    display.draw_sprite(0, 0, [0b11000000])

    collision = display.draw_sprite(1, 0, [0b11000000])

    assert collision is True
    assert [display.pixel(x, 0) for x in range(3)] == [1, 0, 1]


def test_clear_supersedes_queued_changes() -> None:
    display = Display()
    display.draw_sprite(0, 0, [0xFF])

    display.clear()

    assert display.is_blank()
    assert display.redraw_requested
    assert display.pending_changes == 0
    display.acknowledge_redraw()
    assert not display.redraw_requested


def test_rows_reflect_pixels() -> None:
    display = Display(8, 2)
    display.draw_sprite(0, 1, [0x81])

    assert display.rows() == [bytes(8), bytes((1, 0, 0, 0, 0, 0, 0, 1))]


def test_pixel_query_bounds() -> None:
    display = Display()

    with pytest.raises(IndexError):
        display.pixel(64, 0)
    with pytest.raises(IndexError):
        display.pixel(0, 32)


def test_reset_does_not_request_redraw() -> None:
    display = Display()
    display.draw_sprite(0, 0, [0xFF])
    display.clear()

    display.reset()

    assert display.is_blank()
    assert not display.redraw_requested
