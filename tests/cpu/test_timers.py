"""Tests for the delay/sound timer state machine."""

from __future__ import annotations

from pychip8.cpu import Timers


def test_idle_timers_stay_at_zero() -> None:
    timers = Timers()

    assert timers.tick() is False
    assert timers.delay == 0
    assert timers.sound == 0


def test_delay_counts_down_without_beeping() -> None:
    timers = Timers()
    timers.set_delay(2)

    assert timers.tick() is False
    assert timers.delay == 1
    assert timers.tick() is False
    assert timers.delay == 0
    assert timers.tick() is False


def test_sound_beeps_once_on_expiry() -> None:
    timers = Timers()
    timers.set_sound(3)

    beeps = [timers.tick() for _ in range(6)]

    assert beeps == [False, False, True, False, False, False]
    assert timers.sound == 0
    assert not timers.sound_active


def test_rearm_after_expiry() -> None:
    timers = Timers()
    timers.set_sound(1)
    assert timers.tick() is True

    timers.set_sound(1)
    assert timers.sound_active
    assert timers.tick() is True


def test_writes_are_masked_to_eight_bits() -> None:
    timers = Timers()
    timers.set_delay(0x1FF)
    timers.set_sound(0x102)

    assert timers.delay == 0xFF
    assert timers.sound == 0x02


def test_reset() -> None:
    timers = Timers(delay=5, sound=7)
    timers.reset()
    assert (timers.delay, timers.sound) == (0, 0)
