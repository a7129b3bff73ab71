"""Delay and sound timers for the CHIP-8 virtual machine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Timers:
    """Two independent 8-bit countdown timers.

    Each timer counts down by one per :meth:`tick` while it is non-zero. The
    sound timer reports a one-shot beep on the tick that takes it from 1 to 0.
    """

    delay: int = 0
    sound: int = 0

    def set_delay(self, value: int) -> None:
        self.delay = value & 0xFF

    def set_sound(self, value: int) -> None:
        self.sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        return self.sound > 0

    def tick(self) -> bool:
        """Advance both timers by one step; return True when a beep fires."""

        if self.delay > 0:
            self.delay -= 1

        beep = False
        if self.sound > 0:
            beep = self.sound == 1
            self.sound -= 1
        return beep

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0
