"""Audio output for the CHIP-8 emulator."""

from __future__ import annotations

from .beeper import SquareWaveBeeper

__all__ = ["SquareWaveBeeper"]
