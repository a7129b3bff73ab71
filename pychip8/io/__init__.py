"""Input handling for the CHIP-8 emulator."""

from __future__ import annotations

from .keypad import KEY_COUNT, KEY_LAYOUT, Keypad, key_for_name

__all__ = [
    "KEY_COUNT",
    "KEY_LAYOUT",
    "Keypad",
    "key_for_name",
]
