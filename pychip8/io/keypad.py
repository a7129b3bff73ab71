"""CHIP-8 hexadecimal keypad handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16

# The original keypad is laid out as
#   1 2 3 C
#   4 5 6 D
#   7 8 9 E
#   A 0 B F
# and is mapped onto the left-hand block of a QWERTY keyboard.
KEY_LAYOUT: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


def key_for_name(name: str) -> int | None:
    """Resolve a physical key name to a keypad index, or ``None`` if unmapped."""

    lowered = name.lower()
    lowered = ALIAS_TABLE.get(lowered, lowered)
    return KEY_LAYOUT.get(lowered)


def _check_index(index: int) -> None:
    if not 0 <= index < KEY_COUNT:
        raise ValueError(f"key index {index} outside 0-{KEY_COUNT - 1}")


@dataclass
class Keypad:
    """Sixteen independent key states."""

    _keys: bytearray = field(default_factory=lambda: bytearray(KEY_COUNT))
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def press(self, index: int) -> None:
        _check_index(index)
        before = self._keys[index]
        self._keys[index] = 1
        if debug_enabled("input"):
            debug_log("input", "key_down=%X", index)
        if not before:
            self._notify_listeners(index, True)

    def release(self, index: int) -> None:
        _check_index(index)
        before = self._keys[index]
        self._keys[index] = 0
        if debug_enabled("input"):
            debug_log("input", "key_up=%X", index)
        if before:
            self._notify_listeners(index, False)

    def is_pressed(self, index: int) -> bool:
        _check_index(index)
        return bool(self._keys[index])

    def first_pressed(self) -> int | None:
        """Return the lowest pressed key index, or ``None`` when all are up."""

        for index, state in enumerate(self._keys):
            if state:
                return index
        return None

    def reset(self) -> None:
        self._keys[:] = bytes(KEY_COUNT)

    def snapshot(self) -> tuple[int, ...]:
        return tuple(self._keys)

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    def _notify_listeners(self, index: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(index, pressed)
