"""Category-gated debug output controlled by ``CHIP8_DEBUG``.

The variable holds a comma separated list of categories, e.g.
``CHIP8_DEBUG=cpu,input``. ``all`` turns on every category and a leading
``-`` removes one again, so ``all,-perf`` is everything except frame timing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEBUG_ENV_VAR = "CHIP8_DEBUG"


@dataclass(frozen=True)
class DebugSelection:
    """Parsed form of the ``CHIP8_DEBUG`` value."""

    included: frozenset[str] = frozenset()
    excluded: frozenset[str] = frozenset()
    everything: bool = False

    @classmethod
    def parse(cls, value: str) -> "DebugSelection":
        included: set[str] = set()
        excluded: set[str] = set()
        everything = False
        for raw in value.split(","):
            name = raw.strip().lower()
            if not name:
                continue
            if name.startswith("-"):
                excluded.add(name[1:])
            elif name == "all":
                everything = True
            else:
                included.add(name)
        return cls(frozenset(included), frozenset(excluded), everything)

    @property
    def active(self) -> bool:
        return self.everything or bool(self.included - self.excluded)

    def allows(self, category: str) -> bool:
        category = category.lower()
        if category in self.excluded:
            return False
        return self.everything or category in self.included


_selection: DebugSelection | None = None


def current_selection() -> DebugSelection:
    global _selection
    if _selection is None:
        _selection = DebugSelection.parse(os.environ.get(DEBUG_ENV_VAR, ""))
    return _selection


def reload_categories() -> DebugSelection:
    """Re-read ``CHIP8_DEBUG`` after the environment changed."""

    global _selection
    _selection = None
    return current_selection()


def debug_enabled(category: str | None = None) -> bool:
    selection = current_selection()
    if category is None:
        return selection.active
    return selection.allows(category)


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")


__all__ = [
    "DEBUG_ENV_VAR",
    "DebugSelection",
    "current_selection",
    "debug_enabled",
    "debug_log",
    "reload_categories",
]
