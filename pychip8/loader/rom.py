"""Raw CHIP-8 program image loader.

CHIP-8 programs have no header: the file is copied verbatim into memory at
``0x200``. The loader only checks that the image fits.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MAX_PROGRAM_SIZE, PROGRAM_START


class RomFormatError(RuntimeError):
    """Raised when a program image cannot be loaded."""


@dataclass(frozen=True)
class ProgramImage:
    """A program image and the name it was loaded under."""

    name: str
    data: bytes
    load_address: int = PROGRAM_START

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end_address(self) -> int:
        return self.load_address + len(self.data) - 1


def load_program_image(stream: BinaryIO, name: str = "") -> ProgramImage:
    """Read a program image from ``stream``."""

    # One byte past the limit marks an oversize image.
    data = stream.read(MAX_PROGRAM_SIZE + 1)
    if not data:
        raise RomFormatError(f"program image {name or '<stream>'} is empty")
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomFormatError(
            f"program image {name or '<stream>'} exceeds {MAX_PROGRAM_SIZE} bytes")
    return ProgramImage(name=name, data=bytes(data))


def load_program_image_from_path(path: Path) -> ProgramImage:
    """Load a program image from the filesystem."""

    with path.open("rb") as handle:
        return load_program_image(handle, path.name)
