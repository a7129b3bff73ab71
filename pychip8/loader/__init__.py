"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .rom import ProgramImage, RomFormatError, load_program_image, load_program_image_from_path

__all__ = [
    "ProgramImage",
    "RomFormatError",
    "load_program_image",
    "load_program_image_from_path",
]
