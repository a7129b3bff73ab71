"""CHIP-8 virtual machine with a pygame frontend.

The core (``bus``, ``cpu``, ``video``, ``io``, ``system``) performs no I/O;
``ui`` and ``audio`` wrap it with a pygame window, keyboard input and sound.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video
from .system import MachineConfig, VirtualMachine, create_machine

__version__ = "0.1.0"

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
    "MachineConfig",
    "VirtualMachine",
    "create_machine",
]
