"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .driver import DEFAULT_STEPS_PER_SECOND, StepScheduler
from .machine import MachineConfig, ProgramTooLargeError, VirtualMachine, create_machine

__all__ = [
    "MachineConfig",
    "VirtualMachine",
    "ProgramTooLargeError",
    "create_machine",
    "StepScheduler",
    "DEFAULT_STEPS_PER_SECOND",
]
