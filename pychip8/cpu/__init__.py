"""CPU package for the CHIP-8 virtual machine."""

from .core import (
    CPU,
    CPUError,
    CPUHaltedError,
    CPUState,
    ProgramCounterError,
    StackOverflowError,
    StackUnderflowError,
)
from .timers import Timers
from . import opcodes

__all__ = [
    "CPU",
    "CPUState",
    "CPUError",
    "CPUHaltedError",
    "ProgramCounterError",
    "StackOverflowError",
    "StackUnderflowError",
    "Timers",
    "opcodes",
]
