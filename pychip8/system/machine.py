"""CHIP-8 machine assembly and the virtual machine facade."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from pychip8.bus import MAX_PROGRAM_SIZE, PROGRAM_START, Memory
from pychip8.cpu import CPU, Timers
from pychip8.cpu.opcodes import Instruction
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Display, PixelChange
from pychip8.video.font import FONT_BASE_ADDRESS, FONT_SET

BeepCallback = Callable[[], None]


class ProgramTooLargeError(ValueError):
    """Raised when a program image does not fit above 0x200."""

    def __init__(self, size: int) -> None:
        super().__init__(
            f"program of {size} bytes exceeds the {MAX_PROGRAM_SIZE} bytes available "
            f"at {PROGRAM_START:#05x}"
        )
        self.size = size


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    random_byte: Optional[Callable[[], int]] = None
    beep_callback: Optional[BeepCallback] = None


class VirtualMachine:
    """Owns the complete CHIP-8 state and exposes the host-facing API.

    The driver calls :meth:`step` at its own rate, the input source calls
    :meth:`set_key`/:meth:`clear_key`, and the presenter reads the display
    through :meth:`pixel`, :meth:`drain_pixel_changes` and
    :attr:`redraw_requested`. Nothing here sleeps or performs I/O.
    """

    def __init__(self, config: MachineConfig | None = None) -> None:
        config = config or MachineConfig()
        self.memory = Memory()
        self.display = Display()
        self.keypad = Keypad()
        self.timers = Timers()
        if config.random_byte is not None:
            self.cpu = CPU(self.memory, self.display, self.keypad, self.timers, random_byte=config.random_byte)
        else:
            self.cpu = CPU(self.memory, self.display, self.keypad, self.timers)
        self._beep_listeners: List[BeepCallback] = []
        if config.beep_callback is not None:
            self._beep_listeners.append(config.beep_callback)
        self.beep_count = 0
        self.step_count = 0
        self._load_font()

    # ------------------------------------------------------------------
    # Lifecycle

    def reset(self) -> None:
        """Return to the power-on state without reallocating storage."""

        self.memory.clear()
        self._load_font()
        self.cpu.reset()
        self.timers.reset()
        self.display.reset()
        self.keypad.reset()
        self.beep_count = 0
        self.step_count = 0

    def load_program(self, data: bytes) -> None:
        """Copy ``data`` into memory at 0x200 and zero the rest of the program area."""

        if len(data) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(len(data))
        image = bytes(data)
        self.memory.store_block(PROGRAM_START, image + bytes(MAX_PROGRAM_SIZE - len(image)))
        if debug_enabled("cpu"):
            debug_log("cpu", "loaded program size=%d", len(data))

    def step(self) -> Instruction | None:
        """Run one instruction followed by one timer tick."""

        instruction = self.cpu.step()
        self.step_count += 1
        if self.timers.tick():
            self.beep_count += 1
            if debug_enabled("audio"):
                debug_log("audio", "beep step=%d", self.step_count)
            for listener in tuple(self._beep_listeners):
                listener()
        return instruction

    def add_beep_listener(self, listener: BeepCallback) -> None:
        self._beep_listeners.append(listener)

    # ------------------------------------------------------------------
    # Input

    def set_key(self, index: int) -> None:
        self.keypad.press(index)

    def clear_key(self, index: int) -> None:
        self.keypad.release(index)

    # ------------------------------------------------------------------
    # Display

    def pixel(self, x: int, y: int) -> int:
        return self.display.pixel(x, y)

    def drain_pixel_changes(self) -> List[PixelChange]:
        return self.display.drain_changes()

    @property
    def redraw_requested(self) -> bool:
        return self.display.redraw_requested

    def acknowledge_redraw(self) -> None:
        self.display.acknowledge_redraw()

    # ------------------------------------------------------------------
    # Read-only register access

    @property
    def registers(self) -> bytes:
        return bytes(self.cpu.state.v)

    @property
    def index(self) -> int:
        return self.cpu.state.i

    @property
    def program_counter(self) -> int:
        return self.cpu.state.pc

    @property
    def stack_pointer(self) -> int:
        return self.cpu.state.sp

    @property
    def current_opcode(self) -> int:
        return self.cpu.state.opcode

    @property
    def delay_timer(self) -> int:
        return self.timers.delay

    @property
    def sound_timer(self) -> int:
        return self.timers.sound

    @property
    def halted(self) -> bool:
        return self.cpu.halted

    @property
    def fault(self) -> BaseException | None:
        return self.cpu.fault

    @property
    def waiting_for_key(self) -> bool:
        return self.cpu.waiting_for_key

    def _load_font(self) -> None:
        self.memory.store_block(FONT_BASE_ADDRESS, FONT_SET)


def create_machine(config: MachineConfig | None = None) -> VirtualMachine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    return VirtualMachine(config)
