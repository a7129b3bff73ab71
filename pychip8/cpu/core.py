"""CHIP-8 CPU: register file, call stack and opcode handlers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Mapping

from pychip8.bus import PROGRAM_START, Memory, MemoryAccessError
from pychip8.io import KEY_COUNT, Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video.display import Display
from pychip8.video.font import glyph_address

from .opcodes import OPCODE_TABLE, DispatchKey, Instruction, Operands, dispatch_key
from .timers import Timers


class CPUError(Exception):
    """Base error for CPU-related failures."""


class StackOverflowError(CPUError):
    """Raised when a call would push beyond the 16-entry stack."""


class StackUnderflowError(CPUError):
    """Raised when a return is executed with an empty stack."""


class ProgramCounterError(CPUError):
    """Raised when the program counter leaves the program area."""


class CPUHaltedError(CPUError):
    """Raised when stepping a CPU that stopped on a fatal fault."""

    def __init__(self, fault: BaseException | None) -> None:
        super().__init__(f"CPU halted after fault: {fault}")
        self.fault = fault


STACK_DEPTH = 16
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
INSTRUCTION_SIZE = 2


def _default_random_byte() -> int:
    return random.randrange(0x100)


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x000
    pc: int = PROGRAM_START
    sp: int = 0
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    opcode: int = 0x0000

    def clone(self) -> "CPUState":
        return CPUState(bytearray(self.v), self.i, self.pc, self.sp, list(self.stack), self.opcode)


@dataclass
class CPU:
    """Fetch/decode/execute engine for the CHIP-8 instruction set."""

    memory: Memory
    display: Display
    keypad: Keypad
    timers: Timers
    random_byte: Callable[[], int] = field(default=_default_random_byte)
    instruction_table: Mapping[DispatchKey, Instruction] = field(default_factory=lambda: OPCODE_TABLE)

    state: CPUState = field(default_factory=CPUState)
    halted: bool = False
    fault: BaseException | None = None
    waiting_for_key: bool = False
    unknown_opcodes: int = 0

    def reset(self) -> None:
        """Reset the register file and leave the program counter at 0x200."""

        self.state = CPUState()
        self.halted = False
        self.fault = None
        self.waiting_for_key = False
        self.unknown_opcodes = 0

    def step(self) -> Instruction | None:
        """Execute one instruction.

        Returns the executed instruction, or ``None`` when the opcode was
        undefined or the key-wait instruction is still blocked.
        """

        if self.halted:
            raise CPUHaltedError(self.fault)

        try:
            return self._execute()
        except (MemoryAccessError, CPUError) as exc:
            self.halted = True
            self.fault = exc
            debug_log("cpu", "fault pc=%03x opcode=%04x error=%s", self.state.pc, self.state.opcode, exc)
            raise

    def _execute(self) -> Instruction | None:
        state = self.state
        if not PROGRAM_START <= state.pc <= len(self.memory) - INSTRUCTION_SIZE:
            raise ProgramCounterError(
                f"pc={state.pc:#05x} outside program area "
                f"{PROGRAM_START:#05x}-{len(self.memory) - INSTRUCTION_SIZE:#05x}")
        opcode = self.memory.load16(state.pc)
        state.opcode = opcode
        instruction = self._decode(opcode)

        if instruction is None:
            self.unknown_opcodes += 1
            debug_log("cpu", "unknown opcode=%04x pc=%03x skipped", opcode, state.pc)
            state.pc += INSTRUCTION_SIZE
            return None

        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")

        next_pc = handler(Operands.decode(opcode))
        if debug_enabled("cpu"):
            debug_log(
                "cpu",
                "pc=%03x opcode=%04x %s next=%s",
                state.pc,
                opcode,
                instruction.mnemonic,
                "wait" if next_pc is None else f"{next_pc:03x}",
            )
        if next_pc is None:
            self.waiting_for_key = True
            return None
        self.waiting_for_key = False
        state.pc = next_pc
        return instruction

    def _decode(self, opcode: int) -> Instruction | None:
        return self.instruction_table.get(dispatch_key(opcode))

    # ------------------------------------------------------------------
    # Helpers

    @property
    def _next(self) -> int:
        return self.state.pc + INSTRUCTION_SIZE

    def _skip_if(self, condition: bool) -> int:
        return self.state.pc + (2 * INSTRUCTION_SIZE if condition else INSTRUCTION_SIZE)

    def _set_flag(self, value: int) -> None:
        self.state.v[FLAG_REGISTER] = value

    # ------------------------------------------------------------------
    # Control flow

    def op_cls(self, _: Operands) -> int:
        self.display.clear()
        return self._next

    def op_ret(self, _: Operands) -> int:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError(f"return with empty stack at pc={state.pc:#05x}")
        state.sp -= 1
        return state.stack[state.sp] + INSTRUCTION_SIZE

    def op_jp(self, ops: Operands) -> int:
        return ops.nnn

    def op_jp_offset(self, ops: Operands) -> int:
        return ops.nnn + self.state.v[0]

    def op_call(self, ops: Operands) -> int:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(f"call depth exceeds {STACK_DEPTH} at pc={state.pc:#05x}")
        state.stack[state.sp] = state.pc
        state.sp += 1
        return ops.nnn

    def op_se_imm(self, ops: Operands) -> int:
        return self._skip_if(self.state.v[ops.x] == ops.nn)

    def op_sne_imm(self, ops: Operands) -> int:
        return self._skip_if(self.state.v[ops.x] != ops.nn)

    def op_se_reg(self, ops: Operands) -> int:
        return self._skip_if(self.state.v[ops.x] == self.state.v[ops.y])

    def op_sne_reg(self, ops: Operands) -> int:
        return self._skip_if(self.state.v[ops.x] != self.state.v[ops.y])

    # ------------------------------------------------------------------
    # Arithmetic and logic

    def op_ld_imm(self, ops: Operands) -> int:
        self.state.v[ops.x] = ops.nn
        return self._next

    def op_add_imm(self, ops: Operands) -> int:
        v = self.state.v
        v[ops.x] = (v[ops.x] + ops.nn) & 0xFF
        return self._next

    def op_ld_reg(self, ops: Operands) -> int:
        v = self.state.v
        v[ops.x] = v[ops.y]
        return self._next

    def op_or(self, ops: Operands) -> int:
        v = self.state.v
        v[ops.x] |= v[ops.y]
        return self._next

    def op_and(self, ops: Operands) -> int:
        v = self.state.v
        v[ops.x] &= v[ops.y]
        return self._next

    def op_xor(self, ops: Operands) -> int:
        v = self.state.v
        v[ops.x] ^= v[ops.y]
        return self._next

    def op_add_reg(self, ops: Operands) -> int:
        v = self.state.v
        total = v[ops.x] + v[ops.y]
        v[ops.x] = total & 0xFF
        self._set_flag(1 if total > 0xFF else 0)
        return self._next

    def op_sub(self, ops: Operands) -> int:
        v = self.state.v
        x, y = v[ops.x], v[ops.y]
        v[ops.x] = (x - y) & 0xFF
        self._set_flag(0 if y > x else 1)
        return self._next

    def op_subn(self, ops: Operands) -> int:
        v = self.state.v
        x, y = v[ops.x], v[ops.y]
        v[ops.x] = (y - x) & 0xFF
        self._set_flag(0 if x > y else 1)
        return self._next

    def op_shr(self, ops: Operands) -> int:
        v = self.state.v
        value = v[ops.x]
        self._set_flag(value & 0x01)
        v[ops.x] = value >> 1
        return self._next

    def op_shl(self, ops: Operands) -> int:
        v = self.state.v
        value = v[ops.x]
        self._set_flag((value >> 7) & 0x01)
        v[ops.x] = (value << 1) & 0xFF
        return self._next

    def op_rnd(self, ops: Operands) -> int:
        self.state.v[ops.x] = (self.random_byte() & 0xFF) & ops.nn
        return self._next

    # ------------------------------------------------------------------
    # Memory and index

    def op_ld_index(self, ops: Operands) -> int:
        self.state.i = ops.nnn
        return self._next

    def op_add_index(self, ops: Operands) -> int:
        state = self.state
        state.i = (state.i + state.v[ops.x]) & 0xFFFF
        return self._next

    def op_ld_font(self, ops: Operands) -> int:
        self.state.i = glyph_address(self.state.v[ops.x])
        return self._next

    def op_bcd(self, ops: Operands) -> int:
        value = self.state.v[ops.x]
        self.memory.store_block(self.state.i, (value // 100, (value // 10) % 10, value % 10))
        return self._next

    def op_store_registers(self, ops: Operands) -> int:
        state = self.state
        self.memory.store_block(state.i, state.v[: ops.x + 1])
        return self._next

    def op_load_registers(self, ops: Operands) -> int:
        state = self.state
        state.v[: ops.x + 1] = self.memory.load_block(state.i, ops.x + 1)
        return self._next

    # ------------------------------------------------------------------
    # Timers, input and drawing

    def op_ld_from_delay(self, ops: Operands) -> int:
        self.state.v[ops.x] = self.timers.delay
        return self._next

    def op_ld_delay(self, ops: Operands) -> int:
        self.timers.set_delay(self.state.v[ops.x])
        return self._next

    def op_ld_sound(self, ops: Operands) -> int:
        self.timers.set_sound(self.state.v[ops.x])
        return self._next

    def op_wait_key(self, ops: Operands) -> int | None:
        key = self.keypad.first_pressed()
        if key is None:
            return None
        self.state.v[ops.x] = key
        return self._next

    def _key_down(self, value: int) -> bool:
        # Values past the last key name no key.
        return value < KEY_COUNT and self.keypad.is_pressed(value)

    def op_skp(self, ops: Operands) -> int:
        return self._skip_if(self._key_down(self.state.v[ops.x]))

    def op_sknp(self, ops: Operands) -> int:
        return self._skip_if(not self._key_down(self.state.v[ops.x]))

    def op_drw(self, ops: Operands) -> int:
        v = self.state.v
        x, y = v[ops.x], v[ops.y]
        rows = self.memory.load_block(self.state.i, ops.n)
        self._set_flag(0)
        if self.display.draw_sprite(x, y, rows):
            self._set_flag(1)
        return self._next
