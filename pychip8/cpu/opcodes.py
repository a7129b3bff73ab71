"""Opcode metadata and decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Final, Iterable, Mapping, NamedTuple, Optional, Tuple


class Operands(NamedTuple):
    """Fields shared by every CHIP-8 instruction word."""

    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @classmethod
    def decode(cls, opcode: int) -> "Operands":
        return cls(
            x=(opcode >> 8) & 0x0F,
            y=(opcode >> 4) & 0x0F,
            n=opcode & 0x000F,
            nn=opcode & 0x00FF,
            nnn=opcode & 0x0FFF,
        )


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single CHIP-8 opcode pattern."""

    group: int
    selector: int | None
    pattern: str
    mnemonic: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.group <= 0xF:
            raise ValueError(f"group out of range: {self.group}")
        limit = 0xFFF if self.group == 0x0 else 0xFF
        if self.selector is not None and not 0 <= self.selector <= limit:
            raise ValueError(f"selector out of range: {self.selector}")


def _address(opcode: int) -> int:
    return opcode & 0x0FFF


def _low_nibble(opcode: int) -> int:
    return opcode & 0x000F


def _low_byte(opcode: int) -> int:
    return opcode & 0x00FF


SelectorFn = Callable[[int], int]

# Groups that need a second lookup key. Every other group has a single entry
# registered with ``selector=None``.
SELECTORS: Final[Mapping[int, SelectorFn]] = {
    0x0: _address,
    0x5: _low_nibble,
    0x8: _low_nibble,
    0x9: _low_nibble,
    0xE: _low_byte,
    0xF: _low_byte,
}


DispatchKey = Tuple[int, Optional[int]]


class OpcodeTable:
    """Mutable builder for the ``(group, selector)`` dispatch table."""

    def __init__(self) -> None:
        self._table: Dict[DispatchKey, Instruction] = {}

    def register(self, instruction: Instruction) -> None:
        if (instruction.selector is None) != (instruction.group not in SELECTORS):
            raise ValueError(
                f"group {instruction.group:X} selector mismatch for {instruction.pattern}")
        key = (instruction.group, instruction.selector)
        existing = self._table.get(key)
        if existing is not None:
            raise ValueError(
                f"{instruction.pattern} collides with {existing.pattern} ({existing.mnemonic})")
        self._table[key] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Mapping[DispatchKey, Instruction]:
        return dict(self._table)


def build_instruction_table(instructions: Iterable[Instruction]) -> Mapping[DispatchKey, Instruction]:
    """Build the dispatch mapping from ``(group, selector)`` to instructions."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


def dispatch_key(opcode: int) -> DispatchKey:
    group = (opcode >> 12) & 0xF
    selector = SELECTORS.get(group)
    return group, (selector(opcode) if selector is not None else None)


DEFAULT_INSTRUCTIONS: Tuple[Instruction, ...] = (
    Instruction(0x0, 0x000, "0000", "CLS", "op_cls"),
    Instruction(0x0, 0x0E0, "00E0", "CLS", "op_cls"),
    Instruction(0x0, 0x0EE, "00EE", "RET", "op_ret"),
    Instruction(0x1, None, "1NNN", "JP", "op_jp"),
    Instruction(0x2, None, "2NNN", "CALL", "op_call"),
    Instruction(0x3, None, "3XNN", "SE", "op_se_imm"),
    Instruction(0x4, None, "4XNN", "SNE", "op_sne_imm"),
    Instruction(0x5, 0x0, "5XY0", "SE", "op_se_reg"),
    Instruction(0x6, None, "6XNN", "LD", "op_ld_imm"),
    Instruction(0x7, None, "7XNN", "ADD", "op_add_imm"),
    Instruction(0x8, 0x0, "8XY0", "LD", "op_ld_reg"),
    Instruction(0x8, 0x1, "8XY1", "OR", "op_or"),
    Instruction(0x8, 0x2, "8XY2", "AND", "op_and"),
    Instruction(0x8, 0x3, "8XY3", "XOR", "op_xor"),
    Instruction(0x8, 0x4, "8XY4", "ADD", "op_add_reg"),
    Instruction(0x8, 0x5, "8XY5", "SUB", "op_sub"),
    Instruction(0x8, 0x6, "8XY6", "SHR", "op_shr"),
    Instruction(0x8, 0x7, "8XY7", "SUBN", "op_subn"),
    Instruction(0x8, 0xE, "8XYE", "SHL", "op_shl"),
    Instruction(0x9, 0x0, "9XY0", "SNE", "op_sne_reg"),
    Instruction(0xA, None, "ANNN", "LD", "op_ld_index"),
    Instruction(0xB, None, "BNNN", "JP", "op_jp_offset"),
    Instruction(0xC, None, "CXNN", "RND", "op_rnd"),
    Instruction(0xD, None, "DXYN", "DRW", "op_drw"),
    Instruction(0xE, 0x9E, "EX9E", "SKP", "op_skp"),
    Instruction(0xE, 0xA1, "EXA1", "SKNP", "op_sknp"),
    Instruction(0xF, 0x07, "FX07", "LD", "op_ld_from_delay"),
    Instruction(0xF, 0x0A, "FX0A", "LD", "op_wait_key"),
    Instruction(0xF, 0x15, "FX15", "LD", "op_ld_delay"),
    Instruction(0xF, 0x18, "FX18", "LD", "op_ld_sound"),
    Instruction(0xF, 0x1E, "FX1E", "ADD", "op_add_index"),
    Instruction(0xF, 0x29, "FX29", "LD", "op_ld_font"),
    Instruction(0xF, 0x33, "FX33", "LD", "op_bcd"),
    Instruction(0xF, 0x55, "FX55", "LD", "op_store_registers"),
    Instruction(0xF, 0x65, "FX65", "LD", "op_load_registers"),
)


OPCODE_TABLE: Final[Mapping[DispatchKey, Instruction]] = build_instruction_table(DEFAULT_INSTRUCTIONS)


def decode(opcode: int, table: Mapping[DispatchKey, Instruction] = OPCODE_TABLE) -> Instruction | None:
    """Return the instruction matching ``opcode`` or ``None`` when undefined."""

    return table.get(dispatch_key(opcode & 0xFFFF))


__all__ = [
    "Operands",
    "Instruction",
    "OpcodeTable",
    "SELECTORS",
    "DEFAULT_INSTRUCTIONS",
    "OPCODE_TABLE",
    "build_instruction_table",
    "dispatch_key",
    "decode",
]
