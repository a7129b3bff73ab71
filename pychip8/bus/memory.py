"""Memory for the CHIP-8 virtual machine.

The machine sees a flat 4 KiB byte-addressable space. The first 80 bytes hold
the built-in hex font, programs are loaded at ``0x200``. Every access is
checked against the bounds of the array; out-of-range reads and writes raise
:class:`MemoryAccessError` instead of wrapping.
"""

from __future__ import annotations

from typing import Iterable

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


class MemoryAccessError(Exception):
    """Raised when an address or block falls outside the memory array."""

    def __init__(self, address: int, length: int = 1, size: int = MEMORY_SIZE) -> None:
        if length == 1:
            message = f"address {address:#05x} outside memory 0x000-{size - 1:#05x}"
        else:
            message = (
                f"block {address:#05x}+{length} outside memory 0x000-{size - 1:#05x}"
            )
        super().__init__(message)
        self.address = address
        self.length = length


class Memory:
    """Fixed-size byte-addressable memory."""

    def __init__(self, length: int = MEMORY_SIZE) -> None:
        if length <= 0:
            raise ValueError("memory must have a positive length")
        self._data = bytearray(length)

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, address: int, length: int = 1) -> None:
        if address < 0 or length < 0 or address + length > len(self._data):
            raise MemoryAccessError(address, length, len(self._data))

    def load8(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def load_block(self, address: int, length: int) -> bytes:
        self._check(address, length)
        return bytes(self._data[address : address + length])

    def store_block(self, address: int, data: Iterable[int]) -> None:
        """Write ``data`` at ``address``; nothing is written unless all of it fits."""

        payload = bytes(value & 0xFF for value in data)
        self._check(address, len(payload))
        self._data[address : address + len(payload)] = payload

    def clear(self) -> None:
        self._data[:] = bytes(len(self._data))

    def snapshot(self) -> bytes:
        return bytes(self._data)
