"""
Bank partitioning for raw PRG / CHR ROM images.

A ROM image is cut into equally sized banks.  The bank size is a property
of the mapper variant, never of the ROM, so the partitioner only checks
the arithmetic::

    bank i  ->  rom[i * bank_size : (i + 1) * bank_size]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from nesmap.core.errors import InvalidLayout
from nesmap.core.types import BankKind


@dataclass(frozen=True)
class Bank:
    """One immutable bank of ROM data."""

    index: int
    kind: BankKind
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Bank({self.kind.name} {self.index}, size=0x{self.size:X})"


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def partition(rom: bytes, bank_size: int, kind: BankKind = BankKind.PRG) -> List[Bank]:
    """Split *rom* into ``len(rom) // bank_size`` banks, in ROM order.

    Args:
        rom:       Raw PRG or CHR ROM bytes (no file header).
        bank_size: Bank size in bytes; must be a positive power of two.
        kind:      Tag stored on every produced :class:`Bank`.

    Raises:
        InvalidLayout: If *bank_size* is not a positive power of two, *rom*
            is empty, or its length is not a multiple of *bank_size*.
    """
    if bank_size <= 0:
        raise InvalidLayout(f"{kind.name} bank size must be positive, got {bank_size}")
    if not is_power_of_two(bank_size):
        raise InvalidLayout(
            f"{kind.name} bank size 0x{bank_size:X} is not a power of two"
        )
    size = len(rom)
    if size == 0:
        raise InvalidLayout(f"{kind.name} ROM is empty")
    remainder = size % bank_size
    if remainder:
        raise InvalidLayout(
            f"{kind.name} ROM size {size} is not a multiple of bank size "
            f"{bank_size} ({size} % {bank_size} = {remainder})"
        )

    rows = np.frombuffer(bytes(rom), dtype=np.uint8).reshape(size // bank_size, bank_size)
    return [Bank(i, kind, row.tobytes()) for i, row in enumerate(rows)]
