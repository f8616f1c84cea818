"""
Segment descriptors -- the output of a mapper layout.

A :class:`SegmentDescriptor` describes one block the host should create:
where it lives, what it may do, which bytes back it, and whether it is an
*overlay* (an alternate view of an address range already claimed by an
earlier, primary descriptor).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from nesmap.core.errors import InvalidLayout
from nesmap.core.types import ADDRESS_SPACE_SIZE, AddressSpace, BankKind, Permission


@dataclass(frozen=True)
class SegmentDescriptor:
    """An immutable block request.

    Attributes:
        start:       First address of the block.
        length:      Block length in bytes; always ``len(data)``.
        name:        Block name, unique within *space*.
        permissions: :class:`Permission` flags.
        data:        Backing bytes.
        is_overlay:  True when the block shares its range with a primary
                     descriptor emitted earlier.
        space:       CPU (PRG) or PPU (CHR) address space.
        bank:        ROM bank index backing the block, if any.
        kind:        PRG or CHR.
    """

    start: int
    length: int
    name: str
    permissions: Permission
    data: bytes
    is_overlay: bool = False
    space: AddressSpace = AddressSpace.CPU
    bank: Optional[int] = None
    kind: BankKind = BankKind.PRG

    def __post_init__(self) -> None:
        if not 0 <= self.start < ADDRESS_SPACE_SIZE:
            raise InvalidLayout(f"{self.name}: start address 0x{self.start:X} out of range")
        if self.length <= 0:
            raise InvalidLayout(f"{self.name}: length must be positive, got {self.length}")
        if len(self.data) != self.length:
            raise InvalidLayout(
                f"{self.name}: length 0x{self.length:X} != len(data) 0x{len(self.data):X}"
            )
        if self.start + self.length > ADDRESS_SPACE_SIZE:
            raise InvalidLayout(
                f"{self.name}: 0x{self.start:04X} + 0x{self.length:X} = "
                f"0x{self.start + self.length:X} overflows the 16-bit address space"
            )

    @property
    def end(self) -> int:
        """Inclusive last address."""
        return self.start + self.length - 1

    def overlaps(self, other: SegmentDescriptor) -> bool:
        return (
            self.space == other.space
            and self.start <= other.end
            and other.start <= self.end
        )

    def __repr__(self) -> str:
        return (
            f"SegmentDescriptor({self.name!r}, {self.space.name} "
            f"${self.start:04X}-${self.end:04X}, {self.permissions.flags()}"
            f"{', overlay' if self.is_overlay else ''})"
        )
