"""
Mapper variant base class and the generic bank-switch layout.

Every supported board is described by a :class:`BankLayout` per ROM kind::

    UxROM PRG   $8000-$BFFF   switchable 16 KB bank   (every bank but the last)
                $C000-$FFFF   fixed 16 KB bank        (BankPin.LAST)

    180   PRG   $8000-$BFFF   fixed 16 KB bank        (BankPin.FIRST)
                $C000-$FFFF   switchable 16 KB bank

:func:`layout_banks` turns a partitioned ROM and a :class:`BankLayout` into
segment descriptors.  The switchable window receives one descriptor per
bank that could ever appear there: the primary bank is a normal block and
every other bank is an overlay on the same range.  Fixed windows receive
exactly one non-overlay descriptor each.

Ordering is by start address; within a window the primary bank comes first,
then the overlays in ascending bank order.

Subclasses of :class:`Mapper` only declare their geometry; the algorithm is
shared.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Tuple

from nesmap.core.banks import Bank, is_power_of_two, partition
from nesmap.core.errors import InvalidLayout
from nesmap.core.segment import SegmentDescriptor
from nesmap.core.types import (
    ADDRESS_SPACE_SIZE,
    CHR_RAM,
    CHR_ROM,
    PRG_ROM,
    AddressSpace,
    BankKind,
    BankPin,
    Permission,
)


# ======================================================================
#  Window geometry
# ======================================================================

@dataclass(frozen=True)
class FixedWindow:
    """A window hard-wired to the first or last bank of the ROM."""

    start: int
    pin: BankPin = BankPin.LAST

    def bank_index(self, bank_count: int) -> int:
        return 0 if self.pin == BankPin.FIRST else bank_count - 1


@dataclass(frozen=True)
class BankLayout:
    """Window geometry for one ROM kind.

    Attributes:
        kind:             PRG or CHR.
        bank_size:        Size of one bank and of every window, in bytes.
        switchable_start: Start of the switchable window, or ``None`` when
                          the board has no bank switching for this kind.
        fixed:            Fixed windows, in any order.
        writable:         CHR only -- the character memory is writable.
    """

    kind: BankKind
    bank_size: int
    switchable_start: Optional[int] = None
    fixed: Tuple[FixedWindow, ...] = ()
    writable: bool = False

    @property
    def space(self) -> AddressSpace:
        return AddressSpace.for_kind(self.kind)

    @property
    def permissions(self) -> Permission:
        if self.kind == BankKind.PRG:
            return PRG_ROM
        return CHR_RAM if self.writable else CHR_ROM

    def window_starts(self) -> List[int]:
        starts = [w.start for w in self.fixed]
        if self.switchable_start is not None:
            starts.append(self.switchable_start)
        return sorted(starts)

    def pinned_banks(self, bank_count: int) -> List[int]:
        return sorted({w.bank_index(bank_count) for w in self.fixed})

    def switchable_window_count(self, bank_count: int) -> int:
        """Banks not pinned by a fixed window.

        Zero for a single-bank ROM, whose only bank is also mirrored into the
        switchable window by :func:`layout_banks`.
        """
        return bank_count - len(self.pinned_banks(bank_count))

    def validate(self) -> None:
        """Check the geometry itself, independently of any ROM.

        Raises:
            InvalidLayout: On a bad bank size, an overflowing or overlapping
                window, or a layout with no window at all.
        """
        name = self.kind.name
        if not is_power_of_two(self.bank_size):
            raise InvalidLayout(f"{name} bank size 0x{self.bank_size:X} is not a power of two")
        starts = self.window_starts()
        if not starts:
            raise InvalidLayout(f"{name} layout declares no windows")
        for start in starts:
            if start < 0 or start + self.bank_size > ADDRESS_SPACE_SIZE:
                raise InvalidLayout(
                    f"{name} window 0x{start:04X} + 0x{self.bank_size:X} = "
                    f"0x{start + self.bank_size:X} overflows the 16-bit address space"
                )
        for lo, hi in zip(starts, starts[1:]):
            if lo + self.bank_size > hi:
                raise InvalidLayout(
                    f"{name} windows at 0x{lo:04X} and 0x{hi:04X} overlap "
                    f"(bank size 0x{self.bank_size:X})"
                )


# ======================================================================
#  Layout algorithm
# ======================================================================

def _segment(config: BankLayout, start: int, bank: Bank, is_overlay: bool) -> SegmentDescriptor:
    return SegmentDescriptor(
        start=start,
        length=config.bank_size,
        name=f"{config.kind.name} {bank.index} @ ${start:04X}",
        permissions=config.permissions,
        data=bank.data,
        is_overlay=is_overlay,
        space=config.space,
        bank=bank.index,
        kind=config.kind,
    )


def layout_banks(
    banks: Sequence[Bank],
    config: BankLayout,
    primary: Optional[int] = None,
) -> List[SegmentDescriptor]:
    """Lay out *banks* according to *config*.

    Args:
        banks:   Banks produced by :func:`~nesmap.core.banks.partition`.
        config:  The variant's geometry for this ROM kind.
        primary: ROM bank index shown by default in the switchable window.
                 ``None`` selects the lowest switchable bank.

    Returns:
        Descriptors ordered by ``(start, is_overlay, bank index)``: the first
        descriptor at any address is the default (non-overlay) bank.

    Raises:
        InvalidLayout: On an invalid config, mismatched banks, too few or
            too many banks for the windows, or a *primary* that cannot
            appear in the switchable window.
    """
    config.validate()
    bank_count = len(banks)
    if bank_count < 1:
        raise InvalidLayout(f"{config.kind.name} layout needs at least 1 bank, got 0")
    for bank in banks:
        if bank.kind != config.kind or bank.size != config.bank_size:
            raise InvalidLayout(
                f"{bank!r} does not match {config.kind.name} bank size 0x{config.bank_size:X}"
            )

    pinned = config.pinned_banks(bank_count)
    switchable = [i for i in range(bank_count) if i not in pinned]

    if config.switchable_start is None:
        if primary is not None:
            raise InvalidLayout(
                f"{config.kind.name} layout has no switchable window; "
                f"bank {primary} cannot be the primary bank"
            )
        if switchable:
            raise InvalidLayout(
                f"{bank_count} {config.kind.name} banks do not fit "
                f"{len(config.fixed)} fixed window(s) and no switchable window "
                f"({bank_count} - {len(pinned)} = {len(switchable)} left over)"
            )
    elif not switchable:
        # A single bank fills every window.
        switchable = list(range(bank_count))

    segments: List[SegmentDescriptor] = []

    if config.switchable_start is not None:
        if primary is None:
            primary = switchable[0]
        elif primary not in switchable:
            raise InvalidLayout(
                f"{config.kind.name} bank {primary} cannot be the primary bank: "
                f"the switchable window holds banks {switchable}"
            )
        for index in switchable:
            segments.append(
                _segment(config, config.switchable_start, banks[index], index != primary)
            )

    for window in config.fixed:
        segments.append(_segment(config, window.start, banks[window.bank_index(bank_count)], False))

    segments.sort(key=lambda s: (s.start, s.is_overlay, s.bank))
    return segments


# ======================================================================
#  Mapper base class
# ======================================================================

class Mapper:
    """Base class for every mapper variant.

    Subclasses declare ``NAME``, ``MAPPER_IDS`` and the ``PRG`` / ``CHR``
    geometry.  Instances hold no state, so one instance can serve every
    mapper number that shares the hardware.
    """

    NAME: ClassVar[str] = "?"
    MAPPER_IDS: ClassVar[Tuple[int, ...]] = ()
    PRG: ClassVar[BankLayout]
    CHR: ClassVar[BankLayout]

    def layout(
        self,
        prg_rom: bytes,
        chr_rom: bytes = b"",
        primary_prg: Optional[int] = None,
        primary_chr: Optional[int] = None,
    ) -> List[SegmentDescriptor]:
        """Compute the static layout for a ROM on this board.

        PRG descriptors (CPU space) come first, then CHR descriptors (PPU
        space).  An empty *chr_rom* means the board carries CHR RAM, which
        has no ROM contents to lay out.
        """
        segments = layout_banks(
            partition(prg_rom, self.PRG.bank_size, BankKind.PRG), self.PRG, primary_prg
        )
        if chr_rom:
            segments += layout_banks(
                partition(chr_rom, self.CHR.bank_size, BankKind.CHR), self.CHR, primary_chr
            )
        return segments

    def __repr__(self) -> str:
        ids = ", ".join(str(i) for i in self.MAPPER_IDS)
        return f"{self.__class__.__name__}({self.NAME}, ids=[{ids}])"
