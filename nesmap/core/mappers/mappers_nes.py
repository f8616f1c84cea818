"""
NES cartridge boards supported by nesmap.

Every board maps PRG ROM into the CPU window $8000-$FFFF and CHR ROM (when
present) into the PPU pattern tables $0000-$1FFF.  Only the geometry
differs between boards.

Mappers
-------
MapperNROM       -- 0         no switching; 16 KB images mirror at $C000.
MapperSxROM      -- 1, 155    MMC1 in its power-on PRG mode (last bank fixed).
MapperUxROM      -- 2, 94     16 KB switchable at $8000, last bank at $C000.
MapperUN1ROM180  -- 180       mirror image of UxROM: first bank fixed at $8000.
MapperCNROM      -- 3, 185    NROM PRG, 8 KB switchable CHR.
MapperAxROM      -- 7, 34     32 KB switchable PRG.
MapperGxROM      -- 11, 66, 140   32 KB switchable PRG, 8 KB switchable CHR.
"""

from __future__ import annotations

from nesmap.core.mappers.mapper import BankLayout, FixedWindow, Mapper
from nesmap.core.types import BankKind, BankPin


_PRG_16K = 0x4000
_PRG_32K = 0x8000
_CHR_8K = 0x2000

# Layouts shared by several boards.
_PRG_NROM = BankLayout(
    BankKind.PRG,
    _PRG_16K,
    fixed=(FixedWindow(0x8000, BankPin.FIRST), FixedWindow(0xC000, BankPin.LAST)),
)
_PRG_FIXED_LAST = BankLayout(
    BankKind.PRG, _PRG_16K, switchable_start=0x8000, fixed=(FixedWindow(0xC000, BankPin.LAST),)
)
_PRG_SWITCH_32K = BankLayout(BankKind.PRG, _PRG_32K, switchable_start=0x8000)
_CHR_FIXED = BankLayout(BankKind.CHR, _CHR_8K, fixed=(FixedWindow(0x0000, BankPin.FIRST),))
_CHR_SWITCH = BankLayout(BankKind.CHR, _CHR_8K, switchable_start=0x0000)


class MapperNROM(Mapper):
    """NROM-128 / NROM-256.

    A 16 KB image appears at both $8000 and $C000; a 32 KB image fills the
    window.  Larger images are invalid.
    """

    NAME = "NROM"
    MAPPER_IDS = (0,)
    PRG = _PRG_NROM
    CHR = _CHR_FIXED


class MapperSxROM(Mapper):
    """MMC1 boards.

    Only the power-on PRG mode is modelled: $8000 switchable, $C000 fixed to
    the last bank.  CHR is treated as a single switchable 8 KB window.
    """

    NAME = "SxROM"
    MAPPER_IDS = (1, 155)
    PRG = _PRG_FIXED_LAST
    CHR = _CHR_SWITCH


class MapperUxROM(Mapper):
    """UNROM / UOROM and compatibles."""

    NAME = "UxROM"
    MAPPER_IDS = (2, 94)
    PRG = _PRG_FIXED_LAST
    CHR = _CHR_FIXED


class MapperUN1ROM180(Mapper):
    """Mapper 180: UxROM with the fixed and switchable windows swapped."""

    NAME = "UNROM-180"
    MAPPER_IDS = (180,)
    PRG = BankLayout(
        BankKind.PRG, _PRG_16K, switchable_start=0xC000, fixed=(FixedWindow(0x8000, BankPin.FIRST),)
    )
    CHR = _CHR_FIXED


class MapperCNROM(Mapper):
    NAME = "CNROM"
    MAPPER_IDS = (3, 185)
    PRG = _PRG_NROM
    CHR = _CHR_SWITCH


class MapperAxROM(Mapper):
    """AxROM and BNROM: the whole PRG window switches in 32 KB units."""

    NAME = "AxROM"
    MAPPER_IDS = (7, 34)
    PRG = _PRG_SWITCH_32K
    CHR = _CHR_FIXED


class MapperGxROM(Mapper):
    NAME = "GxROM"
    MAPPER_IDS = (11, 66, 140)
    PRG = _PRG_SWITCH_32K
    CHR = _CHR_SWITCH


ALL_MAPPERS = (
    MapperNROM,
    MapperSxROM,
    MapperUxROM,
    MapperCNROM,
    MapperAxROM,
    MapperGxROM,
    MapperUN1ROM180,
)
