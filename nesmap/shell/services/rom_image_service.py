"""
ROM image loading for nesmap.

Responsibilities:
  - Define :class:`RomImage`, the PRG / CHR / mapper triple the layout
    engine consumes.
  - Read iNES and NES 2.0 files, skipping the 16-byte header and any
    512-byte trainer.
  - Decode the mapper number, including NES 2.0 extended bits and
    submapper, and ignore "DiskDude!"-style junk in archaic headers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# ---------------------------------------------------------------------------
# iNES header constants
# ---------------------------------------------------------------------------

_INES_HEADER_SIZE: int = 16
_INES_MAGIC: bytes = b"NES\x1a"
_TRAINER_SIZE: int = 512

_PRG_UNIT: int = 0x4000  # 16 KB
_CHR_UNIT: int = 0x2000  # 8 KB

# Flags 6
_F6_VERTICAL: int = 0x01
_F6_BATTERY: int = 0x02
_F6_TRAINER: int = 0x04
_F6_FOUR_SCREEN: int = 0x08

# Flags 7: bits 2-3 == 0b10 identify NES 2.0
_F7_NES2_MASK: int = 0x0C
_F7_NES2_ID: int = 0x08


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RomImage:
    """Raw cartridge contents handed to the layout engine.

    An empty *chr_rom* means the board uses CHR RAM.
    """

    prg_rom: bytes
    chr_rom: bytes
    mapper: int
    submapper: int = 0

    def __repr__(self) -> str:
        return (
            f"RomImage(mapper={self.mapper}, prg=0x{len(self.prg_rom):X}, "
            f"chr=0x{len(self.chr_rom):X})"
        )


@dataclass(frozen=True)
class INesHeader:
    """Decoded contents of an iNES / NES 2.0 header."""

    mapper: int
    submapper: int
    prg_size: int
    chr_size: int
    is_nes2: bool
    has_trainer: bool
    has_battery: bool
    vertical_mirroring: bool
    four_screen: bool


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class RomImageService:
    """Static helpers for reading iNES files."""

    @staticmethod
    def read(path: str) -> Tuple[RomImage, INesHeader]:
        """Read an iNES file from *path*.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file is not a valid iNES image.
        """
        with open(path, "rb") as fh:
            data = fh.read()
        return RomImageService.parse(data, source=path)

    @staticmethod
    def parse(data: bytes, source: str = "<bytes>") -> Tuple[RomImage, INesHeader]:
        """Split an iNES image into a :class:`RomImage` and its header.

        Raises:
            ValueError: On a missing magic number, an image without PRG ROM,
                or a file shorter than its header claims.
        """
        if len(data) < _INES_HEADER_SIZE or not data.startswith(_INES_MAGIC):
            raise ValueError(f"{source} is not an iNES ROM")

        header = RomImageService.parse_header(data[:_INES_HEADER_SIZE])
        if header.prg_size == 0:
            raise ValueError(f"{source}: ROM has no PRG memory")

        offset = _INES_HEADER_SIZE + (_TRAINER_SIZE if header.has_trainer else 0)
        expected = offset + header.prg_size + header.chr_size
        if len(data) < expected:
            raise ValueError(
                f"{source}: truncated ROM, header needs {expected} bytes, file has {len(data)}"
            )

        prg = bytes(data[offset:offset + header.prg_size])
        offset += header.prg_size
        chr_rom = bytes(data[offset:offset + header.chr_size])

        return RomImage(prg, chr_rom, header.mapper, header.submapper), header

    @staticmethod
    def parse_header(raw: bytes) -> INesHeader:
        """Decode the 16-byte iNES header *raw*."""
        header = bytearray(raw[:_INES_HEADER_SIZE])
        is_nes2 = (header[7] & _F7_NES2_MASK) == _F7_NES2_ID
        if not is_nes2 and any(header[12:16]):
            # Archaic header with a ripper's signature in the padding.
            header[7:] = bytes(9)

        mapper = (header[6] >> 4) | (header[7] & 0xF0)
        submapper = 0
        if is_nes2:
            mapper |= (header[8] & 0x0F) << 8
            submapper = header[8] >> 4
            prg_size = RomImageService._nes2_size(header[4], header[9] & 0x0F, _PRG_UNIT)
            chr_size = RomImageService._nes2_size(header[5], header[9] >> 4, _CHR_UNIT)
        else:
            prg_size = header[4] * _PRG_UNIT
            chr_size = header[5] * _CHR_UNIT

        return INesHeader(
            mapper=mapper,
            submapper=submapper,
            prg_size=prg_size,
            chr_size=chr_size,
            is_nes2=is_nes2,
            has_trainer=bool(header[6] & _F6_TRAINER),
            has_battery=bool(header[6] & _F6_BATTERY),
            vertical_mirroring=bool(header[6] & _F6_VERTICAL),
            four_screen=bool(header[6] & _F6_FOUR_SCREEN),
        )

    # -- private helpers ---------------------------------------------------

    @staticmethod
    def _nes2_size(lsb: int, msb: int, unit: int) -> int:
        """Decode a NES 2.0 ROM size field.

        An MSB nibble of 0xF selects the exponent-multiplier form
        ``2**E * (MM*2 + 1)`` with ``lsb = EEEEEEMM``.
        """
        if msb == 0x0F:
            return (1 << (lsb >> 2)) * ((lsb & 0x03) * 2 + 1)
        return ((msb << 8) | lsb) * unit
