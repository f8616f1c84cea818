"""
Core enumerations and constants for nesmap.

BankKind, BankPin, Permission and AddressSpace are shared by the bank
partitioner, the mapper variants and the layout emitter.
"""

from enum import IntEnum, IntFlag


class BankKind(IntEnum):
    PRG = 0
    CHR = 1


class BankPin(IntEnum):
    """Which ROM bank a fixed window is hard-wired to."""

    FIRST = 0
    LAST = 1


class AddressSpace(IntEnum):
    CPU = 0  # PRG windows, $8000-$FFFF
    PPU = 1  # CHR windows, $0000-$1FFF

    @staticmethod
    def for_kind(kind):
        return AddressSpace.CPU if kind == BankKind.PRG else AddressSpace.PPU


class Permission(IntFlag):
    NONE = 0
    READ = 1 << 0
    WRITE = 1 << 1
    EXECUTE = 1 << 2

    def flags(self) -> str:
        """Return an ``rwx``-style string, e.g. ``"R-X"``."""
        return (
            ("R" if self & Permission.READ else "-")
            + ("W" if self & Permission.WRITE else "-")
            + ("X" if self & Permission.EXECUTE else "-")
        )


PRG_ROM = Permission.READ | Permission.EXECUTE
CHR_ROM = Permission.READ
CHR_RAM = Permission.READ | Permission.WRITE

# Both the CPU and the PPU see a 16-bit address bus.
ADDRESS_SPACE_SIZE: int = 0x10000

# CPU window the cartridge PRG ROM is decoded into.
CPU_ROM_START: int = 0x8000
CPU_ROM_END: int = 0xFFFF

# Pattern-table window on the PPU side.
PPU_PATTERN_START: int = 0x0000
PPU_PATTERN_SIZE: int = 0x2000
