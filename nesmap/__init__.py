# nesmap
"""
Static memory maps for bank-switched NES cartridges.

Use :func:`update_memory_map_for_rom` to lay out a :class:`RomImage` and
create its blocks in a :class:`BlockSink`, or :func:`compute_layout` to get
the segment descriptors alone.
"""

from nesmap.core.banks import Bank, partition
from nesmap.core.errors import InvalidLayout, LayoutConflict, LayoutError, UnsupportedMapper
from nesmap.core.mappers import DEFAULT_REGISTRY, Mapper, MapperRegistry, resolve
from nesmap.core.segment import SegmentDescriptor
from nesmap.core.types import AddressSpace, BankKind, BankPin, Permission
from nesmap.shell.services.block_sink import BlockSink, MemoryMapSink, SinkError
from nesmap.shell.services.cancellation import CancellationFlag, CancellationToken, NeverCancelled
from nesmap.shell.services.layout_emitter import EmitResult, EmitStatus, LayoutEmitter
from nesmap.shell.services.memory_map_service import compute_layout, update_memory_map_for_rom
from nesmap.shell.services.rom_image_service import INesHeader, RomImage, RomImageService

__version__ = "1.0.0"

__all__ = [
    # engine
    "Bank",
    "partition",
    "SegmentDescriptor",
    "Mapper",
    "MapperRegistry",
    "DEFAULT_REGISTRY",
    "resolve",
    "AddressSpace",
    "BankKind",
    "BankPin",
    "Permission",
    # errors
    "LayoutError",
    "InvalidLayout",
    "UnsupportedMapper",
    "LayoutConflict",
    # host boundary
    "BlockSink",
    "MemoryMapSink",
    "SinkError",
    "CancellationToken",
    "CancellationFlag",
    "NeverCancelled",
    "LayoutEmitter",
    "EmitResult",
    "EmitStatus",
    "RomImage",
    "INesHeader",
    "RomImageService",
    "compute_layout",
    "update_memory_map_for_rom",
]
