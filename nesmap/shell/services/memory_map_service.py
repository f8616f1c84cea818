"""
Host entry point: lay out a ROM and create its blocks.

Typical usage::

    rom, _ = RomImageService.read("game.nes")
    result = update_memory_map_for_rom(rom, sink, token)
    if result.cancelled:
        ...
"""

from __future__ import annotations

import logging
from typing import List, Optional

from nesmap.core.mappers.registry import DEFAULT_REGISTRY, MapperRegistry
from nesmap.core.segment import SegmentDescriptor
from nesmap.shell.services.block_sink import BlockSink
from nesmap.shell.services.cancellation import CancellationToken
from nesmap.shell.services.layout_emitter import EmitResult, LayoutEmitter
from nesmap.shell.services.rom_image_service import RomImage

logger = logging.getLogger(__name__)


class MemoryMapService:
    """Resolve, partition, lay out and emit."""

    @staticmethod
    def compute_layout(
        rom: RomImage,
        registry: Optional[MapperRegistry] = None,
        primary_prg: Optional[int] = None,
        primary_chr: Optional[int] = None,
    ) -> List[SegmentDescriptor]:
        """Return the static layout of *rom* without touching a host.

        Raises:
            UnsupportedMapper: If *rom.mapper* has no variant in *registry*.
            InvalidLayout: If the ROM does not fit the variant's geometry.
        """
        mapper = (registry or DEFAULT_REGISTRY).resolve(rom.mapper)
        logger.info("Mapper %d: %s", rom.mapper, mapper.NAME)
        segments = mapper.layout(rom.prg_rom, rom.chr_rom, primary_prg, primary_chr)
        overlays = sum(1 for s in segments if s.is_overlay)
        logger.info(
            "Layout: %d segment(s), %d overlay(s)", len(segments), overlays
        )
        return segments

    @staticmethod
    def update_memory_map_for_rom(
        rom: RomImage,
        sink: BlockSink,
        progress: Optional[CancellationToken] = None,
        registry: Optional[MapperRegistry] = None,
        primary_prg: Optional[int] = None,
        primary_chr: Optional[int] = None,
    ) -> EmitResult:
        """Lay out *rom* and create its blocks in *sink*.

        The layout is computed in full before the first block is created,
        so geometry errors never leave a partial layout behind.

        Raises:
            UnsupportedMapper, InvalidLayout: Before anything is emitted.
            LayoutConflict: If *sink* rejects a block.
        """
        segments = MemoryMapService.compute_layout(rom, registry, primary_prg, primary_chr)
        return LayoutEmitter.emit(segments, sink, progress)


compute_layout = MemoryMapService.compute_layout
update_memory_map_for_rom = MemoryMapService.update_memory_map_for_rom
