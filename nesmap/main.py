#!/usr/bin/env python3
"""
nesmap -- static memory maps for bank-switched NES cartridges.

Reads an iNES file, lays out every PRG / CHR bank its mapper could show,
creates the blocks in an in-memory host and prints the resulting map.

Usage examples::

    # Print the layout of a ROM
    nesmap roms/game.nes

    # Force the mapper and pick the default bank shown at $8000
    nesmap roms/game.nes --mapper 2 --primary-bank 5

    # List supported mapper numbers
    nesmap --list-mappers
"""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from dataclasses import replace
from typing import Optional

from nesmap.core.errors import LayoutError
from nesmap.core.mappers.registry import DEFAULT_REGISTRY
from nesmap.shell.services.block_sink import MemoryMapSink
from nesmap.shell.services.cancellation import CancellationFlag
from nesmap.shell.services.memory_map_service import update_memory_map_for_rom
from nesmap.shell.services.rom_image_service import INesHeader, RomImage, RomImageService


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="nesmap",
        description=(
            "Print the static memory map of a bank-switched NES cartridge: "
            "every bank that can appear in each CPU / PPU window."
        ),
    )

    parser.add_argument(
        "rom",
        nargs="?",
        help="Path to the ROM file (.nes, iNES or NES 2.0)",
    )

    parser.add_argument(
        "--mapper", "-m",
        type=int,
        default=None,
        metavar="N",
        help="Override the iNES mapper number from the header.",
    )

    parser.add_argument(
        "--primary-bank", "-p",
        type=int,
        default=None,
        metavar="BANK",
        help=(
            "PRG bank shown by default in the switchable window.  "
            "Default: the lowest switchable bank."
        ),
    )

    parser.add_argument(
        "--list-mappers",
        action="store_true",
        default=False,
        help="List supported mapper numbers and exit.",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def _print_mappers() -> None:
    print("Supported mappers")
    print("=" * 40)
    for mapper in DEFAULT_REGISTRY.mappers():
        ids = ", ".join(str(i) for i in mapper.MAPPER_IDS)
        print(f"  {mapper.NAME:12s}: {ids}")
    print("=" * 40)


def _print_layout(rom: RomImage, header: INesHeader, sink: MemoryMapSink) -> None:
    print(f"Mapper {rom.mapper}" + (f".{rom.submapper}" if header.is_nes2 else ""))
    print(f"  PRG ROM : {len(rom.prg_rom) // 1024} KB")
    print(f"  CHR ROM : {len(rom.chr_rom) // 1024} KB" if rom.chr_rom else "  CHR RAM")
    print("=" * 60)
    for block in sink.blocks:
        overlay = "overlay" if block.is_overlay else ""
        print(
            f"  {block.space.name:3s} ${block.start:04X}-${block.end:04X}  "
            f"{block.permissions.flags()}  {block.name:20s} {overlay}"
        )
    print("=" * 60)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Returns
    -------
    int
        0 on success, 1 on error, 130 when interrupted.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    logger = logging.getLogger("nesmap.main")

    if args.list_mappers:
        _print_mappers()
        return 0

    if args.rom is None:
        parser.error("a ROM path is required")

    rom_path: str = os.path.expanduser(args.rom)
    try:
        rom, header = RomImageService.read(rom_path)
    except FileNotFoundError:
        print(f"Error: ROM file not found: {rom_path}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(f"Error reading ROM: {exc}", file=sys.stderr)
        return 1

    if args.mapper is not None:
        logger.info("Mapper override: %d -> %d", rom.mapper, args.mapper)
        rom = replace(rom, mapper=args.mapper)

    sink = MemoryMapSink()
    token = CancellationFlag()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())
    try:
        result = update_memory_map_for_rom(rom, sink, token, primary_prg=args.primary_bank)
    except LayoutError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous)

    if result.cancelled:
        print(f"Cancelled after {result.created} of {result.total} blocks", file=sys.stderr)
        return 130

    _print_layout(rom, header, sink)
    return 0


if __name__ == "__main__":
    sys.exit(main())
