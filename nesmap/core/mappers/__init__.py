# nesmap mapper variants
"""
Mapper variants and the registry that selects them.

Use :func:`resolve(mapper_id) <registry.resolve>` to obtain the variant for
an iNES mapper number, then call :meth:`Mapper.layout <mapper.Mapper.layout>`.
"""

from nesmap.core.mappers.mapper import BankLayout, FixedWindow, Mapper, layout_banks

from nesmap.core.mappers.mappers_nes import (
    ALL_MAPPERS,
    MapperAxROM,
    MapperCNROM,
    MapperGxROM,
    MapperNROM,
    MapperSxROM,
    MapperUN1ROM180,
    MapperUxROM,
)

from nesmap.core.mappers.registry import DEFAULT_REGISTRY, MapperRegistry, resolve

__all__ = [
    "BankLayout",
    "FixedWindow",
    "Mapper",
    "layout_banks",
    # variants
    "ALL_MAPPERS",
    "MapperAxROM",
    "MapperCNROM",
    "MapperGxROM",
    "MapperNROM",
    "MapperSxROM",
    "MapperUN1ROM180",
    "MapperUxROM",
    # registry
    "DEFAULT_REGISTRY",
    "MapperRegistry",
    "resolve",
]
