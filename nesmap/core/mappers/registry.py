"""
Mapper registry: iNES mapper number -> mapper variant.

Several mapper numbers describe electrically identical boards (2 and 94,
7 and 34, ...), so every number a variant lists in ``MAPPER_IDS`` resolves
to the same instance.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Type

from nesmap.core.errors import UnsupportedMapper
from nesmap.core.mappers.mapper import Mapper

logger = logging.getLogger(__name__)


class MapperRegistry:
    """Lookup table from mapper number to :class:`Mapper` instance."""

    def __init__(self, mappers: Optional[Iterable[Type[Mapper]]] = None) -> None:
        self._by_id: Dict[int, Mapper] = {}
        for cls in mappers or ():
            self.register(cls())

    def register(self, mapper: Mapper) -> None:
        """Register *mapper* under every id in its ``MAPPER_IDS``.

        Raises:
            ValueError: If the variant lists no ids, or an id is already taken.
        """
        if not mapper.MAPPER_IDS:
            raise ValueError(f"{mapper!r} declares no mapper ids")
        taken = [i for i in mapper.MAPPER_IDS if i in self._by_id]
        if taken:
            raise ValueError(
                f"Mapper ids {taken} already registered to "
                f"{', '.join(sorted({self._by_id[i].NAME for i in taken}))}"
            )
        mapper.PRG.validate()
        mapper.CHR.validate()
        for mapper_id in mapper.MAPPER_IDS:
            self._by_id[mapper_id] = mapper
        logger.debug("Registered %r", mapper)

    def resolve(self, mapper_id: int) -> Mapper:
        """Return the variant for *mapper_id*.

        Raises:
            UnsupportedMapper: If no variant handles *mapper_id*.
        """
        mapper = self._by_id.get(mapper_id)
        if mapper is None:
            raise UnsupportedMapper(mapper_id)
        return mapper

    def supported_ids(self) -> List[int]:
        return sorted(self._by_id)

    def mappers(self) -> List[Mapper]:
        """Distinct registered variants, ordered by their lowest id."""
        seen: Dict[int, Mapper] = {}
        for mapper_id in self.supported_ids():
            mapper = self._by_id[mapper_id]
            seen.setdefault(id(mapper), mapper)
        return list(seen.values())

    def __contains__(self, mapper_id: int) -> bool:
        return mapper_id in self._by_id

    def __repr__(self) -> str:
        return f"MapperRegistry(ids={self.supported_ids()})"


def _default_registry() -> MapperRegistry:
    from nesmap.core.mappers.mappers_nes import ALL_MAPPERS

    return MapperRegistry(ALL_MAPPERS)


DEFAULT_REGISTRY: MapperRegistry = _default_registry()


def resolve(mapper_id: int) -> Mapper:
    """Resolve *mapper_id* against :data:`DEFAULT_REGISTRY`."""
    return DEFAULT_REGISTRY.resolve(mapper_id)
