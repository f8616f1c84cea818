"""
Block sinks -- the host side of the layout emitter.

:class:`BlockSink` is the narrow interface nesmap needs from an analysis
host: open a transaction and create one named, permissioned block.  Host
adapters translate their own failures (locking, name clashes, overlaps,
address overflow) into :class:`SinkError`.

:class:`MemoryMapSink` is a self-contained host used by the command line
front end and the tests.  It keeps every block in memory and enforces the
rules a real program database would:

* blocks can only be created inside a transaction, by the thread that
  opened it, and only one transaction may be open at a time;
* names are unique per address space;
* a non-overlay block may not overlap another non-overlay block;
* a transaction that exits with an exception rolls back its blocks.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from nesmap.core.types import ADDRESS_SPACE_SIZE, AddressSpace, Permission

logger = logging.getLogger(__name__)


class SinkError(Exception):
    """The host refused a block or could not open a transaction."""


class BlockSink(ABC):
    """Interface for hosts that receive laid-out blocks."""

    @contextmanager
    def transaction(self, description: str) -> Iterator[None]:
        """Scope for creating one block.

        The default implementation needs no resource.  Hosts that lock their
        database override this and must release the lock on every exit
        path.
        """
        yield

    @abstractmethod
    def create(
        self,
        start: int,
        length: int,
        name: str,
        permissions: Permission,
        data: bytes,
        is_overlay: bool,
        space: AddressSpace = AddressSpace.CPU,
    ) -> None:
        """Create one block.

        Raises:
            SinkError: On overlap, address overflow, name clash or a
                locking failure.
        """
        ...


# ---------------------------------------------------------------------------
# In-memory host
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MemoryBlock:
    """A block created in a :class:`MemoryMapSink`."""

    space: AddressSpace
    start: int
    name: str
    permissions: Permission
    data: bytes
    is_overlay: bool

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        return self.start + len(self.data) - 1

    def contains(self, space: AddressSpace, address: int) -> bool:
        return space == self.space and self.start <= address <= self.end


class MemoryMapSink(BlockSink):
    """Reference host that keeps blocks in a list."""

    def __init__(self) -> None:
        self._blocks: List[MemoryBlock] = []
        self._lock = threading.Lock()
        self._owner: Optional[int] = None  # thread holding the transaction

    # ------------------------------------------------------------------
    # BlockSink interface
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self, description: str) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise SinkError(f"{description}: address space is locked by another transaction")
        mark = len(self._blocks)
        self._owner = threading.get_ident()
        try:
            yield
        except BaseException:
            rolled_back = self._blocks[mark:]
            del self._blocks[mark:]
            if rolled_back:
                logger.debug("%s: rolled back %d block(s)", description, len(rolled_back))
            raise
        finally:
            self._owner = None
            self._lock.release()

    def create(
        self,
        start: int,
        length: int,
        name: str,
        permissions: Permission,
        data: bytes,
        is_overlay: bool,
        space: AddressSpace = AddressSpace.CPU,
    ) -> None:
        if self._owner != threading.get_ident():
            raise SinkError(f"{name}: blocks can only be created inside a transaction")
        if length != len(data):
            raise SinkError(f"{name}: length 0x{length:X} != len(data) 0x{len(data):X}")
        if length <= 0 or start < 0 or start + length > ADDRESS_SPACE_SIZE:
            raise SinkError(f"{name}: 0x{start:X} + 0x{length:X} is outside the address space")
        for block in self._blocks:
            if block.space != space:
                continue
            if block.name == name:
                raise SinkError(f"duplicate block name {name!r}")
            overlapping = block.start <= start + length - 1 and start <= block.end
            if overlapping and not is_overlay and not block.is_overlay:
                raise SinkError(
                    f"{name}: overlaps {block.name!r} at ${block.start:04X}-${block.end:04X}"
                )
        self._blocks.append(
            MemoryBlock(space, start, name, Permission(permissions), bytes(data), is_overlay)
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def blocks(self) -> List[MemoryBlock]:
        """Blocks in creation order."""
        return list(self._blocks)

    def blocks_at(self, space: AddressSpace, address: int) -> List[MemoryBlock]:
        """Every block covering *address*: the primary first, then overlays."""
        return [b for b in self._blocks if b.contains(space, address)]

    def read(self, space: AddressSpace, address: int) -> Optional[int]:
        """Read a byte through the non-overlay block at *address*, if any."""
        for block in self._blocks:
            if not block.is_overlay and block.contains(space, address):
                return block.data[address - block.start]
        return None

    def __len__(self) -> int:
        return len(self._blocks)

    def __repr__(self) -> str:
        return f"MemoryMapSink(blocks={len(self._blocks)})"
