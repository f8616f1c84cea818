"""
Error taxonomy for the mapper layout engine.

All failures raised by nesmap derive from :class:`LayoutError`:

* :class:`InvalidLayout`     -- malformed bank geometry (ROM size, bank size,
                                bank count, window overflow).
* :class:`UnsupportedMapper` -- no variant registered for a mapper number.
* :class:`LayoutConflict`    -- the host refused to create a block.

Cancellation is *not* an error; see
:class:`~nesmap.shell.services.layout_emitter.EmitStatus`.
"""

from __future__ import annotations

from typing import Optional

from nesmap.core.types import AddressSpace


class LayoutError(Exception):
    """Base class for every nesmap failure."""


class InvalidLayout(LayoutError, ValueError):
    """Bank geometry that cannot be laid out.

    The message always states the arithmetic that failed so the analyst can
    see which size or count was wrong.
    """


class UnsupportedMapper(LayoutError, LookupError):
    """No mapper variant is registered for *mapper_id*."""

    def __init__(self, mapper_id: int) -> None:
        super().__init__(f"Unsupported mapper: iNES mapper {mapper_id}")
        self.mapper_id = mapper_id


class LayoutConflict(LayoutError):
    """The host rejected the block for ``[start, end]`` in *space*."""

    def __init__(
        self,
        space: AddressSpace,
        start: int,
        end: int,
        name: str,
        reason: Optional[str] = None,
    ) -> None:
        message = f"Cannot create {name!r} at {space.name} ${start:04X}-${end:04X}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.space = space
        self.start = start
        self.end = end
        self.name = name
        self.reason = reason
