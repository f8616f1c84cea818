"""
Layout emitter: hands segment descriptors to a :class:`BlockSink`.

Descriptors are created strictly in the order the mapper produced them,
because a host can only mark a block as an overlay once the primary block
for that range exists.  Each block is created inside its own sink
transaction, so a single block is either fully created or not at all; the
layout as a whole is not atomic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from nesmap.core.errors import LayoutConflict
from nesmap.core.segment import SegmentDescriptor
from nesmap.shell.services.block_sink import BlockSink, SinkError
from nesmap.shell.services.cancellation import CancellationToken, NeverCancelled

logger = logging.getLogger(__name__)


class EmitStatus(Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class EmitResult:
    """Outcome of an emission that did not fail.

    Attributes:
        status:  COMPLETED, or CANCELLED when the token fired.
        created: Number of blocks created before returning.
        total:   Number of descriptors that were offered.
    """

    status: EmitStatus
    created: int
    total: int

    @property
    def cancelled(self) -> bool:
        return self.status == EmitStatus.CANCELLED


class LayoutEmitter:
    """Create blocks for a laid-out ROM."""

    @staticmethod
    def emit(
        segments: Sequence[SegmentDescriptor],
        sink: BlockSink,
        progress: Optional[CancellationToken] = None,
    ) -> EmitResult:
        """Create one block per descriptor in *sink*.

        Parameters:
            segments: Descriptors in layout order.
            sink:     Host receiving the blocks.
            progress: Polled before each descriptor; ``None`` never cancels.

        Returns:
            An :class:`EmitResult`.  Cancellation is reported here, not raised.

        Raises:
            LayoutConflict: If the sink rejects a block.  Blocks created
                before the rejected one are left in place.
        """
        token = progress if progress is not None else NeverCancelled()
        total = len(segments)

        for created, segment in enumerate(segments):
            if token.is_cancelled():
                logger.info("Layout cancelled after %d of %d block(s)", created, total)
                return EmitResult(EmitStatus.CANCELLED, created, total)

            try:
                with sink.transaction(f"Create {segment.name}"):
                    sink.create(
                        segment.start,
                        segment.length,
                        segment.name,
                        segment.permissions,
                        segment.data,
                        segment.is_overlay,
                        space=segment.space,
                    )
            except SinkError as exc:
                logger.warning("Block %r rejected: %s", segment.name, exc)
                raise LayoutConflict(
                    segment.space, segment.start, segment.end, segment.name, str(exc)
                ) from exc

            logger.debug("Created %r", segment)

        logger.info("Created %d block(s)", total)
        return EmitResult(EmitStatus.COMPLETED, total, total)
