"""
Cooperative cancellation tokens.

The layout emitter polls :meth:`CancellationToken.is_cancelled` once per
segment boundary, never in the middle of creating a block.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Optional


class CancellationToken(ABC):
    """Interface polled by the emitter between segments."""

    @abstractmethod
    def is_cancelled(self) -> bool:
        ...


class NeverCancelled(CancellationToken):
    """A token that is never cancelled.  Used when the caller passes none."""

    _instance: Optional[NeverCancelled] = None

    def __new__(cls) -> NeverCancelled:
        """NeverCancelled is a singleton -- every call returns the same instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def is_cancelled(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NeverCancelled()"


class CancellationFlag(CancellationToken):
    """A token that another thread (typically a UI) can cancel."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationFlag(cancelled={self.is_cancelled()})"
