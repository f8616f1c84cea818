"""Shared fixtures for the nesmap test suite."""

from contextlib import contextmanager

import pytest

from nesmap.core.types import AddressSpace
from nesmap.shell.services.block_sink import BlockSink, SinkError


def _make_rom(bank_count: int, bank_size: int) -> bytes:
    """A ROM whose every byte holds its bank index."""
    return b"".join(bytes([i & 0xFF]) * bank_size for i in range(bank_count))


def _make_ines(prg: bytes, chr_rom: bytes = b"", mapper: int = 0, flags6: int = 0,
               trainer: bytes = b"") -> bytes:
    header = bytearray(16)
    header[0:4] = b"NES\x1a"
    header[4] = len(prg) // 0x4000
    header[5] = len(chr_rom) // 0x2000
    header[6] = ((mapper & 0x0F) << 4) | flags6 | (0x04 if trainer else 0)
    header[7] = mapper & 0xF0
    return bytes(header) + trainer + prg + chr_rom


class RecordingSink(BlockSink):
    """Sink that records calls and can be told to fail or react."""

    def __init__(self, fail_on=None, on_create=None):
        self.calls = []
        self.open_transactions = 0
        self.transactions = 0
        self._fail_on = fail_on
        self._on_create = on_create

    @contextmanager
    def transaction(self, description):
        self.open_transactions += 1
        self.transactions += 1
        try:
            yield
        finally:
            self.open_transactions -= 1

    def create(self, start, length, name, permissions, data, is_overlay,
               space=AddressSpace.CPU):
        if self._fail_on is not None and name == self._fail_on:
            raise SinkError(f"{name} collides with existing data")
        self.calls.append((space, start, length, name, permissions, data, is_overlay))
        if self._on_create is not None:
            self._on_create(self)


@pytest.fixture
def make_rom():
    return _make_rom


@pytest.fixture
def make_ines():
    return _make_ines


@pytest.fixture
def recording_sink():
    return RecordingSink
