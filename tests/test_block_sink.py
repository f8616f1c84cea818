"""In-memory block sink tests."""

import threading

import pytest

from nesmap.core.types import CHR_ROM, PRG_ROM, AddressSpace
from nesmap.shell.services.block_sink import MemoryMapSink, SinkError


def _create(sink, start, length, name, is_overlay=False, space=AddressSpace.CPU, fill=0):
    with sink.transaction(f"Create {name}"):
        sink.create(start, length, name, PRG_ROM, bytes([fill]) * length, is_overlay, space=space)


def test_create_requires_transaction():
    sink = MemoryMapSink()
    with pytest.raises(SinkError, match="inside a transaction"):
        sink.create(0x8000, 1, "x", PRG_ROM, b"\0", False)


def test_overlays_may_share_a_range():
    sink = MemoryMapSink()
    _create(sink, 0x8000, 0x4000, "bank 0", fill=0)
    _create(sink, 0x8000, 0x4000, "bank 1", is_overlay=True, fill=1)

    assert [b.name for b in sink.blocks_at(AddressSpace.CPU, 0x9000)] == ["bank 0", "bank 1"]
    assert sink.read(AddressSpace.CPU, 0x9000) == 0


def test_non_overlay_overlap_is_rejected():
    sink = MemoryMapSink()
    _create(sink, 0x8000, 0x4000, "bank 0")
    with pytest.raises(SinkError, match="overlaps"):
        _create(sink, 0xBFFF, 0x10, "late")
    assert len(sink) == 1


def test_same_range_in_other_space_is_fine():
    sink = MemoryMapSink()
    _create(sink, 0x0000, 0x2000, "ram")
    _create(sink, 0x0000, 0x2000, "chr", space=AddressSpace.PPU)
    assert len(sink) == 2


def test_duplicate_names_are_rejected():
    sink = MemoryMapSink()
    _create(sink, 0x8000, 0x100, "PRG 0")
    with pytest.raises(SinkError, match="duplicate"):
        _create(sink, 0x9000, 0x100, "PRG 0", is_overlay=True)


def test_address_overflow_is_rejected():
    sink = MemoryMapSink()
    with pytest.raises(SinkError, match="outside the address space"):
        _create(sink, 0xF000, 0x2000, "too big")


def test_failed_transaction_rolls_back_its_blocks():
    sink = MemoryMapSink()
    with pytest.raises(SinkError):
        with sink.transaction("two blocks"):
            sink.create(0x8000, 4, "a", PRG_ROM, bytes(4), False)
            sink.create(0x8002, 4, "b", PRG_ROM, bytes(4), False)
    assert len(sink) == 0


def test_lock_is_released_after_failure():
    sink = MemoryMapSink()
    with pytest.raises(SinkError):
        _create(sink, 0xFFFF, 2, "bad")
    _create(sink, 0x8000, 2, "good")
    assert len(sink) == 1


def test_second_concurrent_transaction_fails():
    sink = MemoryMapSink()
    entered = threading.Event()
    release = threading.Event()
    errors = []

    def hold():
        with sink.transaction("holder"):
            entered.set()
            release.wait(5)

    worker = threading.Thread(target=hold)
    worker.start()
    entered.wait(5)
    try:
        with sink.transaction("intruder"):
            pass
    except SinkError as exc:
        errors.append(exc)
    finally:
        release.set()
        worker.join(5)

    assert len(errors) == 1 and "locked" in str(errors[0])


def test_create_from_another_thread_outside_transaction_fails():
    sink = MemoryMapSink()
    entered = threading.Event()
    release = threading.Event()

    def hold():
        with sink.transaction("holder"):
            sink.create(0xC000, 4, "holder block", PRG_ROM, bytes(4), False)
            entered.set()
            release.wait(5)

    worker = threading.Thread(target=hold)
    worker.start()
    entered.wait(5)
    try:
        with pytest.raises(SinkError, match="inside a transaction"):
            sink.create(0x8000, 4, "intruder", PRG_ROM, bytes(4), False)
    finally:
        release.set()
        worker.join(5)

    assert [b.name for b in sink.blocks] == ["holder block"]


def test_read_returns_none_for_unmapped_address():
    sink = MemoryMapSink()
    _create(sink, 0x0000, 0x2000, "chr", space=AddressSpace.PPU, fill=7)
    assert sink.read(AddressSpace.PPU, 0x1FFF) == 7
    assert sink.read(AddressSpace.CPU, 0x1FFF) is None


def test_blocks_keep_permissions():
    sink = MemoryMapSink()
    with sink.transaction("chr"):
        sink.create(0, 0x2000, "chr", CHR_ROM, bytes(0x2000), False, space=AddressSpace.PPU)
    assert sink.blocks[0].permissions == CHR_ROM
    assert sink.blocks[0].end == 0x1FFF
