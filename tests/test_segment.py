"""Segment descriptor tests."""

import pytest

from nesmap.core.errors import InvalidLayout
from nesmap.core.segment import SegmentDescriptor
from nesmap.core.types import PRG_ROM, AddressSpace, Permission


def _seg(start=0x8000, length=0x4000, name="PRG 0", **kwargs):
    return SegmentDescriptor(start, length, name, PRG_ROM, bytes(length), **kwargs)


def test_end_is_inclusive():
    assert _seg().end == 0xBFFF
    assert _seg(start=0xC000).end == 0xFFFF


def test_segment_may_end_exactly_at_top_of_address_space():
    seg = _seg(start=0x8000, length=0x8000)
    assert seg.start + seg.length == 0x10000


def test_overflow_is_rejected():
    with pytest.raises(InvalidLayout, match="overflows"):
        _seg(start=0xC001)


def test_length_must_match_data():
    with pytest.raises(InvalidLayout, match="len\\(data\\)"):
        SegmentDescriptor(0x8000, 0x4000, "bad", PRG_ROM, bytes(0x2000))


def test_length_must_be_positive():
    with pytest.raises(InvalidLayout):
        SegmentDescriptor(0x8000, 0, "empty", PRG_ROM, b"")


def test_start_must_be_16_bit():
    with pytest.raises(InvalidLayout, match="out of range"):
        _seg(start=0x10000, length=1)


def test_overlaps_requires_same_space():
    cpu = _seg(start=0x0000, length=0x2000)
    ppu = _seg(start=0x0000, length=0x2000, space=AddressSpace.PPU)
    assert not cpu.overlaps(ppu)
    assert cpu.overlaps(_seg(start=0x1FFF, length=1))
    assert not cpu.overlaps(_seg(start=0x2000, length=1))


def test_descriptors_are_immutable():
    seg = _seg()
    with pytest.raises(AttributeError):
        seg.start = 0xC000


def test_repr_shows_range_and_flags():
    seg = _seg(is_overlay=True)
    assert repr(seg) == "SegmentDescriptor('PRG 0', CPU $8000-$BFFF, R-X, overlay)"


def test_permission_flags():
    assert (Permission.READ | Permission.WRITE).flags() == "RW-"
    assert Permission.NONE.flags() == "---"
