"""Mapper registry tests."""

import pytest

from nesmap.core.errors import UnsupportedMapper
from nesmap.core.mappers import (
    DEFAULT_REGISTRY,
    BankLayout,
    Mapper,
    MapperRegistry,
    MapperUxROM,
    resolve,
)
from nesmap.core.types import BankKind


def test_resolve_uxrom():
    assert isinstance(resolve(2), MapperUxROM)


@pytest.mark.parametrize("ids", [(2, 94), (7, 34), (11, 66, 140), (1, 155), (3, 185)])
def test_equivalent_ids_share_one_instance(ids):
    instances = {id(resolve(i)) for i in ids}
    assert len(instances) == 1


def test_mirror_image_board_is_a_distinct_variant():
    assert resolve(180) is not resolve(2)
    assert resolve(180).PRG.switchable_start == 0xC000


def test_unknown_mapper_raises_unsupported():
    with pytest.raises(UnsupportedMapper) as excinfo:
        resolve(4)
    assert excinfo.value.mapper_id == 4
    assert "mapper 4" in str(excinfo.value)


def test_unsupported_mapper_is_a_lookup_error():
    with pytest.raises(LookupError):
        resolve(9999)


def test_supported_ids_are_sorted():
    ids = DEFAULT_REGISTRY.supported_ids()
    assert ids == sorted(ids)
    assert {0, 1, 2, 3, 7, 34, 66, 94, 180} <= set(ids)


def test_mappers_lists_each_variant_once():
    names = [m.NAME for m in DEFAULT_REGISTRY.mappers()]
    assert len(names) == len(set(names))
    assert names[0] == "NROM"


class _Mapper30(Mapper):
    NAME = "UNROM 512"
    MAPPER_IDS = (30,)
    PRG = MapperUxROM.PRG
    CHR = BankLayout(BankKind.CHR, 0x2000, switchable_start=0x0000, writable=True)


def test_register_new_variant():
    registry = MapperRegistry()
    registry.register(_Mapper30())

    assert 30 in registry
    assert registry.resolve(30).CHR.writable


def test_register_rejects_taken_ids():
    registry = MapperRegistry([MapperUxROM])
    clash = type("Clash", (_Mapper30,), {"MAPPER_IDS": (94, 30)})()

    with pytest.raises(ValueError, match="already registered"):
        registry.register(clash)
    assert 30 not in registry


def test_register_rejects_variant_without_ids():
    registry = MapperRegistry()
    with pytest.raises(ValueError, match="no mapper ids"):
        registry.register(type("NoIds", (_Mapper30,), {"MAPPER_IDS": ()})())


def test_empty_registry_resolves_nothing():
    with pytest.raises(UnsupportedMapper):
        MapperRegistry().resolve(0)
