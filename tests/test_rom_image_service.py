"""iNES reader tests."""

import pytest

from nesmap.shell.services.rom_image_service import RomImage, RomImageService


def test_parse_plain_ines(make_rom, make_ines):
    prg = make_rom(4, 0x4000)
    chr_rom = make_rom(1, 0x2000)
    rom, header = RomImageService.parse(make_ines(prg, chr_rom, mapper=2, flags6=0x01))

    assert rom == RomImage(prg, chr_rom, 2)
    assert header.prg_size == 0x10000 and header.chr_size == 0x2000
    assert header.vertical_mirroring and not header.has_battery
    assert not header.is_nes2


def test_high_mapper_nibble(make_rom, make_ines):
    rom, _ = RomImageService.parse(make_ines(make_rom(2, 0x4000), mapper=180))
    assert rom.mapper == 180


def test_trainer_is_skipped(make_rom, make_ines):
    prg = make_rom(2, 0x4000)
    rom, header = RomImageService.parse(make_ines(prg, mapper=0, trainer=b"\xAA" * 512))

    assert header.has_trainer
    assert rom.prg_rom == prg


def test_chr_ram_board_has_empty_chr(make_rom, make_ines):
    rom, header = RomImageService.parse(make_ines(make_rom(8, 0x4000), mapper=2))
    assert rom.chr_rom == b"" and header.chr_size == 0


def test_diskdude_padding_is_ignored(make_rom, make_ines):
    data = bytearray(make_ines(make_rom(2, 0x4000), mapper=2))
    data[7] = ord("D")
    data[8:16] = b"iskDude!"
    rom, header = RomImageService.parse(bytes(data))

    assert rom.mapper == 2
    assert not header.is_nes2


def test_nes2_extended_mapper_and_submapper(make_rom, make_ines):
    data = bytearray(make_ines(make_rom(2, 0x4000)))
    data[6] = 0x20           # low nibble 2
    data[7] = 0x08 | 0x40    # NES 2.0, middle nibble 4
    data[8] = 0x31           # submapper 3, high nibble 1
    rom, header = RomImageService.parse(bytes(data))

    assert header.is_nes2
    assert rom.mapper == 0x142
    assert rom.submapper == 3


def test_nes2_exponent_size():
    header = bytearray(16)
    header[0:4] = b"NES\x1a"
    header[4] = (13 << 2) | 0x01   # 2**13 * 3
    header[7] = 0x08
    header[9] = 0x0F
    parsed = RomImageService.parse_header(bytes(header))

    assert parsed.prg_size == 3 * 8192


def test_bad_magic_is_rejected():
    with pytest.raises(ValueError, match="not an iNES ROM"):
        RomImageService.parse(b"\0" * 64)


def test_no_prg_is_rejected(make_ines):
    with pytest.raises(ValueError, match="no PRG"):
        RomImageService.parse(make_ines(b""))


def test_truncated_file_is_rejected(make_rom, make_ines):
    data = make_ines(make_rom(2, 0x4000))
    with pytest.raises(ValueError, match="truncated"):
        RomImageService.parse(data[:-1])


def test_read_from_disk(tmp_path, make_rom, make_ines):
    path = tmp_path / "game.nes"
    path.write_bytes(make_ines(make_rom(2, 0x4000), mapper=3))

    rom, _ = RomImageService.read(str(path))
    assert rom.mapper == 3


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        RomImageService.read(str(tmp_path / "missing.nes"))
