import pytest

from chip8.errors import RomTooLargeError
from chip8.font import FONTSET, FONTSET_START_ADDRESS, glyph_address
from chip8.memory import MEM_SIZE, PROGRAM_CAPACITY, Memory, read_rom_file


def test_glyphs_loaded_rest_zeroed():
    mem = Memory()
    assert len(mem.mem) == MEM_SIZE
    assert mem.dump(FONTSET_START_ADDRESS, len(FONTSET)) == FONTSET
    assert not any(mem.mem[:FONTSET_START_ADDRESS])
    assert not any(mem.mem[FONTSET_START_ADDRESS + len(FONTSET):])


def test_glyph_address():
    assert glyph_address(0) == 0x50
    assert glyph_address(0xA) == 0x50 + 50
    assert glyph_address(0x1F) == glyph_address(0xF)


def test_addresses_wrap():
    mem = Memory()
    mem.write(0x1005, 0x1AB)
    assert mem.read(0x005) == 0xAB


def test_read_word_big_endian():
    mem = Memory()
    mem.write(0x300, 0x12)
    mem.write(0x301, 0x34)
    assert mem.read_word(0x300) == 0x1234


def test_load_rom_at_program_start():
    mem = Memory()
    mem.load_rom(b"\x60\x0A\x12\x00")
    assert mem.dump(0x200, 4) == b"\x60\x0A\x12\x00"


def test_empty_rom_changes_nothing():
    mem = Memory()
    before = bytes(mem.mem)
    mem.load_rom(b"")
    assert bytes(mem.mem) == before


def test_rom_too_large():
    mem = Memory()
    mem.load_rom(bytes(PROGRAM_CAPACITY))
    with pytest.raises(RomTooLargeError):
        mem.load_rom(bytes(PROGRAM_CAPACITY + 1))


def test_load_rom_file(tmp_path):
    rom = tmp_path / "game.ch8"
    rom.write_bytes(b"\x00\xE0")
    mem = Memory()
    assert mem.load_rom_file(rom) is True
    assert mem.read_word(0x200) == 0x00E0


def test_missing_rom_file_is_absorbed(tmp_path, caplog):
    mem = Memory()
    before = bytes(mem.mem)
    assert mem.load_rom_file(tmp_path / "missing.ch8") is False
    assert bytes(mem.mem) == before
    assert read_rom_file(tmp_path / "missing.ch8") is None
    assert "Could not read ROM" in caplog.text
