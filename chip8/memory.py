import logging
from pathlib import Path
from typing import Optional

from .errors import RomTooLargeError
from .font import FONTSET, FONTSET_START_ADDRESS
from .registers import PROGRAM_START

MEM_SIZE = 4096  # bytes, 12-bit address bus
ADDR_MASK = MEM_SIZE - 1
PROGRAM_CAPACITY = MEM_SIZE - PROGRAM_START

logger = logging.getLogger(__name__)


class Memory:
    def __init__(self):
        self.mem = bytearray(MEM_SIZE)
        self.mem[FONTSET_START_ADDRESS:FONTSET_START_ADDRESS + len(FONTSET)] = FONTSET

    def read(self, addr: int) -> int:
        """Read one byte; the address wraps around the 4 KiB space"""
        return self.mem[addr & ADDR_MASK]

    def write(self, addr: int, value: int):
        self.mem[addr & ADDR_MASK] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Read a big-endian 16-bit instruction word"""
        return (self.read(addr) << 8) | self.read(addr + 1)

    def dump(self, start: int, length: int) -> bytes:
        return bytes(self.read(start + off) for off in range(length))

    def load_rom(self, data: bytes):
        """Copy a program image verbatim to PROGRAM_START."""
        if len(data) > PROGRAM_CAPACITY:
            raise RomTooLargeError(len(data), PROGRAM_CAPACITY)
        self.mem[PROGRAM_START:PROGRAM_START + len(data)] = data

    def load_rom_file(self, path) -> bool:
        """Load a ROM from disk.

        An unreadable file is not fatal: memory keeps its power-on contents
        and False is returned so the caller can decide what to do.
        """
        data = read_rom_file(path)
        if data is None:
            return False
        self.load_rom(data)
        return True


def read_rom_file(path) -> Optional[bytes]:
    """Read a ROM image, or return None (and log why) if it cannot be read."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        logger.warning("Could not read ROM %s: %s", path, e)
        return None
    logger.info("Read %d byte ROM from %s", len(data), path)
    return data
