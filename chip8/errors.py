"""Exceptions raised by the CHIP-8 core.

Unmapped opcodes are not errors (they decode to a no-op), so everything here
is a genuine fault: a broken call stack, a ROM that does not fit, or a bad
configuration file.
"""


class Chip8Error(RuntimeError):
    """Base class for every fault the simulator reports."""


class StackOverflowError(Chip8Error):
    def __init__(self, pc: int):
        super().__init__(f"Call stack overflow at PC=0x{pc:03X}")
        self.pc = pc


class StackUnderflowError(Chip8Error):
    def __init__(self, pc: int):
        super().__init__(f"Return with empty call stack at PC=0x{pc:03X}")
        self.pc = pc


class RomTooLargeError(Chip8Error):
    def __init__(self, size: int, capacity: int):
        super().__init__(f"ROM is {size} bytes, program space holds {capacity}")
        self.size = size
        self.capacity = capacity


class ConfigError(Chip8Error, ValueError):
    """Invalid emulator configuration value."""
