from dataclasses import dataclass, field
from typing import List

from .errors import StackOverflowError, StackUnderflowError

GENERAL_REGS = 16         # V0–VF
FLAG = 0xF                # VF doubles as carry/borrow/collision flag
STACK_DEPTH = 16
PROGRAM_START = 0x200
SPECIAL_REGS = ["I", "PC", "SP", "DT", "ST", "IR"]


@dataclass
class Registers:
    v: List[int] = field(default_factory=lambda: [0]*GENERAL_REGS)
    i: int = 0
    pc: int = PROGRAM_START
    stack: List[int] = field(default_factory=lambda: [0]*STACK_DEPTH)
    sp: int = 0
    delay_timer: int = 0
    sound_timer: int = 0
    ir: int = 0

    def __getitem__(self, idx: int) -> int:
        if 0 <= idx < GENERAL_REGS:
            return self.v[idx]
        raise IndexError("Invalid register index")

    def __setitem__(self, idx: int, value: int) -> None:
        if 0 <= idx < GENERAL_REGS:
            self.v[idx] = value & 0xFF
        else:
            raise IndexError("Invalid register index")

    def push(self, addr: int) -> None:
        """Save a return address; the stack is left untouched on overflow."""
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError(self.pc)
        self.stack[self.sp] = addr & 0xFFFF
        self.sp += 1

    def pop(self) -> int:
        if self.sp == 0:
            raise StackUnderflowError(self.pc)
        self.sp -= 1
        return self.stack[self.sp]

    def tick_timers(self) -> None:
        """Count both timers down by one, stopping at zero."""
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def specials(self) -> List[int]:
        """Values in SPECIAL_REGS order, for the register view."""
        return [self.i, self.pc, self.sp, self.delay_timer,
                self.sound_timer, self.ir]
