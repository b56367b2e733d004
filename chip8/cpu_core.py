from typing import Optional

from .alu import ALU
from .dispatcher import Dispatcher, Instruction, decode
from .display import Framebuffer, HEIGHT, WIDTH
from .errors import Chip8Error
from .font import glyph_address
from .keypad import Keypad
from .memory import Memory
from .random_source import RandomSource, SystemRandomSource
from .registers import FLAG, Registers

INSTRUCTION_SIZE = 2  # bytes


class CPU:
    """
    CHIP-8 interpreter core.
    ─────────────────────────────────────────────────────
    • fetch()  : read the 16-bit word at PC into IR, PC += 2
    • step()   : one cycle (fetch → decode → dispatch → timers)
    • reset()  : back to power-on state
    Every instruction has one ``op_*`` handler; the Dispatcher maps
    instruction words onto them.
    """

    def __init__(self, random_source: Optional[RandomSource] = None):
        self.rng = random_source if random_source is not None else SystemRandomSource()
        self.reg = Registers()       # V0..VF, I, PC, stack, timers
        self.mem = Memory()          # 4 KiB, glyphs at 0x050
        self.display = Framebuffer()
        self.keypad = Keypad()
        self.dispatcher = Dispatcher(self)

    # ───────────────────────────── loading ───────────────────────────
    def load_rom(self, data: bytes):
        self.mem.load_rom(data)

    def load_rom_file(self, path) -> bool:
        return self.mem.load_rom_file(path)

    # ───────────────────────────── fetch ─────────────────────────────
    def fetch(self) -> int:
        """Read the instruction at PC into IR and advance PC past it"""
        self.reg.ir = self.mem.read_word(self.reg.pc)
        self.reg.pc = (self.reg.pc + INSTRUCTION_SIZE) & 0xFFFF
        return self.reg.ir

    def skip(self):
        self.reg.pc = (self.reg.pc + INSTRUCTION_SIZE) & 0xFFFF

    def _alu(self, op: str, ins: Instruction):
        result, flag = ALU.execute(op, self.reg[ins.x], self.reg[ins.y])
        self.reg[ins.x] = result
        # VF is written last so that `8Fy_` ends with the flag in VF
        if flag is not None:
            self.reg[FLAG] = flag

    # ───────────────────────── instruction set ──────────────────────
    def op_null(self, ins: Instruction):
        pass

    # 00E0 - CLS
    def op_00e0(self, ins: Instruction):
        self.display.clear()

    # 00EE - RET
    def op_00ee(self, ins: Instruction):
        self.reg.pc = self.reg.pop()

    # 1nnn - JP addr
    def op_1nnn(self, ins: Instruction):
        self.reg.pc = ins.nnn

    # 2nnn - CALL addr
    def op_2nnn(self, ins: Instruction):
        self.reg.push(self.reg.pc)
        self.reg.pc = ins.nnn

    # 3xkk - SE Vx, byte
    def op_3xkk(self, ins: Instruction):
        if self.reg[ins.x] == ins.kk:
            self.skip()

    # 4xkk - SNE Vx, byte
    def op_4xkk(self, ins: Instruction):
        if self.reg[ins.x] != ins.kk:
            self.skip()

    # 5xy0 - SE Vx, Vy
    def op_5xy0(self, ins: Instruction):
        if self.reg[ins.x] == self.reg[ins.y]:
            self.skip()

    # 6xkk - LD Vx, byte
    def op_6xkk(self, ins: Instruction):
        self.reg[ins.x] = ins.kk

    # 7xkk - ADD Vx, byte (VF untouched)
    def op_7xkk(self, ins: Instruction):
        self.reg[ins.x] = self.reg[ins.x] + ins.kk

    def op_8xy0(self, ins: Instruction):
        self._alu("LD", ins)

    def op_8xy1(self, ins: Instruction):
        self._alu("OR", ins)

    def op_8xy2(self, ins: Instruction):
        self._alu("AND", ins)

    def op_8xy3(self, ins: Instruction):
        self._alu("XOR", ins)

    def op_8xy4(self, ins: Instruction):
        self._alu("ADD", ins)

    def op_8xy5(self, ins: Instruction):
        self._alu("SUB", ins)

    def op_8xy6(self, ins: Instruction):
        self._alu("SHR", ins)

    def op_8xy7(self, ins: Instruction):
        self._alu("SUBN", ins)

    def op_8xye(self, ins: Instruction):
        self._alu("SHL", ins)

    # 9xy0 - SNE Vx, Vy
    def op_9xy0(self, ins: Instruction):
        if self.reg[ins.x] != self.reg[ins.y]:
            self.skip()

    # Annn - LD I, addr
    def op_annn(self, ins: Instruction):
        self.reg.i = ins.nnn

    # Bnnn - JP V0, addr
    def op_bnnn(self, ins: Instruction):
        self.reg.pc = (self.reg[0] + ins.nnn) & 0xFFF

    # Cxkk - RND Vx, byte
    def op_cxkk(self, ins: Instruction):
        self.reg[ins.x] = self.rng.next_byte() & ins.kk

    # Dxyn - DRW Vx, Vy, nibble
    def op_dxyn(self, ins: Instruction):
        rows = self.mem.dump(self.reg.i, ins.n)
        x = self.reg[ins.x] % WIDTH
        y = self.reg[ins.y] % HEIGHT
        # VF is only ever raised here, never cleared
        if self.display.draw_sprite(x, y, rows):
            self.reg[FLAG] = 1

    # Ex9E - SKP Vx
    def op_ex9e(self, ins: Instruction):
        if self.keypad.is_pressed(self.reg[ins.x]):
            self.skip()

    # ExA1 - SKNP Vx
    def op_exa1(self, ins: Instruction):
        if not self.keypad.is_pressed(self.reg[ins.x]):
            self.skip()

    # Fx07 - LD Vx, DT
    def op_fx07(self, ins: Instruction):
        self.reg[ins.x] = self.reg.delay_timer

    # Fx0A - LD Vx, K
    def op_fx0a(self, ins: Instruction):
        key = self.keypad.first_pressed()
        if key is None:
            # nothing pressed: run this instruction again next cycle
            self.reg.pc = (self.reg.pc - INSTRUCTION_SIZE) & 0xFFFF
        else:
            self.reg[ins.x] = key

    # Fx15 - LD DT, Vx
    def op_fx15(self, ins: Instruction):
        self.reg.delay_timer = self.reg[ins.x]

    # Fx18 - LD ST, Vx
    def op_fx18(self, ins: Instruction):
        self.reg.sound_timer = self.reg[ins.x]

    # Fx1E - ADD I, Vx (VF untouched)
    def op_fx1e(self, ins: Instruction):
        self.reg.i = (self.reg.i + self.reg[ins.x]) & 0xFFFF

    # Fx29 - LD F, Vx
    def op_fx29(self, ins: Instruction):
        self.reg.i = glyph_address(self.reg[ins.x])

    # Fx33 - LD B, Vx
    def op_fx33(self, ins: Instruction):
        value = self.reg[ins.x]
        self.mem.write(self.reg.i, value // 100)
        self.mem.write(self.reg.i + 1, (value // 10) % 10)
        self.mem.write(self.reg.i + 2, value % 10)

    # Fx55 - LD [I], Vx (I is left unchanged)
    def op_fx55(self, ins: Instruction):
        for r in range(ins.x + 1):
            self.mem.write(self.reg.i + r, self.reg[r])

    # Fx65 - LD Vx, [I]
    def op_fx65(self, ins: Instruction):
        for r in range(ins.x + 1):
            self.reg[r] = self.mem.read(self.reg.i + r)

    # ───────────────────────────── runner ─────────────────────────────
    def step(self) -> Instruction:
        """One cycle: fetch, decode, execute, then tick both timers"""
        start = self.reg.pc
        ins = decode(self.fetch())
        try:
            self.dispatcher.dispatch(ins)
        except Chip8Error:
            # PC stays on the faulting instruction, IR holds it
            self.reg.pc = start
            raise
        self.reg.tick_timers()
        return ins

    def run(self, cycles: int):
        for _ in range(cycles):
            self.step()

    def reset(self):
        """Back to the power-on state; the random source is kept"""
        self.__init__(self.rng)
