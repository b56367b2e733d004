"""Instruction decoding and the two-level handler tables.

The high nibble picks a primary handler. Four of them are families that
share a nibble: 0x0, 0x8 and 0xE are routed again on the low nibble, 0xF on
the low byte. Anything that is not mapped lands on ``op_null``.
"""
from typing import Callable, Dict, List, NamedTuple, Optional


class Instruction(NamedTuple):
    word: int
    op: int     # bits 12-15
    x: int      # bits 8-11
    y: int      # bits 4-7
    n: int      # bits 0-3
    kk: int     # bits 0-7
    nnn: int    # bits 0-11


def decode(word: int) -> Instruction:
    word &= 0xFFFF
    return Instruction(
        word=word,
        op=(word >> 12) & 0xF,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        kk=word & 0xFF,
        nnn=word & 0xFFF,
    )


Handler = Callable[[Instruction], None]


class Dispatcher:
    def __init__(self, cpu):
        self.null = cpu.op_null

        self.table0: Dict[int, Handler] = {
            0x0: cpu.op_00e0,
            0xE: cpu.op_00ee,
        }
        self.table8: Dict[int, Handler] = {
            0x0: cpu.op_8xy0,
            0x1: cpu.op_8xy1,
            0x2: cpu.op_8xy2,
            0x3: cpu.op_8xy3,
            0x4: cpu.op_8xy4,
            0x5: cpu.op_8xy5,
            0x6: cpu.op_8xy6,
            0x7: cpu.op_8xy7,
            0xE: cpu.op_8xye,
        }
        self.tableE: Dict[int, Handler] = {
            0x1: cpu.op_exa1,
            0xE: cpu.op_ex9e,
        }
        self.tableF: Dict[int, Handler] = {
            0x07: cpu.op_fx07,
            0x0A: cpu.op_fx0a,
            0x15: cpu.op_fx15,
            0x18: cpu.op_fx18,
            0x1E: cpu.op_fx1e,
            0x29: cpu.op_fx29,
            0x33: cpu.op_fx33,
            0x55: cpu.op_fx55,
            0x65: cpu.op_fx65,
        }

        # family nibble -> (sub-table, Instruction field it is keyed on)
        self.families = {
            0x0: (self.table0, "n"),
            0x8: (self.table8, "n"),
            0xE: (self.tableE, "n"),
            0xF: (self.tableF, "kk"),
        }

        self.table: List[Optional[Handler]] = [
            None,           # 0x0 family
            cpu.op_1nnn,
            cpu.op_2nnn,
            cpu.op_3xkk,
            cpu.op_4xkk,
            cpu.op_5xy0,
            cpu.op_6xkk,
            cpu.op_7xkk,
            None,           # 0x8 family
            cpu.op_9xy0,
            cpu.op_annn,
            cpu.op_bnnn,
            cpu.op_cxkk,
            cpu.op_dxyn,
            None,           # 0xE family
            None,           # 0xF family
        ]

    def resolve(self, ins: Instruction) -> Handler:
        """Return the concrete handler for `ins` (``op_null`` if unmapped)."""
        family = self.families.get(ins.op)
        if family is None:
            return self.table[ins.op]
        table, field = family
        return table.get(getattr(ins, field), self.null)

    def dispatch(self, ins: Instruction) -> None:
        self.resolve(ins)(ins)


# ─────────────────────────── disassembly ────────────────────────────
_FAMILY_FORMATS = {
    (0x0, 0x0): "CLS",
    (0x0, 0xE): "RET",
    (0x8, 0x0): "LD V{x:X}, V{y:X}",
    (0x8, 0x1): "OR V{x:X}, V{y:X}",
    (0x8, 0x2): "AND V{x:X}, V{y:X}",
    (0x8, 0x3): "XOR V{x:X}, V{y:X}",
    (0x8, 0x4): "ADD V{x:X}, V{y:X}",
    (0x8, 0x5): "SUB V{x:X}, V{y:X}",
    (0x8, 0x6): "SHR V{x:X}",
    (0x8, 0x7): "SUBN V{x:X}, V{y:X}",
    (0x8, 0xE): "SHL V{x:X}",
    (0xE, 0xE): "SKP V{x:X}",
    (0xE, 0x1): "SKNP V{x:X}",
    (0xF, 0x07): "LD V{x:X}, DT",
    (0xF, 0x0A): "LD V{x:X}, K",
    (0xF, 0x15): "LD DT, V{x:X}",
    (0xF, 0x18): "LD ST, V{x:X}",
    (0xF, 0x1E): "ADD I, V{x:X}",
    (0xF, 0x29): "LD F, V{x:X}",
    (0xF, 0x33): "LD B, V{x:X}",
    (0xF, 0x55): "LD [I], V{x:X}",
    (0xF, 0x65): "LD V{x:X}, [I]",
}

_FORMATS = {
    0x1: "JP 0x{nnn:03X}",
    0x2: "CALL 0x{nnn:03X}",
    0x3: "SE V{x:X}, 0x{kk:02X}",
    0x4: "SNE V{x:X}, 0x{kk:02X}",
    0x5: "SE V{x:X}, V{y:X}",
    0x6: "LD V{x:X}, 0x{kk:02X}",
    0x7: "ADD V{x:X}, 0x{kk:02X}",
    0x9: "SNE V{x:X}, V{y:X}",
    0xA: "LD I, 0x{nnn:03X}",
    0xB: "JP V0, 0x{nnn:03X}",
    0xC: "RND V{x:X}, 0x{kk:02X}",
    0xD: "DRW V{x:X}, V{y:X}, {n}",
}


def mnemonic(ins: Instruction) -> str:
    """Assembly text for `ins`; unmapped words come out as ``???``."""
    if ins.op == 0xF:
        fmt = _FAMILY_FORMATS.get((ins.op, ins.kk))
    elif ins.op in (0x0, 0x8, 0xE):
        fmt = _FAMILY_FORMATS.get((ins.op, ins.n))
    else:
        fmt = _FORMATS.get(ins.op)
    if fmt is None:
        return "???"
    return fmt.format(**ins._asdict())
