import operator


def _add(a, b):
    total = a + b
    return total, int(total > 0xFF)


def _sub(a, b):
    return a - b, int(a >= b)


def _subn(a, b):
    return b - a, int(b >= a)


def _shr(a, b):
    return a >> 1, a & 0x1


def _shl(a, b):
    return a << 1, (a & 0x80) >> 7


def _no_flag(fn):
    return lambda a, b: (fn(a, b), None)


class ALU:
    """Register-register operations of the 8xy_ family.

    Every op returns ``(result, flag)``; ``flag`` is None when the op leaves
    VF alone.  Shifts operate on Vx only, Vy is ignored.
    """
    OPS = {
        "LD":   _no_flag(lambda a, b: b),
        "OR":   _no_flag(operator.or_),
        "AND":  _no_flag(operator.and_),
        "XOR":  _no_flag(operator.xor),
        "ADD":  _add,
        "SUB":  _sub,
        "SHR":  _shr,
        "SUBN": _subn,
        "SHL":  _shl,
    }

    @classmethod
    def execute(cls, op: str, a: int, b: int):
        try:
            result, flag = cls.OPS[op](a, b)
        except KeyError as e:
            raise ValueError(f"Unsupported ALU op {op}") from e
        return result & 0xFF, flag
