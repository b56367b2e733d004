from typing import List, Optional

KEY_COUNT = 16

# Physical key -> logical key, laid out as on the original COSMAC VIP pad:
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
DEFAULT_KEY_MAP = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


class Keypad:
    """State of the 16-key hex pad. Written by the front-end, read by the CPU."""

    def __init__(self):
        self.keys: List[bool] = [False] * KEY_COUNT

    def press(self, key: int):
        self.keys[key & 0xF] = True

    def release(self, key: int):
        self.keys[key & 0xF] = False

    def is_pressed(self, key: int) -> bool:
        return self.keys[key & 0xF]

    def first_pressed(self) -> Optional[int]:
        """Lowest pressed key index, or None when the pad is idle."""
        for key, down in enumerate(self.keys):
            if down:
                return key
        return None

    def reset(self):
        self.keys = [False] * KEY_COUNT
