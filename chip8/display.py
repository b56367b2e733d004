"""64x32 monochrome framebuffer.

Cells hold a full 32-bit scalar (PIXEL_ON is all bits set) so a front-end
can copy the buffer straight into a 32 bpp image.
"""
import struct

WIDTH = 64
HEIGHT = 32
PIXEL_ON = 0xFFFFFFFF
PIXEL_OFF = 0
SPRITE_WIDTH = 8


class Framebuffer:
    def __init__(self):
        self.pixels = [PIXEL_OFF] * (WIDTH * HEIGHT)

    def clear(self):
        for idx in range(len(self.pixels)):
            self.pixels[idx] = PIXEL_OFF

    def pixel(self, x: int, y: int) -> int:
        return self.pixels[y * WIDTH + x]

    def is_on(self, x: int, y: int) -> bool:
        return self.pixel(x, y) == PIXEL_ON

    def draw_sprite(self, x: int, y: int, rows) -> bool:
        """XOR an 8-pixel-wide sprite onto the screen.

        The origin wraps around the screen, but pixels that fall past the
        right or bottom edge are clipped. Returns True if any lit pixel was
        switched off.
        """
        x0 = x % WIDTH
        y0 = y % HEIGHT
        collision = False
        for row, sprite_byte in enumerate(rows):
            py = y0 + row
            if py >= HEIGHT:
                break
            for col in range(SPRITE_WIDTH):
                if not sprite_byte & (0x80 >> col):
                    continue
                px = x0 + col
                if px >= WIDTH:
                    break
                idx = py * WIDTH + px
                if self.pixels[idx] == PIXEL_ON:
                    collision = True
                self.pixels[idx] ^= PIXEL_ON
        return collision

    def to_bytes(self) -> bytes:
        """Little-endian 32-bit pixels, row-major, 256 bytes per row."""
        return struct.pack(f"<{len(self.pixels)}I", *self.pixels)

    def rows(self, on: str = "#", off: str = ".") -> list:
        return ["".join(on if self.is_on(x, y) else off for x in range(WIDTH))
                for y in range(HEIGHT)]
