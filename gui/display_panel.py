"""Scaled view of the 64x32 framebuffer."""
from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QImage, QPainter
from PySide6.QtCore import Qt

from chip8.display import HEIGHT, WIDTH


class DisplayPanel(QWidget):
    def __init__(self, cpu, scale: int):
        super().__init__()
        self.cpu = cpu
        self.setFixedSize(WIDTH * scale, HEIGHT * scale)
        self.setFocusPolicy(Qt.NoFocus)
        self._buffer = b""

    def refresh(self):
        self.update()

    def paintEvent(self, event):
        # QImage does not copy, keep the bytes alive for the paint
        self._buffer = self.cpu.display.to_bytes()
        image = QImage(self._buffer, WIDTH, HEIGHT, WIDTH * 4, QImage.Format_RGB32)
        painter = QPainter(self)
        painter.drawImage(self.rect(), image)
        painter.end()
