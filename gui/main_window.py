from PySide6.QtWidgets import QMainWindow, QDockWidget, QApplication
from PySide6.QtCore import Qt
from .register_panel import RegisterPanel
from .memory_panel import MemoryPanel
from .control_panel import ControlPanel
from .display_panel import DisplayPanel
from chip8.cpu_core import CPU
from chip8.random_source import SystemRandomSource
import logging
import sys

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, config, rom: bytes = b""):
        super().__init__()
        self.config = config
        self.cpu = CPU(SystemRandomSource(config.seed))
        self.cpu.load_rom(rom)
        self.setWindowTitle("CHIP-8 Simulator")
        self.setFocusPolicy(Qt.StrongFocus)

        # 중앙 위젯: 화면
        self.display_panel = DisplayPanel(self.cpu, config.scale)
        self.setCentralWidget(self.display_panel)

        # Dock 1 : 레지스터
        self.register_panel = RegisterPanel(self.cpu)
        reg_dock = QDockWidget("Registers", self)
        reg_dock.setWidget(self.register_panel)
        self.addDockWidget(Qt.LeftDockWidgetArea, reg_dock)

        # Dock 2 : 메모리
        self.memory_panel = MemoryPanel(self.cpu)
        mem_dock = QDockWidget("Memory", self)
        mem_dock.setWidget(self.memory_panel)
        self.addDockWidget(Qt.RightDockWidgetArea, mem_dock)
        self.memory_panel.show_address(self.cpu.reg.pc)

        # Dock 3 : 컨트롤
        self.control_panel = ControlPanel(
            self.cpu, self.display_panel,
            [self.register_panel, self.memory_panel],
            config.cycle_delay_ms, rom)
        ctrl_dock = QDockWidget("Control", self)
        ctrl_dock.setWidget(self.control_panel)
        self.addDockWidget(Qt.BottomDockWidgetArea, ctrl_dock)

    def _logical_key(self, event):
        name = event.text().upper()
        return self.config.key_map.get(name)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.close()
            return
        key = self._logical_key(event)
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.cpu.keypad.press(key)

    def keyReleaseEvent(self, event):
        key = self._logical_key(event)
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.cpu.keypad.release(key)


def run(config, rom: bytes = b""):
    app = QApplication(sys.argv)
    mw = MainWindow(config, rom)
    mw.show()
    logger.info("Window open, scale=%d, cycle delay=%d ms",
                config.scale, config.cycle_delay_ms)
    sys.exit(app.exec())
