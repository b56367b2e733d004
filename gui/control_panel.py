"""Run/step/reset buttons controlling the CPU and updating views."""
import logging

from PySide6.QtWidgets import QWidget, QPushButton, QHBoxLayout, QLabel
from PySide6.QtCore import Qt, QTimer, Slot

from chip8.dispatcher import mnemonic
from chip8.errors import Chip8Error

logger = logging.getLogger(__name__)


class ControlPanel(QWidget):
    def __init__(self, cpu, display, views, cycle_delay_ms: int, rom: bytes = b""):
        super().__init__()
        self.cpu = cpu
        self.rom = rom              # image reloaded on reset
        self.display = display
        self.views = views          # register/memory panels, refreshed when paused

        self.btn_step = QPushButton("Step")
        self.btn_run  = QPushButton("Run")
        self.btn_reset = QPushButton("Reset")
        self.status = QLabel("Ready")

        layout = QHBoxLayout(self)
        for w in (self.btn_step, self.btn_run, self.btn_reset, self.status):
            layout.addWidget(w)
        for btn in (self.btn_step, self.btn_run, self.btn_reset):
            btn.setFocusPolicy(Qt.NoFocus)
        self.setLayout(layout)

        self.timer = QTimer(self)
        self.timer.setInterval(cycle_delay_ms)
        self.timer.timeout.connect(self.tick)

        # connections
        self.btn_step.clicked.connect(self.step)
        self.btn_run.clicked.connect(self.toggle_run)
        self.btn_reset.clicked.connect(self.reset)

    def _execute(self):
        try:
            ins = self.cpu.step()
        except Chip8Error as e:
            logger.error("Execution stopped: %s", e)
            self.stop()
            self.status.setText(str(e))
            return None
        self.display.refresh()
        return ins

    def _refresh_views(self):
        for view in self.views:
            view.refresh()

    @Slot()
    def tick(self):
        self._execute()

    @Slot()
    def step(self):
        ins = self._execute()
        self._refresh_views()
        if ins is not None:
            self.status.setText(f"PC=0x{self.cpu.reg.pc:03X}  {mnemonic(ins)}")

    @Slot()
    def toggle_run(self):
        if self.timer.isActive():
            self.stop()
        else:
            self.timer.start()
            self.btn_run.setText("Pause")
            self.status.setText("Running")

    def stop(self):
        self.timer.stop()
        self.btn_run.setText("Run")
        self.status.setText(f"Paused at PC=0x{self.cpu.reg.pc:03X}")
        self._refresh_views()

    @Slot()
    def reset(self):
        """Power-on reset, then reload the ROM image that was running."""
        self.timer.stop()
        self.btn_run.setText("Run")
        self.cpu.reset()
        self.cpu.load_rom(self.rom)
        self.display.refresh()
        self._refresh_views()
        self.status.setText("Reset done")
