"""Widget that shows the 16 V registers and the special registers (I, PC, SP,
DT, ST, IR) in a compact table. Updates are pulled from the CPU instance via
the `refresh()` slot, which the control panel triggers after each CPU step."""
from PySide6.QtWidgets import QWidget, QTableWidget, QTableWidgetItem, QVBoxLayout
from PySide6.QtCore import Qt, Slot

from chip8.registers import GENERAL_REGS, SPECIAL_REGS


class RegisterPanel(QWidget):
    HEADERS = [f"V{i:X}" for i in range(GENERAL_REGS)] + SPECIAL_REGS

    def __init__(self, cpu):
        super().__init__()
        self.cpu = cpu
        self.table = QTableWidget(len(self.HEADERS), 2)
        self.table.setHorizontalHeaderLabels(["Reg", "Value (hex)"])
        for row, name in enumerate(self.HEADERS):
            self.table.setItem(row, 0, QTableWidgetItem(name))
            self.table.setItem(row, 1, QTableWidgetItem("0x00"))
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setFocusPolicy(Qt.NoFocus)

        layout = QVBoxLayout(self)
        layout.addWidget(self.table)
        self.setLayout(layout)
        self.refresh()

    @Slot()
    def refresh(self):
        """Update table values from CPU state."""
        for i in range(GENERAL_REGS):
            self.table.item(i, 1).setText(f"0x{self.cpu.reg[i]:02X}")
        for j, val in enumerate(self.cpu.reg.specials(), start=GENERAL_REGS):
            self.table.item(j, 1).setText(f"0x{val:04X}")
