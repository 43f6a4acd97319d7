# src/retro_chip8/ui/register_view.py
"""
レジスタパネル。
CPUが返すレイアウト（グループとビット幅）からラベルを組み立てるため、
V0-VF などのレジスタ名はこのウィジェットには現れません。
"""
from typing import Dict, Optional, Tuple

from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt
from PySide6.QtGui import QFontDatabase

from retro_chip8.core.cpu import AbstractCpu

# @intent:responsibility レジスタ値を "NAME: HEX" 形式のラベルとして一覧表示します。
class RegisterView(QWidget):
    COLUMNS = 4

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")
        self._root = QVBoxLayout(self)
        self._root.setContentsMargins(4, 4, 4, 4)
        self._mono = QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
        # レジスタ名 -> (ラベル, 16進桁数)
        self._cells: Dict[str, Tuple[QLabel, int]] = {}
        self._cpu: Optional[AbstractCpu] = None

    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._rebuild()
        self.update_registers()

    def _rebuild(self):
        while self._root.count():
            item = self._root.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._cells = {}

        for group in self._cpu.get_register_layout():
            box = QGroupBox(group.group_name)
            box.setStyleSheet("QGroupBox { font-weight: bold; color: #EEE; } "
                              "QGroupBox::title { color: #00AAAA; }")
            grid = QGridLayout(box)
            grid.setHorizontalSpacing(12)
            for index, info in enumerate(group.registers):
                digits = (info.width + 3) // 4
                label = QLabel()
                label.setStyleSheet(f"font-family: '{self._mono}', monospace; color: #FFD700;")
                label.setAlignment(Qt.AlignLeft)
                grid.addWidget(label, *divmod(index, self.COLUMNS))
                self._cells[info.name] = (label, digits)
            self._root.addWidget(box)

        self._root.addStretch()

    # @intent:responsibility CPUの現在値でラベルを書き換えます。レイアウトに無いレジスタは無視します。
    def update_registers(self):
        if self._cpu is None:
            return
        for name, value in self._cpu.get_register_map().items():
            cell = self._cells.get(name)
            if cell is not None:
                label, digits = cell
                label.setText(f"{name}: {value:0{digits}X}")

    def register_text(self, name: str) -> str:
        return self._cells[name][0].text()
