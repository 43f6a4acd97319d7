# src/retro_chip8/ui/display_view.py
"""
CHIP-8フレームバッファを拡大表示するウィジェット。
"""

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import QSize
from PySide6.QtGui import QPainter, QColor, QPaintEvent

from retro_chip8.arch.chip8.devices import Display

COLOR_PIXEL_OFF = "#101010"
COLOR_PIXEL_ON = "#33FF66"

# @intent:responsibility Displayの内容をvideo_scale倍で描画します。フレームバッファは読み出すだけです。
class DisplayView(QWidget):
    def __init__(self, display: Display, scale: int = 10, parent=None):
        super().__init__(parent)
        self._display = display
        self._scale = scale
        self.setFixedSize(self.sizeHint())

    def set_display(self, display: Display) -> None:
        self._display = display
        self._display.dirty = True
        self.refresh()

    def sizeHint(self) -> QSize:
        return QSize(self._display.width * self._scale, self._display.height * self._scale)

    # @intent:responsibility 前回描画以降にフレームバッファが変化していれば再描画を要求します。
    def refresh(self) -> bool:
        if not self._display.dirty:
            return False
        self._display.dirty = False
        self.update()
        return True

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(COLOR_PIXEL_OFF))
        on = QColor(COLOR_PIXEL_ON)
        s = self._scale
        for y, row in enumerate(self._display.rows()):
            for x, lit in enumerate(row):
                if lit:
                    painter.fillRect(x * s, y * s, s, s, on)
        painter.end()
