# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
画面・レジスタ表示を保持し、QTimerでCPUのサイクルを駆動します。
"""
import logging
from dataclasses import replace
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QApplication, QDockWidget, QToolBar, QFileDialog, QMessageBox
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from retro_chip8.common.errors import Chip8Error
from retro_chip8.config.models import MachineConfig
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.loader.loader import RomLoader
from retro_chip8.core.snapshot import Snapshot
from .display_view import DisplayView
from .register_view import RegisterView
from .keymap import KeypadController

logger = logging.getLogger(__name__)

# @intent:responsibility アプリケーションのメインウィンドウを定義し、エミュレーションループを駆動します。
class MainWindow(QMainWindow):
    """
    CHIP-8フロントエンドのメインウィンドウ。

    サイクルの頻度はここ（QTimerの間隔 = cycle_delay_ms）で決まり、コアは関与しません。
    致命的なサイクルが発生するとタイマーを止め、エラーを表示します。
    """
    def __init__(self, config: MachineConfig, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("CHIP-8 Emulator")
        self._config = config
        self._was_sounding = False
        self._rom_path: Optional[str] = config.rom_path
        self._rom_data: Optional[bytes] = None
        self.last_snapshot: Optional[Snapshot] = None

        self._setup_backend()

        self.display_view = DisplayView(self.cpu.display, config.video_scale)
        self.setCentralWidget(self.display_view)
        self._create_status_inspector()
        self._create_toolbar()

        self._timer = QTimer(self)
        self._timer.setInterval(config.cycle_delay_ms)
        self._timer.timeout.connect(self.run_cycle)

        self._update_ui_state(False)

    # @intent:responsibility 設定からCPUとバスを構築します。
    # @intent:rationale ROMはバイト列として保持し、リセット時はファイルを再読込しません。
    def _setup_backend(self):
        self.cpu, self.bus = SystemBuilder().build_system(replace(self._config, rom_path=None))
        if self._rom_path:
            self._rom_data = RomLoader().read(self._rom_path)
            self.cpu.load_rom(self._rom_data)
        self.keypad_controller = KeypadController(self.cpu.keypad, self._config.keymap)

    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.open_action = QAction("Open ROM...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._open_rom)
        toolbar.addAction(self.open_action)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.pause_action = QAction("Pause", self)
        self.pause_action.triggered.connect(self.stop)
        toolbar.addAction(self.pause_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self.run_cycle)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self.reset_machine)
        toolbar.addAction(self.reset_action)

    def _create_status_inspector(self):
        status_dock = QDockWidget("Registers", self)
        status_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.cpu)
        status_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, status_dock)

    def _update_ui_state(self, is_running: bool):
        self.run_action.setEnabled(not is_running and not self.cpu.halted)
        self.step_action.setEnabled(not is_running and not self.cpu.halted)
        self.pause_action.setEnabled(is_running)

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    @Slot()
    def start(self):
        self._timer.start()
        self._update_ui_state(True)

    @Slot()
    def stop(self):
        self._timer.stop()
        self._update_ui_state(False)
        self.register_view.update_registers()

    # @intent:responsibility 1サイクルを実行し、画面とサウンドを更新します。
    # @intent:post-condition 致命的エラーではループを停止し、エラーをユーザーへ表示します（握りつぶさない）。
    @Slot()
    def run_cycle(self) -> Optional[Snapshot]:
        try:
            self.last_snapshot = self.cpu.step()
        except Chip8Error as e:
            self.stop()
            self.statusBar().showMessage(f"Halted: {e}")
            QMessageBox.critical(self, "CHIP-8", f"Emulation halted:\n{e}")
            return None

        self.display_view.refresh()
        self._update_sound()
        if not self.is_running:
            self.register_view.update_registers()
        return self.last_snapshot

    # @intent:responsibility サウンドタイマーが動き始めた時にビープ音を鳴らします。
    def _update_sound(self):
        sounding = self.cpu.sound_active
        if sounding and not self._was_sounding:
            QApplication.beep()
        self._was_sounding = sounding

    # @intent:responsibility CPUをリセットし、保持しているROMを再ロードします。
    @Slot()
    def reset_machine(self) -> None:
        self.stop()
        self.cpu.reset()
        if self._rom_data is not None:
            self.cpu.load_rom(self._rom_data)
        self._was_sounding = False
        self._update_ui_state(False)
        self.display_view.refresh()
        self.register_view.update_registers()

    # @intent:responsibility 新しいROMに切り替えます。
    # @intent:post-condition 読み込みに失敗した場合、マシンと現在のROMは変更されません。
    def load_rom(self, file_name: str) -> None:
        self._rom_data = RomLoader().read(file_name)
        self._rom_path = file_name
        self.reset_machine()
        self.statusBar().showMessage(f"Loaded {file_name}")
        logger.info("Loaded ROM %s", file_name)

    @Slot()
    def _open_rom(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            try:
                self.load_rom(file_name)
            except Chip8Error as e:
                QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")
                return
            self.start()

    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.keypad_controller.handle_key(event.key(), True):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.keypad_controller.handle_key(event.key(), False):
            super().keyReleaseEvent(event)

    def closeEvent(self, event: QCloseEvent):
        self._timer.stop()
        event.accept()
