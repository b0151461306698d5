# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
表示ビットマップの描画、キー入力の変換、スケジューラの起動と停止を管理します。
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer, Signal, Slot
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import QApplication, QMainWindow

from retro_chip8.config.models import EmulatorConfig
from retro_chip8.core.machine import Machine
from retro_chip8.scheduler import Scheduler
from .display_view import DisplayView
from .keymap import KeyMapper, key_value

logger = logging.getLogger(__name__)

# @intent:constant 描画の更新間隔（約60Hz）。
REFRESH_INTERVAL_MS = 16


# @intent:responsibility アプリケーションのメインウィンドウを定義し、Machineと描画・入力を接続します。
class MainWindow(QMainWindow):
    """
    スケジューラのコールバックはワーカースレッドから呼ばれるため、
    Signalを経由してGUIスレッドで処理します。
    """
    terminated = Signal(object)
    sound_off = Signal()

    def __init__(self, machine: Machine, config: Optional[EmulatorConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self._machine = machine
        self._config = config or EmulatorConfig()
        self._key_mapper = KeyMapper(self._config.keymap)
        self.exit_error: Optional[BaseException] = None

        self.setWindowTitle("CHIP-8")
        display = self._config.display
        self.display_view = DisplayView(display.foreground, display.background, display.scale)
        self.setCentralWidget(self.display_view)

        self.scheduler = Scheduler(
            machine,
            cpu_hz=self._config.clock.cpu_hz,
            timer_hz=self._config.clock.timer_hz,
            on_sound_off=self.sound_off.emit,
            on_terminate=self.terminated.emit,
        )
        self.terminated.connect(self._on_terminated)
        self.sound_off.connect(self._on_sound_off)

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setInterval(REFRESH_INTERVAL_MS)
        self._refresh_timer.timeout.connect(self._refresh_display)

    # @intent:responsibility 命令タスク・タイマータスクと描画更新を開始します。
    def start(self) -> None:
        self.scheduler.start()
        self._refresh_timer.start()

    @Slot()
    def _refresh_display(self):
        self.display_view.set_frame(self._machine.display_snapshot())

    # @intent:responsibility 停止命令または致命的エラーでウィンドウを閉じ、プロセス終了へ繋げます。
    @Slot(object)
    def _on_terminated(self, error):
        self.exit_error = error
        self._refresh_display()
        self.close()

    @Slot()
    def _on_sound_off(self):
        QApplication.beep()

    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat():
            return
        if key_value(event.key()) == key_value(Qt.Key.Key_Escape):
            self.close()
            return
        index = self._key_mapper.translate(event.key())
        if index is None:
            super().keyPressEvent(event)
            return
        self._machine.set_key_down(index)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat():
            return
        index = self._key_mapper.translate(event.key())
        if index is None:
            super().keyReleaseEvent(event)
            return
        self._machine.set_key_up(index)

    # @intent:responsibility ウィンドウが閉じられる際に、バックグラウンドのタスクを停止・待機します。
    def closeEvent(self, event: QCloseEvent):
        self._refresh_timer.stop()
        self.scheduler.stop()
        self.scheduler.join(1.0)
        event.accept()
