"""
Display View モジュール。

64x32の表示ビットマップを、ウィジェットの大きさに合わせて拡大した矩形の集合として描画します。
"""
from typing import List, Sequence, Tuple

from PySide6.QtCore import QSize
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QWidget

from retro_chip8.core.state import DISPLAY_WIDTH, DISPLAY_HEIGHT, DISPLAY_PIXELS

COLOR_FG = "#FFFFFF"
COLOR_BG = "#000000"


# @intent:utility_function 点灯ピクセルごとに、描画面上の矩形(x, y, w, h)を算出します。
def pixel_rects(pixels: Sequence[bool], width: int, height: int) -> List[Tuple[int, int, int, int]]:
    pixel_w = max(1, width // DISPLAY_WIDTH)
    pixel_h = max(1, height // DISPLAY_HEIGHT)
    rects = []
    for i, on in enumerate(pixels):
        if on:
            x = i % DISPLAY_WIDTH
            y = i // DISPLAY_WIDTH
            rects.append((x * pixel_w, y * pixel_h, pixel_w, pixel_h))
    return rects


class DisplayView(QWidget):
    """
    表示ビットマップのスナップショットを描画するウィジェット。
    ダブルバッファリングの契約はなく、常に最新のスナップショットを描画します。
    """
    def __init__(self, foreground: str = COLOR_FG, background: str = COLOR_BG, scale: int = 10, parent=None):
        super().__init__(parent)
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._scale = scale
        self._pixels: Tuple[bool, ...] = (False,) * DISPLAY_PIXELS
        self.setMinimumSize(DISPLAY_WIDTH, DISPLAY_HEIGHT)

    def sizeHint(self) -> QSize:
        return QSize(DISPLAY_WIDTH * self._scale, DISPLAY_HEIGHT * self._scale)

    def frame(self) -> Tuple[bool, ...]:
        return self._pixels

    # @intent:responsibility 新しいスナップショットを受け取り、変化があれば再描画を要求します。
    def set_frame(self, pixels: Sequence[bool]) -> None:
        pixels = tuple(pixels)
        if len(pixels) != DISPLAY_PIXELS:
            raise ValueError(f"Expected {DISPLAY_PIXELS} pixels, got {len(pixels)}")
        if pixels != self._pixels:
            self._pixels = pixels
            self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        for x, y, w, h in pixel_rects(self._pixels, self.width(), self.height()):
            painter.fillRect(x, y, w, h, self._foreground)
        painter.end()
