from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np
from PySide6.QtCore import QPoint, QPointF, QSize, Qt, Signal
from PySide6.QtGui import QCursor, QImage, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from .config import HotZoneConfig
from .geometry import Rect
from .logger import get_logger
from .surface import Bounds
from .widget import HotZone, attach

_logger = get_logger("ui_hotzone")

RGBA_CHANNELS = 4

# CSS-style hint -> Qt cursor
CURSOR_SHAPES = {
    "default": Qt.CursorShape.ArrowCursor,
    "crosshair": Qt.CursorShape.CrossCursor,
    "move": Qt.CursorShape.SizeAllCursor,
    "n-resize": Qt.CursorShape.SizeVerCursor,
    "s-resize": Qt.CursorShape.SizeVerCursor,
    "e-resize": Qt.CursorShape.SizeHorCursor,
    "w-resize": Qt.CursorShape.SizeHorCursor,
    "nw-resize": Qt.CursorShape.SizeFDiagCursor,
    "se-resize": Qt.CursorShape.SizeFDiagCursor,
    "ne-resize": Qt.CursorShape.SizeBDiagCursor,
    "sw-resize": Qt.CursorShape.SizeBDiagCursor,
}


class HotZoneView(QWidget):
    """Qt surface for a :class:`HotZone`.

    Paints the composited frame at 1:1 scale and forwards mouse events, in
    global coordinates, to the attached selector.
    """

    selectionChanged = Signal(object)

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._qimage: QImage | None = None
        self._frame: np.ndarray | None = None
        self._hotzone: HotZone | None = None
        self._last_global = QPointF()
        self.setMouseTracking(True)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self.setCursor(Qt.CursorShape.CrossCursor)

    @property
    def hotzone(self) -> HotZone | None:
        return self._hotzone

    def attach(self, pixels: np.ndarray, config: HotZoneConfig | Mapping[str, Any] | None = None) -> HotZone:
        """Show ``pixels`` and start accepting selections on them."""
        h, w = int(pixels.shape[0]), int(pixels.shape[1])
        self.setFixedSize(w, h)
        _logger.debug("view attached: %dx%d", w, h)
        self._hotzone = attach(self, pixels, config, on_selection_changed=self._emit_selection)
        return self._hotzone

    def _emit_selection(self, rect: Rect | None) -> None:
        self.selectionChanged.emit(rect)

    # ---- DrawableSurface ----
    def bounds(self) -> Bounds:
        tl = self.mapToGlobal(QPoint(0, 0))
        return Bounds(float(tl.x()), float(tl.y()), float(self.width()), float(self.height()))

    def put_pixels(self, frame: np.ndarray) -> None:
        # The compositor reuses one frame buffer; wrap it once and just repaint.
        if self._qimage is None or self._frame is not frame:
            h, w = int(frame.shape[0]), int(frame.shape[1])
            self._frame = frame
            self._qimage = QImage(frame.data, w, h, w * RGBA_CHANNELS, QImage.Format.Format_RGBA8888)
        self.update()

    def set_cursor(self, name: str) -> None:
        shape = CURSOR_SHAPES.get(name, Qt.CursorShape.ArrowCursor)
        self.setCursor(QCursor(shape))

    def current_image(self) -> QImage | None:
        return self._qimage

    # ---- Qt events ----
    def sizeHint(self) -> QSize:  # type: ignore[override]
        if self._qimage is not None:
            return self._qimage.size()
        return super().sizeHint()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        if self._qimage is None:
            return
        painter = QPainter(self)
        try:
            painter.drawImage(0, 0, self._qimage)
        finally:
            painter.end()

    def _forward(self, event) -> QPointF | None:
        if self._hotzone is None:
            return None
        pos = event.globalPosition()
        self._last_global = QPointF(pos)
        return pos

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = self._forward(event)
        if pos is not None:
            self._hotzone.pointer_down(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        pos = self._forward(event)
        if pos is not None:
            self._hotzone.pointer_move(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        pos = self._forward(event)
        if pos is not None:
            self._hotzone.pointer_up(pos.x(), pos.y())
        event.accept()

    def leaveEvent(self, event) -> None:  # type: ignore[override]
        if self._hotzone is not None:
            self._hotzone.pointer_leave(self._last_global.x(), self._last_global.y())
        super().leaveEvent(event)
