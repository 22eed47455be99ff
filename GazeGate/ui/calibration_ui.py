"""
Fullscreen PyQt6 calibration overlay.

Only the active target is drawn. Its opacity grows with the number of
confirmations and it turns green when done. A click inside the active
target's circle emits targetClicked(target_id); clicks anywhere else are
ignored.
"""
from __future__ import annotations

from typing import Optional, Tuple

try:
    from PyQt6.QtCore import Qt, pyqtSignal
    from PyQt6.QtGui import QColor, QFont, QPainter
    from PyQt6.QtWidgets import QWidget
except Exception:  # pragma: no cover
    QWidget = object  # type: ignore
    pyqtSignal = lambda *a, **k: None  # type: ignore

from GazeGate.calibration.models import CalibrationProgress, CalibrationTarget


class CalibrationUI(QWidget):  # type: ignore[misc]
    targetClicked = pyqtSignal(int)
    cancelled = pyqtSignal()

    def __init__(self, radius_px: int = 22):  # type: ignore[no-redef]
        super().__init__()
        self.radius_px = radius_px
        self._target: Optional[CalibrationTarget] = None
        self._progress: Optional[CalibrationProgress] = None
        self.setWindowFlags(Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint)
        self.setCursor(Qt.CursorShape.CrossCursor)

    # -----------------
    # Public API
    # -----------------
    def start(self) -> None:
        self.showFullScreen()
        self.raise_()
        self.activateWindow()

    def viewport(self) -> Tuple[int, int]:
        return self.width(), self.height()

    def show_target(self, target: Optional[CalibrationTarget], progress: CalibrationProgress) -> None:
        self._target = target
        self._progress = progress
        self.update()

    # -----------------
    # Internals
    # -----------------
    def _target_center(self) -> Optional[Tuple[int, int]]:
        if self._target is None:
            return None
        return self._target.screen_xy(self.viewport())

    def mousePressEvent(self, event):  # type: ignore[override]
        center = self._target_center()
        if center is None or self._target is None:
            return
        pos = event.position()
        dx = pos.x() - center[0]
        dy = pos.y() - center[1]
        if dx * dx + dy * dy <= self.radius_px * self.radius_px:
            self.targetClicked.emit(self._target.id)  # type: ignore[attr-defined]

    def keyPressEvent(self, event):  # type: ignore[override]
        if event.key() == Qt.Key.Key_Escape:
            self.cancelled.emit()  # type: ignore[attr-defined]
            self.close()

    def paintEvent(self, event):  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(20, 20, 20))
        painter.setPen(QColor(230, 230, 230))
        painter.setFont(QFont("Sans", 16))
        lines = [
            "Calibration",
            "Click the red dot until it turns green. Look exactly at the dot while clicking!",
        ]
        if self._progress is not None:
            p = self._progress
            lines.append(f"Point {min(p.index + 1, p.total)}/{p.total}  ({p.confirmations}/{p.required})")
        y = int(self.height() * 0.2)
        for text in lines:
            painter.drawText(0, y, self.width(), 30, Qt.AlignmentFlag.AlignHCenter, text)
            y += 34

        center = self._target_center()
        if center is not None and self._target is not None and self._progress is not None:
            required = max(1, self._progress.required)
            opacity = max(0.2, min(1.0, self._target.confirmations / float(required)))
            color = QColor(76, 175, 80) if self._target.done else QColor(255, 0, 0)
            color.setAlphaF(opacity)
            r = self.radius_px
            painter.setBrush(color)
            painter.setPen(QColor(255, 255, 255))
            painter.drawEllipse(center[0] - r, center[1] - r, r * 2, r * 2)
        painter.end()
