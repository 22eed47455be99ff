from __future__ import annotations

from typing import Optional, Sequence, Tuple

try:
    from PyQt6.QtCore import QPoint, Qt
    from PyQt6.QtGui import QColor, QImage, QPainter, QPen
    from PyQt6.QtWidgets import QWidget
    import cv2  # type: ignore
except Exception:  # pragma: no cover
    QWidget = object  # type: ignore
    QImage = object  # type: ignore
    cv2 = None  # type: ignore

from GazeGate.geometry.head_pose import LEFT_EYE_OUTER, NOSE_TIP, RIGHT_EYE_OUTER


class CameraPreview(QWidget):  # type: ignore[misc]
    """Webcam preview with the head-pose landmarks (eye corners, nose tip) drawn on top."""

    def __init__(self):  # type: ignore[no-redef]
        super().__init__()
        self._frame = None
        self._landmarks: Optional[Sequence[Tuple[float, ...]]] = None
        self._face_ok = False
        self.setMinimumSize(240, 135)

    def set_frame(self, frame, landmarks: Optional[Sequence[Tuple[float, ...]]] = None) -> None:
        self._frame = frame
        self._landmarks = landmarks
        self._face_ok = landmarks is not None
        self.update()

    def paintEvent(self, e):  # type: ignore[override]
        if self._frame is None or QImage is object:
            return
        img = self._to_qimage(self._frame)
        if img is None:
            return
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(0, 0, 0))
        # scale to fit while keeping aspect
        target = self.rect()
        pix = img.scaled(target.size(), Qt.AspectRatioMode.KeepAspectRatio, Qt.TransformationMode.SmoothTransformation)
        ox = target.x() + (target.width() - pix.width()) // 2
        oy = target.y() + (target.height() - pix.height()) // 2
        painter.drawImage(ox, oy, pix)

        fw, fh = img.width(), img.height()
        if fw <= 0 or fh <= 0:
            painter.end()
            return
        scale = min(target.width() / fw, target.height() / fh)

        # frame border: green with a face, red without
        painter.setPen(QPen(QColor(0, 200, 0) if self._face_ok else QColor(220, 0, 0), 3))
        painter.drawRect(ox, oy, pix.width() - 1, pix.height() - 1)

        if self._landmarks is not None and len(self._landmarks) > RIGHT_EYE_OUTER:
            painter.setPen(QPen(QColor(0, 200, 255), 2))
            pts = []
            for idx in (LEFT_EYE_OUTER, RIGHT_EYE_OUTER, NOSE_TIP):
                lx, ly = self._landmarks[idx][0], self._landmarks[idx][1]
                p = QPoint(ox + int(lx * scale), oy + int(ly * scale))
                pts.append(p)
                painter.drawEllipse(p, 3, 3)
            painter.drawLine(pts[0], pts[1])
        painter.end()

    @staticmethod
    def _to_qimage(frame):
        if cv2 is None:
            return None
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        h, w, ch = rgb.shape
        return QImage(rgb.data, w, h, ch * w, QImage.Format.Format_RGB888).copy()
