from __future__ import annotations

from typing import Optional

try:
    from PyQt6.QtCore import pyqtSignal
    from PyQt6.QtMultimediaWidgets import QVideoWidget
    from PyQt6.QtWidgets import (
        QFileDialog,
        QGroupBox,
        QHBoxLayout,
        QLabel,
        QMainWindow,
        QPushButton,
        QStatusBar,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    QWidget = object  # type: ignore
    QMainWindow = object  # type: ignore
    pyqtSignal = lambda *a, **k: None  # type: ignore

from GazeGate.attention.models import AttentionDecision, GazeSample, ReasonCode
from GazeGate.core.session import SessionStatus

from .video_widget import CameraPreview


REASON_TEXT = {
    ReasonCode.NONE: "Yes",
    ReasonCode.OFF_SCREEN: "No (Off-screen)",
    ReasonCode.GAZE_OUTSIDE_SAFE_ZONE: "No (Near edge)",
    ReasonCode.FACE_TOO_FAR: "No (Too far)",
    ReasonCode.FACE_TOO_CLOSE: "No (Too close)",
    ReasonCode.FACE_TURNED: "No (Head turned)",
    ReasonCode.FACE_PITCHED: "No (Head up/down)",
    ReasonCode.HEAD_TILTED: "No (Head tilted)",
    ReasonCode.NO_FACE: "No (Face not found / Eyes closed)",
}


def _fmt(v: Optional[float], digits: int = 2) -> str:
    return "--" if v is None else f"{v:.{digits}f}"


class MainWindow(QMainWindow):  # type: ignore[misc]
    recalibrateRequested = pyqtSignal()
    videoSelected = pyqtSignal(str)

    def __init__(self):  # type: ignore[no-redef]
        super().__init__()
        self.setWindowTitle("GazeGate")
        self._build_ui()

    def _build_ui(self) -> None:
        central = QWidget()
        root = QHBoxLayout()

        # Left: media
        self.video_surface = QVideoWidget()
        root.addWidget(self.video_surface, stretch=4)

        # Right: camera + status
        right = QVBoxLayout()
        self.preview = CameraPreview()
        right.addWidget(self.preview)

        self.status_label = QLabel("Calibration required")
        self.status_label.setStyleSheet("font-weight: bold;")
        right.addWidget(self.status_label)

        grp = QGroupBox("Attention")
        gl = QVBoxLayout()
        self.lbl_looking = QLabel("Looking at screen: --")
        self.lbl_gaze = QLabel("Gaze: -- , --")
        self.lbl_calib = QLabel("Calibration: --")
        gl.addWidget(self.lbl_looking)
        gl.addWidget(self.lbl_gaze)
        gl.addWidget(self.lbl_calib)
        grp.setLayout(gl)
        right.addWidget(grp)

        dbg = QGroupBox("Head pose")
        dl = QVBoxLayout()
        self.lbl_distance = QLabel("Distance ratio: --")
        self.lbl_yaw = QLabel("Yaw: -- / --")
        self.lbl_pitch = QLabel("Pitch: -- / --")
        self.lbl_roll = QLabel("Roll: -- / --")
        for lbl in (self.lbl_distance, self.lbl_yaw, self.lbl_pitch, self.lbl_roll):
            dl.addWidget(lbl)
        dbg.setLayout(dl)
        right.addWidget(dbg)
        right.addStretch(1)

        self.btn_open = QPushButton("Open Video…")
        self.btn_recalibrate = QPushButton("Re-calibrate")
        right.addWidget(self.btn_open)
        right.addWidget(self.btn_recalibrate)

        self.btn_recalibrate.clicked.connect(self.recalibrateRequested)  # type: ignore[attr-defined]
        self.btn_open.clicked.connect(self._choose_video)  # type: ignore[attr-defined]

        root.addLayout(right, stretch=1)
        central.setLayout(root)
        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())

    def _choose_video(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open video", "", "Video files (*.mp4 *.mkv *.webm *.avi *.mov);;All files (*)")
        if path:
            self.videoSelected.emit(path)  # type: ignore[attr-defined]

    # Updates -----------------------------------------------------------
    def update_preview(self, frame, landmarks=None) -> None:
        if frame is not None:
            self.preview.set_frame(frame, landmarks)

    def update_sample(self, sample: GazeSample) -> None:
        if sample.x is None or sample.y is None:
            self.lbl_gaze.setText("Gaze: -- , --")
        else:
            self.lbl_gaze.setText(f"Gaze: {round(sample.x)} , {round(sample.y)}")

    def update_status(self, status: SessionStatus) -> None:
        p = status.calibration
        if p.complete:
            ref = "reference pose set" if status.reference is not None else "no reference pose"
            self.lbl_calib.setText(f"Calibration: done ({ref})")
        else:
            self.lbl_calib.setText(f"Calibration: point {p.index + 1}/{p.total} ({p.confirmations}/{p.required})")
        self.update_decision(status.decision, calibrated=status.calibrated)

    def update_decision(self, decision: Optional[AttentionDecision], calibrated: bool = True) -> None:
        if not calibrated:
            self.status_label.setText("Calibration required")
            self.status_label.setStyleSheet("color: orange; font-weight: bold;")
            self.lbl_looking.setText("Looking at screen: --")
            return
        if decision is None:
            return
        if decision.reason is ReasonCode.NO_FACE:
            self.status_label.setText("Face not found / Eyes closed")
            self.status_label.setStyleSheet("color: red; font-weight: bold;")
        else:
            self.status_label.setText("Tracking")
            self.status_label.setStyleSheet("color: green; font-weight: bold;")
        color = "green" if decision.should_play else ("red" if decision.reason is ReasonCode.NO_FACE else "orange")
        self.lbl_looking.setText(f"Looking at screen: {REASON_TEXT[decision.reason]}")
        self.lbl_looking.setStyleSheet(f"color: {color};")
        m = decision.metrics
        if m is None or m.distance_ratio is None:
            self.lbl_distance.setText("Distance ratio: --")
            self.lbl_yaw.setText("Yaw: -- / --")
            self.lbl_pitch.setText("Pitch: -- / --")
            self.lbl_roll.setText("Roll: -- / --")
            return
        self.lbl_distance.setText(f"Distance ratio: {_fmt(m.distance_ratio)}")
        self.lbl_yaw.setText(f"Yaw: {_fmt(m.yaw_deviation, 3)} / {_fmt(m.yaw_threshold, 3)}")
        self.lbl_pitch.setText(f"Pitch: {_fmt(m.pitch_deviation, 3)} / {_fmt(m.pitch_threshold, 3)}")
        self.lbl_roll.setText(f"Roll: {_fmt(m.roll_deviation, 3)} / {_fmt(m.roll_threshold, 3)}")
