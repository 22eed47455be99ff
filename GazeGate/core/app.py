from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple

try:
    from PyQt6.QtCore import QTimer
    from PyQt6.QtGui import QGuiApplication
    from PyQt6.QtWidgets import QApplication, QMessageBox
except Exception:  # pragma: no cover
    QApplication = None  # type: ignore
    QTimer = None  # type: ignore

from GazeGate.attention.models import GazeSample
from GazeGate.control.events import CalibrationFinished, DecisionChanged
from GazeGate.control.playback import PlaybackController
from GazeGate.core.session import AttentionSession
from GazeGate.core.settings import SettingsManager
from GazeGate.tracking.pipeline import Pipeline
from GazeGate.tracking.regressor import GazeRegressor
from GazeGate.tracking.smoothing import KalmanSmoother
from GazeGate.ui.calibration_ui import CalibrationUI
from GazeGate.ui.main_window import MainWindow
from GazeGate.ui.video_player import QtVideoPlayer

logger = logging.getLogger(__name__)

MODEL_FILE = "gaze_samples.json"


class AppCore:
    def __init__(self, settings: SettingsManager, video_path: Optional[str] = None) -> None:
        self.settings = settings
        self.win = MainWindow()
        self.player = QtVideoPlayer(video_output=self.win.video_surface)
        self.session = AttentionSession(
            playback=PlaybackController(self.player),
            thresholds=settings.attention_thresholds(),
            calibration=settings.calibration_config(),
        )
        self.session.calibrator.add_finished_listener(self._on_calibration_finished)
        self.session.add_decision_listener(self._on_decision_changed)

        self._model_path = settings.state_path(MODEL_FILE)
        smoother = KalmanSmoother(*settings.kalman_noise()) if settings.kalman_enabled() else None
        self.pipeline = Pipeline(
            camera_index=settings.camera_index(),
            resolution=settings.camera_resolution(),
            fps=settings.camera_fps(),
            regressor=self._load_regressor(),
            smoother=smoother,
        )
        self._last_sample = GazeSample.no_face()
        self._calibration_ui: Optional[CalibrationUI] = None

        self.win.recalibrateRequested.connect(self.restart_calibration)  # type: ignore[attr-defined]
        self.win.videoSelected.connect(self.open_video)  # type: ignore[attr-defined]

        self.timer = QTimer()
        self.timer.setInterval(max(1, int(1000 / max(1, settings.camera_fps()))))
        self.timer.timeout.connect(self._on_tick)  # type: ignore[attr-defined]

        path = video_path or settings.video_path()
        if path:
            self.open_video(path)

    # Setup -------------------------------------------------------------
    def _load_regressor(self) -> GazeRegressor:
        if self.settings.persist_model() and os.path.exists(self._model_path):
            try:
                reg = GazeRegressor.load(self._model_path)
                logger.info("Loaded %d stored gaze samples", len(reg.samples))
                return reg
            except (OSError, ValueError, KeyError) as e:
                logger.warning("Ignoring stored gaze samples: %s", e)
        return GazeRegressor()

    def _viewport(self) -> Tuple[int, int]:
        if self._calibration_ui is not None:
            w, h = self._calibration_ui.viewport()
            if w > 0 and h > 0:
                return w, h
        screen = QGuiApplication.primaryScreen()
        if screen is not None:
            geom = screen.geometry()
            return geom.width(), geom.height()
        return (1920, 1080)

    def start(self) -> bool:
        try:
            self.pipeline.start()
        except RuntimeError as e:
            QMessageBox.warning(self.win, "Camera", f"Failed to start camera.\n{e}")
            return False
        self.win.showMaximized()
        self.timer.start()
        self.start_calibration()
        return True

    def shutdown(self) -> None:
        self.timer.stop()
        self.player.pause()
        self.pipeline.stop()
        self.pipeline.parser.close()

    # Video -------------------------------------------------------------
    def open_video(self, path: str) -> None:
        try:
            self.player.load(path)
        except FileNotFoundError:
            QMessageBox.warning(self.win, "Video", f"File not found:\n{path}")
            return
        self.settings.set_video_path(path)
        try:
            self.settings.save()
        except OSError as e:
            logger.warning("Could not save settings: %s", e)
        self.win.statusBar().showMessage(os.path.basename(path))

    # Calibration -------------------------------------------------------
    def start_calibration(self) -> None:
        if self._calibration_ui is not None:
            self._calibration_ui.close()
        # New run replaces the stored samples; the loaded model predicts until it retrains
        self.pipeline.regressor.clear_samples()
        ui = CalibrationUI()
        ui.targetClicked.connect(self._on_target_clicked)  # type: ignore[attr-defined]
        ui.cancelled.connect(self._on_calibration_cancelled)  # type: ignore[attr-defined]
        self._calibration_ui = ui
        ui.start()
        self._refresh_calibration_ui()

    def restart_calibration(self) -> None:
        self.session.restart()
        self.pipeline.reset_model()
        if os.path.exists(self._model_path):
            try:
                os.remove(self._model_path)
            except OSError as e:
                logger.warning("Could not remove stored gaze samples: %s", e)
        self.start_calibration()

    def _refresh_calibration_ui(self) -> None:
        if self._calibration_ui is None:
            return
        cal = self.session.calibrator
        self._calibration_ui.show_target(cal.active_target(), cal.progress())
        self.win.update_status(self.session.status())

    def _on_target_clicked(self, target_id: int) -> None:
        target = self.session.calibrator.active_target()
        if target is None or target.id != target_id:
            return
        # Record before confirming: the final confirmation trains the model
        feature = self.pipeline.training_feature()
        if feature is not None:
            self.pipeline.regressor.add(feature, target.screen_xy(self._viewport()))
        self.session.confirm(target_id, self._last_sample)
        self._refresh_calibration_ui()

    def _on_calibration_finished(self, event: CalibrationFinished) -> None:
        self.pipeline.regressor.train()
        if self.settings.persist_model():
            try:
                self.pipeline.regressor.save(self._model_path)
            except OSError as e:
                logger.warning("Failed to save calibration: %s", e)
        if self._calibration_ui is not None:
            self._calibration_ui.close()
            self._calibration_ui = None
        self.win.update_status(self.session.status())

    def _on_calibration_cancelled(self) -> None:
        self._calibration_ui = None
        self.win.update_status(self.session.status())

    # Tracking ----------------------------------------------------------
    def _on_decision_changed(self, event: DecisionChanged) -> None:
        self.win.update_decision(event.decision)

    def _on_tick(self) -> None:
        res = self.pipeline.process()
        self._last_sample = res.sample
        self.win.update_preview(res.frame, res.sample.landmarks)
        self.win.update_sample(res.sample)
        if self._calibration_ui is not None:
            return
        self.session.process(res.sample, self._viewport())
        self.win.update_status(self.session.status())


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Play a video only while you are looking at it.")
    ap.add_argument("--video", default=None, help="Video file to gate")
    ap.add_argument("--camera", type=int, default=None, help="Webcam index (overrides settings)")
    ap.add_argument("--settings", default=None, help="Path to settings JSON")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if QApplication is None:
        print("PyQt6 is not installed. Please install dependencies.")
        return 1
    try:
        settings = SettingsManager(args.settings)
    except ValueError as e:
        print(f"Invalid settings: {e}")
        return 1
    if args.camera is not None:
        settings.set_camera_index(args.camera)
    app = QApplication(sys.argv)
    core = AppCore(settings, video_path=args.video)
    if not core.start():
        return 1
    code = app.exec()
    core.shutdown()
    return int(code)


if __name__ == "__main__":
    raise SystemExit(main())
