from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from GazeGate.attention.models import GazeSample
from GazeGate.camera import Camera

from .gaze_parser import FaceFrame, GazeParser
from .regressor import GazeRegressor
from .smoothing import KalmanSmoother

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    frame: Optional[object]
    face: Optional[FaceFrame]
    sample: GazeSample


def build_sample(face: Optional[FaceFrame], gaze_xy: Optional[Tuple[float, float]]) -> GazeSample:
    """Combine parser and regressor output into the sample the session consumes.

    A visible face without a trained gaze model still carries landmarks, so
    the reference pose can be captured during calibration.
    """
    if face is None:
        return GazeSample.no_face()
    if gaze_xy is None or not (math.isfinite(gaze_xy[0]) and math.isfinite(gaze_xy[1])):
        return GazeSample(x=None, y=None, valid_face=True, landmarks=face.landmarks)
    return GazeSample(x=gaze_xy[0], y=gaze_xy[1], valid_face=True, landmarks=face.landmarks)


class Pipeline:
    def __init__(
        self,
        camera_index: int,
        resolution: Tuple[int, int] = (1280, 720),
        fps: int = 30,
        regressor: Optional[GazeRegressor] = None,
        smoother: Optional[KalmanSmoother] = None,
    ) -> None:
        self.cam = Camera(index=camera_index, width=resolution[0], height=resolution[1], target_fps=fps)
        self.parser = GazeParser()
        self.regressor = regressor if regressor is not None else GazeRegressor()
        self.smoother = smoother
        self.running = False
        self._last_face: Optional[FaceFrame] = None

    def start(self) -> None:
        if self.running:
            return
        self.cam.open()
        self.running = True

    def stop(self) -> None:
        if not self.running:
            return
        self.cam.close()
        self.running = False

    def reset_model(self) -> None:
        self.regressor.reset()
        self.parser.reset()
        if self.smoother is not None:
            self.smoother.reset()

    def training_feature(self) -> Optional[Tuple[float, float]]:
        """Eye feature of the most recent frame, for calibration samples."""
        return self._last_face.feature if self._last_face is not None else None

    def process(self) -> FrameResult:
        fr = self.cam.read() if self.running else None
        if fr is None:
            self._last_face = None
            return FrameResult(frame=None, face=None, sample=GazeSample.no_face())
        face = self.parser.process(fr)
        self._last_face = face
        if face is None:
            return FrameResult(frame=fr, face=None, sample=GazeSample.no_face())
        gaze = self.regressor.predict(face.feature)
        if gaze is not None and self.smoother is not None:
            gaze = self.smoother.apply(gaze)
        return FrameResult(frame=fr, face=face, sample=build_sample(face, gaze))
