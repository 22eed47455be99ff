from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np


RIGHT_IRIS_IDX = [474, 475, 476, 477]
LEFT_IRIS_IDX = [469, 470, 471, 472]
# outer, inner, upper lid, lower lid
RIGHT_EYE_LIDS = (33, 133, 159, 145)
LEFT_EYE_LIDS = (263, 362, 386, 374)

# eyelid opening / eye width below this is treated as a blink
BLINK_RATIO = 0.15


@dataclass
class EyeFeatures:
    nx: float
    ny: float
    iris_center: Tuple[float, float]


@dataclass
class FaceFrame:
    feature: Tuple[float, float]  # (nx, ny) averaged over open eyes
    landmarks: List[Tuple[float, float, float]]  # full mesh in pixels
    eyes: List[EyeFeatures]


class GazeParser:
    """MediaPipe FaceMesh wrapper producing eye features and the landmark mesh."""

    def __init__(self, median_window: int = 5) -> None:
        self._mesh = mp.solutions.face_mesh.FaceMesh(
            max_num_faces=1, refine_landmarks=True, min_detection_confidence=0.5, min_tracking_confidence=0.5
        )
        self._iris_hist: dict[str, Deque[Tuple[float, float]]] = {
            "right": deque(maxlen=median_window),
            "left": deque(maxlen=median_window),
        }

    def reset(self) -> None:
        for hist in self._iris_hist.values():
            hist.clear()

    def close(self) -> None:
        self._mesh.close()

    def _extract_eye(self, pts: List[Tuple[float, float, float]], iris_idx: List[int], lids: Tuple[int, int, int, int], tag: str) -> Optional[EyeFeatures]:
        iris = [pts[i] for i in iris_idx]
        cx = sum(p[0] for p in iris) / len(iris)
        cy = sum(p[1] for p in iris) / len(iris)
        x_outer, _ = pts[lids[0]][:2]
        x_inner, _ = pts[lids[1]][:2]
        _, y_up = pts[lids[2]][:2]
        _, y_low = pts[lids[3]][:2]
        eye_w = max(1.0, abs(x_inner - x_outer))
        eye_h = max(1.0, abs(y_low - y_up))
        if (eye_h / eye_w) < BLINK_RATIO:
            return None
        # Median smoothing for iris center
        hist = self._iris_hist[tag]
        hist.append((cx, cy))
        cx_s = float(np.median([p[0] for p in hist]))
        cy_s = float(np.median([p[1] for p in hist]))
        # Normalize along the outer->inner direction so both eyes share orientation
        nx = (cx_s - x_outer) / (x_inner - x_outer) if x_inner != x_outer else 0.5
        ny = (cy_s - min(y_up, y_low)) / eye_h
        nx = float(max(0.0, min(1.0, nx)))
        ny = float(max(0.0, min(1.0, ny)))
        return EyeFeatures(nx=nx, ny=ny, iris_center=(cx_s, cy_s))

    def process(self, frame) -> Optional[FaceFrame]:
        if frame is None:
            return None
        h, w = frame.shape[:2]
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        res = self._mesh.process(rgb)
        if not res.multi_face_landmarks:
            return None
        face = res.multi_face_landmarks[0]
        pts = [(p.x * w, p.y * h, p.z * w) for p in face.landmark]
        if len(pts) <= max(RIGHT_IRIS_IDX):
            return None

        eyes = [
            e for e in (
                self._extract_eye(pts, RIGHT_IRIS_IDX, RIGHT_EYE_LIDS, "right"),
                self._extract_eye(pts, LEFT_IRIS_IDX, LEFT_EYE_LIDS, "left"),
            )
            if e is not None
        ]
        if not eyes:
            return None
        nx = sum(e.nx for e in eyes) / len(eyes)
        ny = sum(e.ny for e in eyes) / len(eyes)
        return FaceFrame(feature=(nx, ny), landmarks=pts, eyes=eyes)
