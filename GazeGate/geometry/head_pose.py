"""
Head-pose geometry from raw facial landmarks.

Only the MediaPipe FaceMesh layout (468 points, 478 with iris refinement) is
supported. Sparse legacy layouts (dlib 68 / clmtrackr 71) are recognized but
return no pose.

The angles are image-plane proxies, not true Euler angles:
- yaw: where the nose tip projects on the eye line, 0.0 at the midpoint
- pitch: nose drop below the eye line in eye-distance units
- roll: eye line angle in radians
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple


LEFT_EYE_OUTER = 33
RIGHT_EYE_OUTER = 263
NOSE_TIP = 1

DENSE_COUNTS = (468, 478)
SPARSE_COUNTS = (68, 71)


class LandmarkLayout(Enum):
    DENSE_MESH = "dense"
    SPARSE_LEGACY = "sparse"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class HeadPose:
    yaw: float
    pitch: float
    roll: float
    eye_distance: float


def detect_layout(landmarks: Optional[Sequence[Any]]) -> LandmarkLayout:
    if landmarks is None:
        return LandmarkLayout.UNSUPPORTED
    try:
        n = len(landmarks)
    except TypeError:
        return LandmarkLayout.UNSUPPORTED
    if n in DENSE_COUNTS:
        return LandmarkLayout.DENSE_MESH
    if n in SPARSE_COUNTS:
        return LandmarkLayout.SPARSE_LEGACY
    return LandmarkLayout.UNSUPPORTED


def _xy(point: Any) -> Optional[Tuple[float, float]]:
    # MediaPipe NormalizedLandmark exposes .x/.y; everything else is indexable
    try:
        if hasattr(point, "x") and hasattr(point, "y"):
            x, y = float(point.x), float(point.y)
        else:
            x, y = float(point[0]), float(point[1])
    except (TypeError, ValueError, IndexError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return x, y


def estimate(landmarks: Optional[Sequence[Any]]) -> Optional[HeadPose]:
    """Return the head pose for a dense landmark set, or None."""
    if detect_layout(landmarks) is not LandmarkLayout.DENSE_MESH:
        return None
    if landmarks is None:
        return None
    left = _xy(landmarks[LEFT_EYE_OUTER])
    right = _xy(landmarks[RIGHT_EYE_OUTER])
    nose = _xy(landmarks[NOSE_TIP])
    if left is None or right is None or nose is None:
        return None

    ex = right[0] - left[0]
    ey = right[1] - left[1]
    dist_sq = ex * ex + ey * ey
    eye_distance = math.sqrt(dist_sq)
    if eye_distance <= 0.0:
        return None

    nx = nose[0] - left[0]
    ny = nose[1] - left[1]
    yaw = (nx * ex + ny * ey) / dist_sq - 0.5
    pitch = (nose[1] - (left[1] + right[1]) / 2.0) / eye_distance
    roll = math.atan2(ey, ex)
    return HeadPose(yaw=yaw, pitch=pitch, roll=roll, eye_distance=eye_distance)
