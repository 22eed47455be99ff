"""
Attention data models: per-tick gaze samples, thresholds and decisions.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple


@dataclass(frozen=True)
class GazeSample:
    x: Optional[float]
    y: Optional[float]
    valid_face: bool
    landmarks: Optional[Sequence[Any]] = None

    @classmethod
    def no_face(cls) -> "GazeSample":
        return cls(x=None, y=None, valid_face=False, landmarks=None)


class ReasonCode(Enum):
    NONE = "none"
    OFF_SCREEN = "off_screen"
    GAZE_OUTSIDE_SAFE_ZONE = "gaze_outside_safe_zone"
    FACE_TOO_FAR = "face_too_far"
    FACE_TOO_CLOSE = "face_too_close"
    FACE_TURNED = "face_turned"
    FACE_PITCHED = "face_pitched"
    HEAD_TILTED = "head_tilted"
    NO_FACE = "no_face"


POSE_REASONS = frozenset({
    ReasonCode.FACE_TOO_FAR,
    ReasonCode.FACE_TOO_CLOSE,
    ReasonCode.FACE_TURNED,
    ReasonCode.FACE_PITCHED,
    ReasonCode.HEAD_TILTED,
})


@dataclass(frozen=True)
class AttentionThresholds:
    margin_x: float = 0.15        # fraction of width, each side
    margin_y: float = 0.28        # fraction of height, top and bottom
    min_distance_ratio: float = 0.8
    max_distance_ratio: float = 1.2
    clamp_min: float = 0.5
    clamp_max: float = 2.0
    yaw: float = 0.15             # scaled by distance ratio
    pitch: float = 0.12           # scaled by distance ratio
    roll: float = 0.5             # radians, fixed

    def __post_init__(self) -> None:
        if not (0.0 <= self.margin_x < 0.5 and 0.0 <= self.margin_y < 0.5):
            raise ValueError("safe-zone margins must be in [0, 0.5)")
        if not (0.0 < self.min_distance_ratio <= self.max_distance_ratio):
            raise ValueError("distance ratio bounds must satisfy 0 < min <= max")
        if not (0.0 < self.clamp_min <= self.clamp_max):
            raise ValueError("clamp bounds must satisfy 0 < min <= max")
        if self.yaw <= 0 or self.pitch <= 0 or self.roll <= 0:
            raise ValueError("angular thresholds must be positive")


@dataclass(frozen=True)
class SafeZone:
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class AttentionMetrics:
    """Diagnostics for the status surface; None where a check did not run."""
    safe_zone: SafeZone
    in_safe_zone: bool
    distance_ratio: Optional[float] = None
    yaw_deviation: Optional[float] = None
    pitch_deviation: Optional[float] = None
    roll_deviation: Optional[float] = None
    yaw_threshold: Optional[float] = None
    pitch_threshold: Optional[float] = None
    roll_threshold: Optional[float] = None


@dataclass(frozen=True)
class AttentionDecision:
    should_play: bool
    reason: ReasonCode
    metrics: Optional[AttentionMetrics] = None

    def same_outcome(self, other: Optional["AttentionDecision"]) -> bool:
        return other is not None and other.should_play == self.should_play and other.reason == self.reason


Viewport = Tuple[int, int]
