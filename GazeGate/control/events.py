"""
Event dataclasses passed to session listeners: calibration, reference capture,
decision changes and playback commands.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from GazeGate.attention.classifier import AttentionDecision
    from GazeGate.calibration.models import CalibrationTarget
    from GazeGate.geometry.head_pose import HeadPose


@dataclass
class CalibrationFinished:
    targets: Tuple["CalibrationTarget", ...]


@dataclass
class ReferenceCaptured:
    pose: Optional["HeadPose"]  # None when the anchor frame had no usable landmarks


@dataclass
class DecisionChanged:
    decision: "AttentionDecision"
    previous: Optional["AttentionDecision"]


@dataclass
class PlaybackCommand:
    command: str  # 'play'|'pause'
