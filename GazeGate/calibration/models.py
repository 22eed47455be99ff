"""
Calibration data models.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


# 3x3 grid, fractions of the viewport: [left, top]
TARGET_POSITIONS: Tuple[Tuple[float, float], ...] = (
    (0.1, 0.1), (0.5, 0.1), (0.9, 0.1),
    (0.1, 0.5), (0.5, 0.5), (0.9, 0.5),
    (0.1, 0.9), (0.5, 0.9), (0.9, 0.9),
)
ANCHOR_ID = 4


@dataclass
class CalibrationTarget:
    id: int
    position: Tuple[float, float]  # (fx, fy) in [0, 1]
    confirmations: int = 0
    is_anchor: bool = False
    done: bool = False

    def screen_xy(self, viewport: Tuple[int, int]) -> Tuple[int, int]:
        return int(round(self.position[0] * viewport[0])), int(round(self.position[1] * viewport[1]))


@dataclass
class CalibrationConfig:
    clicks_per_point: int = 5


def default_targets() -> List[CalibrationTarget]:
    return [
        CalibrationTarget(id=i, position=pos, is_anchor=(i == ANCHOR_ID))
        for i, pos in enumerate(TARGET_POSITIONS)
    ]


def default_sequence(targets: List[CalibrationTarget]) -> List[int]:
    """Anchor first, then the remaining targets in grid order."""
    anchors = [t.id for t in targets if t.is_anchor]
    rest = [t.id for t in targets if not t.is_anchor]
    return anchors + rest


@dataclass(frozen=True)
class CalibrationProgress:
    index: int                # position in the sequence
    total: int
    target_id: Optional[int]  # None once complete
    confirmations: int
    required: int
    complete: bool
