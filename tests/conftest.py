from __future__ import annotations

from typing import List, Tuple

import pytest

from GazeGate.geometry.head_pose import LEFT_EYE_OUTER, NOSE_TIP, RIGHT_EYE_OUTER


def mesh(
    left: Tuple[float, float] = (100.0, 200.0),
    right: Tuple[float, float] = (200.0, 200.0),
    nose: Tuple[float, float] = (150.0, 230.0),
    count: int = 478,
) -> List[Tuple[float, float, float]]:
    """Dense landmark list with only the head-pose points placed deliberately."""
    pts = [(0.0, 0.0, 0.0)] * count
    pts[LEFT_EYE_OUTER] = (left[0], left[1], 0.0)
    pts[RIGHT_EYE_OUTER] = (right[0], right[1], 0.0)
    pts[NOSE_TIP] = (nose[0], nose[1], 0.0)
    return pts


@pytest.fixture
def make_mesh():
    return mesh
