import math
from types import SimpleNamespace

import numpy as np
import pytest

from GazeGate.geometry.head_pose import LandmarkLayout, detect_layout, estimate


def test_frontal_face(make_mesh):
    pose = estimate(make_mesh())
    assert pose is not None
    assert pose.eye_distance == pytest.approx(100.0)
    assert pose.yaw == pytest.approx(0.0)
    assert pose.pitch == pytest.approx(0.3)
    assert pose.roll == pytest.approx(0.0)


def test_nose_toward_right_eye_gives_positive_yaw(make_mesh):
    pose = estimate(make_mesh(nose=(175.0, 230.0)))
    assert pose.yaw == pytest.approx(0.25)


def test_roll_from_eye_line(make_mesh):
    pose = estimate(make_mesh(left=(100.0, 100.0), right=(200.0, 200.0), nose=(150.0, 170.0)))
    assert pose.roll == pytest.approx(math.pi / 4)
    assert pose.eye_distance == pytest.approx(math.sqrt(2) * 100.0)


def test_pitch_is_scale_invariant(make_mesh):
    near = estimate(make_mesh(left=(0.0, 0.0), right=(200.0, 0.0), nose=(100.0, 60.0)))
    far = estimate(make_mesh(left=(0.0, 0.0), right=(100.0, 0.0), nose=(50.0, 30.0)))
    assert near.pitch == pytest.approx(far.pitch)
    assert near.yaw == pytest.approx(far.yaw)


def test_468_point_mesh_supported(make_mesh):
    assert detect_layout(make_mesh(count=468)) is LandmarkLayout.DENSE_MESH
    assert estimate(make_mesh(count=468)) is not None


@pytest.mark.parametrize("count", [68, 71])
def test_sparse_layout_unsupported(count):
    pts = [(float(i), float(i)) for i in range(count)]
    assert detect_layout(pts) is LandmarkLayout.SPARSE_LEGACY
    assert estimate(pts) is None


@pytest.mark.parametrize("landmarks", [None, [], [(1.0, 2.0)] * 300])
def test_unsupported_inputs(landmarks):
    assert estimate(landmarks) is None


def test_coincident_eyes_rejected(make_mesh):
    assert estimate(make_mesh(left=(100.0, 100.0), right=(100.0, 100.0))) is None


def test_non_finite_point_rejected(make_mesh):
    assert estimate(make_mesh(nose=(float("nan"), 230.0))) is None


def test_accepts_numpy_and_attribute_points(make_mesh):
    arr = np.array(make_mesh())
    assert estimate(arr) == estimate(make_mesh())
    objs = [SimpleNamespace(x=p[0], y=p[1], z=p[2]) for p in make_mesh()]
    assert estimate(objs) == estimate(make_mesh())


def test_deterministic(make_mesh):
    pts = make_mesh(nose=(160.0, 240.0))
    assert estimate(pts) == estimate(pts)
