import pytest

pytest.importorskip("cv2")
pytest.importorskip("mediapipe")

from GazeGate.tracking.gaze_parser import FaceFrame
from GazeGate.tracking.pipeline import build_sample


def _face(make_mesh):
    return FaceFrame(feature=(0.5, 0.5), landmarks=make_mesh(), eyes=[])


def test_no_face():
    s = build_sample(None, (10.0, 10.0))
    assert not s.valid_face
    assert s.landmarks is None


def test_face_without_trained_model_keeps_landmarks(make_mesh):
    s = build_sample(_face(make_mesh), None)
    assert s.valid_face
    assert s.x is None and s.y is None
    assert s.landmarks is not None


def test_face_with_gaze(make_mesh):
    s = build_sample(_face(make_mesh), (320.0, 240.0))
    assert (s.x, s.y) == (320.0, 240.0)
    assert s.valid_face


def test_non_finite_gaze_dropped(make_mesh):
    s = build_sample(_face(make_mesh), (float("inf"), 240.0))
    assert s.x is None and s.valid_face
