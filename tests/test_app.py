from types import SimpleNamespace

import pytest

pytest.importorskip("PyQt6")
pytest.importorskip("sklearn")
pytest.importorskip("cv2")
pytest.importorskip("mediapipe")

from GazeGate.core.app import AppCore


class UnwritableRegressor:
    def __init__(self):
        self.trained = False

    def train(self):
        self.trained = True
        return True

    def save(self, path):
        raise OSError("read-only")


def test_failed_model_save_is_logged(caplog):
    reg = UnwritableRegressor()
    core = SimpleNamespace(
        pipeline=SimpleNamespace(regressor=reg),
        settings=SimpleNamespace(persist_model=lambda: True),
        session=SimpleNamespace(status=lambda: None),
        win=SimpleNamespace(update_status=lambda status: None),
        _model_path="gaze_samples.json",
        _calibration_ui=None,
    )
    with caplog.at_level("WARNING", logger="GazeGate.core.app"):
        AppCore._on_calibration_finished(core, None)
    assert reg.trained
    assert any("Failed to save calibration" in r.getMessage() for r in caplog.records)
