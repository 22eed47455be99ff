import pytest

pytest.importorskip("sklearn")

from GazeGate.tracking.regressor import GazeRegressor


def _grid_samples():
    out = []
    for fx, sx in ((0.2, 100), (0.5, 500), (0.8, 900)):
        for fy, sy in ((0.3, 80), (0.5, 400), (0.7, 720)):
            out.append(((fx, fy), (sx, sy)))
    return out


def test_untrained_predicts_nothing():
    reg = GazeRegressor()
    assert reg.predict((0.5, 0.5)) is None
    reg.add((0.5, 0.5), (500, 400))
    assert not reg.train()
    assert not reg.is_trained


def test_fits_linear_mapping():
    reg = GazeRegressor(alpha=1e-3)
    for f, xy in _grid_samples():
        reg.add(f, xy)
    assert reg.train()
    x, y = reg.predict((0.5, 0.5))
    assert x == pytest.approx(500, abs=15)
    assert y == pytest.approx(400, abs=15)
    mean_err, max_err = reg.accuracy()
    assert mean_err < 20


def test_reset_clears_samples():
    reg = GazeRegressor()
    for f, xy in _grid_samples():
        reg.add(f, xy)
    reg.train()
    reg.reset()
    assert reg.samples == []
    assert reg.predict((0.5, 0.5)) is None


def test_save_and_load(tmp_path):
    reg = GazeRegressor(alpha=1e-3)
    for f, xy in _grid_samples():
        reg.add(f, xy)
    reg.train()
    path = tmp_path / "gaze_samples.json"
    reg.save(str(path))
    loaded = GazeRegressor.load(str(path))
    assert len(loaded.samples) == 9
    assert loaded.is_trained
    assert loaded.predict((0.2, 0.3)) == pytest.approx(reg.predict((0.2, 0.3)))


def test_load_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        GazeRegressor.load(str(tmp_path / "nope.json"))


def _calibration_run(reg, clicks=5):
    reg.clear_samples()
    for f, xy in _grid_samples():
        for _ in range(clicks):
            reg.add(f, xy)
    assert reg.train()


def test_recalibration_replaces_stored_samples(tmp_path):
    path = str(tmp_path / "gaze_samples.json")
    reg = GazeRegressor(alpha=1e-3)
    _calibration_run(reg)
    reg.save(path)
    assert len(reg.samples) == 45

    reg = GazeRegressor.load(path)
    _calibration_run(reg)
    reg.save(path)
    assert len(GazeRegressor.load(path).samples) == 45


def test_clear_samples_keeps_model():
    reg = GazeRegressor(alpha=1e-3)
    for f, xy in _grid_samples():
        reg.add(f, xy)
    reg.train()
    before = reg.predict((0.5, 0.5))
    reg.clear_samples()
    assert reg.samples == []
    assert reg.is_trained
    assert reg.predict((0.5, 0.5)) == pytest.approx(before)
    assert reg.accuracy() == (0.0, 0.0)
