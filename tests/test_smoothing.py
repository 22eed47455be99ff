import pytest

from GazeGate.tracking.smoothing import KalmanSmoother


def test_first_sample_passes_through():
    k = KalmanSmoother()
    assert k.apply((100.0, 200.0)) == (100.0, 200.0)


def test_converges_on_steady_input():
    k = KalmanSmoother()
    k.apply((0.0, 0.0))
    for _ in range(200):
        x, y = k.apply((100.0, 50.0))
    assert x == pytest.approx(100.0, abs=1.0)
    assert y == pytest.approx(50.0, abs=1.0)


def test_damps_single_spike():
    k = KalmanSmoother(measurement_noise=50.0)
    for _ in range(30):
        k.apply((500.0, 400.0))
    x, _ = k.apply((900.0, 400.0))
    assert 500.0 < x < 900.0


def test_reset():
    k = KalmanSmoother()
    k.apply((10.0, 10.0))
    k.apply((20.0, 20.0))
    k.reset()
    assert k.apply((300.0, 300.0)) == (300.0, 300.0)
