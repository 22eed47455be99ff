import json

import pytest

from GazeGate.attention.models import AttentionThresholds
from GazeGate.core.settings import SettingsManager


def test_defaults_when_missing(tmp_path):
    s = SettingsManager(str(tmp_path / "settings.json"))
    assert s.camera_index() == 0
    assert s.clicks_per_point() == 5
    assert s.attention_thresholds() == AttentionThresholds()
    assert s.video_path() == ""
    assert s.kalman_enabled()


def test_partial_file_merges_defaults(tmp_path):
    p = tmp_path / "settings.json"
    p.write_text(json.dumps({"attention": {"yaw": 0.2}, "camera_index": 2}), encoding="utf-8")
    s = SettingsManager(str(p))
    t = s.attention_thresholds()
    assert t.yaw == pytest.approx(0.2)
    assert t.pitch == pytest.approx(0.12)
    assert s.camera_index() == 2
    assert s.camera_resolution() == (1280, 720)


def test_save_roundtrip(tmp_path):
    p = tmp_path / "settings.json"
    s = SettingsManager(str(p))
    s.set_video_path("/videos/lecture.mp4")
    s.set_attention_value("roll", 0.4)
    s.save()
    again = SettingsManager(str(p))
    assert again.video_path() == "/videos/lecture.mp4"
    assert again.attention_thresholds().roll == pytest.approx(0.4)


def test_env_override(tmp_path, monkeypatch):
    p = tmp_path / "custom.json"
    p.write_text(json.dumps({"calibration": {"clicks_per_point": 3}}), encoding="utf-8")
    monkeypatch.setenv("GAZEGATE_SETTINGS", str(p))
    s = SettingsManager()
    assert s.path == str(p)
    assert s.calibration_config().clicks_per_point == 3
    assert s.state_path("gaze_samples.json") == str(tmp_path / "gaze_samples.json")


def test_invalid_file(tmp_path):
    p = tmp_path / "settings.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        SettingsManager(str(p))


def test_unknown_attention_key(tmp_path):
    s = SettingsManager(str(tmp_path / "s.json"))
    with pytest.raises(KeyError):
        s.set_attention_value("speed", 1.0)
