"""
Settings manager for GazeGate.

Loads/saves JSON settings from GazeGate/settings.json (or the file named by
GAZEGATE_SETTINGS) and exposes typed helpers. Missing keys fall back to the
defaults below.
"""
from __future__ import annotations

import copy
import json
import os
from typing import Any, Dict, Optional

from GazeGate.attention.models import AttentionThresholds
from GazeGate.calibration.models import CalibrationConfig


DEFAULTS: Dict[str, Any] = {
    "camera_index": 0,
    "camera": {
        "resolution": [1280, 720],
        "fps": 30,
    },
    "calibration": {
        "clicks_per_point": 5,
        "persist_model": True,
    },
    "attention": {
        "margin_x": 0.15,
        "margin_y": 0.28,
        "min_distance_ratio": 0.8,
        "max_distance_ratio": 1.2,
        "clamp_min": 0.5,
        "clamp_max": 2.0,
        "yaw": 0.15,
        "pitch": 0.12,
        "roll": 0.5,
    },
    "smoothing": {
        "kalman": True,
        "process_noise": 1e-2,
        "measurement_noise": 4.0,
    },
    "video": {"path": ""},
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


class SettingsManager:
    def __init__(self, path: Optional[str] = None) -> None:
        here = os.path.dirname(os.path.abspath(__file__))
        self._root = os.path.dirname(here)
        self.path = path or os.environ.get("GAZEGATE_SETTINGS") or os.path.join(self._root, "settings.json")
        self.data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if not os.path.exists(self.path):
            self.data = copy.deepcopy(DEFAULTS)
            return
        with open(self.path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"Settings file {self.path} must contain a JSON object")
        self.data = _merge(DEFAULTS, loaded)

    def save(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)

    def state_path(self, name: str) -> str:
        """Path for auxiliary state files stored next to the settings file."""
        return os.path.join(os.path.dirname(os.path.abspath(self.path)), name)

    # Camera ------------------------------------------------------------
    def camera_index(self) -> int:
        return int(self.data.get("camera_index", 0))

    def set_camera_index(self, idx: int) -> None:
        self.data["camera_index"] = int(idx)

    def camera_resolution(self) -> tuple[int, int]:
        arr = self.data.get("camera", {}).get("resolution", [1280, 720])
        try:
            return int(arr[0]), int(arr[1])
        except (TypeError, ValueError, IndexError):
            return 1280, 720

    def camera_fps(self) -> int:
        return int(self.data.get("camera", {}).get("fps", 30))

    # Calibration -------------------------------------------------------
    def clicks_per_point(self) -> int:
        return int(self.data.get("calibration", {}).get("clicks_per_point", 5))

    def persist_model(self) -> bool:
        return bool(self.data.get("calibration", {}).get("persist_model", True))

    def calibration_config(self) -> CalibrationConfig:
        return CalibrationConfig(clicks_per_point=self.clicks_per_point())

    # Attention ---------------------------------------------------------
    def attention_thresholds(self) -> AttentionThresholds:
        a = self.data.get("attention", {})
        d = DEFAULTS["attention"]
        return AttentionThresholds(**{k: float(a.get(k, d[k])) for k in d})

    def set_attention_value(self, key: str, value: float) -> None:
        if key not in DEFAULTS["attention"]:
            raise KeyError(key)
        self.data.setdefault("attention", {})[key] = float(value)

    # Smoothing ---------------------------------------------------------
    def kalman_enabled(self) -> bool:
        return bool(self.data.get("smoothing", {}).get("kalman", True))

    def kalman_noise(self) -> tuple[float, float]:
        s = self.data.get("smoothing", {})
        return float(s.get("process_noise", 1e-2)), float(s.get("measurement_noise", 4.0))

    # Video -------------------------------------------------------------
    def video_path(self) -> str:
        return str(self.data.get("video", {}).get("path", "") or "")

    def set_video_path(self, path: str) -> None:
        self.data.setdefault("video", {})["path"] = str(path)
