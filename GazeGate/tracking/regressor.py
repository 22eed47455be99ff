"""GazeRegressor: maps normalized eye features (nx, ny) to screen pixels.

One scikit-learn pipeline per axis:
    StandardScaler -> PolynomialFeatures(degree=2) -> Ridge

Training samples come from calibration clicks. The raw samples (not the
fitted estimators) are what gets persisted, so load() simply refits.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from sklearn.linear_model import Ridge
from sklearn.pipeline import Pipeline as SKPipeline
from sklearn.preprocessing import PolynomialFeatures, StandardScaler

logger = logging.getLogger(__name__)


@dataclass
class Sample:
    feature: Tuple[float, float]
    screen_xy: Tuple[int, int]


def _make_pipeline(alpha: float) -> SKPipeline:
    return SKPipeline([
        ("scaler", StandardScaler()),
        ("poly", PolynomialFeatures(degree=2, include_bias=False)),
        ("ridge", Ridge(alpha=alpha)),
    ])


class GazeRegressor:
    def __init__(self, alpha: float = 1.0, min_samples: int = 5) -> None:
        self.alpha = float(alpha)
        self.min_samples = max(1, int(min_samples))
        self.samples: List[Sample] = []
        self.mx: Optional[SKPipeline] = None
        self.my: Optional[SKPipeline] = None
        self.is_trained = False

    def reset(self) -> None:
        self.samples.clear()
        self.mx = None
        self.my = None
        self.is_trained = False

    def clear_samples(self) -> None:
        """Drop the collected samples but keep the fitted model for predict()."""
        self.samples.clear()

    def add(self, f: Tuple[float, float], xy: Tuple[int, int]) -> None:
        self.samples.append(Sample((float(f[0]), float(f[1])), (int(xy[0]), int(xy[1]))))

    def train(self) -> bool:
        if len(self.samples) < self.min_samples:
            logger.debug("Not enough samples to train (%d < %d)", len(self.samples), self.min_samples)
            return False
        X = np.array([s.feature for s in self.samples], dtype=float)
        yx = np.array([s.screen_xy[0] for s in self.samples], dtype=float)
        yy = np.array([s.screen_xy[1] for s in self.samples], dtype=float)
        mx = _make_pipeline(self.alpha)
        my = _make_pipeline(self.alpha)
        mx.fit(X, yx)
        my.fit(X, yy)
        self.mx, self.my = mx, my
        self.is_trained = True
        logger.info("Gaze model trained on %d samples, mean error %.1fpx", len(self.samples), self.accuracy()[0])
        return True

    def predict(self, f: Tuple[float, float]) -> Optional[Tuple[float, float]]:
        if not self.is_trained or self.mx is None or self.my is None:
            return None
        X = np.array([f], dtype=float)
        return float(self.mx.predict(X)[0]), float(self.my.predict(X)[0])

    def accuracy(self) -> Tuple[float, float]:
        """Return (mean_error_px, max_error_px) over the training samples."""
        if not self.samples or not self.is_trained:
            return (0.0, 0.0)
        errs: List[float] = []
        for s in self.samples:
            p = self.predict(s.feature)
            if p is None:
                continue
            dx = p[0] - s.screen_xy[0]
            dy = p[1] - s.screen_xy[1]
            errs.append((dx * dx + dy * dy) ** 0.5)
        return (sum(errs) / float(len(errs)), max(errs))

    # Persistence -------------------------------------------------------
    def save(self, path: str) -> None:
        data = {
            "version": 1,
            "alpha": self.alpha,
            "samples": [{"feature": list(s.feature), "screen_xy": list(s.screen_xy)} for s in self.samples],
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    @classmethod
    def load(cls, path: str) -> "GazeRegressor":
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        inst = cls(alpha=float(data.get("alpha", 1.0)))
        for s in data.get("samples", []):
            inst.add(tuple(s["feature"]), tuple(s["screen_xy"]))
        inst.train()
        return inst
