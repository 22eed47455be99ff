from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


class KalmanSmoother:
    """Constant-velocity Kalman filter for 2D gaze points.

    State is (x, y, vx, vy); only position is measured. Lower
    measurement_noise follows the raw predictions more tightly.
    """

    def __init__(self, process_noise: float = 1e-2, measurement_noise: float = 4.0) -> None:
        self.F = np.eye(4)
        self.F[0, 2] = 1.0  # x += vx
        self.F[1, 3] = 1.0  # y += vy
        self.H = np.zeros((2, 4))
        self.H[0, 0] = 1.0
        self.H[1, 1] = 1.0
        self.Q = np.eye(4) * float(process_noise)
        self.R = np.eye(2) * float(measurement_noise)
        self._state: Optional[np.ndarray] = None
        self._P = np.eye(4) * 10.0

    def reset(self) -> None:
        self._state = None
        self._P = np.eye(4) * 10.0

    def apply(self, xy: Tuple[float, float]) -> Tuple[float, float]:
        z = np.array([float(xy[0]), float(xy[1])], dtype=np.float64)
        if self._state is None:
            # Initialize with first sample
            self._state = np.array([z[0], z[1], 0.0, 0.0], dtype=np.float64)
            return float(z[0]), float(z[1])
        # predict
        state = self.F @ self._state
        P = self.F @ self._P @ self.F.T + self.Q
        # update
        S = self.H @ P @ self.H.T + self.R
        K = P @ self.H.T @ np.linalg.inv(S)
        self._state = state + K @ (z - self.H @ state)
        self._P = (np.eye(4) - K @ self.H) @ P
        return float(self._state[0]), float(self._state[1])
