"""
Camera abstraction using OpenCV VideoCapture.

- Opens the configured webcam, falling back through backends and indices
- Requests the configured resolution and FPS (drivers may ignore either)
- read() returns BGR frames or None on failure
"""
from __future__ import annotations

import logging
import os
import time
from typing import List, Optional, Tuple

import cv2

logger = logging.getLogger(__name__)


def _backends() -> List[int]:
    # Allow override via env GAZEGATE_CAMERA_BACKEND = dshow|msmf|v4l2|any
    preferred = (os.environ.get("GAZEGATE_CAMERA_BACKEND", "") or "").strip().lower()
    named = {
        "dshow": getattr(cv2, "CAP_DSHOW", None),
        "msmf": getattr(cv2, "CAP_MSMF", None),
        "v4l2": getattr(cv2, "CAP_V4L2", None),
        "any": getattr(cv2, "CAP_ANY", None),
    }
    order = [preferred] if preferred in named else []
    order += ["dshow", "msmf", "v4l2", "any"] if os.name == "nt" else ["v4l2", "any"]
    out: List[int] = []
    for name in order:
        be = named.get(name)
        if be is not None and be not in out:
            out.append(be)
    return out or [0]


class Camera:
    def __init__(self, index: int = 0, width: int = 1280, height: int = 720, target_fps: int = 30) -> None:
        self.index = index
        self.width = width
        self.height = height
        self.target_fps = max(1, int(target_fps))
        self.cap = None

    def open(self) -> None:
        tried: List[Tuple[int, int]] = []
        candidate_indices = [int(self.index)] + [i for i in range(0, 11) if i != int(self.index)]
        for idx in candidate_indices:
            for be in _backends():
                tried.append((idx, be))
                cap = cv2.VideoCapture(idx, be)
                if cap is None or not cap.isOpened():
                    if cap is not None:
                        cap.release()
                    continue
                self.cap = cap
                self.index = int(idx)
                break
            if self.cap is not None:
                break

        if self.cap is None:
            tried_text = ", ".join(f"{i}:{be}" for (i, be) in tried) or "(none)"
            raise RuntimeError(
                "No camera detected. Tried indices 0-10.\n"
                f"Tried: {tried_text}\n"
                "Close other apps using the camera, or force a backend via "
                "GAZEGATE_CAMERA_BACKEND=msmf|dshow|v4l2|any before launching."
            )

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        # Best-effort FPS hint (camera/driver may ignore)
        self.cap.set(cv2.CAP_PROP_FPS, float(self.target_fps))
        actual_w = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_h = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if actual_w > 0 and actual_h > 0:
            self.width, self.height = actual_w, actual_h
        logger.info("Camera %d opened at %dx%d", self.index, self.width, self.height)

    def read(self) -> Optional[object]:
        if self.cap is None:
            return None
        # Some cameras need a couple of reads to warm up; retry briefly
        for _ in range(3):
            ok, frame = self.cap.read()
            if ok and frame is not None:
                return frame
            time.sleep(0.01)
        return None

    def close(self) -> None:
        if self.cap is not None:
            try:
                self.cap.release()
            finally:
                self.cap = None

    @property
    def is_open(self) -> bool:
        return bool(self.cap is not None and self.cap.isOpened())
