"""Calibration sequencing and reference-pose ownership.

The Calibrator walks a fixed sequence of on-screen targets (anchor first).
Each target needs ``clicks_per_point`` confirmations while it is the active
one; confirmations for any other target are ignored. Completing the anchor
captures the reference head pose into a ReferencePoseStore, which the
classifier path reads afterwards.

Listeners:
  - add_finished_listener(cb): cb(CalibrationFinished) once all targets are done
  - add_reference_listener(cb): cb(ReferenceCaptured) when the anchor completes
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence

from GazeGate.control.events import CalibrationFinished, ReferenceCaptured
from GazeGate.geometry import head_pose
from GazeGate.geometry.head_pose import HeadPose

from .models import CalibrationConfig, CalibrationProgress, CalibrationTarget, default_sequence, default_targets

logger = logging.getLogger(__name__)


class ReferencePoseStore:
    """Single reference pose slot. Written by Calibrator only."""

    def __init__(self) -> None:
        self._pose: Optional[HeadPose] = None

    @property
    def pose(self) -> Optional[HeadPose]:
        return self._pose

    @property
    def eye_distance(self) -> Optional[float]:
        return self._pose.eye_distance if self._pose is not None else None

    def is_set(self) -> bool:
        return self._pose is not None

    def capture(self, pose: HeadPose) -> None:
        self._pose = pose

    def clear(self) -> None:
        self._pose = None


class Calibrator:
    def __init__(
        self,
        store: Optional[ReferencePoseStore] = None,
        config: Optional[CalibrationConfig] = None,
        estimator: Callable[[Any], Optional[HeadPose]] = head_pose.estimate,
    ) -> None:
        self.store = store if store is not None else ReferencePoseStore()
        self.config = config if config is not None else CalibrationConfig()
        if int(self.config.clicks_per_point) < 1:
            raise ValueError("clicks_per_point must be >= 1")
        self._estimate = estimator
        self.targets: List[CalibrationTarget] = default_targets()
        self.sequence: List[int] = default_sequence(self.targets)
        self._by_id = {t.id: t for t in self.targets}
        self._index = 0
        self._finished_listeners: List[Callable[[CalibrationFinished], None]] = []
        self._reference_listeners: List[Callable[[ReferenceCaptured], None]] = []

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_finished_listener(self, cb: Callable[[CalibrationFinished], None]) -> None:
        self._finished_listeners.append(cb)

    def add_reference_listener(self, cb: Callable[[ReferenceCaptured], None]) -> None:
        self._reference_listeners.append(cb)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def index(self) -> int:
        return self._index

    @property
    def required(self) -> int:
        return int(self.config.clicks_per_point)

    def is_complete(self) -> bool:
        return self._index >= len(self.sequence)

    def active_target(self) -> Optional[CalibrationTarget]:
        if self.is_complete():
            return None
        return self._by_id[self.sequence[self._index]]

    def target(self, target_id: int) -> CalibrationTarget:
        return self._by_id[target_id]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def restart(self) -> None:
        for t in self.targets:
            t.confirmations = 0
            t.done = False
        self.store.clear()
        self._index = 0
        logger.info("Calibration restarted")

    def confirm(self, target_id: int, landmarks: Optional[Sequence[Any]] = None) -> bool:
        """Count one confirmation for ``target_id``.

        Returns False (and changes nothing) unless ``target_id`` is the
        active target.
        """
        active = self.active_target()
        if active is None or active.id != target_id:
            logger.debug("Ignoring confirmation for inactive target %s", target_id)
            return False
        active.confirmations += 1
        if active.confirmations < self.required:
            return True

        active.done = True
        logger.info("Calibration target %d done (%d/%d)", active.id, self._index + 1, len(self.sequence))
        if active.is_anchor:
            self._capture_reference(landmarks)
        self._index += 1
        if self.is_complete():
            logger.info("Calibration complete")
            event = CalibrationFinished(targets=tuple(self.targets))
            for cb in list(self._finished_listeners):
                cb(event)
        return True

    def _capture_reference(self, landmarks: Optional[Sequence[Any]]) -> None:
        pose = self._estimate(landmarks) if landmarks is not None else None
        if pose is not None:
            self.store.capture(pose)
            logger.info(
                "Reference pose captured: yaw=%.3f pitch=%.3f roll=%.3f eye_distance=%.1f",
                pose.yaw, pose.pitch, pose.roll, pose.eye_distance,
            )
        else:
            # Pose gating stays disabled until the next restart()
            logger.warning("Reference pose unavailable at anchor; head-pose checks disabled")
        event = ReferenceCaptured(pose=pose)
        for cb in list(self._reference_listeners):
            cb(event)

    def progress(self) -> CalibrationProgress:
        active = self.active_target()
        return CalibrationProgress(
            index=self._index,
            total=len(self.sequence),
            target_id=active.id if active is not None else None,
            confirmations=active.confirmations if active is not None else 0,
            required=self.required,
            complete=self.is_complete(),
        )

