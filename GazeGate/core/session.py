"""
AttentionSession: the per-tick orchestration between calibration, head-pose
geometry, classification and playback.

No decision is made until calibration is complete; until then every sample
just keeps playback paused.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from GazeGate.attention import classifier
from GazeGate.attention.models import AttentionDecision, AttentionThresholds, GazeSample, Viewport
from GazeGate.calibration.calibrator import Calibrator, ReferencePoseStore
from GazeGate.calibration.models import CalibrationConfig, CalibrationProgress
from GazeGate.control.events import DecisionChanged
from GazeGate.control.playback import PlaybackController
from GazeGate.geometry import head_pose
from GazeGate.geometry.head_pose import HeadPose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionStatus:
    calibration: CalibrationProgress
    calibrated: bool
    reference: Optional[HeadPose]
    decision: Optional[AttentionDecision]
    pose: Optional[HeadPose]


class AttentionSession:
    def __init__(
        self,
        playback: Optional[PlaybackController] = None,
        thresholds: Optional[AttentionThresholds] = None,
        calibration: Optional[CalibrationConfig] = None,
    ) -> None:
        self.store = ReferencePoseStore()
        self.calibrator = Calibrator(store=self.store, config=calibration)
        self.playback = playback if playback is not None else PlaybackController()
        self.thresholds = thresholds if thresholds is not None else AttentionThresholds()
        self._last_decision: Optional[AttentionDecision] = None
        self._last_pose: Optional[HeadPose] = None
        self._decision_listeners: List[Callable[[DecisionChanged], None]] = []

    def add_decision_listener(self, cb: Callable[[DecisionChanged], None]) -> None:
        self._decision_listeners.append(cb)

    @property
    def calibrated(self) -> bool:
        return self.calibrator.is_complete()

    @property
    def last_decision(self) -> Optional[AttentionDecision]:
        return self._last_decision

    # Calibration -------------------------------------------------------
    def confirm(self, target_id: int, sample: Optional[GazeSample] = None) -> bool:
        landmarks = sample.landmarks if sample is not None and sample.valid_face else None
        return self.calibrator.confirm(target_id, landmarks)

    def restart(self) -> None:
        self.calibrator.restart()
        self._last_decision = None
        self._last_pose = None
        self.playback.hold()

    # Tracking ----------------------------------------------------------
    def process(self, sample: GazeSample, viewport: Viewport) -> Optional[AttentionDecision]:
        if not self.calibrated:
            self.playback.hold()
            return None
        pose = head_pose.estimate(sample.landmarks) if sample.valid_face else None
        self._last_pose = pose
        decision = classifier.classify(sample, pose, self.store.pose, viewport, self.thresholds)
        self.playback.apply(decision.should_play)
        previous = self._last_decision
        self._last_decision = decision
        if not decision.same_outcome(previous):
            logger.debug("Decision: play=%s reason=%s", decision.should_play, decision.reason.value)
            event = DecisionChanged(decision=decision, previous=previous)
            for cb in list(self._decision_listeners):
                cb(event)
        return decision

    def status(self) -> SessionStatus:
        return SessionStatus(
            calibration=self.calibrator.progress(),
            calibrated=self.calibrated,
            reference=self.store.pose,
            decision=self._last_decision,
            pose=self._last_pose,
        )
