"""
Per-sample attention classification.

classify() fuses three signals into a play/pause decision:
  1. face presence (NO_FACE)
  2. gaze inside the safe zone, a viewport rectangle shrunk by fixed margins
  3. head pose against the calibrated reference: distance ratio from the
     inter-eye distance, then yaw/pitch/roll deviation

Reason priority when several checks fail:
  NO_FACE > FACE_TOO_FAR/FACE_TOO_CLOSE > OFF_SCREEN/GAZE_OUTSIDE_SAFE_ZONE
  > FACE_TURNED > FACE_PITCHED > HEAD_TILTED

Pose checks only run when both a reference and a current pose exist. The
function is pure: identical inputs give identical decisions.
"""
from __future__ import annotations

import math
from typing import Optional

from GazeGate.geometry.head_pose import HeadPose

from .models import (
    AttentionDecision,
    AttentionMetrics,
    AttentionThresholds,
    GazeSample,
    ReasonCode,
    SafeZone,
    Viewport,
)

DEFAULT_THRESHOLDS = AttentionThresholds()


def safe_zone(viewport: Viewport, thresholds: AttentionThresholds = DEFAULT_THRESHOLDS) -> SafeZone:
    w, h = float(viewport[0]), float(viewport[1])
    if w <= 0 or h <= 0:
        raise ValueError(f"viewport must be positive, got {viewport!r}")
    mx = w * thresholds.margin_x
    my = h * thresholds.margin_y
    return SafeZone(left=mx, top=my, right=w - mx, bottom=h - my)


def _on_screen(x: float, y: float, viewport: Viewport) -> bool:
    return 0.0 <= x <= float(viewport[0]) and 0.0 <= y <= float(viewport[1])


def classify(
    sample: GazeSample,
    pose: Optional[HeadPose],
    reference: Optional[HeadPose],
    viewport: Viewport,
    thresholds: AttentionThresholds = DEFAULT_THRESHOLDS,
) -> AttentionDecision:
    zone = safe_zone(viewport, thresholds)

    x, y = sample.x, sample.y
    if (
        not sample.valid_face
        or x is None
        or y is None
        or not (math.isfinite(x) and math.isfinite(y))
    ):
        return AttentionDecision(
            should_play=False,
            reason=ReasonCode.NO_FACE,
            metrics=AttentionMetrics(safe_zone=zone, in_safe_zone=False),
        )

    in_zone = zone.contains(x, y)
    if in_zone:
        gaze_reason = ReasonCode.NONE
    elif _on_screen(x, y, viewport):
        gaze_reason = ReasonCode.GAZE_OUTSIDE_SAFE_ZONE
    else:
        gaze_reason = ReasonCode.OFF_SCREEN

    if reference is None or pose is None:
        return AttentionDecision(
            should_play=in_zone,
            reason=gaze_reason,
            metrics=AttentionMetrics(safe_zone=zone, in_safe_zone=in_zone),
        )

    ratio = pose.eye_distance / reference.eye_distance
    distance_reason = ReasonCode.NONE
    if ratio < thresholds.min_distance_ratio:
        distance_reason = ReasonCode.FACE_TOO_FAR
    elif ratio > thresholds.max_distance_ratio:
        distance_reason = ReasonCode.FACE_TOO_CLOSE
    scale = max(thresholds.clamp_min, min(thresholds.clamp_max, ratio))

    # Farther away -> smaller apparent rotation, so yaw/pitch shrink with distance
    yaw_thr = thresholds.yaw * scale
    pitch_thr = thresholds.pitch * scale
    roll_thr = thresholds.roll

    yaw_dev = abs(pose.yaw - reference.yaw)
    pitch_dev = abs(pose.pitch - reference.pitch)
    roll_dev = abs(pose.roll - reference.roll)

    pose_reason = ReasonCode.NONE
    if yaw_dev > yaw_thr:
        pose_reason = ReasonCode.FACE_TURNED
    elif pitch_dev > pitch_thr:
        pose_reason = ReasonCode.FACE_PITCHED
    elif roll_dev > roll_thr:
        pose_reason = ReasonCode.HEAD_TILTED

    metrics = AttentionMetrics(
        safe_zone=zone,
        in_safe_zone=in_zone,
        distance_ratio=ratio,
        yaw_deviation=yaw_dev,
        pitch_deviation=pitch_dev,
        roll_deviation=roll_dev,
        yaw_threshold=yaw_thr,
        pitch_threshold=pitch_thr,
        roll_threshold=roll_thr,
    )
    for reason in (distance_reason, gaze_reason, pose_reason):
        if reason is not ReasonCode.NONE:
            return AttentionDecision(should_play=False, reason=reason, metrics=metrics)
    return AttentionDecision(should_play=True, reason=ReasonCode.NONE, metrics=metrics)
