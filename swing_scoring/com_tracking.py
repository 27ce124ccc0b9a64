"""
Frame-based estimators for the front-leg and weight-transfer engines.

Estimators read tracked frames in pixel coordinates:

    {"timestamp": 1234.0,            # ms
     "phase": "load",                # optional swing phase label
     "joints": {"left_hip": {"x": 612.0, "y": 388.0, "confidence": 0.93}, ...}}

Distances assume roughly 100 pixels per meter. Every estimator returns None
when the frames do not contain what it needs, which the engines report as
"N/A" rather than a poor score.
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from swing_scoring.logging_config import get_logger
from swing_scoring.models import PhaseDetectionResult
from swing_scoring.pose_features import (
    LEFT_ANKLE,
    LEFT_HIP,
    LEFT_KNEE,
    RIGHT_ANKLE,
    RIGHT_HIP,
    RIGHT_KNEE,
    angle,
    landmarks_array,
)
from swing_scoring.biomechanics_standards import (
    FRONT_LEG_STANDARDS,
    WEIGHT_TRANSFER_STANDARDS,
    FrontLegStandards,
    WeightTransferStandards,
)

logger = get_logger(__name__)

Frame = Mapping[str, Any]

# Right-handed hitter: left side leads
LEAD_HIP, LEAD_KNEE, LEAD_ANKLE = "left_hip", "left_knee", "left_ankle"
REAR_ANKLE = "right_ankle"

_TRACKED_JOINTS = {
  "left_hip": LEFT_HIP,
  "right_hip": RIGHT_HIP,
  "left_knee": LEFT_KNEE,
  "right_knee": RIGHT_KNEE,
  "left_ankle": LEFT_ANKLE,
  "right_ankle": RIGHT_ANKLE,
}


def _joint(frame: Frame, name: str, min_confidence: float = WEIGHT_TRANSFER_STANDARDS.MIN_JOINT_CONFIDENCE):
  joint = frame.get("joints", {}).get(name)
  if not joint or joint.get("confidence", 1.0) <= min_confidence:
    return None
  return np.array([joint["x"], joint["y"]], dtype=float)


def _com(frame: Frame) -> Optional[np.ndarray]:
  left, right = _joint(frame, "left_hip"), _joint(frame, "right_hip")
  if left is None or right is None:
    return None
  return (left + right) / 2.0


def _seconds(frame: Frame) -> float:
  return float(frame["timestamp"]) / 1000.0


def contact_time(frames: Sequence[Frame]) -> float:
  """Timestamp (s) of the first contact frame, else the frame 80% through the swing."""
  for frame in frames:
    if frame.get("phase") == "contact":
      return _seconds(frame)
  return _seconds(frames[int(len(frames) * 0.8)])


def _pixels_to_inches(pixels: float, s: WeightTransferStandards) -> float:
  return pixels / s.PIXELS_PER_METER * s.INCHES_PER_METER


# ============================================
# WEIGHT TRANSFER
# ============================================

def estimate_vertical_movement(
  frames: Sequence[Frame],
  standards: WeightTransferStandards = WEIGHT_TRANSFER_STANDARDS,
) -> Optional[float]:
  """COM vertical range over the swing, in inches."""
  heights = [com[1] for com in (_com(f) for f in frames) if com is not None]
  if not heights:
    return None
  return _pixels_to_inches(max(heights) - min(heights), standards)


def estimate_com_timing(frames: Sequence[Frame]) -> Optional[float]:
  """Seconds before contact at which forward COM velocity peaks."""
  if len(frames) < 2:
    return None

  peak_velocity = 0.0
  peak_time = None
  for prev, curr in zip(frames, frames[1:]):
    prev_com, curr_com = _com(prev), _com(curr)
    dt = _seconds(curr) - _seconds(prev)
    if prev_com is None or curr_com is None or dt <= 0:
      continue
    velocity = abs(curr_com[0] - prev_com[0]) / dt
    if velocity > peak_velocity:
      peak_velocity = velocity
      peak_time = _seconds(curr)

  if peak_time is None:
    return None
  return contact_time(frames) - peak_time


def estimate_back_foot_lift(
  frames: Sequence[Frame],
  standards: WeightTransferStandards = WEIGHT_TRANSFER_STANDARDS,
) -> Optional[float]:
  """
  Seconds of rear toe lift relative to contact (negative = before contact).

  A toe that never lifts more than 4 inches counts as lifting 0.10s after
  contact.
  """
  if not frames:
    return None

  baseline = [
    ankle[1] for ankle in (_joint(f, REAR_ANKLE) for f in frames if f.get("phase") in ("stance", "load"))
    if ankle is not None
  ]
  if not baseline:
    return None
  baseline_y = float(np.mean(baseline))

  for frame in frames:
    if frame.get("phase") not in ("fire", "contact", "follow_through"):
      continue
    ankle = _joint(frame, REAR_ANKLE)
    if ankle is None:
      continue
    # Image y grows downward, so a lift reduces y
    if _pixels_to_inches(baseline_y - ankle[1], standards) > standards.TOE_LIFT_INCHES:
      return _seconds(frame) - contact_time(frames)

  return standards.NO_LIFT_DEFAULT_SECONDS


def estimate_com_acceleration(
  frames: Sequence[Frame],
  standards: WeightTransferStandards = WEIGHT_TRANSFER_STANDARDS,
) -> Tuple[Optional[float], Optional[float]]:
  """Peak forward COM acceleration (m/s²) and its seconds before contact."""
  if len(frames) < 3:
    return None, None

  peak_accel = 0.0
  peak_time = None
  for f1, f2, f3 in zip(frames, frames[1:], frames[2:]):
    c1, c2, c3 = _com(f1), _com(f2), _com(f3)
    t1, t2, t3 = _seconds(f1), _seconds(f2), _seconds(f3)
    if c1 is None or c2 is None or c3 is None or t2 <= t1 or t3 <= t2:
      continue
    v1 = (c2[0] - c1[0]) / (t2 - t1)
    v2 = (c3[0] - c2[0]) / (t3 - t2)
    accel = abs(v2 - v1) / (t3 - t1) / standards.PIXELS_PER_METER
    if accel > peak_accel:
      peak_accel = accel
      peak_time = t2

  if peak_time is None:
    return None, None
  return peak_accel, contact_time(frames) - peak_time


def estimate_weight_transfer_inputs(
  frames: Sequence[Frame],
  standards: WeightTransferStandards = WEIGHT_TRANSFER_STANDARDS,
) -> Dict[str, Optional[float]]:
  """Keyword arguments for compute_weight_transfer()."""
  if not frames:
    return {
      "vertical_movement": None,
      "timing_peak": None,
      "back_foot_lift": None,
      "accel_peak": None,
      "accel_timing": None,
    }
  accel_peak, accel_timing = estimate_com_acceleration(frames, standards)
  return {
    "vertical_movement": estimate_vertical_movement(frames, standards),
    "timing_peak": estimate_com_timing(frames),
    "back_foot_lift": estimate_back_foot_lift(frames, standards),
    "accel_peak": accel_peak,
    "accel_timing": accel_timing,
  }


# ============================================
# FRONT LEG
# ============================================

def _contact_frame(frames: Sequence[Frame]) -> Frame:
  for frame in frames:
    if frame.get("phase") == "contact":
      return frame
  return frames[int(len(frames) * 0.8)]


def estimate_knee_angle(frame: Frame) -> Optional[float]:
  """Lead knee angle in degrees (180 = straight)."""
  hip, knee, ankle = _joint(frame, LEAD_HIP), _joint(frame, LEAD_KNEE), _joint(frame, LEAD_ANKLE)
  if hip is None or knee is None or ankle is None:
    return None
  return angle(hip, knee, ankle)


def estimate_ankle_angle(frame: Frame) -> Optional[float]:
  """Forward shin angle of the lead leg from vertical, in degrees."""
  knee, ankle = _joint(frame, LEAD_KNEE), _joint(frame, LEAD_ANKLE)
  if knee is None or ankle is None:
    return None
  dx = abs(knee[0] - ankle[0])
  dy = ankle[1] - knee[1]
  if dy <= 0:
    return None
  return float(np.degrees(np.arctan2(dx, dy)))


def estimate_deceleration_rate(
  frames: Sequence[Frame],
  standards: FrontLegStandards = FRONT_LEG_STANDARDS,
) -> Optional[float]:
  """
  Lead ankle deceleration at plant (m/s²): peak stride speed divided by the
  time it takes to drop below the planted threshold.
  """
  stride = [f for f in frames if f.get("phase") in ("stride", "fire")]
  if len(stride) < 3:
    return None

  speeds: List[Tuple[float, float]] = []  # (time, m/s)
  for prev, curr in zip(stride, stride[1:]):
    a, b = _joint(prev, LEAD_ANKLE), _joint(curr, LEAD_ANKLE)
    dt = _seconds(curr) - _seconds(prev)
    if a is None or b is None or dt <= 0:
      continue
    speeds.append((_seconds(curr), float(np.linalg.norm(b - a)) / dt / standards.PIXELS_PER_METER))

  if not speeds:
    return None
  peak_index = int(np.argmax([speed for _, speed in speeds]))
  peak_time, peak_speed = speeds[peak_index]
  if peak_speed <= 0:
    return None

  plant_time = peak_time
  for t, speed in speeds[peak_index + 1:]:
    if speed < standards.PLANT_VELOCITY_THRESHOLD:
      plant_time = t
      break

  time_to_stop = plant_time - peak_time
  if time_to_stop <= 0:
    return None
  return peak_speed / time_to_stop


def estimate_front_leg_inputs(
  frames: Sequence[Frame],
  standards: FrontLegStandards = FRONT_LEG_STANDARDS,
) -> Dict[str, Optional[float]]:
  """Keyword arguments for compute_front_leg_stability()."""
  if not frames:
    return {"knee_angle": None, "ankle_angle": None, "decel_rate": None}
  contact = _contact_frame(frames)
  return {
    "knee_angle": estimate_knee_angle(contact),
    "ankle_angle": estimate_ankle_angle(contact),
    "decel_rate": estimate_deceleration_rate(frames, standards),
  }


# ============================================
# POSE -> TRACKED FRAMES
# ============================================

def phase_labels(detection: PhaseDetectionResult, frame_count: int) -> List[Optional[str]]:
  """Phase name per frame; a boundary frame belongs to the phase that starts there."""
  labels: List[Optional[str]] = [None] * frame_count
  for phase in detection.phases:
    end = phase.end_frame + 1 if phase.name == "follow_through" else phase.end_frame
    for i in range(phase.start_frame, min(end, frame_count)):
      labels[i] = phase.name
  return labels


def frames_from_pose(
  pose_frames: Sequence[Any],
  detection: PhaseDetectionResult,
  fps: float,
  frame_size: Tuple[int, int] = (1280, 720),
) -> List[Dict[str, Any]]:
  """
  Convert normalized pose landmarks into tracked pixel frames labelled with
  detected phases. Dropped frames are skipped.
  """
  width, height = frame_size
  labels = phase_labels(detection, len(pose_frames))
  frames: List[Dict[str, Any]] = []

  for i, raw in enumerate(pose_frames):
    pts = landmarks_array(raw)
    if pts is None:
      continue
    frames.append({
      "timestamp": i * 1000.0 / fps,
      "phase": labels[i],
      "joints": {
        name: {"x": float(pts[idx, 0] * width), "y": float(pts[idx, 1] * height), "confidence": 1.0}
        for name, idx in _TRACKED_JOINTS.items()
      },
    })

  return frames
