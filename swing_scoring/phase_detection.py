"""
Swing phase detection from a pose time series.

Buckets frames into stance, load, stride, fire, contact and follow-through
using per-frame features:

- COM x (hip midpoint) for stance exit and the deepest load
- front ankle height for foot plant
- hip rotation velocity for the fire peak
- hand x for full extension at contact

Detection quality starts at 100 and loses points for missing phases and
implausible phase durations or load-to-fire ratio.
"""
import math
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from swing_scoring.logging_config import get_logger
from swing_scoring.exceptions import ValidationError
from swing_scoring.models import (
    DetectionQuality,
    PhaseDetectionResult,
    PhaseMarkers,
    PhaseTransition,
    SwingPhase,
)
from swing_scoring.pose_features import (
    LEFT_ANKLE,
    LEFT_HIP,
    LEFT_KNEE,
    LEFT_SHOULDER,
    LEFT_WRIST,
    RIGHT_ANKLE,
    RIGHT_HIP,
    RIGHT_KNEE,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    angle,
    landmarks_array,
    midpoint,
    segment_rotation,
)
from swing_scoring.biomechanics_standards import PHASE_DETECTION_STANDARDS, PhaseDetectionStandards

logger = get_logger(__name__)

INSUFFICIENT_DATA_ISSUE = "Insufficient pose data for phase detection"

_KEY_EVENTS = {
  "stance": ["Initial setup", "Weight distribution"],
  "load": ["Weight shift backward", "Coiling", "Energy storage"],
  "stride": ["Front foot stride", "COM begins forward movement"],
  "fire": ["Hip rotation initiation", "Weight transfer forward"],
  "contact": ["Bat-ball contact", "Peak velocity", "Full extension"],
  "follow_through": ["Deceleration", "Balance recovery"],
}


def _fill_dropped(frames: List[Optional[np.ndarray]]) -> List[np.ndarray]:
  """Dropped frames repeat the nearest earlier detection (the first detection at the start)."""
  first = next((f for f in frames if f is not None), None)
  if first is None:
    return []
  filled = []
  last = first
  for frame in frames:
    if frame is not None:
      last = frame
    filled.append(last)
  return filled


def compute_frame_features(
  pose_frames: Sequence[Any],
  fps: float,
  standards: PhaseDetectionStandards = PHASE_DETECTION_STANDARDS,
) -> Dict[str, np.ndarray]:
  """
  Per-frame swing features as numpy arrays of length n.

  Returns an empty dict when no frame has landmarks.
  """
  frames = _fill_dropped([landmarks_array(f) for f in pose_frames])
  if not frames:
    return {}

  pts = np.stack(frames)  # (n, 33, 2)
  com = midpoint(pts[:, LEFT_HIP], pts[:, RIGHT_HIP])
  hands = midpoint(pts[:, LEFT_WRIST], pts[:, RIGHT_WRIST])

  hip_rotation = np.array([segment_rotation(p[LEFT_HIP], p[RIGHT_HIP]) for p in pts])
  shoulder_rotation = np.array([segment_rotation(p[LEFT_SHOULDER], p[RIGHT_SHOULDER]) for p in pts])

  hip_velocity = np.zeros(len(pts))
  hip_velocity[1:] = np.abs(np.diff(hip_rotation)) * fps

  return {
    "timestamp": np.arange(len(pts)) / fps,
    "hip_rotation": hip_rotation,
    "shoulder_rotation": shoulder_rotation,
    "front_knee_angle": np.array([angle(p[LEFT_HIP], p[LEFT_KNEE], p[LEFT_ANKLE]) for p in pts]),
    "back_knee_angle": np.array([angle(p[RIGHT_HIP], p[RIGHT_KNEE], p[RIGHT_ANKLE]) for p in pts]),
    "com_x": com[:, 0],
    "com_y": com[:, 1],
    "hand_x": hands[:, 0],
    "hand_y": hands[:, 1],
    "front_foot_contact": pts[:, LEFT_ANKLE, 1] > standards.FRONT_FOOT_CONTACT_Y,
    "hip_velocity": hip_velocity,
  }


# ============================================
# PHASE BOUNDARIES
# ============================================

def _find_stance_end(com_x: np.ndarray, s: PhaseDetectionStandards) -> int:
  shifted = np.nonzero(np.abs(com_x[s.STANCE_MIN_FRAME:] - com_x[0]) > s.STANCE_COM_SHIFT)[0]
  if shifted.size:
    return int(shifted[0]) + s.STANCE_MIN_FRAME
  return min(s.STANCE_FALLBACK_FRAMES, len(com_x))


def _find_load_end(com_x: np.ndarray, start: int, s: PhaseDetectionStandards) -> int:
  window = com_x[start:start + s.LOAD_SEARCH_FRAMES]
  return start + int(np.argmin(window))


def _find_stride_end(contact: np.ndarray, start: int, s: PhaseDetectionStandards) -> int:
  planted = np.nonzero(contact[start:start + s.STRIDE_SEARCH_FRAMES])[0]
  if planted.size:
    return start + int(planted[0])
  return min(start + s.STRIDE_FALLBACK_FRAMES, len(contact) - 1)


def _find_peak(values: np.ndarray, start: int, window: int) -> int:
  """Index of the first strictly positive maximum in the window, else start."""
  segment = values[start:start + window]
  if segment.size == 0 or segment.max() <= 0:
    return start
  return start + int(np.argmax(segment))


def _make_phase(name: str, start: int, end: int, fps: float, com_frame: int,
                features: Dict[str, np.ndarray], s: PhaseDetectionStandards) -> SwingPhase:
  return SwingPhase(
    name=name,
    start_frame=start,
    end_frame=end,
    duration=(end - start) / fps,
    key_events=list(_KEY_EVENTS[name]),
    confidence=s.confidence(name),
    com_position=(float(features["com_x"][com_frame]), float(features["com_y"][com_frame])),
  )


def identify_phases(
  features: Dict[str, np.ndarray],
  fps: float,
  standards: PhaseDetectionStandards = PHASE_DETECTION_STANDARDS,
) -> List[SwingPhase]:
  """Walk the swing phase by phase; each phase starts where the last one ended."""
  s = standards
  n = len(features["com_x"])
  if n < s.MIN_FRAMES:
    return []

  phases: List[SwingPhase] = []
  start = 0

  stance_end = _find_stance_end(features["com_x"], s)
  if stance_end > 0:
    phases.append(_make_phase("stance", 0, stance_end, fps, 0, features, s))
    start = stance_end

  boundary_finders = (
    ("load", lambda st: _find_load_end(features["com_x"], st, s)),
    ("stride", lambda st: _find_stride_end(features["front_foot_contact"], st, s)),
    ("fire", lambda st: _find_peak(features["hip_velocity"], st, s.FIRE_SEARCH_FRAMES)),
    ("contact", lambda st: _find_peak(features["hand_x"], st, s.CONTACT_SEARCH_FRAMES)),
  )
  for name, find_end in boundary_finders:
    if start >= n:
      break
    end = find_end(start)
    if end > start:
      phases.append(_make_phase(name, start, end, fps, end, features, s))
      start = end

  if start < n - 1:
    phases.append(_make_phase("follow_through", start, n - 1, fps, n - 1, features, s))

  return phases


def _ratio(load: Optional[SwingPhase], fire: Optional[SwingPhase]) -> float:
  if load is None or fire is None or fire.duration <= 0:
    return 0.0
  return load.duration / fire.duration


def assess_detection_quality(
  phases: List[SwingPhase],
  standards: PhaseDetectionStandards = PHASE_DETECTION_STANDARDS,
) -> DetectionQuality:
  s = standards
  issues: List[str] = []
  score = 100.0

  detected = {p.name: p for p in phases}
  missing = [name for name in s.expected_phases if name not in detected]
  if missing:
    issues.append(f"Missing phases: {', '.join(missing)}")
    score -= len(missing) * s.MISSING_PHASE_PENALTY

  load = detected.get("load")
  fire = detected.get("fire")

  if load and not s.LOAD_DURATION_MIN_S <= load.duration <= s.LOAD_DURATION_MAX_S:
    issues.append("Load phase duration unusual")
    score -= s.ANOMALY_PENALTY

  if fire and not s.FIRE_DURATION_MIN_S <= fire.duration <= s.FIRE_DURATION_MAX_S:
    issues.append("Fire phase duration unusual")
    score -= s.ANOMALY_PENALTY

  if load and fire:
    ratio = _ratio(load, fire)
    if not s.RATIO_MIN <= ratio <= s.RATIO_MAX:
      issues.append(f"Load-to-fire ratio ({ratio:.1f}:1) outside ideal range")
      score -= s.ANOMALY_PENALTY

  confidence = float(np.mean([p.confidence for p in phases])) if phases else 0.0

  return DetectionQuality(score=max(0.0, score), issues=issues, detection_confidence=confidence)


def _empty_result(issue: str) -> PhaseDetectionResult:
  return PhaseDetectionResult(
    phases=[],
    total_duration=0.0,
    load_to_fire_ratio=0.0,
    phase_transitions=[],
    quality=DetectionQuality(score=0.0, issues=[issue], detection_confidence=0.0),
  )


def detect_swing_phases(
  pose_frames: Optional[Sequence[Any]],
  fps: float = PHASE_DETECTION_STANDARDS.DEFAULT_FPS,
  standards: PhaseDetectionStandards = PHASE_DETECTION_STANDARDS,
) -> PhaseDetectionResult:
  """
  Detect swing phases from per-frame pose landmarks.

  Args:
    pose_frames: One entry per frame: 33 landmarks of [x, y(, z, ...)] in
                 normalized image coordinates, or None for a dropped frame.
    fps: Capture frame rate.

  Returns:
    PhaseDetectionResult. Fewer than 10 frames (or no landmarks at all)
    yields an empty result with a quality issue instead of an error.

  Raises:
    ValidationError: On a non-positive fps or a malformed frame.
  """
  if fps is None or not math.isfinite(fps) or fps <= 0:
    raise ValidationError(f"fps must be positive, got {fps}")

  if not pose_frames or len(pose_frames) < standards.MIN_FRAMES:
    return _empty_result(INSUFFICIENT_DATA_ISSUE)

  features = compute_frame_features(pose_frames, fps, standards)
  if not features:
    return _empty_result(INSUFFICIENT_DATA_ISSUE)

  phases = identify_phases(features, fps, standards)
  by_name = {p.name: p for p in phases}

  result = PhaseDetectionResult(
    phases=phases,
    total_duration=float(sum(p.duration for p in phases)),
    load_to_fire_ratio=_ratio(by_name.get("load"), by_name.get("fire")),
    phase_transitions=[PhaseTransition(p.name, p.start_frame, p.start_frame / fps) for p in phases],
    quality=assess_detection_quality(phases, standards),
  )
  logger.debug(f"Detected {len(phases)} phases, quality {result.quality.score}")
  return result


def markers_from_phases(result: PhaseDetectionResult, fps: float) -> Optional[PhaseMarkers]:
  """
  Convert detected phases into timing markers (ms before contact).

  Contact is the end of the contact phase (peak hand extension); the pelvis
  peak is the end of the fire phase (peak hip velocity). Returns None when
  load, fire or contact was not detected.
  """
  load = result.get_phase("load")
  fire = result.get_phase("fire")
  contact = result.get_phase("contact")
  if load is None or fire is None or contact is None:
    return None

  def ms_before_contact(frame: int) -> float:
    return (contact.end_frame - frame) * 1000.0 / fps

  return PhaseMarkers(
    load_start=ms_before_contact(load.start_frame),
    fire_start=ms_before_contact(fire.start_frame),
    contact=0.0,
    pelvis_peak=ms_before_contact(fire.end_frame),
  )
