"""
Kinematic sequence analysis.

A proper swing is proximal-to-distal: the negative move starts first, then
the pelvis peaks, then the shoulders, then the arms and hands, with the bat
arriving at contact (time 0). Times are milliseconds before contact; like
phase markers they are taken as magnitudes, so a reference frame that reports
"180 ms before contact" as -180 yields the same result as 180.

Only measured segments (``is_actual=True``) decide pass/fail. Estimated
segments are reported as supplementary context with their gaps.
"""
from typing import Any, Dict, List, Optional, Sequence

from swing_scoring.logging_config import get_logger
from swing_scoring.exceptions import ValidationError
from swing_scoring.models import KinematicSequenceResult, SegmentTiming, STATUS_NOT_AVAILABLE
from swing_scoring.component_scoring import coerce_metric

logger = get_logger(__name__)

# Proximal to distal; earlier entries must peak farther from contact
SEGMENT_ORDER = ("negative_move", "pelvis", "shoulder", "arm", "hands")

SEVERITY_OK = "ok"
SEVERITY_CRITICAL = "critical"


def _gap(times: Dict[str, float], earlier: str, later: str) -> Optional[float]:
  if earlier in times and later in times:
    return times[earlier] - times[later]
  return None


def analyze_kinematic_sequence(segments: Sequence[SegmentTiming]) -> KinematicSequenceResult:
  """
  Judge whether measured segments peak in proximal-to-distal order.

  Raises:
    ValidationError: On an unknown or duplicated segment name.
  """
  times: Dict[str, float] = {}
  actual: Dict[str, bool] = {}

  for segment in segments:
    if segment.name not in SEGMENT_ORDER:
      raise ValidationError(
        f"Unknown segment '{segment.name}'. Expected one of: {', '.join(SEGMENT_ORDER)}"
      )
    if segment.name in actual:
      raise ValidationError(f"Segment '{segment.name}' given more than once")
    time_ms = coerce_metric(segment.name, segment.time_ms)
    actual[segment.name] = segment.is_actual
    if time_ms is not None:
      times[segment.name] = abs(time_ms)

  judged = [name for name in SEGMENT_ORDER if name in times and actual[name]]
  supplementary = [name for name in SEGMENT_ORDER if name in times and not actual[name]]

  violations: List[str] = []
  for earlier, later in zip(judged, judged[1:]):
    if not times[earlier] > times[later]:
      violations.append(
        f"{earlier} peaks at {times[earlier]:g}ms, not before {later} at {times[later]:g}ms"
      )

  if len(judged) < 2:
    is_proper = False
    severity = STATUS_NOT_AVAILABLE
    violations.append("Fewer than two measured segments; sequence not judged")
  else:
    is_proper = not violations
    severity = SEVERITY_OK if is_proper else SEVERITY_CRITICAL

  pelvis_shoulder_gap = _gap(times, "pelvis", "shoulder")
  is_proximal_to_distal = (
    pelvis_shoulder_gap is not None
    and actual.get("pelvis", False)
    and actual.get("shoulder", False)
    and pelvis_shoulder_gap > 0
  )

  if violations and severity == SEVERITY_CRITICAL:
    logger.debug(f"Sequence violations: {violations}")

  return KinematicSequenceResult(
    is_proper_sequence=is_proper,
    is_proximal_to_distal=is_proximal_to_distal,
    pelvis_shoulder_gap=pelvis_shoulder_gap,
    shoulder_hands_gap=_gap(times, "shoulder", "hands"),
    negative_move_pelvis_gap=_gap(times, "negative_move", "pelvis"),
    severity=severity,
    judged_segments=judged,
    supplementary_segments=supplementary,
    violations=violations,
  )


def check_sequence(
  pelvis_time: Any,
  shoulder_time: Any,
  negative_move_time: Any = None,
  hands_time: Any = None,
  hands_is_actual: bool = False,
  arm_time: Any = None,
  arm_is_actual: bool = False,
) -> KinematicSequenceResult:
  """
  Convenience wrapper for the common pelvis/shoulder case.

  Hand and arm timings usually come from estimates rather than measured
  velocity, so they default to supplementary.
  """
  segments = [
    SegmentTiming("pelvis", pelvis_time),
    SegmentTiming("shoulder", shoulder_time),
  ]
  if negative_move_time is not None:
    segments.append(SegmentTiming("negative_move", negative_move_time))
  if arm_time is not None:
    segments.append(SegmentTiming("arm", arm_time, is_actual=arm_is_actual))
  if hands_time is not None:
    segments.append(SegmentTiming("hands", hands_time, is_actual=hands_is_actual))
  return analyze_kinematic_sequence(segments)
