"""
Component scorers for swing metrics.

Each scorer turns one measurement plus its benchmark range into a
ComponentScore on a 0-100 scale. Missing or non-finite values never raise:
they come back as score 0 with status "N/A" so callers can tell "not
assessed" apart from "assessed poorly". A value of the wrong type (a string,
a list) is a malformed input and raises ValidationError.
"""
import math
import numbers
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from swing_scoring.logging_config import get_logger
from swing_scoring.exceptions import ValidationError
from swing_scoring.models import (
    STATUS_DEVELOPING,
    STATUS_NEEDS_WORK,
    STATUS_NOT_AVAILABLE,
    STATUS_OPTIMAL,
    ComponentScore,
    MetricSample,
    PhaseDurations,
    PhaseMarkers,
    ScoreRange,
)
from swing_scoring.biomechanics_standards import (
    DEVELOPING_BAND_MAX,
    DEVELOPING_BAND_MIN,
    KEY_BIOMECHANICS_RANGES,
    NEEDS_WORK_MAX,
    PHASE_TIMING_STANDARDS,
    REBOOT_CORRECTION_FACTORS,
    PhaseTimingStandards,
)

logger = get_logger(__name__)


def clamp_score(value: float) -> float:
  """Clamp to [0, 100]."""
  return max(0.0, min(100.0, value))


def coerce_metric(metric_name: str, value: Any) -> Optional[float]:
  """
  Normalize a raw metric value or a MetricSample.

  Returns:
    The value as float, or None when missing or non-finite (NaN, inf).

  Raises:
    ValidationError: If the value is not a number at all.
  """
  if isinstance(value, MetricSample):
    if value.is_available:
      return float(value.value)
    value = value.value
  if value is None:
    return None
  if isinstance(value, bool) or not isinstance(value, numbers.Real):
    raise ValidationError(
      f"Metric '{metric_name}' must be a number or null, got {type(value).__name__}"
    )
  value = float(value)
  if not math.isfinite(value):
    return None
  return value


def not_available(metric_name: str, unit: str = "", detail: str = "") -> ComponentScore:
  """Score for a metric the source did not provide."""
  return ComponentScore(
    name=metric_name,
    value=0.0,
    status=STATUS_NOT_AVAILABLE,
    raw_value=None,
    unit=unit,
    detail=detail or "Not measured",
  )


def _score_two_sided(value: float, score_range: ScoreRange):
  opt_lo, opt_hi = score_range.optimal
  if opt_lo <= value <= opt_hi:
    return 100.0, STATUS_OPTIMAL

  # The developing band may extend on one side only (e.g. attack angle 5-8 below 8-15)
  edge_lo = min(score_range.developing[0], opt_lo)
  edge_hi = max(score_range.developing[1], opt_hi)

  if value < opt_lo:
    bound, edge, distance = opt_lo, edge_lo, opt_lo - value
  else:
    bound, edge, distance = opt_hi, edge_hi, value - opt_hi

  band_width = abs(bound - edge)
  if band_width > 0 and distance <= band_width:
    fraction = distance / band_width
    score = DEVELOPING_BAND_MAX - fraction * (DEVELOPING_BAND_MAX - DEVELOPING_BAND_MIN)
    return score, STATUS_DEVELOPING

  falloff = score_range.falloff or (opt_hi - opt_lo) or 1.0
  beyond = distance - band_width
  score = NEEDS_WORK_MAX * max(0.0, 1.0 - beyond / falloff)
  return score, STATUS_NEEDS_WORK


def _score_one_sided(value: float, score_range: ScoreRange):
  elite = score_range.optimal[0]
  developing = score_range.developing[0]
  floor = score_range.floor
  score = 100.0 * (value - floor) / (elite - floor)

  if value >= elite:
    status = STATUS_OPTIMAL
  elif value >= developing:
    status = STATUS_DEVELOPING
  else:
    status = STATUS_NEEDS_WORK
  return score, status


def score_component(metric_name: str, value: Any, score_range: ScoreRange) -> ComponentScore:
  """
  Score one metric against its benchmark range.

  Two-sided ranges score 100 inside optimal, 89 down to 60 across the
  developing band and 59 down to 0 over ``falloff`` beyond it. One-sided
  ranges rise linearly from 0 at ``floor`` to 100 at the elite threshold and
  are never penalized above it.
  """
  number = coerce_metric(metric_name, value)
  if number is None:
    return not_available(metric_name, unit=score_range.unit)

  if score_range.one_sided:
    score, status = _score_one_sided(number, score_range)
  else:
    score, status = _score_two_sided(number, score_range)

  score = round(clamp_score(score), 1)
  logger.debug(f"{metric_name}={number} -> {score} ({status})")

  return ComponentScore(
    name=metric_name,
    value=score,
    status=status,
    raw_value=number,
    unit=score_range.unit,
  )


def score_deviation(
  metric_name: str,
  actual: Any,
  target: float,
  unit: str = "",
  standards: PhaseTimingStandards = PHASE_TIMING_STANDARDS,
) -> ComponentScore:
  """
  Symmetric-deviation score: 100 x (1 - |actual - target| / target).

  A non-positive target cannot be scored against and yields 0.
  """
  number = coerce_metric(metric_name, actual)
  if number is None:
    return not_available(metric_name, unit=unit)

  if not math.isfinite(target) or target <= 0:
    score = 0.0
  else:
    score = round(clamp_score(100.0 * (1.0 - abs(number - target) / target)), 1)

  if score >= standards.OPTIMAL_SCORE_MIN:
    status = STATUS_OPTIMAL
  elif score >= standards.DEVELOPING_SCORE_MIN:
    status = STATUS_DEVELOPING
  else:
    status = STATUS_NEEDS_WORK

  return ComponentScore(
    name=metric_name,
    value=score,
    status=status,
    raw_value=number,
    unit=unit,
    detail=f"Target {target:g}{unit}",
  )


def score_key_biomechanics(
  metrics: Union[Mapping[str, Any], Iterable[MetricSample]],
  corrected: bool = False,
  ranges: Optional[Mapping[str, ScoreRange]] = None,
) -> Dict[str, ComponentScore]:
  """
  Score every key biomechanics metric present in the ranges table.

  Args:
    metrics: Raw values or MetricSamples keyed by metric name, or a sequence
             of MetricSamples; absent metrics score "N/A".
    corrected: Multiply raw motion-capture rotational velocities by the
               Reboot correction factors before scoring.
    ranges: Range table to use instead of KEY_BIOMECHANICS_RANGES.
  """
  ranges = ranges if ranges is not None else KEY_BIOMECHANICS_RANGES
  if not isinstance(metrics, Mapping):
    metrics = {sample.name: sample for sample in metrics}
  scores: Dict[str, ComponentScore] = {}

  for metric_name, score_range in ranges.items():
    value = coerce_metric(metric_name, metrics.get(metric_name))
    if corrected and value is not None and metric_name in REBOOT_CORRECTION_FACTORS:
      value *= REBOOT_CORRECTION_FACTORS[metric_name]
    scores[metric_name] = score_component(metric_name, value, score_range)

  return scores


# ============================================
# PHASE TIMING
# ============================================

def tempo_ratio(load_ms: Any, fire_ms: Any) -> float:
  """
  Load duration divided by fire duration.

  Returns 0.0 when fire duration is not positive or either operand is
  missing or non-finite.
  """
  load = coerce_metric("load_duration", load_ms)
  fire = coerce_metric("fire_duration", fire_ms)
  if load is None or fire is None or fire <= 0:
    return 0.0
  return load / fire


def compute_phase_durations(markers: PhaseMarkers) -> PhaseDurations:
  """
  Signed load and fire durations from timing markers.

  Markers are normalized to magnitudes first, so out-of-order markers
  surface as negative durations.
  """
  m = markers.normalized()
  load_ms = m.load_start - m.fire_start
  fire_ms = m.fire_start - m.contact
  return PhaseDurations(
    load_ms=load_ms,
    fire_ms=fire_ms,
    tempo_ratio=tempo_ratio(load_ms, fire_ms),
  )


def score_phase_timing(
  load_ms: Any,
  fire_ms: Any,
  standards: PhaseTimingStandards = PHASE_TIMING_STANDARDS,
) -> Dict[str, ComponentScore]:
  """Deviation scores for COM load/fire durations and their tempo ratio."""
  load = coerce_metric("load_duration", load_ms)
  fire = coerce_metric("fire_duration", fire_ms)

  if load is None or fire is None:
    tempo = not_available("tempo_ratio", unit=":1")
  else:
    tempo = score_deviation(
      "tempo_ratio", tempo_ratio(load, fire), standards.ELITE_TEMPO_RATIO, unit=":1", standards=standards
    )

  return {
    "tempo_ratio": tempo,
    "load_duration": score_deviation(
      "load_duration", load, standards.ELITE_LOAD_DURATION_MS, unit="ms", standards=standards
    ),
    "fire_duration": score_deviation(
      "fire_duration", fire, standards.ELITE_FIRE_DURATION_MS, unit="ms", standards=standards
    ),
  }
