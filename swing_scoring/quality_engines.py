"""
Composite quality engines.

Each engine scores its components, combines them with a fixed weight table
and buckets the overall score with that assessment's own thresholds:

- Swing mechanics quality: direction 40%, timing 35%, efficiency 25%
  (4-tier scale 90/75/60)
- Front leg stability: knee 40%, ankle 30%, deceleration 30% (5-tier)
- Weight transfer: vertical 25%, timing 35%, back foot 25%,
  acceleration 15% (5-tier)

Feedback is selected from canned text keyed by component and score band, so
identical inputs always produce identical narratives.
"""
import math
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from swing_scoring.logging_config import get_logger
from swing_scoring.exceptions import ValidationError
from swing_scoring.models import (
    STATUS_DEVELOPING,
    STATUS_NEEDS_WORK,
    STATUS_OPTIMAL,
    ComponentScore,
    QualityAssessment,
)
from swing_scoring.component_scoring import clamp_score, coerce_metric, not_available
from swing_scoring.biomechanics_standards import (
    DRILL_SCORE_CUTOFF,
    DRILLS,
    FIVE_TIER_FLOOR,
    FIVE_TIER_THRESHOLDS,
    FRONT_LEG_STANDARDS,
    MECHANICS_QUALITY_FLOOR,
    MECHANICS_QUALITY_THRESHOLDS,
    SWING_MECHANICS_STANDARDS,
    WEIGHT_SUM_TOLERANCE,
    WEIGHT_TRANSFER_STANDARDS,
    BandTable,
    FrontLegStandards,
    SwingMechanicsStandards,
    WeightTransferStandards,
)

logger = get_logger(__name__)

SWING_MECHANICS = "swing_mechanics"
FRONT_LEG_STABILITY = "front_leg_stability"
WEIGHT_TRANSFER = "weight_transfer"


def js_round(value: float) -> int:
  """Round half up (2.5 -> 3, -2.5 -> -2), matching the reference app's rounding."""
  return int(math.floor(value + 0.5))


def round_tenth(value: float) -> float:
  return js_round(value * 10) / 10


def status_for_score(
  score: float,
  thresholds: Sequence[Tuple[float, str]],
  floor_status: str,
) -> str:
  """Bucket a score with an ordered (cutoff, status) table, highest first."""
  for cutoff, status in thresholds:
    if score >= cutoff:
      return status
  return floor_status


def band_status(score: float) -> str:
  """Component status for band-table scores (100/85/70/50/25)."""
  if score >= 90:
    return STATUS_OPTIMAL
  if score >= 70:
    return STATUS_DEVELOPING
  return STATUS_NEEDS_WORK


def check_weights(component_names: Sequence[str], weights: Mapping[str, float]) -> None:
  """
  Raises:
    ValidationError: If weight keys differ from the components or do not sum to 1.
  """
  if set(component_names) != set(weights):
    raise ValidationError(
      f"Weights {sorted(weights)} do not match components {sorted(component_names)}"
    )
  total = math.fsum(weights.values())
  if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
    raise ValidationError(f"Component weights must sum to 1.0, got {total}")


def compute_quality(
  component_scores: Mapping[str, ComponentScore],
  weights: Mapping[str, float],
  assessment_type: str = "custom",
  thresholds: Sequence[Tuple[float, str]] = FIVE_TIER_THRESHOLDS,
  floor_status: str = FIVE_TIER_FLOOR,
  feedback: Optional[Mapping[str, str]] = None,
  drills: Optional[Mapping[str, str]] = None,
  integer_score: bool = False,
  predicted_output: Optional[str] = None,
) -> QualityAssessment:
  """
  Weighted-sum composite of component scores.

  Args:
    component_scores: Scored components keyed by component name.
    weights: Weight per component; keys must match and sum to 1.0.
    assessment_type: Label carried into the result.
    thresholds: Ordered (cutoff, status) table for the overall score.
    floor_status: Status when the score is below every cutoff.
    feedback: Narrative per component plus "bottomLine".
    drills: Drill text keyed by component. The drill for the lowest-scoring
            assessed component is returned when the overall score is below 90.
    integer_score: Round the overall score to a whole number instead of 0.1.
    predicted_output: Optional banded prediction string.

  Returns:
    QualityAssessment
  """
  check_weights(list(component_scores), weights)

  overall = math.fsum(component_scores[name].value * weights[name] for name in weights)
  overall = clamp_score(overall)
  overall_score = js_round(overall) if integer_score else round_tenth(overall)
  overall_status = status_for_score(overall_score, thresholds, floor_status)

  recommended_drill = None
  if drills and overall_score < DRILL_SCORE_CUTOFF:
    assessed = [s for s in component_scores.values() if s.is_assessed] or list(component_scores.values())
    weakest = min(assessed, key=lambda s: s.value)
    recommended_drill = drills.get(weakest.name)

  logger.debug(
    f"{assessment_type} overall={overall_score} ({overall_status})",
    extra={"assessment_type": assessment_type},
  )

  return QualityAssessment(
    assessment_type=assessment_type,
    overall_score=overall_score,
    overall_status=overall_status,
    component_scores=dict(component_scores),
    feedback=dict(feedback or {}),
    weights=dict(weights),
    recommended_drill=recommended_drill,
    predicted_output=predicted_output,
  )


def _band_component(name: str, value: Any, table: BandTable, unit: str) -> ComponentScore:
  number = coerce_metric(name, value)
  if number is None:
    return not_available(name, unit=unit)
  score, label = table.lookup(number)
  return ComponentScore(
    name=name,
    value=float(score),
    status=band_status(score),
    raw_value=number,
    unit=unit,
    detail=label,
  )


# ============================================
# SWING MECHANICS QUALITY
# ============================================

def score_bat_angle(angle: float, standards: SwingMechanicsStandards = SWING_MECHANICS_STANDARDS) -> float:
  """Attack angle / bat path plane score: 100 for a 5-15° upward path."""
  s = standards
  if s.BAT_ANGLE_OPTIMAL_MIN <= angle <= s.BAT_ANGLE_OPTIMAL_MAX:
    return 100.0
  if 0 <= angle < s.BAT_ANGLE_OPTIMAL_MIN:
    return 100.0 - (s.BAT_ANGLE_OPTIMAL_MIN - angle) * s.BAT_ANGLE_FLAT_PENALTY
  if s.BAT_ANGLE_OPTIMAL_MAX < angle <= s.BAT_ANGLE_STEEP_MAX:
    return 100.0 - (angle - s.BAT_ANGLE_OPTIMAL_MAX) * s.BAT_ANGLE_STEEP_PENALTY
  if angle < 0:
    # Downward path
    return max(0.0, s.BAT_ANGLE_NEGATIVE_BASE + angle * 5)
  return max(0.0, s.BAT_ANGLE_EXTREME_BASE - (angle - s.BAT_ANGLE_STEEP_MAX) * 5)


def score_tempo_band(ratio: float, standards: SwingMechanicsStandards = SWING_MECHANICS_STANDARDS) -> float:
  """Tempo ratio score: 100 inside the elite 2.3-2.7:1 window."""
  s = standards
  if s.TEMPO_OPTIMAL_MIN <= ratio <= s.TEMPO_OPTIMAL_MAX:
    return 100.0
  if s.TEMPO_GOOD_MIN <= ratio < s.TEMPO_OPTIMAL_MIN:
    return 100.0 - (s.TEMPO_OPTIMAL_MIN - ratio) * 20
  if s.TEMPO_OPTIMAL_MAX < ratio <= s.TEMPO_GOOD_MAX:
    return 100.0 - (ratio - s.TEMPO_OPTIMAL_MAX) * 15
  if s.TEMPO_FAIR_MIN <= ratio < s.TEMPO_GOOD_MIN:
    return max(50.0, 100.0 - (s.TEMPO_OPTIMAL_MIN - ratio) * 25)
  if s.TEMPO_GOOD_MAX < ratio <= s.TEMPO_FAIR_MAX:
    return max(50.0, 100.0 - (ratio - s.TEMPO_OPTIMAL_MAX) * 20)
  return max(30.0, 50.0 - abs(ratio - s.TEMPO_CENTER) * 10)


def score_separation_band(
  separation: float,
  standards: SwingMechanicsStandards = SWING_MECHANICS_STANDARDS,
) -> float:
  """Hip-shoulder separation score: 100 for 40-50°."""
  lo, hi = standards.SEPARATION_OPTIMAL_MIN, standards.SEPARATION_OPTIMAL_MAX
  if lo <= separation <= hi:
    return 100.0
  if 35 <= separation < lo:
    return 100.0 - (lo - separation) * 4
  if hi < separation <= 55:
    return 100.0 - (separation - hi) * 2
  if 30 <= separation < 35:
    return max(60.0, 100.0 - (lo - separation) * 5)
  if 55 < separation <= 60:
    return max(85.0, 100.0 - (separation - hi) * 3)
  if separation < 30:
    return max(40.0, 60.0 - (30 - separation) * 2)
  return max(70.0, 100.0 - (separation - hi) * 4)


def _weighted(parts: Mapping[str, Optional[float]], weights: Mapping[str, float]) -> float:
  check_weights(list(parts), weights)
  # Missing sub-inputs contribute nothing
  total = math.fsum((parts[name] or 0.0) * weight for name, weight in weights.items())
  return round_tenth(clamp_score(total))


def calculate_direction_score(
  attack_angle: Any = None,
  bat_path_plane: Any = None,
  connection_quality: Any = None,
  standards: SwingMechanicsStandards = SWING_MECHANICS_STANDARDS,
) -> float:
  """
  Direction sub-score: where momentum is directed.

  A missing attack angle falls back to DEFAULT_ATTACK_ANGLE (10°), the
  typical value the reference app assumes when the source lacks it.
  """
  attack = coerce_metric("attack_angle", attack_angle)
  if attack is None:
    attack = standards.DEFAULT_ATTACK_ANGLE
  path = coerce_metric("bat_path_plane", bat_path_plane)
  connection = coerce_metric("connection_quality", connection_quality)

  return _weighted(
    {
      "attack_angle": score_bat_angle(attack, standards),
      "bat_path_plane": score_bat_angle(path, standards) if path is not None else None,
      "connection_quality": clamp_score(connection) if connection is not None else None,
    },
    standards.direction_weights,
  )


def calculate_timing_score(
  tempo_ratio: Any = None,
  sequence_quality: Any = None,
  acceleration_pattern: Any = None,
  standards: SwingMechanicsStandards = SWING_MECHANICS_STANDARDS,
) -> float:
  """Timing sub-score: when momentum peaks."""
  tempo = coerce_metric("tempo_ratio", tempo_ratio)
  sequence = coerce_metric("sequence_quality", sequence_quality)
  acceleration = coerce_metric("acceleration_pattern", acceleration_pattern)

  return _weighted(
    {
      "tempo_ratio": score_tempo_band(tempo, standards) if tempo is not None else None,
      "sequence_quality": clamp_score(sequence) if sequence is not None else None,
      "acceleration_pattern": clamp_score(acceleration) if acceleration is not None else None,
    },
    standards.timing_weights,
  )


def calculate_efficiency_score(
  hip_shoulder_separation: Any = None,
  connection_quality: Any = None,
  balance_score: Any = None,
  standards: SwingMechanicsStandards = SWING_MECHANICS_STANDARDS,
) -> float:
  """Efficiency sub-score: how well rotational energy is transferred."""
  separation = coerce_metric("hip_shoulder_separation", hip_shoulder_separation)
  connection = coerce_metric("connection_quality", connection_quality)
  balance = coerce_metric("balance_score", balance_score)

  return _weighted(
    {
      "hip_shoulder_separation": score_separation_band(separation, standards) if separation is not None else None,
      "connection_quality": clamp_score(connection) if connection is not None else None,
      "balance_score": clamp_score(balance) if balance is not None else None,
    },
    standards.efficiency_weights,
  )


_MECHANICS_FEEDBACK: Dict[str, Tuple[str, str, str, str]] = {
  "direction": (
    "Your bat path is aligned perfectly toward the field. Hands stay inside, creating a long contact zone.",
    "Your bat path is good, but hands occasionally drift away from your body (casting).",
    "Your bat path is too steep or inconsistent. Hands are casting, wasting momentum.",
    "Your bat path needs significant work. Inconsistent angles and poor connection waste 30-40% of momentum.",
  ),
  "timing": (
    "Your kinematic sequence is excellent - body segments fire in perfect order, peaking right at contact.",
    "Your tempo is slightly quick. Body segments peak about 50ms before contact.",
    "Your tempo is too quick. Not enough time to create separation and build momentum.",
    "Your tempo is very rushed. Body segments peak 150ms before contact, losing 10-15 mph at impact.",
  ),
  "efficiency": (
    "Your body transfers rotational energy very efficiently. Great separation, connection, and balance.",
    "Good hip-shoulder separation, but connection could be better when hands cast out.",
    "Limited hip-shoulder separation (32-35°). Connection is inconsistent, balance issues.",
    "Minimal separation (<30°). Swinging mostly with arms. Poor connection and balance.",
  ),
}

_MECHANICS_BOTTOM_LINE: Dict[str, str] = {
  "elite": "You don't need to swing faster - you're already using your mechanics incredibly well.",
  "good": "Improving these areas will help you hit the ball 5-10 mph harder WITHOUT increasing raw speed.",
  "developing": "Focus on these areas for 4-6 weeks to improve effective bat speed by 8-12 mph.",
  "needs-work": "These fundamental issues need 8-12 weeks of work. Fixing them will add 15-20 mph to effective bat speed.",
}


def feedback_band(score: float, cutoffs: Sequence[float]) -> int:
  """Index of the first cutoff the score reaches; len(cutoffs) when below all."""
  for index, cutoff in enumerate(cutoffs):
    if score >= cutoff:
      return index
  return len(cutoffs)


def predict_bat_speed_range(
  overall_score: float,
  bat_speed: Optional[float] = None,
  standards: SwingMechanicsStandards = SWING_MECHANICS_STANDARDS,
) -> str:
  """Banded bat-speed range; a measured bat speed is widened by ±2.5 mph instead."""
  if bat_speed is not None and bat_speed > 0:
    lower = js_round(bat_speed - standards.BAT_SPEED_SPREAD_MPH)
    upper = js_round(bat_speed + standards.BAT_SPEED_SPREAD_MPH)
    return f"{lower}-{upper} mph"
  for cutoff, band in standards.BAT_SPEED_BANDS:
    if overall_score >= cutoff:
      return band
  return standards.BAT_SPEED_FLOOR_BAND


def compute_swing_mechanics_quality(
  direction: Any,
  timing: Any,
  efficiency: Any,
  bat_speed: Any = None,
  standards: SwingMechanicsStandards = SWING_MECHANICS_STANDARDS,
) -> QualityAssessment:
  """
  Overall swing mechanics quality from the three 0-100 sub-scores.

  A missing sub-score is reported "N/A" and contributes 0 to the overall.
  """
  measured_bat_speed = coerce_metric("bat_speed", bat_speed)
  components: Dict[str, ComponentScore] = {}
  feedback: Dict[str, str] = {}

  for name, raw in (("direction", direction), ("timing", timing), ("efficiency", efficiency)):
    number = coerce_metric(name, raw)
    if number is None:
      components[name] = not_available(name)
      feedback[name] = f"No {name} data available for this swing."
      continue

    value = round_tenth(clamp_score(number))
    band = feedback_band(value, standards.FEEDBACK_CUTOFFS)
    text = _MECHANICS_FEEDBACK[name][band]
    if band == 0:
      status = STATUS_OPTIMAL
    elif band < len(standards.FEEDBACK_CUTOFFS):
      status = STATUS_DEVELOPING
    else:
      status = STATUS_NEEDS_WORK
    components[name] = ComponentScore(name=name, value=value, status=status, raw_value=number, detail=text)
    feedback[name] = text

  overall = round_tenth(clamp_score(math.fsum(
    components[name].value * weight for name, weight in standards.weights.items()
  )))
  overall_status = status_for_score(overall, MECHANICS_QUALITY_THRESHOLDS, MECHANICS_QUALITY_FLOOR)
  feedback["bottomLine"] = _MECHANICS_BOTTOM_LINE[overall_status]

  return compute_quality(
    components,
    standards.weights,
    assessment_type=SWING_MECHANICS,
    thresholds=MECHANICS_QUALITY_THRESHOLDS,
    floor_status=MECHANICS_QUALITY_FLOOR,
    feedback=feedback,
    drills=DRILLS[SWING_MECHANICS],
    predicted_output=predict_bat_speed_range(overall, measured_bat_speed, standards),
  )


# ============================================
# FRONT LEG STABILITY
# ============================================

def _front_leg_insight(
  knee: ComponentScore,
  ankle: ComponentScore,
  deceleration: ComponentScore,
  standards: FrontLegStandards,
) -> str:
  cutoff = standards.INSIGHT_CUTOFF
  if not (knee.is_assessed or ankle.is_assessed or deceleration.is_assessed):
    return "No front leg data available. Record a side view with the lead leg visible through contact."

  if knee.is_assessed and knee.value < cutoff:
    if knee.raw_value < standards.KNEE_OPTIMAL_MIN:
      return (
        f"Your front leg is too soft at contact ({knee.raw_value:.0f}°). Firming it up to "
        f"{standards.KNEE_OPTIMAL_MIN:.0f}-{standards.KNEE_OPTIMAL_MAX:.0f}° will add 4-6 mph bat speed "
        "by creating a stable base for rotation."
      )
    return (
      f"Your front leg is too stiff at contact ({knee.raw_value:.0f}°). Slight flexion "
      f"({standards.KNEE_OPTIMAL_MIN:.0f}-{standards.KNEE_OPTIMAL_MAX:.0f}°) maintains stability "
      "while allowing proper energy transfer."
    )
  if deceleration.is_assessed and deceleration.value < cutoff:
    return (
      f"Your front leg plant is too slow ({deceleration.raw_value:.1f} m/s²). A quicker, firmer plant "
      f"(>{standards.DECELERATION_ELITE_MIN:.0f} m/s²) creates a stable post for explosive rotation."
    )
  if ankle.is_assessed and ankle.value < cutoff:
    return (
      f"Your ankle angle ({ankle.raw_value:.0f}°) affects weight distribution. Optimal "
      f"{standards.ANKLE_OPTIMAL_MIN:.0f}-{standards.ANKLE_OPTIMAL_MAX:.0f}° keeps weight on inside "
      "of foot for stable base."
    )
  return (
    "Your front leg mechanics are solid! Continue maintaining firm (not locked) front leg "
    "stability for consistent power transfer."
  )


def compute_front_leg_stability(
  knee_angle: Any = None,
  ankle_angle: Any = None,
  decel_rate: Any = None,
  standards: FrontLegStandards = FRONT_LEG_STANDARDS,
) -> QualityAssessment:
  """
  Front leg stability at contact.

  Args:
    knee_angle: Lead knee angle in degrees (180 = fully straight).
    ankle_angle: Forward shin angle in degrees.
    decel_rate: Lead leg deceleration at plant in m/s².

  Returns:
    QualityAssessment with an integer overall score and 5-tier status.
  """
  knee = _band_component("knee", knee_angle, standards.KNEE_BANDS, "°")
  ankle = _band_component("ankle", ankle_angle, standards.ANKLE_BANDS, "°")
  deceleration = _band_component("deceleration", decel_rate, standards.DECELERATION_BANDS, "m/s²")
  components = {"knee": knee, "ankle": ankle, "deceleration": deceleration}

  feedback = {name: score.detail for name, score in components.items()}
  feedback["bottomLine"] = _front_leg_insight(knee, ankle, deceleration, standards)

  return compute_quality(
    components,
    standards.weights,
    assessment_type=FRONT_LEG_STABILITY,
    thresholds=FIVE_TIER_THRESHOLDS,
    floor_status=FIVE_TIER_FLOOR,
    feedback=feedback,
    drills=DRILLS[FRONT_LEG_STABILITY],
    integer_score=True,
  )


# ============================================
# WEIGHT TRANSFER
# ============================================

def _in_window(value: float, window: Tuple[float, float, bool, bool]) -> bool:
  lo, hi, lo_inclusive, hi_inclusive = window
  above = value >= lo if lo_inclusive else value > lo
  below = value <= hi if hi_inclusive else value < hi
  return above and below


def score_acceleration(
  peak: float,
  timing: float,
  standards: WeightTransferStandards = WEIGHT_TRANSFER_STANDARDS,
) -> Tuple[float, str]:
  """Score COM acceleration from its peak (m/s²) and seconds before contact."""
  for score, label, (peak_lo, peak_hi), windows in standards.ACCELERATION_BANDS:
    if not peak_lo <= peak <= peak_hi:
      continue
    if not windows or any(_in_window(timing, w) for w in windows):
      return score, label
  return standards.ACCELERATION_FALLBACK_SCORE, standards.ACCELERATION_FALLBACK_LABEL


def _weight_transfer_insight(
  vertical: ComponentScore,
  timing: ComponentScore,
  back_foot: ComponentScore,
  acceleration: ComponentScore,
  standards: WeightTransferStandards,
) -> str:
  cutoff = standards.INSIGHT_CUTOFF
  if not any(s.is_assessed for s in (vertical, timing, back_foot, acceleration)):
    return "No weight transfer data available. Record the full swing with both feet visible."

  if vertical.is_assessed and vertical.value < cutoff and vertical.raw_value > standards.JUMPING_RISE_INCHES:
    return (
      f"You're jumping off your back foot ({vertical.raw_value:.1f}\" vertical rise). Stay connected "
      "to the ground - this will add 3-5 mph bat speed by maintaining power transfer."
    )
  if back_foot.is_assessed and back_foot.value < cutoff and back_foot.raw_value < 0:
    return (
      f"Your back toe lifts {abs(back_foot.raw_value):.2f} seconds before contact. Keep it down "
      "through contact to maintain connection and maximize power."
    )
  if timing.is_assessed and timing.value < cutoff:
    if timing.raw_value > standards.EARLY_PEAK_SECONDS:
      return (
        f"Your COM peaks too early ({timing.raw_value:.2f}s before contact). You're already slowing "
        "down at impact. Delay your weight shift slightly for peak momentum at contact."
      )
    return (
      f"Your COM peaks too late ({timing.raw_value:.2f}s before contact). Start your weight "
      "transfer earlier to build momentum for contact."
    )
  if acceleration.is_assessed and acceleration.value < cutoff and acceleration.raw_value > standards.EXPLOSIVE_ACCEL:
    return (
      f"Your acceleration is too explosive ({acceleration.raw_value:.1f} m/s²). A smoother, more "
      "controlled transfer (5-8 m/s²) will improve consistency and prevent jumping."
    )
  return (
    "Your weight transfer mechanics are solid! You're staying connected and transferring power "
    "efficiently from back foot to front foot."
  )


def compute_weight_transfer(
  vertical_movement: Any = None,
  timing_peak: Any = None,
  back_foot_lift: Any = None,
  accel_peak: Any = None,
  accel_timing: Any = None,
  standards: WeightTransferStandards = WEIGHT_TRANSFER_STANDARDS,
) -> QualityAssessment:
  """
  Weight transfer quality from center-of-mass movement.

  Args:
    vertical_movement: COM rise in inches during the swing.
    timing_peak: Seconds before contact that COM velocity peaks.
    back_foot_lift: Seconds of back toe lift relative to contact
                    (negative = before contact).
    accel_peak: Peak COM acceleration in m/s².
    accel_timing: Seconds before contact of peak acceleration; defaults to
                  ``timing_peak`` when not supplied.
  """
  vertical = _band_component("vertical", vertical_movement, standards.VERTICAL_BANDS, "in")
  timing = _band_component("timing", timing_peak, standards.TIMING_BANDS, "s")
  back_foot = _band_component("back_foot", back_foot_lift, standards.BACK_FOOT_BANDS, "s")

  peak = coerce_metric("accel_peak", accel_peak)
  peak_timing = coerce_metric("accel_timing", accel_timing)
  if peak_timing is None:
    peak_timing = timing.raw_value
  if peak is None or peak_timing is None:
    acceleration = not_available("acceleration", unit="m/s²")
  else:
    score, label = score_acceleration(peak, peak_timing, standards)
    acceleration = ComponentScore(
      name="acceleration",
      value=float(score),
      status=band_status(score),
      raw_value=peak,
      unit="m/s²",
      detail=label,
    )

  components = {
    "vertical": vertical,
    "timing": timing,
    "back_foot": back_foot,
    "acceleration": acceleration,
  }
  feedback = {name: score.detail for name, score in components.items()}
  feedback["bottomLine"] = _weight_transfer_insight(vertical, timing, back_foot, acceleration, standards)

  return compute_quality(
    components,
    standards.weights,
    assessment_type=WEIGHT_TRANSFER,
    thresholds=FIVE_TIER_THRESHOLDS,
    floor_status=FIVE_TIER_FLOOR,
    feedback=feedback,
    drills=DRILLS[WEIGHT_TRANSFER],
    integer_score=True,
  )
