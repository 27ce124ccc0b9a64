"""
Swing metrics analysis tool.

Scores one parsed metrics record (pose pipeline output, motion-capture report
or manually entered sensor values) and generates coaching feedback with
issues, strengths and prioritized recommendations.

Features:
- Key biomechanics scored against benchmark ranges
- Swing mechanics quality, front leg stability and weight transfer engines
- COM phase timing and kinematic sequence checks
- 4B letter grades for the player's level
"""
from typing import Any, Dict, List, Mapping, Optional

from swing_scoring.logging_config import get_logger
from swing_scoring.exceptions import AnalysisError, ValidationError
from swing_scoring.config import settings
from swing_scoring.models import STATUS_NEEDS_WORK, ComponentScore, QualityAssessment
from swing_scoring.component_scoring import score_key_biomechanics, score_phase_timing, tempo_ratio
from swing_scoring.quality_engines import (
    calculate_direction_score,
    calculate_efficiency_score,
    calculate_timing_score,
    compute_front_leg_stability,
    compute_swing_mechanics_quality,
    compute_weight_transfer,
)
from swing_scoring.kinematic_sequence import check_sequence
from swing_scoring.grading import grade_report_card
from swing_scoring.biomechanics_standards import (
    KEY_BIOMECHANICS_RANGES,
    LEVEL_BENCHMARKS,
    PRIORITY_CRITICAL,
    PRIORITY_IMPORTANT,
    PRIORITY_OPTIONAL,
    STANDARD_TABLES,
)

# Initialize logger
logger = get_logger(__name__)

_METRIC_LABELS = {
  "attack_angle": "Attack Angle",
  "x_factor": "X-Factor",
  "hip_shoulder_separation": "Hip-Shoulder Separation",
  "lead_knee_angle": "Lead Knee Angle",
  "lead_ankle_angle": "Lead Ankle Angle",
  "pelvis_rot_velocity": "Pelvis Rotational Velocity",
  "upper_torso_rot_velocity": "Upper Torso Rotational Velocity",
  "arm_rot_velocity": "Arm Rotational Velocity",
  "bat_speed": "Bat Speed",
}

_ANALYZED_KEYS = set(_METRIC_LABELS) | {
  "bat_path_plane", "connection_quality", "tempo_ratio", "sequence_quality",
  "acceleration_pattern", "balance_score", "decel_rate", "vertical_movement",
  "com_timing_peak", "back_foot_lift", "accel_peak", "accel_timing",
  "load_duration_ms", "fire_duration_ms", "pelvis_peak_time_ms", "shoulder_peak_time_ms",
  "negative_move_time_ms", "hands_peak_time_ms", "exit_velocity", "launch_angle",
  "hard_hit_percentage", "reaction_time", "decision_accuracy", "time_in_zone", "sequence_efficiency",
}

_STATUS_TO_METRIC_STATUS = {
  "optimal": "good",
  "developing": "warning",
  "needs-work": "error",
  "N/A": "unknown",
}

_OVERALL_PRIORITY = {
  "critical": PRIORITY_CRITICAL,
  "beginner": PRIORITY_CRITICAL,
  "needs-work": PRIORITY_CRITICAL,
  "developing": PRIORITY_IMPORTANT,
  "good": PRIORITY_OPTIONAL,
}


def _target_text(metric_name: str) -> str:
  score_range = KEY_BIOMECHANICS_RANGES[metric_name]
  lo, hi = score_range.optimal
  if score_range.one_sided:
    return f">= {lo:g}{score_range.unit}"
  return f"{lo:g}-{hi:g}{score_range.unit}"


def _generate_metrics(key_scores: Mapping[str, ComponentScore]) -> List[Dict[str, Any]]:
  """Generate metric comparisons (actual vs target)."""
  metric_list: List[Dict[str, Any]] = []
  for name, score in key_scores.items():
    actual = "N/A" if score.raw_value is None else f"{score.raw_value:g}{score.unit}"
    metric_list.append({
      "metric_name": _METRIC_LABELS.get(name, name),
      "actual_value": actual,
      "target_value": _target_text(name),
      "score": score.value,
      "status": _STATUS_TO_METRIC_STATUS[score.status],
    })
  return metric_list


def _identify_issues(
  key_scores: Mapping[str, ComponentScore],
  assessments: List[QualityAssessment],
  sequence: Optional[Dict[str, Any]],
) -> List[Dict[str, Any]]:
  """Identify specific swing issues with severity and coaching cues."""
  issues: List[Dict[str, Any]] = []

  for name, score in key_scores.items():
    if score.status != STATUS_NEEDS_WORK:
      continue
    issues.append({
      "issue_type": f"{_METRIC_LABELS.get(name, name)} Outside Range",
      "severity": "severe" if score.value < 30 else "moderate",
      "coaching_cue": (
        f"{_METRIC_LABELS.get(name, name)} is {score.raw_value:g}{score.unit}; "
        f"target {_target_text(name)}."
      ),
      "score": score.value,
    })

  for assessment in assessments:
    for name, component in assessment.component_scores.items():
      if component.is_assessed and component.status == STATUS_NEEDS_WORK:
        issues.append({
          "issue_type": f"{assessment.assessment_type.replace('_', ' ').title()}: {name.replace('_', ' ')}",
          "severity": "severe" if component.value < 50 else "moderate",
          "coaching_cue": assessment.feedback.get(name) or component.detail,
          "score": component.value,
        })

  if sequence and sequence["severity"] == "critical":
    issues.append({
      "issue_type": "Kinematic Sequence Out of Order",
      "severity": "severe",
      "coaching_cue": (
        "Let the pelvis lead: hips should reach peak speed before the shoulders, "
        "and the shoulders before the hands. " + "; ".join(sequence["violations"])
      ),
      "score": 0.0,
    })

  return issues


def _generate_strengths(
  key_scores: Mapping[str, ComponentScore],
  assessments: List[QualityAssessment],
  issues: List[Dict[str, Any]],
) -> List[str]:
  """Generate positive feedback for elements already in the optimal range."""
  strengths: List[str] = []

  optimal = [_METRIC_LABELS.get(n, n) for n, s in key_scores.items() if s.status == "optimal"]
  if optimal:
    strengths.append(f"Elite range on: {', '.join(optimal)}.")

  for assessment in assessments:
    if assessment.overall_status == "elite":
      strengths.append(assessment.feedback.get("bottomLine", ""))

  if not issues:
    strengths.append("No mechanical issues detected. Keep repeating this swing.")

  if not strengths:
    strengths.append("Good effort! Focus on the cues below to build a more efficient swing.")

  return [s for s in strengths if s]


def _generate_recommendations(assessments: List[QualityAssessment]) -> List[Dict[str, Any]]:
  """Drill recommendations ordered by priority."""
  recommendations: List[Dict[str, Any]] = []
  for assessment in assessments:
    if not assessment.recommended_drill:
      continue
    recommendations.append({
      "recommendation_text": assessment.recommended_drill,
      "assessment_type": assessment.assessment_type,
      "priority": _OVERALL_PRIORITY.get(assessment.overall_status, PRIORITY_OPTIONAL),
    })

  if not recommendations:
    recommendations.append({
      "recommendation_text": (
        "Your mechanics grade out elite across the board. Maintain them with 20 quality "
        "tee swings daily and re-test every 2 weeks."
      ),
      "assessment_type": "maintenance",
      "priority": PRIORITY_OPTIONAL,
    })

  return sorted(recommendations, key=lambda r: r["priority"])


def _sequence(metrics: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
  if metrics.get("pelvis_peak_time_ms") is None and metrics.get("shoulder_peak_time_ms") is None:
    return None
  result = check_sequence(
    pelvis_time=metrics.get("pelvis_peak_time_ms"),
    shoulder_time=metrics.get("shoulder_peak_time_ms"),
    negative_move_time=metrics.get("negative_move_time_ms"),
    hands_time=metrics.get("hands_peak_time_ms"),
    hands_is_actual=bool(metrics.get("hands_is_actual", False)),
  )
  return result.to_dict()


def analyze_swing_metrics(
  metrics: dict,
  level: Optional[str] = None,
  corrected: bool = False,
  tier: str = "elite",
  standards: Optional[Mapping[str, Any]] = None,
) -> dict:
  """
  Analyze one swing's metrics and generate coaching feedback.

  Args:
    metrics: Flat record of swing metrics. Every key is optional:
      key biomechanics (attack_angle, x_factor, hip_shoulder_separation,
      lead_knee_angle, lead_ankle_angle, pelvis_rot_velocity,
      upper_torso_rot_velocity, arm_rot_velocity, bat_speed), mechanics
      inputs (bat_path_plane, connection_quality, tempo_ratio,
      sequence_quality, acceleration_pattern, balance_score), front leg
      (decel_rate), weight transfer (vertical_movement, com_timing_peak,
      back_foot_lift, accel_peak, accel_timing), phase timing
      (load_duration_ms, fire_duration_ms), sequence timing
      (pelvis_peak_time_ms, shoulder_peak_time_ms, negative_move_time_ms,
      hands_peak_time_ms) and outcome metrics for grading.
    level: Playing level for grading (youth, highSchool, college, mlb).
    corrected: Apply Reboot correction factors to raw rotational velocities.
    tier: Report tier deciding which 4B categories feed the overall grade.
    standards: Benchmark tables by name (defaults to the built-in tables).

  Returns:
    dict: {
      status: "success" | "error",
      key_biomechanics: {metric: ComponentScore dict},
      swing_mechanics / front_leg_stability / weight_transfer: QualityAssessment dicts,
      phase_timing: {component: ComponentScore dict},
      kinematic_sequence: KinematicSequenceResult dict or None,
      grades: {ball, bat, body, brain, overall},
      metrics: [{metric_name, actual_value, target_value, score, status}, ...],
      issues: [{issue_type, severity, coaching_cue, score}, ...],
      strengths: [str, ...],
      recommendations: [{recommendation_text, assessment_type, priority}, ...],
    } or {status, error_type, message} on error
  """
  logger.info("Starting swing metrics analysis")
  tables = standards or STANDARD_TABLES

  try:
    if not isinstance(metrics, dict):
      raise ValidationError(f"metrics must be an object, got {type(metrics).__name__}")
    if not metrics:
      raise ValidationError("No metrics available for analysis")
    if not _ANALYZED_KEYS & set(metrics):
      raise AnalysisError(
        f"None of the supplied metrics can be scored: {', '.join(sorted(metrics))}"
      )

    level = level or settings.benchmark_level
    if level.lower() not in {name.lower() for name in LEVEL_BENCHMARKS}:
      raise ValidationError(f"Unknown level '{level}'. Expected one of: {', '.join(LEVEL_BENCHMARKS)}")

    logger.debug(f"Analyzing metrics: {sorted(metrics)}")

    key_scores = score_key_biomechanics(metrics, corrected=corrected)

    load_ms = metrics.get("load_duration_ms")
    fire_ms = metrics.get("fire_duration_ms")
    tempo = metrics.get("tempo_ratio")
    if tempo is None and load_ms is not None and fire_ms is not None:
      tempo = tempo_ratio(load_ms, fire_ms) or None

    mechanics_standards = tables["swing_mechanics"]
    swing_mechanics = compute_swing_mechanics_quality(
      direction=calculate_direction_score(
        metrics.get("attack_angle"),
        metrics.get("bat_path_plane"),
        metrics.get("connection_quality"),
        standards=mechanics_standards,
      ),
      timing=calculate_timing_score(
        tempo,
        metrics.get("sequence_quality"),
        metrics.get("acceleration_pattern"),
        standards=mechanics_standards,
      ),
      efficiency=calculate_efficiency_score(
        metrics.get("hip_shoulder_separation"),
        metrics.get("connection_quality"),
        metrics.get("balance_score"),
        standards=mechanics_standards,
      ),
      bat_speed=metrics.get("bat_speed"),
      standards=mechanics_standards,
    )

    front_leg = compute_front_leg_stability(
      knee_angle=metrics.get("lead_knee_angle"),
      ankle_angle=metrics.get("lead_ankle_angle"),
      decel_rate=metrics.get("decel_rate"),
      standards=tables["front_leg"],
    )

    weight_transfer = compute_weight_transfer(
      vertical_movement=metrics.get("vertical_movement"),
      timing_peak=metrics.get("com_timing_peak"),
      back_foot_lift=metrics.get("back_foot_lift"),
      accel_peak=metrics.get("accel_peak"),
      accel_timing=metrics.get("accel_timing"),
      standards=tables["weight_transfer"],
    )

    phase_timing = score_phase_timing(load_ms, fire_ms, standards=tables["phase_timing"])
    sequence = _sequence(metrics)

    grade_metrics = dict(metrics)
    if tempo is not None:
      grade_metrics.setdefault("tempo_ratio", tempo)
    grades = grade_report_card(grade_metrics, level=level, tier=tier)

    assessments = [swing_mechanics, front_leg, weight_transfer]
    issues = _identify_issues(key_scores, assessments, sequence)
    strengths = _generate_strengths(key_scores, assessments, issues)
    recommendations = _generate_recommendations(assessments)

    logger.info(
      f"Swing analysis complete - mechanics: {swing_mechanics.overall_score}, "
      f"front leg: {front_leg.overall_score}, weight transfer: {weight_transfer.overall_score}, "
      f"issues: {len(issues)}"
    )

    return {
      "status": "success",
      "key_biomechanics": {name: score.to_dict() for name, score in key_scores.items()},
      "swing_mechanics": swing_mechanics.to_dict(),
      "front_leg_stability": front_leg.to_dict(),
      "weight_transfer": weight_transfer.to_dict(),
      "phase_timing": {name: score.to_dict() for name, score in phase_timing.items()},
      "kinematic_sequence": sequence,
      "grades": grades,
      "metrics": _generate_metrics(key_scores),
      "issues": issues,
      "strengths": strengths,
      "recommendations": recommendations,
    }

  except ValidationError as ve:
    logger.warning(f"Validation error during analysis: {ve}")
    return {
      "status": "error",
      "error_type": "validation",
      "message": str(ve)
    }

  except AnalysisError as ae:
    logger.error(f"Analysis error: {ae}")
    return {
      "status": "error",
      "error_type": "analysis",
      "message": str(ae)
    }

  except Exception as e:
    logger.critical(f"Unexpected error during swing analysis: {e}", exc_info=True)
    return {
      "status": "error",
      "error_type": "unknown",
      "message": f"Analysis failed: {str(e)}"
    }
