"""
Letter grades for the 4B report card (Bat, Body, Ball, Brain).

Category percentages average whichever metrics are present; a category with
no metrics defaults to 75%. The subscription tier only decides which
categories feed the overall grade.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from swing_scoring.exceptions import ValidationError
from swing_scoring.component_scoring import coerce_metric
from swing_scoring.biomechanics_standards import DEFAULT_LEVEL, LEVEL_BENCHMARKS, LevelBenchmark

LETTER_GRADES = (
  (95, "A+"),
  (90, "A"),
  (87, "A-"),
  (83, "B+"),
  (80, "B"),
  (77, "B-"),
  (73, "C+"),
  (70, "C"),
  (67, "C-"),
  (60, "D"),
)

DEFAULT_CATEGORY_PERCENTAGE = 75.0

ATTACK_ANGLE_IDEAL = 12.0
ATTACK_ANGLE_PENALTY = 10.0  # points per degree off ideal
TEMPO_IDEAL = 1.75
TEMPO_PENALTY = 40.0
LAUNCH_ANGLE_WINDOW = (10.0, 30.0)
LAUNCH_ANGLE_IN_WINDOW = 90.0
LAUNCH_ANGLE_PENALTY = 5.0
REACTION_TIME_BENCHMARK = LevelBenchmark(0.3, 0.5, 0.7, "B")  # seconds, lower is better

TIER_CATEGORIES = {
  "free": ("bat", "body"),
  "challenge": ("bat", "body", "ball"),
  "diy": ("ball", "bat", "body", "brain"),
  "elite": ("ball", "bat", "body", "brain"),
}


@dataclass(frozen=True)
class CategoryGrade:
  grade: str
  percentage: float

  def to_dict(self) -> Dict[str, Any]:
    return {"grade": self.grade, "percentage": self.percentage}


def calculate_grade(percentage: float) -> str:
  for cutoff, grade in LETTER_GRADES:
    if percentage >= cutoff:
      return grade
  return "F"


def calculate_metric_percentage(value: float, benchmark: LevelBenchmark, higher_is_better: bool = True) -> float:
  """Position of value between benchmark min and max, as 0-100."""
  span = benchmark.max - benchmark.min
  if span == 0:
    return 50.0
  if higher_is_better:
    normalized = (value - benchmark.min) / span * 100
  else:
    normalized = (benchmark.max - value) / span * 100
  return max(0.0, min(100.0, normalized))


def get_benchmarks_for_level(level: Optional[str]) -> Dict[str, LevelBenchmark]:
  """Benchmarks for a playing level (case-insensitive); unknown levels get high school."""
  if level:
    for name, table in LEVEL_BENCHMARKS.items():
      if name.lower() == level.lower():
        return table
  return LEVEL_BENCHMARKS[DEFAULT_LEVEL]


def _metric(metrics: Mapping[str, Any], name: str) -> Optional[float]:
  return coerce_metric(name, metrics.get(name))


def _category(scores: List[float]) -> CategoryGrade:
  percentage = sum(scores) / len(scores) if scores else DEFAULT_CATEGORY_PERCENTAGE
  return CategoryGrade(grade=calculate_grade(percentage), percentage=percentage)


def calculate_bat_grade(metrics: Mapping[str, Any], level: Optional[str] = None) -> CategoryGrade:
  benchmarks = get_benchmarks_for_level(level)
  scores: List[float] = []

  bat_speed = _metric(metrics, "bat_speed")
  if bat_speed is not None:
    scores.append(calculate_metric_percentage(bat_speed, benchmarks["bat_speed"]))

  attack_angle = _metric(metrics, "attack_angle")
  if attack_angle is not None:
    scores.append(max(0.0, 100 - abs(attack_angle - ATTACK_ANGLE_IDEAL) * ATTACK_ANGLE_PENALTY))

  time_in_zone = _metric(metrics, "time_in_zone")
  if time_in_zone is not None:
    scores.append(calculate_metric_percentage(time_in_zone, benchmarks["time_in_zone"]))

  return _category(scores)


def calculate_body_grade(metrics: Mapping[str, Any], level: Optional[str] = None) -> CategoryGrade:
  benchmarks = get_benchmarks_for_level(level)
  scores: List[float] = []

  sequence_efficiency = _metric(metrics, "sequence_efficiency")
  if sequence_efficiency is not None:
    scores.append(sequence_efficiency)

  tempo = _metric(metrics, "tempo_ratio")
  if tempo is not None:
    scores.append(max(0.0, 100 - abs(tempo - TEMPO_IDEAL) * TEMPO_PENALTY))

  pelvis = _metric(metrics, "pelvis_rot_velocity")
  if pelvis is not None:
    scores.append(calculate_metric_percentage(pelvis, benchmarks["pelvis_velocity"]))

  return _category(scores)


def calculate_ball_grade(metrics: Mapping[str, Any], level: Optional[str] = None) -> CategoryGrade:
  benchmarks = get_benchmarks_for_level(level)
  scores: List[float] = []

  exit_velocity = _metric(metrics, "exit_velocity")
  if exit_velocity is not None:
    scores.append(calculate_metric_percentage(exit_velocity, benchmarks["exit_velocity"]))

  launch_angle = _metric(metrics, "launch_angle")
  if launch_angle is not None:
    lo, hi = LAUNCH_ANGLE_WINDOW
    if lo <= launch_angle <= hi:
      scores.append(LAUNCH_ANGLE_IN_WINDOW)
    else:
      deviation = lo - launch_angle if launch_angle < lo else launch_angle - hi
      scores.append(max(0.0, LAUNCH_ANGLE_IN_WINDOW - deviation * LAUNCH_ANGLE_PENALTY))

  hard_hit = _metric(metrics, "hard_hit_percentage")
  if hard_hit is not None:
    scores.append(hard_hit)

  return _category(scores)


def calculate_brain_grade(metrics: Mapping[str, Any], level: Optional[str] = None) -> CategoryGrade:
  scores: List[float] = []

  reaction_time = _metric(metrics, "reaction_time")
  if reaction_time is not None:
    scores.append(calculate_metric_percentage(reaction_time, REACTION_TIME_BENCHMARK, higher_is_better=False))

  decision_accuracy = _metric(metrics, "decision_accuracy")
  if decision_accuracy is not None:
    scores.append(decision_accuracy)

  return _category(scores)


def calculate_overall_grade(
  ball: CategoryGrade,
  bat: CategoryGrade,
  body: CategoryGrade,
  brain: CategoryGrade,
  tier: str = "elite",
) -> CategoryGrade:
  """
  Raises:
    ValidationError: On an unknown tier.
  """
  if tier not in TIER_CATEGORIES:
    raise ValidationError(f"Unknown tier '{tier}'. Expected one of: {', '.join(TIER_CATEGORIES)}")
  by_name = {"ball": ball, "bat": bat, "body": body, "brain": brain}
  percentages = [by_name[name].percentage for name in TIER_CATEGORIES[tier]]
  percentage = sum(percentages) / len(percentages)
  return CategoryGrade(grade=calculate_grade(percentage), percentage=percentage)


def grade_report_card(metrics: Mapping[str, Any], level: Optional[str] = None, tier: str = "elite") -> Dict[str, Any]:
  """All four category grades plus the overall grade as plain dicts."""
  ball = calculate_ball_grade(metrics, level)
  bat = calculate_bat_grade(metrics, level)
  body = calculate_body_grade(metrics, level)
  brain = calculate_brain_grade(metrics, level)
  overall = calculate_overall_grade(ball, bat, body, brain, tier)
  return {
    "ball": ball.to_dict(),
    "bat": bat.to_dict(),
    "body": body.to_dict(),
    "brain": brain.to_dict(),
    "overall": overall.to_dict(),
  }
