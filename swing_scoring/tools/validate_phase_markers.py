"""
Phase marker validation tool.

Validates detected timing markers against a ground-truth hitter profile and,
on request, appends the edge-case battery and a plain-text report.
"""
from typing import Any, Mapping, Optional

from swing_scoring.logging_config import get_logger
from swing_scoring.exceptions import GroundTruthNotFoundError, ValidationError
from swing_scoring.config import settings
from swing_scoring.models import PhaseMarkers
from swing_scoring.component_scoring import coerce_metric
from swing_scoring.phase_validation import generate_test_report, run_edge_case_tests, validate_phase_detection
from swing_scoring.biomechanics_standards import STANDARD_TABLES, get_ground_truth

# Initialize logger
logger = get_logger(__name__)


def parse_markers(markers: Mapping[str, Any]) -> PhaseMarkers:
  """
  Build PhaseMarkers from a plain record.

  Raises:
    ValidationError: If load_start or fire_start is absent or not a number.
  """
  if not isinstance(markers, Mapping):
    raise ValidationError(f"markers must be an object, got {type(markers).__name__}")

  for required in ("load_start", "fire_start"):
    if required not in markers or markers[required] is None:
      raise ValidationError(f"Missing required marker: {required}")
    # Non-finite values are kept; the validator reports them as critical failures
    coerce_metric(required, markers[required])

  contact = markers.get("contact", 0.0)
  coerce_metric("contact", contact)
  pelvis_peak = markers.get("pelvis_peak")
  coerce_metric("pelvis_peak", pelvis_peak)

  return PhaseMarkers(
    load_start=float(markers["load_start"]),
    fire_start=float(markers["fire_start"]),
    contact=float(contact if contact is not None else 0.0),
    pelvis_peak=float(pelvis_peak) if pelvis_peak is not None else None,
  )


def validate_phase_markers(
  markers: dict,
  player_name: Optional[str] = None,
  include_edge_cases: bool = False,
  standards: Optional[Mapping[str, Any]] = None,
) -> dict:
  """
  Validate phase timing markers against a ground-truth profile.

  Args:
    markers: {load_start, fire_start, contact?, pelvis_peak?} in ms before
             contact. Negative values are read as magnitudes.
    player_name: Ground-truth player; defaults to DEFAULT_GROUND_TRUTH_PLAYER.
    include_edge_cases: Also run the edge-case battery.
    standards: Benchmark tables by name (defaults to the built-in tables).

  Returns:
    dict: {
      status: "success",
      player_name, overall_pass, score, results, durations,
      report: str,
      edge_cases: [ValidationResult dict, ...] (when requested),
    } or {status, error_type, message} on error
  """
  player_name = player_name or settings.default_ground_truth_player
  logger.info(f"Validating phase markers against {player_name}", extra={"player_name": player_name})
  tables = standards or STANDARD_TABLES

  try:
    phase_markers = parse_markers(markers)
    profile = get_ground_truth(player_name)
    report = validate_phase_detection(phase_markers, profile, tables["phase_validation"])

    response = {"status": "success", **report.to_dict(), "report": generate_test_report([report])}
    if include_edge_cases:
      response["edge_cases"] = [r.to_dict() for r in run_edge_case_tests(tables["phase_validation"])]

    logger.info(
      f"Phase validation complete - player: {profile.name}, pass: {report.overall_pass}, "
      f"score: {report.score}, critical failures: {len(report.critical_failures)}",
      extra={"player_name": profile.name},
    )
    return response

  except ValidationError as ve:
    logger.warning(f"Validation error in phase markers: {ve}")
    return {
      "status": "error",
      "error_type": "validation",
      "message": str(ve)
    }

  except GroundTruthNotFoundError as ge:
    logger.warning(f"Unknown ground-truth player: {ge}")
    return {
      "status": "error",
      "error_type": "not_found",
      "message": str(ge)
    }

  except Exception as e:
    logger.critical(f"Unexpected error during phase validation: {e}", exc_info=True)
    return {
      "status": "error",
      "error_type": "unknown",
      "message": f"Validation failed: {str(e)}"
    }
