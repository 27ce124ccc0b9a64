"""
Pose-based phase detection tool.

Runs phase detection over per-frame pose landmarks, converts the detected
phases into timing markers, validates them against a ground-truth profile
and scores front leg stability and weight transfer from the tracked frames.
"""
from typing import Any, Mapping, Optional

from swing_scoring.logging_config import get_logger
from swing_scoring.exceptions import GroundTruthNotFoundError, ValidationError
from swing_scoring.config import settings
from swing_scoring.phase_detection import detect_swing_phases, markers_from_phases
from swing_scoring.phase_validation import validate_phase_detection
from swing_scoring.com_tracking import estimate_front_leg_inputs, estimate_weight_transfer_inputs, frames_from_pose
from swing_scoring.quality_engines import compute_front_leg_stability, compute_weight_transfer
from swing_scoring.biomechanics_standards import STANDARD_TABLES, get_ground_truth

# Initialize logger
logger = get_logger(__name__)


def detect_phases_from_pose(
  pose_frames: list,
  fps: Optional[float] = None,
  player_name: Optional[str] = None,
  standards: Optional[Mapping[str, Any]] = None,
) -> dict:
  """
  Detect swing phases and derive timing-based scores from pose landmarks.

  Args:
    pose_frames: One entry per frame: 33 MediaPipe landmarks of [x, y(, z)]
                 in normalized coordinates, or null for a dropped frame.
    fps: Capture frame rate; defaults to POSE_FPS.
    player_name: Ground-truth player for marker validation; defaults to
                 DEFAULT_GROUND_TRUTH_PLAYER.
    standards: Benchmark tables by name (defaults to the built-in tables).

  Returns:
    dict: {
      status: "success",
      detection: PhaseDetectionResult dict,
      markers: PhaseMarkers dict or None,
      validation: ValidationReport dict or None,
      front_leg_stability: QualityAssessment dict,
      weight_transfer: QualityAssessment dict,
    } or {status, error_type, message} on error
  """
  fps = fps or settings.pose_fps
  player_name = player_name or settings.default_ground_truth_player
  tables = standards or STANDARD_TABLES
  logger.info(f"Starting phase detection - fps: {fps}")

  try:
    if pose_frames is None or not isinstance(pose_frames, (list, tuple)):
      raise ValidationError("pose_frames must be a list of frames")
    logger.debug(f"Received {len(pose_frames)} frames")

    profile = get_ground_truth(player_name)
    detection = detect_swing_phases(pose_frames, fps, tables["phase_detection"])
    logger.debug(f"Detection quality: {detection.quality.score}, issues: {detection.quality.issues}")

    markers = markers_from_phases(detection, fps)
    validation = (
      validate_phase_detection(markers, profile, tables["phase_validation"]) if markers is not None else None
    )

    tracked = frames_from_pose(pose_frames, detection, fps) if detection.phases else []
    front_leg = compute_front_leg_stability(
      **estimate_front_leg_inputs(tracked, tables["front_leg"]),
      standards=tables["front_leg"],
    )
    weight_transfer = compute_weight_transfer(
      **estimate_weight_transfer_inputs(tracked, tables["weight_transfer"]),
      standards=tables["weight_transfer"],
    )

    logger.info(
      f"Phase detection complete - phases: {len(detection.phases)}, "
      f"ratio: {detection.load_to_fire_ratio:.2f}, quality: {detection.quality.score}",
      extra={"player_name": profile.name},
    )

    return {
      "status": "success",
      "detection": detection.to_dict(),
      "markers": markers.to_dict() if markers else None,
      "validation": validation.to_dict() if validation else None,
      "front_leg_stability": front_leg.to_dict(),
      "weight_transfer": weight_transfer.to_dict(),
    }

  except ValidationError as ve:
    logger.warning(f"Validation error during phase detection: {ve}")
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
    logger.critical(f"Unexpected error during phase detection: {e}", exc_info=True)
    return {
      "status": "error",
      "error_type": "unknown",
      "message": f"Phase detection failed: {str(e)}"
    }
