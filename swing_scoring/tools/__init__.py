"""Tools package for Swing Scoring.

Each module defines a single dict-in / dict-out handler for serverless and
HTTP callers.
"""

from .analyze_swing_metrics import analyze_swing_metrics
from .detect_phases_from_pose import detect_phases_from_pose
from .validate_phase_markers import validate_phase_markers

__all__ = [
  "analyze_swing_metrics",
  "validate_phase_markers",
  "detect_phases_from_pose",
]
