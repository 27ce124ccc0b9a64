"""Swing Scoring: baseball swing metrics scoring and phase validation.

Pure, synchronous functions; safe to call concurrently.
"""

from swing_scoring.component_scoring import (
    compute_phase_durations,
    score_component,
    score_deviation,
    score_key_biomechanics,
    score_phase_timing,
    tempo_ratio,
)
from swing_scoring.quality_engines import (
    calculate_direction_score,
    calculate_efficiency_score,
    calculate_timing_score,
    compute_front_leg_stability,
    compute_quality,
    compute_swing_mechanics_quality,
    compute_weight_transfer,
)
from swing_scoring.kinematic_sequence import analyze_kinematic_sequence, check_sequence
from swing_scoring.phase_detection import detect_swing_phases, markers_from_phases
from swing_scoring.phase_validation import (
    generate_test_report,
    run_edge_case_tests,
    run_full_test_suite,
    run_phase_detection_tests,
    validate_phase_detection,
)
from swing_scoring.biomechanics_standards import get_ground_truth
from swing_scoring.models import (
    ComponentScore,
    GroundTruthProfile,
    MetricSample,
    PhaseMarkers,
    QualityAssessment,
    ScoreRange,
    SegmentTiming,
    ValidationReport,
    ValidationResult,
)

__all__ = [
    "score_component",
    "score_deviation",
    "score_key_biomechanics",
    "score_phase_timing",
    "compute_phase_durations",
    "tempo_ratio",
    "compute_quality",
    "calculate_direction_score",
    "calculate_timing_score",
    "calculate_efficiency_score",
    "compute_swing_mechanics_quality",
    "compute_front_leg_stability",
    "compute_weight_transfer",
    "analyze_kinematic_sequence",
    "check_sequence",
    "detect_swing_phases",
    "markers_from_phases",
    "validate_phase_detection",
    "run_edge_case_tests",
    "run_phase_detection_tests",
    "run_full_test_suite",
    "generate_test_report",
    "get_ground_truth",
    "ComponentScore",
    "GroundTruthProfile",
    "MetricSample",
    "PhaseMarkers",
    "QualityAssessment",
    "ScoreRange",
    "SegmentTiming",
    "ValidationReport",
    "ValidationResult",
]
