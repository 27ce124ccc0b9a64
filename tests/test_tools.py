"""
Tests for the dict-in / dict-out tool handlers.
"""

import pytest

from swing_scoring.tools import (
    analyze_swing_metrics,
    detect_phases_from_pose,
    validate_phase_markers,
)
from swing_scoring.tools.validate_phase_markers import parse_markers
from swing_scoring.exceptions import ValidationError

ELITE_METRICS = {
    "attack_angle": 11,
    "x_factor": 25,
    "hip_shoulder_separation": 45,
    "lead_knee_angle": 152,
    "lead_ankle_angle": 12,
    "pelvis_rot_velocity": 950,
    "upper_torso_rot_velocity": 1000,
    "arm_rot_velocity": 1600,
    "bat_speed": 74,
    "bat_path_plane": 10,
    "connection_quality": 95,
    "tempo_ratio": 2.5,
    "sequence_quality": 95,
    "acceleration_pattern": 95,
    "balance_score": 95,
    "decel_rate": 11.5,
    "vertical_movement": 2.5,
    "com_timing_peak": 0.12,
    "back_foot_lift": 0.07,
    "accel_peak": 6.5,
    "accel_timing": 0.2,
    "load_duration_ms": 150,
    "fire_duration_ms": 50,
    "pelvis_peak_time_ms": 180,
    "shoulder_peak_time_ms": 120,
}


class TestAnalyzeSwingMetrics:
    def test_elite_swing(self):
        result = analyze_swing_metrics(ELITE_METRICS, level="mlb")

        assert result["status"] == "success"
        assert result["front_leg_stability"]["overall_status"] == "elite"
        assert result["weight_transfer"]["overall_status"] == "elite"
        assert result["swing_mechanics"]["overall_status"] == "elite"
        assert result["kinematic_sequence"]["is_proper_sequence"] is True
        assert result["phase_timing"]["tempo_ratio"]["value"] == 100.0
        assert result["issues"] == []
        assert result["recommendations"][0]["assessment_type"] == "maintenance"
        assert all(m["status"] == "good" for m in result["metrics"])

    def test_partial_metrics(self):
        result = analyze_swing_metrics({"attack_angle": 11})

        assert result["status"] == "success"
        assert result["key_biomechanics"]["attack_angle"]["value"] == 100.0
        assert result["key_biomechanics"]["bat_speed"]["status"] == "N/A"
        assert result["kinematic_sequence"] is None
        assert result["grades"]["overall"]["grade"]

    def test_problem_swing_reports_issues_by_priority(self):
        metrics = dict(ELITE_METRICS, lead_knee_angle=125, bat_speed=50,
                       pelvis_peak_time_ms=100, shoulder_peak_time_ms=150)
        result = analyze_swing_metrics(metrics)

        issue_types = [issue["issue_type"] for issue in result["issues"]]
        assert "Lead Knee Angle Outside Range" in issue_types
        assert "Kinematic Sequence Out of Order" in issue_types
        priorities = [r["priority"] for r in result["recommendations"]]
        assert priorities == sorted(priorities)

    def test_tempo_derived_from_durations(self):
        metrics = {"load_duration_ms": 150, "fire_duration_ms": 50}
        result = analyze_swing_metrics(metrics)

        assert result["status"] == "success"
        assert result["phase_timing"]["tempo_ratio"]["raw_value"] == 3.0

    def test_empty_metrics(self):
        result = analyze_swing_metrics({})

        assert result["status"] == "error"
        assert result["error_type"] == "validation"

    def test_non_dict_metrics(self):
        result = analyze_swing_metrics([1, 2, 3])

        assert result["error_type"] == "validation"

    def test_unrecognized_metrics(self):
        result = analyze_swing_metrics({"spin_rate": 2400})

        assert result["status"] == "error"
        assert result["error_type"] == "analysis"

    def test_wrong_type_metric(self):
        result = analyze_swing_metrics({"attack_angle": "steep"})

        assert result["error_type"] == "validation"

    def test_unknown_level(self):
        result = analyze_swing_metrics({"attack_angle": 11}, level="pro")

        assert result["error_type"] == "validation"


class TestValidatePhaseMarkers:
    def test_freeman_example(self):
        result = validate_phase_markers({"load_start": 900, "fire_start": 340})

        assert result["status"] == "success"
        assert result["player_name"] == "Freddie Freeman"
        assert result["overall_pass"] is False
        assert result["score"] == 22
        assert "PHASE DETECTION TEST SUITE REPORT" in result["report"]
        assert "edge_cases" not in result

    def test_edge_cases_on_request(self):
        result = validate_phase_markers(
            {"load_start": 1050, "fire_start": 350, "pelvis_peak": 200},
            player_name="Aaron Judge",
            include_edge_cases=True,
        )

        assert result["score"] == 100
        assert len(result["edge_cases"]) == 9
        assert all(case["passed"] for case in result["edge_cases"])

    def test_missing_marker(self):
        result = validate_phase_markers({"load_start": 900})

        assert result["status"] == "error"
        assert result["error_type"] == "validation"

    def test_unknown_player(self):
        result = validate_phase_markers({"load_start": 900, "fire_start": 340}, player_name="Babe Ruth")

        assert result["error_type"] == "not_found"

    def test_parse_markers(self):
        markers = parse_markers({"load_start": -900, "fire_start": -340, "pelvis_peak": None})

        assert markers.load_start == -900.0
        assert markers.pelvis_peak is None
        with pytest.raises(ValidationError):
            parse_markers({"load_start": "early", "fire_start": 340})


class TestDetectPhasesFromPose:
    def test_detects_and_scores(self, swing_frames):
        result = detect_phases_from_pose(swing_frames, fps=30)

        assert result["status"] == "success"
        assert len(result["detection"]["phases"]) == 6
        assert result["markers"]["load_start"] == pytest.approx(633.333, rel=1e-4)
        assert result["validation"]["player_name"] == "Freddie Freeman"
        assert result["front_leg_stability"]["assessment_type"] == "front_leg_stability"
        assert result["weight_transfer"]["assessment_type"] == "weight_transfer"

    def test_short_clip_has_no_markers(self, swing_frames):
        result = detect_phases_from_pose(swing_frames[:5], fps=30)

        assert result["status"] == "success"
        assert result["markers"] is None
        assert result["validation"] is None
        assert result["front_leg_stability"]["overall_status"] == "critical"

    def test_malformed_frames(self, swing_frames):
        swing_frames[0] = [[0.1]] * 33
        result = detect_phases_from_pose(swing_frames, fps=30)

        assert result["status"] == "error"
        assert result["error_type"] == "validation"

    def test_not_a_list(self):
        result = detect_phases_from_pose({"frames": []})

        assert result["error_type"] == "validation"

    def test_unknown_player(self, swing_frames):
        result = detect_phases_from_pose(swing_frames, player_name="Babe Ruth")

        assert result["error_type"] == "not_found"
