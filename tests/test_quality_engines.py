"""
Tests for the composite quality engines.
"""

import dataclasses

import pytest

from swing_scoring.biomechanics_standards import DRILLS, SWING_MECHANICS_STANDARDS
from swing_scoring.component_scoring import score_component
from swing_scoring.exceptions import ValidationError
from swing_scoring.models import ComponentScore, ScoreRange
from swing_scoring.quality_engines import (
    calculate_direction_score,
    calculate_efficiency_score,
    calculate_timing_score,
    compute_front_leg_stability,
    compute_quality,
    compute_swing_mechanics_quality,
    compute_weight_transfer,
    js_round,
    predict_bat_speed_range,
    score_acceleration,
    score_bat_angle,
    score_separation_band,
    score_tempo_band,
)


def _component(name, value, status="optimal"):
    return ComponentScore(name=name, value=value, status=status, raw_value=value)


class TestComputeQuality:
    def test_weighted_sum(self):
        result = compute_quality(
            {"a": _component("a", 100.0), "b": _component("b", 50.0)},
            {"a": 0.6, "b": 0.4},
        )

        assert result.overall_score == 80.0
        assert result.overall_status == "good"
        assert result.assessment_type == "custom"

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValidationError):
            compute_quality({"a": _component("a", 100.0)}, {"a": 0.9})

    def test_weights_must_match_components(self):
        with pytest.raises(ValidationError):
            compute_quality({"a": _component("a", 100.0)}, {"a": 0.5, "b": 0.5})

    def test_five_tier_thresholds(self):
        def status(score):
            return compute_quality({"a": _component("a", score)}, {"a": 1.0}).overall_status

        assert status(90) == "elite"
        assert status(89.9) == "good"
        assert status(80) == "good"
        assert status(65) == "developing"
        assert status(50) == "beginner"
        assert status(49.9) == "critical"

    def test_drill_comes_from_weakest_assessed_component(self):
        components = {
            "a": _component("a", 40.0),
            "b": _component("b", 0.0, status="N/A"),
            "c": _component("c", 90.0),
        }
        result = compute_quality(
            components,
            {"a": 0.4, "b": 0.3, "c": 0.3},
            drills={"a": "drill a", "b": "drill b", "c": "drill c"},
        )

        assert result.recommended_drill == "drill a"

    def test_no_drill_at_or_above_90(self):
        result = compute_quality(
            {"a": _component("a", 90.0)}, {"a": 1.0}, drills={"a": "drill a"}
        )
        assert result.recommended_drill is None

    def test_score_is_deterministic(self):
        components = {"a": _component("a", 73.3), "b": _component("b", 61.7)}
        weights = {"a": 0.35, "b": 0.65}

        first = compute_quality(components, weights).to_dict()
        second = compute_quality(components, weights).to_dict()
        assert first == second


def test_js_round_rounds_half_up():
    assert js_round(72.5) == 73
    assert js_round(83.5) == 84
    assert js_round(-2.5) == -2


class TestSwingMechanics:
    def test_mixed_sub_scores(self):
        result = compute_swing_mechanics_quality(95, 80, 50)

        assert result.assessment_type == "swing_mechanics"
        assert result.overall_score == 78.5
        assert result.overall_status == "good"
        assert result.component_scores["direction"].status == "optimal"
        assert result.component_scores["timing"].status == "developing"
        assert result.component_scores["efficiency"].status == "needs-work"
        assert result.recommended_drill == DRILLS["swing_mechanics"]["efficiency"]
        assert result.predicted_output == "70-78 mph"
        assert "5-10 mph harder" in result.feedback["bottomLine"]

    def test_measured_bat_speed_widens_prediction(self):
        result = compute_swing_mechanics_quality(95, 95, 95, bat_speed=72)

        assert result.overall_status == "elite"
        assert result.predicted_output == "70-75 mph"
        assert result.recommended_drill is None

    def test_missing_sub_scores_are_not_available(self):
        result = compute_swing_mechanics_quality(None, None, None)

        assert result.overall_score == 0.0
        assert result.overall_status == "needs-work"
        assert all(c.status == "N/A" for c in result.component_scores.values())
        assert result.predicted_output == "65-72 mph"

    def test_mechanics_uses_its_own_thresholds(self):
        # 76 is "good" on the 90/75/60 scale but only "developing" on the 5-tier scale
        assert compute_swing_mechanics_quality(76, 76, 76).overall_status == "good"
        assert compute_front_leg_stability(138, 8, 6).overall_status != "good"

    def test_bat_angle_score(self):
        assert score_bat_angle(10) == 100.0
        assert score_bat_angle(0) == 75.0
        assert score_bat_angle(20) == 85.0
        assert score_bat_angle(-4) == 30.0
        assert score_bat_angle(30) == 45.0

    def test_tempo_band_score(self):
        assert score_tempo_band(2.5) == 100.0
        assert score_tempo_band(2.1) == pytest.approx(96.0)
        assert score_tempo_band(1.0) == pytest.approx(35.0)

    def test_separation_band_score(self):
        assert score_separation_band(45) == 100.0
        assert score_separation_band(37) == 88.0
        assert score_separation_band(20) == 40.0

    def test_direction_defaults_attack_angle(self):
        assert calculate_direction_score() == 40.0
        assert calculate_direction_score(10, 10, 100) == 100.0

    def test_timing_and_efficiency_sub_scores(self):
        assert calculate_timing_score(2.5, 100, 100) == 100.0
        assert calculate_timing_score(None, 100, None) == 35.0
        assert calculate_efficiency_score(45, 100, 100) == 100.0
        assert calculate_efficiency_score() == 0.0

    def test_sub_weights_must_sum_to_one(self):
        skewed = dataclasses.replace(SWING_MECHANICS_STANDARDS, ATTACK_ANGLE_WEIGHT=0.9)

        with pytest.raises(ValidationError):
            calculate_direction_score(10, 0, 0, standards=skewed)
        assert calculate_direction_score(10, 0, 0) == 40.0

    def test_predict_bat_speed_bands(self):
        assert predict_bat_speed_range(95) == "75-80 mph"
        assert predict_bat_speed_range(60) == "68-75 mph"
        assert predict_bat_speed_range(10) == "65-72 mph"


class TestFrontLegStability:
    def test_elite_front_leg(self):
        result = compute_front_leg_stability(knee_angle=152, ankle_angle=12, decel_rate=11.5)

        assert result.assessment_type == "front_leg_stability"
        assert result.overall_score == 100
        assert result.overall_status == "elite"
        assert result.recommended_drill is None
        assert all(c.value == 100.0 for c in result.component_scores.values())
        assert "solid" in result.feedback["bottomLine"]

    def test_soft_knee(self):
        result = compute_front_leg_stability(knee_angle=138, ankle_angle=12, decel_rate=9)

        assert result.component_scores["knee"].value == 70.0
        assert result.component_scores["deceleration"].value == 85.0
        assert result.overall_score == 84
        assert result.overall_status == "good"
        assert result.recommended_drill == DRILLS["front_leg_stability"]["knee"]
        assert "too soft" in result.feedback["bottomLine"]

    def test_deceleration_boundary_is_exclusive_at_elite(self):
        assert compute_front_leg_stability(decel_rate=10).component_scores["deceleration"].value == 85.0
        assert compute_front_leg_stability(decel_rate=10.01).component_scores["deceleration"].value == 100.0

    def test_no_data(self):
        result = compute_front_leg_stability()

        assert result.overall_score == 0
        assert result.overall_status == "critical"
        assert all(not c.is_assessed for c in result.component_scores.values())
        assert "No front leg data" in result.feedback["bottomLine"]


class TestWeightTransfer:
    def test_elite_weight_transfer(self):
        result = compute_weight_transfer(
            vertical_movement=2.5, timing_peak=0.12, back_foot_lift=0.07, accel_peak=6.5, accel_timing=0.2
        )

        assert result.assessment_type == "weight_transfer"
        assert result.overall_score == 100
        assert result.overall_status == "elite"
        assert result.recommended_drill is None

    def test_jumping_swing(self):
        result = compute_weight_transfer(vertical_movement=6, timing_peak=0.12, back_foot_lift=0.07)

        assert result.component_scores["vertical"].value == 50.0
        assert result.component_scores["acceleration"].status == "N/A"
        assert result.overall_score == 73
        assert result.overall_status == "developing"
        assert "jumping" in result.feedback["bottomLine"]
        assert result.recommended_drill == DRILLS["weight_transfer"]["vertical"]

    def test_acceleration_timing_falls_back_to_com_timing(self):
        result = compute_weight_transfer(timing_peak=0.2, accel_peak=6.5)

        assert result.component_scores["acceleration"].value == 100.0

    def test_acceleration_windows(self):
        assert score_acceleration(6.5, 0.2)[0] == 100
        assert score_acceleration(9.0, 0.13)[0] == 85
        # The good band's early window is half-open at 0.15s
        assert score_acceleration(9.0, 0.15)[0] == 25
        assert score_acceleration(13.0, 0.5)[0] == 50
        assert score_acceleration(20.0, 0.2)[0] == 25


def test_engines_accept_custom_component_scores():
    custom = ScoreRange(optimal=(0.0, 1.0), developing=(-1.0, 2.0))
    score = score_component("custom", 0.5, custom)

    result = compute_quality({"custom": score}, {"custom": 1.0}, assessment_type="custom")
    assert result.overall_score == 100.0
