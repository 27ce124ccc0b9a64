"""
Tests for single-metric scorers and phase timing helpers.
"""

import math

import pytest

from swing_scoring.biomechanics_standards import KEY_BIOMECHANICS_RANGES
from swing_scoring.component_scoring import (
    coerce_metric,
    compute_phase_durations,
    score_component,
    score_deviation,
    score_key_biomechanics,
    score_phase_timing,
    tempo_ratio,
)
from swing_scoring.exceptions import ConfigurationError, ValidationError
from swing_scoring.models import MetricSample, PhaseMarkers, ScoreRange

ATTACK = KEY_BIOMECHANICS_RANGES["attack_angle"]
BAT_SPEED = KEY_BIOMECHANICS_RANGES["bat_speed"]


def test_attack_angle_inside_optimal_scores_100():
    score = score_component("attack_angle", 11, ATTACK)

    assert score.value == 100.0
    assert score.status == "optimal"
    assert score.raw_value == 11.0
    assert score.unit == "°"


@pytest.mark.parametrize("value", [None, float("nan"), float("inf"), -math.inf])
def test_missing_or_non_finite_value_is_not_available(value):
    score = score_component("attack_angle", value, ATTACK)

    assert score.value == 0.0
    assert score.status == "N/A"
    assert score.raw_value is None
    assert not score.is_assessed


@pytest.mark.parametrize("value", ["11", [11], True, {"x": 1}])
def test_non_numeric_value_raises(value):
    with pytest.raises(ValidationError):
        score_component("attack_angle", value, ATTACK)


def test_developing_band_interpolates_from_89_to_60():
    # 8-15 optimal, 5-8 developing: 6.5 is halfway across the band
    score = score_component("attack_angle", 6.5, ATTACK)

    assert score.value == 74.5
    assert score.status == "developing"
    assert score_component("attack_angle", 5.0, ATTACK).value == 60.0


def test_beyond_developing_band_falls_off_from_59():
    # No developing band above 15, falloff is the optimal width (7)
    assert score_component("attack_angle", 20, ATTACK).value == 16.9
    assert score_component("attack_angle", 3, ATTACK).value == 42.1
    assert score_component("attack_angle", 40, ATTACK).value == 0.0
    assert score_component("attack_angle", 20, ATTACK).status == "needs-work"


def test_two_sided_score_never_increases_moving_away_from_optimal():
    values = [15, 16, 18, 20, 23, 30]
    scores = [score_component("attack_angle", v, ATTACK).value for v in values]
    assert scores == sorted(scores, reverse=True)

    values = [8, 7, 6, 5, 4, 2, 0]
    scores = [score_component("attack_angle", v, ATTACK).value for v in values]
    assert scores == sorted(scores, reverse=True)


def test_one_sided_scores_are_linear_and_capped():
    assert score_component("bat_speed", 70, BAT_SPEED).value == 100.0
    assert score_component("bat_speed", 85, BAT_SPEED).value == 100.0
    assert score_component("bat_speed", 85, BAT_SPEED).status == "optimal"

    developing = score_component("bat_speed", 65, BAT_SPEED)
    assert developing.value == 80.0
    assert developing.status == "developing"

    assert score_component("bat_speed", 45, BAT_SPEED).value == 0.0
    assert score_component("bat_speed", 30, BAT_SPEED).value == 0.0
    assert score_component("bat_speed", 55, BAT_SPEED).status == "needs-work"


def test_scores_stay_within_bounds():
    for name, score_range in KEY_BIOMECHANICS_RANGES.items():
        for value in (-1e6, -100, 0, 10, 100, 1000, 1e6):
            score = score_component(name, value, score_range)
            assert 0.0 <= score.value <= 100.0


def test_coerce_metric():
    assert coerce_metric("x", 3) == 3.0
    assert coerce_metric("x", None) is None
    assert coerce_metric("x", float("nan")) is None
    with pytest.raises(ValidationError):
        coerce_metric("x", False)


def test_score_key_biomechanics_marks_absent_metrics_not_available():
    scores = score_key_biomechanics({"attack_angle": 11})

    assert set(scores) == set(KEY_BIOMECHANICS_RANGES)
    assert scores["attack_angle"].value == 100.0
    assert scores["x_factor"].status == "N/A"


def test_reboot_correction_scales_rotational_velocity():
    raw = score_key_biomechanics({"pelvis_rot_velocity": 450})
    corrected = score_key_biomechanics({"pelvis_rot_velocity": 450}, corrected=True)

    assert raw["pelvis_rot_velocity"].status == "needs-work"
    assert corrected["pelvis_rot_velocity"].value == 100.0
    assert corrected["pelvis_rot_velocity"].raw_value == 900.0


class TestMetricSample:
    def test_score_component_accepts_a_sample(self):
        score = score_component("attack_angle", MetricSample("attack_angle", 11.0, "°"), ATTACK)

        assert score.value == 100.0
        assert score.raw_value == 11.0

    @pytest.mark.parametrize("value", [None, float("nan"), math.inf])
    def test_unavailable_sample_is_not_available(self, value):
        sample = MetricSample("bat_speed", value)

        assert sample.is_available is False
        assert score_component("bat_speed", sample, BAT_SPEED).status == "N/A"

    def test_sample_with_text_value_raises(self):
        with pytest.raises(ValidationError):
            coerce_metric("bat_speed", MetricSample("bat_speed", "fast"))

    def test_key_biomechanics_from_a_list_of_samples(self):
        scores = score_key_biomechanics([
            MetricSample("bat_speed", 72.0, "mph"),
            MetricSample("attack_angle", None),
        ])

        assert scores["bat_speed"].value == 100.0
        assert scores["attack_angle"].status == "N/A"
        assert scores["x_factor"].status == "N/A"

    def test_key_biomechanics_from_a_mapping_of_samples(self):
        scores = score_key_biomechanics(
            {"pelvis_rot_velocity": MetricSample("pelvis_rot_velocity", 450.0)}, corrected=True
        )

        assert scores["pelvis_rot_velocity"].raw_value == 900.0


def test_invalid_score_range_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ScoreRange(optimal=(10.0, 5.0), developing=(0.0, 20.0))
    with pytest.raises(ConfigurationError):
        ScoreRange(optimal=(10.0, 20.0), developing=(30.0, 40.0))
    with pytest.raises(ConfigurationError):
        ScoreRange(optimal=(100.0, math.inf), developing=(80.0, math.inf), one_sided=True)


class TestPhaseTiming:
    def test_tempo_ratio(self):
        assert tempo_ratio(900, 300) == 3.0
        assert tempo_ratio(900, 0) == 0.0
        assert tempo_ratio(900, -10) == 0.0
        assert tempo_ratio(None, 300) == 0.0
        assert tempo_ratio(float("nan"), 300) == 0.0

    def test_durations_ignore_marker_sign(self):
        positive = compute_phase_durations(PhaseMarkers(900.0, 340.0))
        negative = compute_phase_durations(PhaseMarkers(-900.0, -340.0))

        assert positive == negative
        assert positive.load_ms == 560.0
        assert positive.fire_ms == 340.0
        assert positive.tempo_ratio == pytest.approx(560 / 340)

    def test_out_of_order_markers_give_negative_duration(self):
        durations = compute_phase_durations(PhaseMarkers(300.0, 340.0))

        assert durations.load_ms == -40.0
        assert durations.fire_ms == 340.0

    def test_deviation_score(self):
        assert score_deviation("tempo_ratio", 3.0, 3.0).value == 100.0
        half = score_deviation("tempo_ratio", 1.5, 3.0)
        assert half.value == 50.0
        assert half.status == "needs-work"
        assert score_deviation("tempo_ratio", 9.0, 3.0).value == 0.0
        assert score_deviation("tempo_ratio", 1.0, 0.0).value == 0.0
        assert score_deviation("tempo_ratio", 2.8, 3.0).status == "optimal"

    def test_elite_phase_timing(self):
        scores = score_phase_timing(150, 50)

        assert scores["tempo_ratio"].value == 100.0
        assert scores["load_duration"].value == 100.0
        assert scores["fire_duration"].value == 100.0

    def test_phase_timing_with_missing_duration(self):
        scores = score_phase_timing(None, 50)

        assert scores["tempo_ratio"].status == "N/A"
        assert scores["load_duration"].status == "N/A"
        assert scores["fire_duration"].value == 100.0


ONE_SIDED = {name: r for name, r in KEY_BIOMECHANICS_RANGES.items() if r.one_sided}
TWO_SIDED = {name: r for name, r in KEY_BIOMECHANICS_RANGES.items() if not r.one_sided}


class TestScoringProperties:
    @pytest.mark.parametrize(
        "target, deviation",
        [(2.5, 0.5), (2.5, 1.25), (1.75, 0.25), (4.0, 3.0), (3.0, 5.0), (100.0, 12.5)],
    )
    def test_deviation_score_is_symmetric(self, target, deviation):
        below = score_deviation("tempo_ratio", target - deviation, target)
        above = score_deviation("tempo_ratio", target + deviation, target)

        assert below.value == above.value
        assert below.status == above.status

    @pytest.mark.parametrize("name", sorted(ONE_SIDED))
    def test_one_sided_score_never_decreases(self, name):
        score_range = ONE_SIDED[name]
        start = score_range.floor - 50
        stop = score_range.optimal[0] + 200
        step = (stop - start) / 100
        values = [start + i * step for i in range(101)]

        scores = [score_component(name, v, score_range).value for v in values]

        assert scores == sorted(scores)
        assert scores[-1] == 100.0

    @pytest.mark.parametrize("name", sorted(TWO_SIDED))
    def test_two_sided_score_never_increases_away_from_optimal(self, name):
        score_range = TWO_SIDED[name]
        opt_lo, opt_hi = score_range.optimal
        upward = [opt_hi + i * 0.5 for i in range(121)]
        downward = [opt_lo - i * 0.5 for i in range(121)]

        for values in (upward, downward):
            scores = [score_component(name, v, score_range).value for v in values]
            assert scores[0] == 100.0
            assert scores == sorted(scores, reverse=True)

    def test_key_biomechanics_is_idempotent(self):
        metrics = {"attack_angle": 6.5, "bat_speed": 67, "lead_knee_angle": 171, "x_factor": None}

        first = {k: v.to_dict() for k, v in score_key_biomechanics(metrics, corrected=True).items()}
        second = {k: v.to_dict() for k, v in score_key_biomechanics(metrics, corrected=True).items()}

        assert first == second
