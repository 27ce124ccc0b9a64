"""
Tests for phase marker validation against ground-truth hitters.
"""

import pytest

from swing_scoring.biomechanics_standards import GROUND_TRUTH_PLAYERS, get_ground_truth
from swing_scoring.exceptions import GroundTruthNotFoundError
from swing_scoring.models import PhaseMarkers
from swing_scoring.phase_validation import (
    EDGE_CASES,
    TEMPO_PLAUSIBILITY,
    check_load_duration,
    check_tempo_ratio,
    generate_test_report,
    run_edge_case_tests,
    run_full_test_suite,
    run_phase_detection_tests,
    score_results,
    validate_phase_detection,
)
from swing_scoring.biomechanics_standards import PHASE_VALIDATION_STANDARDS
from swing_scoring.component_scoring import compute_phase_durations


def _result(report, prefix):
    return next(r for r in report.results if r.test_name.startswith(prefix))


class TestFreemanExample:
    def test_short_load_fails_critically(self, freeman_markers):
        report = validate_phase_detection(freeman_markers, "Freddie Freeman")

        assert report.overall_pass is False
        load = _result(report, "Load Duration")
        assert load.passed is False
        assert load.severity == "critical"

    def test_tempo_miss_is_a_warning(self, freeman_markers):
        report = validate_phase_detection(freeman_markers, "Freddie Freeman")

        tempo = _result(report, "Tempo Ratio")
        assert tempo.passed is False
        assert tempo.severity == "warning"
        assert tempo.actual == "1.65:1"

    def test_missing_pelvis_peak_is_informational(self, freeman_markers):
        report = validate_phase_detection(freeman_markers, "Freddie Freeman")

        pelvis = _result(report, "FireStart to Pelvis Peak")
        assert pelvis.severity == "info"
        assert pelvis.actual == "N/A"

    def test_score(self, freeman_markers):
        report = validate_phase_detection(freeman_markers, "Freddie Freeman")

        # 6 of 9 graded checks pass, one critical and two warning failures
        assert report.score == 22
        assert len(report.critical_failures) == 1
        assert len(report.warning_failures) == 2
        assert report.durations.load_ms == 560.0

    def test_negative_markers_match_positive(self, freeman_markers):
        negative = PhaseMarkers(load_start=-900.0, fire_start=-340.0)

        assert (
            validate_phase_detection(negative, "Freddie Freeman").to_dict()
            == validate_phase_detection(freeman_markers, "Freddie Freeman").to_dict()
        )


def test_markers_inside_every_window_score_100(judge_markers):
    report = validate_phase_detection(judge_markers, get_ground_truth("Aaron Judge"))

    assert report.overall_pass is True
    assert report.score == 100
    assert all(r.passed for r in report.results)


def test_plausible_swing_off_profile_still_passes():
    report = validate_phase_detection(PhaseMarkers(1050.0, 360.0, pelvis_peak=200.0), "freddie freeman")

    assert report.player_name == "Freddie Freeman"
    assert report.overall_pass is True
    assert report.score == 80


def test_unknown_player_raises(freeman_markers):
    with pytest.raises(GroundTruthNotFoundError):
        validate_phase_detection(freeman_markers, "Babe Ruth")


def test_zero_fire_duration_does_not_raise():
    report = validate_phase_detection(PhaseMarkers(900.0, 0.0), "Freddie Freeman")

    assert report.overall_pass is False
    assert _result(report, "Tempo Ratio").actual == "undefined"
    assert _result(report, "Tempo Ratio").severity == "critical"


def test_degenerate_tempo_is_only_penalized_once():
    report = validate_phase_detection(PhaseMarkers(900.0, 0.0), "Freddie Freeman")
    plausibility = _result(report, TEMPO_PLAUSIBILITY)

    assert plausibility.severity == "info"
    assert plausibility.actual == "N/A"
    assert plausibility not in report.warning_failures
    assert _result(report, "Tempo Ratio") in report.critical_failures


def test_out_of_range_tempo_still_fails_plausibility():
    report = validate_phase_detection(PhaseMarkers(2550.0, 170.0), "Freddie Freeman")
    plausibility = _result(report, TEMPO_PLAUSIBILITY)

    assert plausibility.passed is False
    assert plausibility.severity == "warning"


def test_validation_is_idempotent(freeman_markers):
    first = validate_phase_detection(freeman_markers, "Freddie Freeman")
    second = validate_phase_detection(freeman_markers, "Freddie Freeman")

    assert first.to_dict() == second.to_dict()


def test_nan_marker_fails_without_raising():
    report = validate_phase_detection(PhaseMarkers(float("nan"), 350.0), "Freddie Freeman")

    assert report.overall_pass is False
    assert _result(report, "No Negative/Zero Durations").passed is False
    assert report.to_dict()["durations"]["load_ms"] is None


def test_load_duration_severity_bands():
    s = PHASE_VALIDATION_STANDARDS

    assert check_load_duration(700, s).severity == "warning"
    assert check_load_duration(700, s).passed is True
    assert check_load_duration(620, s).severity == "info"
    assert check_load_duration(2550, s).severity == "info"
    assert check_load_duration(2700, s).severity == "warning"
    assert check_load_duration(500, s).severity == "critical"


def test_tempo_check_uses_profile_range():
    tucker = get_ground_truth("Kyle Tucker")
    durations = compute_phase_durations(PhaseMarkers(2400.0, 220.0))

    assert check_tempo_ratio(durations, tucker).passed is True


def test_score_results_without_graded_checks():
    assert score_results([]) == 0


class TestEdgeCases:
    def test_every_edge_case_is_rejected(self):
        results = run_edge_case_tests()

        assert len(results) == len(EDGE_CASES) == 9
        assert all(r.passed for r in results), [r.to_dict() for r in results if not r.passed]

    def test_edge_case_severities(self):
        by_name = {r.test_name: r for r in run_edge_case_tests()}

        assert by_name["Edge Case: Missing Pelvis Peak Marker"].severity == "info"
        assert by_name["Edge Case: Extreme High Tempo Ratio (>12:1)"].severity == "warning"
        assert by_name["Edge Case: LoadStart Beyond Capture Window"].severity == "critical"
        assert by_name["Edge Case: FireStart After Pelvis Peak"].severity == "critical"

    def test_extreme_tempo_cases_name_the_plausibility_limits(self):
        s = PHASE_VALIDATION_STANDARDS
        names = {name: expectation for name, _, check, expectation in EDGE_CASES if check == TEMPO_PLAUSIBILITY}

        high = next(n for n in names if "High" in n)
        low = next(n for n in names if "Low" in n)
        assert f">{s.EXTREME_TEMPO_MAX:g}:1" in high
        assert f"> {s.EXTREME_TEMPO_MAX:g}:1" in names[high]
        assert f"<{s.EXTREME_TEMPO_MIN:g}:1" in low
        assert f"< {s.EXTREME_TEMPO_MIN:g}:1" in names[low]


class TestReports:
    def test_report_text(self, freeman_markers):
        text = generate_test_report([run_phase_detection_tests(freeman_markers)])

        assert "--- Freddie Freeman (FAIL) ---" in text
        assert "Accuracy Score: 22/100" in text
        assert "[FAIL] Load Duration" in text
        assert "[WARN] Tempo Ratio" in text
        assert "Passed: 0/1 (0.0%)" in text

    def test_full_suite(self, judge_markers, freeman_markers):
        text = run_full_test_suite({"Aaron Judge": judge_markers, "Freddie Freeman": freeman_markers})

        assert "Total Players Tested: 2" in text
        assert "=== EDGE CASE TESTS ===" in text
        assert text.count("Edge Case:") == 9

    def test_ground_truth_profiles_are_consistent(self):
        for profile in GROUND_TRUTH_PLAYERS:
            lo, hi = profile.tempo_range
            assert lo <= profile.expected_tempo <= hi
