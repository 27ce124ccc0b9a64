"""
Tests for kinematic sequence analysis.
"""

import pytest

from swing_scoring.exceptions import ValidationError
from swing_scoring.kinematic_sequence import analyze_kinematic_sequence, check_sequence
from swing_scoring.models import SegmentTiming


def test_pelvis_before_shoulder_is_proper():
    result = check_sequence(pelvis_time=180, shoulder_time=120)

    assert result.pelvis_shoulder_gap == 60
    assert result.is_proximal_to_distal is True
    assert result.is_proper_sequence is True
    assert result.severity == "ok"
    assert result.violations == []


def test_shoulder_before_pelvis_is_critical():
    result = check_sequence(pelvis_time=120, shoulder_time=180)

    assert result.is_proper_sequence is False
    assert result.is_proximal_to_distal is False
    assert result.severity == "critical"
    assert result.pelvis_shoulder_gap == -60
    assert len(result.violations) == 1


def test_negative_times_read_as_magnitudes():
    positive = check_sequence(pelvis_time=180, shoulder_time=120).to_dict()
    negative = check_sequence(pelvis_time=-180, shoulder_time=-120).to_dict()

    assert positive == negative


def test_simultaneous_peaks_are_not_proper():
    result = check_sequence(pelvis_time=150, shoulder_time=150)

    assert result.is_proper_sequence is False
    assert result.is_proximal_to_distal is False


def test_estimated_segments_are_supplementary():
    # Hands "peaking" before the shoulder would be a violation if measured
    result = check_sequence(pelvis_time=180, shoulder_time=120, hands_time=200, hands_is_actual=False)

    assert result.is_proper_sequence is True
    assert result.judged_segments == ["pelvis", "shoulder"]
    assert result.supplementary_segments == ["hands"]
    assert result.shoulder_hands_gap == -80


def test_measured_hands_are_judged():
    result = check_sequence(pelvis_time=180, shoulder_time=120, hands_time=200, hands_is_actual=True)

    assert result.is_proper_sequence is False
    assert result.severity == "critical"
    assert "hands" in result.judged_segments


def test_full_sequence_gaps():
    result = analyze_kinematic_sequence([
        SegmentTiming("negative_move", 400),
        SegmentTiming("pelvis", 180),
        SegmentTiming("shoulder", 120),
        SegmentTiming("arm", 60),
        SegmentTiming("hands", 20),
    ])

    assert result.is_proper_sequence is True
    assert result.negative_move_pelvis_gap == 220
    assert result.shoulder_hands_gap == 100


def test_single_measured_segment_is_not_judged():
    result = check_sequence(pelvis_time=180, shoulder_time=None)

    assert result.is_proper_sequence is False
    assert result.severity == "N/A"
    assert result.pelvis_shoulder_gap is None
    assert result.is_proximal_to_distal is False


def test_unknown_segment_raises():
    with pytest.raises(ValidationError):
        analyze_kinematic_sequence([SegmentTiming("elbow", 100)])


def test_duplicate_segment_raises():
    with pytest.raises(ValidationError):
        analyze_kinematic_sequence([SegmentTiming("pelvis", 100), SegmentTiming("pelvis", 120)])
