"""
Data records for swing scoring.

All records are frozen dataclasses created fresh per analysis request. Each
exposes ``to_dict()`` returning plain JSON-ready values so callers can persist
outputs verbatim.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from swing_scoring.exceptions import ConfigurationError


# Component status values
STATUS_OPTIMAL = "optimal"
STATUS_DEVELOPING = "developing"
STATUS_NEEDS_WORK = "needs-work"
STATUS_NOT_AVAILABLE = "N/A"

# Validation severities
SEVERITY_CRITICAL = "critical"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"


def is_number(value: Any) -> bool:
    """True for a finite int/float (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _json_number(value: Optional[float]) -> Optional[float]:
    """Replace non-finite floats with None so the output stays valid JSON."""
    if value is None:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class MetricSample:
    """A named measurement; ``value`` is None when the source lacked it."""

    name: str
    value: Optional[float] = None
    unit: str = ""

    @property
    def is_available(self) -> bool:
        return is_number(self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": _json_number(self.value), "unit": self.unit}


@dataclass(frozen=True)
class ScoreRange:
    """
    Benchmark ranges for one metric.

    Two-sided ranges score 100 inside ``optimal`` and decay with distance.
    ``developing`` must surround or adjoin ``optimal``.

    One-sided ranges ("more is better") use ``optimal[0]`` as the elite
    threshold, ``developing[0]`` as the developing threshold and ``floor`` as
    the value scoring 0. Upper bounds are infinite.
    """

    optimal: Tuple[float, float]
    developing: Tuple[float, float]
    one_sided: bool = False
    floor: Optional[float] = None
    falloff: Optional[float] = None
    unit: str = ""

    def __post_init__(self):
        opt_lo, opt_hi = self.optimal
        dev_lo, dev_hi = self.developing
        if opt_lo > opt_hi or dev_lo > dev_hi:
            raise ConfigurationError(f"Inverted range bounds: {self.optimal} / {self.developing}")

        if self.one_sided:
            if self.floor is None:
                raise ConfigurationError("One-sided ranges require a floor value")
            if not self.floor < dev_lo <= opt_lo:
                raise ConfigurationError(
                    f"One-sided range must satisfy floor < developing <= optimal, "
                    f"got floor={self.floor}, developing={dev_lo}, optimal={opt_lo}"
                )
            return

        # Developing must surround or adjoin the optimal band
        overlaps = dev_lo <= opt_hi and dev_hi >= opt_lo
        if not overlaps:
            raise ConfigurationError(
                f"Developing range {self.developing} neither surrounds nor adjoins optimal {self.optimal}"
            )
        if self.falloff is not None and self.falloff <= 0:
            raise ConfigurationError(f"falloff must be positive, got {self.falloff}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "optimal": [_json_number(v) for v in self.optimal],
            "developing": [_json_number(v) for v in self.developing],
            "one_sided": self.one_sided,
            "floor": self.floor,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class ComponentScore:
    """Output of a single scorer. ``value`` is clamped to [0, 100]."""

    name: str
    value: float
    status: str
    raw_value: Optional[float] = None
    unit: str = ""
    detail: str = ""

    @property
    def is_assessed(self) -> bool:
        return self.status != STATUS_NOT_AVAILABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "status": self.status,
            "raw_value": _json_number(self.raw_value),
            "unit": self.unit,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class QualityAssessment:
    """Composite result for one metric group."""

    assessment_type: str
    overall_score: float
    overall_status: str
    component_scores: Dict[str, ComponentScore]
    feedback: Dict[str, str]
    weights: Dict[str, float]
    recommended_drill: Optional[str] = None
    predicted_output: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assessment_type": self.assessment_type,
            "overall_score": self.overall_score,
            "overall_status": self.overall_status,
            "component_scores": {k: v.to_dict() for k, v in self.component_scores.items()},
            "feedback": dict(self.feedback),
            "weights": dict(self.weights),
            "recommended_drill": self.recommended_drill,
            "predicted_output": self.predicted_output,
        }


@dataclass(frozen=True)
class PhaseMarkers:
    """
    Timing markers in milliseconds before contact (contact = 0).

    Some reference frames report time-before-contact as negative numbers.
    ``normalized()`` converts every marker to its magnitude; it is the only
    place the sign convention is resolved.
    """

    load_start: float
    fire_start: float
    contact: float = 0.0
    pelvis_peak: Optional[float] = None

    def normalized(self) -> "PhaseMarkers":
        return PhaseMarkers(
            load_start=abs(self.load_start),
            fire_start=abs(self.fire_start),
            contact=abs(self.contact),
            pelvis_peak=abs(self.pelvis_peak) if self.pelvis_peak is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "load_start": _json_number(self.load_start),
            "fire_start": _json_number(self.fire_start),
            "contact": _json_number(self.contact),
            "pelvis_peak": _json_number(self.pelvis_peak),
        }


@dataclass(frozen=True)
class PhaseDurations:
    load_ms: float
    fire_ms: float
    tempo_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "load_ms": _json_number(self.load_ms),
            "fire_ms": _json_number(self.fire_ms),
            "tempo_ratio": _json_number(self.tempo_ratio),
        }


@dataclass(frozen=True)
class GroundTruthProfile:
    """A named reference hitter with benchmark tempo and timing windows."""

    name: str
    player_type: str
    expected_tempo: float
    tempo_range: Tuple[float, float]
    load_start_window: Tuple[float, float]
    fire_start_window: Tuple[float, float]
    pelvis_peak_window: Tuple[float, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "player_type": self.player_type,
            "expected_tempo": self.expected_tempo,
            "tempo_range": list(self.tempo_range),
            "load_start_window": list(self.load_start_window),
            "fire_start_window": list(self.fire_start_window),
            "pelvis_peak_window": list(self.pelvis_peak_window),
        }


@dataclass(frozen=True)
class ValidationResult:
    test_name: str
    passed: bool
    severity: str
    expected: str
    actual: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_name": self.test_name,
            "passed": self.passed,
            "severity": self.severity,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass(frozen=True)
class ValidationReport:
    player_name: str
    overall_pass: bool
    score: int
    results: List[ValidationResult] = field(default_factory=list)
    durations: Optional[PhaseDurations] = None

    @property
    def critical_failures(self) -> List[ValidationResult]:
        return [r for r in self.results if not r.passed and r.severity == SEVERITY_CRITICAL]

    @property
    def warning_failures(self) -> List[ValidationResult]:
        return [r for r in self.results if not r.passed and r.severity == SEVERITY_WARNING]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "overall_pass": self.overall_pass,
            "score": self.score,
            "results": [r.to_dict() for r in self.results],
            "durations": self.durations.to_dict() if self.durations else None,
        }


@dataclass(frozen=True)
class SegmentTiming:
    """Peak-velocity time of one body segment, in ms before contact."""

    name: str
    time_ms: Optional[float]
    is_actual: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "time_ms": _json_number(self.time_ms), "is_actual": self.is_actual}


@dataclass(frozen=True)
class KinematicSequenceResult:
    is_proper_sequence: bool
    is_proximal_to_distal: bool
    pelvis_shoulder_gap: Optional[float]
    shoulder_hands_gap: Optional[float]
    negative_move_pelvis_gap: Optional[float]
    severity: str
    judged_segments: List[str]
    supplementary_segments: List[str]
    violations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_proper_sequence": self.is_proper_sequence,
            "is_proximal_to_distal": self.is_proximal_to_distal,
            "pelvis_shoulder_gap": self.pelvis_shoulder_gap,
            "shoulder_hands_gap": self.shoulder_hands_gap,
            "negative_move_pelvis_gap": self.negative_move_pelvis_gap,
            "severity": self.severity,
            "judged_segments": list(self.judged_segments),
            "supplementary_segments": list(self.supplementary_segments),
            "violations": list(self.violations),
        }


@dataclass(frozen=True)
class SwingPhase:
    name: str
    start_frame: int
    end_frame: int
    duration: float
    key_events: List[str]
    confidence: float
    com_position: Optional[Tuple[float, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "start_frame": self.start_frame,
            "end_frame": self.end_frame,
            "duration": self.duration,
            "key_events": list(self.key_events),
            "confidence": self.confidence,
            "com_position": list(self.com_position) if self.com_position else None,
        }


@dataclass(frozen=True)
class PhaseTransition:
    phase: str
    frame: int
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {"phase": self.phase, "frame": self.frame, "timestamp": self.timestamp}


@dataclass(frozen=True)
class DetectionQuality:
    score: float
    issues: List[str]
    detection_confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "issues": list(self.issues),
            "detection_confidence": self.detection_confidence,
        }


@dataclass(frozen=True)
class PhaseDetectionResult:
    phases: List[SwingPhase]
    total_duration: float
    load_to_fire_ratio: float
    phase_transitions: List[PhaseTransition]
    quality: DetectionQuality

    def get_phase(self, name: str) -> Optional[SwingPhase]:
        for phase in self.phases:
            if phase.name == name:
                return phase
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phases": [p.to_dict() for p in self.phases],
            "total_duration": self.total_duration,
            "load_to_fire_ratio": self.load_to_fire_ratio,
            "phase_transitions": [t.to_dict() for t in self.phase_transitions],
            "quality": self.quality.to_dict(),
        }
