"""
Biomechanics Standards and Benchmarks for Swing Analysis.

Defines the benchmark ranges, band tables, component weights and status
thresholds used by every scorer. Centralizes all "magic numbers" so tests can
assert against the same tables the scorers read.

Each assessment family keeps its own threshold table. The cutoffs differ on
purpose (mechanics quality uses 90/75/60, the stability and weight-transfer
cards use 90/80/65/50) and must not be unified.
"""
import dataclasses
import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from swing_scoring.exceptions import ConfigurationError, GroundTruthNotFoundError
from swing_scoring.models import GroundTruthProfile, ScoreRange

INF = math.inf


@dataclass(frozen=True)
class ScoreBand:
    """One row of a band table: values in [low, high] earn ``score``."""

    score: float
    label: str
    low: float = -INF
    high: float = INF
    low_exclusive: bool = False

    def contains(self, value: float) -> bool:
        above = value > self.low if self.low_exclusive else value >= self.low
        return above and value <= self.high


@dataclass(frozen=True)
class BandTable:
    """Ordered bands checked first to last; ``fallback`` applies when none match."""

    bands: Tuple[ScoreBand, ...]
    fallback_score: float
    fallback_label: str

    def lookup(self, value: float) -> Tuple[float, str]:
        for band in self.bands:
            if band.contains(value):
                return band.score, band.label
        return self.fallback_score, self.fallback_label


@dataclass(frozen=True)
class LevelBenchmark:
    """Min/avg/max reference values for one metric at one playing level."""

    min: float
    avg: float
    max: float
    grade_at_avg: str


# ============================================
# KEY BIOMECHANICS RANGES
# ============================================

KEY_BIOMECHANICS_RANGES: Dict[str, ScoreRange] = {
    # Two-sided, distance-to-optimal
    "attack_angle": ScoreRange(optimal=(8.0, 15.0), developing=(5.0, 8.0), unit="°"),
    "x_factor": ScoreRange(optimal=(15.0, 35.0), developing=(10.0, 40.0), unit="°"),
    "hip_shoulder_separation": ScoreRange(optimal=(40.0, 50.0), developing=(30.0, 60.0), unit="°"),
    "lead_knee_angle": ScoreRange(optimal=(145.0, 160.0), developing=(135.0, 170.0), unit="°"),
    "lead_ankle_angle": ScoreRange(optimal=(10.0, 15.0), developing=(5.0, 22.0), unit="°"),
    # One-sided, more is better up to the elite threshold
    "pelvis_rot_velocity": ScoreRange(
        optimal=(900.0, INF), developing=(700.0, INF), one_sided=True, floor=400.0, unit="°/s"
    ),
    "upper_torso_rot_velocity": ScoreRange(
        optimal=(900.0, INF), developing=(800.0, INF), one_sided=True, floor=500.0, unit="°/s"
    ),
    "arm_rot_velocity": ScoreRange(
        optimal=(1500.0, INF), developing=(1300.0, INF), one_sided=True, floor=800.0, unit="°/s"
    ),
    "bat_speed": ScoreRange(
        optimal=(70.0, INF), developing=(65.0, INF), one_sided=True, floor=45.0, unit="mph"
    ),
}

# Raw motion-capture rotational velocities understate MLB-standard values
REBOOT_CORRECTION_FACTORS: Dict[str, float] = {
    "pelvis_rot_velocity": 2.0,
    "upper_torso_rot_velocity": 1.4,
    "arm_rot_velocity": 2.2,
}

# Two-sided band scoring: 100 inside optimal, DEVELOPING_BAND_MAX..MIN across
# the developing band, NEEDS_WORK_MAX..0 over the falloff distance beyond it.
DEVELOPING_BAND_MAX = 89.0
DEVELOPING_BAND_MIN = 60.0
NEEDS_WORK_MAX = 59.0


# ============================================
# STATUS THRESHOLDS
# ============================================

# Front-leg stability and weight transfer (5-tier)
FIVE_TIER_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (90.0, "elite"),
    (80.0, "good"),
    (65.0, "developing"),
    (50.0, "beginner"),
)
FIVE_TIER_FLOOR = "critical"

# Swing mechanics quality (4-tier UI scale)
MECHANICS_QUALITY_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (90.0, "elite"),
    (75.0, "good"),
    (60.0, "developing"),
)
MECHANICS_QUALITY_FLOOR = "needs-work"

# Drill is recommended only below this overall score
DRILL_SCORE_CUTOFF = 90.0

# Tolerance for the weights-sum-to-one check
WEIGHT_SUM_TOLERANCE = 1e-9


@dataclass(frozen=True)
class SwingMechanicsStandards:
    """Direction / timing / efficiency sub-score bands and composite weights."""

    # Attack angle and bat path plane (degrees upward)
    BAT_ANGLE_OPTIMAL_MIN: float = 5.0
    BAT_ANGLE_OPTIMAL_MAX: float = 15.0
    BAT_ANGLE_STEEP_MAX: float = 25.0
    BAT_ANGLE_FLAT_PENALTY: float = 5.0  # per degree below optimal
    BAT_ANGLE_STEEP_PENALTY: float = 3.0  # per degree above optimal
    BAT_ANGLE_NEGATIVE_BASE: float = 50.0
    BAT_ANGLE_EXTREME_BASE: float = 70.0
    DEFAULT_ATTACK_ANGLE: float = 10.0  # used when the source lacks attack angle

    # Direction sub-weights
    ATTACK_ANGLE_WEIGHT: float = 0.40
    BAT_PATH_WEIGHT: float = 0.35
    DIRECTION_CONNECTION_WEIGHT: float = 0.25

    # Tempo ratio (elite MLB 2.3-2.7:1)
    TEMPO_OPTIMAL_MIN: float = 2.3
    TEMPO_OPTIMAL_MAX: float = 2.7
    TEMPO_GOOD_MIN: float = 2.0
    TEMPO_GOOD_MAX: float = 3.0
    TEMPO_FAIR_MIN: float = 1.5
    TEMPO_FAIR_MAX: float = 3.5
    TEMPO_CENTER: float = 2.5

    # Timing sub-weights
    TEMPO_WEIGHT: float = 0.40
    SEQUENCE_WEIGHT: float = 0.35
    ACCELERATION_PATTERN_WEIGHT: float = 0.25

    # Hip-shoulder separation (game data, degrees)
    SEPARATION_OPTIMAL_MIN: float = 40.0
    SEPARATION_OPTIMAL_MAX: float = 50.0

    # Efficiency sub-weights
    SEPARATION_WEIGHT: float = 0.40
    EFFICIENCY_CONNECTION_WEIGHT: float = 0.35
    BALANCE_WEIGHT: float = 0.25

    # Composite weights
    DIRECTION_WEIGHT: float = 0.40
    TIMING_WEIGHT: float = 0.35
    EFFICIENCY_WEIGHT: float = 0.25

    # Predicted bat speed
    BAT_SPEED_SPREAD_MPH: float = 2.5
    BAT_SPEED_BANDS: Tuple[Tuple[float, str], ...] = (
        (90.0, "75-80 mph"),
        (75.0, "70-78 mph"),
        (60.0, "68-75 mph"),
    )
    BAT_SPEED_FLOOR_BAND: str = "65-72 mph"

    # Feedback band cutoffs per component
    FEEDBACK_CUTOFFS: Tuple[float, ...] = (90.0, 75.0, 60.0)

    @property
    def weights(self) -> Dict[str, float]:
        return {
            "direction": self.DIRECTION_WEIGHT,
            "timing": self.TIMING_WEIGHT,
            "efficiency": self.EFFICIENCY_WEIGHT,
        }

    @property
    def direction_weights(self) -> Dict[str, float]:
        return {
            "attack_angle": self.ATTACK_ANGLE_WEIGHT,
            "bat_path_plane": self.BAT_PATH_WEIGHT,
            "connection_quality": self.DIRECTION_CONNECTION_WEIGHT,
        }

    @property
    def timing_weights(self) -> Dict[str, float]:
        return {
            "tempo_ratio": self.TEMPO_WEIGHT,
            "sequence_quality": self.SEQUENCE_WEIGHT,
            "acceleration_pattern": self.ACCELERATION_PATTERN_WEIGHT,
        }

    @property
    def efficiency_weights(self) -> Dict[str, float]:
        return {
            "hip_shoulder_separation": self.SEPARATION_WEIGHT,
            "connection_quality": self.EFFICIENCY_CONNECTION_WEIGHT,
            "balance_score": self.BALANCE_WEIGHT,
        }


@dataclass(frozen=True)
class FrontLegStandards:
    """Lead leg at contact: knee angle, ankle angle, plant deceleration."""

    KNEE_BANDS: BandTable = BandTable(
        bands=(
            ScoreBand(100, "Elite - Firm but not locked, optimal stability", 145.0, 160.0),
            ScoreBand(85, "Good - Slightly soft or slightly stiff", 140.0, 165.0),
            ScoreBand(70, "Developing - Too soft or too stiff, losing power", 135.0, 170.0),
            ScoreBand(50, "Beginner - Significant stability issue", 130.0, 175.0),
        ),
        fallback_score=25,
        fallback_label="Critical - Severe stability problem",
    )
    ANKLE_BANDS: BandTable = BandTable(
        bands=(
            ScoreBand(100, "Elite - Optimal forward shin angle", 10.0, 15.0),
            ScoreBand(85, "Good - Acceptable range", 8.0, 18.0),
            ScoreBand(70, "Developing - Too upright or too forward", 5.0, 22.0),
            ScoreBand(50, "Beginner - Poor base", 3.0, 25.0),
        ),
        fallback_score=25,
        fallback_label="Critical - Falling backward or forward",
    )
    DECELERATION_BANDS: BandTable = BandTable(
        bands=(
            ScoreBand(100, "Elite - Rapid plant, firm post", 10.0, INF, low_exclusive=True),
            ScoreBand(85, "Good - Quick plant", 8.0),
            ScoreBand(70, "Developing - Slow plant", 6.0),
            ScoreBand(50, "Beginner - Very slow plant", 4.0),
        ),
        fallback_score=25,
        fallback_label="Critical - No plant, leg keeps drifting",
    )

    KNEE_OPTIMAL_MIN: float = 145.0
    KNEE_OPTIMAL_MAX: float = 160.0
    ANKLE_OPTIMAL_MIN: float = 10.0
    ANKLE_OPTIMAL_MAX: float = 15.0
    DECELERATION_ELITE_MIN: float = 10.0  # m/s²

    # Insight triggers when a component scores below this
    INSIGHT_CUTOFF: float = 85.0

    # Lead ankle speed below this counts as planted (m/s)
    PLANT_VELOCITY_THRESHOLD: float = 0.2
    # Pixel-to-distance conversion for the lead ankle track
    PIXELS_PER_METER: float = 100.0

    KNEE_WEIGHT: float = 0.40
    ANKLE_WEIGHT: float = 0.30
    DECELERATION_WEIGHT: float = 0.30

    @property
    def weights(self) -> Dict[str, float]:
        return {
            "knee": self.KNEE_WEIGHT,
            "ankle": self.ANKLE_WEIGHT,
            "deceleration": self.DECELERATION_WEIGHT,
        }


@dataclass(frozen=True)
class WeightTransferStandards:
    """Center-of-mass movement: vertical rise, timing, back foot, acceleration."""

    VERTICAL_BANDS: BandTable = BandTable(
        bands=(
            ScoreBand(100, "Elite - Stays low, connected to ground", 2.0, 3.0),
            ScoreBand(85, "Good - Minimal rise", 2.0, 4.0),
            ScoreBand(70, "Developing - Slight jumping tendency", 2.0, 5.0),
            ScoreBand(50, "Beginner - Jumping tendency", 2.0, 7.0),
        ),
        fallback_score=25,
        fallback_label="Critical - Severe jumping, losing connection",
    )
    # Seconds before contact that COM velocity peaks
    TIMING_BANDS: BandTable = BandTable(
        bands=(
            ScoreBand(100, "Elite - Perfect timing, momentum at contact", 0.10, 0.15),
            ScoreBand(85, "Good - Acceptable timing window", 0.08, 0.18),
            ScoreBand(70, "Developing - Slightly off timing", 0.05, 0.22),
            ScoreBand(50, "Beginner - Poor timing, losing momentum", 0.03, 0.28),
        ),
        fallback_score=25,
        fallback_label="Critical - Way too early or late",
    )
    # Seconds relative to contact (positive = after contact)
    BACK_FOOT_BANDS: BandTable = BandTable(
        bands=(
            ScoreBand(100, "Elite - Maintained connection through contact", 0.05, 0.10),
            ScoreBand(85, "Good - Slight early lift but acceptable", 0.00, 0.10),
            ScoreBand(70, "Developing - Lifting early, losing connection", -0.05, 0.10),
            ScoreBand(50, "Beginner - Lost connection, jumping off back foot", -0.10, 0.10),
        ),
        fallback_score=25,
        fallback_label="Critical - Severe jumping, no connection at contact",
    )
    # (score, label, peak range m/s², timing windows in seconds before contact)
    ACCELERATION_BANDS: Tuple[Tuple[float, str, Tuple[float, float], Tuple[Tuple[float, float, bool, bool], ...]], ...] = (
        (100, "Elite - Controlled, sustained acceleration", (5.0, 8.0), ((0.15, 0.25, True, True),)),
        (85, "Good - Slightly aggressive but controlled", (8.0, 10.0),
         ((0.12, 0.15, True, False), (0.25, 0.30, False, True))),
        (70, "Developing - Too explosive or poor timing", (10.0, 12.0),
         ((0.08, 0.12, True, False), (0.30, 0.35, False, True))),
        (50, "Beginner - Way too aggressive, indicates jumping", (12.0, 15.0), ()),
    )
    ACCELERATION_FALLBACK_SCORE: float = 25
    ACCELERATION_FALLBACK_LABEL: str = "Critical - Explosive burst causing jumping"

    # Insight triggers
    INSIGHT_CUTOFF: float = 85.0
    JUMPING_RISE_INCHES: float = 4.0
    EARLY_PEAK_SECONDS: float = 0.18
    EXPLOSIVE_ACCEL: float = 10.0

    # Pixel-to-distance conversion for pose coordinates (~100 px per meter)
    PIXELS_PER_METER: float = 100.0
    INCHES_PER_METER: float = 39.37
    TOE_LIFT_INCHES: float = 4.0
    NO_LIFT_DEFAULT_SECONDS: float = 0.10  # toe never lifted: treat as lifting after contact
    MIN_JOINT_CONFIDENCE: float = 0.5

    VERTICAL_WEIGHT: float = 0.25
    TIMING_WEIGHT: float = 0.35
    BACK_FOOT_WEIGHT: float = 0.25
    ACCELERATION_WEIGHT: float = 0.15

    @property
    def weights(self) -> Dict[str, float]:
        return {
            "vertical": self.VERTICAL_WEIGHT,
            "timing": self.TIMING_WEIGHT,
            "back_foot": self.BACK_FOOT_WEIGHT,
            "acceleration": self.ACCELERATION_WEIGHT,
        }


@dataclass(frozen=True)
class PhaseTimingStandards:
    """Elite COM phase targets for symmetric-deviation scoring."""

    ELITE_TEMPO_RATIO: float = 3.0
    ELITE_LOAD_DURATION_MS: float = 150.0  # typical 100-200ms
    ELITE_FIRE_DURATION_MS: float = 50.0  # typical 40-60ms

    # Deviation score -> status
    OPTIMAL_SCORE_MIN: float = 90.0
    DEVELOPING_SCORE_MIN: float = 70.0


@dataclass(frozen=True)
class PhaseValidationStandards:
    """Plausibility windows and scoring penalties for phase validation."""

    FIRE_DURATION_MIN_MS: float = 250.0
    FIRE_DURATION_MAX_MS: float = 500.0
    FIRE_DURATION_CRITICAL_LOW_MS: float = 200.0
    FIRE_DURATION_CRITICAL_HIGH_MS: float = 550.0

    LOAD_DURATION_MIN_MS: float = 650.0
    LOAD_DURATION_MAX_MS: float = 2500.0
    LOAD_DURATION_CRITICAL_LOW_MS: float = 600.0
    LOAD_DURATION_WARNING_HIGH_MS: float = 2600.0

    FIRE_TO_PELVIS_MIN_MS: float = 120.0
    FIRE_TO_PELVIS_MAX_MS: float = 200.0
    FIRE_TO_PELVIS_CRITICAL_LOW_MS: float = 100.0
    FIRE_TO_PELVIS_CRITICAL_HIGH_MS: float = 220.0

    # Load start earlier than this is outside a typical capture window
    CAPTURE_WINDOW_MS: float = 3000.0

    EXTREME_TEMPO_MIN: float = 0.1
    EXTREME_TEMPO_MAX: float = 12.0

    CRITICAL_PENALTY: float = 25.0
    WARNING_PENALTY: float = 10.0


@dataclass(frozen=True)
class PhaseDetectionStandards:
    """Search windows and quality deductions for pose-based phase detection."""

    MIN_FRAMES: int = 10
    DEFAULT_FPS: float = 30.0

    STANCE_MIN_FRAME: int = 3
    STANCE_COM_SHIFT: float = 0.02
    STANCE_FALLBACK_FRAMES: int = 5
    LOAD_SEARCH_FRAMES: int = 20
    STRIDE_SEARCH_FRAMES: int = 15
    STRIDE_FALLBACK_FRAMES: int = 8
    FIRE_SEARCH_FRAMES: int = 10
    CONTACT_SEARCH_FRAMES: int = 8
    FRONT_FOOT_CONTACT_Y: float = 0.8

    LOAD_DURATION_MIN_S: float = 0.05
    LOAD_DURATION_MAX_S: float = 0.5
    FIRE_DURATION_MIN_S: float = 0.03
    FIRE_DURATION_MAX_S: float = 0.3
    RATIO_MIN: float = 1.5
    RATIO_MAX: float = 5.0

    MISSING_PHASE_PENALTY: float = 15.0
    ANOMALY_PENALTY: float = 10.0

    PHASE_CONFIDENCE: Tuple[Tuple[str, float], ...] = (
        ("stance", 0.85),
        ("load", 0.8),
        ("stride", 0.75),
        ("fire", 0.9),
        ("contact", 0.85),
        ("follow_through", 0.8),
    )

    @property
    def expected_phases(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.PHASE_CONFIDENCE)

    def confidence(self, phase_name: str) -> float:
        return dict(self.PHASE_CONFIDENCE)[phase_name]


# Singleton instances
SWING_MECHANICS_STANDARDS = SwingMechanicsStandards()
FRONT_LEG_STANDARDS = FrontLegStandards()
WEIGHT_TRANSFER_STANDARDS = WeightTransferStandards()
PHASE_TIMING_STANDARDS = PhaseTimingStandards()
PHASE_VALIDATION_STANDARDS = PhaseValidationStandards()
PHASE_DETECTION_STANDARDS = PhaseDetectionStandards()


# ============================================
# GROUND TRUTH PLAYERS (Reboot Motion studies)
# ============================================

GROUND_TRUTH_PLAYERS: Tuple[GroundTruthProfile, ...] = (
    GroundTruthProfile(
        name="Freddie Freeman",
        player_type="Elite Power Hitter",
        expected_tempo=2.50,
        tempo_range=(2.4, 2.6),
        load_start_window=(950.0, 1100.0),
        fire_start_window=(340.0, 380.0),
        pelvis_peak_window=(200.0, 250.0),
    ),
    GroundTruthProfile(
        name="Aaron Judge",
        player_type="Balanced Power",
        expected_tempo=2.10,
        tempo_range=(2.0, 2.3),
        load_start_window=(900.0, 1050.0),
        fire_start_window=(350.0, 400.0),
        pelvis_peak_window=(200.0, 240.0),
    ),
    GroundTruthProfile(
        name="Luis Arraez",
        player_type="Elite Contact Hitter",
        expected_tempo=3.80,
        tempo_range=(3.5, 4.2),
        load_start_window=(1200.0, 1500.0),
        fire_start_window=(280.0, 350.0),
        pelvis_peak_window=(170.0, 210.0),
    ),
    GroundTruthProfile(
        name="Fernando Tatis Jr.",
        player_type="Explosive Power (Extreme Separation)",
        expected_tempo=7.00,
        tempo_range=(6.0, 8.5),
        load_start_window=(1800.0, 2200.0),
        fire_start_window=(250.0, 320.0),
        pelvis_peak_window=(300.0, 350.0),
    ),
    GroundTruthProfile(
        name="Kyle Tucker",
        player_type="Patient Power (Very Long Load)",
        expected_tempo=10.50,
        tempo_range=(9.5, 11.5),
        load_start_window=(2200.0, 2500.0),
        fire_start_window=(200.0, 250.0),
        pelvis_peak_window=(190.0, 220.0),
    ),
)

PRIMARY_GROUND_TRUTH = "Freddie Freeman"


def get_ground_truth(name: str) -> GroundTruthProfile:
    """Look up a ground-truth profile by player name (case-insensitive)."""
    wanted = name.strip().lower()
    for profile in GROUND_TRUTH_PLAYERS:
        if profile.name.lower() == wanted:
            return profile
    known = ", ".join(p.name for p in GROUND_TRUTH_PLAYERS)
    raise GroundTruthNotFoundError(f"Unknown ground-truth player '{name}'. Known players: {known}")


# ============================================
# LEVEL BENCHMARKS
# ============================================

LEVEL_BENCHMARKS: Dict[str, Dict[str, LevelBenchmark]] = {
    "youth": {
        "bat_speed": LevelBenchmark(45, 55, 65, "C"),
        "exit_velocity": LevelBenchmark(55, 65, 75, "C"),
        "pelvis_velocity": LevelBenchmark(400, 550, 700, "C"),
        "torso_velocity": LevelBenchmark(500, 700, 900, "C"),
        "time_in_zone": LevelBenchmark(0.08, 0.12, 0.18, "C"),
        "sequence_efficiency": LevelBenchmark(60, 75, 90, "C"),
    },
    "highSchool": {
        "bat_speed": LevelBenchmark(60, 70, 80, "B"),
        "exit_velocity": LevelBenchmark(70, 80, 90, "B"),
        "pelvis_velocity": LevelBenchmark(550, 700, 850, "B"),
        "torso_velocity": LevelBenchmark(700, 900, 1100, "B"),
        "time_in_zone": LevelBenchmark(0.10, 0.14, 0.20, "B"),
        "sequence_efficiency": LevelBenchmark(70, 80, 92, "B"),
    },
    "college": {
        "bat_speed": LevelBenchmark(70, 78, 86, "A-"),
        "exit_velocity": LevelBenchmark(80, 88, 96, "A-"),
        "pelvis_velocity": LevelBenchmark(650, 800, 950, "A-"),
        "torso_velocity": LevelBenchmark(850, 1050, 1250, "A-"),
        "time_in_zone": LevelBenchmark(0.12, 0.16, 0.22, "A-"),
        "sequence_efficiency": LevelBenchmark(75, 85, 95, "A-"),
    },
    "mlb": {
        "bat_speed": LevelBenchmark(75, 82, 92, "A+"),
        "exit_velocity": LevelBenchmark(85, 90, 100, "A+"),
        "pelvis_velocity": LevelBenchmark(700, 850, 1000, "A+"),
        "torso_velocity": LevelBenchmark(900, 1150, 1400, "A+"),
        "time_in_zone": LevelBenchmark(0.14, 0.18, 0.24, "A+"),
        "sequence_efficiency": LevelBenchmark(80, 88, 98, "A+"),
    },
}

DEFAULT_LEVEL = "highSchool"


# ============================================
# DRILLS (keyed by assessment, then weakest component)
# ============================================

DRILLS: Dict[str, Dict[str, str]] = {
    "swing_mechanics": {
        "direction": "Inside-Path Tee Drill: 20 swings daily keeping hands inside the ball on a 5-15° upward path",
        "timing": "Hip Fire Drill: 50 reps daily without a bat (load slow, fire fast), then 20 swings with a bat",
        "efficiency": "Separation Hold Drill: 20 swings daily, pausing at foot plant with hips open and shoulders closed",
    },
    "front_leg_stability": {
        "knee": "Front Leg Post-Up Drill: 20 swings daily for 2 weeks focusing on firm (not locked) front leg at contact",
        "ankle": "Stride Landing Drill: 20 strides daily landing with a 10-15° forward shin and weight on the inside of the foot",
        "deceleration": "Plant and Rotate Drill: 20 swings daily, landing the front foot and firming the leg before the hips fire",
    },
    "weight_transfer": {
        "vertical": "Back Foot Connection Drill: Place towel under back toe, take 20 swings daily maintaining contact through impact",
        "timing": "Low and Loaded Drill: 20 swings daily delaying the forward shift so momentum peaks at contact",
        "back_foot": "Back Foot Connection Drill: Place towel under back toe, take 20 swings daily maintaining contact through impact",
        "acceleration": "Smooth Shift Drill: 20 step-through swings daily building speed gradually from load to contact",
    },
}


# ============================================
# RECOMMENDATION PRIORITIES
# ============================================

PRIORITY_CRITICAL = 1  # Fix first (largest power leak)
PRIORITY_IMPORTANT = 2  # Improve soon
PRIORITY_OPTIONAL = 3  # Nice to have (optimization)


# ============================================
# OVERRIDES
# ============================================

STANDARD_TABLES: Dict[str, Any] = {
    "swing_mechanics": SWING_MECHANICS_STANDARDS,
    "front_leg": FRONT_LEG_STANDARDS,
    "weight_transfer": WEIGHT_TRANSFER_STANDARDS,
    "phase_timing": PHASE_TIMING_STANDARDS,
    "phase_validation": PHASE_VALIDATION_STANDARDS,
    "phase_detection": PHASE_DETECTION_STANDARDS,
}


def _freeze(value: Any) -> Any:
    """JSON lists become tuples so overridden tables stay hashable."""
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def apply_overrides(standards: Any, overrides: Mapping[str, Any]) -> Any:
    """
    Return a copy of a standards table with the given fields replaced.

    Raises:
        ConfigurationError: If a field does not exist on the table.
    """
    known = {f.name for f in dataclasses.fields(standards)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown fields for {type(standards).__name__}: {', '.join(unknown)}"
        )
    return dataclasses.replace(standards, **{k: _freeze(v) for k, v in overrides.items()})


def weight_tables(standards: Any) -> Dict[str, Dict[str, float]]:
    """Every ``*weights`` property of a standards table, keyed by property name."""
    return {
        name: getattr(standards, name)
        for name, member in vars(type(standards)).items()
        if isinstance(member, property) and name.endswith("weights")
    }


def check_weight_tables(table_name: str, standards: Any) -> None:
    """
    Raises:
        ConfigurationError: If any weight table of ``standards`` does not sum to 1.0.
    """
    for name, weights in weight_tables(standards).items():
        try:
            total = math.fsum(weights.values())
        except TypeError as e:
            raise ConfigurationError(f"{table_name}.{name} holds a non-numeric weight: {e}") from e
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigurationError(
                f"{table_name}.{name} must sum to 1.0, got {total} ({weights})"
            )


def load_standard_overrides(path: Optional[str]) -> Dict[str, Any]:
    """
    Load per-table overrides from a JSON file.

    The file maps table names (keys of ``STANDARD_TABLES``) to field overrides:
    ``{"front_leg": {"KNEE_WEIGHT": 0.5, "ANKLE_WEIGHT": 0.25, ...}}``.

    Returns:
        Mapping of table name to the standards instance to use. Tables not
        mentioned in the file keep their defaults.
    """
    tables = dict(STANDARD_TABLES)
    if not path:
        return tables

    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigurationError(f"Benchmark overrides file not found: {path}")

    try:
        raw = json.loads(file_path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Benchmark overrides file is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError("Benchmark overrides file must contain a JSON object")

    for table_name, fields in raw.items():
        if table_name not in tables:
            raise ConfigurationError(
                f"Unknown benchmark table '{table_name}'. Known tables: {', '.join(sorted(tables))}"
            )
        if not isinstance(fields, dict):
            raise ConfigurationError(f"Overrides for '{table_name}' must be a JSON object")
        tables[table_name] = apply_overrides(tables[table_name], fields)
        check_weight_tables(table_name, tables[table_name])

    return tables
