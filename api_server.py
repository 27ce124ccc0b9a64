"""
API server for Swing Scoring.
Exposes metric scoring, quality engines, kinematic sequence checks and swing
phase detection/validation over HTTP.
"""
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from pydantic import BaseModel, Field
from enum import Enum

from swing_scoring.config import settings
from swing_scoring.logging_config import get_logger
from swing_scoring.exceptions import (
    ConfigurationError,
    ValidationError,
)
from swing_scoring.models import ScoreRange
from swing_scoring.component_scoring import score_component
from swing_scoring.quality_engines import (
    calculate_direction_score,
    calculate_efficiency_score,
    calculate_timing_score,
    compute_front_leg_stability,
    compute_swing_mechanics_quality,
    compute_weight_transfer,
)
from swing_scoring.kinematic_sequence import check_sequence
from swing_scoring.phase_validation import run_edge_case_tests
from swing_scoring.biomechanics_standards import (
    GROUND_TRUTH_PLAYERS,
    KEY_BIOMECHANICS_RANGES,
    REBOOT_CORRECTION_FACTORS,
    load_standard_overrides,
)
from swing_scoring.tools import (
    analyze_swing_metrics,
    detect_phases_from_pose,
    validate_phase_markers,
)

# Initialize logger
logger = get_logger(__name__)


# ============================================
# REQUEST VALIDATION MODELS
# ============================================

class PlayingLevel(str, Enum):
    """Benchmark levels for 4B grading"""
    YOUTH = "youth"
    HIGH_SCHOOL = "highSchool"
    COLLEGE = "college"
    MLB = "mlb"


class ReportTier(str, Enum):
    """Report tiers deciding which categories feed the overall grade"""
    FREE = "free"
    CHALLENGE = "challenge"
    DIY = "diy"
    ELITE = "elite"


class AnalyzeRequest(BaseModel):
    metrics: Dict[str, Any] = Field(..., description="Flat record of swing metrics")
    level: Optional[PlayingLevel] = None
    corrected: bool = Field(False, description="Apply Reboot correction factors to rotational velocities")
    tier: ReportTier = ReportTier.ELITE


class ScoreRangeModel(BaseModel):
    optimal: List[float] = Field(..., min_length=2, max_length=2)
    developing: List[float] = Field(..., min_length=2, max_length=2)
    one_sided: bool = False
    floor: Optional[float] = None
    falloff: Optional[float] = None
    unit: str = ""


class ComponentRequest(BaseModel):
    metric_name: str
    value: Optional[float] = None
    corrected: bool = False
    score_range: Optional[ScoreRangeModel] = Field(
        None, description="Custom range; defaults to the built-in range for metric_name"
    )


class SwingMechanicsRequest(BaseModel):
    direction: Optional[float] = Field(None, description="Direction sub-score (0-100)")
    timing: Optional[float] = Field(None, description="Timing sub-score (0-100)")
    efficiency: Optional[float] = Field(None, description="Efficiency sub-score (0-100)")
    bat_speed: Optional[float] = None
    # Raw inputs used when a sub-score is not supplied
    attack_angle: Optional[float] = None
    bat_path_plane: Optional[float] = None
    connection_quality: Optional[float] = None
    tempo_ratio: Optional[float] = None
    sequence_quality: Optional[float] = None
    acceleration_pattern: Optional[float] = None
    hip_shoulder_separation: Optional[float] = None
    balance_score: Optional[float] = None


class FrontLegRequest(BaseModel):
    knee_angle: Optional[float] = None
    ankle_angle: Optional[float] = None
    decel_rate: Optional[float] = None


class WeightTransferRequest(BaseModel):
    vertical_movement: Optional[float] = None
    timing_peak: Optional[float] = None
    back_foot_lift: Optional[float] = None
    accel_peak: Optional[float] = None
    accel_timing: Optional[float] = None


class SequenceRequest(BaseModel):
    pelvis_time: Optional[float] = None
    shoulder_time: Optional[float] = None
    negative_move_time: Optional[float] = None
    arm_time: Optional[float] = None
    arm_is_actual: bool = False
    hands_time: Optional[float] = None
    hands_is_actual: bool = False


class PhaseMarkersModel(BaseModel):
    load_start: float
    fire_start: float
    contact: float = 0.0
    pelvis_peak: Optional[float] = None


class ValidatePhasesRequest(BaseModel):
    markers: PhaseMarkersModel
    player_name: Optional[str] = None
    include_edge_cases: bool = False


class DetectPhasesRequest(BaseModel):
    pose_frames: List[Optional[List[List[float]]]] = Field(
        ..., description="Per frame: 33 landmarks of [x, y(, z)] or null for a dropped frame"
    )
    fps: Optional[float] = Field(None, gt=0)
    player_name: Optional[str] = None


# ============================================
# STARTUP CONFIGURATION
# ============================================

# Validate configuration and load benchmark tables on startup
try:
    settings.validate()
    STANDARDS = load_standard_overrides(settings.benchmark_overrides_path)
    logger.info("Configuration validated successfully")
except ConfigurationError as e:
    logger.critical(f"Configuration validation failed: {e}")
    raise

app = FastAPI(
    title="Swing Scoring API",
    description="Baseball swing metrics scoring and phase validation API",
    version="1.0.0"
)

# Initialize rate limiter to prevent abuse
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Authorization"],
)

_ERROR_STATUS_CODES = {
    "validation": 422,
    "analysis": 422,
    "not_found": 404,
}


def _tool_response(result: dict, step: str) -> JSONResponse:
    """Map a tool's {status: "error"} result onto an HTTP error."""
    if result.get("status") == "success":
        return JSONResponse(result)

    status_code = _ERROR_STATUS_CODES.get(result.get("error_type"), 500)
    raise HTTPException(
        status_code=status_code,
        detail={"error": result.get("message"), "step": step}
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "swing-scoring-api",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "analyze": "/api/analyze",
            "component": "/api/score/component",
            "swing_mechanics": "/api/quality/swing-mechanics",
            "front_leg": "/api/quality/front-leg",
            "weight_transfer": "/api/quality/weight-transfer",
            "sequence": "/api/sequence",
            "detect_phases": "/api/phases/detect",
            "validate_phases": "/api/phases/validate",
            "edge_cases": "/api/phases/edge-cases",
            "ground_truth": "/api/ground-truth",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint with benchmark table verification"""
    checks = {}
    overall_healthy = True

    missing = [name for name, table in STANDARDS.items() if table is None]
    if missing:
        checks["benchmarks"] = f"missing: {', '.join(missing)}"
        overall_healthy = False
        logger.error(f"Health check - benchmark tables missing: {missing}")
    else:
        checks["benchmarks"] = "loaded"

    checks["benchmark_overrides"] = settings.benchmark_overrides_path or "defaults"
    checks["ground_truth_players"] = len(GROUND_TRUTH_PLAYERS)

    status_code = 200 if overall_healthy else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "healthy" if overall_healthy else "unhealthy",
            "service": "swing-scoring-api",
            "checks": checks
        }
    )


@app.get("/api/ground-truth")
async def list_ground_truth():
    """List the ground-truth hitter profiles used for phase validation."""
    return {
        "default": settings.default_ground_truth_player,
        "players": [profile.to_dict() for profile in GROUND_TRUTH_PLAYERS],
    }


@app.post("/api/analyze")
@limiter.limit(settings.rate_limit)
async def analyze_endpoint(
    request: Request,  # Required by slowapi for rate limiting
    body: AnalyzeRequest,
):
    """
    Score one swing's metrics and return coaching feedback.

    Returns:
        Key biomechanics scores, the three quality assessments, phase timing,
        kinematic sequence, 4B grades, issues, strengths and recommendations.
    """
    logger.info(f"Analysis request received - metrics: {len(body.metrics)}, level: {body.level}")
    result = analyze_swing_metrics(
        body.metrics,
        level=body.level.value if body.level else None,
        corrected=body.corrected,
        tier=body.tier.value,
        standards=STANDARDS,
    )
    return _tool_response(result, "analysis")


@app.post("/api/score/component")
@limiter.limit(settings.rate_limit)
async def score_component_endpoint(request: Request, body: ComponentRequest):
    """Score a single metric against the built-in or a custom range."""
    try:
        if body.score_range is not None:
            score_range = ScoreRange(
                optimal=tuple(body.score_range.optimal),
                developing=tuple(body.score_range.developing),
                one_sided=body.score_range.one_sided,
                floor=body.score_range.floor,
                falloff=body.score_range.falloff,
                unit=body.score_range.unit,
            )
        elif body.metric_name in KEY_BIOMECHANICS_RANGES:
            score_range = KEY_BIOMECHANICS_RANGES[body.metric_name]
        else:
            raise HTTPException(
                status_code=422,
                detail={
                    "error": f"Unknown metric '{body.metric_name}'. Supply score_range or one of: "
                             f"{', '.join(KEY_BIOMECHANICS_RANGES)}",
                    "step": "validation"
                }
            )

        value = body.value
        if body.corrected and value is not None and body.metric_name in REBOOT_CORRECTION_FACTORS:
            value = value * REBOOT_CORRECTION_FACTORS[body.metric_name]

        return JSONResponse(score_component(body.metric_name, value, score_range).to_dict())

    except HTTPException:
        raise
    except (ValidationError, ConfigurationError) as e:
        logger.warning(f"Invalid component scoring request: {e}")
        raise HTTPException(status_code=422, detail={"error": str(e), "step": "validation"})
    except Exception as e:
        logger.critical(f"Unexpected error in component endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail={"error": f"Internal server error: {str(e)}"})


@app.post("/api/quality/swing-mechanics")
@limiter.limit(settings.rate_limit)
async def swing_mechanics_endpoint(request: Request, body: SwingMechanicsRequest):
    """
    Swing mechanics quality.

    Each sub-score may be sent directly or derived from its raw inputs; a
    sub-score with neither is reported N/A.
    """
    standards = STANDARDS["swing_mechanics"]
    try:
        direction = body.direction
        if direction is None and any(
            v is not None for v in (body.attack_angle, body.bat_path_plane, body.connection_quality)
        ):
            direction = calculate_direction_score(
                body.attack_angle, body.bat_path_plane, body.connection_quality, standards=standards
            )

        timing = body.timing
        if timing is None and any(
            v is not None for v in (body.tempo_ratio, body.sequence_quality, body.acceleration_pattern)
        ):
            timing = calculate_timing_score(
                body.tempo_ratio, body.sequence_quality, body.acceleration_pattern, standards=standards
            )

        efficiency = body.efficiency
        if efficiency is None and any(
            v is not None for v in (body.hip_shoulder_separation, body.connection_quality, body.balance_score)
        ):
            efficiency = calculate_efficiency_score(
                body.hip_shoulder_separation, body.connection_quality, body.balance_score, standards=standards
            )

        assessment = compute_swing_mechanics_quality(
            direction, timing, efficiency, bat_speed=body.bat_speed, standards=standards
        )
        return JSONResponse(assessment.to_dict())

    except ValidationError as e:
        logger.warning(f"Invalid swing mechanics request: {e}")
        raise HTTPException(status_code=422, detail={"error": str(e), "step": "validation"})
    except Exception as e:
        logger.critical(f"Unexpected error in swing mechanics endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail={"error": f"Internal server error: {str(e)}"})


@app.post("/api/quality/front-leg")
@limiter.limit(settings.rate_limit)
async def front_leg_endpoint(request: Request, body: FrontLegRequest):
    """Front leg stability at contact."""
    try:
        assessment = compute_front_leg_stability(
            knee_angle=body.knee_angle,
            ankle_angle=body.ankle_angle,
            decel_rate=body.decel_rate,
            standards=STANDARDS["front_leg"],
        )
        return JSONResponse(assessment.to_dict())

    except ValidationError as e:
        logger.warning(f"Invalid front leg request: {e}")
        raise HTTPException(status_code=422, detail={"error": str(e), "step": "validation"})
    except Exception as e:
        logger.critical(f"Unexpected error in front leg endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail={"error": f"Internal server error: {str(e)}"})


@app.post("/api/quality/weight-transfer")
@limiter.limit(settings.rate_limit)
async def weight_transfer_endpoint(request: Request, body: WeightTransferRequest):
    """Weight transfer quality from center-of-mass movement."""
    try:
        assessment = compute_weight_transfer(
            vertical_movement=body.vertical_movement,
            timing_peak=body.timing_peak,
            back_foot_lift=body.back_foot_lift,
            accel_peak=body.accel_peak,
            accel_timing=body.accel_timing,
            standards=STANDARDS["weight_transfer"],
        )
        return JSONResponse(assessment.to_dict())

    except ValidationError as e:
        logger.warning(f"Invalid weight transfer request: {e}")
        raise HTTPException(status_code=422, detail={"error": str(e), "step": "validation"})
    except Exception as e:
        logger.critical(f"Unexpected error in weight transfer endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail={"error": f"Internal server error: {str(e)}"})


@app.post("/api/sequence")
@limiter.limit(settings.rate_limit)
async def sequence_endpoint(request: Request, body: SequenceRequest):
    """Kinematic sequence check from peak-velocity timings (ms before contact)."""
    try:
        result = check_sequence(
            pelvis_time=body.pelvis_time,
            shoulder_time=body.shoulder_time,
            negative_move_time=body.negative_move_time,
            hands_time=body.hands_time,
            hands_is_actual=body.hands_is_actual,
            arm_time=body.arm_time,
            arm_is_actual=body.arm_is_actual,
        )
        return JSONResponse(result.to_dict())

    except ValidationError as e:
        logger.warning(f"Invalid sequence request: {e}")
        raise HTTPException(status_code=422, detail={"error": str(e), "step": "validation"})
    except Exception as e:
        logger.critical(f"Unexpected error in sequence endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail={"error": f"Internal server error: {str(e)}"})


@app.post("/api/phases/detect")
@limiter.limit(settings.rate_limit)
async def detect_phases_endpoint(request: Request, body: DetectPhasesRequest):
    """Detect swing phases from per-frame pose landmarks."""
    logger.info(f"Phase detection request received - frames: {len(body.pose_frames)}")
    result = detect_phases_from_pose(
        body.pose_frames,
        fps=body.fps,
        player_name=body.player_name,
        standards=STANDARDS,
    )
    return _tool_response(result, "detection")


@app.post("/api/phases/validate")
@limiter.limit(settings.rate_limit)
async def validate_phases_endpoint(request: Request, body: ValidatePhasesRequest):
    """Validate phase timing markers against a ground-truth profile."""
    result = validate_phase_markers(
        body.markers.model_dump(),
        player_name=body.player_name,
        include_edge_cases=body.include_edge_cases,
        standards=STANDARDS,
    )
    return _tool_response(result, "validation")


@app.get("/api/phases/edge-cases")
async def edge_cases_endpoint():
    """Run the phase-validation edge-case battery."""
    results = run_edge_case_tests(STANDARDS["phase_validation"])
    return {
        "all_passed": all(r.passed for r in results),
        "results": [r.to_dict() for r in results],
    }


if __name__ == "__main__":
    # Configure server using centralized settings
    logger.info(f"Starting Swing Scoring API server on {settings.host}:{settings.port}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Benchmark level: {settings.benchmark_level}, overrides: {settings.benchmark_overrides_path or 'none'}")

    uvicorn.run(
        "api_server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level
    )
