"""
Configuration loader for the Swing Scoring service.
Loads environment variables and exposes typed accessors.

Centralized configuration for the API server, benchmark tables and pose input.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from swing_scoring.exceptions import ConfigurationError

# Load from .env if present during local dev
load_dotenv()


@dataclass(frozen=True)
class Settings:
  """Application settings loaded from environment variables."""

  # Server Configuration
  port: int = int(os.getenv("PORT", "8080"))
  host: str = os.getenv("HOST", "0.0.0.0")
  reload: bool = os.getenv("RELOAD", "true").lower() == "true"

  # Application Settings
  debug: bool = os.getenv("DEBUG", "true").lower() == "true"
  log_level: str = os.getenv("LOG_LEVEL", "info")

  # Rate limiting (slowapi limit string)
  rate_limit: str = os.getenv("RATE_LIMIT", "60/minute")

  # Benchmark Configuration
  benchmark_level: str = os.getenv("BENCHMARK_LEVEL", "highSchool")
  benchmark_overrides_path: Optional[str] = os.getenv("BENCHMARK_OVERRIDES_PATH")
  default_ground_truth_player: str = os.getenv("DEFAULT_GROUND_TRUTH_PLAYER", "Freddie Freeman")

  # Pose input
  pose_fps: float = float(os.getenv("POSE_FPS", "30"))

  # CORS Configuration
  cors_origins: str = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:8001,http://localhost:8081"
  )

  def validate(self) -> None:
    """Validate configuration values against the benchmark tables."""
    # Imported here so settings can load before the tables do
    from swing_scoring.biomechanics_standards import GROUND_TRUTH_PLAYERS, LEVEL_BENCHMARKS

    if self.benchmark_level not in LEVEL_BENCHMARKS:
      raise ConfigurationError(
        f"BENCHMARK_LEVEL must be one of {', '.join(LEVEL_BENCHMARKS)}, "
        f"got '{self.benchmark_level}'"
      )

    if self.benchmark_overrides_path and not Path(self.benchmark_overrides_path).is_file():
      raise ConfigurationError(
        f"BENCHMARK_OVERRIDES_PATH points to a missing file: {self.benchmark_overrides_path}"
      )

    known_players = [p.name for p in GROUND_TRUTH_PLAYERS]
    if self.default_ground_truth_player not in known_players:
      raise ConfigurationError(
        f"DEFAULT_GROUND_TRUTH_PLAYER must be one of {', '.join(known_players)}"
      )

    if self.pose_fps <= 0:
      raise ConfigurationError(f"POSE_FPS must be positive, got {self.pose_fps}")

  @property
  def is_production(self) -> bool:
    """Check if running in production mode."""
    return not self.debug

  @property
  def cors_origin_list(self) -> List[str]:
    """CORS origins as a list."""
    return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
