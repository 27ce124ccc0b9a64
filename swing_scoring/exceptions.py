"""
Custom exceptions for the Swing Scoring service.

Missing metrics and degenerate numbers are never exceptions; they surface as
"N/A" scores or failed validation results. These types are reserved for
malformed input shapes and bad configuration.
"""


class SwingScoringError(Exception):
    """Base exception for all swing scoring errors."""
    pass


class ValidationError(SwingScoringError):
    """Input shape validation failed (wrong types, bad weight tables)."""
    pass


class ConfigurationError(SwingScoringError):
    """Benchmark tables or application settings are inconsistent."""
    pass


class AnalysisError(SwingScoringError):
    """Swing analysis could not be completed."""
    pass


class GroundTruthNotFoundError(SwingScoringError):
    """Requested ground-truth player profile does not exist."""
    pass
