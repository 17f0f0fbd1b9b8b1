"""Data model, validation and profile recommendation for PTP cluster configuration."""

__version__ = "0.1.0"

__all__ = ["types", "ptp4l", "operator_validation", "recommend", "controllers"]