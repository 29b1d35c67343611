"""
Data Quality Module
"""
from .validators import (
    DataValidator,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
    create_event_log_validator,
)

__all__ = [
    "DataValidator",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationStatus",
    "create_event_log_validator",
]
