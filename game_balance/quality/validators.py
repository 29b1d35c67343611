"""
Data Validation Module

Rule-based quality checks over raw event-log frames, run by the loader
before rows are normalized into events.

Features:
- Null checks
- Allowed-value checks
- Custom business rules
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import polars as pl
import structlog

from game_balance.models.events import EventAction

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # Critical - blocks pipeline
    WARNING = "warning"  # Non-critical - logged but continues
    INFO = "info"  # Informational only


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Percentage of passed checks"""
        if self.total_checks == 0:
            return 100.0
        return (self.passed_checks / self.total_checks) * 100


class DataValidator:
    """
    Event log validator with a fluent check suite.

    Example:
        validator = DataValidator()
        validator.add_not_null_check("Event Action")
        validator.add_enum_check("Event Action", ["try", "clear", "fail"])
        result = validator.validate(df)
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode  # Fail on any warning
        self._checks: List[Callable[[pl.DataFrame], ValidationCheck]] = []

    def reset(self) -> None:
        """Reset validator state"""
        self._checks = []

    @staticmethod
    def _missing_column(name: str, column: str, severity: ValidationSeverity) -> ValidationCheck:
        return ValidationCheck(
            name=name,
            passed=False,
            severity=severity,
            message=f"Column '{column}' not found",
        )

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for null values in column"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            name = f"not_null_{column}"
            if column not in df.columns:
                return self._missing_column(name, column, severity)

            null_count = df[column].null_count()
            total = len(df)
            passed = null_count == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {null_count} null values" if not passed else f"Column '{column}' has no null values",
                details={"null_count": null_count, "null_percentage": (null_count / total) * 100 if total > 0 else 0},
                failed_rows=null_count,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_enum_check(
        self,
        column: str,
        allowed_values: List[Any],
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for values in allowed set"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            name = f"enum_{column}"
            if column not in df.columns:
                return self._missing_column(name, column, severity)

            invalid = df.filter(
                ~pl.col(column).is_in(allowed_values) & pl.col(column).is_not_null()
            ).height
            total = len(df)
            passed = invalid == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {invalid} invalid values" if not passed else "All values are valid",
                details={"allowed_values": allowed_values, "invalid_count": invalid},
                failed_rows=invalid,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_custom_check(
        self,
        name: str,
        check_func: Callable[[pl.DataFrame], bool],
        message_on_fail: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add custom validation check"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            try:
                passed = bool(check_func(df))
            except Exception as e:
                return ValidationCheck(
                    name=name,
                    passed=False,
                    severity=severity,
                    message=f"Check failed with error: {str(e)}",
                )
            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message="Check passed" if passed else message_on_fail,
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """
        Run all validation checks on DataFrame.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult with all check results
        """
        started_at = _utcnow()
        results = []

        logger.info(f"Running {len(self._checks)} validation checks on {len(df)} rows")

        for check_func in self._checks:
            result = check_func(df)
            results.append(result)

            if not result.passed:
                logger.warning(
                    f"Validation failed: {result.name}",
                    message=result.message,
                    severity=result.severity.value,
                )

        passed_checks = sum(1 for r in results if r.passed)
        failed_checks = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.ERROR)
        warning_count = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.WARNING)

        if failed_checks > 0:
            status = ValidationStatus.FAILED
        elif warning_count > 0 and self.strict_mode:
            status = ValidationStatus.FAILED
        elif warning_count > 0:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        validation_result = ValidationResult(
            status=status,
            total_checks=len(results),
            passed_checks=passed_checks,
            failed_checks=failed_checks,
            warning_count=warning_count,
            checks=results,
            started_at=started_at,
            completed_at=_utcnow(),
        )

        logger.info(
            f"Validation complete: {status.value}",
            passed=passed_checks,
            failed=failed_checks,
            warnings=warning_count,
        )

        return validation_result


def _labels_are_numeric(column: str) -> Callable[[pl.DataFrame], bool]:
    def check(df: pl.DataFrame) -> bool:
        labels = df[column].drop_nulls()
        return labels.str.strip_chars().str.contains(r"^\d+$").all()
    return check


def create_event_log_validator(
    category_column: str = "Event Category",
    action_column: str = "Event Action",
    label_column: str = "Event Label",
) -> DataValidator:
    """
    Create pre-configured validator for stage event logs.

    Level values inside the properties blob are not checked; upstream
    instrumentation is trusted for them.
    """
    return (
        DataValidator()
        .add_not_null_check(category_column)
        .add_not_null_check(action_column)
        .add_not_null_check(label_column)
        .add_enum_check(action_column, [action.value for action in EventAction])
        .add_custom_check(
            name=f"numeric_{label_column}",
            check_func=_labels_are_numeric(label_column),
            message_on_fail=f"Column '{label_column}' has non-numeric stage ids",
            severity=ValidationSeverity.WARNING,
        )
    )
