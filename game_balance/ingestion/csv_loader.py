"""
Event Log Loader

Reads event-log CSV exports with Polars, runs the quality checks on the raw
frame and hands the rows to the normalizer.

Every column is read as a string so that the normalizer sees the export
exactly as written (stage ids such as "02015" keep their digits).
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

import polars as pl
import structlog

from game_balance.config import get_settings
from game_balance.config.settings import IngestionSettings
from game_balance.models.events import Event
from game_balance.quality.validators import (
    DataValidator,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
    create_event_log_validator,
)
from .errors import DataQualityError, MissingColumnError
from .normalizer import DEFAULT_COLUMNS, EventColumns, parse_events

logger = structlog.get_logger(__name__)


@dataclass
class LoadResult:
    """Result of loading one event log"""
    source: str
    rows_read: int
    events: List[Event]
    validation: Optional[ValidationResult]
    started_at: datetime
    completed_at: datetime
    duration_seconds: float


@dataclass
class EventFileInfo:
    """An event-log export available on disk"""
    file_name: str
    display_name: str
    file_path: str
    size_bytes: int


def read_event_frame(
    path: Union[str, Path],
    config: Optional[IngestionSettings] = None,
) -> pl.DataFrame:
    """Read a CSV export with a header row, every column as a string"""
    config = config or get_settings().ingestion
    return pl.read_csv(
        path,
        separator=config.delimiter,
        encoding=config.encoding,
        null_values=config.null_values,
        infer_schema_length=0,
    )


def list_event_files(directory: Union[str, Path]) -> List[EventFileInfo]:
    """List the CSV exports in a directory, sorted by file name"""
    root = Path(directory)
    if not root.is_dir():
        logger.warning("Event log directory not found", directory=str(root))
        return []

    return [
        EventFileInfo(
            file_name=path.name,
            display_name=path.stem.replace("_", " "),
            file_path=str(path),
            size_bytes=path.stat().st_size,
        )
        for path in sorted(root.glob("*.csv"))
    ]


class EventLogLoader:
    """
    Loads stage event logs into Event records.

    Example:
        loader = EventLogLoader()
        result = loader.load("data/events/stage_log.csv")
        report = build_dashboard(result.events, FilterOptions())
    """

    def __init__(
        self,
        columns: EventColumns = DEFAULT_COLUMNS,
        validator: Optional[DataValidator] = None,
        config: Optional[IngestionSettings] = None,
    ):
        self.columns = columns
        self.config = config or get_settings().ingestion
        self.validator = validator or create_event_log_validator(
            category_column=columns.category,
            action_column=columns.action,
            label_column=columns.label,
        )

    def _check_columns(self, df: pl.DataFrame) -> None:
        missing = [c for c in self.columns.required if c not in df.columns]
        if missing:
            raise MissingColumnError(f"Event log is missing columns: {', '.join(missing)}")

    @staticmethod
    def _check_quality(validation: Optional[ValidationResult]) -> None:
        if validation is None or validation.status != ValidationStatus.FAILED:
            return
        failed = [check for check in validation.checks if not check.passed]
        # strict mode fails on warnings alone
        errors = [check for check in failed if check.severity == ValidationSeverity.ERROR]
        failed = errors or failed
        raise DataQualityError(
            "Event log failed quality checks: " + "; ".join(check.message for check in failed),
            failed_checks=[check.name for check in failed],
        )

    def load_frame(self, df: pl.DataFrame, source: str = "<frame>") -> LoadResult:
        """
        Validate and normalize an already-read frame.

        Rows are normalized before the quality result is enforced, so a bad
        row reports its own index. Warnings are kept on the result.

        Raises:
            MissingColumnError: a required column is absent
            IngestionError: a row fails to normalize
            DataQualityError: an error-severity check failed
        """
        started_at = datetime.now(timezone.utc)
        start = time.perf_counter()

        self._check_columns(df)
        validation = self.validator.validate(df) if len(df) else None
        events = parse_events(df.to_dicts(), self.columns)
        self._check_quality(validation)

        duration = time.perf_counter() - start
        logger.info(
            "Event log loaded",
            source=source,
            rows=len(df),
            events=len(events),
            duration_seconds=round(duration, 4),
        )

        return LoadResult(
            source=source,
            rows_read=len(df),
            events=events,
            validation=validation,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            duration_seconds=duration,
        )

    def load(self, path: Union[str, Path]) -> LoadResult:
        """Read and normalize a CSV export"""
        logger.info("Loading event log", path=str(path))
        return self.load_frame(read_event_frame(path, self.config), source=str(path))
