"""
Ingestion Errors
"""

from typing import List, Optional


class IngestionError(ValueError):
    """Raised when raw event rows cannot be turned into events"""

    def __init__(self, message: str, row_index: Optional[int] = None):
        self.row_index = row_index
        if row_index is not None:
            message = f"Row {row_index}: {message}"
        super().__init__(message)


class PropertiesParseError(IngestionError):
    """The custom properties column is not a JSON object"""

    def __init__(self, message: str, raw: str, row_index: Optional[int] = None):
        self.raw = raw
        super().__init__(message, row_index)


class UnknownActionError(IngestionError):
    """The action column holds a value outside the known actions"""


class MissingColumnError(IngestionError):
    """A required column is absent from the event log"""


class DataQualityError(IngestionError):
    """The event log failed an error-severity quality check"""

    def __init__(self, message: str, failed_checks: Optional[List[str]] = None):
        self.failed_checks = failed_checks or []
        super().__init__(message)
