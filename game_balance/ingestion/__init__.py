"""
Data Ingestion Module
"""
from .errors import (
    DataQualityError,
    IngestionError,
    MissingColumnError,
    PropertiesParseError,
    UnknownActionError,
)
from .normalizer import DEFAULT_COLUMNS, EventColumns, parse_events, parse_properties
from .csv_loader import EventLogLoader, LoadResult, list_event_files, read_event_frame

__all__ = [
    "DataQualityError",
    "IngestionError",
    "MissingColumnError",
    "PropertiesParseError",
    "UnknownActionError",
    "DEFAULT_COLUMNS",
    "EventColumns",
    "parse_events",
    "parse_properties",
    "EventLogLoader",
    "LoadResult",
    "list_event_files",
    "read_event_frame",
]
