"""
Event Row Normalizer

Converts loosely typed event-log rows (column name -> raw string) into typed
Event records. This is the only place untyped data is accepted; everything
downstream works on Event.

The custom properties column holds a JSON object. A malformed blob fails the
whole call: no row is silently dropped.
"""

import json
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

import structlog

from game_balance.models.events import Event, EventAction, EventProperties
from .errors import PropertiesParseError, UnknownActionError

logger = structlog.get_logger(__name__)

RawRow = Mapping[str, Any]


@dataclass(frozen=True)
class EventColumns:
    """Column names of the event log export"""
    category: str = "Event Category"
    action: str = "Event Action"
    label: str = "Event Label"
    value: str = "Event Value"
    properties: str = "Custom Event Properties"
    user_id: str = "User ID"
    country_name: str = "Client IP Country"
    country_code: str = "Client IP Country Code"

    @property
    def required(self) -> List[str]:
        return [self.category, self.action, self.label]


DEFAULT_COLUMNS = EventColumns()

_ACTIONS = {action.value: action for action in EventAction}


def _optional_str(row: RawRow, column: str) -> Optional[str]:
    value = row.get(column)
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


def _coerce_level(value: Any, raw: str, row_index: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise PropertiesParseError("last_level must be an integer", raw, row_index)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as e:
            raise PropertiesParseError("last_level must be an integer", raw, row_index) from e
    raise PropertiesParseError("last_level must be an integer", raw, row_index)


def _coerce_flag(value: Any, raw: str, row_index: Optional[int]) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise PropertiesParseError("is_repeat_play must be a boolean", raw, row_index)


def parse_properties(raw: Optional[str], row_index: Optional[int] = None) -> EventProperties:
    """
    Decode the custom properties blob.

    An empty or missing blob yields empty properties.

    Raises:
        PropertiesParseError: the blob is not valid JSON or not a JSON object
    """
    if raw is None or not str(raw).strip():
        return EventProperties()

    raw = str(raw)
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PropertiesParseError(f"Malformed properties JSON: {e.msg}", raw, row_index) from e

    if not isinstance(payload, dict):
        raise PropertiesParseError("Properties must be a JSON object", raw, row_index)

    exit_type = payload.get("exit_type")
    return EventProperties(
        last_level=_coerce_level(payload.get("last_level"), raw, row_index),
        exit_type=None if exit_type is None else str(exit_type),
        is_repeat_play=_coerce_flag(payload.get("is_repeat_play"), raw, row_index),
    )


def parse_action(raw: Any, row_index: Optional[int] = None) -> EventAction:
    """Map a raw action string onto EventAction"""
    action = _ACTIONS.get(str(raw).strip()) if raw is not None else None
    if action is None:
        raise UnknownActionError(f"Unknown event action {raw!r}", row_index)
    return action


def normalize_row(
    row: RawRow,
    row_index: Optional[int] = None,
    columns: EventColumns = DEFAULT_COLUMNS,
) -> Event:
    """Convert one raw row into an Event"""
    return Event(
        category=str(row.get(columns.category) or ""),
        action=parse_action(row.get(columns.action), row_index),
        label=str(row.get(columns.label) or "").strip(),
        value=_optional_str(row, columns.value),
        properties=parse_properties(row.get(columns.properties), row_index),
        user_id=_optional_str(row, columns.user_id),
        country_code=_optional_str(row, columns.country_code),
        country_name=_optional_str(row, columns.country_name),
    )


def parse_events(
    rows: Iterable[RawRow],
    columns: EventColumns = DEFAULT_COLUMNS,
) -> List[Event]:
    """
    Normalize raw rows into events, preserving input order.

    Args:
        rows: Row mappings keyed by column name
        columns: Column names of the export

    Returns:
        One Event per row, in row order

    Raises:
        IngestionError: any row fails to normalize
    """
    events = [normalize_row(row, index, columns) for index, row in enumerate(rows)]
    logger.debug("Normalized event rows", events=len(events))
    return events
