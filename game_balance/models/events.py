"""
Telemetry Event Model

Canonical event record produced by ingestion and the action classifiers that
every aggregate consults. Events are immutable once created.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


MIN_LEVEL = 1
MAX_LEVEL = 20


class EventAction(str, Enum):
    """Actions logged per stage attempt"""
    TRY = "try"
    CLEAR = "clear"
    FAIL = "fail"
    CLEAR_IS_FIRST = "clearIsFirst"  # user's first clear of the stage
    FAIL_IS_FIRST = "failIsFirst"  # user's first fail of the stage


class ExitType(str, Enum):
    """Reasons a run ended without a clear"""
    VOLUNTARY_EXIT = "voluntary_exit"


CLEAR_ACTIONS = frozenset({EventAction.CLEAR, EventAction.CLEAR_IS_FIRST})
FAIL_ACTIONS = frozenset({EventAction.FAIL, EventAction.FAIL_IS_FIRST})


@dataclass(frozen=True)
class EventProperties:
    """Structured payload decoded from the custom properties column"""
    last_level: Optional[int] = None  # level the run ended on, fail events only
    exit_type: Optional[str] = None
    is_repeat_play: Optional[bool] = None


@dataclass(frozen=True)
class Event:
    """One row of stage telemetry"""
    category: str
    action: EventAction
    label: str
    value: Optional[str] = None
    properties: EventProperties = field(default_factory=EventProperties)
    user_id: Optional[str] = None
    country_code: Optional[str] = None
    country_name: Optional[str] = None

    @property
    def stage_id(self) -> str:
        return self.label


def is_try(event: Event) -> bool:
    return event.action == EventAction.TRY


def is_clear(event: Event) -> bool:
    """Clear or first clear"""
    return event.action in CLEAR_ACTIONS


def is_fail(event: Event) -> bool:
    """Fail or first fail"""
    return event.action in FAIL_ACTIONS


def is_first_clear(event: Event) -> bool:
    return event.action == EventAction.CLEAR_IS_FIRST


def is_voluntary_exit(event: Event) -> bool:
    """A fail the player chose by quitting"""
    return is_fail(event) and event.properties.exit_type == ExitType.VOLUNTARY_EXIT.value


def is_repeat_play(event: Event) -> bool:
    return event.properties.is_repeat_play is True
