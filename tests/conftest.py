"""
Test Suite Configuration
"""
import json
from typing import Any, Callable, Dict, Optional

import pytest

from game_balance.config import Settings
from game_balance.models.events import Event, EventAction, EventProperties


def make_event(
    action: str,
    label: str = "2001",
    user_id: Optional[str] = None,
    last_level: Optional[int] = None,
    exit_type: Optional[str] = None,
    is_repeat_play: Optional[bool] = None,
    country_code: Optional[str] = None,
    country_name: Optional[str] = None,
) -> Event:
    """Build an Event with only the fields a test cares about"""
    return Event(
        category="stage (App)",
        action=EventAction(action),
        label=label,
        properties=EventProperties(
            last_level=last_level,
            exit_type=exit_type,
            is_repeat_play=is_repeat_play,
        ),
        user_id=user_id,
        country_code=country_code,
        country_name=country_name,
    )


def make_row(
    action: str,
    label: str = "2001",
    user_id: Optional[str] = None,
    properties: Optional[Dict[str, Any]] = None,
    country_code: Optional[str] = None,
    country_name: Optional[str] = None,
) -> Dict[str, Optional[str]]:
    """Build a raw export row keyed by column name"""
    return {
        "Event Category": "stage (App)",
        "Event Action": action,
        "Event Label": label,
        "Event Value": None,
        "Custom Event Properties": json.dumps(properties) if properties is not None else None,
        "User ID": user_id,
        "Client IP Country": country_name,
        "Client IP Country Code": country_code,
    }


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def event_factory() -> Callable[..., Event]:
    return make_event


@pytest.fixture
def row_factory() -> Callable[..., Dict[str, Optional[str]]]:
    return make_row


@pytest.fixture
def two_stage_events():
    """
    Two normal stages and three players.

    u1 clears 2001 first try, then fails 2002 at level 5 and clears it.
    u2 fails 2001 twice (the second time quitting) and clears it.
    u3 quits 2001 at level 3 and never returns.
    """
    return [
        make_event("try", "2001", "u1"),
        make_event("clearIsFirst", "2001", "u1"),
        make_event("try", "2001", "u2"),
        make_event("failIsFirst", "2001", "u2", last_level=4),
        make_event("try", "2001", "u2"),
        make_event("fail", "2001", "u2", last_level=6, exit_type="voluntary_exit"),
        make_event("try", "2001", "u2"),
        make_event("clearIsFirst", "2001", "u2"),
        make_event("try", "2001", "u3"),
        make_event("failIsFirst", "2001", "u3", last_level=3, exit_type="voluntary_exit"),
        make_event("try", "2002", "u1"),
        make_event("failIsFirst", "2002", "u1", last_level=5),
        make_event("try", "2002", "u1"),
        make_event("clearIsFirst", "2002", "u1"),
        make_event("try", "2002", "u2"),
        make_event("clearIsFirst", "2002", "u2"),
    ]
