"""
User-Stage Statistics

Per stage, two tallies are kept per user: tries, and clear/fail outcomes.
Try logging is unreliable, so attempts are counted from outcomes.

Two clear rates are exposed and answer different questions:
- user_clear_rate: share of users who ever cleared the stage;
- clear_probability: share of individual outcomes that were clears.
"""

from collections import Counter
from typing import Iterable, List, Sequence

import structlog

from game_balance.models.aggregates import UserStageStats
from game_balance.models.events import (
    Event,
    is_clear,
    is_fail,
    is_repeat_play,
    is_try,
    is_voluntary_exit,
)
from .utils import group_by_stage, safe_div, safe_rate

logger = structlog.get_logger(__name__)


def _user_stage_stats(stage_id: str, events: Sequence[Event]) -> UserStageStats:
    tries: Counter = Counter()
    clears: Counter = Counter()
    fails: Counter = Counter()
    users = set()
    voluntary_exit_users = set()
    repeat_play_users = set()

    for event in events:
        user = event.user_id
        users.add(user)
        if is_try(event):
            tries[user] += 1
        elif is_clear(event):
            clears[user] += 1
        elif is_fail(event):
            fails[user] += 1
        if is_voluntary_exit(event):
            voluntary_exit_users.add(user)
        if is_repeat_play(event):
            repeat_play_users.add(user)

    total_clears = sum(clears.values())
    total_fails = sum(fails.values())
    total_attempts = total_clears + total_fails

    return UserStageStats(
        stage_id=stage_id,
        unique_users=len(users),
        total_tries=sum(tries.values()),
        total_attempts=total_attempts,
        total_clears=total_clears,
        total_fails=total_fails,
        users_cleared=len(clears),
        users_failed=len(fails),
        user_clear_rate=safe_rate(len(clears), len(users)),
        clear_probability=safe_rate(total_clears, total_attempts),
        average_attempts_per_user=safe_div(total_attempts, len(users)),
        users_with_voluntary_exit=len(voluntary_exit_users),
        users_with_repeat_play=len(repeat_play_users),
    )


def calculate_user_stage_stats(events: Iterable[Event]) -> List[UserStageStats]:
    """
    User-scoped statistics per stage.

    Only events carrying a user id take part; a stage with no identified
    user is left out.

    Returns:
        One UserStageStats per stage, in numeric stage order
    """
    identified = (e for e in events if e.user_id)
    stats = [
        _user_stage_stats(stage_id, stage_events)
        for stage_id, stage_events in group_by_stage(identified).items()
    ]
    logger.debug("User stage stats calculated", stages=len(stats))
    return stats
