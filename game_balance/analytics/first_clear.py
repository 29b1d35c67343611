"""
First-Clear Try-Count Distribution

For each user with a first clear at a stage, counts that user's tries at the
stage. Missing try logging is floored to one try, since the clear itself was
an attempt.
"""

from collections import Counter
from typing import Iterable, List

from game_balance.models.aggregates import (
    FirstClearByTryCount,
    FirstClearStageData,
    FirstClearSummary,
)
from game_balance.models.events import Event, is_first_clear, is_try
from .utils import group_by_stage, safe_div, safe_rate


def _first_clear_data(stage_id: str, events: List[Event]) -> FirstClearStageData:
    first_clear_users = {e.user_id for e in events if e.user_id and is_first_clear(e)}
    tries = Counter(e.user_id for e in events if e.user_id in first_clear_users and is_try(e))

    distribution = Counter(max(1, tries[user]) for user in first_clear_users)
    return FirstClearStageData(
        stage_id=stage_id,
        total_first_clear_users=len(first_clear_users),
        by_try_count=[
            FirstClearByTryCount(try_count=count, user_count=distribution[count])
            for count in sorted(distribution)
        ],
    )


def calculate_first_clear_by_try_count(events: Iterable[Event], stage_id: str) -> FirstClearStageData:
    """Try-count distribution of first clears at one stage"""
    return _first_clear_data(stage_id, [e for e in events if e.label == stage_id])


def calculate_all_first_clear(events: Iterable[Event]) -> List[FirstClearStageData]:
    """Try-count distribution of first clears for every stage, in numeric stage order"""
    return [
        _first_clear_data(stage_id, stage_events)
        for stage_id, stage_events in group_by_stage(events).items()
    ]


def summarize_first_clear(data: FirstClearStageData) -> FirstClearSummary:
    """Average tries, one-shot share and the slowest bucket of a distribution"""
    total_users = data.total_first_clear_users
    if not data.by_try_count:
        return FirstClearSummary(
            total_users=total_users,
            average_try_count=0.0,
            one_shot_users=0,
            one_shot_rate=0.0,
            max_try_count=0,
            max_try_count_users=0,
        )

    total_tries = sum(b.try_count * b.user_count for b in data.by_try_count)
    one_shot = sum(b.user_count for b in data.by_try_count if b.try_count == 1)
    slowest = data.by_try_count[-1]

    return FirstClearSummary(
        total_users=total_users,
        average_try_count=safe_div(total_tries, total_users),
        one_shot_users=one_shot,
        one_shot_rate=safe_rate(one_shot, total_users),
        max_try_count=slowest.try_count,
        max_try_count_users=slowest.user_count,
    )
