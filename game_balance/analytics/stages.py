"""
Per-Stage Aggregator

Groups events by stage id and computes attempt/clear/fail counts, derived
rates and fail-level histograms.

Some telemetry sources do not log `try` events at all, so attempts are
repaired as max(tries, clears + fails). Clear-rate denominators depend on
this repair whenever try logging is incomplete.
"""

from collections import Counter
from typing import Iterable, List, Sequence

import structlog

from game_balance.models.aggregates import StageStats, StageVoluntaryExitRate
from game_balance.models.events import (
    Event,
    is_clear,
    is_fail,
    is_repeat_play,
    is_try,
    is_voluntary_exit,
)
from game_balance.transformation.filters import find_stage_band
from .utils import group_by_stage, safe_div, safe_rate, sort_stage_ids

logger = structlog.get_logger(__name__)


def count_attempts(try_count: int, clear_count: int, fail_count: int) -> int:
    """Observed tries, or clears + fails when that is larger"""
    return max(try_count, clear_count + fail_count)


def _stage_stats(stage_id: str, events: Sequence[Event]) -> StageStats:
    try_count = sum(1 for e in events if is_try(e))
    fail_events = [e for e in events if is_fail(e)]
    clear_count = sum(1 for e in events if is_clear(e))
    fail_count = len(fail_events)
    total_attempts = count_attempts(try_count, clear_count, fail_count)

    fail_levels = [
        e.properties.last_level for e in fail_events if e.properties.last_level is not None
    ]
    histogram = Counter(fail_levels)

    return StageStats(
        stage_id=stage_id,
        total_attempts=total_attempts,
        clears=clear_count,
        fails=fail_count,
        voluntary_exits=sum(1 for e in fail_events if is_voluntary_exit(e)),
        repeat_plays=sum(1 for e in events if is_repeat_play(e)),
        clear_rate=safe_rate(clear_count, total_attempts),
        average_fail_level=safe_div(sum(fail_levels), len(fail_levels)),
        fails_by_level={level: histogram[level] for level in sorted(histogram)},
    )


def calculate_stage_stats(events: Iterable[Event]) -> List[StageStats]:
    """
    Statistics for every stage present in the events.

    Args:
        events: Filtered event log

    Returns:
        One StageStats per stage id, in numeric stage order
    """
    stats = [
        _stage_stats(stage_id, stage_events)
        for stage_id, stage_events in group_by_stage(events).items()
    ]
    logger.debug("Stage stats calculated", stages=len(stats))
    return stats


def get_stage_ids(events: Iterable[Event]) -> List[str]:
    """Distinct stage ids in numeric stage order"""
    return sort_stage_ids(e.label for e in events)


def format_stage_id(stage_id: str) -> str:
    """
    Display label for a stage id.

    "2015" -> "Normal 15", "3001" -> "Elite 1". Ids outside every stage band
    are returned unchanged.
    """
    band = find_stage_band(stage_id)
    if band is None:
        return stage_id
    offset = int(stage_id) - band.first_id + 1
    return f"{band.stage_type.value.title()} {offset}"


def overall_clear_rate(events: Iterable[Event]) -> float:
    """Clear rate over the whole log, with the same attempt repair as per stage"""
    try_count = clear_count = fail_count = 0
    for e in events:
        if is_try(e):
            try_count += 1
        elif is_clear(e):
            clear_count += 1
        elif is_fail(e):
            fail_count += 1
    return safe_rate(clear_count, count_attempts(try_count, clear_count, fail_count))


def voluntary_exit_rate(events: Iterable[Event]) -> float:
    """
    Share of fails that were voluntary exits.

    Dashboards pass the unfiltered log so the rate reflects all raw failures
    regardless of the chosen exclusions.
    """
    fails = voluntary = 0
    for e in events:
        if is_fail(e):
            fails += 1
            if is_voluntary_exit(e):
                voluntary += 1
    return safe_rate(voluntary, fails)


def count_voluntary_exits(events: Iterable[Event]) -> int:
    return sum(1 for e in events if is_voluntary_exit(e))


def rank_voluntary_exit_stages(
    stats: Iterable[StageStats],
    limit: int = 10,
) -> List[StageVoluntaryExitRate]:
    """Stages with fails, ranked by voluntary exit share (highest first)"""
    rows = [
        StageVoluntaryExitRate(
            stage_id=s.stage_id,
            fails=s.fails,
            voluntary_exits=s.voluntary_exits,
            voluntary_exit_rate=safe_rate(s.voluntary_exits, s.fails),
        )
        for s in stats
        if s.fails > 0
    ]
    rows.sort(key=lambda r: r.voluntary_exit_rate, reverse=True)
    return rows[:limit]
