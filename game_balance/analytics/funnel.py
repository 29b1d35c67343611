"""
Funnel Builders

Reconstructs, level by level, how many players reached a level, dropped
there and went on. Everyone who cleared the stage, plus everyone who failed
at this level or a later one, is counted as having reached the level:

    reached(L)   = clears + sum(fails_by_level[l] for l in L..max_level)
    dropped(L)   = fails_by_level[L]
    remaining(L) = reached(L) - dropped(L)
"""

from collections import Counter
from typing import Iterable, List, Sequence

import structlog

from game_balance.models.aggregates import FunnelData
from game_balance.models.events import MAX_LEVEL, MIN_LEVEL, Event, is_clear, is_fail
from .utils import safe_rate

logger = structlog.get_logger(__name__)


def calculate_funnel_data(events: Iterable[Event], max_level: int = MAX_LEVEL) -> List[FunnelData]:
    """
    Level funnel over all stages in the events.

    Args:
        events: Filtered event log
        max_level: Highest level inside a stage

    Returns:
        One FunnelData per level from 1 to max_level
    """
    total_clears = 0
    fails_by_level: Counter = Counter()
    for event in events:
        if is_clear(event):
            total_clears += 1
        elif is_fail(event) and event.properties.last_level is not None:
            fails_by_level[event.properties.last_level] += 1

    levels = range(MIN_LEVEL, max_level + 1)
    funnel: List[FunnelData] = []
    # fails at this level or later, walking backwards from the last level
    later_fails = 0
    for level in reversed(levels):
        later_fails += fails_by_level[level]
        reached = total_clears + later_fails
        dropped = fails_by_level[level]
        funnel.append(
            FunnelData(
                level=level,
                reached=reached,
                remaining=reached - dropped,
                dropped=dropped,
                drop_rate=safe_rate(dropped, reached),
            )
        )
    funnel.reverse()

    logger.debug("Funnel built", clears=total_clears, levels=len(funnel))
    return funnel


def calculate_stage_funnel_data(
    events: Iterable[Event],
    stage_id: str,
    max_level: int = MAX_LEVEL,
) -> List[FunnelData]:
    """Level funnel restricted to one stage"""
    return calculate_funnel_data((e for e in events if e.label == stage_id), max_level)


def find_critical_dropoffs(funnel: Sequence[FunnelData], threshold: float = 15.0) -> List[FunnelData]:
    """Levels losing more than `threshold` percent of their players, worst first"""
    return sorted(
        (row for row in funnel if row.drop_rate > threshold),
        key=lambda row: row.drop_rate,
        reverse=True,
    )


def funnel_retention(funnel: Sequence[FunnelData]) -> float:
    """Players left after the last level as a share of those reaching the first"""
    if not funnel:
        return 0.0
    return safe_rate(funnel[-1].remaining, funnel[0].reached)
