"""
Difficulty Curve Builder

Approximates, for every level of a stage, how many runs reached it and what
share of them failed there. There is no level-entry telemetry, so traffic is
reconstructed:

1. every `try` event is assumed to reach every level;
2. every fail at level L removes one run from each level after L
   (floored at zero), since that run stopped at L.

Fail counts are a direct histogram. The reconstruction is exact only when
each try ends in exactly one clear or fail within the level range; treat the
rates as an approximation.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

import structlog

from game_balance.models.aggregates import DifficultySpike, SignificantSpike
from game_balance.models.events import MAX_LEVEL, MIN_LEVEL, Event, is_fail, is_try
from .utils import safe_rate

logger = structlog.get_logger(__name__)


def estimate_level_attempts(events: Sequence[Event], max_level: int = MAX_LEVEL) -> Dict[int, int]:
    """Reconstructed runs reaching each level"""
    levels = range(MIN_LEVEL, max_level + 1)
    try_count = sum(1 for e in events if is_try(e))
    attempts = {level: try_count for level in levels}

    for event in events:
        if not is_fail(event) or event.properties.last_level is None:
            continue
        for level in range(event.properties.last_level + 1, max_level + 1):
            if level in attempts:
                attempts[level] = max(0, attempts[level] - 1)

    return attempts


def find_difficulty_spikes(events: Iterable[Event], max_level: int = MAX_LEVEL) -> List[DifficultySpike]:
    """
    Fail count and fail rate for every level from 1 to max_level.

    Args:
        events: Filtered event log
        max_level: Highest level inside a stage

    Returns:
        One DifficultySpike per level, in level order
    """
    events = list(events)
    fails_by_level = Counter(
        e.properties.last_level
        for e in events
        if is_fail(e) and e.properties.last_level is not None
    )
    attempts = estimate_level_attempts(events, max_level)

    spikes = [
        DifficultySpike(
            level=level,
            fail_count=fails_by_level[level],
            fail_rate=safe_rate(fails_by_level[level], attempts[level]),
        )
        for level in range(MIN_LEVEL, max_level + 1)
    ]
    logger.debug("Difficulty curve built", events=len(events), levels=len(spikes))
    return spikes


def find_significant_spikes(
    spikes: Sequence[DifficultySpike],
    fail_rate_threshold: float = 20.0,
    increase_threshold: float = 10.0,
) -> List[SignificantSpike]:
    """Levels whose fail rate is high and jumped over the previous level"""
    found: List[SignificantSpike] = []
    previous: Optional[DifficultySpike] = None
    for spike in spikes:
        if previous is not None:
            increase = spike.fail_rate - previous.fail_rate
            if spike.fail_rate > fail_rate_threshold and increase > increase_threshold:
                found.append(
                    SignificantSpike(level=spike.level, fail_rate=spike.fail_rate, increase=increase)
                )
        previous = spike
    return found
