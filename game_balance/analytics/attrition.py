"""
Stage and User Attrition

Loss of attempts, or of distinct users, from one stage to the next in
numeric stage order. User attrition also tracks loss against the first
stage. Events without a user id never count as a user.
"""

from typing import Dict, Iterable, List, Sequence, Set

import structlog

from game_balance.models.aggregates import StageAttritionData, StageStats, UserAttritionData
from game_balance.models.events import Event
from .stages import calculate_stage_stats
from .utils import compute_attrition, sort_stage_ids

logger = structlog.get_logger(__name__)


def stage_attrition_from_stats(stats: Sequence[StageStats]) -> List[StageAttritionData]:
    """Attempt attrition over already-computed stage stats (kept in their order)"""
    steps = compute_attrition([s.total_attempts for s in stats])
    return [
        StageAttritionData(
            stage_id=s.stage_id,
            attempts=step.count,
            attrition_count=step.drop_count,
            attrition_rate=step.drop_rate,
        )
        for s, step in zip(stats, steps)
    ]


def calculate_stage_attrition(events: Iterable[Event]) -> List[StageAttritionData]:
    """Attempt attrition between consecutive stages"""
    return stage_attrition_from_stats(calculate_stage_stats(events))


def users_by_stage(events: Iterable[Event]) -> Dict[str, Set[str]]:
    """Distinct user ids per stage, keyed in numeric stage order"""
    users: Dict[str, Set[str]] = {}
    for event in events:
        if event.user_id:
            users.setdefault(event.label, set()).add(event.user_id)
    return {stage_id: users[stage_id] for stage_id in sort_stage_ids(users)}


def calculate_user_attrition(events: Iterable[Event]) -> List[UserAttritionData]:
    """
    Unique-user attrition between consecutive stages.

    Args:
        events: Filtered event log

    Returns:
        One row per stage that has at least one identified user.
        `cumulative_users` counts the distinct users seen from the first
        stage up to and including this one.
    """
    stage_users = users_by_stage(events)
    steps = compute_attrition([len(users) for users in stage_users.values()])

    seen: Set[str] = set()
    rows: List[UserAttritionData] = []
    for (stage_id, users), step in zip(stage_users.items(), steps):
        seen |= users
        rows.append(
            UserAttritionData(
                stage_id=stage_id,
                unique_users=step.count,
                user_attrition_count=step.drop_count,
                user_attrition_rate=step.drop_rate,
                cumulative_users=len(seen),
                cumulative_attrition_rate=step.cumulative_drop_rate,
            )
        )

    logger.debug("User attrition calculated", stages=len(rows), users=len(seen))
    return rows
