"""
Aggregate Records

Plain value records returned by the analytics layer. They carry no identity
beyond their key field and are rebuilt from scratch on every call.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class StageStats:
    """Attempt/clear/fail statistics for one stage"""
    stage_id: str
    total_attempts: int
    clears: int
    fails: int
    voluntary_exits: int
    repeat_plays: int
    clear_rate: float
    average_fail_level: float
    fails_by_level: Dict[int, int] = field(default_factory=dict)


@dataclass
class DifficultySpike:
    """Fail count and rate for one level"""
    level: int
    fail_count: int
    fail_rate: float


@dataclass
class SignificantSpike:
    """A level whose fail rate jumps over the previous level"""
    level: int
    fail_rate: float
    increase: float


@dataclass
class FunnelData:
    """Players reaching, dropping at and passing one level"""
    level: int
    reached: int
    remaining: int
    dropped: int
    drop_rate: float


@dataclass
class StageAttritionData:
    """Attempt loss against the preceding stage"""
    stage_id: str
    attempts: int
    attrition_count: int
    attrition_rate: float


@dataclass
class UserAttritionData:
    """Unique-user loss against the preceding and the first stage"""
    stage_id: str
    unique_users: int
    user_attrition_count: int
    user_attrition_rate: float
    cumulative_users: int
    cumulative_attrition_rate: float


@dataclass
class UserStageStats:
    """User-scoped and attempt-scoped outcomes for one stage"""
    stage_id: str
    unique_users: int
    total_tries: int
    total_attempts: int
    total_clears: int
    total_fails: int
    users_cleared: int
    users_failed: int
    user_clear_rate: float
    clear_probability: float
    average_attempts_per_user: float
    users_with_voluntary_exit: int
    users_with_repeat_play: int


@dataclass
class FirstClearByTryCount:
    try_count: int
    user_count: int


@dataclass
class FirstClearStageData:
    """How many tries users needed for their first clear of a stage"""
    stage_id: str
    total_first_clear_users: int
    by_try_count: List[FirstClearByTryCount] = field(default_factory=list)


@dataclass
class FirstClearSummary:
    total_users: int
    average_try_count: float
    one_shot_users: int
    one_shot_rate: float
    max_try_count: int
    max_try_count_users: int


@dataclass
class StageVoluntaryExitRate:
    """Share of a stage's fails that were voluntary exits"""
    stage_id: str
    fails: int
    voluntary_exits: int
    voluntary_exit_rate: float
