"""
Event and Aggregate Models
"""
from .events import (
    MAX_LEVEL,
    MIN_LEVEL,
    Event,
    EventAction,
    EventProperties,
    ExitType,
    is_clear,
    is_fail,
    is_first_clear,
    is_repeat_play,
    is_try,
    is_voluntary_exit,
)
from .aggregates import (
    DifficultySpike,
    FirstClearByTryCount,
    FirstClearStageData,
    FirstClearSummary,
    FunnelData,
    SignificantSpike,
    StageAttritionData,
    StageStats,
    StageVoluntaryExitRate,
    UserAttritionData,
    UserStageStats,
)

__all__ = [
    "MAX_LEVEL",
    "MIN_LEVEL",
    "Event",
    "EventAction",
    "EventProperties",
    "ExitType",
    "is_clear",
    "is_fail",
    "is_first_clear",
    "is_repeat_play",
    "is_try",
    "is_voluntary_exit",
    "DifficultySpike",
    "FirstClearByTryCount",
    "FirstClearStageData",
    "FirstClearSummary",
    "FunnelData",
    "SignificantSpike",
    "StageAttritionData",
    "StageStats",
    "StageVoluntaryExitRate",
    "UserAttritionData",
    "UserStageStats",
]
