"""
Tutorial Funnel Module
"""
from .processor import (
    TutorialEvent,
    TutorialFileInfo,
    TutorialFunnelData,
    TutorialReport,
    TutorialStepStats,
    build_tutorial_report,
    calculate_tutorial_funnel,
    calculate_tutorial_step_stats,
    filter_funnel_outliers,
    filter_unique_user_events,
    get_tutorial_step_ids,
    get_tutorial_unique_user_count,
    list_tutorial_files,
    load_tutorial_rows,
    parse_tutorial_rows,
    tutorial_completion_rate,
)
from .steps import TUTORIAL_STEPS, describe_step, short_step_description, tutorial_phases

__all__ = [
    "TutorialEvent",
    "TutorialFileInfo",
    "TutorialFunnelData",
    "TutorialReport",
    "TutorialStepStats",
    "build_tutorial_report",
    "calculate_tutorial_funnel",
    "calculate_tutorial_step_stats",
    "filter_funnel_outliers",
    "filter_unique_user_events",
    "get_tutorial_step_ids",
    "get_tutorial_unique_user_count",
    "list_tutorial_files",
    "load_tutorial_rows",
    "parse_tutorial_rows",
    "tutorial_completion_rate",
    "TUTORIAL_STEPS",
    "describe_step",
    "short_step_description",
    "tutorial_phases",
]
