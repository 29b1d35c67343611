"""
Stage Analytics Module
"""
from .attrition import calculate_stage_attrition, calculate_user_attrition, stage_attrition_from_stats
from .dashboard import DashboardReport, build_dashboard
from .difficulty import find_difficulty_spikes, find_significant_spikes
from .first_clear import (
    calculate_all_first_clear,
    calculate_first_clear_by_try_count,
    summarize_first_clear,
)
from .funnel import (
    calculate_funnel_data,
    calculate_stage_funnel_data,
    find_critical_dropoffs,
    funnel_retention,
)
from .stages import (
    calculate_stage_stats,
    format_stage_id,
    get_stage_ids,
    overall_clear_rate,
    rank_voluntary_exit_stages,
    voluntary_exit_rate,
)
from .users import calculate_user_stage_stats

__all__ = [
    "calculate_stage_attrition",
    "calculate_user_attrition",
    "stage_attrition_from_stats",
    "DashboardReport",
    "build_dashboard",
    "find_difficulty_spikes",
    "find_significant_spikes",
    "calculate_all_first_clear",
    "calculate_first_clear_by_try_count",
    "summarize_first_clear",
    "calculate_funnel_data",
    "calculate_stage_funnel_data",
    "find_critical_dropoffs",
    "funnel_retention",
    "calculate_stage_stats",
    "format_stage_id",
    "get_stage_ids",
    "overall_clear_rate",
    "rank_voluntary_exit_stages",
    "voluntary_exit_rate",
    "calculate_user_stage_stats",
]
