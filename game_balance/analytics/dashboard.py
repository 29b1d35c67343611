"""
Dashboard Report

Builds every stage aggregate for one dashboard render. The filter stage runs
once and its result is shared by all aggregates; the voluntary-exit figures
are taken from the unfiltered log so they describe all raw failures.
"""

import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import structlog

from game_balance.config import get_settings
from game_balance.config.settings import AnalyticsSettings
from game_balance.models.aggregates import (
    DifficultySpike,
    FirstClearStageData,
    FunnelData,
    SignificantSpike,
    StageAttritionData,
    StageStats,
    StageVoluntaryExitRate,
    UserAttritionData,
    UserStageStats,
)
from game_balance.models.events import Event
from game_balance.transformation.filters import (
    CountryOption,
    FilterOptions,
    apply_filters,
    get_available_countries,
)
from .attrition import calculate_user_attrition, stage_attrition_from_stats
from .difficulty import find_difficulty_spikes, find_significant_spikes
from .first_clear import calculate_all_first_clear
from .funnel import calculate_funnel_data, find_critical_dropoffs, funnel_retention
from .stages import (
    calculate_stage_stats,
    count_voluntary_exits,
    overall_clear_rate,
    rank_voluntary_exit_stages,
    voluntary_exit_rate,
)
from .users import calculate_user_stage_stats

logger = structlog.get_logger(__name__)


@dataclass
class DashboardReport:
    """All aggregates of one dashboard render"""
    filters: FilterOptions
    total_events: int
    total_stages: int
    overall_clear_rate: float
    voluntary_exit_rate: float
    excluded_voluntary_exits: int
    stage_stats: List[StageStats] = field(default_factory=list)
    difficulty_spikes: List[DifficultySpike] = field(default_factory=list)
    significant_spikes: List[SignificantSpike] = field(default_factory=list)
    funnel: List[FunnelData] = field(default_factory=list)
    critical_dropoffs: List[FunnelData] = field(default_factory=list)
    funnel_retention: float = 0.0
    stage_attrition: List[StageAttritionData] = field(default_factory=list)
    user_attrition: List[UserAttritionData] = field(default_factory=list)
    user_stage_stats: List[UserStageStats] = field(default_factory=list)
    first_clear: List[FirstClearStageData] = field(default_factory=list)
    voluntary_exit_ranking: List[StageVoluntaryExitRate] = field(default_factory=list)
    available_countries: List[CountryOption] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation"""
        data = asdict(self)
        data["filters"] = self.filters.model_dump(mode="json")
        data["generated_at"] = self.generated_at.isoformat()
        return data


def build_dashboard(
    events: Iterable[Event],
    options: Optional[FilterOptions] = None,
    config: Optional[AnalyticsSettings] = None,
) -> DashboardReport:
    """
    Compute every dashboard aggregate for one filter configuration.

    Args:
        events: Full, unfiltered event log
        options: Filter toggles for this render
        config: Analytics thresholds; defaults to application settings

    Returns:
        DashboardReport
    """
    options = options or FilterOptions()
    config = config or get_settings().analytics
    start = time.perf_counter()

    all_events = list(events)
    filtered = apply_filters(all_events, options)

    logger.info(
        "Building dashboard",
        events=len(all_events),
        filtered_events=len(filtered),
        stage_type=options.stage_type.value,
    )

    stage_stats = calculate_stage_stats(filtered)
    spikes = find_difficulty_spikes(filtered, config.max_level)
    funnel = calculate_funnel_data(filtered, config.max_level)

    excluded = count_voluntary_exits(all_events) if options.exclude_voluntary_exits else 0

    report = DashboardReport(
        filters=options,
        total_events=len(filtered),
        total_stages=len(stage_stats),
        overall_clear_rate=overall_clear_rate(filtered),
        voluntary_exit_rate=voluntary_exit_rate(all_events),
        excluded_voluntary_exits=excluded,
        stage_stats=stage_stats,
        difficulty_spikes=spikes,
        significant_spikes=find_significant_spikes(
            spikes,
            fail_rate_threshold=config.spike_fail_rate_threshold,
            increase_threshold=config.spike_increase_threshold,
        ),
        funnel=funnel,
        critical_dropoffs=find_critical_dropoffs(funnel, config.critical_drop_rate_threshold),
        funnel_retention=funnel_retention(funnel),
        stage_attrition=stage_attrition_from_stats(stage_stats),
        user_attrition=calculate_user_attrition(filtered),
        user_stage_stats=calculate_user_stage_stats(filtered),
        first_clear=calculate_all_first_clear(filtered),
        voluntary_exit_ranking=rank_voluntary_exit_stages(stage_stats),
        available_countries=get_available_countries(all_events),
    )
    report.duration_seconds = time.perf_counter() - start

    logger.info(
        "Dashboard built",
        stages=report.total_stages,
        duration_seconds=round(report.duration_seconds, 4),
    )
    return report
