"""
Analytics API Endpoints

REST API for the stage dashboard. Clients post raw event-log rows (column
name -> value, as in the CSV export) together with the filter toggles.
"""

from dataclasses import asdict
from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from game_balance.analytics import (
    build_dashboard,
    calculate_first_clear_by_try_count,
    calculate_stage_funnel_data,
    find_critical_dropoffs,
    funnel_retention,
    summarize_first_clear,
)
from game_balance.config import get_settings
from game_balance.ingestion import IngestionError, parse_events
from game_balance.models.events import Event
from game_balance.transformation import FilterOptions, apply_filters, get_available_countries

router = APIRouter()
logger = structlog.get_logger(__name__)


class EventLogRequest(BaseModel):
    """Raw event-log rows plus the filters to apply"""
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    filters: FilterOptions = Field(default_factory=FilterOptions)


def _events(request: EventLogRequest) -> List[Event]:
    try:
        return parse_events(request.rows)
    except IngestionError as e:
        logger.warning("Rejected event log", error=str(e), row_index=e.row_index)
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.post("/dashboard")
def get_dashboard(request: EventLogRequest) -> Dict[str, Any]:
    """Every dashboard aggregate for the posted log"""
    report = build_dashboard(_events(request), request.filters)
    return report.to_dict()


@router.post("/countries")
def get_countries(request: EventLogRequest) -> List[Dict[str, Any]]:
    """Countries present in the posted log, for the country filter"""
    return [asdict(c) for c in get_available_countries(_events(request))]


@router.post("/stages/{stage_id}/funnel")
def get_stage_funnel(stage_id: str, request: EventLogRequest) -> Dict[str, Any]:
    """Level funnel of one stage after filtering"""
    config = get_settings().analytics
    events = apply_filters(_events(request), request.filters)
    funnel = calculate_stage_funnel_data(events, stage_id, config.max_level)
    return {
        "stage_id": stage_id,
        "funnel": [asdict(row) for row in funnel],
        "critical_dropoffs": [
            asdict(row) for row in find_critical_dropoffs(funnel, config.critical_drop_rate_threshold)
        ],
        "retention": funnel_retention(funnel),
    }


@router.post("/stages/{stage_id}/first-clear")
def get_stage_first_clear(stage_id: str, request: EventLogRequest) -> Dict[str, Any]:
    """Try-count distribution of first clears at one stage"""
    events = apply_filters(_events(request), request.filters)
    data = calculate_first_clear_by_try_count(events, stage_id)
    return {
        **asdict(data),
        "summary": asdict(summarize_first_clear(data)),
    }
