"""
Tutorial API Endpoints
"""

from dataclasses import asdict
from typing import Any, Dict, List

import structlog
from fastapi import APIRouter
from pydantic import BaseModel, Field

from game_balance.tutorial import (
    TUTORIAL_STEPS,
    build_tutorial_report,
    list_tutorial_files,
    parse_tutorial_rows,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


class TutorialReportRequest(BaseModel):
    """Raw tutorial-log rows and the dedupe mode"""
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    dedupe: bool = Field(default=True, description="Count each user once per step")
    keep_first: bool = Field(default=True, description="Keep the first occurrence when deduplicating")


@router.post("/report")
def get_tutorial_report(request: TutorialReportRequest) -> Dict[str, Any]:
    """Tutorial funnel, outlier-filtered funnel and danger steps"""
    events = parse_tutorial_rows(request.rows)
    report = build_tutorial_report(events, dedupe=request.dedupe, keep_first=request.keep_first)
    return report.to_dict()


@router.get("/files")
async def get_tutorial_files() -> Dict[str, List[Dict[str, Any]]]:
    """Tutorial exports available on disk, newest first"""
    return {"files": [asdict(f) for f in list_tutorial_files()]}


@router.get("/steps")
async def get_tutorial_steps() -> List[Dict[str, Any]]:
    """The tutorial step catalogue in step order"""
    return [asdict(step) for step in TUTORIAL_STEPS.values()]
