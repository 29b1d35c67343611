"""
Event Filter Stage

Applies a dashboard render's filter options to the event log. The filtered
subset is computed once and shared by every aggregate; the source list is
never modified.

Stage types are banded by numeric stage id:
- 2001-2999: normal
- 3001-3999: elite
- 4001-4999: luck
- 5001-5999: mass
Any other id counts as normal.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Set

import structlog
from pydantic import BaseModel, ConfigDict, Field

from game_balance.models.events import Event, is_repeat_play, is_voluntary_exit

logger = structlog.get_logger(__name__)


class StageType(str, Enum):
    """Stage families selectable in the dashboard"""
    ALL = "all"
    NORMAL = "normal"
    ELITE = "elite"
    LUCK = "luck"
    MASS = "mass"


@dataclass(frozen=True)
class StageBand:
    stage_type: StageType
    first_id: int
    last_id: int

    def contains(self, stage_number: int) -> bool:
        return self.first_id <= stage_number <= self.last_id


STAGE_BANDS = (
    StageBand(StageType.NORMAL, 2001, 2999),
    StageBand(StageType.ELITE, 3001, 3999),
    StageBand(StageType.LUCK, 4001, 4999),
    StageBand(StageType.MASS, 5001, 5999),
)


def parse_stage_number(stage_id: str) -> Optional[int]:
    """Numeric value of a stage id, or None when it is not numeric"""
    try:
        return int(str(stage_id).strip())
    except ValueError:
        return None


def find_stage_band(stage_id: str) -> Optional[StageBand]:
    stage_number = parse_stage_number(stage_id)
    if stage_number is None:
        return None
    for band in STAGE_BANDS:
        if band.contains(stage_number):
            return band
    return None


def classify_stage_type(stage_id: str) -> StageType:
    """Stage type of an id; ids outside every band default to normal"""
    band = find_stage_band(stage_id)
    return band.stage_type if band else StageType.NORMAL


class FilterOptions(BaseModel):
    """Exclusions chosen for one dashboard render"""

    model_config = ConfigDict(frozen=True)

    exclude_voluntary_exits: bool = Field(default=False, description="Drop fails the player quit voluntarily")
    exclude_repeat_plays: bool = Field(default=False, description="Drop plays of already-cleared content")
    stage_type: StageType = Field(default=StageType.ALL, description="Keep only this stage family")
    country_allow_list: Set[str] = Field(
        default_factory=set,
        description="Country codes or names to keep; empty keeps every country",
    )


@dataclass(frozen=True)
class CountryOption:
    code: Optional[str]
    name: Optional[str]


def _build_predicates(options: FilterOptions) -> List[Callable[[Event], bool]]:
    predicates: List[Callable[[Event], bool]] = []

    if options.exclude_voluntary_exits:
        predicates.append(lambda e: not is_voluntary_exit(e))

    if options.exclude_repeat_plays:
        predicates.append(lambda e: not is_repeat_play(e))

    if options.stage_type != StageType.ALL:
        wanted = options.stage_type
        predicates.append(lambda e: classify_stage_type(e.label) == wanted)

    if options.country_allow_list:
        allowed = set(options.country_allow_list)
        predicates.append(
            lambda e: e.country_code in allowed or e.country_name in allowed
        )

    return predicates


def apply_filters(events: Iterable[Event], options: Optional[FilterOptions] = None) -> List[Event]:
    """
    Keep the events that pass every active filter, in input order.

    Args:
        events: Source events (not modified)
        options: Filter toggles; defaults keep everything

    Returns:
        New list with the surviving events
    """
    options = options or FilterOptions()
    events = list(events)
    predicates = _build_predicates(options)

    if not predicates:
        return list(events)

    filtered = [e for e in events if all(p(e) for p in predicates)]
    logger.debug(
        "Filters applied",
        input_events=len(events),
        output_events=len(filtered),
        active_filters=len(predicates),
    )
    return filtered


def get_available_countries(events: Iterable[Event]) -> List[CountryOption]:
    """Distinct countries present in the log, sorted by name then code"""
    seen = {
        CountryOption(code=e.country_code, name=e.country_name)
        for e in events
        if e.country_code or e.country_name
    }
    return sorted(seen, key=lambda c: (c.name or "", c.code or ""))
