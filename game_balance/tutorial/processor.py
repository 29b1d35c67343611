"""
Tutorial Funnel Processor

Step-keyed counterpart of the stage analytics. Tutorial events are tagged in
the category column as `tutorial_<NN> (App)`; the step id is the digit run.

When no event of a step carries a user id, the raw event count stands in for
the unique user count.
"""

import re
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import structlog

from game_balance.analytics.utils import compute_attrition, safe_rate
from game_balance.config import get_settings
from game_balance.config.settings import TutorialSettings
from game_balance.ingestion.csv_loader import read_event_frame
from game_balance.ingestion.normalizer import DEFAULT_COLUMNS, EventColumns, RawRow

logger = structlog.get_logger(__name__)

STEP_PATTERN = re.compile(r"tutorial_(\d+)", re.IGNORECASE)

# <project>_<start>_HH_mm_ss+00_00-<end>_HH_mm_ss+00_00_<anything>.csv
EXPORT_FILE_PATTERN = re.compile(
    r"^([^_]+)_(\d{4}-\d{2}-\d{2})_\d{2}_\d{2}_\d{2}\+\d{2}_\d{2}"
    r"-(\d{4}-\d{2}-\d{2})_\d{2}_\d{2}_\d{2}\+\d{2}_\d{2}_.*\.csv$"
)


@dataclass(frozen=True)
class TutorialEvent:
    """One tutorial step event"""
    step_number: str
    category: str
    action: Optional[str] = None
    user_id: Optional[str] = None


@dataclass
class TutorialStepStats:
    step_id: str
    step_number: int
    total_events: int
    unique_users: int


@dataclass
class TutorialFunnelData:
    step_id: str
    step_number: int
    unique_users: int
    dropoff_count: int
    dropoff_rate: float
    cumulative_dropoff_rate: float


@dataclass
class TutorialReport:
    """Everything the tutorial funnel view shows"""
    total_events: int
    unique_users: int
    step_stats: List[TutorialStepStats] = field(default_factory=list)
    funnel: List[TutorialFunnelData] = field(default_factory=list)
    filtered_funnel: List[TutorialFunnelData] = field(default_factory=list)
    filtered_out_steps: int = 0
    danger_steps: List[TutorialFunnelData] = field(default_factory=list)
    special_steps: List[TutorialStepStats] = field(default_factory=list)
    completion_rate: float = 0.0
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TutorialFileInfo:
    """A tutorial export named `<project>_<start>..-<end>.._*.csv`"""
    file_name: str
    display_name: str
    start_date: str
    end_date: str
    file_path: str


def extract_step_number(category: Optional[str]) -> Optional[str]:
    """Step id in a category value ("tutorial_02 (App)" -> "02")"""
    if not category or not isinstance(category, str):
        return None
    match = STEP_PATTERN.search(category)
    return match.group(1) if match else None


def parse_tutorial_rows(
    rows: Iterable[RawRow],
    columns: EventColumns = DEFAULT_COLUMNS,
) -> List[TutorialEvent]:
    """Tutorial events in row order; rows without a tutorial tag are skipped"""
    events: List[TutorialEvent] = []
    skipped = 0
    for row in rows:
        category = row.get(columns.category)
        step = extract_step_number(category)
        if step is None:
            skipped += 1
            continue
        events.append(
            TutorialEvent(
                step_number=step,
                category=category,
                action=row.get(columns.action),
                user_id=row.get(columns.user_id) or None,
            )
        )

    logger.debug("Tutorial rows parsed", events=len(events), skipped=skipped)
    return events


def filter_unique_user_events(
    events: Iterable[TutorialEvent],
    keep_first: bool = True,
) -> List[TutorialEvent]:
    """
    Collapse to one event per (user, step).

    Events without a user id cannot be deduplicated and are all kept.
    Output keeps the position of each surviving event's first occurrence.

    Args:
        events: Tutorial events in log order
        keep_first: Keep the first occurrence per pair; otherwise the last
    """
    kept: Dict[Any, TutorialEvent] = {}
    for index, event in enumerate(events):
        if not event.user_id:
            kept[("anonymous", index)] = event
            continue
        key = (event.user_id, event.step_number)
        if keep_first and key in kept:
            continue
        kept[key] = event
    return list(kept.values())


def _step_sort_key(step_id: str):
    return (int(step_id), step_id)


def get_tutorial_step_ids(events: Iterable[TutorialEvent]) -> List[str]:
    """Distinct step ids in numeric order"""
    return sorted({e.step_number for e in events}, key=_step_sort_key)


def get_tutorial_unique_user_count(events: Iterable[TutorialEvent]) -> int:
    """Distinct users, or the event count when no event has a user id"""
    events = list(events)
    users = {e.user_id for e in events if e.user_id}
    return len(users) if users else len(events)


def calculate_tutorial_step_stats(events: Iterable[TutorialEvent]) -> List[TutorialStepStats]:
    """Event and unique-user counts per step, in numeric step order"""
    totals: Dict[str, int] = {}
    users: Dict[str, set] = {}
    for event in events:
        totals[event.step_number] = totals.get(event.step_number, 0) + 1
        step_users = users.setdefault(event.step_number, set())
        if event.user_id:
            step_users.add(event.user_id)

    return [
        TutorialStepStats(
            step_id=step_id,
            step_number=int(step_id),
            total_events=totals[step_id],
            unique_users=len(users[step_id]) or totals[step_id],
        )
        for step_id in sorted(totals, key=_step_sort_key)
    ]


def calculate_tutorial_funnel(events: Iterable[TutorialEvent]) -> List[TutorialFunnelData]:
    """Step-over-step and cumulative user drop-off"""
    stats = calculate_tutorial_step_stats(events)
    steps = compute_attrition([s.unique_users for s in stats])
    return [
        TutorialFunnelData(
            step_id=stat.step_id,
            step_number=stat.step_number,
            unique_users=step.count,
            dropoff_count=step.drop_count,
            dropoff_rate=step.drop_rate,
            cumulative_dropoff_rate=step.cumulative_drop_rate,
        )
        for stat, step in zip(stats, steps)
    ]


def filter_funnel_outliers(
    funnel: Sequence[TutorialFunnelData],
    config: Optional[TutorialSettings] = None,
) -> List[TutorialFunnelData]:
    """
    Drop funnel rows that describe logging rather than players.

    Text-tap and special steps are always dropped. Of the rest, the first
    funnel row is always kept; a later row is dropped when its drop-off rate
    reaches `max_dropoff_rate`, or when its users exceed the previous funnel
    row's by more than `max_growth_factor` times.
    """
    config = config or get_settings().tutorial
    excluded = set(config.text_steps) | set(config.special_steps)

    kept: List[TutorialFunnelData] = []
    for index, row in enumerate(funnel):
        if row.step_id in excluded:
            continue
        if index == 0:
            kept.append(row)
            continue
        if row.dropoff_rate >= config.max_dropoff_rate:
            continue
        previous = funnel[index - 1]
        if row.unique_users > previous.unique_users * config.max_growth_factor:
            continue
        kept.append(row)
    return kept


def tutorial_completion_rate(funnel: Sequence[TutorialFunnelData]) -> float:
    """Users at the last row as a share of users at the first"""
    if not funnel:
        return 0.0
    return safe_rate(funnel[-1].unique_users, funnel[0].unique_users)


def build_tutorial_report(
    events: Iterable[TutorialEvent],
    dedupe: bool = True,
    keep_first: bool = True,
    config: Optional[TutorialSettings] = None,
) -> TutorialReport:
    """
    Build the tutorial funnel view.

    Args:
        events: Tutorial events in log order
        dedupe: Count each user once per step
        keep_first: With dedupe, keep the first occurrence per (user, step)
        config: Outlier and danger thresholds

    Returns:
        TutorialReport
    """
    config = config or get_settings().tutorial
    start = time.perf_counter()

    events = list(events)
    if dedupe:
        events = filter_unique_user_events(events, keep_first=keep_first)

    stats = calculate_tutorial_step_stats(events)
    funnel = calculate_tutorial_funnel(events)
    filtered = filter_funnel_outliers(funnel, config)

    excluded = set(config.text_steps) | set(config.special_steps)
    candidates = [row for row in funnel if row.step_id not in excluded]

    danger = sorted(
        (row for row in filtered if row.dropoff_rate > config.danger_dropoff_rate),
        key=lambda row: row.dropoff_rate,
        reverse=True,
    )[:5]

    report = TutorialReport(
        total_events=len(events),
        unique_users=get_tutorial_unique_user_count(events),
        step_stats=stats,
        funnel=funnel,
        filtered_funnel=filtered,
        filtered_out_steps=len(candidates) - len(filtered),
        danger_steps=danger,
        special_steps=[s for s in stats if s.step_id in config.special_steps],
        completion_rate=tutorial_completion_rate(filtered),
    )
    report.duration_seconds = time.perf_counter() - start

    logger.info(
        "Tutorial report built",
        events=report.total_events,
        steps=len(stats),
        funnel_steps=len(filtered),
        danger_steps=len(danger),
    )
    return report


def load_tutorial_rows(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read a tutorial CSV export into raw rows"""
    logger.info("Loading tutorial log", path=str(path))
    return read_event_frame(path).to_dicts()


def parse_export_file_name(file_name: str, directory: Union[str, Path] = "") -> Optional[TutorialFileInfo]:
    """Date range of an export file, or None when the name does not match"""
    match = EXPORT_FILE_PATTERN.match(file_name)
    if not match:
        return None
    _, start_date, end_date = match.groups()
    return TutorialFileInfo(
        file_name=file_name,
        display_name=f"{start_date} ~ {end_date}",
        start_date=start_date,
        end_date=end_date,
        file_path=str(Path(directory) / file_name),
    )


def list_tutorial_files(directory: Union[str, Path, None] = None) -> List[TutorialFileInfo]:
    """Tutorial exports in a directory, newest start date first"""
    root = Path(directory or get_settings().tutorial.data_dir)
    if not root.is_dir():
        logger.warning("Tutorial directory not found", directory=str(root))
        return []

    files = [
        info
        for info in (parse_export_file_name(p.name, root) for p in root.glob("*.csv"))
        if info is not None
    ]
    return sorted(files, key=lambda f: f.start_date, reverse=True)
