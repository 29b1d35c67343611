"""
Shared helpers for the analytics layer
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, TypeVar

from game_balance.models.events import Event
from game_balance.transformation.filters import parse_stage_number

T = TypeVar("T")


def safe_rate(numerator: float, denominator: float) -> float:
    """numerator / denominator as a percentage, 0.0 for an empty denominator"""
    return float(numerator / denominator * 100) if denominator else 0.0


def safe_div(numerator: float, denominator: float) -> float:
    return float(numerator / denominator) if denominator else 0.0


def stage_sort_key(stage_id: str) -> Tuple[int, int, str]:
    """
    Numeric stage order: "2015" < "2100" < "10001".

    Non-numeric ids sort after every numeric id, lexically among themselves.
    """
    number = parse_stage_number(stage_id)
    if number is None:
        return (1, 0, stage_id)
    return (0, number, stage_id)


def sort_stage_ids(stage_ids: Iterable[str]) -> List[str]:
    return sorted(set(stage_ids), key=stage_sort_key)


def group_by(items: Iterable[T], key: Callable[[T], str]) -> "OrderedDict[str, List[T]]":
    """Group items by key, keeping first-seen key order and input order within groups"""
    groups: "OrderedDict[str, List[T]]" = OrderedDict()
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def group_by_stage(events: Iterable[Event]) -> Dict[str, List[Event]]:
    """Events per stage label, keyed in numeric stage order"""
    groups = group_by(events, lambda e: e.label)
    return {stage_id: groups[stage_id] for stage_id in sort_stage_ids(groups)}


@dataclass
class AttritionStep:
    """Loss at one position of an ordered sequence of counts"""
    count: int
    drop_count: int  # vs previous position, never negative
    drop_rate: float
    cumulative_drop_count: int  # vs first position, never negative
    cumulative_drop_rate: float


def compute_attrition(counts: Sequence[int]) -> List[AttritionStep]:
    """
    Step-over-step and cumulative loss over ordered counts.

    The first position has no loss by definition.
    """
    steps: List[AttritionStep] = []
    if not counts:
        return steps

    first = counts[0]
    for index, count in enumerate(counts):
        if index == 0:
            drop = 0
            rate = 0.0
        else:
            previous = counts[index - 1]
            drop = max(0, previous - count)
            rate = safe_rate(drop, previous)

        cumulative = max(0, first - count)
        steps.append(
            AttritionStep(
                count=count,
                drop_count=drop,
                drop_rate=rate,
                cumulative_drop_count=cumulative,
                cumulative_drop_rate=safe_rate(cumulative, first),
            )
        )
    return steps
