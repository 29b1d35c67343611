"""
Data Transformation Module
"""
from .filters import (
    STAGE_BANDS,
    CountryOption,
    FilterOptions,
    StageType,
    apply_filters,
    classify_stage_type,
    find_stage_band,
    get_available_countries,
    parse_stage_number,
)

__all__ = [
    "STAGE_BANDS",
    "CountryOption",
    "FilterOptions",
    "StageType",
    "apply_filters",
    "classify_stage_type",
    "find_stage_band",
    "get_available_countries",
    "parse_stage_number",
]
