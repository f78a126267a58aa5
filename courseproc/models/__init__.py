"""Data models for filtering and reference collation."""

from .filter_spec import FilterSet, ResourceFilterSpec, split_filter_names
from .reference import (
    OccurrenceKind,
    StepLocation,
    ReferenceDefinition,
    ReferenceEntry,
    RenderedEntry,
)
from .locations import (
    parse_step_number,
    lead_zero,
    build_step_link,
    normalize_term,
)

__all__ = [
    "FilterSet",
    "ResourceFilterSpec",
    "split_filter_names",
    "OccurrenceKind",
    "StepLocation",
    "ReferenceDefinition",
    "ReferenceEntry",
    "RenderedEntry",
    "parse_step_number",
    "lead_zero",
    "build_step_link",
    "normalize_term",
]
