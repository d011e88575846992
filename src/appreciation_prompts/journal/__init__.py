"""Observation journal: tag catalog and significance filtering."""

from .tags import TAG_CATALOG, catalog_position, get_tag, tag_label, tags_by_category
from .synthesis import (
    DEFAULT_THRESHOLD,
    MAX_THRESHOLD,
    MIN_THRESHOLD,
    NOTES_LIMIT,
    SIGNIFICANT_TAGS_LIMIT,
    TagCount,
    aggregated_counts,
    check_threshold,
    count_tags,
    entries_for_period,
    is_isolated,
    resolve_threshold,
    significant_tags,
    synthesize,
    synthesize_for_period
)

__all__ = [
    "TAG_CATALOG",
    "get_tag",
    "tag_label",
    "catalog_position",
    "tags_by_category",
    "DEFAULT_THRESHOLD",
    "MIN_THRESHOLD",
    "MAX_THRESHOLD",
    "SIGNIFICANT_TAGS_LIMIT",
    "NOTES_LIMIT",
    "TagCount",
    "check_threshold",
    "resolve_threshold",
    "entries_for_period",
    "count_tags",
    "significant_tags",
    "is_isolated",
    "synthesize",
    "synthesize_for_period",
    "aggregated_counts"
]
