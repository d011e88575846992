"""
Significance filtering and synthesis of teacher observations.

Tags logged fewer times than the significance threshold are treated as
one-off remarks and kept out of the generation prompt; recurring tags are
summarized together with a few recent notes attached to them.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from appreciation_prompts.journal.tags import catalog_position, get_tag, tag_label
from appreciation_prompts.models import ObservationEntry, TagCategory


logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 2
MIN_THRESHOLD = 1
MAX_THRESHOLD = 5
SIGNIFICANT_TAGS_LIMIT = 5
NOTES_LIMIT = 3


class TagCount(BaseModel):
    """Occurrences of one catalog tag, for display."""
    tag_id: str
    label: str
    category: TagCategory
    count: int


def check_threshold(threshold: int) -> int:
    """Validate a significance threshold."""
    if isinstance(threshold, bool) or not isinstance(threshold, int):
        raise ValueError(f"Significance threshold must be an integer, got {threshold!r}")
    if not MIN_THRESHOLD <= threshold <= MAX_THRESHOLD:
        raise ValueError(
            f"Significance threshold must be between {MIN_THRESHOLD} and {MAX_THRESHOLD}, got {threshold}"
        )
    return threshold


def resolve_threshold(
    class_id: Optional[str],
    class_thresholds: Mapping[str, int],
    default: int = DEFAULT_THRESHOLD
) -> int:
    """Threshold configured for a class, else the global default."""
    if class_id and class_id in class_thresholds:
        return check_threshold(class_thresholds[class_id])
    return check_threshold(default)


def entries_for_period(entries: Iterable[ObservationEntry], period: str) -> List[ObservationEntry]:
    return [entry for entry in entries if entry.period == period]


def count_tags(entries: Iterable[ObservationEntry]) -> Dict[str, int]:
    """Count how many entries carry each tag."""
    counts = Counter()
    for entry in entries:
        counts.update(entry.tags)
    return dict(counts)


def significant_tags(counts: Mapping[str, int], threshold: int) -> List[str]:
    """
    Tags seen at least ``threshold`` times.

    Sorted by count descending, ties broken by catalog order, capped at
    SIGNIFICANT_TAGS_LIMIT.
    """
    check_threshold(threshold)
    eligible = [(tag_id, count) for tag_id, count in counts.items() if count >= threshold]
    eligible.sort(key=lambda item: (-item[1], catalog_position(item[0]), item[0]))
    return [tag_id for tag_id, _ in eligible[:SIGNIFICANT_TAGS_LIMIT]]


def is_isolated(entry: ObservationEntry, counts: Mapping[str, int], threshold: int) -> bool:
    """True if every tag of the entry is below the threshold (vacuously true without tags)."""
    return all(counts.get(tag_id, 0) < threshold for tag_id in entry.tags)


def synthesize(entries: Sequence[ObservationEntry], threshold: int) -> str:
    """
    Build the compact observation summary injected into prompts.

    Format: ``Observations: <labels>. Notes: "<note>" | "<note>"``. Notes come
    only from entries carrying a significant tag, most recent last.

    Returns:
        The summary, or an empty string when nothing is significant
    """
    check_threshold(threshold)
    if not entries:
        return ""

    counts = count_tags(entries)
    significant = significant_tags(counts, threshold)
    if not significant:
        logger.debug(f"No significant tags among {len(entries)} entries (threshold={threshold})")
        return ""

    parts = [f"Observations: {', '.join(tag_label(tag_id) for tag_id in significant)}"]

    significant_ids = set(significant)
    noted = [
        entry for entry in entries
        if entry.note and any(tag_id in significant_ids for tag_id in entry.tags)
    ]
    noted.sort(key=lambda entry: entry.date)
    recent_notes = noted[-NOTES_LIMIT:]
    if recent_notes:
        parts.append("Notes: " + " | ".join(f'"{entry.note}"' for entry in recent_notes))

    return ". ".join(parts)


def synthesize_for_period(entries: Iterable[ObservationEntry], period: str, threshold: int) -> str:
    """Synthesize only the entries logged during ``period``."""
    return synthesize(entries_for_period(entries, period), threshold)


def aggregated_counts(entries: Iterable[ObservationEntry]) -> List[TagCount]:
    """Per-tag counts for catalog tags, most frequent first."""
    rows = []
    for tag_id, count in count_tags(entries).items():
        tag = get_tag(tag_id)
        if tag is None:
            logger.debug(f"Skipping unknown tag {tag_id!r} in aggregated counts")
            continue
        rows.append(TagCount(tag_id=tag.id, label=tag.label, category=tag.category, count=count))
    rows.sort(key=lambda row: (-row.count, catalog_position(row.tag_id)))
    return rows
