"""Tests for the observation tag catalog and significance filter."""

import pytest
from datetime import datetime, timedelta, timezone

from appreciation_prompts.journal import (
    TAG_CATALOG,
    aggregated_counts,
    catalog_position,
    check_threshold,
    count_tags,
    get_tag,
    is_isolated,
    resolve_threshold,
    significant_tags,
    synthesize,
    synthesize_for_period,
    tag_label,
    tags_by_category
)
from appreciation_prompts.models import ObservationEntry, TagCategory


BASE_DATE = datetime(2024, 10, 1, tzinfo=timezone.utc)


def make_entry(tags, note="", days=0, period="T1"):
    """Build an entry as read back from storage."""
    return ObservationEntry(
        id=f"j_{days}_{'_'.join(tags)}",
        date=BASE_DATE + timedelta(days=days),
        tags=tags,
        note=note,
        period=period
    )


class TestCatalog:
    """Test the tag catalog."""

    def test_catalog_ids_are_unique(self):
        ids = [tag.id for tag in TAG_CATALOG]
        assert len(ids) == len(set(ids))

    def test_every_category_is_represented(self):
        for category in TagCategory:
            assert tags_by_category(category)

    def test_lookup(self):
        assert get_tag("bavardage").category is TagCategory.NEGATIVE
        assert get_tag("unknown") is None
        assert tag_label("participation+") == "Participe"
        assert tag_label("unknown") == "unknown"

    def test_unknown_tags_sort_last(self):
        assert catalog_position("unknown") == len(TAG_CATALOG)
        assert catalog_position("participation+") == 0


class TestThreshold:
    """Test threshold validation and resolution."""

    @pytest.mark.parametrize("value", [0, 6, 2.5, "2", True])
    def test_invalid_threshold(self, value):
        with pytest.raises(ValueError):
            check_threshold(value)

    def test_class_override(self):
        assert resolve_threshold("6A", {"6A": 4}) == 4
        assert resolve_threshold("6B", {"6A": 4}) == 2
        assert resolve_threshold(None, {"6A": 4}, default=3) == 3


class TestSignificance:
    """Test significant/isolated partitioning."""

    @pytest.fixture
    def entries(self):
        """Three chatter entries and one neutral remark."""
        return [
            make_entry(["bavardage"], days=0),
            make_entry(["bavardage"], days=3),
            make_entry(["bavardage", "remarque"], days=5),
            make_entry(["oubli"], days=7),
        ]

    def test_count_tags(self, entries):
        assert count_tags(entries) == {"bavardage": 3, "remarque": 1, "oubli": 1}

    def test_recurring_tag_is_significant(self, entries):
        counts = count_tags(entries)
        assert significant_tags(counts, 2) == ["bavardage"]
        assert synthesize(entries, 2) == "Observations: Bavardage"

    def test_significant_tags_meet_threshold(self, entries):
        counts = count_tags(entries)
        for threshold in range(1, 6):
            significant = significant_tags(counts, threshold)
            assert set(significant) <= set(counts)
            assert all(counts[tag_id] >= threshold for tag_id in significant)

    def test_isolated_entry(self, entries):
        counts = count_tags(entries)
        assert is_isolated(entries[3], counts, 2)
        # One significant tag is enough to keep the entry
        assert not is_isolated(entries[2], counts, 2)

    def test_threshold_one_keeps_everything(self, entries):
        counts = count_tags(entries)
        assert significant_tags(counts, 1) == ["bavardage", "oubli", "remarque"]

    def test_ties_follow_catalog_order(self):
        counts = {"remarque": 2, "participation+": 2, "oubli": 2}
        assert significant_tags(counts, 2) == ["participation+", "oubli", "remarque"]

    def test_at_most_five_tags(self):
        counts = {tag.id: 3 for tag in TAG_CATALOG}
        assert len(significant_tags(counts, 1)) == 5

    @pytest.mark.parametrize("counts", [
        {tag.id: index + 1 for index, tag in enumerate(TAG_CATALOG)},
        {tag.id: (index % 4) + 1 for index, tag in enumerate(TAG_CATALOG)},
        {tag.id: 5 - (index % 5) for index, tag in enumerate(TAG_CATALOG)},
    ])
    def test_higher_threshold_keeps_a_subset(self, counts):
        for low in range(1, 6):
            for high in range(low, 6):
                kept_high = significant_tags(counts, high)
                kept_low = significant_tags(counts, low)
                assert set(kept_high) <= set(kept_low)
                assert len(kept_high) <= 5
                assert all(counts[tag_id] >= high for tag_id in kept_high)

    def test_entry_without_tags_is_isolated(self, entries):
        untagged = make_entry([], note="Remarque sans étiquette", days=8)
        counts = count_tags(entries + [untagged])
        for threshold in range(1, 6):
            assert is_isolated(untagged, counts, threshold)

    def test_untagged_note_never_reaches_synthesis(self, entries):
        untagged = make_entry([], note="Remarque sans étiquette", days=8)
        summary = synthesize(entries + [untagged], 2)
        assert summary == "Observations: Bavardage"
        assert "sans étiquette" not in summary

    def test_nothing_significant(self, entries):
        assert synthesize(entries, 4) == ""
        assert synthesize([], 2) == ""


class TestSynthesisNotes:
    """Test notes attached to significant tags."""

    def test_notes_only_from_significant_entries(self):
        entries = [
            make_entry(["bavardage"], note="Bavarde avec son voisin", days=1),
            make_entry(["bavardage"], days=2),
            make_entry(["oubli"], note="Oubli du cahier", days=3),
        ]
        assert synthesize(entries, 2) == 'Observations: Bavardage. Notes: "Bavarde avec son voisin"'

    def test_three_most_recent_notes_in_date_order(self):
        entries = [
            make_entry(["participation+"], note=f"note {day}", days=day)
            for day in (4, 1, 3, 2)
        ]
        assert synthesize(entries, 2) == 'Observations: Participe. Notes: "note 2" | "note 3" | "note 4"'


def test_synthesize_for_period_filters_entries():
    entries = [
        make_entry(["travail+"], days=1, period="T1"),
        make_entry(["travail+"], days=2, period="T1"),
        make_entry(["bavardage"], days=90, period="T2"),
        make_entry(["bavardage"], days=95, period="T2"),
    ]
    assert synthesize_for_period(entries, "T1", 2) == "Observations: Travail sérieux"
    assert synthesize_for_period(entries, "T2", 2) == "Observations: Bavardage"
    assert synthesize_for_period(entries, "T3", 2) == ""


def test_aggregated_counts_skip_unknown_tags():
    entries = [
        make_entry(["oubli"], days=1),
        make_entry(["oubli", "legacy-tag"], days=2),
        make_entry(["progres"], days=3),
    ]
    rows = aggregated_counts(entries)
    assert [(row.tag_id, row.count) for row in rows] == [("oubli", 2), ("progres", 1)]
    assert rows[0].label == "Oubli d'affaires"
