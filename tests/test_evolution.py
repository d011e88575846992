"""
Tests for the grade evolution classifier.

Covers threshold boundaries, missing grades, invalid grades and the
rendered evolution line.
"""

import math
import pytest

from appreciation_prompts.analysis.evolution import (
    category_label,
    classify_delta,
    classify_evolutions,
    format_evolution,
    relevant_evolution
)
from appreciation_prompts.errors import InvalidGradeError
from appreciation_prompts.models import EvolutionCategory, PeriodRecord, ThresholdPolicy


TRIMESTERS = ["T1", "T2", "T3"]


@pytest.fixture
def policy():
    """Default thresholds."""
    return ThresholdPolicy(very_positive=2.0, positive=0.5, negative=-0.5, very_negative=-2.0)


class TestClassifyDelta:
    """Test delta classification."""

    @pytest.mark.parametrize("delta,expected", [
        (3.0, EvolutionCategory.VERY_POSITIVE),
        (2.0, EvolutionCategory.VERY_POSITIVE),
        (1.9, EvolutionCategory.POSITIVE),
        (0.5, EvolutionCategory.POSITIVE),
        (0.4, EvolutionCategory.STABLE),
        (0.0, EvolutionCategory.STABLE),
        (-0.4, EvolutionCategory.STABLE),
        (-0.5, EvolutionCategory.NEGATIVE),
        (-1.9, EvolutionCategory.NEGATIVE),
        (-2.0, EvolutionCategory.VERY_NEGATIVE),
        (-8.0, EvolutionCategory.VERY_NEGATIVE),
    ])
    def test_thresholds_are_inclusive(self, policy, delta, expected):
        assert classify_delta(delta, policy) is expected

    def test_monotonic(self, policy):
        deltas = [x / 10 for x in range(-60, 61)]
        ranks = [classify_delta(d, policy).rank for d in deltas]
        assert ranks == sorted(ranks)

    @pytest.mark.parametrize("delta", [math.nan, math.inf, -math.inf])
    def test_non_finite_delta_rejected(self, policy, delta):
        with pytest.raises(ValueError):
            classify_delta(delta, policy)


class TestClassifyEvolutions:
    """Test evolution computation over a record."""

    def test_positive_progression(self, policy):
        records = {
            "T1": PeriodRecord(grade=12.5, appreciation="Bon début."),
            "T2": PeriodRecord(grade=13.2)
        }
        evolutions = classify_evolutions(TRIMESTERS, records, policy)

        assert len(evolutions) == 1
        evolution = evolutions[0]
        assert evolution.from_period == "T1"
        assert evolution.to_period == "T2"
        assert evolution.delta == pytest.approx(0.7)
        assert evolution.category is EvolutionCategory.POSITIVE
        assert format_evolution(evolution) == "Évolution T1->T2 : Progression (+0.7 pts)"

    def test_first_period_has_no_evolution(self, policy):
        records = {"T1": PeriodRecord(grade=14.0)}
        assert classify_evolutions(["T1"], records, policy) == []
        assert classify_evolutions(TRIMESTERS, records, policy) == []

    def test_missing_grade_breaks_the_pair(self, policy):
        records = {
            "T1": PeriodRecord(grade=10.0),
            "T2": PeriodRecord(appreciation="Absent"),
            "T3": PeriodRecord(grade=15.0)
        }
        # No T1->T3 bridging across the gap
        assert classify_evolutions(TRIMESTERS, records, policy) == []

    def test_missing_period_entry(self, policy):
        records = {"T2": PeriodRecord(grade=11.0), "T3": PeriodRecord(grade=8.5)}
        evolutions = classify_evolutions(TRIMESTERS, records, policy)
        assert [e.span for e in evolutions] == ["T2->T3"]
        assert evolutions[0].category is EvolutionCategory.VERY_NEGATIVE
        assert format_evolution(evolutions[0]) == "Évolution T2->T3 : Baisse prononcée (-2.5 pts)"

    def test_delta_rounded_to_one_decimal(self, policy):
        records = {"T1": PeriodRecord(grade=10.04), "T2": PeriodRecord(grade=10.0)}
        evolution = classify_evolutions(TRIMESTERS, records, policy)[0]
        assert evolution.delta == 0.0
        assert math.copysign(1, evolution.delta) == 1
        assert format_evolution(evolution) == "Évolution T1->T2 : Stable (0.0 pts)"

    def test_invalid_grade_raises(self, policy):
        records = {
            "T1": PeriodRecord.model_construct(grade=float("nan"), appreciation="", context=None, evaluation_count=None),
            "T2": PeriodRecord(grade=12.0)
        }
        with pytest.raises(InvalidGradeError) as exc_info:
            classify_evolutions(TRIMESTERS, records, policy)
        assert exc_info.value.period == "T1"

    def test_custom_policy(self):
        strict = ThresholdPolicy(very_positive=4.0, positive=1.5, negative=-1.5, very_negative=-4.0)
        records = {"T1": PeriodRecord(grade=10.0), "T2": PeriodRecord(grade=11.0)}
        assert classify_evolutions(TRIMESTERS, records, strict)[0].category is EvolutionCategory.STABLE


def test_relevant_evolution(policy):
    records = {
        "T1": PeriodRecord(grade=10.0),
        "T2": PeriodRecord(grade=12.0),
        "T3": PeriodRecord(grade=11.0)
    }
    evolutions = classify_evolutions(TRIMESTERS, records, policy)
    assert relevant_evolution(evolutions, "T3").span == "T2->T3"
    assert relevant_evolution(evolutions, "T1") is None


def test_category_labels():
    assert category_label(EvolutionCategory.VERY_POSITIVE) == "Progression notable"
    assert category_label(EvolutionCategory.POSITIVE) == "Progression"
    assert category_label(EvolutionCategory.STABLE) == "Stable"
    assert category_label(EvolutionCategory.NEGATIVE) == "Baisse"
    assert category_label(EvolutionCategory.VERY_NEGATIVE) == "Baisse prononcée"
