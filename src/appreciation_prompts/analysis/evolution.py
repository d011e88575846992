"""
Grade evolution classifier.

Computes the grade change between consecutive graded periods and maps it to
an evolution category using a ThresholdPolicy. Pure computation, no I/O.
"""

import logging
import math
from typing import List, Mapping, Optional, Sequence

from appreciation_prompts.models import (
    EvolutionCategory,
    EvolutionResult,
    PeriodRecord,
    ThresholdPolicy,
    validate_grade
)


logger = logging.getLogger(__name__)


def classify_delta(delta: float, policy: ThresholdPolicy) -> EvolutionCategory:
    """Convert a grade delta to an evolution category."""
    if not math.isfinite(delta):
        raise ValueError(f"Cannot classify non-finite delta: {delta!r}")

    if delta >= policy.very_positive:
        return EvolutionCategory.VERY_POSITIVE
    elif delta >= policy.positive:
        return EvolutionCategory.POSITIVE
    elif delta <= policy.very_negative:
        return EvolutionCategory.VERY_NEGATIVE
    elif delta <= policy.negative:
        return EvolutionCategory.NEGATIVE
    else:
        return EvolutionCategory.STABLE


def category_label(category: EvolutionCategory) -> str:
    """French description of a category, as written into prompts."""
    if category is EvolutionCategory.VERY_POSITIVE:
        return "Progression notable"
    if category is EvolutionCategory.POSITIVE:
        return "Progression"
    if category is EvolutionCategory.STABLE:
        return "Stable"
    if category is EvolutionCategory.NEGATIVE:
        return "Baisse"
    if category is EvolutionCategory.VERY_NEGATIVE:
        return "Baisse prononcée"
    raise ValueError(f"Unhandled evolution category: {category!r}")


def _grade_of(records: Mapping[str, PeriodRecord], period: str) -> Optional[float]:
    record = records.get(period)
    if record is None:
        return None
    grade = getattr(record, "grade", None)
    if grade is None:
        return None
    return validate_grade(grade, period)


def classify_evolutions(
    periods: Sequence[str],
    records: Mapping[str, PeriodRecord],
    policy: ThresholdPolicy
) -> List[EvolutionResult]:
    """
    Classify the grade change for each adjacent pair of periods.

    A pair produces a result only when both periods have a grade; a missing
    grade means no evolution, not a stable one. The first period never has
    a predecessor.

    Args:
        periods: Canonical ordered period identifiers
        records: Period data keyed by period identifier
        policy: Thresholds used for classification

    Returns:
        One EvolutionResult per adjacent graded pair, in period order

    Raises:
        InvalidGradeError: If a recorded grade is non-finite or outside [0, 20]
    """
    ordered = list(periods)
    evolutions = []

    for previous, current in zip(ordered, ordered[1:]):
        before = _grade_of(records, previous)
        after = _grade_of(records, current)
        if before is None or after is None:
            continue

        # `or 0.0` folds -0.0 into 0.0
        delta = round(after - before, 1) or 0.0
        evolutions.append(EvolutionResult(
            from_period=previous,
            to_period=current,
            delta=delta,
            category=classify_delta(delta, policy)
        ))

    logger.debug(f"Classified {len(evolutions)} evolutions over {len(ordered)} periods")
    return evolutions


def relevant_evolution(
    evolutions: Sequence[EvolutionResult],
    current_period: str
) -> Optional[EvolutionResult]:
    """Return the evolution that ends at ``current_period``, if any."""
    for evolution in evolutions:
        if evolution.to_period == current_period:
            return evolution
    return None


def format_evolution(evolution: EvolutionResult) -> str:
    """Render one evolution line, e.g. "Évolution T1->T2 : Progression (+0.7 pts)"."""
    sign = "+" if evolution.delta > 0 else ""
    return (
        f"Évolution {evolution.span} : {category_label(evolution.category)} "
        f"({sign}{evolution.delta:.1f} pts)"
    )
