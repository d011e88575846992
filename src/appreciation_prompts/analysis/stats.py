"""
Class-level grade statistics for the dashboard collaborator.

Provides helper functions for:
- Median and population standard deviation of a set of grades
- Heterogeneity rating of a class
- Grade distribution histogram buckets
"""

import statistics
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel


# Bucket upper bounds for grades out of 20; the last bucket includes 20
DISTRIBUTION_BOUNDS = (4.0, 8.0, 12.0, 16.0)


class HeterogeneityLevel(str, Enum):
    """Display level for a heterogeneity rating."""
    POSITIVE = "positive"
    WARNING = "warning"
    NEGATIVE = "negative"
    STABLE = "stable"


class Heterogeneity(BaseModel):
    """How spread out a class's grades are."""
    label: str
    level: HeterogeneityLevel
    value: float


def median(grades: Sequence[float]) -> Optional[float]:
    """Median grade, or None for an empty class."""
    if not grades:
        return None
    return float(statistics.median(grades))


def standard_deviation(grades: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for an empty class."""
    if not grades:
        return 0.0
    return statistics.pstdev(grades)


def heterogeneity(grades: Sequence[float]) -> Heterogeneity:
    """Rate class heterogeneity from the standard deviation of grades."""
    if len(grades) < 2:
        return Heterogeneity(label="Indéterminée", level=HeterogeneityLevel.STABLE, value=0.0)

    std_dev = standard_deviation(grades)

    # Empirical cut-points for grades out of 20
    if std_dev < 2.5:
        return Heterogeneity(label="Très Homogène", level=HeterogeneityLevel.POSITIVE, value=std_dev)
    elif std_dev < 4.5:
        return Heterogeneity(label="Homogène", level=HeterogeneityLevel.POSITIVE, value=std_dev)
    elif std_dev < 6.5:
        return Heterogeneity(label="Hétérogène", level=HeterogeneityLevel.WARNING, value=std_dev)
    else:
        return Heterogeneity(label="Très Hétérogène", level=HeterogeneityLevel.NEGATIVE, value=std_dev)


def grade_distribution(grades: Sequence[float]) -> List[int]:
    """Count grades in the buckets [0-4, 4-8, 8-12, 12-16, 16-20]."""
    distribution = [0] * (len(DISTRIBUTION_BOUNDS) + 1)
    for grade in grades:
        bucket = len(DISTRIBUTION_BOUNDS)
        for index, bound in enumerate(DISTRIBUTION_BOUNDS):
            if grade < bound:
                bucket = index
                break
        distribution[bucket] += 1
    return distribution
