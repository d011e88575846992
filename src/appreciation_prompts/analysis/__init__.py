"""Deterministic analysis of student records: periods, evolutions and class statistics."""

from .periods import PeriodSystem, period_label, periods_for, resolve_period_sequence, window_up_to
from .evolution import (
    category_label,
    classify_delta,
    classify_evolutions,
    format_evolution,
    relevant_evolution
)
from .stats import Heterogeneity, HeterogeneityLevel, grade_distribution, heterogeneity, median, standard_deviation

__all__ = [
    "PeriodSystem",
    "periods_for",
    "resolve_period_sequence",
    "window_up_to",
    "period_label",
    "classify_delta",
    "classify_evolutions",
    "category_label",
    "format_evolution",
    "relevant_evolution",
    "Heterogeneity",
    "HeterogeneityLevel",
    "median",
    "standard_deviation",
    "heterogeneity",
    "grade_distribution"
]
