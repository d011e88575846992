"""
Core data models for the appreciation prompt pipeline.

This package contains:
- Student, period and observation records (pipeline inputs)
- Threshold and style settings
- Evolution results and prompt bundles (pipeline outputs)
"""

from .records import (
    GRADE_MAX,
    GRADE_MIN,
    NOTE_MAX_LENGTH,
    ObservationEntry,
    PeriodRecord,
    StudentRecord,
    StyleConfig,
    Tag,
    TagCategory,
    ThresholdPolicy,
    Tone,
    Voice,
    check_threshold_ordering,
    parse_grade,
    validate_grade
)
from .outputs import EvolutionCategory, EvolutionResult, PromptBundle

__all__ = [
    # Inputs
    "PeriodRecord",
    "StudentRecord",
    "ObservationEntry",
    "Tag",
    "TagCategory",

    # Settings
    "ThresholdPolicy",
    "StyleConfig",
    "Tone",
    "Voice",

    # Outputs
    "EvolutionCategory",
    "EvolutionResult",
    "PromptBundle",

    # Helpers
    "validate_grade",
    "parse_grade",
    "check_threshold_ordering",
    "GRADE_MIN",
    "GRADE_MAX",
    "NOTE_MAX_LENGTH"
]
