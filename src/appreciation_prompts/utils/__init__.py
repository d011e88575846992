"""Utility functions for text handling."""

from .text import NAME_PLACEHOLDER, Gender, anonymize, count_words, detect_gender, format_grade

__all__ = [
    "NAME_PLACEHOLDER",
    "Gender",
    "detect_gender",
    "anonymize",
    "count_words",
    "format_grade"
]
