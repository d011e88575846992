"""Validation errors raised by the prompt pipeline.

All three are local data problems: callers should turn them into a
"fix your data" message rather than a generic failure.
"""

from typing import Any, Optional, Sequence


class AppreciationPromptError(Exception):
    """Base exception for prompt pipeline errors."""

    def user_message(self) -> str:
        """French message suitable for display to the teacher."""
        return "Les données de l'élève sont incomplètes ou invalides."


class InvalidGradeError(AppreciationPromptError):
    """
    Raised when a grade is not a finite number in [0, 20].

    Not a ValueError, so pydantic validators let it propagate unchanged
    instead of folding it into a ValidationError.
    """

    def __init__(self, value: Any, period: Optional[str] = None):
        self.value = value
        self.period = period
        where = f" for period {period}" if period else ""
        super().__init__(f"Invalid grade{where}: {value!r} (expected a number between 0 and 20)")

    def user_message(self) -> str:
        where = f" ({self.period})" if self.period else ""
        return f"Moyenne invalide{where} : {self.value!r}. Saisissez une note entre 0 et 20."


class UnknownPeriodError(AppreciationPromptError, ValueError):
    """Raised when a period is not part of the canonical ordered sequence."""

    def __init__(self, period: Any, known_periods: Sequence[str] = ()):
        self.period = period
        self.known_periods = list(known_periods)
        known = ", ".join(self.known_periods) or "none"
        super().__init__(f"Unknown period {period!r} (known periods: {known})")

    def user_message(self) -> str:
        return f"Période inconnue : {self.period!r}. Vérifiez le système de périodes (trimestres/semestres)."


class MissingCurrentPeriodDataError(AppreciationPromptError):
    """Raised when the record has no entry at all for its active period."""

    def __init__(self, period: str, student_id: Optional[str] = None):
        self.period = period
        self.student_id = student_id
        super().__init__(f"No period data for current period {period!r}")

    def user_message(self) -> str:
        return f"Aucune donnée pour la période en cours ({self.period}). Ajoutez au moins une fiche vide pour cette période."
