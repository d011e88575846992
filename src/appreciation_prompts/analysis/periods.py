"""Canonical period sequences and the period window."""

from enum import Enum
from typing import List, Sequence

from appreciation_prompts.errors import UnknownPeriodError


class PeriodSystem(str, Enum):
    """How the school year is split into reporting periods."""
    TRIMESTRES = "trimestres"
    SEMESTRES = "semestres"


def periods_for(system: PeriodSystem) -> List[str]:
    """Return the ordered period identifiers of a period system."""
    if system is PeriodSystem.TRIMESTRES:
        return ["T1", "T2", "T3"]
    if system is PeriodSystem.SEMESTRES:
        return ["S1", "S2"]
    raise ValueError(f"Unhandled period system: {system!r}")


def resolve_period_sequence(period: str) -> List[str]:
    """Find the canonical sequence that contains ``period``."""
    for system in PeriodSystem:
        sequence = periods_for(system)
        if period in sequence:
            return sequence
    known = [p for system in PeriodSystem for p in periods_for(system)]
    raise UnknownPeriodError(period, known)


def window_up_to(all_periods: Sequence[str], current: str) -> List[str]:
    """
    Return the periods up to and including ``current``.

    Anything positioned after the current period is outside the window and
    must never reach a prompt.
    """
    periods = list(all_periods)
    if current not in periods:
        raise UnknownPeriodError(current, periods)
    return periods[:periods.index(current) + 1]


def period_label(period: str, long: bool = False) -> str:
    """Display label for a period: "T2" or "Trimestre 2"."""
    if not long:
        return period
    prefix, number = period[:1].upper(), period[1:]
    if prefix == "T":
        return f"Trimestre {number}"
    if prefix == "S":
        return f"Semestre {number}"
    return period
