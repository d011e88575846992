"""
Output schemas produced by the pipeline.

EvolutionResult feeds both prompt assembly and the statistics display;
PromptBundle is handed to the generation client.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class EvolutionCategory(str, Enum):
    """Trend between two consecutive graded periods."""
    VERY_POSITIVE = "very-positive"
    POSITIVE = "positive"
    STABLE = "stable"
    NEGATIVE = "negative"
    VERY_NEGATIVE = "very-negative"

    @property
    def rank(self) -> int:
        """Ordinal position, higher is better."""
        if self is EvolutionCategory.VERY_NEGATIVE:
            return 0
        if self is EvolutionCategory.NEGATIVE:
            return 1
        if self is EvolutionCategory.STABLE:
            return 2
        if self is EvolutionCategory.POSITIVE:
            return 3
        if self is EvolutionCategory.VERY_POSITIVE:
            return 4
        raise ValueError(f"Unhandled evolution category: {self!r}")


class EvolutionResult(BaseModel):
    """Classified grade change between two adjacent periods."""
    model_config = ConfigDict(frozen=True)

    from_period: str
    to_period: str
    delta: float  # rounded to one decimal
    category: EvolutionCategory

    @property
    def span(self) -> str:
        """Period pair as shown to users, e.g. "T1->T2"."""
        return f"{self.from_period}->{self.to_period}"


class PromptBundle(BaseModel):
    """The three prompts built for one student and period."""
    model_config = ConfigDict(frozen=True)

    appreciation_prompt: str
    strengths_weaknesses_prompt: str
    next_steps_prompt: str
