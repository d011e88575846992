"""Refinement prompts: rework an existing appreciation in a given direction."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from appreciation_prompts.prompts.templates import TemplateManager, get_template_manager
from appreciation_prompts.utils.text import anonymize, count_words


logger = logging.getLogger(__name__)

CONCISE_FACTOR = 0.80
DETAILED_FACTOR_MIN = 1.15
DETAILED_FACTOR_MAX = 1.20
DEFAULT_DETAILED_FACTOR = DETAILED_FACTOR_MAX


class RefinementKind(str, Enum):
    """Direction in which to rework an appreciation."""
    CONCISE = "concise"
    DETAILED = "detailed"
    POLISH = "polish"
    VARIATIONS = "variations"
    ENCOURAGING = "encouraging"
    FORMAL = "formal"
    CONTEXT = "context"
    DEFAULT = "default"

    @classmethod
    def parse(cls, value: str) -> "RefinementKind":
        """Parse a kind name; "context-merge" is accepted, unknown names map to DEFAULT."""
        normalized = (value or "").strip().lower()
        if normalized == "context-merge":
            return cls.CONTEXT
        try:
            return cls(normalized)
        except ValueError:
            logger.warning(f"Unknown refinement kind {value!r}, using default rewording")
            return cls.DEFAULT


def length_factor(kind: RefinementKind, detailed_factor: float = DEFAULT_DETAILED_FACTOR) -> float:
    """Target length as a fraction of the original word count."""
    if kind is RefinementKind.CONCISE:
        return CONCISE_FACTOR
    if kind is RefinementKind.DETAILED:
        if not DETAILED_FACTOR_MIN <= detailed_factor <= DETAILED_FACTOR_MAX:
            raise ValueError(
                f"detailed_factor must be between {DETAILED_FACTOR_MIN} and {DETAILED_FACTOR_MAX}, "
                f"got {detailed_factor}"
            )
        return detailed_factor
    if kind in (
        RefinementKind.POLISH,
        RefinementKind.VARIATIONS,
        RefinementKind.ENCOURAGING,
        RefinementKind.FORMAL,
        RefinementKind.CONTEXT,
        RefinementKind.DEFAULT,
    ):
        return 1.0
    raise ValueError(f"Unhandled refinement kind: {kind!r}")


def target_word_count(
    kind: RefinementKind,
    original: str,
    detailed_factor: float = DEFAULT_DETAILED_FACTOR
) -> int:
    """Word count to aim for, rounded half up."""
    factor = Decimal(str(length_factor(kind, detailed_factor)))
    target = Decimal(count_words(original)) * factor
    return int(target.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_refinement_prompt(
    kind: RefinementKind,
    original: str,
    context: Optional[str] = None,
    detailed_factor: float = DEFAULT_DETAILED_FACTOR,
    first_name: str = "",
    last_name: str = "",
    template_manager: Optional[TemplateManager] = None
) -> str:
    """
    Build the prompt asking the generator to rework ``original``.

    Args:
        kind: Refinement direction
        original: Appreciation text to rework
        context: Extra information to merge (required for CONTEXT)
        detailed_factor: Expansion used by DETAILED, between 1.15 and 1.20
        first_name, last_name: Names to scrub from the outgoing text
        template_manager: Template source; defaults to the built-ins

    Returns:
        The refinement prompt, ending with the plain-text output directive
    """
    templates = template_manager or get_template_manager()
    original = (original or "").strip()

    target = target_word_count(kind, original, detailed_factor)
    length_clause = f", environ {target} mots" if target > 0 else ""

    # Only the caller's text is scrubbed, never the template wording
    variables = {"original": anonymize(original, first_name, last_name), "length_clause": length_clause}
    if kind is RefinementKind.CONTEXT:
        merged = (context or "").strip()
        if not merged:
            raise ValueError("The context refinement needs non-empty context to merge")
        variables["context"] = anonymize(merged, first_name, last_name)

    return templates.render(f"refinement_{kind.value}", **variables)
