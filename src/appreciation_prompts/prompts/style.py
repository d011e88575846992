"""Style instructions rendered into the generation prompt."""

from typing import List, Optional

from appreciation_prompts.models import StyleConfig, Tone, Voice
from appreciation_prompts.utils.text import Gender, NAME_PLACEHOLDER


def tone_instruction(tone: Tone) -> Optional[str]:
    """Tone line for the prompt; the free tone leaves the choice to the generator."""
    if tone is Tone.VERY_ENCOURAGING:
        return "Adopte un ton très encourageant et positif."
    if tone is Tone.BENEVOLENT:
        return "Adopte un ton bienveillant et constructif."
    if tone is Tone.FREE:
        return None
    if tone is Tone.DEMANDING:
        return "Adopte un ton exigeant mais constructif."
    if tone is Tone.STRICT:
        return "Adopte un ton strict et formel."
    raise ValueError(f"Unhandled tone: {tone!r}")


def voice_instruction(voice: Voice) -> Optional[str]:
    if voice is Voice.JE:
        return 'Utilise impérativement la première personne du singulier ("Je", "J\'observe", "mon avis").'
    if voice is Voice.NOUS:
        return (
            'Utilise impérativement la première personne du pluriel ("Nous", "Nous notons", "notre avis") '
            "ou une forme impersonnelle institutionnelle."
        )
    if voice is Voice.DEFAULT:
        return None
    raise ValueError(f"Unhandled voice: {voice!r}")


def gender_hint(gender: Gender) -> str:
    """Agreement hint shown next to the placeholder."""
    if gender is Gender.FEMININE:
        return "féminin"
    if gender is Gender.MASCULINE:
        return "masculin"
    if gender is Gender.INDETERMINATE:
        return (
            "non déterminé - nommer une seule fois puis utiliser des tournures impersonnelles "
            '(ex: "Sa participation...", "Il convient de...")'
        )
    raise ValueError(f"Unhandled gender: {gender!r}")


def style_lines(style: StyleConfig) -> List[str]:
    """
    Style section lines, in prompt order.

    Tone and voice lines appear only for directive values, the length line
    only for a non-zero target, and free-form instructions only when set
    and enabled. The no-grades and no-preamble lines are always present.
    """
    lines = []

    tone = tone_instruction(style.tone)
    if tone:
        lines.append(tone)

    voice = voice_instruction(style.voice)
    if voice:
        lines.append(voice)

    if style.length_words > 0:
        lines.append(f"Rédige une appréciation d'environ {style.length_words} mots.")

    lines.append("Ne mentionne pas les notes chiffrées (moyennes) dans le texte.")
    lines.append("Génère l'appréciation directement, sans titre ni préambule.")

    instructions = style.style_instructions.strip()
    if instructions and style.enable_style_instructions:
        lines.append(f"Note : {instructions}")

    return lines


def opening_line(style: StyleConfig, period_long_label: str) -> str:
    """First sentence of the generation prompt."""
    discipline = (style.discipline or "").strip()
    discipline_context = f" en {discipline}" if discipline else ""
    return (
        f"Rédige l'appréciation de l'élève {NAME_PLACEHOLDER}{discipline_context} "
        f"pour le '{period_long_label}'."
    )
