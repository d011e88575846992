"""
Text helpers used while assembling prompts.

Provides:
- Grammatical gender detection from a French first name
- Name anonymization with a fixed placeholder
- Word counting and grade formatting
"""

import re
import unicodedata
from enum import Enum
from typing import List, Optional, Tuple


NAME_PLACEHOLDER = "[PRÉNOM]"


class Gender(str, Enum):
    """Grammatical agreement hint for the generated text."""
    FEMININE = "féminin"
    MASCULINE = "masculin"
    INDETERMINATE = "indeterminate"


_FEMININE_NAMES = frozenset({
    "marie", "jeanne", "marguerite", "anne", "catherine", "francoise", "louise",
    "madeleine", "germaine", "suzanne", "henriette", "yvonne", "therese", "marcelle",
    "paulette", "andree", "simone", "denise", "renee", "georgette", "raymonde",
    "alice", "berthe", "lucie", "helene", "eugenie", "amelie", "augustine",
    "nathalie", "isabelle", "sylvie", "christine", "martine", "francine", "nicole",
    "patricia", "valerie", "veronique", "sandrine", "stephanie", "sophie", "celine",
    "caroline", "virginie", "audrey", "aurelie", "emilie", "julie", "marine",
    "lea", "manon", "chloe", "clara", "emma", "ines", "jade", "lola",
    "luna", "mia", "rose", "sarah", "zoe", "anna", "eva", "lena", "nina",
    "charlotte", "juliette", "agathe", "adele", "victoire", "clemence",
    "mathilde", "margot", "pauline", "elise", "ambre", "gabrielle",
    "eleonore", "apolline", "capucine", "romane", "elena", "olivia", "iris",
    "lily", "lina", "yasmine", "salome", "constance", "valentine", "heloise",
    "florine", "oceane", "maeva", "anais", "melanie", "elodie", "laetitia",
    "delphine", "severine", "corinne", "fabienne", "laurence", "beatrice", "brigitte",
    "chantal", "colette", "danielle", "elisabeth", "florence", "genevieve", "jacqueline",
    "josette", "monique", "nadine", "odette", "pascale", "pierrette", "rosine",
    "solange", "viviane", "yvette", "ginette", "huguette", "josiane", "liliane",
    "lucienne", "mauricette", "micheline", "odile", "rolande", "claudine", "gisele",
    "lydie", "maryse", "muriel", "noelle", "roselyne", "annie",
})

_MASCULINE_NAMES = frozenset({
    "jean", "pierre", "louis", "joseph", "andre", "henri", "rene", "paul", "marcel",
    "jacques", "francois", "roger", "raymond", "emile", "charles", "albert", "georges",
    "robert", "lucien", "leon", "maurice", "gaston", "eugene", "auguste", "fernand",
    "antoine", "bernard", "michel", "alain", "daniel", "patrick", "philippe",
    "christian", "eric", "laurent", "stephane", "thierry", "vincent", "bruno", "olivier",
    "pascal", "frederic", "didier", "christophe", "nicolas", "julien", "david", "thomas",
    "alexandre", "kevin", "jeremy", "sebastien", "maxime", "lucas", "hugo",
    "leo", "nathan", "gabriel", "raphael", "arthur", "jules", "adam",
    "noel", "victor", "theo", "ethan", "noah", "liam", "aaron", "clement", "mathis",
    "enzo", "tom", "matteo", "matheo", "timeo", "gabin", "martin", "valentin", "mael",
    "romain", "axel", "evan", "nolan", "logan", "simon", "eliott", "baptiste",
    "antonin", "adrien", "bastien", "samuel", "thibault", "quentin", "florian", "guillaume",
    "benjamin", "remi", "arnaud", "yann", "fabien", "cedric", "loic", "sylvain",
    "jerome", "emmanuel", "yves", "serge", "gerard", "gilles", "joel",
    "marc", "guy", "denis", "herve", "norbert", "gilbert", "edmond", "edouard",
})

# Names given to both genders are never guessed
_EPICENE_NAMES = frozenset({
    "camille", "dominique", "claude", "alex", "sacha", "eden", "charlie", "lou", "noa", "andrea",
})

_FEMININE_ENDINGS = ("ine", "ette", "elle", "enne", "anne", "ane", "ie", "ee", "a", "ise")
_MASCULINE_ENDINGS = ("ien", "ard", "aud", "ault", "ert", "ois", "ais", "ric", "in")


def _normalize(name: str) -> str:
    """Lowercase and strip accents."""
    decomposed = unicodedata.normalize("NFD", name.strip().lower())
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def _detect_single(name: str) -> Gender:
    if name in _EPICENE_NAMES:
        return Gender.INDETERMINATE
    if name in _FEMININE_NAMES:
        return Gender.FEMININE
    if name in _MASCULINE_NAMES:
        return Gender.MASCULINE

    for ending in _FEMININE_ENDINGS:
        if name.endswith(ending):
            return Gender.FEMININE
    for ending in _MASCULINE_ENDINGS:
        if name.endswith(ending):
            return Gender.MASCULINE

    return Gender.INDETERMINATE


def detect_gender(first_name: Optional[str]) -> Gender:
    """
    Guess grammatical agreement from a French first name.

    Checks the epicene, feminine and masculine dictionaries, then common
    endings. Compound names ("Jean-Pierre") are decided by their first part.
    Only ever used to choose an agreement hint, never to identify anyone.
    """
    if not first_name or not isinstance(first_name, str):
        return Gender.INDETERMINATE

    normalized = _normalize(first_name)
    if not normalized:
        return Gender.INDETERMINATE

    gender = _detect_single(normalized)
    if gender is Gender.INDETERMINATE:
        parts = [part for part in re.split(r"[-\s]+", normalized) if part]
        if len(parts) > 1:
            return _detect_single(parts[0])
    return gender


def _fold_with_offsets(text: str) -> Tuple[str, List[int]]:
    """Strip accents, keeping for each folded character its index in ``text``."""
    folded = []
    offsets = []
    for index, char in enumerate(text):
        for part in unicodedata.normalize("NFD", char):
            if not unicodedata.combining(part):
                folded.append(part)
                offsets.append(index)
    return "".join(folded), offsets


def _name_pattern(name: str) -> str:
    return r"\s+".join(re.escape(part) for part in name.split())


def anonymize(text: str, first_name: str, last_name: str = "", placeholder: str = NAME_PLACEHOLDER) -> str:
    """
    Replace every whole-word occurrence of the student's names with ``placeholder``.

    Matching ignores case and accents, so "Lea" and "LÉA" both match "Léa".
    "First Last" and "Last First" sequences collapse into a single placeholder.
    """
    if not text:
        return text
    names = [_fold_with_offsets(name.strip())[0] for name in (first_name, last_name) if name]
    names = [name for name in names if name.strip()]
    if not names:
        return text

    alternatives: List[str] = []
    if len(names) == 2:
        alternatives.append(_name_pattern(f"{names[0]} {names[1]}"))
        alternatives.append(_name_pattern(f"{names[1]} {names[0]}"))
    alternatives.extend(_name_pattern(name) for name in names)

    # Longest alternatives first so full names win over single names
    alternatives.sort(key=len, reverse=True)
    pattern = re.compile(r"(?<!\w)(?:" + "|".join(alternatives) + r")(?!\w)", re.IGNORECASE)

    folded, offsets = _fold_with_offsets(text)
    pieces = []
    position = 0
    for match in pattern.finditer(folded):
        start = offsets[match.start()]
        end = offsets[match.end() - 1] + 1
        # Swallow combining accents written after the last matched letter
        while end < len(text) and unicodedata.combining(text[end]):
            end += 1
        pieces.append(text[position:start])
        pieces.append(placeholder)
        position = end
    pieces.append(text[position:])
    return "".join(pieces)


def count_words(text: Optional[str]) -> int:
    if not isinstance(text, str):
        return 0
    return len(text.split())


def format_grade(grade: Optional[float]) -> str:
    """Format a grade as "12,5/20", or "N/A" when absent."""
    if grade is None:
        return "N/A"
    return f"{grade:.1f}".replace(".", ",") + "/20"
