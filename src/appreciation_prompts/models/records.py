"""
Input models for the prompt pipeline.

These Pydantic models describe what the record-management and settings
subsystems hand to the pipeline:
- Per-period academic data and the student record itself
- Teacher observation entries and the tag vocabulary
- Evolution thresholds and appreciation style settings

Field names are snake_case; camelCase aliases are accepted so that records
exported by the web application load unchanged.
"""

import math
from datetime import datetime, timezone
from enum import Enum, IntEnum
from numbers import Real
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from appreciation_prompts.errors import InvalidGradeError


GRADE_MIN = 0.0
GRADE_MAX = 20.0
NOTE_MAX_LENGTH = 280


def validate_grade(value: Any, period: Optional[str] = None) -> float:
    """Return ``value`` as a float if it is a finite grade in [0, 20]."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidGradeError(value, period)
    grade = float(value)
    if not math.isfinite(grade) or not GRADE_MIN <= grade <= GRADE_MAX:
        raise InvalidGradeError(value, period)
    return grade


def parse_grade(value: Any, period: Optional[str] = None) -> Optional[float]:
    """
    Parse a stored grade.

    Accepts numbers and "12,5" style strings; None and blank strings mean no
    grade. Anything else raises InvalidGradeError.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return None
        try:
            grade = float(text)
        except ValueError:
            raise InvalidGradeError(value, period)
        if not math.isfinite(grade) or not GRADE_MIN <= grade <= GRADE_MAX:
            raise InvalidGradeError(value, period)
        return grade
    return validate_grade(value, period)


def check_threshold_ordering(very_positive: float, positive: float, negative: float, very_negative: float):
    """Reject threshold orderings that would make the classifier meaningless."""
    if not (very_positive > positive > 0 > negative > very_negative):
        raise ValueError(
            "Evolution thresholds must satisfy "
            "very_positive > positive > 0 > negative > very_negative "
            f"(got {very_positive}, {positive}, {negative}, {very_negative})"
        )


class _RecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TagCategory(str, Enum):
    """Polarity of an observation tag."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Tag(BaseModel):
    """Catalog entry for an observation tag."""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    category: TagCategory


class PeriodRecord(_RecordModel):
    """Academic data for one reporting period."""
    model_config = ConfigDict(frozen=True)

    grade: Optional[float] = None  # None means no grade recorded
    appreciation: str = ""
    context: Optional[str] = None
    evaluation_count: Optional[int] = Field(None, ge=0, le=50)

    @field_validator("grade", mode="before")
    @classmethod
    def coerce_grade(cls, v):
        return parse_grade(v)

    @field_validator("appreciation", mode="before")
    @classmethod
    def default_appreciation(cls, v):
        return "" if v is None else v


class ObservationEntry(_RecordModel):
    """A teacher observation logged for a student during a period."""

    id: str
    date: datetime
    tags: List[str] = Field(default_factory=list)
    note: str = ""
    period: str

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, v):
        if v is None:
            return []
        return list(dict.fromkeys(v))

    @field_validator("note", mode="before")
    @classmethod
    def clamp_note(cls, v):
        if v is None:
            return ""
        return str(v).strip()[:NOTE_MAX_LENGTH]

    @field_validator("date")
    @classmethod
    def ensure_timezone(cls, v):
        # Naive timestamps are stored as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def create(
        cls,
        tags: List[str],
        period: str,
        note: str = "",
        date: Optional[datetime] = None
    ) -> "ObservationEntry":
        """
        Build a new entry as logged by a teacher.

        New entries need at least one tag, and every tag must belong to the
        catalog. Entries read back from storage skip these checks.
        """
        from appreciation_prompts.journal.tags import get_tag

        if not tags:
            raise ValueError("An observation entry needs at least one tag")
        unknown = [tag_id for tag_id in tags if get_tag(tag_id) is None]
        if unknown:
            raise ValueError(f"Unknown observation tags: {unknown}")

        return cls(
            id=f"j_{uuid4().hex[:12]}",
            date=date or datetime.now(timezone.utc),
            tags=tags,
            note=note,
            period=period
        )


class StudentRecord(_RecordModel):
    """A student's multi-period record as held by the record store."""

    id: Optional[str] = None
    first_name: str = Field("", validation_alias=AliasChoices("first_name", "firstName", "prenom"))
    last_name: str = Field("", validation_alias=AliasChoices("last_name", "lastName", "nom"))
    statuses: List[str] = Field(default_factory=list)
    periods: Dict[str, PeriodRecord] = Field(default_factory=dict)
    current_period: str
    class_id: Optional[str] = None

    # Record-level context from older exports, used when the period has none
    instructions: Optional[str] = Field(
        None, validation_alias=AliasChoices("instructions", "negativeInstructions")
    )

    journal: List[ObservationEntry] = Field(default_factory=list)

    @field_validator("periods", mode="before")
    @classmethod
    def check_period_grades(cls, v):
        """Validate raw grades first so an InvalidGradeError names its period."""
        if isinstance(v, dict):
            for period, data in v.items():
                if isinstance(data, dict) and "grade" in data:
                    parse_grade(data["grade"], period)
        return v

    @field_validator("statuses", mode="before")
    @classmethod
    def clean_statuses(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        cleaned = [str(status).strip() for status in v]
        return list(dict.fromkeys(status for status in cleaned if status))


class ThresholdPolicy(_RecordModel):
    """Cut-points splitting a grade delta into five evolution categories."""
    model_config = ConfigDict(frozen=True)

    very_positive: float = 2.0
    positive: float = 0.5
    negative: float = -0.5
    very_negative: float = -2.0

    @model_validator(mode="after")
    def check_ordering(self):
        check_threshold_ordering(self.very_positive, self.positive, self.negative, self.very_negative)
        return self


class Tone(IntEnum):
    """Tone scale for generated appreciations."""
    VERY_ENCOURAGING = 1
    BENEVOLENT = 2
    FREE = 3  # no instruction, the generator adapts to the context
    DEMANDING = 4
    STRICT = 5


class Voice(str, Enum):
    """Grammatical voice of the appreciation."""
    JE = "je"
    NOUS = "nous"
    DEFAULT = "default"


class StyleConfig(_RecordModel):
    """Style settings applied to the generation prompt."""
    model_config = ConfigDict(frozen=True)

    length_words: int = Field(
        40, ge=0, validation_alias=AliasChoices("length_words", "lengthWords", "length")
    )
    tone: Tone = Tone.FREE
    voice: Voice = Voice.DEFAULT
    style_instructions: str = ""
    enable_style_instructions: bool = True
    discipline: Optional[str] = None

    @field_validator("style_instructions", mode="before")
    @classmethod
    def default_instructions(cls, v):
        return "" if v is None else v

    @field_validator("length_words", mode="before")
    @classmethod
    def default_length(cls, v):
        return 0 if v is None else v
