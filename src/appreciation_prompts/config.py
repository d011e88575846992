"""Configuration management for the appreciation prompt pipeline."""

import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from appreciation_prompts.analysis.periods import PeriodSystem
from appreciation_prompts.models import StyleConfig, ThresholdPolicy, Tone, Voice, check_threshold_ordering


class EvolutionConfig(BaseSettings):
    """Grade evolution thresholds, in points out of 20."""

    model_config = SettingsConfigDict(env_prefix="EVOLUTION_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    very_positive: float = 2.0
    positive: float = 0.5
    negative: float = -0.5
    very_negative: float = -2.0

    @model_validator(mode="after")
    def validate_ordering(self):
        """Reject nonsensical threshold orderings at load time."""
        check_threshold_ordering(self.very_positive, self.positive, self.negative, self.very_negative)
        return self

    def to_policy(self) -> ThresholdPolicy:
        return ThresholdPolicy(
            very_positive=self.very_positive,
            positive=self.positive,
            negative=self.negative,
            very_negative=self.very_negative
        )


class JournalConfig(BaseSettings):
    """Observation journal significance settings."""

    model_config = SettingsConfigDict(env_prefix="JOURNAL_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    default_threshold: int = Field(2, ge=1, le=5)
    class_thresholds: Dict[str, int] = Field(default_factory=dict)  # class id -> threshold

    @field_validator("class_thresholds")
    @classmethod
    def validate_class_thresholds(cls, v):
        for class_id, threshold in v.items():
            if not 1 <= threshold <= 5:
                raise ValueError(f"Threshold for class {class_id!r} must be between 1 and 5, got {threshold}")
        return v


class StyleDefaults(BaseSettings):
    """Default appreciation style when the teacher has not customised one."""

    model_config = SettingsConfigDict(env_prefix="STYLE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    length_words: int = Field(40, ge=0)
    tone: int = Field(3, ge=1, le=5)
    voice: Voice = Voice.DEFAULT
    style_instructions: str = ""
    enable_style_instructions: bool = True
    discipline: Optional[str] = None

    def to_style(self) -> StyleConfig:
        return StyleConfig(
            length_words=self.length_words,
            tone=Tone(self.tone),
            voice=self.voice,
            style_instructions=self.style_instructions,
            enable_style_instructions=self.enable_style_instructions,
            discipline=self.discipline
        )


class RefinementConfig(BaseSettings):
    """Refinement prompt settings."""

    model_config = SettingsConfigDict(env_prefix="REFINEMENT_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    detailed_factor: float = Field(1.20, ge=1.15, le=1.20)


class AppConfig(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    name: str = "appreciation-prompts"
    version: str = "0.1.0"
    log_level: str = "INFO"
    debug: bool = False
    period_system: PeriodSystem = PeriodSystem.TRIMESTRES
    templates_dir: Optional[Path] = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    evolution: EvolutionConfig = Field(default_factory=EvolutionConfig)
    journal: JournalConfig = Field(default_factory=JournalConfig)
    style: StyleDefaults = Field(default_factory=StyleDefaults)
    refinement: RefinementConfig = Field(default_factory=RefinementConfig)
    app: AppConfig = Field(default_factory=AppConfig)

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment."""
        return cls()


# Global settings instance
settings = Settings.load()
