"""Prompt construction: templates, style rules, assembly and refinement."""

from .templates import (
    STRICT_OUTPUT_DIRECTIVE,
    FileTemplateLoader,
    InMemoryTemplateLoader,
    PromptTemplate,
    PromptVariable,
    TemplateManager,
    TemplateRenderError,
    get_template_manager
)
from .style import gender_hint, opening_line, style_lines, tone_instruction, voice_instruction
from .builder import TO_BE_GENERATED, PromptAssembler, build_prompts
from .refinement import RefinementKind, build_refinement_prompt, length_factor, target_word_count

__all__ = [
    "PromptTemplate",
    "PromptVariable",
    "TemplateManager",
    "TemplateRenderError",
    "FileTemplateLoader",
    "InMemoryTemplateLoader",
    "get_template_manager",
    "STRICT_OUTPUT_DIRECTIVE",
    "tone_instruction",
    "voice_instruction",
    "gender_hint",
    "style_lines",
    "opening_line",
    "PromptAssembler",
    "build_prompts",
    "TO_BE_GENERATED",
    "RefinementKind",
    "build_refinement_prompt",
    "length_factor",
    "target_word_count"
]
