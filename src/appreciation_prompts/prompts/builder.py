"""
Prompt assembly for appreciation generation.

Turns a student record, explicit style and threshold settings and an
observation synthesis into the three prompts sent to the generation client:
the appreciation itself, a strengths/weaknesses analysis and next steps.

Information-flow rules enforced here:
- the student's names never leave as-is: every user-supplied value is
  scrubbed before it is rendered into a template
- nothing positioned after the current period is rendered
- the stored appreciation of the current period is kept out of the
  generation prompt so a regeneration does not anchor on it
"""

import logging
from typing import List, Optional, Sequence

from appreciation_prompts.analysis.evolution import classify_evolutions, format_evolution
from appreciation_prompts.analysis.periods import period_label, resolve_period_sequence, window_up_to
from appreciation_prompts.errors import MissingCurrentPeriodDataError
from appreciation_prompts.journal.synthesis import DEFAULT_THRESHOLD, check_threshold, synthesize_for_period
from appreciation_prompts.models import (
    EvolutionResult,
    PeriodRecord,
    PromptBundle,
    StudentRecord,
    StyleConfig,
    ThresholdPolicy
)
from appreciation_prompts.prompts.style import gender_hint, opening_line, style_lines
from appreciation_prompts.prompts.templates import TemplateManager, get_template_manager
from appreciation_prompts.utils.text import NAME_PLACEHOLDER, anonymize, detect_gender, format_grade


logger = logging.getLogger(__name__)

TO_BE_GENERATED = "[à générer]"


class PromptAssembler:
    """
    Builds the PromptBundle for a student.

    All configuration is passed in explicitly; an assembler holds no state
    that changes between calls, so one instance can serve any number of
    students.
    """

    def __init__(
        self,
        style: Optional[StyleConfig] = None,
        policy: Optional[ThresholdPolicy] = None,
        journal_threshold: int = DEFAULT_THRESHOLD,
        template_manager: Optional[TemplateManager] = None
    ):
        self.style = style or StyleConfig()
        self.policy = policy or ThresholdPolicy()
        self.journal_threshold = check_threshold(journal_threshold)
        self.templates = template_manager or get_template_manager()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def assemble(self, record: StudentRecord, periods: Optional[Sequence[str]] = None) -> PromptBundle:
        """Synthesize the record's journal for its current period, then build prompts."""
        synthesis = synthesize_for_period(record.journal, record.current_period, self.journal_threshold)
        return self.build(record, synthesis, periods)

    def build(
        self,
        record: StudentRecord,
        journal_synthesis: str = "",
        periods: Optional[Sequence[str]] = None
    ) -> PromptBundle:
        """
        Build the three prompts for ``record.current_period``.

        Args:
            record: Student record; must hold an entry for its current period
            journal_synthesis: Output of the significance filter (may be empty)
            periods: Canonical period sequence; defaults to the one containing
                the current period

        Raises:
            UnknownPeriodError: If the current period is not in the sequence
            MissingCurrentPeriodDataError: If the current period has no entry
            InvalidGradeError: If a recorded grade is invalid
        """
        current = record.current_period
        sequence = list(periods) if periods is not None else resolve_period_sequence(current)
        window = window_up_to(sequence, current)

        current_data = record.periods.get(current)
        if current_data is None:
            raise MissingCurrentPeriodDataError(current, record.id)

        evolutions = self.window_evolutions(record, sequence, window)
        evolution_text = "\n".join(format_evolution(evolution) for evolution in evolutions)

        statuses = [self._scrub(status, record) for status in record.statuses]
        status_line = f"Statuts : {', '.join(statuses)}" if statuses else ""
        context = self._scrub(self._context_for(record, current_data), record)
        context_line = f'Contexte : "{context}"' if context else ""
        synthesis = self._scrub((journal_synthesis or "").strip(), record)
        style = self.style.model_copy(
            update={"style_instructions": self._scrub(self.style.style_instructions, record)}
        )

        appreciation_prompt = self.templates.render(
            "appreciation",
            opening=opening_line(self.style, period_label(current, long=True)),
            style_instructions="\n".join(style_lines(style)),
            student_block=self._student_block(
                record, window, evolution_text, status_line, context_line, synthesis
            )
        )

        student_data = self._analysis_data(window, record, evolution_text, status_line, context_line, synthesis)
        reference = self._scrub(current_data.appreciation.strip(), record) or "N/A"

        strengths_weaknesses_prompt = self.templates.render(
            "strengths_weaknesses",
            current_period=current,
            student_data=student_data,
            reference_appreciation=reference
        )
        next_steps_prompt = self.templates.render(
            "next_steps",
            student_data=student_data,
            reference_appreciation=reference
        )

        self.logger.debug(
            f"Assembled prompts for student {record.id or '<no id>'}",
            extra={
                "period": current,
                "window": window,
                "evolutions": len(evolutions),
                "has_journal": bool(synthesis)
            }
        )

        return PromptBundle(
            appreciation_prompt=appreciation_prompt,
            strengths_weaknesses_prompt=strengths_weaknesses_prompt,
            next_steps_prompt=next_steps_prompt
        )

    def window_evolutions(
        self,
        record: StudentRecord,
        sequence: Sequence[str],
        window: Sequence[str]
    ) -> List[EvolutionResult]:
        """Evolutions over the whole record, kept only if they end inside the window."""
        in_window = set(window)
        return [
            evolution
            for evolution in classify_evolutions(sequence, record.periods, self.policy)
            if evolution.to_period in in_window
        ]

    def _context_for(self, record: StudentRecord, current_data: PeriodRecord) -> str:
        context = (current_data.context or "").strip()
        if context:
            return context
        legacy = (record.instructions or "").strip()
        if legacy:
            self.logger.debug(f"Using record-level instructions as context for {record.id or '<no id>'}")
        return legacy

    def _period_lines(self, record: StudentRecord, window: Sequence[str], mask_current: bool) -> str:
        lines = []
        for period in window:
            data = record.periods.get(period) or PeriodRecord()
            eval_count = f" ({data.evaluation_count} éval.)" if data.evaluation_count is not None else ""
            if mask_current and period == record.current_period:
                app_text = TO_BE_GENERATED
            else:
                app_text = f'"{self._scrub(data.appreciation.strip(), record) or "N/A"}"'
            lines.append(f"{period} : Moy {format_grade(data.grade)}{eval_count}, App {app_text}")
        return "\n".join(lines)

    def _student_block(
        self,
        record: StudentRecord,
        window: Sequence[str],
        evolution_text: str,
        status_line: str,
        context_line: str,
        synthesis: str
    ) -> str:
        gender = detect_gender(record.first_name)
        lines = [f"Élève : {NAME_PLACEHOLDER} ({gender_hint(gender)})"]
        if status_line:
            lines.append(status_line)
        if context_line:
            lines.append(context_line)
        if synthesis:
            lines.extend(["", f"Observations du professeur : {synthesis}"])
        lines.append(f"Période à évaluer : {record.current_period}")
        lines.extend(["", "Périodes :", self._period_lines(record, window, mask_current=True)])
        if evolution_text:
            lines.extend(["", evolution_text])
        return "\n".join(lines)

    def _analysis_data(
        self,
        window: Sequence[str],
        record: StudentRecord,
        evolution_text: str,
        status_line: str,
        context_line: str,
        synthesis: str
    ) -> str:
        # Analysis prompts run after generation, so the stored text is the reference
        parts = [self._period_lines(record, window, mask_current=False)]
        if evolution_text:
            parts.append(evolution_text)
        if status_line:
            parts.append(status_line)
        if context_line:
            parts.append(context_line)
        if synthesis:
            parts.append(f"Observations : {synthesis}")
        return "\n".join(parts)

    @staticmethod
    def _scrub(text: str, record: StudentRecord) -> str:
        return anonymize(text, record.first_name, record.last_name)


def build_prompts(
    record: StudentRecord,
    style: StyleConfig,
    journal_synthesis: str,
    policy: ThresholdPolicy,
    periods: Optional[Sequence[str]] = None,
    template_manager: Optional[TemplateManager] = None
) -> PromptBundle:
    """Build the prompt bundle for a student; see PromptAssembler.build."""
    assembler = PromptAssembler(style=style, policy=policy, template_manager=template_manager)
    return assembler.build(record, journal_synthesis, periods)
