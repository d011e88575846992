"""Prompt template system: built-in French templates with file-based overrides."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from string import Template
from typing import Any, Dict, List, Optional, Union

import yaml


logger = logging.getLogger(__name__)


class TemplateRenderError(ValueError):
    """Raised when a template cannot be rendered with the given variables."""
    pass


class TemplateFormat(Enum):
    """Supported template formats."""
    STRING = "string"
    YAML = "yaml"
    JSON = "json"


@dataclass
class PromptVariable:
    """Represents a variable in a prompt template."""
    name: str
    description: str
    required: bool = True
    default_value: Optional[Any] = None


@dataclass
class PromptTemplate:
    """Represents a prompt template with variables and metadata."""
    name: str
    template: str
    description: str = ""
    variables: List[PromptVariable] = field(default_factory=list)
    format: TemplateFormat = TemplateFormat.STRING
    tags: List[str] = field(default_factory=list)
    version: str = "1.0"

    def render(self, **kwargs) -> str:
        """Render the template with provided variables."""
        required_vars = {var.name for var in self.variables if var.required}
        missing_required = required_vars - set(kwargs.keys())
        if missing_required:
            raise TemplateRenderError(
                f"Missing required variables for '{self.name}': {sorted(missing_required)}"
            )

        render_vars = kwargs.copy()
        for var in self.variables:
            if var.name not in render_vars and var.default_value is not None:
                render_vars[var.name] = var.default_value

        # string.Template so that user text containing braces is inert
        try:
            return Template(self.template).substitute(render_vars)
        except KeyError as e:
            raise TemplateRenderError(f"Template '{self.name}' rendering failed: missing variable {e}")
        except ValueError as e:
            raise TemplateRenderError(f"Template '{self.name}' is malformed: {e}")


class TemplateLoader(ABC):
    """Abstract base class for template loaders."""

    @abstractmethod
    def load_template(self, template_name: str) -> PromptTemplate:
        """Load a template by name; raise KeyError if unknown."""
        pass

    @abstractmethod
    def list_templates(self) -> List[str]:
        """List all available template names."""
        pass


class FileTemplateLoader(TemplateLoader):
    """
    Load templates from a directory.

    ``<name>.yaml``/``.yml`` and ``.json`` files hold a mapping with a
    ``template`` key and optional ``description``, ``variables``, ``tags``
    and ``version``; ``<name>.txt`` files hold the raw template text.
    """

    EXTENSIONS = (".yaml", ".yml", ".json", ".txt")

    def __init__(self, templates_dir: Union[str, Path]):
        self.templates_dir = Path(templates_dir)
        if not self.templates_dir.is_dir():
            raise FileNotFoundError(f"Templates directory not found: {self.templates_dir}")

    def load_template(self, template_name: str) -> PromptTemplate:
        """Load a template from file."""
        for ext in self.EXTENSIONS:
            template_path = self.templates_dir / f"{template_name}{ext}"
            if template_path.exists():
                return self._load_from_file(template_path)

        raise KeyError(f"Template '{template_name}' not found in {self.templates_dir}")

    def list_templates(self) -> List[str]:
        templates = set()
        for ext in self.EXTENSIONS:
            for template_path in self.templates_dir.glob(f"*{ext}"):
                templates.add(template_path.stem)
        return sorted(templates)

    def _load_from_file(self, template_path: Path) -> PromptTemplate:
        with open(template_path, "r", encoding="utf-8") as f:
            content = f.read()

        if template_path.suffix in (".yaml", ".yml"):
            return self._from_mapping(template_path.stem, yaml.safe_load(content), TemplateFormat.YAML)
        elif template_path.suffix == ".json":
            return self._from_mapping(template_path.stem, json.loads(content), TemplateFormat.JSON)
        else:
            return PromptTemplate(
                name=template_path.stem,
                template=content,
                description=f"Plain text template: {template_path.stem}",
                format=TemplateFormat.STRING
            )

    def _from_mapping(self, name: str, data: Dict[str, Any], fmt: TemplateFormat) -> PromptTemplate:
        if not isinstance(data, dict) or "template" not in data:
            raise TemplateRenderError(f"Template file for '{name}' must define a 'template' key")

        variables = [PromptVariable(**var_data) for var_data in data.get("variables", [])]
        return PromptTemplate(
            name=name,
            template=data["template"],
            description=data.get("description", ""),
            variables=variables,
            format=fmt,
            tags=data.get("tags", []),
            version=str(data.get("version", "1.0"))
        )


class InMemoryTemplateLoader(TemplateLoader):
    """In-memory template loader for built-in and test templates."""

    def __init__(self):
        self.templates: Dict[str, PromptTemplate] = {}

    def add_template(self, template: PromptTemplate):
        self.templates[template.name] = template

    def load_template(self, template_name: str) -> PromptTemplate:
        if template_name not in self.templates:
            raise KeyError(f"Template '{template_name}' not found")
        return self.templates[template_name]

    def list_templates(self) -> List[str]:
        return list(self.templates.keys())


class TemplateManager:
    """
    Template lookup with caching.

    Override loaders are consulted in the order they were added; the
    built-in loader answers for any name they do not define.
    """

    def __init__(self, overrides: Optional[List[TemplateLoader]] = None):
        self.builtin_loader = InMemoryTemplateLoader()
        self.override_loaders: List[TemplateLoader] = list(overrides or [])
        self.template_cache: Dict[str, PromptTemplate] = {}

        for template in builtin_templates():
            self.builtin_loader.add_template(template)

    @classmethod
    def from_directory(cls, templates_dir: Optional[Union[str, Path]]) -> "TemplateManager":
        """Manager using ``templates_dir`` (if given) to override built-ins."""
        if templates_dir is None:
            return cls()
        return cls(overrides=[FileTemplateLoader(templates_dir)])

    def add_override(self, loader: TemplateLoader):
        self.override_loaders.append(loader)
        self.clear_cache()

    def get_template(self, template_name: str) -> PromptTemplate:
        """Get a template by name, with caching."""
        if template_name in self.template_cache:
            return self.template_cache[template_name]

        template = None
        for loader in self.override_loaders:
            try:
                template = loader.load_template(template_name)
                logger.debug(f"Template '{template_name}' overridden by {type(loader).__name__}")
                break
            except KeyError:
                continue

        if template is None:
            template = self.builtin_loader.load_template(template_name)

        self.template_cache[template_name] = template
        return template

    def render(self, template_name: str, **variables) -> str:
        return self.get_template(template_name).render(**variables)

    def list_all_templates(self) -> List[str]:
        names = set(self.builtin_loader.list_templates())
        for loader in self.override_loaders:
            names.update(loader.list_templates())
        return sorted(names)

    def clear_cache(self):
        self.template_cache.clear()


STRICT_OUTPUT_DIRECTIVE = (
    "IMPORTANT: Réponds uniquement avec le texte brut. "
    "Aucune introduction, aucun commentaire, aucun formatage."
)


def _refinement(name: str, instruction: str, description: str, extra: Optional[List[PromptVariable]] = None) -> PromptTemplate:
    return PromptTemplate(
        name=name,
        template=instruction + "\n\n$original\n\n$directive",
        description=description,
        variables=[
            PromptVariable("original", "Appreciation text to refine"),
            PromptVariable("length_clause", "', environ N mots' or empty", False, ""),
            PromptVariable("directive", "Plain-text output directive", False, STRICT_OUTPUT_DIRECTIVE),
        ] + (extra or []),
        tags=["refinement"]
    )


def builtin_templates() -> List[PromptTemplate]:
    """Built-in French prompt templates."""
    data_variables = [
        PromptVariable("current_period", "Period being evaluated"),
        PromptVariable("student_data", "Rendered periods, evolutions and context lines"),
        PromptVariable("reference_appreciation", "Stored appreciation of the current period"),
    ]

    appreciation = PromptTemplate(
        name="appreciation",
        template="""$opening

L'appréciation doit être cohérente avec le niveau de réussite suggéré par la moyenne, tout en tenant compte du contexte fourni sur l'élève.

--- INSTRUCTIONS DE STYLE ---
$style_instructions

--- DONNÉES DE L'ÉLÈVE ---
$student_block""",
        description="Generation prompt for a student appreciation",
        variables=[
            PromptVariable("opening", "Opening request naming the placeholder and the period"),
            PromptVariable("style_instructions", "Style lines, one per line"),
            PromptVariable("student_block", "Student identity, context and period data"),
        ],
        tags=["generation"]
    )

    strengths_weaknesses = PromptTemplate(
        name="strengths_weaknesses",
        template="""Analyse pour la période '$current_period'. Liste 2-3 points forts puis 2-3 points faibles.
Format : "### Points Forts" puis "### Points Faibles". Pas d'intro ni conclusion.

Données de l'élève :
$student_data

Appréciation de référence : "$reference_appreciation\"""",
        description="Strengths and weaknesses analysis of an existing appreciation",
        variables=list(data_variables),
        tags=["analysis"]
    )

    next_steps = PromptTemplate(
        name="next_steps",
        template="""Suggère 3 pistes d'amélioration concrètes. Liste numérotée, bref et direct. Pas d'intro ni conclusion.

Données de l'élève :
$student_data

Appréciation de référence : "$reference_appreciation\"""",
        description="Concrete next steps for the student",
        variables=[var for var in data_variables if var.name != "current_period"],
        tags=["analysis"]
    )

    refinements = [
        _refinement(
            "refinement_concise",
            "Rends cette appréciation plus concise$length_clause. Garde l'essentiel.",
            "Shorten to about 80% of the original length"
        ),
        _refinement(
            "refinement_detailed",
            "Développe les points de cette appréciation$length_clause. N'invente pas de faits.",
            "Expand to about 115-120% of the original length"
        ),
        _refinement(
            "refinement_polish",
            "Peaufine cette appréciation : corrige fautes, améliore fluidité, ton pro. Garde sens et longueur$length_clause.",
            "Fix mistakes and improve flow at the same length"
        ),
        _refinement(
            "refinement_variations",
            "Reformule cette appréciation différemment (vocabulaire, structure), même sens$length_clause.",
            "Reword with the same meaning and length"
        ),
        _refinement(
            "refinement_encouraging",
            "Reformule cette appréciation avec un ton plus encourageant et positif$length_clause.",
            "Warmer tone at the same length"
        ),
        _refinement(
            "refinement_formal",
            "Reformule cette appréciation dans un registre plus formel et institutionnel$length_clause.",
            "More formal register at the same length"
        ),
        _refinement(
            "refinement_context",
            "Réécris cette appréciation en intégrant l'information suivante : \"$context\"$length_clause. "
            "Garde le ton et les autres points.",
            "Merge additional teacher context into the appreciation",
            extra=[PromptVariable("context", "Context to merge into the appreciation")]
        ),
        _refinement(
            "refinement_default",
            "Reformule cette appréciation$length_clause.",
            "Generic rewording"
        ),
    ]

    return [appreciation, strengths_weaknesses, next_steps] + refinements


_default_manager: Optional[TemplateManager] = None


def get_template_manager() -> TemplateManager:
    """Shared manager holding only the built-in templates."""
    global _default_manager
    if _default_manager is None:
        _default_manager = TemplateManager()
    return _default_manager
