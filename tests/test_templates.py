"""Tests for the prompt template system."""

import json
import pytest

from appreciation_prompts.prompts.templates import (
    FileTemplateLoader,
    InMemoryTemplateLoader,
    PromptTemplate,
    PromptVariable,
    TemplateManager,
    TemplateRenderError,
    builtin_templates,
    get_template_manager
)


class TestPromptTemplate:
    """Test template rendering."""

    def test_render_with_defaults(self):
        template = PromptTemplate(
            name="greeting",
            template="Bonjour $who$suffix",
            variables=[PromptVariable("who", "Name"), PromptVariable("suffix", "Suffix", False, " !")]
        )
        assert template.render(who="[PRÉNOM]") == "Bonjour [PRÉNOM] !"
        assert template.render(who="tous", suffix=".") == "Bonjour tous."

    def test_missing_required_variable(self):
        template = PromptTemplate(name="t", template="$a", variables=[PromptVariable("a", "A")])
        with pytest.raises(TemplateRenderError, match="Missing required variables"):
            template.render()

    def test_undeclared_placeholder(self):
        template = PromptTemplate(name="t", template="$a $b", variables=[PromptVariable("a", "A")])
        with pytest.raises(TemplateRenderError, match="missing variable"):
            template.render(a="x")

    def test_braces_in_user_text_are_inert(self):
        template = PromptTemplate(name="t", template="Texte : $text", variables=[PromptVariable("text", "T")])
        assert template.render(text="{prenom} et ${x}") == "Texte : {prenom} et ${x}"


class TestBuiltins:
    """Test the built-in template set."""

    def test_builtin_names(self):
        names = {template.name for template in builtin_templates()}
        assert {"appreciation", "strengths_weaknesses", "next_steps"} <= names
        for kind in ("concise", "detailed", "polish", "variations", "encouraging", "formal", "context", "default"):
            assert f"refinement_{kind}" in names

    def test_shared_manager(self):
        assert get_template_manager() is get_template_manager()
        assert "appreciation" in get_template_manager().list_all_templates()


class TestTemplateManager:
    """Test lookup order and caching."""

    def test_unknown_template(self):
        with pytest.raises(KeyError):
            TemplateManager().get_template("nope")

    def test_override_wins_and_cache_is_cleared(self):
        manager = TemplateManager()
        builtin = manager.get_template("refinement_default")

        loader = InMemoryTemplateLoader()
        loader.add_template(PromptTemplate(name="refinement_default", template="Autre : $original"))
        manager.add_override(loader)

        assert manager.get_template("refinement_default") is not builtin
        assert manager.render("refinement_default", original="texte") == "Autre : texte"

    def test_from_directory_none(self):
        manager = TemplateManager.from_directory(None)
        assert manager.override_loaders == []


class TestFileTemplateLoader:
    """Test loading templates from disk."""

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileTemplateLoader(tmp_path / "missing")

    def test_yaml_json_and_text_templates(self, tmp_path):
        (tmp_path / "next_steps.yaml").write_text(
            "description: Short next steps\n"
            "template: |\n"
            "  Deux pistes pour : $student_data\n"
            "variables:\n"
            "  - name: student_data\n"
            "    description: Student data\n",
            encoding="utf-8"
        )
        (tmp_path / "refinement_formal.json").write_text(
            json.dumps({"template": "Formel : $original", "version": 2}), encoding="utf-8"
        )
        (tmp_path / "refinement_polish.txt").write_text("Corrige : $original", encoding="utf-8")

        loader = FileTemplateLoader(tmp_path)
        assert loader.list_templates() == ["next_steps", "refinement_formal", "refinement_polish"]

        next_steps = loader.load_template("next_steps")
        assert next_steps.description == "Short next steps"
        assert next_steps.render(student_data="T1") == "Deux pistes pour : T1\n"
        assert loader.load_template("refinement_formal").version == "2"
        assert loader.load_template("refinement_polish").render(original="x") == "Corrige : x"

        with pytest.raises(KeyError):
            loader.load_template("appreciation")

    def test_directory_overrides_builtins(self, tmp_path):
        (tmp_path / "refinement_concise.txt").write_text("Plus court : $original", encoding="utf-8")
        manager = TemplateManager.from_directory(tmp_path)

        assert manager.render("refinement_concise", original="a b") == "Plus court : a b"
        # Names not in the directory fall back to the built-ins
        assert manager.get_template("appreciation").tags == ["generation"]

    def test_yaml_without_template_key(self, tmp_path):
        (tmp_path / "broken.yaml").write_text("description: nothing\n", encoding="utf-8")
        with pytest.raises(TemplateRenderError, match="'template' key"):
            FileTemplateLoader(tmp_path).load_template("broken")
