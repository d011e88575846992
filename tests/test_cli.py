"""Tests for the command-line interface."""

import json
import pytest

from typer.testing import CliRunner

from appreciation_prompts import __version__
from appreciation_prompts.cli import app


runner = CliRunner()


@pytest.fixture
def record_file(tmp_path):
    """Record evaluated at T2 with chatter logged twice."""
    path = tmp_path / "student.json"
    path.write_text(json.dumps({
        "id": "s1",
        "prenom": "Léa",
        "nom": "Martin",
        "currentPeriod": "T2",
        "periods": {
            "T1": {"grade": 12.5, "appreciation": "Bon début."},
            "T2": {"grade": 13.2, "appreciation": ""},
            "T3": {"grade": 18.0, "appreciation": "Plus tard."}
        },
        "journal": [
            {"id": "j_1", "date": "2025-01-06T08:00:00Z", "tags": ["bavardage"], "period": "T2"},
            {"id": "j_2", "date": "2025-01-13T08:00:00Z", "tags": ["bavardage"], "period": "T2",
             "note": "Léa discute pendant les consignes"},
            {"id": "j_3", "date": "2025-01-20T08:00:00Z", "tags": ["oubli"], "period": "T2"}
        ]
    }), encoding="utf-8")
    return path


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_prompts_json(record_file):
    result = runner.invoke(app, ["prompts", str(record_file), "--json"])
    assert result.exit_code == 0

    bundle = json.loads(result.output)
    assert set(bundle) == {"appreciation_prompt", "strengths_weaknesses_prompt", "next_steps_prompt"}
    prompt = bundle["appreciation_prompt"]
    assert "Évolution T1->T2 : Progression (+0.7 pts)" in prompt
    assert 'Observations: Bavardage. Notes: "[PRÉNOM] discute pendant les consignes"' in prompt
    assert "Léa" not in result.output
    assert "Plus tard." not in result.output


def test_prompts_with_style_file(record_file, tmp_path):
    style = tmp_path / "style.yaml"
    style.write_text("tone: 5\nlength: 0\n", encoding="utf-8")
    result = runner.invoke(app, ["prompts", str(record_file), "--style", str(style), "--json"])
    assert result.exit_code == 0
    assert "Adopte un ton strict et formel." in json.loads(result.output)["appreciation_prompt"]


def test_prompts_missing_current_period(tmp_path):
    path = tmp_path / "student.yaml"
    path.write_text("currentPeriod: T2\nperiods:\n  T1: {grade: 10}\n", encoding="utf-8")
    result = runner.invoke(app, ["prompts", str(path)])
    assert result.exit_code == 1
    assert "Aucune donnée pour la période en cours" in result.output


def test_prompts_invalid_grade(tmp_path):
    path = tmp_path / "student.yaml"
    path.write_text("currentPeriod: T1\nperiods:\n  T1: {grade: 42}\n", encoding="utf-8")
    result = runner.invoke(app, ["prompts", str(path)])
    assert result.exit_code == 1
    assert "Moyenne invalide (T1)" in result.output
    assert "validation error" not in result.output


def test_prompts_missing_file(tmp_path):
    result = runner.invoke(app, ["prompts", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_evolution_table(record_file):
    result = runner.invoke(app, ["evolution", str(record_file)])
    assert result.exit_code == 0
    assert "Progression" in result.output
    assert "+0.7" in result.output
    # T2->T3 is after the current period
    assert "+4.8" not in result.output


def test_journal_summary(record_file):
    result = runner.invoke(app, ["journal", str(record_file)])
    assert result.exit_code == 0
    assert "Bavardage" in result.output
    assert "isolated" in result.output


def test_refine_text():
    result = runner.invoke(app, ["refine", "concise", "--text", "Un deux trois quatre cinq"])
    assert result.exit_code == 0
    assert "environ 4 mots" in result.output


def test_refine_context_requires_context():
    result = runner.invoke(app, ["refine", "context", "--text", "Bon trimestre."])
    assert result.exit_code == 1
    assert "non-empty context" in result.output


def test_refine_requires_text():
    result = runner.invoke(app, ["refine", "polish"])
    assert result.exit_code == 1


def test_refine_context_merge_alias():
    result = runner.invoke(
        app, ["refine", "context-merge", "--text", "Bon trimestre.", "--context", "Absente en mars"]
    )
    assert result.exit_code == 0
    assert '"Absente en mars"' in result.output


def test_refine_unknown_kind_uses_default_rewording():
    result = runner.invoke(app, ["refine", "shorter", "--text", "Bon trimestre."])
    assert result.exit_code == 0
    assert "Reformule cette appréciation" in result.output
