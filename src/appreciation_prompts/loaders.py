"""
Load student records and style settings from YAML or JSON files.

JSON is read through the YAML parser, so either format works for every
loader. Records exported by the web application (camelCase keys) load
as-is.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from appreciation_prompts.models import StudentRecord, StyleConfig


logger = logging.getLogger(__name__)


def _read_mapping(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return data


def load_student_record(path: Union[str, Path]) -> StudentRecord:
    """
    Load a StudentRecord from a file.

    Accepts either the record itself or an application result object with
    the record nested under ``studentData``.
    """
    data = _read_mapping(path)
    if "studentData" in data and isinstance(data["studentData"], dict):
        nested = dict(data["studentData"])
        for key in ("id", "nom", "prenom", "classId", "journal"):
            if key in data and key not in nested:
                nested[key] = data[key]
        data = nested

    record = StudentRecord.model_validate(data)
    logger.debug(f"Loaded record {record.id or '<no id>'} with {len(record.periods)} periods from {path}")
    return record


def load_style_config(path: Union[str, Path]) -> StyleConfig:
    """Load a StyleConfig, also accepting an ``iaConfig`` wrapper."""
    data = _read_mapping(path)
    if "iaConfig" in data and isinstance(data["iaConfig"], dict):
        data = data["iaConfig"]
    return StyleConfig.model_validate(data)
