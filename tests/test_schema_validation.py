"""Tests for schema validation helpers and JSON utilities.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import pytest

from research_ai.schemas import INTAKE_OUTPUT_SCHEMA, PHASE_SCHEMAS
from research_ai.utils import (
    PhaseSchemaError,
    extract_json_object,
    is_valid_phase_record,
    safe_json_loads,
    sanitize_filename,
    strip_unknown_fields,
    validate_against_schema,
    validate_phase_record,
)

from conftest import build_phase_record


@pytest.mark.unit
def test_phase_schema_error_is_value_error() -> None:
    assert issubclass(PhaseSchemaError, ValueError)


@pytest.mark.unit
def test_validate_phase_record_reports_path() -> None:
    record = build_phase_record("C")
    record["costLimitUsd"] = 1000

    with pytest.raises(PhaseSchemaError) as excinfo:
        validate_phase_record(record, "C")

    assert "Phase C output" in str(excinfo.value)
    assert "costLimitUsd" in str(excinfo.value)


@pytest.mark.unit
def test_validate_against_schema_top_level_error() -> None:
    with pytest.raises(PhaseSchemaError, match="Intake output failed validation"):
        validate_against_schema({}, INTAKE_OUTPUT_SCHEMA, label="Intake output")


@pytest.mark.unit
def test_is_valid_phase_record_non_dict() -> None:
    assert is_valid_phase_record(["A"], "A") is False
    assert is_valid_phase_record(None, "A") is False


@pytest.mark.unit
def test_extract_json_object_variants() -> None:
    assert extract_json_object('{"a": 1}') == {"a": 1}
    assert extract_json_object('Here you go:\n```json\n{"a": 2}\n```') == {"a": 2}
    assert extract_json_object('Result: {"a": {"b": 3}} done') == {"a": {"b": 3}}
    assert extract_json_object("no json here") is None
    assert extract_json_object("") is None
    assert extract_json_object("[1, 2]") is None


@pytest.mark.unit
def test_safe_json_loads_default() -> None:
    assert safe_json_loads("{bad", default={}) == {}
    assert safe_json_loads(b'{"x": 1}') == {"x": 1}
    assert safe_json_loads("", default="empty") == "empty"


@pytest.mark.unit
def test_sanitize_filename() -> None:
    assert "/" not in sanitize_filename("run/../../etc")
    assert sanitize_filename("") == "unnamed"


@pytest.mark.unit
def test_strip_unknown_fields_drops_undeclared_keys_at_every_level() -> None:
    record = build_phase_record("D")
    record["scratchpad"] = "model notes"
    record["methods"][0]["confidence"] = "high"
    original = {**record, "methods": [dict(m) for m in record["methods"]]}

    stripped = strip_unknown_fields(record, PHASE_SCHEMAS["D"])

    assert "scratchpad" not in stripped
    assert "confidence" not in stripped["methods"][0]
    assert stripped["businessGoal"] == record["businessGoal"]
    assert record == original
    validate_phase_record(stripped, "D")


@pytest.mark.unit
def test_strip_unknown_fields_leaves_non_objects_alone() -> None:
    assert strip_unknown_fields("text", INTAKE_OUTPUT_SCHEMA) == "text"
    assert strip_unknown_fields({"enrichedPrompt": "p", "x": 1}, INTAKE_OUTPUT_SCHEMA) == {"enrichedPrompt": "p"}
