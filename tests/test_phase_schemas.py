"""Tests for the cumulative phase record schemas.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import pytest

from research_ai.schemas import (
    PHASE_IDS,
    PHASE_SCHEMAS,
    RESEARCH_TYPES,
    extend_schema,
    get_phase_schema,
    phase_added_fields,
)
from research_ai.utils import is_valid_phase_record

from conftest import build_phase_record


class TestProgressiveExtension:
    """Each phase schema is its predecessor plus new fields."""

    @pytest.mark.unit
    @pytest.mark.parametrize("index", range(1, len(PHASE_IDS)))
    def test_properties_and_required_are_supersets(self, index):
        previous = PHASE_SCHEMAS[PHASE_IDS[index - 1]]
        current = PHASE_SCHEMAS[PHASE_IDS[index]]

        assert set(previous["properties"]) <= set(current["properties"])
        assert set(previous["required"]) <= set(current["required"])

    @pytest.mark.unit
    @pytest.mark.parametrize("phase_id", PHASE_IDS)
    def test_phase_is_pinned(self, phase_id):
        assert get_phase_schema(phase_id)["properties"]["phase"]["const"] == phase_id

    @pytest.mark.unit
    def test_extend_schema_does_not_mutate_base(self):
        base = PHASE_SCHEMAS["A"]
        before = set(base["properties"])

        extended = extend_schema(base, "Z", {"extra": {"type": "string"}}, required=["extra"])

        assert set(base["properties"]) == before
        assert "extra" in extended["properties"]
        assert "extra" in extended["required"]
        assert base["properties"]["phase"]["const"] == "A"

    @pytest.mark.unit
    def test_extend_schema_rejects_redefinition(self):
        with pytest.raises(ValueError, match="businessGoal"):
            extend_schema(PHASE_SCHEMAS["A"], "B", {"businessGoal": {"type": "integer"}})

    @pytest.mark.unit
    def test_phase_added_fields(self):
        assert phase_added_fields("B") == ["researchTypeValidated", "validationNotes"]
        assert phase_added_fields("F") == ["executorFeedback", "status"]

    @pytest.mark.unit
    def test_unknown_phase(self):
        with pytest.raises(KeyError, match="Unknown phase"):
            get_phase_schema("G")


class TestEnumerations:
    """Closed value sets are enforced by the schemas."""

    @pytest.mark.unit
    @pytest.mark.parametrize("horizon", [30, 60, 90])
    def test_allowed_horizons(self, horizon):
        assert is_valid_phase_record(build_phase_record("A", horizon=horizon), "A")

    @pytest.mark.unit
    @pytest.mark.parametrize("horizon", [45, 0, "60"])
    def test_rejected_horizons(self, horizon):
        assert not is_valid_phase_record(build_phase_record("A", horizon=horizon), "A")

    @pytest.mark.unit
    def test_research_type_must_be_one_of_five(self):
        assert len(RESEARCH_TYPES) == 5
        record = build_phase_record("A")
        record["researchType"] = "Market Research"
        assert not is_valid_phase_record(record, "A")

    @pytest.mark.unit
    def test_final_status_enum(self):
        record = build_phase_record("F")
        assert is_valid_phase_record(record, "F")
        record["status"] = "DONE"
        assert not is_valid_phase_record(record, "F")

    @pytest.mark.unit
    def test_cost_and_time_limits(self):
        record = build_phase_record("C")
        record["costLimitUsd"] = 900
        assert not is_valid_phase_record(record, "C")

        record = build_phase_record("C")
        record["timeLimitDays"] = 5
        assert not is_valid_phase_record(record, "C")

    @pytest.mark.unit
    def test_method_count_bounds(self):
        record = build_phase_record("D")
        record["methods"] = []
        assert not is_valid_phase_record(record, "D")

        record["methods"] = build_phase_record("D")["methods"] * 4
        assert not is_valid_phase_record(record, "D")


class TestCumulativeRecords:
    """A later record carries every earlier field."""

    @pytest.mark.unit
    @pytest.mark.parametrize("phase_id", PHASE_IDS)
    def test_fixture_records_validate(self, phase_id):
        assert is_valid_phase_record(build_phase_record(phase_id), phase_id)

    @pytest.mark.unit
    def test_f_record_is_not_a_valid_a_record(self):
        assert not is_valid_phase_record(build_phase_record("F"), "A")

    @pytest.mark.unit
    def test_missing_required_field_is_invalid(self):
        record = build_phase_record("B")
        del record["businessGoal"]
        assert not is_valid_phase_record(record, "B")
