"""
Tests for city record field helpers.
"""

import pytest

from cpi_engine.errors import ValidationError
from cpi_engine.records import (
    comment_field,
    merge_fields,
    normalize_fields,
    record_field_names,
    standardized_field,
    standardized_score,
)


class TestFieldNames:

    def test_suffixes(self):
        assert standardized_field("co2_emissions") == "co2_emissions_standardized"
        assert comment_field("co2_emissions") == "co2_emissions_comment"

    def test_known_names_include_hierarchy_only_keys(self):
        names = record_field_names()
        assert "improved_water_standardized" in names
        assert "days_to_start_a_business" in names
        assert "cpi" not in names


class TestNormalize:

    def test_accepts_known_fields(self):
        fields = normalize_fields({
            "pm25_concentration": 12,
            "pm25_concentration_standardized": 80,
            "pm25_concentration_comment": "VERY SOLID",
        })
        assert fields["pm25_concentration_standardized"] == 80.0

    def test_none_clears_a_field(self):
        assert normalize_fields({"pm25_concentration_standardized": None}) == {
            "pm25_concentration_standardized": None
        }

    def test_unknown_field(self):
        with pytest.raises(ValidationError) as exc:
            normalize_fields({"cpi": 55})
        assert exc.value.field == "cpi"

    @pytest.mark.parametrize("value", [-1, 100.5, "80", True])
    def test_standardized_must_be_a_score(self, value):
        with pytest.raises(ValidationError):
            normalize_fields({"pm25_concentration_standardized": value})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_raw_value_must_be_finite(self, value):
        with pytest.raises(ValidationError) as exc:
            normalize_fields({"co2_emissions": value})
        assert exc.value.field == "co2_emissions"
        assert "finite" in exc.value.message

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_standardized_must_be_finite(self, value):
        with pytest.raises(ValidationError):
            normalize_fields({"co2_emissions_standardized": value})

    def test_comment_must_be_text(self):
        with pytest.raises(ValidationError):
            normalize_fields({"pm25_concentration_comment": 3})


class TestMerge:

    def test_last_write_wins_per_field(self):
        merged = merge_fields({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert merged == {"a": 1, "b": 3, "c": 4}

    def test_does_not_mutate(self):
        existing = {"a": 1}
        merge_fields(existing, {"a": 2})
        assert existing == {"a": 1}

    def test_missing_existing(self):
        assert merge_fields(None, {"a": 1}) == {"a": 1}


class TestStandardizedScore:

    def test_present(self):
        assert standardized_score({"co2_emissions_standardized": 42}, "co2_emissions") == 42.0

    def test_zero_is_present(self):
        assert standardized_score({"co2_emissions_standardized": 0}, "co2_emissions") == 0.0

    @pytest.mark.parametrize("value", [None, float("nan"), "42", False])
    def test_absent(self, value):
        assert standardized_score({"co2_emissions_standardized": value}, "co2_emissions") is None

    def test_missing_key(self):
        assert standardized_score({}, "co2_emissions") is None
