"""
Tests for the command line interface.
"""

import argparse
import json

import pytest

from cpi_engine.cli import main, parse_inputs


class TestParseInputs:

    def test_json_values(self):
        assert parse_inputs(["co2=1.5", "incomes=[1, 2]"]) == {"co2": 1.5, "incomes": [1, 2]}

    def test_text_values_are_kept(self):
        assert parse_inputs(["speeds=10,20"]) == {"speeds": "10,20"}

    def test_requires_name_and_value(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_inputs(["co2"])


class TestCommands:

    def test_list(self):
        assert main(["list"]) == 0

    def test_standardize(self):
        assert main(["standardize", "co2_emissions", "-i", "co2=1.5"]) == 0

    def test_standardize_invalid(self):
        assert main(["standardize", "co2_emissions", "-i", "co2=-3"]) == 1

    def test_bad_input_syntax(self):
        assert main(["standardize", "co2_emissions", "-i", "co2"]) == 2

    def test_aggregate(self, tmp_path):
        path = tmp_path / "record.json"
        path.write_text(json.dumps({"co2_emissions_standardized": 60}))
        assert main(["aggregate", str(path)]) == 0

    def test_aggregate_requires_object(self, tmp_path):
        path = tmp_path / "record.json"
        path.write_text("[1, 2]")
        assert main(["aggregate", str(path)]) == 1
