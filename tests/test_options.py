"""Tests for option normalization."""

from tcreport.core.options import ReporterOptions, as_bool, as_number, as_string


class TestTypedGetters:
    """Test the typed getters with fallback."""

    def test_as_bool(self):
        assert as_bool(True, False) is True
        assert as_bool(False, True) is False
        assert as_bool("true", False) is False
        assert as_bool(1, True) is True
        assert as_bool(None, True) is True

    def test_as_number(self):
        assert as_number(3, 0) == 3
        assert as_number(2.5, 0) == 2.5
        assert as_number("3", 0) == 0
        assert as_number(None, 7) == 7

    def test_as_number_rejects_bool(self):
        """Booleans are not numbers here, even though bool subclasses int."""
        assert as_number(True, 0) == 0

    def test_as_string(self):
        assert as_string("x", "d") == "x"
        assert as_string("", "d") == ""
        assert as_string(5, "d") == "d"


class TestReporterOptions:
    """Test ReporterOptions construction."""

    def test_defaults(self):
        """Empty mapping yields documented defaults."""
        options = ReporterOptions.from_mapping({})

        assert options.capture_standard_output is False
        assert options.flow_id is True
        assert options.message == "[title]"
        assert options.screenshot_path == "temp/screenshots/"

    def test_none_mapping_yields_defaults(self):
        assert ReporterOptions.from_mapping(None) == ReporterOptions()

    def test_camel_case_keys(self):
        options = ReporterOptions.from_mapping(
            {
                "captureStandardOutput": True,
                "flowId": False,
                "message": "[browser] [title]",
                "screenshotPath": "shots/",
            }
        )

        assert options.capture_standard_output is True
        assert options.flow_id is False
        assert options.message == "[browser] [title]"
        assert options.screenshot_path == "shots/"

    def test_snake_case_keys(self):
        options = ReporterOptions.from_mapping(
            {"capture_standard_output": True, "flow_id": False, "screenshot_path": "out/"}
        )

        assert options.capture_standard_output is True
        assert options.flow_id is False
        assert options.screenshot_path == "out/"

    def test_wrong_types_fall_back_to_defaults(self):
        """Malformed values never raise."""
        options = ReporterOptions.from_mapping(
            {
                "captureStandardOutput": "yes",
                "flowId": 0,
                "message": ["x"],
                "screenshotPath": 42,
            }
        )

        assert options == ReporterOptions()

    def test_options_are_immutable(self):
        import dataclasses

        import pytest

        options = ReporterOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.flow_id = False
