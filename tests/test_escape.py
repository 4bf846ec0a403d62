"""Tests for service-message escaping."""

import pytest

from tcreport.core.escape import escape, unescape


class TestEscape:
    """Test escape() character mapping."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("a|b", "a||b"),
            ("line\nnext", "line|nnext"),
            ("cr\rhere", "cr|rhere"),
            ("[x]", "|[x|]"),
            ("it's", "it|'s"),
            ("\u0085", "|x"),
            ("\u2028", "|l"),
            ("\u2029", "|p"),
        ],
    )
    def test_escapes_special_characters(self, raw, expected):
        """Each protocol character maps to its escape sequence."""
        assert escape(raw) == expected

    def test_pipe_escaped_before_generated_pipes(self):
        """Pipes introduced by later replacements are not doubled."""
        assert escape("|\n") == "|||n"
        assert escape("'|'") == "|'|||'"

    def test_plain_text_unchanged(self):
        """Text without special characters passes through."""
        assert escape("should log in") == "should log in"

    @pytest.mark.parametrize("empty", [None, ""])
    def test_empty_input_yields_empty_string(self, empty):
        """None and empty string both escape to ''."""
        assert escape(empty) == ""

    def test_numbers_converted_to_text(self):
        """Non-string values are converted with str()."""
        assert escape(120) == "120"
        assert escape(0) == "0"
        assert escape(12.5) == "12.5"


class TestUnescape:
    """Test unescape() as the inverse of escape()."""

    @pytest.mark.parametrize(
        "raw",
        [
            "plain",
            "a|b||c",
            "Error: expected 'x'\n  at [eval]:1\r\n",
            "\u0085\u2028\u2029|n",
            "||||''",
        ],
    )
    def test_round_trip(self, raw):
        """unescape(escape(x)) reconstructs x."""
        assert unescape(escape(raw)) == raw

    def test_unknown_sequence_kept(self):
        """Unknown escapes and a trailing pipe are left alone."""
        assert unescape("|z") == "|z"
        assert unescape("end|") == "end|"

    def test_empty(self):
        assert unescape("") == ""
