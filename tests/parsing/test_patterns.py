"""Unit tests for regex helpers: named-group rewriting and marker matchers."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from memreport_insights.errors import PatternError
from memreport_insights.parsing.patterns import compile_pattern, section_regex, to_python_regex


class TestToPythonRegex:

    @pytest.mark.parametrize(
        "pattern, expected",
        [
            (r"(?<name>\w+)", r"(?P<name>\w+)"),
            (r"(?<name>\w+)\s+(?<size>\d+)", r"(?P<name>\w+)\s+(?P<size>\d+)"),
            (r"(?<=Total: )\d+", r"(?<=Total: )\d+"),
            (r"(?<!-)\d+", r"(?<!-)\d+"),
            (r"\(?<foo", r"\(?<foo"),
            (r"\\(?<name>x)", r"\\(?P<name>x)"),
        ],
    )
    def test_rewrite(self, pattern, expected):
        assert to_python_regex(pattern) == expected

    def test_escaped_paren_stays_literal(self):
        regex = compile_pattern(r"\(?<foo")
        assert regex.fullmatch("(<foo")
        assert regex.fullmatch("<foo")

    def test_invalid_pattern(self):
        with pytest.raises(PatternError, match="Invalid regular expression"):
            compile_pattern("^(Class")


class TestSectionRegex:

    def test_spans_lines_and_closes_on_end_marker(self):
        match = section_regex("BEGIN", "END").search("x\nBEGIN\nbody\nEND\ny")
        assert match.group(0) == "BEGIN\nbody\nEND"
