"""Regex helpers and fixed line shapes for memreport parsing.

Section and table markers in the configuration are regular expressions, not
literal strings.  Pattern resources are authored for a JavaScript regex engine,
so named groups written as ``(?<name>...)`` are rewritten to Python's
``(?P<name>...)`` before compiling.
"""

import re
from functools import lru_cache

from memreport_insights.errors import PatternError

# ─── Fixed Line Shapes ───────────────────────────────────────────────────────

# Command echo written around every console command in the dump, e.g.
# 'MemReport: Begin command "obj list -alphasort"'
COMMAND_ECHO_RE = re.compile(r"^MemReport: .+? command.+$", re.MULTILINE)

# JavaScript-style named group opener; lookbehinds "(?<=" and "(?<!" are left alone.
# Escape sequences are matched first so an escaped "\(" never opens a group.
_JS_NAMED_GROUP_RE = re.compile(r"\\.|\(\?<(?=[A-Za-z_])", re.DOTALL)

MARKER_FLAGS = re.DOTALL | re.MULTILINE


# ─── Compilation ─────────────────────────────────────────────────────────────


def to_python_regex(pattern: str) -> str:
    """Rewrite JavaScript named groups into Python syntax."""
    return _JS_NAMED_GROUP_RE.sub(_rewrite_group_opener, pattern)


def _rewrite_group_opener(match: re.Match) -> str:
    token = match.group(0)
    return token if token.startswith("\\") else "(?P<"


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str, flags: int = 0) -> re.Pattern:
    """Compile a configured regex, raising PatternError with the offending pattern on failure."""
    try:
        return re.compile(to_python_regex(pattern), flags)
    except re.error as exc:
        raise PatternError(f"Invalid regular expression {pattern!r}: {exc}") from exc


def section_regex(start_pattern: str, end_pattern: str) -> re.Pattern:
    """Matcher spanning a whole section; the end marker must close its line."""
    return compile_pattern(f"{start_pattern}.+?{end_pattern}$", MARKER_FLAGS)


def table_regex(start_pattern: str, end_pattern: str) -> re.Pattern:
    """Matcher splitting a section span into leading text, table body and trailing text.

    The body is greedy: it runs to the last occurrence of the end marker.
    """
    return compile_pattern(f"(?P<pre>.*?)(?P<table>{start_pattern}.*)(?P<post>{end_pattern}.*)", MARKER_FLAGS)


# ─── Text Helpers ────────────────────────────────────────────────────────────


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def remove_command_log(text: str) -> str:
    """Blank out command-echo lines, keeping the surrounding line structure."""
    return COMMAND_ECHO_RE.sub("", text)
