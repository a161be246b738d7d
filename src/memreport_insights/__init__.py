"""Version-aware parsing of game engine memreport dumps.

Subpackages:
  config   -- engine versions, ini dialects, pattern manifest, config resolution
  parsing  -- version detection and the text-to-document parser
"""

from memreport_insights.config.resolver import ConfigResolver
from memreport_insights.config.schema import EngineVersion, ResolvedEngineConfig, ResolvedSectionConfig, TableParsePattern
from memreport_insights.errors import ConfigLoadError, MemreportError, PatternError, UnmatchedRowError
from memreport_insights.parsing.detection import detect_version
from memreport_insights.parsing.document import DocumentParser, UnmatchedRowPolicy
from memreport_insights.parsing.schema import ParsedDocument, ParsedSection, ParsedTable
from memreport_insights.pipeline import analyze_report

__all__ = [
    "ConfigLoadError",
    "ConfigResolver",
    "DocumentParser",
    "EngineVersion",
    "MemreportError",
    "ParsedDocument",
    "ParsedSection",
    "ParsedTable",
    "PatternError",
    "ResolvedEngineConfig",
    "ResolvedSectionConfig",
    "TableParsePattern",
    "UnmatchedRowError",
    "UnmatchedRowPolicy",
    "analyze_report",
    "detect_version",
]
