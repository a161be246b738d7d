"""End-to-end memreport analysis: detect version, resolve config, parse.

Usage:
    python -m memreport_insights.pipeline path/to/report.memreport
"""

import asyncio
import logging
import sys
from pathlib import Path

from memreport_insights.config.resolver import ConfigResolver
from memreport_insights.config.schema import EngineVersion
from memreport_insights.parsing.detection import detect_version
from memreport_insights.parsing.document import DocumentParser
from memreport_insights.parsing.schema import ParsedDocument

logger = logging.getLogger(__name__)

# Process-wide resolver, created on first use so its pattern cache is shared between reports
_DEFAULT_RESOLVER: ConfigResolver | None = None


def default_resolver() -> ConfigResolver:
    """Return the shared resolver built from settings."""
    global _DEFAULT_RESOLVER  # pylint: disable=global-statement
    if _DEFAULT_RESOLVER is None:
        _DEFAULT_RESOLVER = ConfigResolver()
    return _DEFAULT_RESOLVER


async def analyze_report(
    text: str,
    title: str,
    *,
    resolver: ConfigResolver | None = None,
    version: EngineVersion | str | None = None,
    parser: DocumentParser | None = None,
) -> ParsedDocument:
    """Parse a memreport into a ParsedDocument.

    The engine version is detected from ``text`` unless given.  Raises
    ConfigLoadError if that version's base configuration cannot be loaded.
    """
    if version is None:
        version = detect_version(text)
        logger.info("Detected engine version %s for %s", version.value, title)

    resolver = resolver if resolver is not None else default_resolver()
    resolved = await resolver.resolve(version)

    parser = parser if parser is not None else DocumentParser()
    return await parser.parse(text, title, resolved.sections)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    report_path = Path(sys.argv[1])
    report_text = report_path.read_text(encoding="utf-8", errors="replace")
    document = asyncio.run(analyze_report(report_text, report_path.name))
    for parsed_section in document.sections:
        logger.info("  %s: %d tables", parsed_section.title, len(parsed_section.tables))
