"""Apply a resolved engine config to raw memreport text.

For every configured section, in configuration order:

  1. Find the span from the section's start marker to its end marker (the end
     marker must close its line).  Sections not present in the report are
     left out of the document; most reports only contain some subsystems.
  2. Sections without table patterns keep the span as plain ``content`` with
     the ``MemReport: ... command ...`` echo lines blanked out.
  3. Sections with table patterns run each pattern against the span and
     split the table body into rows of cells (see columns.split_columns).
     Only the first table keeps its leading text and only the last keeps its
     trailing text.

Row order always follows the source text.
"""

import asyncio
import logging
from enum import Enum

from memreport_insights import settings as app_settings
from memreport_insights.config.schema import ResolvedSectionConfig, TableParsePattern
from memreport_insights.errors import UnmatchedRowError
from memreport_insights.parsing.columns import split_columns
from memreport_insights.parsing.patterns import normalize_newlines, remove_command_log, section_regex, table_regex
from memreport_insights.parsing.schema import ParsedDocument, ParsedSection, ParsedTable

logger = logging.getLogger(__name__)


class UnmatchedRowPolicy(str, Enum):
    """What to do with a non-blank table line that the extraction rule does not match."""

    DROP = "drop"
    RAW = "raw"
    ERROR = "error"


class DocumentParser:
    """Parse memreport text into a ParsedDocument.

    ``yield_every`` sections, control is handed back to the event loop so a
    long parse does not starve other tasks; sections are still parsed one at
    a time and in order.
    """

    def __init__(
        self,
        unmatched_rows: UnmatchedRowPolicy | str = UnmatchedRowPolicy.DROP,
        yield_every: int = app_settings.PARSE_YIELD_EVERY,
    ):
        self.unmatched_rows = UnmatchedRowPolicy(unmatched_rows)
        self.yield_every = yield_every

    async def parse(self, text: str, title: str, sections: list[ResolvedSectionConfig]) -> ParsedDocument:
        text = normalize_newlines(text)
        parsed: list[ParsedSection] = []

        for section_settings in sections:
            section = self.parse_section(text, section_settings)
            if section is None:
                logger.debug("Section %r not found in %s", section_settings.name, title)
                continue
            parsed.append(section)
            if self.yield_every > 0 and len(parsed) % self.yield_every == 0:
                await asyncio.sleep(0)

        n_tables = sum(len(section.tables) for section in parsed)
        logger.info("Parsed %s: %d/%d sections found, %d tables", title, len(parsed), len(sections), n_tables)
        return ParsedDocument(title=title, sections=parsed)

    def parse_section(self, text: str, settings: ResolvedSectionConfig) -> ParsedSection | None:
        """Extract one section from normalised text; None if its markers are absent."""
        match = section_regex(settings.start_pattern, settings.end_pattern).search(text)
        if match is None:
            return None

        section_text = match.group(0)
        if not settings.tables:
            return ParsedSection(title=settings.name, content=remove_command_log(section_text))

        last = len(settings.tables) - 1
        tables = [
            table
            for table in (
                self.parse_table(section_text, table_settings, is_first=(idx == 0), is_last=(idx == last))
                for idx, table_settings in enumerate(settings.tables)
            )
            if table is not None
        ]
        if not tables:
            logger.debug("Section %r matched but none of its %d table patterns did", settings.name, len(settings.tables))
        return ParsedSection(title=settings.name, tables=tables)

    def parse_table(
        self,
        section_text: str,
        settings: TableParsePattern,
        is_first: bool = True,
        is_last: bool = True,
    ) -> ParsedTable | None:
        """Extract one table from a section span; None if the pattern does not match or yields no rows."""
        match = table_regex(settings.start_pattern, settings.end_pattern).search(section_text)
        if match is None:
            return None

        lines = self._split_body(match.group("table"), settings)
        if not lines:
            return None

        headers: list[str] | None = None
        rows = lines
        if settings.headers:
            headers, rows = lines[0], lines[1:]

        return ParsedTable(
            settings=settings,
            headers=headers,
            rows=rows,
            pre_text=remove_command_log(match.group("pre")).strip() if is_first else None,
            post_text=remove_command_log(match.group("post")).strip() if is_last else None,
        )

    def _split_body(self, body: str, settings: TableParsePattern) -> list[list[str]]:
        rows: list[list[str]] = []
        for line in body.split("\n"):
            cells = split_columns(line, settings)
            if cells is None:
                stripped = line.strip()
                if not stripped:
                    continue
                if self.unmatched_rows is UnmatchedRowPolicy.ERROR:
                    raise UnmatchedRowError(f"Line {stripped!r} does not match split format {settings.split_format!r}")
                if self.unmatched_rows is UnmatchedRowPolicy.RAW:
                    rows.append([stripped])
                continue
            if cells:
                rows.append(cells)
        return rows


async def parse_document(
    text: str,
    title: str,
    sections: list[ResolvedSectionConfig],
    unmatched_rows: UnmatchedRowPolicy | str = UnmatchedRowPolicy.DROP,
) -> ParsedDocument:
    """Parse ``text`` with a one-off DocumentParser."""
    return await DocumentParser(unmatched_rows=unmatched_rows).parse(text, title, sections)
