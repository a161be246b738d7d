"""Read memreport section definitions out of a BaseEngine.ini.

Two dialects exist:

  Legacy (``[MemReportSections]``)::

      [MemReportSections]
      ; Name=StartPattern|EndPattern|ParsePatternId
      Textures=Listing all textures|Total size|listtextures

  Modern (``[MemReportCommands]`` / ``[MemReportFullCommands]``)::

      [MemReportFullCommands]
      +Cmd="obj list -alphasort"

Modern command lines carry no markers of their own; the markers are the
command-echo lines the engine writes around each command's output, and the
pattern id is derived from the command text.
"""

import logging
import re

from memreport_insights.config.schema import EngineConfig, SectionDefinition

logger = logging.getLogger(__name__)

# Presence of this header selects the modern dialect
MODERN_DIALECT_MARKER = "[MemReportCommands]"

# Block headers that open the section/command lists in each dialect
LEGACY_BLOCK_HEADER = "[MemReportSections]"
MODERN_BLOCK_HEADER = "[MemReportFullCommands]"

COMMAND_PREFIX = "+Cmd="
BEGIN_COMMAND_TEMPLATE = 'MemReport: Begin command "{command}"'
END_COMMAND_TEMPLATE = 'MemReport: End command "{command}"'

# Characters not allowed in Windows/Linux file names
_RESERVED_CHARS_RE = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RE = re.compile(r"\s+")
_DOTS_RE = re.compile(r"\.+")


def parse_engine_config(content: str, version: str) -> EngineConfig:
    """Parse BaseEngine.ini text into an EngineConfig, choosing the dialect by sniffing."""
    if MODERN_DIALECT_MARKER in content:
        sections = [_command_to_section(command) for command in _block_lines(content, MODERN_BLOCK_HEADER) if command]
        dialect = "modern"
    else:
        sections = [section for section in map(_parse_section_line, _block_lines(content, LEGACY_BLOCK_HEADER)) if section]
        dialect = "legacy"

    logger.debug("Read %d section definitions (%s dialect) for version %s", len(sections), dialect, version)
    return EngineConfig(
        version=version,
        description=f"Unreal Engine {version} configuration",
        sections=sections,
    )


def _block_lines(content: str, header: str) -> list[str]:
    """Return the payload lines inside every block opened by ``header``.

    Comment lines (``;``) and blank lines are skipped.  For the modern header
    only ``+Cmd=`` lines are returned, with the prefix and quotes stripped;
    for the legacy header only ``key=value`` lines are returned.
    """
    lines: list[str] = []
    in_block = False

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if line == header:
            in_block = True
            continue
        # Any other header closes the block
        if line.startswith("["):
            in_block = False
            continue
        if not in_block or not line or line.startswith(";"):
            continue

        if header == MODERN_BLOCK_HEADER:
            if line.startswith(COMMAND_PREFIX):
                lines.append(line[len(COMMAND_PREFIX):].replace('"', ""))
        elif "=" in line:
            lines.append(line)

    return lines


def _parse_section_line(line: str) -> SectionDefinition | None:
    """Parse ``Name=StartPattern|EndPattern|ParsePatternId``; the pattern id is optional."""
    name, _, value = line.partition("=")
    if not name.strip() or not value:
        return None

    parts = value.split("|")
    if len(parts) < 2:
        return None

    pattern_id = parts[2].strip() if len(parts) > 2 else ""
    return SectionDefinition(
        name=name.strip(),
        start_pattern=parts[0].strip(),
        end_pattern=parts[1].strip(),
        parse_pattern_id=pattern_id or None,
    )


def _command_to_section(command: str) -> SectionDefinition:
    return SectionDefinition(
        name=command,
        start_pattern=BEGIN_COMMAND_TEMPLATE.format(command=command),
        end_pattern=END_COMMAND_TEMPLATE.format(command=command),
        parse_pattern_id=safe_pattern_id(command),
    )


def safe_pattern_id(command: str) -> str:
    """Derive a file-name-safe pattern id from a console command.

    'rhi.DumpResourceMemory summary' -> 'rhi_dumpresourcememory_summary'
    """
    safe = _RESERVED_CHARS_RE.sub("_", command)
    safe = _WHITESPACE_RE.sub("_", safe)
    safe = _DOTS_RE.sub("_", safe)
    return safe.lower()


def validate_engine_config(config: EngineConfig) -> list[str]:
    """Return human-readable structural problems; an empty list means the config is sound."""
    errors: list[str] = []

    if not config.version:
        errors.append("Version is required")
    if not config.sections:
        errors.append("At least one section is required")

    seen: set[str] = set()
    for section in config.sections:
        if not section.name:
            errors.append("Section name is required")
            continue

        if section.name in seen:
            errors.append(f"Duplicate section name: {section.name}")
        seen.add(section.name)

        if not section.start_pattern:
            errors.append(f"Start pattern is required for section: {section.name}")
        if not section.end_pattern:
            errors.append(f"End pattern is required for section: {section.name}")

    return errors
