"""Pydantic models for engine configuration.

Three layers of configuration are modelled here:

  1. Raw definitions read from a BaseEngine.ini (SectionDefinition, EngineConfig).
  2. Table-pattern resources (TableParsePattern, ParsePattern) and the legacy
     pre-shaped config document (Legacy*).
  3. The resolved rule set handed to the parser (ResolvedSectionConfig,
     ResolvedEngineConfig).

Attributes are snake_case; the resources on disk use camelCase, which the
alias generator maps automatically.  The legacy document is already
snake_case and is read with its own field names.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from memreport_insights.errors import PatternError
from memreport_insights.parsing.patterns import compile_pattern


class EngineVersion(str, Enum):
    """Engine versions with a configured rule set."""

    UE_4_27 = "4.27"
    UE_5_3 = "5.3"
    UE_5_6 = "5.6"

    @property
    def family(self) -> "VersionFamily":
        return VersionFamily.UE4 if self.value.startswith("4.") else VersionFamily.UE5


class VersionFamily(str, Enum):
    """Folder grouping of table-pattern resources."""

    UE4 = "ue4"
    UE5 = "ue5"


class _ConfigModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ─── BaseEngine.ini Definitions ──────────────────────────────────────────────


class SectionDefinition(_ConfigModel):
    """One report section as declared in a BaseEngine.ini."""

    name: str
    start_pattern: str
    end_pattern: str
    parse_pattern_id: str | None = None


class EngineConfig(_ConfigModel):
    version: str
    description: str
    sections: list[SectionDefinition] = Field(default_factory=list)


# ─── Table Patterns ──────────────────────────────────────────────────────────


class TableParsePattern(_ConfigModel):
    """Rule for locating one table inside a section and splitting it into cells.

    Lines are split by ``split_format`` (a regex whose capture groups become
    cells) or by ``separator`` (a regex to split on); never both.  When
    ``columns`` is given, cells are taken from those named groups of
    ``split_format`` in that order instead of positionally.
    """

    name: str | None = None
    start_pattern: str
    end_pattern: str
    headers: bool = False
    separator: str = ""
    split_format: str | None = None
    columns: list[str] | None = None
    numeric_columns: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_regexes(self) -> "TableParsePattern":
        """Compile every regex up front so a malformed pattern fails at construction."""
        if self.separator and self.split_format:
            raise ValueError("A table pattern may declare a separator or a split format, not both")
        try:
            compile_pattern(self.start_pattern)
            compile_pattern(self.end_pattern)
            if self.separator:
                compile_pattern(self.separator)
            extractor = compile_pattern(self.split_format) if self.split_format else None
        except PatternError as exc:
            raise ValueError(str(exc)) from exc

        if self.columns is not None:
            if extractor is None:
                raise ValueError("Named columns require a split format")
            missing = [column for column in self.columns if column not in extractor.groupindex]
            if missing:
                raise ValueError(f"Split format {self.split_format!r} has no named group(s): {', '.join(missing)}")
        return self


class ParsePattern(_ConfigModel):
    """A per-section pattern resource: the tables expected in one command's output."""

    id: str
    description: str = ""
    tables: list[TableParsePattern] = Field(default_factory=list)


# ─── Legacy Config Document ──────────────────────────────────────────────────


class LegacyTableSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_mark: str
    end_mark: str
    headers: bool = False
    separator: str | None = None
    split_format: str | None = None
    numeric: list[int] = Field(default_factory=list)


class LegacySectionSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    start_mark: str
    end_mark: str
    tables: list[LegacyTableSettings] = Field(default_factory=list)


class LegacyEngineConfig(BaseModel):
    """Pre-shaped sections+tables document used by the oldest engine version."""

    model_config = ConfigDict(frozen=True)

    version: str
    description: str = ""
    sections: list[LegacySectionSettings] = Field(default_factory=list)


# ─── Resolved Configuration ──────────────────────────────────────────────────


class ResolvedSectionConfig(_ConfigModel):
    """A section ready for parsing.  No tables means the section is plain text."""

    name: str
    start_pattern: str
    end_pattern: str
    tables: list[TableParsePattern] = Field(default_factory=list)


class ResolvedEngineConfig(_ConfigModel):
    version: str
    description: str
    sections: list[ResolvedSectionConfig] = Field(default_factory=list)
