"""Pydantic models for a parsed memreport document."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from memreport_insights.config.schema import TableParsePattern


class _ParsedModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ParsedTable(_ParsedModel):
    """One table extracted from a section.

    ``pre_text`` is only set on a section's first table and ``post_text`` only
    on its last; commentary between consecutive tables is not kept.
    """

    settings: TableParsePattern
    headers: list[str] | None = None
    rows: list[list[str]] = Field(default_factory=list)
    pre_text: str | None = None
    post_text: str | None = None

    @model_validator(mode="after")
    def validate_rows(self) -> "ParsedTable":
        """Rows are ragged by design, but never empty."""
        for i, row in enumerate(self.rows):
            if not row:
                raise ValueError(f"Row {i} has no cells")
        return self


class ParsedSection(_ParsedModel):
    """A section is either plain text (``content``) or a list of tables, never both."""

    title: str
    content: str | None = None
    tables: list[ParsedTable] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_content_or_tables(self) -> "ParsedSection":
        if self.content is not None and self.tables:
            raise ValueError(f"Section {self.title!r} carries both content and tables")
        return self


class ParsedDocument(_ParsedModel):
    title: str
    sections: list[ParsedSection] = Field(default_factory=list)
