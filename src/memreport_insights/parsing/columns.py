"""Split one table line into cells according to its TableParsePattern."""

from memreport_insights.config.schema import TableParsePattern
from memreport_insights.parsing.patterns import compile_pattern


def split_columns(line: str, settings: TableParsePattern) -> list[str] | None:
    """Return the cells of a table line, or None when the line yields no row.

    None is returned for blank lines and for lines the extraction rule does
    not match.  A trimmed line with neither rule configured is a single cell.
    """
    row = line.strip()
    if not row:
        return None

    if settings.split_format:
        return _extract_cells(row, settings)
    if settings.separator:
        return [cell.strip() for cell in compile_pattern(settings.separator).split(row)]
    return [row]


def _extract_cells(row: str, settings: TableParsePattern) -> list[str] | None:
    match = compile_pattern(settings.split_format).search(row)
    if match is None:
        return None

    if settings.columns:
        groups = [match.group(name) for name in settings.columns]
    else:
        groups = list(match.groups())
    cells = [(group or "").strip() for group in groups]

    # "Label: 1 MB, 2 MB, 3 MB" style rows: keep the label, fan out the values
    if len(cells) == 2 and "," in cells[1]:
        return [cells[0]] + [value.strip() for value in cells[1].split(",")]

    return cells
