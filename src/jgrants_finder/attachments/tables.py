"""Spreadsheet cells and pipe-delimited table rendering."""

import re
from dataclasses import dataclass
from typing import Any, Sequence, Union

_LINE_BREAKS = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ScalarCell:
    value: Any


@dataclass(frozen=True)
class RichTextCell:
    runs: tuple[str, ...]


@dataclass(frozen=True)
class HyperlinkCell:
    label: Any
    url: str


@dataclass(frozen=True)
class OpaqueCell:
    value: Any


Cell = Union[ScalarCell, RichTextCell, HyperlinkCell, OpaqueCell]


def normalize_cell(cell: Cell) -> Any:
    """
    Reduce a cell to its display value. Rich text runs are concatenated,
    hyperlinks render as 'label (url)'; scalars and opaque values pass through.
    """
    if isinstance(cell, RichTextCell):
        return "".join(cell.runs)
    if isinstance(cell, HyperlinkCell):
        label = cell_to_string(cell.label)
        return f"{label} ({cell.url})" if label else cell.url
    return cell.value


def cell_to_string(value: Any) -> str:
    """None -> '', strings have line breaks collapsed and are trimmed, others use str()."""
    if value is None:
        return ""
    if isinstance(value, str):
        return _LINE_BREAKS.sub(" ", value).strip()
    return str(value)


def rows_to_markdown(rows: Sequence[Sequence[Any]]) -> str:
    """
    Render rows as a pipe table: row 0 is the header, followed by a '---'
    separator per column. Empty input renders as ''.
    """
    if not rows:
        return ""
    header = [cell_to_string(v) for v in rows[0]]
    width = len(header)
    separator = ["---"] * width
    body = []
    for row in rows[1:]:
        values = [cell_to_string(v) for v in row]
        values.extend([""] * (width - len(values)))
        body.append(values)
    return "\n".join(f"| {' | '.join(line)} |" for line in [header, separator, *body])
