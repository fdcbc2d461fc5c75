"""Line-oriented classification of cleaned document text."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class LineKind(str, Enum):
    DOCUMENT_HEADER = "document_header"
    SECTION_HEADER = "section_header"
    LIST_ITEM = "list_item"
    FIELD_LABEL = "field_label"
    PLAIN = "plain"
    BLANK = "blank"


@dataclass(frozen=True)
class TextLine:
    kind: LineKind
    text: str


@dataclass(frozen=True)
class TableBlock:
    """Contiguous delimited rows; the first row is the header."""

    rows: list[list[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)


Block = TextLine | TableBlock

_SECTION_PATTERNS = (
    re.compile(r"^[A-Z0-9][A-Z0-9 &/'(),-]*:$"),
    re.compile(r"^[A-Z][a-z ]+:$"),
)
_NAMED_SECTIONS = frozenset(
    {
        "EXECUTIVE SUMMARY",
        "KEY FINDINGS",
        "SURVEILLANCE LOG",
        "ANALYST NOTES",
        "FINAL RECOMMENDATION",
        "SUMMARY",
        "ANALYSIS",
        "FINDINGS",
        "RECOMMENDATIONS",
        "ASSESSMENT",
        "DETAILS",
        "INFORMATION",
    }
)
_LIST_RE = re.compile(r"^(?:[•\-*]|\d+\.)")
_FIELD_RE = re.compile(r"^[A-Z][A-Za-z0-9 ()/'&-]{0,40}:\s+\S")
_SEPARATOR_ROW_RE = re.compile(r"^[\s|:\-+=]+$")


def is_table_row(line: str) -> bool:
    stripped = line.strip()
    return "|" in stripped and len(stripped.split("|")) > 2


def classify_line(line: str, document_headers: Iterable[str] = ()) -> LineKind:
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    upper = stripped.upper()
    if any(header and header.upper() in upper for header in document_headers):
        return LineKind.DOCUMENT_HEADER
    if upper.rstrip(":") in _NAMED_SECTIONS or any(p.match(stripped) for p in _SECTION_PATTERNS):
        return LineKind.SECTION_HEADER
    if _LIST_RE.match(stripped):
        return LineKind.LIST_ITEM
    if _FIELD_RE.match(stripped):
        return LineKind.FIELD_LABEL
    return LineKind.PLAIN


def split_table_row(line: str) -> list[str]:
    cells = [cell.strip() for cell in line.strip().split("|")]
    if cells and not cells[0]:
        cells = cells[1:]
    if cells and not cells[-1]:
        cells = cells[:-1]
    return cells


def build_blocks(text: str, document_headers: Iterable[str] = ()) -> list[Block]:
    """Group table rows into TableBlocks and classify every other line."""
    headers = tuple(document_headers)
    blocks: list[Block] = []
    pending_rows: list[list[str]] = []

    def flush() -> None:
        if pending_rows:
            width = max(len(row) for row in pending_rows)
            blocks.append(TableBlock([row + [""] * (width - len(row)) for row in pending_rows]))
            pending_rows.clear()

    for line in text.split("\n"):
        if is_table_row(line):
            if not _SEPARATOR_ROW_RE.match(line):
                pending_rows.append(split_table_row(line))
            continue
        flush()
        kind = classify_line(line, headers)
        if kind is LineKind.BLANK and _ends_with_blank(blocks):
            continue
        blocks.append(TextLine(kind, line.strip()))
    flush()
    return blocks


def _ends_with_blank(blocks: list[Block]) -> bool:
    if not blocks:
        return True
    last = blocks[-1]
    return isinstance(last, TextLine) and last.kind is LineKind.BLANK
