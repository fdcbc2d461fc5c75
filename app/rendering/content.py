"""Content models accepted by the renderer.

Both shapes are reduced to the same line-oriented text so a single layout
path renders every service.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

from app.generation.models import ParsedContent

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


@dataclass(frozen=True)
class PlainTextDocument:
    text: str
    title: str | None = None

    def to_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class StructuredDocument:
    structured: dict[str, Any] = field(default_factory=dict)
    narrative: str = ""
    title: str | None = None

    def to_text(self) -> str:
        lines: list[str] = []
        for key, value in self.structured.items():
            if value is None or value == "" or value == []:
                continue
            label = humanize_key(key)
            if isinstance(value, dict):
                lines.extend(["", f"{label.upper()}:"])
                lines.extend(f"{humanize_key(k)}: {_scalar(v)}" for k, v in value.items() if v not in (None, ""))
            elif isinstance(value, list) and all(isinstance(item, dict) for item in value):
                lines.extend(["", f"{label.upper()}:"])
                lines.extend(_table_lines(value))
            elif isinstance(value, list):
                lines.extend(["", f"{label.upper()}:"])
                lines.extend(f"• {_scalar(item)}" for item in value)
            else:
                lines.append(f"{label}: {_scalar(value)}")

        if self.narrative:
            lines.extend(["", "NOTES:"])
            lines.extend(paragraph.strip() for paragraph in self.narrative.split("\n"))
        return "\n".join(lines).strip()


DocumentContent = PlainTextDocument | StructuredDocument


def humanize_key(key: str) -> str:
    spaced = _CAMEL_RE.sub(" ", str(key)).replace("_", " ").strip()
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _table_lines(rows: list[dict[str, Any]]) -> list[str]:
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    lines = ["| " + " | ".join(humanize_key(c) for c in columns) + " |"]
    for row in rows:
        lines.append("| " + " | ".join(_scalar(row.get(c, "")) for c in columns) + " |")
    return lines


def content_from_generation(data: ParsedContent) -> DocumentContent:
    """Wrap validated generation output in the matching content model."""
    if isinstance(data, str):
        return PlainTextDocument(text=data)

    structured = data.get("structured")
    if not isinstance(structured, dict):
        structured = {
            k: v for k, v in data.items() if k not in ("title", "narrative")
        }
    narrative = data.get("narrative", "")
    if isinstance(narrative, list):
        narrative = "\n".join(str(part) for part in narrative)
    title = data.get("title")
    return StructuredDocument(
        structured=structured,
        narrative=str(narrative or ""),
        title=str(title) if title else None,
    )
