"""Removes generation artifacts from raw provider text before layout."""

import re
from datetime import date

_CODE_BLOCK_RE = re.compile(r"```[\s\S]*?```")
_INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")
_LEAKED_FOOTER_RE = re.compile(r"Internet Streets[^\n]*?Page \d+ of \d+", re.IGNORECASE)
_PAGE_LINE_RE = re.compile(r"^[ \t]*Page \d+ of \d+[ \t]*$", re.MULTILINE | re.IGNORECASE)
_WATERMARK_RE = re.compile(
    r"INTERNET STREETS ENTERTAINMENT|NOT A REAL DOCUMENT|FOR ENTERTAINMENT ONLY"
    r"|\(Fictional\)|\(FAKE\)|\(NOT REAL\)",
    re.IGNORECASE,
)
_CURRENT_DATE_RE = re.compile(r"\[(?:Insert )?Current Date\]", re.IGNORECASE)
_BRACKET_PLACEHOLDER_RE = re.compile(r"\[[^\]\n]*\]")
_RULE_RE = re.compile(r"^[ \t]*(?:-{3,}|\*{3,}|_{3,})[ \t]*$", re.MULTILINE)
_HEADING_RE = re.compile(r"^[ \t]*#{1,6}[ \t]*", re.MULTILINE)
_BULLET_RE = re.compile(r"^[ \t]*(?:[-*+•]|\d+[.)])[ \t]+", re.MULTILINE)
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*|__(.+?)__")
_ITALIC_RE = re.compile(r"(?<!\w)\*(?!\s)([^*\n]+?)(?<!\s)\*(?!\w)")
_SPACES_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n\s*\n(?:\s*\n)+")

MIN_TITLE_LENGTH = 5
MAX_TITLE_LENGTH = 100


def clean_generated_text(text: str, today: date | None = None) -> str:
    """Strip markdown, placeholders and echoed watermarks; normalize bullets."""
    if not text:
        return ""
    if today is None:
        today = date.today()

    cleaned = text.replace("\r\n", "\n")
    cleaned = _CODE_BLOCK_RE.sub("", cleaned)
    cleaned = _INLINE_CODE_RE.sub(r"\1", cleaned)
    cleaned = _LEAKED_FOOTER_RE.sub("", cleaned)
    cleaned = _PAGE_LINE_RE.sub("", cleaned)
    cleaned = _WATERMARK_RE.sub("", cleaned)

    cleaned = _CURRENT_DATE_RE.sub(today.strftime("%d %B %Y"), cleaned)
    cleaned = _BRACKET_PLACEHOLDER_RE.sub("", cleaned)

    cleaned = _RULE_RE.sub("", cleaned)
    cleaned = _HEADING_RE.sub("", cleaned)
    cleaned = _BULLET_RE.sub("• ", cleaned)
    cleaned = _BOLD_RE.sub(lambda m: m.group(1) or m.group(2), cleaned)
    cleaned = _ITALIC_RE.sub(r"\1", cleaned)

    lines = [_SPACES_RE.sub(" ", line).strip() for line in cleaned.split("\n")]
    cleaned = "\n".join(lines)
    cleaned = _BLANK_LINES_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def extract_title(text: str) -> tuple[str | None, str]:
    """Split off the first line as a title when its length is plausible.

    Returns:
        (title or None, remaining body)
    """
    stripped = text.strip()
    if not stripped:
        return None, ""
    first, _, rest = stripped.partition("\n")
    first = first.strip()
    if MIN_TITLE_LENGTH < len(first) < MAX_TITLE_LENGTH and "|" not in first:
        return first, rest.strip()
    return None, stripped
