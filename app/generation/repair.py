"""Syntactic repair heuristics for malformed JSON returned by a provider.

The battery runs in a fixed order. Each step works on the output of the
previous one and the result is re-parsed after every step; the first
successful parse wins. Input that already parses is returned unchanged.
"""

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from app.generation.exceptions import StructuralValidationError

_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_VALUE_START = frozenset('"{[')
_VALUE_END = frozenset(",}]\n")
_JSON_LITERAL_RE = re.compile(r"^(true|false|null|-?\d+(\.\d+)?([eE][+-]?\d+)?)$")

_CLOSERS = {"{": "}", "[": "]"}


@dataclass(frozen=True)
class RepairOutcome:
    """Repaired JSON text, its parsed value, and the steps that changed it."""

    text: str
    data: Any
    applied: tuple[str, ...] = ()


def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def extract_outermost_object(text: str) -> str:
    """Slice from the first '{' to its matching '}' (string-aware).

    If the object never closes, everything from the first '{' is kept so a
    later step can close it.
    """
    start = text.find("{")
    if start == -1:
        return text
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return text[start:]


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def close_unbalanced(text: str) -> str:
    """Close an unterminated string and any open brackets/braces."""
    stack: list[str] = []
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(char)
        elif char in ("}", "]") and stack and _CLOSERS[stack[-1]] == char:
            stack.pop()

    if not in_string and not stack:
        return text
    fixed = text + '"' if in_string else text.rstrip()
    if not in_string and fixed.endswith(","):
        fixed = fixed[:-1]
    return fixed + "".join(_CLOSERS[opener] for opener in reversed(stack))


def quote_bare_scalars(text: str) -> str:
    """Quote unquoted object values, leaving JSON literals and numbers alone.

    Colons inside string values are skipped.
    """
    out: list[str] = []
    in_string = False
    escaped = False
    index = 0
    while index < len(text):
        char = text[index]
        out.append(char)
        index += 1
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
            continue
        if char != ":":
            continue

        start = index
        while start < len(text) and text[start] in " \t":
            start += 1
        end = start
        while end < len(text) and text[end] not in _VALUE_END:
            end += 1
        value = text[start:end].rstrip()
        if not value or value[0] in _VALUE_START or '"' in value or _JSON_LITERAL_RE.match(value):
            continue
        out.append(text[index:start] + json.dumps(value) + text[start + len(value) : end])
        index = end
    return "".join(out)


REPAIR_STEPS: tuple[tuple[str, Callable[[str], str]], ...] = (
    ("strip_fences", strip_fences),
    ("extract_outermost_object", extract_outermost_object),
    ("strip_trailing_commas", strip_trailing_commas),
    ("close_unbalanced", close_unbalanced),
    ("quote_bare_scalars", quote_bare_scalars),
)


def repair_json(text: str) -> RepairOutcome:
    """Run the repair battery until the text parses as JSON.

    Raises:
        StructuralValidationError: if no step produces parseable JSON.
    """
    try:
        return RepairOutcome(text=text, data=json.loads(text))
    except json.JSONDecodeError:
        pass

    candidate = text
    applied: list[str] = []
    last_error = "no repair step applied"
    for name, step in REPAIR_STEPS:
        updated = step(candidate)
        if updated == candidate:
            continue
        applied.append(name)
        candidate = updated
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as exc:
            last_error = str(exc)
            continue
        return RepairOutcome(text=candidate, data=data, applied=tuple(applied))

    raise StructuralValidationError(f"Unable to repair malformed JSON: {last_error}")
