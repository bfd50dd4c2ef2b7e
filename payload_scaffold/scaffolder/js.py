"""Deterministic JavaScript / TypeScript literal emission.

The renderer never builds object literals with ``json.dumps`` directly:
keys that are valid identifiers are emitted bare, strings use single
quotes, and tagged code references are emitted as source text.  Mapping
order is preserved exactly as supplied so output is diff-friendly.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from .identifiers import is_identifier
from .models import BooleanRule, ExpressionRule, ReferenceRule


INDENT = "  "


def pad(level: int) -> str:
    """Indentation for *level* (two spaces per level)."""
    return INDENT * level


def js_string(value: str) -> str:
    """Return *value* as a single-quoted JS string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f"'{escaped}'"


def js_key(key: str) -> str:
    """Emit an object key bare when possible, quoted otherwise."""
    return key if is_identifier(key) else js_string(key)


def code_value(rule: Any) -> str:
    """Render a code reference / access rule as source text."""
    if isinstance(rule, BooleanRule):
        return "true" if rule.value else "false"
    if isinstance(rule, ReferenceRule):
        return rule.name
    if isinstance(rule, ExpressionRule):
        return rule.source
    raise TypeError(f"Not a code reference: {rule!r}")


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, bool, int, float))


def js_value(value: Any, level: int = 0) -> str:
    """Render an arbitrary JSON-like value as a JS literal.

    Nested containers are laid out one entry per line at ``level + 1``; lists
    of scalars stay on one line.  Pydantic models are dumped by alias first,
    and code references render as source.
    """
    if isinstance(value, (BooleanRule, ReferenceRule, ExpressionRule)):
        return code_value(value)
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True, exclude_none=True)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        return js_string(value)
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = ["{"]
        for key, item in value.items():
            lines.append(f"{pad(level + 1)}{js_key(str(key))}: {js_value(item, level + 1)},")
        lines.append(f"{pad(level)}}}")
        return "\n".join(lines)
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        if all(_is_scalar(item) for item in value):
            return "[" + ", ".join(js_value(item) for item in value) + "]"
        lines = ["["]
        for item in value:
            lines.append(f"{pad(level + 1)}{js_value(item, level + 1)},")
        lines.append(f"{pad(level)}]")
        return "\n".join(lines)
    raise TypeError(f"Cannot render {type(value).__name__} as a JS literal")


def js_property(key: str, rendered: str, level: int) -> str:
    """One ``key: value,`` line at *level*."""
    return f"{pad(level)}{js_key(key)}: {rendered},"
