"""
Parameter expressions - per-item resolution of ``{{ $json.field }}`` placeholders.

Only item field lookups are supported:

    {{ $json.name }}
    {{ $json.address.city }}
    {{ $json["Product Group"] }}

A parameter that is exactly one expression resolves to the raw value
(dict, list, number...). Expressions embedded in a longer string are
interpolated as text, with dicts and lists rendered as JSON.
Braces that do not start with $json are left untouched.
A leading ``=`` (n8n expression marker) is stripped.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List


EXPRESSION_PATTERN = re.compile(r"\{\{\s*(\$json.*?)\s*\}\}", re.DOTALL)
_SEGMENT_PATTERN = re.compile(r"""\.([A-Za-z_][A-Za-z0-9_]*)|\[\s*(?:"([^"]*)"|'([^']*)'|(\d+))\s*\]""")


class ExpressionError(ValueError):
    """Raised when an expression cannot be parsed."""

    def __init__(self, message: str, expression: str = ""):
        self.expression = expression
        super().__init__(message)


def _parse_path(expression: str) -> List[Any]:
    if not expression.startswith("$json"):
        raise ExpressionError(
            f"Unsupported expression '{expression}': only $json lookups are allowed",
            expression,
        )
    rest = expression[len("$json"):]
    path: List[Any] = []
    pos = 0
    while pos < len(rest):
        match = _SEGMENT_PATTERN.match(rest, pos)
        if not match:
            raise ExpressionError(f"Invalid expression '{expression}'", expression)
        attr, dquoted, squoted, index = match.groups()
        if index is not None:
            path.append(int(index))
        else:
            path.append(next(s for s in (attr, dquoted, squoted) if s is not None))
        pos = match.end()
    return path


def _lookup(data: Any, path: List[Any]) -> Any:
    current = data
    for key in path:
        if isinstance(key, int) and isinstance(current, list):
            current = current[key] if key < len(current) else None
        elif isinstance(current, dict):
            current = current.get(key)
        else:
            return None
        if current is None:
            return None
    return current


def evaluate(expression: str, item_json: Dict[str, Any]) -> Any:
    """Evaluate a single expression body (without braces)."""
    return _lookup(item_json, _parse_path(expression.strip()))


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def resolve_parameter(value: Any, item_json: Dict[str, Any]) -> Any:
    """Resolve expressions in a parameter value against one item's JSON."""
    if not isinstance(value, str):
        return value

    text = value[1:] if value.startswith("=") else value
    matches = list(EXPRESSION_PATTERN.finditer(text))
    if not matches:
        return text

    # Entire string is one expression: keep the native type
    if len(matches) == 1 and matches[0].span() == (0, len(text)):
        return evaluate(matches[0].group(1), item_json)

    result = text
    for match in reversed(matches):
        evaluated = evaluate(match.group(1), item_json)
        result = result[:match.start()] + _to_text(evaluated) + result[match.end():]
    return result


__all__ = ["ExpressionError", "evaluate", "resolve_parameter", "EXPRESSION_PATTERN"]
