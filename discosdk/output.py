"""Formatters that render command output as JSON, YAML or a table."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Protocol

import yaml

_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class Formatter(Protocol):
    def format(self, value: Any) -> str: ...


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def _go_text(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class JSONFormatter:
    """Indented JSON with sorted keys and HTML-safe escaping."""

    def format(self, value: Any) -> str:
        text = json.dumps(_plain(value), indent=2, sort_keys=True, ensure_ascii=False)
        for char, escape in _JSON_ESCAPES.items():
            text = text.replace(char, escape)
        return text


class YAMLFormatter:
    """A YAML document."""

    def format(self, value: Any) -> str:
        return yaml.safe_dump(
            _plain(value), sort_keys=True, default_flow_style=False, allow_unicode=True
        )


class TableFormatter:
    """Key/value pairs in two aligned columns."""

    def format(self, value: Any) -> str:
        if not isinstance(value, dict):
            return f"{_go_text(value)}\n"
        rows = [(str(key), _go_text(item)) for key, item in value.items()]
        width = max((len(key) for key, _ in rows), default=0) + 2
        return "".join(f"{key.ljust(width)}{item}\n" for key, item in rows)


def new_formatter(kind: str) -> Formatter:
    """Return the formatter named by kind; JSON when the name is unknown."""
    kind = kind.lower()
    if kind == "table":
        return TableFormatter()
    if kind == "yaml":
        return YAMLFormatter()
    return JSONFormatter()