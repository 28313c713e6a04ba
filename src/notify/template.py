# src/notify/template.py — v1
"""Placeholder substitution for report templates.

Placeholders look like ``{{key}}`` or ``{{key.nested}}`` (spaces inside the
delimiters are allowed). The delimiters are configurable. By default a
missing key renders as an empty string; in strict mode it raises
``TemplateKeyError``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_MISSING = object()


class TemplateKeyError(KeyError):
    """A placeholder has no corresponding value in the data."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Corresponding key {key} not found in data for placeholder string")


def _lookup(data: Any, dotted: str) -> Any:
    """Resolve ``a.b.c`` through mappings and attributes."""
    value = data
    for part in dotted.split("."):
        if isinstance(value, Mapping):
            value = value.get(part, _MISSING)
        else:
            value = getattr(value, part, _MISSING)
        if value is _MISSING or value is None:
            return _MISSING
    return value


def populate(
    template: str,
    data: Mapping[str, Any],
    open_tag: str = "{{",
    close_tag: str = "}}",
    strict: bool = False,
) -> str:
    """Replace every placeholder in ``template`` with its value from ``data``.

    Args:
        template: Text containing placeholders.
        data: Values, possibly nested.
        open_tag: Opening delimiter.
        close_tag: Closing delimiter.
        strict: Raise TemplateKeyError on a missing key instead of blanking it.

    Returns:
        The populated text.
    """
    pattern = re.compile(
        re.escape(open_tag) + r"\s*(\w+(?:\.\w+)*)\s*" + re.escape(close_tag)
    )

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        value = _lookup(data, key)
        if value is _MISSING:
            if strict:
                raise TemplateKeyError(key)
            return ""
        return str(value)

    return pattern.sub(_replace, template)
