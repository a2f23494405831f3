"""Failure message rendering: reasons, placeholders and argument formatting."""

from __future__ import annotations

import re
from typing import Any, Sequence

_PLACEHOLDER = re.compile(r"\{\{|\}\}|\{reason\}|\{(\d+)\}")


def format_value(value: Any) -> str:
    if isinstance(value, type):
        return value.__qualname__
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "<null>"
    return str(value)


def sanitize_reason(reason: str = "", *args: Any) -> str:
    """Turn a user supplied reason into the " because ..." message fragment.

    Positional ``{0}``-style placeholders are filled from *args*. A reason
    that does not already start with "because" gets it prepended.

    Raises ValueError when a placeholder has no matching argument.
    """
    if args:
        try:
            reason = reason.format(*args)
        except (IndexError, KeyError, ValueError) as e:
            raise ValueError(
                f"Cannot format reason '{reason}' with {len(args)} argument(s): {e!r}"
            ) from e
    reason = reason.strip()
    if not reason:
        return ""
    if not reason.lower().startswith("because"):
        reason = f"because {reason}"
    return f" {reason}"


def escape_braces(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def render_message(template: str, reason: str = "", args: Sequence[Any] = ()) -> str:
    """Fill ``{reason}`` and ``{n}`` placeholders in a failure template.

    ``reason`` must already be sanitized. Indexes without a matching argument
    are left as-is.
    """

    def _replace(match: re.Match) -> str:
        token = match.group(0)
        if token == "{{":
            return "{"
        if token == "}}":
            return "}"
        if token == "{reason}":
            return reason
        index = int(match.group(1))
        if index >= len(args):
            return token
        return format_value(args[index])

    return _PLACEHOLDER.sub(_replace, template)
