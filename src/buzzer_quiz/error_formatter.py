"""Error formatting for structured fatal-error blocks."""

from __future__ import annotations
import json
from typing import Any, Dict, Optional


def format_error_block(
    error_type: str,
    state_name: str,
    transition_label: Optional[str],
    details: Optional[Dict[str, Any]],
    cause: Optional[BaseException],
) -> str:
    """Format a structured error block shown to the game operator."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " GAME ERROR — CANNOT CONTINUE THE ROUND",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" State:        {state_name}",
    ]

    if transition_label is not None:
        lines.append(f" Transition:   {transition_label}")

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        lines.append(indent_json(details))

    if cause is not None:
        lines.append("")
        lines.append(" ── CAUSE " + "─" * 54)
        lines.append(f" {type(cause).__name__}: {cause}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
