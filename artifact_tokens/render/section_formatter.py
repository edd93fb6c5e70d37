"""Render the fields of one section as text for section-level tokens.

Example plain output::

    Project Name: Beta 2025
    Active: Yes
    Summary: First line
      continued here
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from artifact_tokens.snapshot.models import SnapshotField

EMPTY_VALUE = "(empty)"


def format_section_fields(fields: Iterable[SnapshotField]) -> str:
    """One ``Label: value`` line per field, ordered by ``order_index``."""

    return "\n".join(
        f"{item.label}: {format_field_value(item)}" for item in _sorted_fields(fields)
    )


def format_section_fields_as_markdown(fields: Iterable[SnapshotField]) -> str:
    return "\n".join(
        f"- **{item.label}**: {format_field_value(item)}" for item in _sorted_fields(fields)
    )


def format_section_fields_as_json(fields: Iterable[SnapshotField]) -> str:
    """JSON object keyed by field key with typed values, 2-space indented."""

    payload: dict[str, str | bool | None] = {}
    for item in _sorted_fields(fields):
        if item.type == "toggle":
            payload[item.key] = toggle_to_bool(item.value)
        else:
            payload[item.key] = item.value or None
    return dump_json(payload)


def format_field_value(item: SnapshotField) -> str:
    """Text rendering of one value for line and markdown formats."""

    if item.value is None or item.value == "":
        return EMPTY_VALUE

    if item.type == "toggle":
        flag = toggle_to_bool(item.value)
        if flag is None:
            # Unrecognised toggle values render as empty, not "No".
            return EMPTY_VALUE
        return "Yes" if flag else "No"

    if item.type == "long-text" and "\n" in item.value:
        first, *rest = item.value.split("\n")
        return first + "\n  " + "\n  ".join(rest)

    return item.value


def toggle_to_bool(value: str | None) -> bool | None:
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def dump_json(payload: dict[str, object]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _sorted_fields(fields: Iterable[SnapshotField]) -> list[SnapshotField]:
    # sorted() is stable, so equal order_index keeps snapshot order.
    return sorted(fields, key=lambda item: item.order_index)
