"""Token resolver producing the final prompt text.

Resolution never raises for a well-formed template: every failure degrades to
bracketed inline text, since the output is consumed as a natural-language
prompt. Callers on user-facing paths validate first.
"""

from __future__ import annotations

from artifact_tokens.render.models import ResolutionResult, ResolutionStatus, TokenResolution
from artifact_tokens.render.section_formatter import (
    dump_json,
    format_section_fields,
    toggle_to_bool,
)
from artifact_tokens.snapshot.models import DataSnapshot
from artifact_tokens.templates.models import TokenOccurrence
from artifact_tokens.templates.token_parser import (
    escape_literal_braces,
    parse_tokens,
    unescape_literal_braces,
)

NO_NOTES = "(No notes)"


def resolve_tokens(template: str, snapshot: DataSnapshot, permissive: bool = True) -> str:
    """Substitute every token and return the resolved prompt."""

    resolved, _ = _resolve(template, snapshot, permissive)
    return resolved


def resolve_tokens_with_metadata(
    template: str, snapshot: DataSnapshot, permissive: bool = True
) -> ResolutionResult:
    """Resolve and classify each occurrence as empty or missing for previews."""

    resolved, resolutions = _resolve(template, snapshot, permissive)
    result = ResolutionResult(resolved=resolved)
    for item in resolutions:
        # Classified from the rendered value string, not from status.
        if _is_placeholder(item.value):
            result.missing_tokens.append(item.occurrence.raw)
        elif item.value in ("", NO_NOTES):
            result.empty_tokens.append(item.occurrence.raw)
    return result


def resolve_token(occurrence: TokenOccurrence, snapshot: DataSnapshot) -> TokenResolution:
    """Resolve one occurrence against the snapshot."""

    if occurrence.type == "field":
        value, status = _resolve_field(occurrence.key, snapshot)
    elif occurrence.type == "section":
        value, status = _resolve_section(occurrence.key, snapshot)
    elif occurrence.type == "notes":
        value, status = _resolve_notes(occurrence.key, snapshot)
    elif occurrence.type == "legacy-fields-json":
        value, status = _resolve_fields_json(snapshot), "resolved"
    else:
        value, status = _resolve_notes_json(snapshot), "resolved"
    return TokenResolution(occurrence=occurrence, value=value, status=status)


def _is_placeholder(value: str) -> bool:
    return value.startswith("[") and value.endswith("]")


def _resolve(
    template: str, snapshot: DataSnapshot, permissive: bool
) -> tuple[str, list[TokenResolution]]:
    protected = escape_literal_braces(template)
    resolutions = [
        resolve_token(occurrence, snapshot)
        for occurrence in parse_tokens(protected, permissive=permissive)
    ]

    # Forward splice: literal text between tokens gets its escapes restored,
    # substituted values are inserted untouched.
    chunks: list[str] = []
    cursor = 0
    for item in resolutions:
        chunks.append(unescape_literal_braces(protected[cursor : item.occurrence.start]))
        chunks.append(item.value)
        cursor = item.occurrence.end
    chunks.append(unescape_literal_braces(protected[cursor:]))

    return "".join(chunks), resolutions


def _resolve_field(key: str, snapshot: DataSnapshot) -> tuple[str, ResolutionStatus]:
    item = snapshot.field_by_key().get(key)
    if item is None:
        return f"[Field not found: {key}]", "missing"

    if item.value is None or item.value == "":
        return "", "empty"

    if item.type == "toggle":
        flag = toggle_to_bool(item.value)
        if flag is None:
            return "", "empty"
        return ("Yes" if flag else "No"), "resolved"

    return item.value, "resolved"


def _resolve_section(section_id: str, snapshot: DataSnapshot) -> tuple[str, ResolutionStatus]:
    section = snapshot.section_by_id().get(section_id)
    if section is None:
        return f"[Section not found: {section_id}]", "missing"

    fields = snapshot.fields_in_section(section.id)
    if not fields:
        return f"[No fields in section: {section.title}]", "missing"

    return format_section_fields(fields), "resolved"


def _resolve_notes(section_id: str, snapshot: DataSnapshot) -> tuple[str, ResolutionStatus]:
    section = snapshot.section_by_id().get(section_id)
    if section is None:
        return f"[Section not found: {section_id}]", "missing"

    note = snapshot.note_by_section_id().get(section.id)
    if note is None or not note.markdown or not note.markdown.strip():
        return NO_NOTES, "empty"

    return note.markdown, "resolved"


def _resolve_fields_json(snapshot: DataSnapshot) -> str:
    payload: dict[str, object] = {}
    for item in snapshot.fields:
        if item.type == "toggle":
            payload[item.key] = toggle_to_bool(item.value)
        else:
            payload[item.key] = item.value
    return dump_json(payload)


def _resolve_notes_json(snapshot: DataSnapshot) -> str:
    sections = snapshot.section_by_id()
    payload: dict[str, object] = {}
    for note in snapshot.notes:
        section = sections.get(note.section_id)
        if section is not None:
            payload[section.id] = note.markdown or ""
    return dump_json(payload)
