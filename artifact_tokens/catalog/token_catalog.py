"""Build and filter the catalog of tokens a template author can insert."""

from __future__ import annotations

from artifact_tokens.catalog.models import (
    FieldTokenEntry,
    LegacyTokenEntry,
    NotesTokenEntry,
    SectionTokenEntry,
    TokenCatalog,
)
from artifact_tokens.snapshot.models import DataSnapshot
from artifact_tokens.templates.grammar import CLOSE, OPEN, format_token


def build_token_catalog(snapshot: DataSnapshot) -> TokenCatalog:
    """List field, section, notes and legacy tokens in snapshot order.

    Section and notes tokens reference the section id, the same identifier
    the validator and resolver look up.
    """

    notes = snapshot.note_by_section_id()

    field_entries = [
        FieldTokenEntry(
            token=format_token("field", item.key),
            label=item.label,
            type=item.type,
            value=item.value,
            section_title=item.section_title,
            section_id=item.section_id,
            field_key=item.key,
            required=item.required,
        )
        for item in snapshot.fields
    ]

    section_entries: list[SectionTokenEntry] = []
    notes_entries: list[NotesTokenEntry] = []
    for section in snapshot.sections:
        field_count = len(snapshot.fields_in_section(section.id))
        section_entries.append(
            SectionTokenEntry(
                token=format_token("section", section.id),
                label=section.title,
                section_id=section.id,
                field_count=field_count,
                has_fields=field_count > 0,
            )
        )
        note = notes.get(section.id)
        notes_entries.append(
            NotesTokenEntry(
                token=format_token("notes", section.id),
                label=f"{section.title} Notes",
                section_id=section.id,
                has_content=bool(note is not None and note.markdown),
            )
        )

    legacy_entries = [
        LegacyTokenEntry(token=format_token("legacy-fields-json", ""), label="All Fields (JSON)"),
        LegacyTokenEntry(token=format_token("legacy-notes-json", ""), label="All Notes (JSON)"),
    ]

    return TokenCatalog(
        fields=field_entries,
        sections=section_entries,
        notes=notes_entries,
        legacy=legacy_entries,
    )


def filter_catalog(catalog: TokenCatalog, query: str) -> TokenCatalog:
    """Keep entries whose label or token contains ``query``, case-insensitively."""

    needle = query.lower()
    if not needle:
        return catalog.model_copy(deep=True)

    def matches(label: str, token: str) -> bool:
        return needle in label.lower() or needle in token.lower()

    return TokenCatalog(
        fields=[entry for entry in catalog.fields if matches(entry.label, entry.token)],
        sections=[entry for entry in catalog.sections if matches(entry.label, entry.token)],
        notes=[entry for entry in catalog.notes if matches(entry.label, entry.token)],
        legacy=[entry for entry in catalog.legacy if matches(entry.label, entry.token)],
    )


def autocomplete_query(text: str, cursor: int | None = None) -> str | None:
    """Return the partial token typed after the last unclosed ``{{`` before the cursor."""

    position = len(text) if cursor is None else max(0, min(cursor, len(text)))
    before = text[:position]

    trigger = before.rfind(OPEN)
    if trigger == -1:
        return None

    typed = before[trigger + len(OPEN) :]
    if CLOSE in typed:
        return None
    return typed
