"""Read-only data snapshot that templates are validated and resolved against."""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
    model_validator,
)

FieldType = Literal["short-text", "long-text", "toggle"]

_STORED_FIELD_TYPES: dict[str, FieldType] = {
    "shorttext": "short-text",
    "short-text": "short-text",
    "short_text": "short-text",
    "longtext": "long-text",
    "long-text": "long-text",
    "long_text": "long-text",
    "toggle": "toggle",
}

_SLUG_SEPARATOR_RE = re.compile(r"[^a-zA-Z0-9]+")


def slugify_section_title(title: str) -> str:
    """Display key of a section: ``Company Background`` -> ``company_background``."""

    return _SLUG_SEPARATOR_RE.sub("_", title).strip("_").lower()


class SnapshotField(BaseModel):
    """One blueprint field with its current session value."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    key: str
    label: str
    type: FieldType = "short-text"
    value: str | None = None
    section_id: str = Field(alias="sectionId")
    section_title: str = Field(default="", alias="sectionTitle")
    order_index: int = Field(default=0, alias="orderIndex")
    required: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _STORED_FIELD_TYPES.get(value.strip().lower(), value)
        return value


class SnapshotSection(BaseModel):
    """Blueprint section; ``id`` is the lookup identity, ``key`` is display only."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    id: str
    title: str
    key: str

    @model_validator(mode="before")
    @classmethod
    def _derive_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("key"):
            data = dict(data)
            data["key"] = slugify_section_title(str(data.get("title", "")))
        return data


class SnapshotNote(BaseModel):
    """Markdown notes attached to one section."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    section_id: str = Field(alias="sectionId")
    markdown: str | None = None


class DataSnapshot(BaseModel):
    """Immutable bundle of fields, sections and notes for one session.

    Callers own referential integrity: a field or note pointing at an unknown
    section id is tolerated and simply never matches a section token. When
    keys or ids repeat, the first entry wins.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    fields: tuple[SnapshotField, ...] = ()
    sections: tuple[SnapshotSection, ...] = ()
    notes: tuple[SnapshotNote, ...] = ()

    _fields_by_key: Mapping[str, SnapshotField] = PrivateAttr()
    _sections_by_id: Mapping[str, SnapshotSection] = PrivateAttr()
    _notes_by_section_id: Mapping[str, SnapshotNote] = PrivateAttr()
    _fields_by_section_id: Mapping[str, tuple[SnapshotField, ...]] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        fields_by_key: dict[str, SnapshotField] = {}
        grouped: dict[str, list[SnapshotField]] = defaultdict(list)
        for item in self.fields:
            fields_by_key.setdefault(item.key, item)
            grouped[item.section_id].append(item)

        sections_by_id: dict[str, SnapshotSection] = {}
        for section in self.sections:
            sections_by_id.setdefault(section.id, section)

        notes_by_section_id: dict[str, SnapshotNote] = {}
        for note in self.notes:
            notes_by_section_id.setdefault(note.section_id, note)

        self._fields_by_key = MappingProxyType(fields_by_key)
        self._sections_by_id = MappingProxyType(sections_by_id)
        self._notes_by_section_id = MappingProxyType(notes_by_section_id)
        self._fields_by_section_id = MappingProxyType(
            {section_id: tuple(items) for section_id, items in grouped.items()}
        )

    def field_by_key(self) -> Mapping[str, SnapshotField]:
        return self._fields_by_key

    def section_by_id(self) -> Mapping[str, SnapshotSection]:
        return self._sections_by_id

    def note_by_section_id(self) -> Mapping[str, SnapshotNote]:
        return self._notes_by_section_id

    def fields_in_section(self, section_id: str) -> tuple[SnapshotField, ...]:
        return self._fields_by_section_id.get(section_id, ())
