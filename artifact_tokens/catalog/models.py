"""Token catalog models listing every insertable token for a snapshot."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from artifact_tokens.snapshot.models import FieldType


class FieldTokenEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    token: str
    label: str
    type: FieldType
    value: str | None = None
    section_title: str
    section_id: str
    field_key: str
    required: bool = False


class SectionTokenEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    token: str
    label: str
    section_id: str
    field_count: int
    has_fields: bool


class NotesTokenEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    token: str
    label: str
    section_id: str
    has_content: bool


class LegacyTokenEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    token: str
    label: str


class TokenCatalog(BaseModel):
    """Available tokens grouped the way the picker UI shows them."""

    model_config = ConfigDict(extra="forbid")

    fields: list[FieldTokenEntry] = Field(default_factory=list)
    sections: list[SectionTokenEntry] = Field(default_factory=list)
    notes: list[NotesTokenEntry] = Field(default_factory=list)
    legacy: list[LegacyTokenEntry] = Field(default_factory=list)
