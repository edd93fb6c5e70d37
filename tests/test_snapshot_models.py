from __future__ import annotations

import pytest
from pydantic import ValidationError

from artifact_tokens.snapshot.models import (
    DataSnapshot,
    SnapshotField,
    SnapshotSection,
    slugify_section_title,
)


def test_snapshot_accepts_storage_layer_camel_case() -> None:
    snapshot = DataSnapshot.model_validate(
        {
            "fields": [
                {
                    "key": "name",
                    "label": "Name",
                    "type": "ShortText",
                    "value": "Ada",
                    "sectionId": "intro",
                    "sectionTitle": "Intro",
                    "orderIndex": 3,
                }
            ],
            "notes": [{"sectionId": "intro", "markdown": "Hi"}],
        }
    )

    item = snapshot.fields[0]
    assert item.type == "short-text"
    assert item.section_id == "intro"
    assert item.section_title == "Intro"
    assert item.order_index == 3
    assert snapshot.notes[0].section_id == "intro"


@pytest.mark.parametrize(
    ("stored", "expected"),
    [
        ("ShortText", "short-text"),
        ("LongText", "long-text"),
        ("Toggle", "toggle"),
        ("long_text", "long-text"),
        ("short-text", "short-text"),
    ],
)
def test_field_type_normalizes_stored_spellings(stored: str, expected: str) -> None:
    item = SnapshotField.model_validate(
        {"key": "k", "label": "K", "type": stored, "sectionId": "s"}
    )

    assert item.type == expected


def test_field_type_rejects_unknown_kind() -> None:
    with pytest.raises(ValidationError):
        SnapshotField.model_validate({"key": "k", "label": "K", "type": "date", "sectionId": "s"})


def test_section_key_is_derived_from_title_when_absent() -> None:
    derived = SnapshotSection.model_validate({"id": "s1", "title": "Company Background!"})
    explicit = SnapshotSection.model_validate({"id": "s2", "title": "Team", "key": "people"})

    assert derived.key == "company_background"
    assert explicit.key == "people"


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Company Background", "company_background"),
        ("  Goals & Risks  ", "goals_risks"),
        ("Q3-2025 Plan", "q3_2025_plan"),
        ("", ""),
    ],
)
def test_slugify_section_title(title: str, expected: str) -> None:
    assert slugify_section_title(title) == expected


def test_snapshot_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        DataSnapshot.model_validate({"fields": [], "extra": True})


def test_snapshot_is_immutable() -> None:
    snapshot = DataSnapshot()

    with pytest.raises(ValidationError):
        snapshot.fields = ()  # type: ignore[misc]


def test_lookups_keep_first_entry_for_repeated_keys() -> None:
    snapshot = DataSnapshot.model_validate(
        {
            "fields": [
                {"key": "a", "label": "First", "sectionId": "s"},
                {"key": "a", "label": "Second", "sectionId": "s"},
            ],
            "sections": [{"id": "s", "title": "One"}, {"id": "s", "title": "Two"}],
        }
    )

    assert snapshot.field_by_key()["a"].label == "First"
    assert snapshot.section_by_id()["s"].title == "One"


def test_fields_in_section_keeps_snapshot_order() -> None:
    snapshot = DataSnapshot.model_validate(
        {
            "fields": [
                {"key": "b", "label": "B", "sectionId": "s1"},
                {"key": "x", "label": "X", "sectionId": "s2"},
                {"key": "a", "label": "A", "sectionId": "s1"},
            ]
        }
    )

    assert [item.key for item in snapshot.fields_in_section("s1")] == ["b", "a"]
    assert snapshot.fields_in_section("unknown") == ()
