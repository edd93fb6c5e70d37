from __future__ import annotations

import json

from artifact_tokens.render.section_formatter import (
    EMPTY_VALUE,
    format_section_fields,
    format_section_fields_as_json,
    format_section_fields_as_markdown,
)
from artifact_tokens.snapshot.models import FieldType, SnapshotField


def _field(
    key: str,
    label: str,
    value: str | None,
    *,
    field_type: FieldType = "short-text",
    order_index: int = 0,
) -> SnapshotField:
    return SnapshotField.model_validate(
        {
            "key": key,
            "label": label,
            "type": field_type,
            "value": value,
            "sectionId": "intro",
            "orderIndex": order_index,
        }
    )


def test_plain_format_sorts_by_order_index() -> None:
    fields = [_field("b", "Second", "2", order_index=1), _field("a", "First", "1")]

    assert format_section_fields(fields) == "First: 1\nSecond: 2"


def test_plain_format_keeps_snapshot_order_for_ties() -> None:
    fields = [_field("z", "Zulu", "z"), _field("a", "Alpha", "a")]

    assert format_section_fields(fields) == "Zulu: z\nAlpha: a"


def test_empty_values_render_placeholder() -> None:
    fields = [_field("a", "Null", None), _field("b", "Blank", "")]

    assert format_section_fields(fields) == f"Null: {EMPTY_VALUE}\nBlank: {EMPTY_VALUE}"


def test_toggle_values_render_yes_no_or_placeholder() -> None:
    fields = [
        _field("on", "On", "true", field_type="toggle"),
        _field("off", "Off", "false", field_type="toggle"),
        _field("odd", "Odd", "maybe", field_type="toggle"),
    ]

    assert format_section_fields(fields) == "On: Yes\nOff: No\nOdd: (empty)"


def test_long_text_continuation_lines_are_indented() -> None:
    fields = [_field("summary", "Summary", "first\nsecond\nthird", field_type="long-text")]

    assert format_section_fields(fields) == "Summary: first\n  second\n  third"


def test_short_text_newlines_are_kept_verbatim() -> None:
    fields = [_field("a", "Label", "a\nb")]

    assert format_section_fields(fields) == "Label: a\nb"


def test_markdown_format_uses_bold_labels() -> None:
    fields = [
        _field("b", "Active", "true", field_type="toggle", order_index=2),
        _field("a", "Project", "Beta", order_index=1),
    ]

    assert format_section_fields_as_markdown(fields) == "- **Project**: Beta\n- **Active**: Yes"


def test_json_format_is_keyed_by_field_key_with_typed_values() -> None:
    fields = [
        _field("name", "Name", "Ada"),
        _field("blank", "Blank", ""),
        _field("missing", "Missing", None),
        _field("active", "Active", "true", field_type="toggle"),
        _field("odd", "Odd", "maybe", field_type="toggle"),
    ]

    assert json.loads(format_section_fields_as_json(fields)) == {
        "name": "Ada",
        "blank": None,
        "missing": None,
        "active": True,
        "odd": None,
    }


def test_json_format_uses_two_space_indent() -> None:
    fields = [_field("active", "Active", "false", field_type="toggle")]

    assert format_section_fields_as_json(fields) == '{\n  "active": false\n}'


def test_no_fields_render_empty_output() -> None:
    assert format_section_fields([]) == ""
    assert format_section_fields_as_markdown([]) == ""
    assert format_section_fields_as_json([]) == "{}"
