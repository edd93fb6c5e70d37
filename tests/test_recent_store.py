from __future__ import annotations

import json
from pathlib import Path

import pytest

from artifact_tokens.templates.recent_store import RecentTokenStore


def test_recent_store_starts_empty(tmp_path: Path) -> None:
    store = RecentTokenStore(tmp_path / "recent.json")

    assert store.list_all() == []
    assert not (tmp_path / "recent.json").exists()


def test_add_moves_token_to_front(tmp_path: Path) -> None:
    store = RecentTokenStore(tmp_path / "recent.json")
    store.add("{{field:a}}")
    store.add("{{field:b}}")

    assert store.add("{{field:a}}") == ["{{field:a}}", "{{field:b}}"]
    assert store.list_all() == ["{{field:a}}", "{{field:b}}"]


def test_add_drops_oldest_beyond_limit(tmp_path: Path) -> None:
    store = RecentTokenStore(tmp_path / "recent.json", limit=2)
    for token in ["{{a}}", "{{b}}", "{{c}}"]:
        store.add(token)

    assert store.list_all() == ["{{c}}", "{{b}}"]


def test_recent_tokens_persist_as_json(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "recent.json"
    RecentTokenStore(path).add("{{notes_json}}")

    assert json.loads(path.read_text(encoding="utf-8")) == {"tokens": ["{{notes_json}}"]}
    assert RecentTokenStore(path).list_all() == ["{{notes_json}}"]
    assert not path.with_suffix(".json.tmp").exists()


def test_clear_empties_the_store(tmp_path: Path) -> None:
    store = RecentTokenStore(tmp_path / "recent.json")
    store.add("{{field:a}}")

    store.clear()

    assert store.list_all() == []


def test_invalid_store_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "recent.json"
    path.write_text("[broken", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid recent tokens JSON"):
        RecentTokenStore(path).list_all()


def test_store_requires_positive_limit(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        RecentTokenStore(tmp_path / "recent.json", limit=0)
