"""Local JSON store for recently used tokens, most recent first."""

from __future__ import annotations

import json
from pathlib import Path

_DEFAULT_LIMIT = 10


class RecentTokenStore:
    """Persist a bounded most-recent-first token list in a JSON file."""

    def __init__(self, store_path: Path, limit: int = _DEFAULT_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self._store_path = store_path
        self._limit = limit

    def list_all(self) -> list[str]:
        return self._read_tokens()[: self._limit]

    def add(self, token: str) -> list[str]:
        """Move ``token`` to the front, dropping the oldest beyond the limit."""

        tokens = [item for item in self._read_tokens() if item != token]
        updated = [token, *tokens][: self._limit]
        self._write_tokens(updated)
        return updated

    def clear(self) -> None:
        self._write_tokens([])

    def _read_tokens(self) -> list[str]:
        if not self._store_path.exists():
            return []

        try:
            raw = json.loads(self._store_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid recent tokens JSON: {self._store_path}") from exc

        tokens = raw.get("tokens", []) if isinstance(raw, dict) else None
        if not isinstance(tokens, list):
            raise ValueError(f"Invalid recent tokens JSON: {self._store_path}")
        return [item for item in tokens if isinstance(item, str)]

    def _write_tokens(self, tokens: list[str]) -> None:
        self._store_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._store_path.with_suffix(f"{self._store_path.suffix}.tmp")
        temp_path.write_text(
            json.dumps({"tokens": tokens}, separators=(",", ":"), ensure_ascii=False),
            encoding="utf-8",
        )
        temp_path.replace(self._store_path)
