"""CLI I/O helpers for loading inputs and atomic output writing."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any


def read_template(path: Path, *, max_chars: int) -> str:
    """Read a UTF-8 template, rejecting ones over ``max_chars``."""

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"Template is not valid UTF-8: {path}") from exc

    if len(text) > max_chars:
        raise ValueError(
            f"Template exceeds size limit: {len(text)} > {max_chars} chars ({path})"
        )
    return text


def write_text_atomic(path: Path, text: str) -> None:
    """Write text atomically using a temporary file + replace."""

    path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write(path, text)


def write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Write a JSON report atomically."""

    path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write(path, json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def _atomic_write(path: Path, text: str) -> None:
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        prefix=f"{path.name}.",
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        tmp.write(text)

    try:
        tmp_path.replace(path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise
