"""Snapshot loading utilities for CLI and file-based callers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from artifact_tokens.snapshot.models import DataSnapshot

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_snapshot(path: Path) -> DataSnapshot:
    """Load and validate a data snapshot from a JSON or YAML file."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ValueError(f"Snapshot file not found: {path}") from exc

    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in snapshot file: {path}") from exc
    else:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in snapshot file: {path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Snapshot file must contain a mapping: {path}")

    return parse_snapshot(raw, source=str(path))


def parse_snapshot(raw: dict[str, Any], *, source: str = "<memory>") -> DataSnapshot:
    try:
        return DataSnapshot.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid snapshot schema: {source}") from exc
