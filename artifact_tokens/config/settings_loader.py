"""Settings loading utilities for CLI and API entry points."""

from __future__ import annotations

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class TokenSettings(BaseModel):
    """Runtime settings loaded from YAML."""

    model_config = ConfigDict(extra="forbid")

    permissive_bare_tokens: bool = True
    max_template_chars: int = Field(default=50_000, gt=0)
    recent_tokens_limit: int = Field(default=10, gt=0)


def load_settings(path: Path | None = None) -> TokenSettings:
    """Load and validate settings from YAML, defaulting to the bundled file."""

    settings_path = path or Path(__file__).with_name("settings.yaml")

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Settings file not found: {settings_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in settings file: {settings_path}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must contain a mapping: {settings_path}")

    try:
        return TokenSettings.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings schema: {settings_path}") from exc
