"""Prompt pipeline output model."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from artifact_tokens.validation.models import ValidationResult

ValidationMode = Literal["error", "warn", "off"]


class PromptOutput(BaseModel):
    """Resolved prompt handed to the generation call, with its provenance."""

    model_config = ConfigDict(extra="forbid")

    prompt: str
    prompt_hash: str
    validation_mode: ValidationMode
    validation: ValidationResult | None = None
    empty_tokens: list[str] = Field(default_factory=list)
    missing_tokens: list[str] = Field(default_factory=list)
