"""Token resolution result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from artifact_tokens.templates.models import TokenOccurrence

ResolutionStatus = Literal["resolved", "empty", "missing"]


class TokenResolution(BaseModel):
    """Resolved text for one occurrence.

    ``missing`` values are bracketed placeholders such as
    ``[Field not found: x]``; ``empty`` values are ``""`` or ``(No notes)``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    occurrence: TokenOccurrence
    value: str
    status: ResolutionStatus


class ResolutionResult(BaseModel):
    """Preview resolution output used for highlighting."""

    model_config = ConfigDict(extra="forbid")

    resolved: str
    empty_tokens: list[str] = Field(default_factory=list)
    missing_tokens: list[str] = Field(default_factory=list)
