"""Validation report models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DiagnosticType = Literal["field", "section", "notes"]


class ValidationDiagnostic(BaseModel):
    """Single actionable problem found in a template.

    ``token`` is None for syntax-level diagnostics that are not tied to one
    occurrence.
    """

    model_config = ConfigDict(extra="forbid")

    token: str | None = None
    type: DiagnosticType
    message: str
    suggestions: list[str] | None = None


class ValidationResult(BaseModel):
    """Rules:
    - valid == (len(errors) == 0)
    - syntax diagnostics come first, then one diagnostic per offending occurrence
    """

    model_config = ConfigDict(extra="forbid")

    valid: bool
    errors: list[ValidationDiagnostic] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[ValidationDiagnostic]) -> ValidationResult:
        return cls(valid=not errors, errors=errors)
