"""Custom exceptions for core logic."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from artifact_tokens.validation.models import ValidationResult


class TemplateValidationError(Exception):
    """Raised when a template fails validation in strict (error mode) paths."""

    def __init__(self, message: str, *, result: ValidationResult) -> None:
        super().__init__(message)
        self.result = result
