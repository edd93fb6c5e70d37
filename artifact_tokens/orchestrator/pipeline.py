"""Orchestration pipeline: validate a template, then resolve it into a prompt."""

from __future__ import annotations

import hashlib

from artifact_tokens.orchestrator.models import PromptOutput, ValidationMode
from artifact_tokens.render.token_resolver import resolve_tokens_with_metadata
from artifact_tokens.snapshot.models import DataSnapshot
from artifact_tokens.utils.errors import TemplateValidationError
from artifact_tokens.validation.token_validator import validate_tokens


def build_prompt(
    template: str,
    snapshot: DataSnapshot,
    validation_mode: ValidationMode = "error",
    permissive: bool = True,
) -> PromptOutput:
    """Execute validate -> resolve.

    Modes:
    - ``error``: an invalid template raises :class:`TemplateValidationError`.
    - ``warn``: diagnostics are attached and the template is resolved anyway.
    - ``off``: validation is skipped.
    """

    if validation_mode not in {"error", "warn", "off"}:
        raise ValueError(f"Unsupported validation mode: {validation_mode}")

    validation = None
    if validation_mode != "off":
        validation = validate_tokens(template, snapshot, permissive=permissive)
        if not validation.valid and validation_mode == "error":
            raise TemplateValidationError("Template has invalid tokens", result=validation)

    result = resolve_tokens_with_metadata(template, snapshot, permissive=permissive)
    return PromptOutput(
        prompt=result.resolved,
        prompt_hash=template_hash(template),
        validation_mode=validation_mode,
        validation=validation,
        empty_tokens=result.empty_tokens,
        missing_tokens=result.missing_tokens,
    )


def template_hash(template: str) -> str:
    """SHA-256 hex digest of the unresolved template text."""

    return hashlib.sha256(template.encode("utf-8")).hexdigest()
