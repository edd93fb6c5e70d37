"""Validate template tokens against a data snapshot."""

from __future__ import annotations

from collections.abc import Collection

from artifact_tokens.snapshot.models import DataSnapshot
from artifact_tokens.templates.grammar import format_token
from artifact_tokens.templates.models import TokenOccurrence
from artifact_tokens.templates.token_parser import (
    escape_literal_braces,
    parse_tokens,
    validate_token_syntax,
)
from artifact_tokens.validation.models import (
    DiagnosticType,
    ValidationDiagnostic,
    ValidationResult,
)
from artifact_tokens.validation.similarity import find_similar_keys


def validate_tokens(
    template: str, snapshot: DataSnapshot, permissive: bool = True
) -> ValidationResult:
    """Check syntax and every token reference; never raises.

    Rules:
    - Field tokens must name an existing field key.
    - Section and notes tokens must name an existing section id.
    - Legacy tokens are always valid.
    - Checks run on the escape-protected template, so escaped braces are
      neither counted nor parsed, exactly as the resolver treats them.
    """

    errors: list[ValidationDiagnostic] = []
    protected = escape_literal_braces(template)

    syntax = validate_token_syntax(protected)
    for message in syntax.errors:
        errors.append(ValidationDiagnostic(token=None, type="field", message=message))

    field_keys = snapshot.field_by_key()
    section_ids = snapshot.section_by_id()

    for occurrence in parse_tokens(protected, permissive=permissive):
        diagnostic = _validate_occurrence(occurrence, field_keys, section_ids)
        if diagnostic is not None:
            errors.append(diagnostic)

    return ValidationResult.from_errors(errors)


def is_template_valid(template: str, snapshot: DataSnapshot, permissive: bool = True) -> bool:
    return validate_tokens(template, snapshot, permissive=permissive).valid


def format_validation_errors(errors: list[ValidationDiagnostic]) -> list[str]:
    """Render diagnostics as user-facing lines with optional suggestions."""

    messages: list[str] = []
    for error in errors:
        message = f"{error.token}: {error.message}" if error.token else error.message
        if error.suggestions:
            message += f"\nDid you mean: {', '.join(error.suggestions)}?"
        messages.append(message)
    return messages


def _validate_occurrence(
    occurrence: TokenOccurrence,
    field_keys: Collection[str],
    section_ids: Collection[str],
) -> ValidationDiagnostic | None:
    if occurrence.type == "field":
        if occurrence.key in field_keys:
            return None
        return _not_found(occurrence, "field", "Field", field_keys)

    if occurrence.type == "section" or occurrence.type == "notes":
        if occurrence.key in section_ids:
            return None
        token_type: DiagnosticType = "section" if occurrence.type == "section" else "notes"
        return _not_found(occurrence, token_type, "Section", section_ids)

    # Legacy whole-snapshot tokens carry no key to check.
    return None


def _not_found(
    occurrence: TokenOccurrence,
    token_type: DiagnosticType,
    noun: str,
    candidates: Collection[str],
) -> ValidationDiagnostic:
    similar = find_similar_keys(occurrence.key, candidates)
    return ValidationDiagnostic(
        token=occurrence.raw,
        type=token_type,
        message=f"{noun} not found: {occurrence.key}",
        suggestions=[format_token(token_type, key) for key in similar] or None,
    )
