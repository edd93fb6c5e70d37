"""Data models for token parsing."""

from __future__ import annotations

from dataclasses import dataclass, field

from artifact_tokens.templates.grammar import TokenType


@dataclass(frozen=True)
class TokenOccurrence:
    """One recognized token at a half-open ``[start, end)`` span of a template."""

    type: TokenType
    key: str
    raw: str
    start: int
    end: int


@dataclass(frozen=True)
class SyntaxCheckResult:
    """Outcome of the brace-level syntax pre-check."""

    valid: bool
    errors: list[str] = field(default_factory=list)
