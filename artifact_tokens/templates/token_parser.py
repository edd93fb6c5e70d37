"""Token parser for prompt templates.

Rules:
- ``{{field:KEY}}``, ``{{section:KEY}}`` and ``{{notes:KEY}}`` are explicit tokens.
- ``{{fields_json}}`` and ``{{notes_json}}`` are legacy whole-snapshot tokens.
- In permissive mode a bare ``{{KEY}}`` is an implicit field token.
- KEY is one or more of ``[a-z0-9_-]``, matched case-insensitively, captured as written.
- ``\\{{`` and ``\\}}`` are literal braces, never tokens.

Parsing is total: text that matches no form stays literal and is not reported.
"""

from __future__ import annotations

from artifact_tokens.templates.grammar import (
    CLOSE,
    EMPTY_BRACES_RE,
    EMPTY_PREFIXED_KEY_RE,
    ESCAPED_CLOSE_RE,
    ESCAPED_OPEN_RE,
    OPEN,
    TOKEN_TYPES,
    TokenType,
    classify_match,
    token_pattern,
)
from artifact_tokens.templates.models import SyntaxCheckResult, TokenOccurrence

# NUL-delimited so user-entered text cannot plausibly contain them and the
# token grammar can never match them.
ESCAPED_OPEN_SENTINEL = "\x00ESC_OPEN\x00"
ESCAPED_CLOSE_SENTINEL = "\x00ESC_CLOSE\x00"

MISMATCHED_BRACES_MESSAGE = "Mismatched token braces: found unmatched {{ or }}"


def parse_tokens(template: str, permissive: bool = True) -> list[TokenOccurrence]:
    """Extract token occurrences ordered by start offset.

    The grammar is one alternation scanned once, so spans never overlap and
    an explicit token always wins over the bare form at the same position.
    """

    occurrences: list[TokenOccurrence] = []
    for match in token_pattern(permissive).finditer(template):
        token_type, key = classify_match(match)
        occurrences.append(
            TokenOccurrence(
                type=token_type,
                key=key,
                raw=match.group(0),
                start=match.start(),
                end=match.end(),
            )
        )
    return occurrences


def has_tokens(template: str, permissive: bool = True) -> bool:
    return token_pattern(permissive).search(template) is not None


def extract_token_keys(template: str, permissive: bool = True) -> dict[TokenType, list[str]]:
    """Group unique token keys by type, in first-seen order."""

    keys_by_type: dict[TokenType, dict[str, None]] = {token_type: {} for token_type in TOKEN_TYPES}
    for occurrence in parse_tokens(template, permissive=permissive):
        keys_by_type[occurrence.type].setdefault(occurrence.key, None)
    return {token_type: list(keys) for token_type, keys in keys_by_type.items()}


def validate_token_syntax(template: str) -> SyntaxCheckResult:
    """Cheap brace-level checks that run independently of full parsing."""

    errors: list[str] = []

    if template.count(OPEN) != template.count(CLOSE):
        errors.append(MISMATCHED_BRACES_MESSAGE)

    seen: set[str] = set()
    for pattern in (EMPTY_PREFIXED_KEY_RE, EMPTY_BRACES_RE):
        for match in pattern.finditer(template):
            text = match.group(0)
            if text in seen:
                continue
            seen.add(text)
            errors.append(f"Malformed token syntax found: {text}")

    return SyntaxCheckResult(valid=not errors, errors=errors)


def escape_literal_braces(template: str) -> str:
    """Swap ``\\{{`` / ``\\}}`` for sentinels the grammar cannot match."""

    escaped = ESCAPED_OPEN_RE.sub(lambda _: ESCAPED_OPEN_SENTINEL, template)
    return ESCAPED_CLOSE_RE.sub(lambda _: ESCAPED_CLOSE_SENTINEL, escaped)


def restore_escaped_braces(text: str) -> str:
    """Exact inverse of :func:`escape_literal_braces`."""

    return text.replace(ESCAPED_OPEN_SENTINEL, "\\" + OPEN).replace(
        ESCAPED_CLOSE_SENTINEL, "\\" + CLOSE
    )


def unescape_literal_braces(text: str) -> str:
    """Turn escape sentinels into the literal braces they stand for."""

    return text.replace(ESCAPED_OPEN_SENTINEL, OPEN).replace(ESCAPED_CLOSE_SENTINEL, CLOSE)
