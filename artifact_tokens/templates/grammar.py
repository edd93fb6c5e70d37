"""Token surface syntax shared by the parser, validator and resolver.

Changing delimiters or the precedence order below breaks every template
already authored against this grammar.
"""

from __future__ import annotations

import re
from typing import Literal, get_args

TokenType = Literal[
    "field",
    "section",
    "notes",
    "legacy-fields-json",
    "legacy-notes-json",
]

TOKEN_TYPES: tuple[TokenType, ...] = get_args(TokenType)

OPEN = "{{"
CLOSE = "}}"

FIELDS_JSON_KEY = "fields_json"
NOTES_JSON_KEY = "notes_json"

_KEY = r"[a-z0-9_-]+"

_PREFIXED = rf"(?P<prefix>field|section|notes):(?P<key>{_KEY})"
_LEGACY = rf"(?P<legacy>{FIELDS_JSON_KEY}|{NOTES_JSON_KEY})"
_BARE = rf"(?P<bare>{_KEY})"

# Alternation order is precedence order: prefixed, legacy, then bare.
STRICT_TOKEN_RE = re.compile(
    rf"\{{\{{(?:{_PREFIXED}|{_LEGACY})\}}\}}", re.IGNORECASE | re.ASCII
)
PERMISSIVE_TOKEN_RE = re.compile(
    rf"\{{\{{(?:{_PREFIXED}|{_LEGACY}|{_BARE})\}}\}}", re.IGNORECASE | re.ASCII
)

EMPTY_PREFIXED_KEY_RE = re.compile(
    r"\{\{(?:field|section|notes):\s*\}\}", re.IGNORECASE | re.ASCII
)
EMPTY_BRACES_RE = re.compile(r"\{\{\s*\}\}")

ESCAPED_OPEN_RE = re.compile(r"\\\{\{")
ESCAPED_CLOSE_RE = re.compile(r"\\\}\}")

_PREFIX_TO_TYPE: dict[str, TokenType] = {
    "field": "field",
    "section": "section",
    "notes": "notes",
}

_LEGACY_TO_TYPE: dict[str, TokenType] = {
    FIELDS_JSON_KEY: "legacy-fields-json",
    NOTES_JSON_KEY: "legacy-notes-json",
}

_TYPE_TO_LEGACY: dict[TokenType, str] = {value: key for key, value in _LEGACY_TO_TYPE.items()}


def token_pattern(permissive: bool) -> re.Pattern[str]:
    return PERMISSIVE_TOKEN_RE if permissive else STRICT_TOKEN_RE


def classify_match(match: re.Match[str]) -> tuple[TokenType, str]:
    """Map one grammar match to its token type and captured key."""

    prefix = match.group("prefix")
    if prefix is not None:
        return _PREFIX_TO_TYPE[prefix.lower()], match.group("key")

    legacy = match.group("legacy")
    if legacy is not None:
        legacy_type = _LEGACY_TO_TYPE[legacy.lower()]
        return legacy_type, legacy_type

    return "field", match.group("bare")


def format_token(token_type: TokenType, key: str) -> str:
    """Render the canonical explicit syntax for a token type and key."""

    if token_type in _TYPE_TO_LEGACY:
        return f"{OPEN}{_TYPE_TO_LEGACY[token_type]}{CLOSE}"
    return f"{OPEN}{token_type}:{key}{CLOSE}"
