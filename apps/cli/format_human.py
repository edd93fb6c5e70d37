"""Human-readable validation and resolution summaries for CLI output."""

from __future__ import annotations

from collections import Counter

from artifact_tokens.validation.models import ValidationResult
from artifact_tokens.validation.token_validator import format_validation_errors


def render_validation_summary(result: ValidationResult, *, tokens_cmd: str) -> str:
    """Render one-screen validation summary."""

    lines: list[str] = []
    lines.append("validation_summary:")
    lines.append(f"result={'VALID' if result.valid else 'INVALID'}")

    if result.valid:
        lines.append("errors: none")
        lines.append("next_cmd: none")
        return "\n".join(lines)

    type_counter: Counter[str] = Counter(
        "syntax" if error.token is None else error.type for error in result.errors
    )
    counts = ", ".join(f"{name}={type_counter[name]}" for name in sorted(type_counter))
    lines.append(f"errors: {counts}")

    for message in format_validation_errors(result.errors):
        first, _, rest = message.partition("\n")
        lines.append(f"- {first}")
        if rest:
            lines.append(f"  {rest}")

    lines.append("next_cmd: " + _build_next_cmd(result, tokens_cmd=tokens_cmd))
    return "\n".join(lines)


def render_resolution_summary(empty_tokens: list[str], missing_tokens: list[str]) -> str:
    """Render which tokens resolved empty or could not be resolved."""

    lines = ["resolution_summary:"]
    lines.append(f"empty_tokens: {_join_tokens(empty_tokens)}")
    lines.append(f"missing_tokens: {_join_tokens(missing_tokens)}")
    return "\n".join(lines)


def _build_next_cmd(result: ValidationResult, *, tokens_cmd: str) -> str:
    if all(error.token is None for error in result.errors):
        return "none (escape literal braces as \\{{ and \\}})"
    return tokens_cmd


def _join_tokens(tokens: list[str]) -> str:
    if not tokens:
        return "none"
    return ", ".join(tokens)
