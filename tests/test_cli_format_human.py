from __future__ import annotations

from apps.cli.format_human import render_resolution_summary, render_validation_summary
from artifact_tokens.templates.token_parser import MISMATCHED_BRACES_MESSAGE
from artifact_tokens.validation.models import ValidationDiagnostic, ValidationResult

TOKENS_CMD = "artifact-tokens tokens --snapshot s.json"


def test_valid_summary_is_short() -> None:
    text = render_validation_summary(ValidationResult(valid=True), tokens_cmd=TOKENS_CMD)

    assert text.splitlines() == [
        "validation_summary:",
        "result=VALID",
        "errors: none",
        "next_cmd: none",
    ]


def test_invalid_summary_counts_and_lists_diagnostics() -> None:
    result = ValidationResult.from_errors(
        [
            ValidationDiagnostic(type="field", message=MISMATCHED_BRACES_MESSAGE),
            ValidationDiagnostic(
                token="{{field:nme}}",
                type="field",
                message="Field not found: nme",
                suggestions=["{{field:name}}"],
            ),
            ValidationDiagnostic(
                token="{{notes:x}}", type="notes", message="Section not found: x"
            ),
        ]
    )

    lines = render_validation_summary(result, tokens_cmd=TOKENS_CMD).splitlines()

    assert lines[1] == "result=INVALID"
    assert lines[2] == "errors: field=1, notes=1, syntax=1"
    assert f"- {MISMATCHED_BRACES_MESSAGE}" in lines
    assert "- {{field:nme}}: Field not found: nme" in lines
    assert "  Did you mean: {{field:name}}?" in lines
    assert lines[-1] == f"next_cmd: {TOKENS_CMD}"


def test_syntax_only_summary_points_at_escaping() -> None:
    result = ValidationResult.from_errors(
        [ValidationDiagnostic(type="field", message=MISMATCHED_BRACES_MESSAGE)]
    )

    text = render_validation_summary(result, tokens_cmd=TOKENS_CMD)

    assert text.splitlines()[-1] == "next_cmd: none (escape literal braces as \\{{ and \\}})"


def test_resolution_summary_lists_tokens() -> None:
    text = render_resolution_summary(["{{field:a}}"], [])

    assert text.splitlines() == [
        "resolution_summary:",
        "empty_tokens: {{field:a}}",
        "missing_tokens: none",
    ]
