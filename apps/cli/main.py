"""Typer CLI entrypoint for artifact-tokens."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, cast

import typer

from apps.cli.format_human import render_resolution_summary, render_validation_summary
from apps.cli.io import read_template, write_json_atomic, write_text_atomic
from artifact_tokens.catalog.token_catalog import build_token_catalog, filter_catalog
from artifact_tokens.config.settings_loader import TokenSettings, load_settings
from artifact_tokens.orchestrator.models import ValidationMode
from artifact_tokens.orchestrator.pipeline import build_prompt
from artifact_tokens.snapshot.loader import load_snapshot
from artifact_tokens.snapshot.models import DataSnapshot
from artifact_tokens.templates.recent_store import RecentTokenStore
from artifact_tokens.utils.errors import TemplateValidationError
from artifact_tokens.validation.token_validator import validate_tokens

app = typer.Typer(help="Artifact token templating CLI", rich_markup_mode=None)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2

TemplateOption = Annotated[Path, typer.Option("--template", dir_okay=False, file_okay=True)]
SnapshotOption = Annotated[Path, typer.Option("--snapshot", dir_okay=False, file_okay=True)]
SettingsOption = Annotated[Path | None, typer.Option("--settings")]
NoBareTokensOption = Annotated[
    bool,
    typer.Option(
        "--no-bare-tokens",
        help="Only recognise prefixed and legacy tokens; treat {{KEY}} as literal text.",
    ),
]


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep subcommands explicit."""


@app.command("validate")
def validate_command(
    template: TemplateOption,
    snapshot: SnapshotOption,
    settings: SettingsOption = None,
    no_bare_tokens: NoBareTokensOption = False,
    report: Annotated[
        Path | None,
        typer.Option("--report", help="Also write the validation result as JSON."),
    ] = None,
) -> None:
    """Check template syntax and token references against a snapshot."""

    settings_model, snapshot_model, template_text = _load_inputs(settings, snapshot, template)
    permissive = _permissive(settings_model, no_bare_tokens)

    result = validate_tokens(template_text, snapshot_model, permissive=permissive)
    typer.echo(
        render_validation_summary(
            result, tokens_cmd=f"artifact-tokens tokens --snapshot {snapshot}"
        )
    )

    if report is not None:
        try:
            write_json_atomic(report, result.model_dump(mode="json"))
        except OSError as exc:
            typer.echo(f"ERROR: write report failed: {exc}")
            raise typer.Exit(code=EXIT_ERROR) from exc

    raise typer.Exit(code=EXIT_OK if result.valid else EXIT_INVALID)


@app.command("resolve")
def resolve_command(
    template: TemplateOption,
    snapshot: SnapshotOption,
    settings: SettingsOption = None,
    no_bare_tokens: NoBareTokensOption = False,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write the resolved prompt here instead of stdout."),
    ] = None,
    metadata: Annotated[
        bool,
        typer.Option("--metadata", help="Print empty and missing token lists."),
    ] = False,
    validation_mode: Annotated[str, typer.Option()] = "error",
) -> None:
    """Resolve every token in a template into prompt text."""

    normalized_mode = validation_mode.lower().strip()
    if normalized_mode not in {"error", "warn", "off"}:
        typer.echo("ERROR: --validation-mode must be one of: error, warn, off.")
        raise typer.Exit(code=EXIT_ERROR)
    validation_mode_typed = cast(ValidationMode, normalized_mode)

    settings_model, snapshot_model, template_text = _load_inputs(settings, snapshot, template)
    permissive = _permissive(settings_model, no_bare_tokens)

    try:
        output = build_prompt(
            template_text,
            snapshot_model,
            validation_mode=validation_mode_typed,
            permissive=permissive,
        )
    except TemplateValidationError as exc:
        typer.echo("ERROR: template has invalid tokens", err=True)
        typer.echo(
            render_validation_summary(
                exc.result, tokens_cmd=f"artifact-tokens tokens --snapshot {snapshot}"
            ),
            err=True,
        )
        raise typer.Exit(code=EXIT_INVALID) from exc

    if output.validation is not None and not output.validation.valid:
        typer.echo(
            f"WARNING(validation): {len(output.validation.errors)} invalid token(s) "
            "resolved as placeholders (mode=warn).",
            err=True,
        )

    if out is None:
        typer.echo(output.prompt)
    else:
        try:
            write_text_atomic(out, output.prompt)
        except OSError as exc:
            typer.echo(f"ERROR: write output failed: {exc}", err=True)
            raise typer.Exit(code=EXIT_ERROR) from exc
        typer.echo(f"INFO: wrote prompt to {out}")

    if metadata:
        typer.echo(
            render_resolution_summary(output.empty_tokens, output.missing_tokens),
            err=out is None,
        )

    raise typer.Exit(code=EXIT_OK)


@app.command("tokens")
def tokens_command(
    snapshot: SnapshotOption,
    query: Annotated[str | None, typer.Option("--query")] = None,
) -> None:
    """Print the insertable token catalog for a snapshot as JSON."""

    snapshot_model = _load_or_exit(load_snapshot, snapshot)
    catalog = build_token_catalog(snapshot_model)
    if query:
        catalog = filter_catalog(catalog, query)
    typer.echo(_dump_json(catalog.model_dump(mode="json")))
    raise typer.Exit(code=EXIT_OK)


@app.command("recent")
def recent_command(
    store: Annotated[Path, typer.Option("--store", dir_okay=False)],
    add: Annotated[str | None, typer.Option("--add", help="Record a token as used.")] = None,
    clear: Annotated[bool, typer.Option("--clear")] = False,
    settings: SettingsOption = None,
) -> None:
    """List, record or clear recently used tokens."""

    if add is not None and clear:
        typer.echo("ERROR: --add and --clear cannot be used together.")
        raise typer.Exit(code=EXIT_ERROR)

    settings_model = _load_or_exit(load_settings, settings)
    recent = RecentTokenStore(store, limit=settings_model.recent_tokens_limit)

    try:
        if clear:
            recent.clear()
            tokens: list[str] = []
        elif add is not None:
            tokens = recent.add(add)
        else:
            tokens = recent.list_all()
    except (OSError, ValueError) as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc

    if not tokens:
        typer.echo("recent: none")
    for token in tokens:
        typer.echo(token)
    raise typer.Exit(code=EXIT_OK)


def _load_inputs(
    settings: Path | None, snapshot: Path, template: Path
) -> tuple[TokenSettings, DataSnapshot, str]:
    settings_model = _load_or_exit(load_settings, settings)
    snapshot_model = _load_or_exit(load_snapshot, snapshot)
    try:
        template_text = read_template(template, max_chars=settings_model.max_template_chars)
    except (OSError, ValueError) as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc
    return settings_model, snapshot_model, template_text


def _load_or_exit(loader: Any, path: Path | None) -> Any:
    try:
        return loader(path)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc


def _permissive(settings: TokenSettings, no_bare_tokens: bool) -> bool:
    return settings.permissive_bare_tokens and not no_bare_tokens


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
