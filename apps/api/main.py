"""FastAPI wrapper for token validation and resolution."""

from __future__ import annotations

import importlib.metadata
import json
import logging
import os
import time
import uuid
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal, TypeVar

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, ValidationError

from artifact_tokens.catalog.token_catalog import build_token_catalog, filter_catalog
from artifact_tokens.config.settings_loader import TokenSettings, load_settings
from artifact_tokens.orchestrator.pipeline import build_prompt
from artifact_tokens.render.token_resolver import resolve_tokens, resolve_tokens_with_metadata
from artifact_tokens.snapshot.models import DataSnapshot
from artifact_tokens.templates.grammar import TOKEN_TYPES
from artifact_tokens.templates.token_parser import (
    escape_literal_braces,
    parse_tokens,
    validate_token_syntax,
)
from artifact_tokens.utils.errors import TemplateValidationError
from artifact_tokens.validation.token_validator import validate_tokens

app = FastAPI(title="artifact-tokens API", version="0.1.0")
logger = logging.getLogger("artifact_tokens.api")

REQUEST_ID_HEADER = "X-Artifact-Tokens-Request-Id"

_TOKEN_FORMS = [
    "{{field:KEY}}",
    "{{section:KEY}}",
    "{{notes:KEY}}",
    "{{fields_json}}",
    "{{notes_json}}",
    "{{KEY}}",
]

_RequestModel = TypeVar("_RequestModel", bound=BaseModel)
_TemplateBody = TypeVar("_TemplateBody", bound="_TemplateRequest")


class _TemplateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    template: str
    snapshot: DataSnapshot = DataSnapshot()
    permissive: bool | None = None


class ValidateRequest(_TemplateRequest):
    pass


class ResolveRequest(_TemplateRequest):
    include_metadata: bool = False


class PromptRequest(_TemplateRequest):
    validation_mode: Literal["error", "warn", "off"] = "error"


class TokensRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    snapshot: DataSnapshot
    query: str | None = None


class ApiRequestError(Exception):
    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail or {}


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Ensure every response has a request id header."""

    request_id = uuid.uuid4().hex
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:  # noqa: BLE001
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="INTERNAL_ERROR",
            status_code=500,
            failure_stage="middleware",
        )
        response = _error_response(
            status_code=500,
            error_code="INTERNAL_ERROR",
            message="internal server error",
            request_id=request_id,
            detail={"path": request.url.path},
        )
    response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Liveness endpoint."""

    return {"status": "ok"}


@app.get("/v1/meta")
async def meta_v1(request: Request) -> JSONResponse:
    """Grammar and limit metadata for editor clients."""

    request_id = _request_id_from_request(request)
    try:
        settings = _settings()
    except ApiRequestError as exc:
        return _api_error(exc, request_id, endpoint="meta")
    payload = {
        "version": _package_version(),
        "token_types": list(TOKEN_TYPES),
        "token_forms": _TOKEN_FORMS,
        "permissive_bare_tokens": settings.permissive_bare_tokens,
        "max_template_chars": _max_template_chars(settings),
    }
    return JSONResponse(status_code=200, headers={REQUEST_ID_HEADER: request_id}, content=payload)


@app.post("/v1/validate")
async def validate_v1(request: Request) -> JSONResponse:
    """Validate template syntax and token references against a snapshot."""

    def handle(body: ValidateRequest, permissive: bool) -> tuple[int, dict[str, Any]]:
        result = validate_tokens(body.template, body.snapshot, permissive=permissive)
        syntax = validate_token_syntax(escape_literal_braces(body.template))
        payload = result.model_dump(mode="json")
        payload["syntax"] = {"valid": syntax.valid, "errors": syntax.errors}
        return 200, payload

    return await _run_endpoint(request, "validate", ValidateRequest, handle)


@app.post("/v1/resolve")
async def resolve_v1(request: Request) -> JSONResponse:
    """Resolve tokens without validating; unresolvable tokens render as brackets."""

    def handle(body: ResolveRequest, permissive: bool) -> tuple[int, dict[str, Any]]:
        if body.include_metadata:
            result = resolve_tokens_with_metadata(
                body.template, body.snapshot, permissive=permissive
            )
            return 200, result.model_dump(mode="json")
        return 200, {"resolved": resolve_tokens(body.template, body.snapshot, permissive)}

    return await _run_endpoint(request, "resolve", ResolveRequest, handle)


@app.post("/v1/prompt")
async def prompt_v1(request: Request) -> JSONResponse:
    """Validate then resolve; invalid templates are rejected in error mode."""

    def handle(body: PromptRequest, permissive: bool) -> tuple[int, dict[str, Any]]:
        try:
            output = build_prompt(
                body.template,
                body.snapshot,
                validation_mode=body.validation_mode,
                permissive=permissive,
            )
        except TemplateValidationError as exc:
            raise ApiRequestError(
                status_code=422,
                error_code="TEMPLATE_INVALID",
                message="template has invalid tokens",
                detail={"validation": exc.result.model_dump(mode="json")},
            ) from exc
        return 200, output.model_dump(mode="json")

    return await _run_endpoint(request, "prompt", PromptRequest, handle)


@app.post("/v1/tokens")
async def tokens_v1(request: Request) -> JSONResponse:
    """List the tokens available for a snapshot, optionally filtered."""

    request_started = time.perf_counter()
    request_id = _request_id_from_request(request)
    try:
        body = _parse_body(await _read_json(request), TokensRequest)
        catalog = build_token_catalog(body.snapshot)
        if body.query:
            catalog = filter_catalog(catalog, body.query)
        _log_event(
            logging.INFO,
            "done",
            request_id,
            endpoint="tokens",
            status_code=200,
            duration_ms=_elapsed_ms(request_started),
        )
        return JSONResponse(
            status_code=200,
            headers={REQUEST_ID_HEADER: request_id},
            content=catalog.model_dump(mode="json"),
        )
    except ApiRequestError as exc:
        return _api_error(exc, request_id, endpoint="tokens")


async def _run_endpoint(
    request: Request,
    endpoint: str,
    model: type[_TemplateBody],
    handler: Callable[[_TemplateBody, bool], tuple[int, dict[str, Any]]],
) -> JSONResponse:
    request_started = time.perf_counter()
    request_id = _request_id_from_request(request)
    failure_stage = "parse_body"

    try:
        body = _parse_body(await _read_json(request), model)

        failure_stage = "check_limits"
        settings = _settings()
        template = body.template
        max_chars = _max_template_chars(settings)
        if len(template) > max_chars:
            raise ApiRequestError(
                status_code=413,
                error_code="TEMPLATE_TOO_LARGE",
                message="template exceeds size limit",
                detail={"max_template_chars": max_chars, "received_chars": len(template)},
            )

        permissive = (
            settings.permissive_bare_tokens if body.permissive is None else body.permissive
        )

        _log_event(
            logging.INFO,
            "start",
            request_id,
            endpoint=endpoint,
            template_chars=len(template),
            token_count=len(parse_tokens(escape_literal_braces(template), permissive=permissive)),
            permissive=permissive,
        )

        failure_stage = endpoint
        status_code, payload = handler(body, permissive)
        _log_event(
            logging.INFO,
            "done",
            request_id,
            endpoint=endpoint,
            status_code=status_code,
            duration_ms=_elapsed_ms(request_started),
        )
        return JSONResponse(
            status_code=status_code,
            headers={REQUEST_ID_HEADER: request_id},
            content=payload,
        )
    except ApiRequestError as exc:
        return _api_error(exc, request_id, endpoint=endpoint, failure_stage=failure_stage)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_JSON",
            message="request body must be valid UTF-8 JSON",
            detail={"error": str(exc)},
        ) from exc


def _parse_body(raw: Any, model: type[_RequestModel]) -> _RequestModel:
    if not isinstance(raw, dict):
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_JSON",
            message="request JSON must be an object",
        )
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message="request schema validation failed",
            detail={"error": str(exc)},
        ) from exc


def _settings() -> TokenSettings:
    raw_path = os.getenv("ARTIFACT_TOKENS_SETTINGS")
    try:
        return load_settings(Path(raw_path) if raw_path else None)
    except ValueError as exc:
        raise ApiRequestError(
            status_code=500,
            error_code="INVALID_SETTINGS",
            message="server settings are invalid",
            detail={"error": str(exc)},
        ) from exc


def _max_template_chars(settings: TokenSettings) -> int:
    raw = os.getenv("ARTIFACT_TOKENS_MAX_TEMPLATE_CHARS")
    if raw is None:
        return settings.max_template_chars
    try:
        parsed = int(raw)
    except ValueError:
        return settings.max_template_chars
    if parsed <= 0:
        return settings.max_template_chars
    return parsed


def _request_id_from_request(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    generated = uuid.uuid4().hex
    request.state.request_id = generated
    return generated


def _package_version() -> str:
    try:
        return importlib.metadata.version("artifact-tokens")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def _api_error(exc: ApiRequestError, request_id: str, **fields: Any) -> JSONResponse:
    _log_event(
        logging.ERROR,
        "error",
        request_id,
        error_code=exc.error_code,
        status_code=exc.status_code,
        **fields,
    )
    return _error_response(
        status_code=exc.status_code,
        error_code=exc.error_code,
        message=exc.message,
        request_id=request_id,
        detail=exc.detail,
    )


def _error_response(
    *,
    status_code: int,
    error_code: str,
    message: str,
    request_id: str,
    detail: dict[str, Any] | None = None,
) -> JSONResponse:
    payload_detail = dict(detail or {})
    payload_detail["request_id"] = request_id

    return JSONResponse(
        status_code=status_code,
        headers={REQUEST_ID_HEADER: request_id},
        content={
            "error_code": error_code,
            "message": message,
            "detail": payload_detail,
        },
    )


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _log_event(level: int, event: str, request_id: str, **fields: Any) -> None:
    payload = {
        "event": event,
        "request_id": request_id,
        **fields,
    }
    logger.log(level, _dump_json(payload))
