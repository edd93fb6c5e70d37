from __future__ import annotations

import logging

import httpx
import pytest

from apps.api.main import REQUEST_ID_HEADER, app


@pytest.mark.anyio
async def test_api_logs_request_id_for_success(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="artifact_tokens.api")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post(
            "/v1/validate",
            json={"template": "{{field:a}} {{b}} \\{{c\\}}"},
        )

    assert response.status_code == 200
    request_id = response.headers[REQUEST_ID_HEADER]
    messages = [
        record.message for record in caplog.records if record.name == "artifact_tokens.api"
    ]
    assert any(
        '"event":"start"' in message
        and request_id in message
        and '"endpoint":"validate"' in message
        and '"token_count":2' in message
        for message in messages
    )
    assert any('"event":"done"' in message and request_id in message for message in messages)


@pytest.mark.anyio
async def test_api_logs_request_id_and_error_code_for_failure(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    caplog.set_level(logging.INFO, logger="artifact_tokens.api")
    monkeypatch.setenv("ARTIFACT_TOKENS_MAX_TEMPLATE_CHARS", "3")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post("/v1/resolve", json={"template": "abcd"})

    assert response.status_code == 413
    request_id = response.headers[REQUEST_ID_HEADER]
    messages = [
        record.message for record in caplog.records if record.name == "artifact_tokens.api"
    ]
    assert any(
        '"event":"error"' in message
        and request_id in message
        and '"error_code":"TEMPLATE_TOO_LARGE"' in message
        and '"failure_stage":"check_limits"' in message
        for message in messages
    )
