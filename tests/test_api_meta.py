from __future__ import annotations

import httpx
import pytest

from apps.api.main import app


@pytest.mark.anyio
async def test_meta_describes_grammar_and_limits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ARTIFACT_TOKENS_SETTINGS", raising=False)
    monkeypatch.delenv("ARTIFACT_TOKENS_MAX_TEMPLATE_CHARS", raising=False)
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/v1/meta")

    assert response.status_code == 200
    payload = response.json()
    assert payload["token_types"] == [
        "field",
        "section",
        "notes",
        "legacy-fields-json",
        "legacy-notes-json",
    ]
    assert "{{field:KEY}}" in payload["token_forms"]
    assert payload["permissive_bare_tokens"] is True
    assert payload["max_template_chars"] == 50_000
    assert isinstance(payload["version"], str)


@pytest.mark.anyio
async def test_meta_reports_env_limit_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARTIFACT_TOKENS_MAX_TEMPLATE_CHARS", "123")
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/v1/meta")

    assert response.json()["max_template_chars"] == 123


@pytest.mark.anyio
async def test_meta_ignores_invalid_env_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARTIFACT_TOKENS_MAX_TEMPLATE_CHARS", "-5")
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/v1/meta")

    assert response.json()["max_template_chars"] == 50_000
