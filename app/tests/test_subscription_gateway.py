"""Tests for the signup orchestration."""

from __future__ import annotations

import httpx
import pytest

from app.services import subscription_gateway
from app.services.provider_registry import ConfigurationError, ProviderConfig
from app.services.providers import Ok, ProviderAdapter, ProviderId, Rejected, TransportError
from app.services.subscription_gateway import (
    FAILURE_MESSAGE,
    INVALID_EMAIL_MESSAGE,
    SUCCESS_MESSAGE,
    SubscriptionGateway,
)

pytest_plugins = ("pytest_asyncio",)


class StubAdapter(ProviderAdapter):
    provider_id = ProviderId.MAILCHIMP

    def __init__(self, outcome) -> None:
        super().__init__({})
        self.outcome = outcome
        self.calls: list[str] = []

    async def subscribe(self, email: str):
        self.calls.append(email)
        return self.outcome


def _gateway_with(monkeypatch: pytest.MonkeyPatch, adapter: ProviderAdapter) -> SubscriptionGateway:
    resolved: list[ProviderConfig] = []

    def fake_resolve(config: ProviderConfig, *, client=None) -> ProviderAdapter:
        resolved.append(config)
        return adapter

    monkeypatch.setattr(subscription_gateway, "resolve_provider", fake_resolve)
    gateway = SubscriptionGateway(ProviderConfig(service="mailchimp", credentials={}))
    gateway.resolved = resolved  # type: ignore[attr-defined]
    return gateway


@pytest.mark.asyncio
async def test_missing_email_returns_input_error_without_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = StubAdapter(Ok())
    gateway = _gateway_with(monkeypatch, adapter)

    result = await gateway.handle({})

    assert result.success is False
    assert result.message == INVALID_EMAIL_MESSAGE
    assert result.status_code == 400
    assert adapter.calls == []
    assert gateway.resolved == []  # type: ignore[attr-defined]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email"},
        {"email": ""},
        {"email": 42},
        {"email": None},
        {"email": " user@example.com"},
        {"email": "user@example.com\n"},
    ],
)
async def test_invalid_email_is_rejected(monkeypatch: pytest.MonkeyPatch, payload: dict) -> None:
    adapter = StubAdapter(Ok())
    gateway = _gateway_with(monkeypatch, adapter)

    result = await gateway.handle(payload)

    assert result.model_dump() == {"success": False, "message": INVALID_EMAIL_MESSAGE}
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_ok_outcome_is_success(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = StubAdapter(Ok())
    gateway = _gateway_with(monkeypatch, adapter)

    result = await gateway.handle({"email": "user@example.com"})

    assert result.model_dump() == {"success": True, "message": SUCCESS_MESSAGE}
    assert result.status_code == 200
    assert adapter.calls == ["user@example.com"]


@pytest.mark.asyncio
async def test_transport_error_detail_never_reaches_caller(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    detail = "ConnectError: secret-host.internal refused"
    gateway = _gateway_with(monkeypatch, StubAdapter(TransportError(detail=detail)))

    result = await gateway.handle({"email": "user@example.com"})

    assert result.model_dump() == {"success": False, "message": FAILURE_MESSAGE}
    assert detail not in result.model_dump_json()
    assert detail in caplog.text


@pytest.mark.asyncio
async def test_rejection_is_generic_failure(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    gateway = _gateway_with(monkeypatch, StubAdapter(Rejected(reason="HTTP 400: Member Exists")))

    result = await gateway.handle({"email": "user@example.com"})

    assert result.success is False
    assert result.message == FAILURE_MESSAGE
    assert "Member Exists" not in result.message
    assert "Member Exists" in caplog.text


@pytest.mark.asyncio
async def test_configuration_fault_propagates() -> None:
    gateway = SubscriptionGateway(ProviderConfig(service="mailchimp", credentials={"api_key": "k"}))

    with pytest.raises(ConfigurationError):
        await gateway.handle({"email": "user@example.com"})


@pytest.mark.asyncio
async def test_invalid_email_checked_before_configuration() -> None:
    gateway = SubscriptionGateway(ProviderConfig(service="unknown", credentials={}))

    result = await gateway.handle({"email": "nope"})

    assert result.status_code == 400


@pytest.mark.asyncio
async def test_end_to_end_with_real_adapter() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    config = ProviderConfig(service="convertkit", credentials={"api_key": "k", "form_id": "5"})
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        gateway = SubscriptionGateway(config, client=client)
        result = await gateway.handle({"email": "reader@example.com"})

    assert result.success is True
    assert len(seen) == 1
    assert seen[0].url.path == "/v3/forms/5/subscribe"
