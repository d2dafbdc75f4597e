"""Newsletter signup orchestration: validate, resolve provider, subscribe."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from app.schema.subscription import SubscriptionRequest, SubscriptionResult
from app.services.email_validator import is_valid_email
from app.services.provider_registry import ProviderConfig, resolve_provider
from app.services.providers import (
    Ok,
    ProviderAdapter,
    ProviderRejectedError,
    ProviderTransportError,
    Rejected,
    SubscriptionError,
    TransportError,
)

logger = logging.getLogger(__name__)

INVALID_EMAIL_MESSAGE = "Valid email is required"
SUCCESS_MESSAGE = "Successfully subscribed!"
FAILURE_MESSAGE = "Something went wrong. Please try again."


class InvalidEmailError(SubscriptionError):
    """Raised when the request carries no usable email address."""


class SubscriptionGateway:
    """Entry point for signup requests.

    Holds nothing but the immutable provider config and an optional shared
    HTTP client, so one instance can serve concurrent requests.
    """

    def __init__(self, config: ProviderConfig, *, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._client = client

    async def handle(self, payload: SubscriptionRequest | Mapping[str, Any]) -> SubscriptionResult:
        """Subscribe the address in ``payload`` with the configured provider.

        Raises :class:`~app.services.provider_registry.ConfigurationError` when
        the provider cannot be resolved; every other failure becomes a
        ``success=False`` result with a fixed message.
        """

        try:
            email = self._extract_email(payload)
        except InvalidEmailError:
            return SubscriptionResult(success=False, message=INVALID_EMAIL_MESSAGE, status_code=400)

        adapter = resolve_provider(self.config, client=self._client)

        try:
            await self._deliver(adapter, email)
        except ProviderRejectedError as exc:
            logger.warning("Provider %s rejected subscription: %s", adapter.provider_id.value, exc)
            return SubscriptionResult(success=False, message=FAILURE_MESSAGE)
        except ProviderTransportError as exc:
            logger.error("Provider %s unreachable: %s", adapter.provider_id.value, exc)
            return SubscriptionResult(success=False, message=FAILURE_MESSAGE)

        return SubscriptionResult(success=True, message=SUCCESS_MESSAGE)

    @staticmethod
    def _extract_email(payload: SubscriptionRequest | Mapping[str, Any]) -> str:
        if not isinstance(payload, SubscriptionRequest):
            try:
                payload = SubscriptionRequest.model_validate(dict(payload))
            except (TypeError, ValidationError) as exc:
                raise InvalidEmailError("Malformed subscription payload") from exc

        email = payload.email or ""
        if not is_valid_email(email):
            raise InvalidEmailError("Missing or malformed email address")
        return email

    @staticmethod
    async def _deliver(adapter: ProviderAdapter, email: str) -> None:
        outcome = await adapter.subscribe(email)
        if isinstance(outcome, Ok):
            return
        if isinstance(outcome, Rejected):
            raise ProviderRejectedError(outcome.reason)
        if isinstance(outcome, TransportError):
            raise ProviderTransportError(outcome.detail)
        raise TypeError(f"Unexpected subscribe outcome: {outcome!r}")
