"""Audience-management provider adapters.

Each adapter turns a validated email address into exactly one call against a
provider's API and reports what happened as a :data:`SubscribeOutcome`:

* :class:`Ok` - the provider accepted the address
* :class:`Rejected` - the call completed but the provider declined it
* :class:`TransportError` - the provider could not be reached

Adapters never retry or queue; the caller awaits a single attempt.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
_BODY_EXCERPT_CHARS = 200


class ProviderId(str, Enum):
    """Identifiers accepted by the ``APP_NEWSLETTER_SERVICE`` setting."""

    NETLIFY = "netlify"
    MAILCHIMP = "mailchimp"
    CONVERTKIT = "convertkit"
    KLAVIYO = "klaviyo"
    BREVO = "brevo"


class SubscriptionError(Exception):
    """Base class for every failure raised while handling a signup."""


class ProviderRejectedError(SubscriptionError):
    """Raised when a provider answered but declined the subscription."""


class ProviderTransportError(SubscriptionError):
    """Raised when a provider could not be reached."""


@dataclass(frozen=True, slots=True)
class Ok:
    """The provider accepted the address."""


@dataclass(frozen=True, slots=True)
class Rejected:
    """The provider responded but did not accept the address."""

    reason: str


@dataclass(frozen=True, slots=True)
class TransportError:
    """The request never produced a provider response."""

    detail: str


SubscribeOutcome = Union[Ok, Rejected, TransportError]


@dataclass(slots=True)
class ProviderRequest:
    """Outbound HTTP call an adapter wants to make."""

    method: str
    url: str
    json: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    auth: tuple[str, str] | None = None


class ProviderAdapter(ABC):
    """Single-method capability shared by all providers."""

    provider_id: ClassVar[ProviderId]
    required_credentials: ClassVar[tuple[str, ...]] = ()

    def __init__(self, credentials: Mapping[str, str]) -> None:
        self.credentials = credentials

    @abstractmethod
    async def subscribe(self, email: str) -> SubscribeOutcome:
        """Make one subscribe attempt for ``email``."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} provider={self.provider_id.value}>"


class HttpProviderAdapter(ProviderAdapter):
    """Adapter backed by one JSON-over-HTTPS request."""

    def __init__(
        self,
        credentials: Mapping[str, str],
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(credentials)
        self._client = client
        self._timeout = timeout

    @abstractmethod
    def build_request(self, email: str) -> ProviderRequest:
        """Describe the provider call for ``email``."""

    async def subscribe(self, email: str) -> SubscribeOutcome:
        """Send the provider request and classify the response."""

        request = self.build_request(email)
        try:
            if self._client is not None:
                response = await self._send(self._client, request)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._send(client, request)
        except httpx.RequestError as exc:
            # also covers undecodable bodies and redirect loops
            return TransportError(detail=f"{type(exc).__name__}: {exc}")

        if response.is_success:
            logger.info("Subscription accepted by %s", self.provider_id.value)
            return Ok()

        excerpt = response.text[:_BODY_EXCERPT_CHARS]
        return Rejected(reason=f"HTTP {response.status_code}: {excerpt}")

    async def _send(self, client: httpx.AsyncClient, request: ProviderRequest) -> httpx.Response:
        return await client.request(
            request.method,
            request.url,
            json=request.json,
            headers=request.headers,
            auth=request.auth,
            timeout=self._timeout,
        )


class MailchimpAdapter(HttpProviderAdapter):
    """Adds a list member with status ``subscribed`` (Marketing API 3.0)."""

    provider_id = ProviderId.MAILCHIMP
    required_credentials = ("api_key", "server_prefix", "list_id")

    def build_request(self, email: str) -> ProviderRequest:
        server_prefix = self.credentials["server_prefix"]
        list_id = self.credentials["list_id"]
        return ProviderRequest(
            method="POST",
            url=f"https://{server_prefix}.api.mailchimp.com/3.0/lists/{list_id}/members",
            json={"email_address": email, "status": "subscribed"},
            # Mailchimp ignores the username; the API key is the password
            auth=("anystring", self.credentials["api_key"]),
        )


class ConvertKitAdapter(HttpProviderAdapter):
    """Subscribes an address to a form (API v3, key sent in the body)."""

    provider_id = ProviderId.CONVERTKIT
    required_credentials = ("api_key", "form_id")

    def build_request(self, email: str) -> ProviderRequest:
        form_id = self.credentials["form_id"]
        return ProviderRequest(
            method="POST",
            url=f"https://api.convertkit.com/v3/forms/{form_id}/subscribe",
            json={"api_key": self.credentials["api_key"], "email": email},
        )


class KlaviyoAdapter(HttpProviderAdapter):
    """Creates a bulk subscription job for a single profile on a list."""

    provider_id = ProviderId.KLAVIYO
    required_credentials = ("api_key", "list_id")

    API_URL = "https://a.klaviyo.com/api/profile-subscription-bulk-create-jobs"
    API_REVISION = "2024-10-15"

    def build_request(self, email: str) -> ProviderRequest:
        payload = {
            "data": {
                "type": "profile-subscription-bulk-create-job",
                "attributes": {
                    "profiles": {
                        "data": [
                            {
                                "type": "profile",
                                "attributes": {
                                    "email": email,
                                    "subscriptions": {
                                        "email": {"marketing": {"consent": "SUBSCRIBED"}},
                                    },
                                },
                            }
                        ]
                    },
                },
                "relationships": {
                    "list": {"data": {"type": "list", "id": self.credentials["list_id"]}},
                },
            }
        }
        return ProviderRequest(
            method="POST",
            url=self.API_URL,
            json=payload,
            headers={
                "Authorization": f"Klaviyo-API-Key {self.credentials['api_key']}",
                "revision": self.API_REVISION,
                "Accept": "application/vnd.api+json",
            },
        )


class BrevoAdapter(HttpProviderAdapter):
    """Creates (or updates) a contact and adds it to a list."""

    provider_id = ProviderId.BREVO
    required_credentials = ("api_key", "list_id")

    API_URL = "https://api.brevo.com/v3/contacts"

    def build_request(self, email: str) -> ProviderRequest:
        return ProviderRequest(
            method="POST",
            url=self.API_URL,
            json={
                "email": email,
                "listIds": [int(self.credentials["list_id"])],
                "updateEnabled": True,
            },
            headers={"api-key": self.credentials["api_key"], "Accept": "application/json"},
        )


class NetlifyAdapter(ProviderAdapter):
    """No-op adapter for sites whose host collects form submissions itself.

    Netlify Forms captures the submission before it reaches this service, so
    there is nothing to call: the address is logged and reported as accepted.
    Because that also looks exactly like "no provider wired up", the app warns
    at startup whenever this adapter is selected.
    """

    provider_id = ProviderId.NETLIFY

    def __init__(self, credentials: Mapping[str, str] | None = None, **_: Any) -> None:
        super().__init__(credentials or {})

    async def subscribe(self, email: str) -> SubscribeOutcome:
        logger.info("New email subscription (delivered by hosting form pipeline): %s", email)
        return Ok()
