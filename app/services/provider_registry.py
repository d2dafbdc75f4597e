"""Map the configured newsletter service onto its adapter and credentials."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import httpx

from app.core.config import Settings
from app.services.providers import (
    DEFAULT_TIMEOUT_SECONDS,
    BrevoAdapter,
    ConvertKitAdapter,
    KlaviyoAdapter,
    MailchimpAdapter,
    NetlifyAdapter,
    ProviderAdapter,
    ProviderId,
    SubscriptionError,
)

ADAPTERS: Mapping[ProviderId, type[ProviderAdapter]] = MappingProxyType(
    {
        ProviderId.NETLIFY: NetlifyAdapter,
        ProviderId.MAILCHIMP: MailchimpAdapter,
        ProviderId.CONVERTKIT: ConvertKitAdapter,
        ProviderId.KLAVIYO: KlaviyoAdapter,
        ProviderId.BREVO: BrevoAdapter,
    }
)

REQUIRED_CREDENTIALS: Mapping[ProviderId, tuple[str, ...]] = MappingProxyType(
    {provider_id: adapter.required_credentials for provider_id, adapter in ADAPTERS.items()}
)


class ConfigurationError(SubscriptionError):
    """Raised when the selected provider is unknown or missing a credential.

    The message is meant for operators; it names environment variables and
    must not be returned to end users.
    """


def credential_env_var(provider_id: ProviderId, credential: str) -> str:
    """Return the environment variable that supplies ``credential``."""

    return f"APP_{provider_id.value}_{credential}".upper()


def parse_provider_id(raw: str | None) -> ProviderId | None:
    """Normalise a configured service name; ``None`` when it is not recognised."""

    try:
        return ProviderId((raw or "").strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """The selected provider and only that provider's credentials.

    ``service`` keeps the configured name verbatim so an unknown value can be
    reported when the provider is first resolved instead of at import time.
    """

    service: str
    credentials: Mapping[str, str]
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        object.__setattr__(self, "service", (self.service or "").strip().lower())
        if not isinstance(self.credentials, MappingProxyType):
            object.__setattr__(self, "credentials", MappingProxyType(dict(self.credentials)))

    @property
    def provider_id(self) -> ProviderId | None:
        return parse_provider_id(self.service)

    @classmethod
    def from_settings(cls, settings: Settings) -> ProviderConfig:
        """Build the config for ``settings.newsletter_service``.

        Missing credentials are left out rather than rejected here; they
        surface as a :class:`ConfigurationError` when the provider is resolved.
        """

        service = settings.newsletter_service
        provider_id = parse_provider_id(service)
        credentials: dict[str, str] = {}
        if provider_id is not None:
            for name in REQUIRED_CREDENTIALS[provider_id]:
                value = getattr(settings, f"{provider_id.value}_{name}", None)
                if value is not None:
                    credentials[name] = value
        return cls(
            service=service,
            credentials=credentials,
            timeout=settings.provider_timeout_seconds,
        )

    def missing_credentials(self) -> list[str]:
        """Return the required credential names that are absent or blank."""

        provider_id = self.provider_id
        if provider_id is None:
            return []
        return [
            name
            for name in REQUIRED_CREDENTIALS[provider_id]
            if not (self.credentials.get(name) or "").strip()
        ]


def _check_brevo_list_id(config: ProviderConfig) -> None:
    list_id = config.credentials["list_id"].strip()
    if not list_id.isdigit():
        raise ConfigurationError(
            f"{credential_env_var(ProviderId.BREVO, 'list_id')} must be a numeric list id"
        )


def resolve_provider(
    config: ProviderConfig,
    *,
    client: httpx.AsyncClient | None = None,
) -> ProviderAdapter:
    """Return the adapter for ``config`` or raise :class:`ConfigurationError`."""

    provider_id = config.provider_id
    if provider_id is None:
        supported = ", ".join(provider.value for provider in ProviderId)
        raise ConfigurationError(
            f"Unknown newsletter service {config.service!r} (APP_NEWSLETTER_SERVICE); supported: {supported}"
        )

    missing = config.missing_credentials()
    if missing:
        env_vars = ", ".join(credential_env_var(provider_id, name) for name in missing)
        raise ConfigurationError(
            f"Newsletter service {provider_id.value!r} is missing credentials: {env_vars}"
        )

    if provider_id is ProviderId.BREVO:
        _check_brevo_list_id(config)

    adapter_cls = ADAPTERS[provider_id]
    credentials = MappingProxyType(
        {name: config.credentials[name].strip() for name in REQUIRED_CREDENTIALS[provider_id]}
    )
    return adapter_cls(credentials, client=client, timeout=config.timeout)
