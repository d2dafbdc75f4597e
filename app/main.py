"""FastAPI app entry point."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.routers import feed, subscriptions
from app.services.provider_registry import ProviderConfig
from app.services.providers import ProviderId
from app.services.subscription_gateway import SubscriptionGateway

logger = logging.getLogger(__name__)


def _log_provider_status(config: ProviderConfig) -> None:
    """Warn about provider setups that will not deliver signups anywhere."""

    if config.provider_id is None:
        logger.error("Unknown newsletter service %r; signups will fail until configured", config.service)
        return

    if config.provider_id is ProviderId.NETLIFY:
        logger.warning(
            "Newsletter service is 'netlify': signups are only logged here and rely on "
            "the hosting platform's form handling for delivery"
        )
        return

    missing = config.missing_credentials()
    if missing:
        logger.warning(
            "Newsletter service %r is missing credentials %s; signups will fail until configured",
            config.service,
            ", ".join(missing),
        )
    else:
        logger.info("Newsletter service %r configured", config.service)


def create_app() -> FastAPI:
    """Build FastAPI application."""

    configure_logging(settings.log_level)
    provider_config = ProviderConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _log_provider_status(provider_config)
        async with httpx.AsyncClient(headers={"User-Agent": "newsletter-gateway/0.1"}) as client:
            app.state.gateway = SubscriptionGateway(provider_config, client=client)
            yield

    app = FastAPI(title="Newsletter Gateway", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(subscriptions.router)
    app.include_router(feed.router)

    @app.get("/healthz", tags=["health"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
