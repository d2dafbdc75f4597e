"""Newsletter signup endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schema.subscription import SubscriptionResult
from app.services.provider_registry import ConfigurationError
from app.services.subscription_gateway import (
    FAILURE_MESSAGE,
    INVALID_EMAIL_MESSAGE,
    SubscriptionGateway,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["subscriptions"])


def get_gateway(request: Request) -> SubscriptionGateway:
    """FastAPI dependency returning the gateway built at startup."""

    return request.app.state.gateway


def _result_response(result: SubscriptionResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.model_dump())


async def _read_payload(request: Request) -> dict[str, Any]:
    """Decode a JSON or form body into a plain dict."""

    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        body = await request.body()
        if not body:
            return {}
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError("JSON body must be an object")
        return data

    form = await request.form()
    return dict(form)


@router.post("/subscribe", response_model=SubscriptionResult, status_code=status.HTTP_200_OK)
async def subscribe(
    request: Request,
    gateway: SubscriptionGateway = Depends(get_gateway),
) -> JSONResponse:
    """Subscribe an email address to the site's newsletter."""

    try:
        payload = await _read_payload(request)
    except (ValueError, StarletteHTTPException):
        logger.info("Rejected undecodable subscription body")
        return _result_response(
            SubscriptionResult(success=False, message=INVALID_EMAIL_MESSAGE, status_code=400)
        )

    try:
        result = await gateway.handle(payload)
    except ConfigurationError:
        logger.exception("Newsletter provider is misconfigured")
        return _result_response(
            SubscriptionResult(success=False, message=FAILURE_MESSAGE, status_code=500)
        )
    except Exception:  # noqa: BLE001 - never leak internals to the caller
        logger.exception("Subscription error")
        return _result_response(
            SubscriptionResult(success=False, message=FAILURE_MESSAGE, status_code=500)
        )

    logger.info(
        "Processed subscription",
        extra={"provider": gateway.config.service, "success": result.success},
    )
    return _result_response(result)
