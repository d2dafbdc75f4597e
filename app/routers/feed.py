"""Syndication feed and generated stylesheet."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from app.core.config import settings
from app.services.content_loader import ContentIndexError, load_content_items
from app.services.feed_builder import FEED_PATH, build_feed
from app.services.theme import generate_css_variables

logger = logging.getLogger(__name__)

router = APIRouter(tags=["feed"])


@router.get(FEED_PATH, response_class=Response)
async def rss_feed() -> Response:
    """Serve the RSS feed of published articles."""

    try:
        items = load_content_items(settings.content_index_path)
    except ContentIndexError as exc:
        logger.exception("Failed to load content index")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Feed unavailable",
        ) from exc

    document = build_feed(
        items,
        site_url=settings.site_url,
        title=settings.site_title,
        description=settings.site_description,
        language=settings.site_language,
    )
    return Response(content=document, media_type="application/rss+xml; charset=utf-8")


@router.get("/theme.css", response_class=Response)
async def theme_stylesheet() -> Response:
    return Response(content=generate_css_variables(), media_type="text/css; charset=utf-8")
