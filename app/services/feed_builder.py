"""RSS 2.0 feed of published articles."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from app.schema.content import ContentItem
from app.services.template_renderer import render_template

FEED_PATH = "/rss.xml"


@dataclass(slots=True)
class FeedEntry:
    item: ContentItem
    link: str


def _sort_key(item: ContentItem) -> datetime:
    value = item.pub_date
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def published_items(items: Iterable[ContentItem]) -> list[ContentItem]:
    """Drop drafts and order the rest newest first."""

    return sorted((item for item in items if not item.draft), key=_sort_key, reverse=True)


def build_feed(
    items: Iterable[ContentItem],
    *,
    site_url: str,
    title: str,
    description: str,
    language: str = "en-us",
    path_prefix: str = "/blog/",
) -> str:
    """Render the feed document for the published subset of ``items``."""

    base = site_url.rstrip("/")
    prefix = "/" + path_prefix.strip("/") + "/" if path_prefix.strip("/") else "/"
    entries = [FeedEntry(item=item, link=f"{base}{prefix}{item.slug}/") for item in published_items(items)]
    return render_template(
        "rss.xml.jinja",
        title=title,
        description=description,
        site_url=f"{base}/",
        feed_url=f"{base}{FEED_PATH}",
        language=language,
        last_build_date=entries[0].item.pub_date if entries else None,
        entries=entries,
    )
