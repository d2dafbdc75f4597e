"""Read the site's published-content index."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from app.schema.content import ContentItem

logger = logging.getLogger(__name__)

_items_adapter = TypeAdapter(list[ContentItem])


class ContentIndexError(ValueError):
    """Raised when the content index exists but cannot be parsed."""


def load_content_items(path: str | Path) -> list[ContentItem]:
    """Load content items from a JSON array on disk.

    A missing index means the site has nothing published yet.
    """

    index_path = Path(path)
    if not index_path.is_file():
        logger.info("Content index %s not found; feed will be empty", index_path)
        return []

    try:
        return _items_adapter.validate_json(index_path.read_bytes())
    except ValidationError as exc:
        raise ContentIndexError(f"Invalid content index {index_path}") from exc
