"""Jinja2 rendering for the generated feed and stylesheet."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def _rfc822(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value)


_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(enabled_extensions=("xml.jinja",), disabled_extensions=("css.jinja",)),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["rfc822"] = _rfc822


def render_template(name: str, **context: Any) -> str:
    """Render ``name`` from the templates directory."""

    template = _env.get_template(name)
    return template.render(**context)
