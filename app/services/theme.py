"""Site color tokens exposed as CSS custom properties.

Values are space-separated RGB channels so stylesheets can apply alpha, e.g.
``rgb(var(--color-primary) / 0.5)``.
"""

from __future__ import annotations

from collections.abc import Mapping

from app.services.template_renderer import render_template

THEME: dict[str, dict[str, str]] = {
    "primary": {
        "light": "37 99 235",  # blue-600
        "light_hover": "59 130 246",  # blue-500
        "dark": "96 165 250",  # blue-400
        "dark_hover": "147 197 253",  # blue-300
    },
    "background": {
        "light": "255 255 255",
        "dark": "17 24 39",  # gray-900
        "secondary_light": "249 250 251",  # gray-50
        "secondary_dark": "31 41 55",  # gray-800
    },
    "text": {
        "light": "17 24 39",  # gray-900
        "dark": "243 244 246",  # gray-100
        "secondary_light": "75 85 99",  # gray-600
        "secondary_dark": "156 163 175",  # gray-400
    },
    "border": {
        "light": "229 231 235",  # gray-200
        "dark": "75 85 99",  # gray-600
    },
}

# CSS variable stem per token group
_GROUP_PREFIX = {
    "primary": "primary",
    "background": "bg",
    "text": "text",
    "border": "border",
}

# token name -> variable suffix
_VARIANT_SUFFIX = {
    "light": "",
    "light_hover": "-hover",
    "dark": "-dark",
    "dark_hover": "-dark-hover",
    "secondary_light": "-secondary",
    "secondary_dark": "-secondary-dark",
}


def css_variables(theme: Mapping[str, Mapping[str, str]] = THEME) -> list[tuple[str, str]]:
    """Flatten theme tokens into ``(--name, value)`` pairs."""

    variables: list[tuple[str, str]] = []
    for group, variants in theme.items():
        stem = _GROUP_PREFIX.get(group, group.replace("_", "-"))
        for variant, value in variants.items():
            suffix = _VARIANT_SUFFIX.get(variant, "-" + variant.replace("_", "-"))
            variables.append((f"--color-{stem}{suffix}", value))
    return variables


def generate_css_variables(theme: Mapping[str, Mapping[str, str]] = THEME) -> str:
    return render_template("theme.css.jinja", variables=css_variables(theme))
