"""Liberal email address format check."""

from __future__ import annotations

import re

# local-part "@" domain "." tld, no whitespace and no extra "@" anywhere
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(candidate: str | None) -> bool:
    """Return True when ``candidate`` looks like an email address.

    This is a shape check, not RFC 5322 validation: it prefers letting an odd
    but real address through over rejecting it.
    """

    if not candidate or not isinstance(candidate, str):
        return False
    return EMAIL_REGEX.fullmatch(candidate) is not None
