"""Subdomain normalization, format rules and candidate generation.

Everything here is pure. Availability needs a store lookup and lives in
tenancy.application.subdomain.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from tenancy.domain.exceptions import TenancyValidationError

MIN_SUBDOMAIN_LENGTH = 3
MAX_SUBDOMAIN_LENGTH = 50

_DISALLOWED_RUN = re.compile(r"[^a-z0-9-]+")
_HYPHEN_RUN = re.compile(r"-{2,}")
_ALLOWED = re.compile(r"^[a-z0-9-]+$")


def normalize_subdomain(value: str) -> str:
    """Turn arbitrary text into a URL-safe slug.

    Lowercases, replaces runs of characters outside [a-z0-9-] with a single
    hyphen, collapses repeated hyphens, strips edge hyphens and truncates to
    MAX_SUBDOMAIN_LENGTH. Applying it twice gives the same result.
    """
    slug = _DISALLOWED_RUN.sub("-", value.lower())
    slug = _HYPHEN_RUN.sub("-", slug).strip("-")
    return slug[:MAX_SUBDOMAIN_LENGTH].strip("-")


def subdomain_format_error(value: str) -> str | None:
    """Return the first format problem with a subdomain, or None if it is valid."""
    if len(value) < MIN_SUBDOMAIN_LENGTH:
        return f"Subdomain must be at least {MIN_SUBDOMAIN_LENGTH} characters"
    if len(value) > MAX_SUBDOMAIN_LENGTH:
        return f"Subdomain must be at most {MAX_SUBDOMAIN_LENGTH} characters"
    if not _ALLOWED.match(value):
        return "Subdomain can only contain lowercase letters, numbers, and hyphens"
    if value.startswith("-") or value.endswith("-"):
        return "Subdomain cannot start or end with a hyphen"
    return None


def validate_subdomain_format(value: str) -> str:
    """Return the subdomain unchanged if well formed.

    Raises:
        TenancyValidationError: With field "subdomain" and the problem found
    """
    error = subdomain_format_error(value)
    if error is not None:
        raise TenancyValidationError("subdomain", error)
    return value


def subdomain_candidates(name: str, max_suffix: int = 99) -> Iterator[str]:
    """Yield subdomains to try for an organization name, in order.

    The normalized name comes first, then `-2`, `-3` ... up to `max_suffix`.
    The base is shortened so every candidate fits MAX_SUBDOMAIN_LENGTH.
    Names too short to form a valid subdomain get `-org` appended.
    """
    base = normalize_subdomain(name)
    if len(base) < MIN_SUBDOMAIN_LENGTH:
        base = f"{base}-org" if base else "org"

    yield base
    for number in range(2, max_suffix + 1):
        suffix = f"-{number}"
        stem = base[: MAX_SUBDOMAIN_LENGTH - len(suffix)].rstrip("-")
        yield f"{stem}{suffix}"
