"""ORCID profile lookup for patch authors.

Patches record their author as an ORCID profile URL. :func:`personal_name`
fetches that profile and derives a display name such as ``"SMITH Jane"``.
A lookup never fails the listing it belongs to: any network or decoding
problem yields the error text in place of the name.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from periodo_cli.client import AsyncClient
from periodo_cli.exceptions import PeriodoError

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"


def _path(doc: Any, *keys: str) -> Any:
    """Follow *keys* through nested dicts, returning ``None`` on any miss."""
    for key in keys:
        if not isinstance(doc, dict):
            return None
        doc = doc.get(key)
    return doc


def name_from_profile(profile: Any) -> str:
    """Derive ``"<FAMILY> <given names>"`` from an ORCID profile document.

    Returns :data:`ANONYMOUS` when the profile has no ``person.name`` or
    both parts are empty.
    """
    details = _path(profile, "person", "name")
    if not isinstance(details, dict):
        return ANONYMOUS
    family = (_path(details, "family-name", "value") or "").upper()
    given = _path(details, "given-names", "value") or ""
    name = f"{family} {given}".strip()
    return name or ANONYMOUS


async def personal_name(client: AsyncClient, orcid_url: Any) -> str:
    """Look up the display name for *orcid_url*.

    Returns:
        The display name, :data:`ANONYMOUS`, or the error text when the
        lookup fails.
    """
    if not orcid_url:
        return ANONYMOUS
    try:
        profile = await client.get_json(orcid_url)
        return name_from_profile(profile)
    except (
        PeriodoError,
        httpx.HTTPError,
        httpx.InvalidURL,
        ValueError,
        AttributeError,
        TypeError,
    ) as exc:
        logger.debug("ORCID lookup for %s failed: %s", orcid_url, exc)
        return str(exc)
