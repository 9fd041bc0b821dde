"""HTTP client module for periodo-cli.

Provides :class:`AsyncClient`, a thin wrapper around
:class:`httpx.AsyncClient` with bearer token injection and
expected-status checking, plus :func:`extract_message` for decoding
error bodies.

Example::

    from periodo_cli.client import AsyncClient

    async with AsyncClient(settings) as client:
        patches = await client.get_json(f"{settings.server_url}patches")
"""

from periodo_cli.client.async_client import AsyncClient
from periodo_cli.client.response import error_for_response, extract_message

__all__ = ["AsyncClient", "error_for_response", "extract_message"]
