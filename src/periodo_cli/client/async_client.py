"""Asynchronous HTTP client for the PeriodO server.

:class:`AsyncClient` wraps :class:`httpx.AsyncClient` and adds what every
operation needs:

* bearer token injection for authenticated calls, obtained lazily from a
  :class:`~periodo_cli.auth.provider.TokenProvider`;
* comparison of the response status with the single expected code, with
  unexpected responses mapped to typed errors by
  :func:`~periodo_cli.client.response.error_for_response`;
* transport failures (timeout, DNS, refused connection) re-raised as
  :class:`~periodo_cli.exceptions.ConnectionError_`.

There is no retry: a request either succeeds or the error is reported.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from periodo_cli.auth.provider import TokenProvider
from periodo_cli.client.response import error_for_response
from periodo_cli.exceptions import ConnectionError_, RemoteError
from periodo_cli.models import Settings

logger = logging.getLogger(__name__)

USER_AGENT = "periodo-cli"


class AsyncClient:
    """Asynchronous HTTP client for PeriodO API calls.

    Must be used as an async context manager.

    Args:
        settings: Effective settings (timeout, token location).
        token_provider: Source of the bearer token for authenticated
            requests. When ``None``, authenticated requests raise
            :class:`RuntimeError`.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        async with AsyncClient(settings, token_provider=provider) as client:
            response = await client.request(
                "PATCH", url, expected=202, authenticated=True, content=body,
            )
    """

    def __init__(
        self,
        settings: Settings,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._token_provider = token_provider
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        self._client = httpx.AsyncClient(
            timeout=self._settings.timeout,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        url: str,
        expected: Optional[int] = None,
        authenticated: bool = False,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        content: Optional[bytes] = None,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        """Send a request and check its status.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            url: Absolute URL.
            expected: The one status code that means success. ``None``
                disables the check.
            authenticated: Attach ``Authorization: Bearer <token>``.
            params: Query parameters.
            headers: Extra request headers.
            content: Raw request body.
            follow_redirects: Follow 3xx responses.

        Returns:
            The :class:`httpx.Response` from the server.

        Raises:
            TokenExpiredError: On 401 when a different status was expected.
            RemoteError: On any other unexpected status.
            ConnectionError_: On network / timeout errors.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        merged_headers: dict[str, str] = dict(headers or {})
        if authenticated:
            merged_headers["Authorization"] = f"Bearer {self._get_token()}"

        logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                headers=merged_headers,
                content=content,
                follow_redirects=follow_redirects,
            )
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Could not reach {url}: {exc}") from exc
        logger.debug("%s %s -> %s", method, url, response.status_code)

        if expected is not None and response.status_code != expected:
            raise error_for_response(response, self._token_location())
        return response

    async def get_json(
        self,
        url: str,
        authenticated: bool = False,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """GET *url*, expect 200, and decode the JSON body.

        Raises:
            RemoteError: If the status is not 200 or the body is not JSON.
        """
        response = await self.request(
            "GET",
            url,
            expected=200,
            authenticated=authenticated,
            params=params,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(
                f"Invalid JSON from {url}: {exc}", status=response.status_code
            ) from exc

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _get_token(self) -> str:
        if self._token_provider is None:
            raise RuntimeError("Authenticated request without a token provider")
        return self._token_provider.get_token()

    def _token_location(self) -> str:
        if self._token_provider is None:
            return str(self._settings.token_file)
        return self._token_provider.store.location
