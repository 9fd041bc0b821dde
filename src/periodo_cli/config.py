"""Settings resolution and URL helpers.

Precedence for every setting (high to low):

1. CLI flags (``--server``, ``--token-file``, ``--timeout``)
2. Environment variables (``PERIODO_SERVER``, ``PERIODO_TOKEN_FILE``,
   ``PERIODO_TIMEOUT``)
3. Defaults

The only file this package persists is the token file; see
:class:`~periodo_cli.auth.token_store.FileTokenStore`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from pydantic import ValidationError

from periodo_cli.exceptions import ConfigError
from periodo_cli.models import Settings

DEFAULT_SERVER_URL = "https://data.perio.do/"
DEFAULT_TOKEN_FILENAME = ".periodo-token"
DEFAULT_TIMEOUT = 30.0

ENV_SERVER = "PERIODO_SERVER"
ENV_TOKEN_FILE = "PERIODO_TOKEN_FILE"
ENV_TIMEOUT = "PERIODO_TIMEOUT"


def ensure_trailing_slash(url: str) -> str:
    """Return *url* with one ``/`` appended when it does not already end in one."""
    return url if url.endswith("/") else url + "/"


def normalize_server_url(url: str) -> str:
    """Return the canonical form of a server base URL.

    Exactly one trailing slash is added when missing; URLs already ending
    in ``/`` are returned unchanged.
    """
    return ensure_trailing_slash(url)


def default_token_file() -> Path:
    """Return ``~/.periodo-token``."""
    return Path.home() / DEFAULT_TOKEN_FILENAME


def client_url(server_url: str) -> str:
    """Return the browser client URL for *server_url*.

    The client is served from the same host with a leading ``data.``
    replaced by ``client.``; other hosts are returned unchanged.
    """
    parts = urlsplit(server_url)
    host = parts.netloc
    if host.startswith("data."):
        host = "client." + host[len("data."):]
    return urlunsplit((parts.scheme, host, "/", "", ""))


def review_url(server_url: str, patch_url: str) -> str:
    """Return the browser URL where a human can review *patch_url*."""
    query = urlencode(
        {
            "page": "review-patch",
            "backendID": f"web-{server_url}",
            "patchURL": patch_url,
        }
    )
    return f"{client_url(server_url)}?{query}"


def _parse_timeout(value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(
            f"Invalid {ENV_TIMEOUT} value {value!r}: expected a number of seconds"
        ) from exc


def resolve_settings(
    server: Optional[str] = None,
    token_file: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Settings:
    """Resolve the effective :class:`~periodo_cli.models.Settings`.

    Args:
        server: ``--server`` flag value.
        token_file: ``--token-file`` flag value.
        timeout: ``--timeout`` flag value in seconds.

    Returns:
        Validated settings with a slash-terminated ``server_url``.

    Raises:
        ConfigError: If an environment value or flag is invalid.
    """
    resolved_server = server or os.environ.get(ENV_SERVER) or DEFAULT_SERVER_URL

    env_token_file = os.environ.get(ENV_TOKEN_FILE)
    if token_file:
        resolved_token_file = Path(token_file).expanduser()
    elif env_token_file:
        resolved_token_file = Path(env_token_file).expanduser()
    else:
        resolved_token_file = default_token_file()

    resolved_timeout = DEFAULT_TIMEOUT
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if timeout is not None:
        resolved_timeout = timeout
    elif env_timeout:
        resolved_timeout = _parse_timeout(env_timeout)

    try:
        return Settings(
            server_url=normalize_server_url(resolved_server),
            token_file=resolved_token_file,
            timeout=resolved_timeout,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc
