"""Bearer token management for periodo-cli.

- :class:`TokenStore` -- interface over the single persisted token, with
  :class:`FileTokenStore` (``~/.periodo-token``) and
  :class:`MemoryTokenStore` implementations.
- :class:`TokenProvider` -- returns the stored token or prompts the user
  for a new one.

Typical usage::

    from periodo_cli.auth import FileTokenStore, TokenProvider

    provider = TokenProvider(FileTokenStore(settings.token_file), settings.server_url)
    token = provider.get_token()
"""

from periodo_cli.auth.provider import TokenProvider, registration_url
from periodo_cli.auth.token_store import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "FileTokenStore",
    "MemoryTokenStore",
    "TokenProvider",
    "TokenStore",
    "registration_url",
]
