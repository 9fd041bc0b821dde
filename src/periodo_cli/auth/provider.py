"""Interactive bearer token acquisition.

:class:`TokenProvider` returns the stored token when there is one. When
there is none, it explains how to obtain a token, shows the server's
registration URL, prompts for the pasted token and persists it. The
token is never validated locally; the server's 401 answer is the only
signal that it is no longer good.
"""

from __future__ import annotations

import getpass
import logging
from typing import Callable, Optional

from periodo_cli.auth.token_store import TokenStore
from periodo_cli.exceptions import AuthError
from periodo_cli.output import get_output

logger = logging.getLogger(__name__)

PromptFn = Callable[[str], str]

_EXPLANATION = """
An authentication token is needed. Open the following URL in a browser, sign in
or register with ORCID, and grant the requested permissions to PeriodO:

{registration_url}
"""


def registration_url(server_url: str) -> str:
    """Return the page where a user obtains a CLI token for *server_url*."""
    return f"{server_url}register?cli"


def _prompt_for_token(prompt: str) -> str:
    # getpass reads from the controlling terminal, leaving a piped stdin
    # body untouched.
    return getpass.getpass(prompt)


class TokenProvider:
    """Return a bearer token, prompting for one when none is stored.

    Args:
        store: Where the token lives.
        server_url: Slash-terminated server base URL, used to build the
            registration URL.
        prompt: Callable that displays its argument and returns the
            user's answer. Defaults to a no-echo :func:`getpass.getpass`.
    """

    def __init__(
        self,
        store: TokenStore,
        server_url: str,
        prompt: Optional[PromptFn] = None,
    ) -> None:
        self._store = store
        self._server_url = server_url
        self._prompt = prompt or _prompt_for_token

    @property
    def store(self) -> TokenStore:
        return self._store

    def get_token(self) -> str:
        """Return the stored token, or acquire and store a new one.

        Raises:
            AuthError: If the user enters an empty token.
        """
        token = self._store.load()
        if token is not None:
            logger.debug("Using token from %s", self._store.location)
            return token
        return self._acquire()

    def refresh_token(self) -> str:
        """Forget the stored token and acquire a new one."""
        if self._store.load() is not None:
            logger.debug("Removing token at %s", self._store.location)
            try:
                self._store.clear()
            except OSError as exc:
                raise AuthError(f"Cannot remove {self._store.location}: {exc}") from exc
        return self._acquire()

    def _acquire(self) -> str:
        output = get_output()
        output.error("authorization required")
        output.info(_EXPLANATION.format(registration_url=registration_url(self._server_url)))
        token = self._prompt(
            "Then copy and paste the resulting authentication token here: "
        ).strip()
        if not token:
            raise AuthError("No token provided")
        try:
            self._store.store(token)
        except OSError as exc:
            raise AuthError(f"Cannot write {self._store.location}: {exc}") from exc
        logger.debug("Stored token at %s", self._store.location)
        return token
