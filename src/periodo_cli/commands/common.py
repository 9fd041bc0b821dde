"""Shared plumbing for periodo commands.

Every command resolves the same pieces from the Typer context object
(populated by :func:`~periodo_cli.app.main_callback`):

* ``settings`` -- the effective :class:`~periodo_cli.models.Settings`;
* ``token_store`` -- a :class:`~periodo_cli.auth.TokenStore` (a
  :class:`~periodo_cli.auth.FileTokenStore` unless one was injected);
* ``prompt`` -- optional token prompt override;
* ``transport`` -- optional httpx transport override.

:func:`run_operation` drives one async operation to completion and
renders the ``OK`` / ``failed`` outcome.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

import typer

from periodo_cli.api import Endpoints, PeriodoAPI, read_body
from periodo_cli.auth import FileTokenStore, TokenProvider, TokenStore
from periodo_cli.client import AsyncClient
from periodo_cli.models import Settings
from periodo_cli.output import get_output
from periodo_cli.result import Err, Ok, Result, attempt, capture

Operation = Callable[[PeriodoAPI, Optional[bytes]], Awaitable[Any]]


def get_settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def get_token_store(ctx: typer.Context) -> TokenStore:
    store = ctx.obj.get("token_store")
    if store is None:
        store = FileTokenStore(get_settings(ctx).token_file)
        ctx.obj["token_store"] = store
    return store


def get_token_provider(ctx: typer.Context) -> TokenProvider:
    return TokenProvider(
        get_token_store(ctx),
        get_settings(ctx).server_url,
        prompt=ctx.obj.get("prompt"),
    )


def run_operation(
    ctx: typer.Context,
    operation: Operation,
    progress: Optional[str] = None,
    authenticated: bool = True,
    body_source: Optional[str] = None,
) -> Result:
    """Run *operation* against the configured server and report the outcome.

    The request body (when *body_source* is given) is read first, then the
    token is obtained (prompting if needed), then the progress line is
    printed and the operation awaited.

    Args:
        ctx: Typer context carrying settings and injected collaborators.
        operation: Coroutine function taking the API and the body bytes.
        progress: Text of the progress line, e.g. ``"Deleting graph <url>"``.
            ``None`` prints no progress line and no ``OK`` marker.
        authenticated: Obtain the bearer token before starting.
        body_source: File name, or ``-`` for stdin.

    Returns:
        :class:`~periodo_cli.result.Ok` with the operation's value, or
        :class:`~periodo_cli.result.Err`. Errors have already been printed.
    """
    settings = get_settings(ctx)
    provider = get_token_provider(ctx)
    output = get_output()

    def _prepare() -> Optional[bytes]:
        # Blocking work (stdin, token prompt) stays outside the event loop.
        body = read_body(body_source) if body_source is not None else None
        if authenticated:
            provider.get_token()
        return body

    async def _run(body: Optional[bytes]) -> Any:
        async with AsyncClient(
            settings,
            token_provider=provider,
            transport=ctx.obj.get("transport"),
        ) as client:
            api = PeriodoAPI(client, settings.server_url, settings.lookup_concurrency)
            return await operation(api, body)

    result = attempt(_prepare)
    if isinstance(result, Ok):
        if progress:
            output.begin(progress)
        result = asyncio.run(capture(_run(result.value)))

    if isinstance(result, Err):
        output.failed()
        output.error(result.message)
    elif progress:
        output.done()
    return result


def get_endpoints(ctx: typer.Context) -> Endpoints:
    return Endpoints(get_settings(ctx).server_url)
