"""periodo_cli -- command-line client for the PeriodO data server.

Submits, lists, merges and rejects patches (proposed edits to the PeriodO
dataset), creates bags, and updates or deletes graphs. Write operations
authenticate with a bearer token kept in ``~/.periodo-token``.

Typical workflow::

    periodo submit-patch changes.json
    periodo list-patches
    periodo merge-patch https://data.perio.do/patches/42/

Modules:
    app: Typer application and CLI entry point.
    api: One coroutine per server operation.
    client: httpx-based client with token injection and status checks.
    auth: Token storage and interactive acquisition.
    config: Settings resolution and URL helpers.
    exceptions: Exception hierarchy tagged with error kinds.
    result: ``Ok`` / ``Err`` results at the command boundary.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
