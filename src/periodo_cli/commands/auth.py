"""Auth commands -- token refresh and permission listing.

``refresh-token`` forgets the stored token and prompts for a new one.
``list-permissions`` asks the server who the current token belongs to and
what it may do.
"""

from __future__ import annotations

from typing import Any

import typer

from periodo_cli.commands.common import get_token_provider, run_operation
from periodo_cli.models import Identity
from periodo_cli.output import OutputFormat, get_output
from periodo_cli.result import Err, attempt


def format_permission(permission: Any) -> str:
    """Render one permission entry; list entries are joined with ``:``."""
    if isinstance(permission, (list, tuple)):
        return ":".join(str(part) for part in permission)
    return str(permission)


def refresh_token(ctx: typer.Context) -> None:
    """Delete the stored token and prompt for a new one."""
    provider = get_token_provider(ctx)
    output = get_output()

    result = attempt(provider.refresh_token)
    if isinstance(result, Err):
        output.failed()
        output.error(result.message)
        return
    output.done()


def list_permissions(ctx: typer.Context) -> None:
    """Show the identity and permissions of the current token."""
    result = run_operation(ctx, lambda api, _: api.identity())
    if isinstance(result, Err):
        return

    identity: Identity = result.value
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json(identity.model_dump(mode="json"))
        return

    permissions = "\n".join(format_permission(p) for p in identity.permissions) or "none"
    output.print_data(f"Name: {identity.name or ''}")
    output.print_data(f"ID: {identity.id or ''}")
    output.print_data(f"Permissions:\n{permissions}")
