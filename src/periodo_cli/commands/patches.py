"""Patch commands -- list, submit, merge and reject patches.

Typical workflow::

    periodo submit-patch changes.json     # prints the new patch URL
    periodo list-patches                  # review what is open
    periodo merge-patch https://data.perio.do/patches/42/
"""

from __future__ import annotations

from typing import Any

import typer

from periodo_cli.api import PatchListing
from periodo_cli.commands.common import get_endpoints, get_settings, run_operation
from periodo_cli.config import review_url
from periodo_cli.output import OutputFormat, get_output
from periodo_cli.result import Ok


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _patch_fields(server_url: str, listing: PatchListing) -> list[tuple[str, str]]:
    patch = listing.patch
    return [
        ("url", patch.url),
        ("who", f"{_text(patch.created_by)} ({listing.author})"),
        ("when", _text(patch.created_at)),
        ("view", review_url(server_url, patch.url)),
    ]


def list_patches(ctx: typer.Context) -> None:
    """List open and unmerged patches, oldest first."""
    server_url = get_settings(ctx).server_url
    result = run_operation(ctx, lambda api, _: api.list_patches(), authenticated=False)
    if not isinstance(result, Ok):
        return

    output = get_output()
    listings: list[PatchListing] = result.value
    if not listings:
        output.info(f"No open and unmerged patches at {server_url}.")
        return

    if output.format == OutputFormat.JSON:
        output.print_json([dict(_patch_fields(server_url, item)) for item in listings])
        return

    output.info(f"Open and unmerged patches at {server_url}:\n")
    for listing in listings:
        output.print_record(_patch_fields(server_url, listing))


def submit_patch(
    ctx: typer.Context,
    patch_file: str = typer.Argument(help="JSON patch file, or '-' for stdin."),
) -> None:
    """Submit a patch for review."""
    endpoints = get_endpoints(ctx)
    result = run_operation(
        ctx,
        lambda api, body: api.submit_patch(body),
        progress=f"Submitting patch to {endpoints.dataset()}",
        body_source=patch_file,
    )
    if isinstance(result, Ok) and result.value:
        output = get_output()
        output.print_data(result.value)
        output.info(f"Review: {review_url(endpoints.server_url, result.value)}")


def merge_patch(
    ctx: typer.Context,
    patch_url: str = typer.Argument(help="URL of the patch to merge."),
) -> None:
    """Merge an open patch into the dataset."""
    run_operation(
        ctx,
        lambda api, _: api.merge_patch(patch_url),
        progress=f"Merging patch {patch_url}",
    )


def reject_patch(
    ctx: typer.Context,
    patch_url: str = typer.Argument(help="URL of the patch to reject."),
) -> None:
    """Reject an open patch."""
    run_operation(
        ctx,
        lambda api, _: api.reject_patch(patch_url),
        progress=f"Rejecting patch {patch_url}",
    )
