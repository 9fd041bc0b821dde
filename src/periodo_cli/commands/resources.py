"""Bag and graph commands.

Bags are created with a single PUT under a caller-supplied or freshly
generated UUID. Graphs are replaced with PUT and removed with DELETE.
"""

from __future__ import annotations

from typing import Optional

import typer

from periodo_cli.api import new_bag_id
from periodo_cli.commands.common import get_endpoints, run_operation
from periodo_cli.output import get_output
from periodo_cli.result import Ok


def create_bag(
    ctx: typer.Context,
    json_file: str = typer.Argument(help="JSON file describing the bag, or '-' for stdin."),
    bag_id: Optional[str] = typer.Argument(
        None, metavar="[UUID]", help="Bag identifier. A random UUID is generated when omitted."
    ),
) -> None:
    """Create a bag."""
    bag_id = bag_id or new_bag_id()
    url = get_endpoints(ctx).bag(bag_id)
    result = run_operation(
        ctx,
        lambda api, body: api.create_bag(body, bag_id),
        progress=f"Creating bag {url}",
        body_source=json_file,
    )
    if isinstance(result, Ok) and result.value:
        get_output().print_data(result.value)


def update_graph(
    ctx: typer.Context,
    json_file: str = typer.Argument(help="JSON file with the graph, or '-' for stdin."),
    graph_id: str = typer.Argument(help="Graph URI path, e.g. 'places/countries'."),
) -> None:
    """Create or replace a graph."""
    url = get_endpoints(ctx).graph(graph_id)
    result = run_operation(
        ctx,
        lambda api, body: api.update_graph(body, graph_id),
        progress=f"Updating graph {url}",
        body_source=json_file,
    )
    if isinstance(result, Ok) and result.value:
        get_output().print_data(result.value)


def delete_graph(
    ctx: typer.Context,
    graph_id: str = typer.Argument(help="Graph URI path."),
) -> None:
    """Delete a graph."""
    url = get_endpoints(ctx).graph(graph_id)
    run_operation(
        ctx,
        lambda api, _: api.delete_graph(graph_id),
        progress=f"Deleting graph {url}",
    )
