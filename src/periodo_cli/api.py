"""PeriodO server operations.

:class:`PeriodoAPI` exposes one coroutine per remote operation. Each write
sends a single request and compares the answer with one expected status:

=============  ======  ==========================  ========
Operation      Method  Path                        Expected
=============  ======  ==========================  ========
submit patch   PATCH   ``d.json``                  202
merge patch    POST    ``<patch url>/merge``       204
reject patch   POST    ``<patch url>/reject``      204
create bag     PUT     ``bags/<uuid>``             201
update graph   PUT     ``graphs/<id>``             201
delete graph   DELETE  ``graphs/<id>``             204
=============  ======  ==========================  ========

Listing patches is unauthenticated; every other operation sends the
bearer token.
"""

from __future__ import annotations

import asyncio
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urljoin

from pydantic import ValidationError

from periodo_cli.client import AsyncClient
from periodo_cli.config import ensure_trailing_slash, normalize_server_url
from periodo_cli.exceptions import BodyReadError, RemoteError
from periodo_cli.models import Identity, Patch
from periodo_cli.orcid import personal_name

STDIN_SENTINEL = "-"
JSON_HEADERS = {"Content-Type": "application/json"}
OPEN_UNMERGED = {"open": "true", "merged": "false", "order": "asc"}


def read_body(source: str) -> bytes:
    """Read a request body from the file *source*, or stdin when it is ``-``.

    Raises:
        BodyReadError: If the file cannot be read.
    """
    if source == STDIN_SENTINEL:
        return sys.stdin.buffer.read()
    try:
        with open(Path(source), "rb") as f:
            return f.read()
    except OSError as exc:
        raise BodyReadError(f"Cannot read {source}: {exc.strerror or exc}") from exc


def new_bag_id() -> str:
    """Return a fresh random UUID4 string for a bag."""
    return str(uuid.uuid4())


class Endpoints:
    """URLs of the server resources, relative to a slash-terminated base."""

    def __init__(self, server_url: str) -> None:
        self.server_url = normalize_server_url(server_url)

    def dataset(self) -> str:
        return f"{self.server_url}d.json"

    def patches(self) -> str:
        return f"{self.server_url}patches"

    def identity(self) -> str:
        return f"{self.server_url}identity"

    def bag(self, bag_id: str) -> str:
        return f"{self.server_url}bags/{bag_id}"

    def graph(self, graph_id: str) -> str:
        return f"{self.server_url}graphs/{graph_id}"

    @staticmethod
    def patch_action(patch_url: str, verb: str) -> str:
        """Return ``<patch url>/<verb>``, adding the slash when missing."""
        return f"{ensure_trailing_slash(patch_url)}{verb}"


@dataclass
class PatchListing:
    """An open patch and its author's display name."""

    patch: Patch
    author: str


class PeriodoAPI:
    """High-level operations against one PeriodO server.

    Args:
        client: An entered :class:`~periodo_cli.client.AsyncClient`.
        server_url: Slash-terminated server base URL.
        lookup_concurrency: Max concurrent ORCID lookups in
            :meth:`list_patches`.
    """

    def __init__(
        self,
        client: AsyncClient,
        server_url: str,
        lookup_concurrency: int = 8,
    ) -> None:
        self._client = client
        self.endpoints = Endpoints(server_url)
        self._lookup_concurrency = max(1, lookup_concurrency)

    @property
    def server_url(self) -> str:
        return self.endpoints.server_url

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    async def list_patches(self) -> list[PatchListing]:
        """Return open, unmerged patches, oldest first, with author names.

        Author names are looked up concurrently; a failed lookup shows the
        error text instead of a name.
        """
        data = await self._client.get_json(self.endpoints.patches(), params=OPEN_UNMERGED)
        if not isinstance(data, list):
            raise RemoteError(f"Expected a list of patches from {self.endpoints.patches()}")
        try:
            patches = [Patch.model_validate(item) for item in data]
        except ValidationError as exc:
            raise RemoteError(f"Unexpected patch listing: {exc}") from exc

        sem = asyncio.Semaphore(self._lookup_concurrency)

        async def lookup(patch: Patch) -> PatchListing:
            async with sem:
                return PatchListing(patch, await personal_name(self._client, patch.created_by))

        return list(await asyncio.gather(*(lookup(p) for p in patches)))

    async def identity(self) -> Identity:
        """Return the identity and permissions tied to the current token."""
        data: Any = await self._client.get_json(self.endpoints.identity(), authenticated=True)
        try:
            return Identity.model_validate(data)
        except ValidationError as exc:
            raise RemoteError(f"Unexpected identity document: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    async def submit_patch(self, body: bytes) -> Optional[str]:
        """Submit a JSON patch. Returns the new patch URL, if given."""
        url = self.endpoints.dataset()
        response = await self._client.request(
            "PATCH", url, expected=202, authenticated=True, headers=JSON_HEADERS, content=body,
        )
        return self._location(url, response.headers.get("location"))

    async def merge_patch(self, patch_url: str) -> None:
        await self._patch_verb(patch_url, "merge")

    async def reject_patch(self, patch_url: str) -> None:
        await self._patch_verb(patch_url, "reject")

    async def create_bag(self, body: bytes, bag_id: str) -> Optional[str]:
        """PUT a bag under *bag_id*. Returns the bag URL, if given."""
        url = self.endpoints.bag(bag_id)
        response = await self._client.request(
            "PUT", url, expected=201, authenticated=True, headers=JSON_HEADERS, content=body,
        )
        return self._location(url, response.headers.get("location"))

    async def update_graph(self, body: bytes, graph_id: str) -> Optional[str]:
        """PUT a graph under *graph_id*. Returns the graph URL, if given."""
        url = self.endpoints.graph(graph_id)
        response = await self._client.request(
            "PUT", url, expected=201, authenticated=True, headers=JSON_HEADERS, content=body,
        )
        return self._location(url, response.headers.get("location"))

    async def delete_graph(self, graph_id: str) -> None:
        await self._client.request(
            "DELETE", self.endpoints.graph(graph_id), expected=204, authenticated=True,
        )

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _patch_verb(self, patch_url: str, verb: str) -> None:
        await self._client.request(
            "POST",
            self.endpoints.patch_action(patch_url, verb),
            expected=204,
            authenticated=True,
            headers={"Accept": "application/json"},
        )

    @staticmethod
    def _location(request_url: str, location: Optional[str]) -> Optional[str]:
        if not location:
            return None
        return urljoin(request_url, location)
