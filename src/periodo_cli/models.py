"""Pydantic models shared across periodo-cli.

**Settings** -- the effective configuration of one invocation, produced by
:func:`~periodo_cli.config.resolve_settings`.

**Server payloads** -- :class:`Patch` and :class:`Identity` wrap the JSON
documents returned by the PeriodO server. Both keep unknown keys so that
``--json`` output shows everything the server sent.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """Effective settings for a single invocation."""

    server_url: str = Field(description="Server base URL, always slash-terminated")
    token_file: Path = Field(description="File holding the bearer token")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    lookup_concurrency: int = Field(
        default=8, ge=1, description="Max concurrent ORCID name lookups"
    )


class Patch(BaseModel):
    """A patch as listed by ``<server>patches``.

    Author and timestamp are kept as sent; they are only displayed.
    """

    model_config = ConfigDict(extra="allow")

    url: str
    created_by: Any = None
    created_at: Any = None


class Identity(BaseModel):
    """The authenticated user as returned by ``<server>identity``."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    id: Optional[str] = None
    permissions: list[Any] = Field(default_factory=list)
