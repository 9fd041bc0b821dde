"""Tagged results returned at the command boundary.

Operations in :mod:`periodo_cli.api` raise exceptions. Commands run them
through :func:`capture`, which turns every expected failure into an
:class:`Err` so that rendering happens in one place and no traceback
reaches the terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

import httpx

from periodo_cli.exceptions import ErrorKind, PeriodoError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful outcome carrying the operation's value (may be ``None``)."""

    value: T


@dataclass(frozen=True)
class Err:
    """A failed outcome.

    Attributes:
        kind: Category of the failure.
        message: Text printed after the ``failed`` marker.
    """

    kind: ErrorKind
    message: str


Result = Union[Ok[Any], Err]


def from_exception(exc: BaseException) -> Err:
    """Map a known exception to an :class:`Err`."""
    if isinstance(exc, PeriodoError):
        return Err(exc.kind, exc.message)
    if isinstance(exc, httpx.TransportError):
        return Err(ErrorKind.TRANSPORT, str(exc) or type(exc).__name__)
    raise TypeError(f"Cannot convert {type(exc).__name__} to a result")


async def capture(operation: Awaitable[T]) -> Union[Ok[T], Err]:
    """Await *operation* and wrap its outcome.

    :class:`~periodo_cli.exceptions.PeriodoError` subclasses and
    :class:`httpx.TransportError` become :class:`Err`; anything else
    propagates to the top-level handler in :func:`periodo_cli.app.main`.
    """
    try:
        value = await operation
    except (PeriodoError, httpx.TransportError) as exc:
        return from_exception(exc)
    return Ok(value)


def attempt(fn: Callable[..., T], *args: Any) -> Union[Ok[T], Err]:
    """Synchronous counterpart of :func:`capture`."""
    try:
        value = fn(*args)
    except (PeriodoError, httpx.TransportError) as exc:
        return from_exception(exc)
    return Ok(value)
