"""Response inspection -- maps unexpected :class:`httpx.Response` objects to errors.

Every PeriodO operation expects exactly one status code. Anything else is
turned into an exception here:

* ``401`` always becomes :class:`~periodo_cli.exceptions.TokenExpiredError`,
  whatever the body says.
* Any other status becomes :class:`~periodo_cli.exceptions.RemoteError`
  whose message comes from :func:`extract_message`.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from periodo_cli.exceptions import PeriodoError, RemoteError, TokenExpiredError


def extract_message(text: str) -> dict[str, Any]:
    """Decode an error body into a ``{"message": ...}``-style object.

    A body that decodes to a JSON object is returned unchanged. Anything
    else (invalid JSON, or JSON that is not an object) is wrapped as
    ``{"message": text}``.
    """
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return {"message": text}
    if isinstance(parsed, dict):
        return parsed
    return {"message": text}


def error_for_response(response: httpx.Response, token_location: str) -> PeriodoError:
    """Build the exception describing an unexpected *response*.

    Args:
        response: The response whose status did not match the expected one.
        token_location: Where the token lives, quoted in the 401 message.
    """
    status = response.status_code
    if status == 401:
        return TokenExpiredError(token_location)

    payload = extract_message(response.text)
    message = payload.get("message")
    if not message:
        message = f"Server returned {status}"
    return RemoteError(str(message), status=status, payload=payload)
