"""Bearer token persistence.

The token is the only persistent state of the client. It is reached
exclusively through the :class:`TokenStore` interface so the file-backed
implementation can be swapped for :class:`MemoryTokenStore` in tests or
when embedding the API layer.

:class:`FileTokenStore` keeps the raw token as the entire content of a
single file (``~/.periodo-token`` by default). Files are written
atomically via :func:`tempfile.NamedTemporaryFile` and ``os.replace``
with ``0o600`` permissions so the token is never world-readable, even
momentarily.
"""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class TokenStore(ABC):
    """Load, store and clear a single bearer token."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the token, used in error messages."""

    @abstractmethod
    def load(self) -> Optional[str]:
        """Return the stored token, or ``None`` if there is none."""

    @abstractmethod
    def store(self, token: str) -> None:
        """Persist *token*, replacing any previous one."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored token. No-op when nothing is stored."""


class FileTokenStore(TokenStore):
    """Token stored as the literal contents of one file.

    Args:
        path: The token file. Parent directories are created on write.

    Example::

        store = FileTokenStore(Path.home() / ".periodo-token")
        store.store("tok123")
        assert store.load() == "tok123"
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """The filesystem path of the token file."""
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def load(self) -> Optional[str]:
        """Read the token file.

        Surrounding whitespace is stripped; an empty file counts as no
        token, and so does a file that cannot be read or decoded.
        """
        if not self._path.is_file():
            return None
        try:
            with open(self._path, encoding="utf-8") as f:
                token = f.read().strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable token file %s: %s", self._path, exc)
            return None
        return token or None

    def store(self, token: str) -> None:
        """Write *token* atomically with ``0o600`` permissions.

        Raises:
            OSError: If the file cannot be written (permissions, disk full, etc.).
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd = None
        tmp_path: Optional[str] = None
        try:
            fd = tempfile.NamedTemporaryFile(
                mode="w",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
            )
            tmp_path = fd.name
            # Restrict permissions before the secret hits the disk
            os.chmod(tmp_path, 0o600)
            fd.write(token)
            fd.flush()
            os.fsync(fd.fileno())
            fd.close()
            fd = None
            os.replace(tmp_path, self._path)
        except BaseException:
            if fd is not None:
                fd.close()
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise

    def clear(self) -> None:
        if self._path.is_file():
            self._path.unlink()


class MemoryTokenStore(TokenStore):
    """In-memory token store.

    Args:
        token: Optional initial token.
    """

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    @property
    def location(self) -> str:
        return "<memory>"

    def load(self) -> Optional[str]:
        return self._token

    def store(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
