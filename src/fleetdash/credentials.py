"""Durable single-slot storage for the bearer credential.

The credential is an opaque string: it is never decoded, inspected or
checked for expiry. It stays valid from the client's point of view until
:meth:`CredentialStore.clear` is called.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from fleetdash._constants import TOKEN_STORAGE_KEY
from fleetdash.exceptions import CredentialStoreError

_logger = logging.getLogger(__name__)


def _normalize(token: str | None) -> str | None:
    if token is None:
        return None
    return token if token.strip() else None


class CredentialStore(Protocol):
    """Structural interface shared by the file and in-memory stores."""

    def get(self) -> str | None:
        ...

    def set(self, token: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryCredentialStore:
    """Process-local store; does not survive a restart."""

    def __init__(self, token: str | None = None) -> None:
        self._token = _normalize(token)

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = _normalize(token)

    def clear(self) -> None:
        self._token = None


class FileCredentialStore:
    """Store the credential in a small JSON file.

    The document holds a single key (``jwt_token``). Reads are synchronous so
    the session state can be hydrated at startup before any event loop runs.
    Writes go to a temporary file in the same directory and are renamed into
    place, so a crash never leaves a half-written credential behind.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> str | None:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CredentialStoreError(f"Cannot read credential file {self._path}: {exc}") from exc

        if not text.strip():
            return None
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CredentialStoreError(f"Credential file {self._path} is not valid JSON") from exc
        if not isinstance(document, dict):
            raise CredentialStoreError(f"Credential file {self._path} does not hold a JSON object")

        value = document.get(TOKEN_STORAGE_KEY)
        if value is None:
            return None
        if not isinstance(value, str):
            raise CredentialStoreError(f"Credential under {TOKEN_STORAGE_KEY!r} is not a string")
        return _normalize(value)

    def set(self, token: str) -> None:
        if _normalize(token) is None:
            self.clear()
            return
        self._write({TOKEN_STORAGE_KEY: token})
        _logger.debug("Credential stored in %s", self._path)

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise CredentialStoreError(f"Cannot remove credential file {self._path}: {exc}") from exc
        _logger.debug("Credential removed from %s", self._path)

    def _write(self, document: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".credentials-", dir=self._path.parent)
        except OSError as exc:
            raise CredentialStoreError(f"Cannot write credential file {self._path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise CredentialStoreError(f"Cannot write credential file {self._path}: {exc}") from exc
