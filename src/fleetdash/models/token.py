"""Authentication token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class AuthToken(BaseModel):
    """Token returned after successful login.

    Parameters
    ----------
    token : str
        Opaque bearer credential; never decoded client-side.
    raw : dict
        Full login response body for access to additional fields.
    """

    model_config = ConfigDict(frozen=True)

    token: str
    raw: dict[str, Any]

    def __repr__(self) -> str:
        return "AuthToken(token=<redacted>)"
