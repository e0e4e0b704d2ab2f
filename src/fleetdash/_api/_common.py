"""Shared helpers for fleet API endpoint modules.

This module centralizes the most repeated patterns:
- extracting the server-supplied error message
- mapping error statuses onto the exception hierarchy
- decoding success bodies into pydantic models

It is internal to fleetdash and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from fleetdash._transport import ApiResponse
from fleetdash.exceptions import InvalidResponseError, NotFoundError, RequestSetupError, ServerError

M = TypeVar("M", bound=BaseModel)


def server_message(body: Any) -> str | None:
    """Return the ``error`` (or ``message``) string of a JSON error body."""
    if not isinstance(body, dict):
        return None
    for key in ("error", "message"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def raise_for_status(
    response: ApiResponse,
    *,
    endpoint: str,
    error_cls: type[ServerError] = ServerError,
) -> None:
    """Raise the matching :class:`ServerError` subclass for non-2xx responses."""
    if response.ok:
        return
    message = server_message(response.body)
    if response.status == 404:
        raise NotFoundError(response.status, message, endpoint=endpoint)
    raise error_cls(response.status, message, endpoint=endpoint)


def json_body(response: ApiResponse, *, endpoint: str) -> Any:
    """Return the decoded body of a success response.

    An empty body or JSON ``null`` yields ``None``; anything that is not JSON
    raises :class:`InvalidResponseError`.
    """
    if response.body is None and response.text.strip() not in ("", "null"):
        raise InvalidResponseError(
            response.status,
            f"Response is not JSON: {response.text[:128]}",
            endpoint=endpoint,
        )
    return response.body


def parse_model(model_cls: type[M], data: Any, *, status: int, endpoint: str) -> M:
    """Validate *data* into *model_cls*, mapping validation errors."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise InvalidResponseError(
            status,
            f"Unexpected {model_cls.__name__} payload: {exc.error_count()} validation error(s)",
            endpoint=endpoint,
        ) from exc


def path_segment(value: str, *, what: str) -> str:
    """Percent-encode one path segment; empty values cannot address anything."""
    text = str(value).strip()
    if not text:
        raise RequestSetupError(f"{what} must not be empty")
    return quote(text, safe="")
