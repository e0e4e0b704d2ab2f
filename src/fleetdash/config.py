"""Client configuration for fleetdash."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any
from urllib.parse import urljoin, urlsplit

from fleetdash._constants import DEFAULT_API_URL, DEFAULT_ORIGIN, USER_AGENT
from fleetdash.exceptions import FleetConfigError


def _resolve_base_url(api_url: str, origin: str) -> str:
    api_url = api_url.strip()
    if urlsplit(api_url).scheme:
        return api_url.rstrip("/")
    return urljoin(origin, api_url).rstrip("/")


def default_credentials_path() -> Path:
    """Default location of the persisted credential file."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "fleetdash" / "credentials.json"


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Client configuration.

    The backend address is fixed once the client is built; there is no
    runtime switching.

    Parameters
    ----------
    api_url : str
        API base address. May be absolute (``https://host/api/v1``) or a
        path (``/api/v1``), in which case it is resolved against *origin*.
    origin : str
        Scheme and host a relative *api_url* is resolved against.
    credentials_path : Path
        File holding the persisted bearer credential.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    api_url: str = DEFAULT_API_URL
    origin: str = DEFAULT_ORIGIN
    credentials_path: Path = dataclasses.field(default_factory=default_credentials_path)
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if not self.api_url or not self.api_url.strip():
            raise FleetConfigError("api_url must not be empty")
        try:
            _resolve_base_url(self.api_url, self.origin)
        except ValueError as exc:
            raise FleetConfigError(f"Invalid API base address {self.api_url!r}: {exc}") from exc

    @property
    def base_url(self) -> str:
        """Effective absolute API base, without a trailing slash."""
        return _resolve_base_url(self.api_url, self.origin)

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads ``FLEETDASH_API_URL``, ``FLEETDASH_ORIGIN``,
        ``FLEETDASH_USER_AGENT`` and ``FLEETDASH_CREDENTIALS_PATH``. Explicit
        keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEETDASH_API_URL": "api_url",
            "FLEETDASH_ORIGIN": "origin",
            "FLEETDASH_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        path_env = env.get("FLEETDASH_CREDENTIALS_PATH")
        if path_env is not None and "credentials_path" not in overrides:
            config_kwargs["credentials_path"] = Path(path_env).expanduser()

        config_kwargs.update(overrides)
        if isinstance(config_kwargs.get("credentials_path"), str):
            config_kwargs["credentials_path"] = Path(config_kwargs["credentials_path"]).expanduser()

        return cls(**config_kwargs)
