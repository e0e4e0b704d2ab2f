from __future__ import annotations

from pathlib import Path

import pytest

from fleetdash.config import FleetConfig, default_credentials_path
from fleetdash.exceptions import FleetConfigError


def test_relative_api_url_resolves_against_origin() -> None:
    config = FleetConfig(api_url="/api/v1", origin="http://localhost:8080")
    assert config.base_url == "http://localhost:8080/api/v1"


def test_absolute_api_url_wins_and_drops_trailing_slash() -> None:
    config = FleetConfig(api_url="https://fleet.example.com/api/v1/", origin="http://ignored")
    assert config.base_url == "https://fleet.example.com/api/v1"


def test_blank_api_url_is_rejected() -> None:
    with pytest.raises(FleetConfigError):
        FleetConfig(api_url="  ")


def test_default_credentials_path_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_credentials_path() == tmp_path / "fleetdash" / "credentials.json"


def test_from_env_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FLEETDASH_API_URL", "https://fleet.example.com/api/v1")
    monkeypatch.setenv("FLEETDASH_CREDENTIALS_PATH", str(tmp_path / "token.json"))
    monkeypatch.delenv("FLEETDASH_ORIGIN", raising=False)
    monkeypatch.delenv("FLEETDASH_USER_AGENT", raising=False)

    config = FleetConfig.from_env()

    assert config.base_url == "https://fleet.example.com/api/v1"
    assert config.credentials_path == tmp_path / "token.json"
    assert config.user_agent == "fleetdash/1"


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FLEETDASH_API_URL", "FLEETDASH_ORIGIN", "FLEETDASH_USER_AGENT", "FLEETDASH_CREDENTIALS_PATH"):
        monkeypatch.delenv(name, raising=False)

    config = FleetConfig.from_env()
    assert config.api_url == "/api/v1"
    assert config.base_url == "http://localhost:8080/api/v1"


def test_from_env_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FLEETDASH_API_URL", "https://env.example.com/api")
    monkeypatch.setenv("FLEETDASH_CREDENTIALS_PATH", str(tmp_path / "env.json"))

    config = FleetConfig.from_env(api_url="http://override:9000/api/v1", credentials_path=str(tmp_path / "cli.json"))

    assert config.base_url == "http://override:9000/api/v1"
    assert config.credentials_path == tmp_path / "cli.json"


@pytest.mark.parametrize(
    ("api_url", "origin"),
    [
        ("http://[::1/api/v1", "http://localhost:8080"),
        ("/api/v1", "http://[::1"),
    ],
)
def test_malformed_base_address_is_config_error(api_url: str, origin: str) -> None:
    with pytest.raises(FleetConfigError):
        FleetConfig(api_url=api_url, origin=origin)


def test_from_env_reads_user_agent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEETDASH_USER_AGENT", "fleet-console/2")
    assert FleetConfig.from_env().user_agent == "fleet-console/2"
