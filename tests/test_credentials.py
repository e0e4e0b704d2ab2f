from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest

from fleetdash.credentials import FileCredentialStore, MemoryCredentialStore
from fleetdash.exceptions import CredentialStoreError


def test_memory_store_roundtrip_and_clear() -> None:
    store = MemoryCredentialStore()
    assert store.get() is None

    store.set("abc")
    assert store.get() == "abc"

    store.clear()
    assert store.get() is None
    store.clear()
    assert store.get() is None


def test_memory_store_treats_blank_token_as_absent() -> None:
    assert MemoryCredentialStore("   ").get() is None
    store = MemoryCredentialStore("abc")
    store.set("")
    assert store.get() is None


def test_file_store_missing_file_reads_as_absent(tmp_path: Path) -> None:
    store = FileCredentialStore(tmp_path / "nope" / "credentials.json")
    assert store.get() is None


def test_file_store_survives_new_instance(tmp_path: Path) -> None:
    path = tmp_path / "fleetdash" / "credentials.json"
    FileCredentialStore(path).set("abc")

    assert FileCredentialStore(path).get() == "abc"
    assert json.loads(path.read_text(encoding="utf-8")) == {"jwt_token": "abc"}


def test_file_store_set_overwrites_previous_value(tmp_path: Path) -> None:
    store = FileCredentialStore(tmp_path / "credentials.json")
    store.set("first")
    store.set("second")
    assert store.get() == "second"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["credentials.json"]


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_file_store_is_private_to_owner(tmp_path: Path) -> None:
    path = tmp_path / "credentials.json"
    FileCredentialStore(path).set("abc")
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_file_store_clear_is_idempotent(tmp_path: Path) -> None:
    path = tmp_path / "credentials.json"
    store = FileCredentialStore(path)
    store.set("abc")

    store.clear()
    assert not path.exists()
    assert store.get() is None
    store.clear()


def test_file_store_blank_token_clears(tmp_path: Path) -> None:
    store = FileCredentialStore(tmp_path / "credentials.json")
    store.set("abc")
    store.set("  ")
    assert store.get() is None
    assert not store.path.exists()


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        '{"jwt_token": 42}',
    ],
)
def test_file_store_rejects_corrupt_document(tmp_path: Path, content: str) -> None:
    path = tmp_path / "credentials.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CredentialStoreError):
        FileCredentialStore(path).get()


def test_file_store_document_without_token_reads_as_absent(tmp_path: Path) -> None:
    path = tmp_path / "credentials.json"
    path.write_text('{"other": "value"}', encoding="utf-8")
    assert FileCredentialStore(path).get() is None


def test_file_store_write_failure_is_classified(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = FileCredentialStore(blocker / "credentials.json")
    with pytest.raises(CredentialStoreError):
        store.set("abc")
