from __future__ import annotations

from pathlib import Path

import pytest

from mockup_engine.credentials import PLACEHOLDER_KEY, CredentialResolver
from mockup_engine.errors import ConfigurationError
from mockup_engine.memory.settings_store import API_KEY_KEY, SettingsStore


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


def test_no_credential_anywhere(tmp_path: Path) -> None:
    resolver = CredentialResolver(store=SettingsStore(tmp_path / "settings.json"))

    assert not resolver.has_credential()
    with pytest.raises(ConfigurationError):
        resolver.require()


def test_environment_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    store.set(API_KEY_KEY, "stored-key-123456")
    monkeypatch.setenv("GEMINI_API_KEY", "  env-key-123456  ")

    resolver = CredentialResolver(broker=lambda: "broker-key-123456", store=store)

    assert resolver.get_credential() == "env-key-123456"


def test_broker_before_store(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    store.set(API_KEY_KEY, "stored-key-123456")

    assert CredentialResolver(broker=lambda: "broker-key-123456", store=store).get_credential() == "broker-key-123456"
    assert CredentialResolver(broker=lambda: None, store=store).get_credential() == "stored-key-123456"


def test_placeholder_counts_as_absent(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_KEY", PLACEHOLDER_KEY)
    resolver = CredentialResolver(store=SettingsStore(tmp_path / "settings.json"))
    assert resolver.get_credential() is None


def test_set_and_clear_credential(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    resolver = CredentialResolver(store=store)

    assert resolver.set_credential("  AIzaSyExampleKey  ") == "AIzaSyExampleKey"
    assert SettingsStore(store.path).get(API_KEY_KEY) == "AIzaSyExampleKey"
    assert resolver.has_credential()

    resolver.clear_credential()
    assert not resolver.has_credential()


@pytest.mark.parametrize("value", ["", "   ", PLACEHOLDER_KEY, "short"])
def test_invalid_keys_are_rejected(tmp_path: Path, value: str) -> None:
    resolver = CredentialResolver(store=SettingsStore(tmp_path / "settings.json"))

    with pytest.raises(ConfigurationError):
        resolver.set_credential(value)
    assert not resolver.has_credential()
