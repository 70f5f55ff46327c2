"""API credential resolution.

Priority: deployment environment, then a host-provided broker, then the value
the user entered and we persisted in the settings store.
"""

from __future__ import annotations

import os
from typing import Callable, Optional

from .errors import ConfigurationError
from .memory.settings_store import API_KEY_KEY, SettingsStore

ENV_KEYS = ("API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")
PLACEHOLDER_KEY = "your_gemini_api_key_here"
MIN_KEY_LENGTH = 10

CredentialBroker = Callable[[], Optional[str]]


def normalize_api_key(key: str | None) -> str | None:
    if not key:
        return None
    trimmed = str(key).strip()
    if not trimmed or trimmed == PLACEHOLDER_KEY:
        return None
    return trimmed


def env_api_key() -> str | None:
    for name in ENV_KEYS:
        key = normalize_api_key(os.getenv(name))
        if key:
            return key
    return None


class CredentialResolver:
    def __init__(self, broker: CredentialBroker | None = None, store: SettingsStore | None = None) -> None:
        self.broker = broker
        self.store = store

    def get_credential(self) -> str | None:
        key = env_api_key()
        if key:
            return key
        if self.broker is not None:
            key = normalize_api_key(self.broker())
            if key:
                return key
        if self.store is not None:
            return normalize_api_key(self.store.get(API_KEY_KEY))
        return None

    def has_credential(self) -> bool:
        return self.get_credential() is not None

    def require(self) -> str:
        key = self.get_credential()
        if not key:
            raise ConfigurationError("API key not found. Set GEMINI_API_KEY or run `mockup key set <key>`.")
        return key

    def set_credential(self, key: str) -> str:
        normalized = normalize_api_key(key)
        if not normalized:
            if str(key or "").strip():
                raise ConfigurationError("Enter your actual Gemini API key, not the placeholder.")
            raise ConfigurationError("API key cannot be empty.")
        if len(normalized) < MIN_KEY_LENGTH:
            raise ConfigurationError("API key appears to be invalid (too short).")
        if self.store is None:
            raise ConfigurationError("No settings store configured to persist the API key.")
        self.store.set(API_KEY_KEY, normalized)
        return normalized

    def clear_credential(self) -> None:
        if self.store is not None:
            self.store.delete(API_KEY_KEY)
