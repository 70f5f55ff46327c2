"""JSON-backed store for user defaults that outlive a session."""

from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..settings import GenerationRequest
from ..utils import read_json, write_json

SETTINGS_KEY = "mockup_settings"
API_KEY_KEY = "gemini_api_key"


def default_home() -> Path:
    override = os.getenv("MOCKUP_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".mockup"


def default_settings_path() -> Path:
    return default_home() / "settings.json"


@dataclass
class SettingsStore:
    path: Path = field(default_factory=default_settings_path)
    _payload: dict[str, Any] | None = field(default=None, init=False, repr=False)
    _dirty_keys: set[str] = field(default_factory=set, init=False, repr=False)

    def _ensure_loaded(self, *, refresh: bool = False) -> dict[str, Any]:
        if refresh or self._payload is None:
            payload = read_json(self.path, {})
            self._payload = payload if isinstance(payload, dict) else {}
        return self._payload

    def get(self, key: str, default: Any = None) -> Any:
        payload = self._ensure_loaded(refresh=True)
        if key not in payload:
            return default
        return deepcopy(payload[key])

    def set(self, key: str, value: Any) -> None:
        payload = self._ensure_loaded(refresh=True)
        snapshot = deepcopy(value)
        if key in payload and payload[key] == snapshot:
            return
        payload[key] = snapshot
        self._dirty_keys.add(key)
        self.flush()

    def delete(self, key: str) -> None:
        payload = self._ensure_loaded(refresh=True)
        if key not in payload:
            return
        del payload[key]
        self._dirty_keys.add(key)
        self.flush()

    def flush(self) -> None:
        if self._payload is None or not self._dirty_keys:
            return
        on_disk = read_json(self.path, {})
        merged = on_disk if isinstance(on_disk, dict) else {}
        for key in self._dirty_keys:
            if key in self._payload:
                merged[key] = deepcopy(self._payload[key])
            else:
                merged.pop(key, None)
        write_json(self.path, merged)
        self._payload = merged
        self._dirty_keys.clear()

    def load_settings(self) -> GenerationRequest:
        """Persisted settings merged over the defaults."""
        return GenerationRequest.from_dict(self.get(SETTINGS_KEY, {}))

    def save_settings(self, settings: GenerationRequest) -> None:
        self.set(SETTINGS_KEY, settings.to_dict())
