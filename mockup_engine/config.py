"""Environment-driven engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .memory.settings_store import default_home
from .scheduler import DEFAULT_STAGGER_MS
from .utils import getenv_flag, getenv_float, getenv_int

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BASE_DELAY_MS = 2000
DEFAULT_CALL_TIMEOUT_S = 180.0


@dataclass(frozen=True)
class EngineConfig:
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_base_delay_ms: int = DEFAULT_RETRY_BASE_DELAY_MS
    stagger_ms: int = DEFAULT_STAGGER_MS
    call_timeout_s: float | None = DEFAULT_CALL_TIMEOUT_S
    image_model: str | None = None
    analysis_model: str | None = None
    home: Path = field(default_factory=default_home)
    dry_run: bool = False

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            retry_attempts=max(1, getenv_int("MOCKUP_RETRY_ATTEMPTS", DEFAULT_RETRY_ATTEMPTS)),
            retry_base_delay_ms=max(0, getenv_int("MOCKUP_RETRY_BASE_DELAY_MS", DEFAULT_RETRY_BASE_DELAY_MS)),
            stagger_ms=max(0, getenv_int("MOCKUP_STAGGER_MS", DEFAULT_STAGGER_MS)),
            call_timeout_s=getenv_float("MOCKUP_CALL_TIMEOUT_S", DEFAULT_CALL_TIMEOUT_S),
            image_model=os.getenv("MOCKUP_IMAGE_MODEL") or None,
            analysis_model=os.getenv("MOCKUP_ANALYSIS_MODEL") or None,
            home=default_home(),
            dry_run=getenv_flag("MOCKUP_DRYRUN", False),
        )

    @property
    def settings_path(self) -> Path:
        return self.home / "settings.json"
