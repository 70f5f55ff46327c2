"""Append-only events stream."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from ..utils import now_utc_iso

EventListener = Callable[[dict[str, Any]], None]


@dataclass
class EventWriter:
    """Diagnostics sink: one JSON object per line, also kept in memory.

    ``path`` may be ``None`` for callers that only need the in-memory history
    or the listeners (the CLI prints progress through a listener).
    """

    path: Path | None
    run_id: str
    history: list[dict[str, Any]] = field(default_factory=list, repr=False)
    listeners: list[EventListener] = field(default_factory=list, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, init=False)

    def emit(self, event_type: str, **payload: Any) -> dict[str, Any]:
        event = {
            "type": event_type,
            "run_id": self.run_id,
            "ts": now_utc_iso(),
        }
        event.update(payload)
        with self._lock:
            self.history.append(event)
            if self.path is not None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                line = f"{json.dumps(event, default=str)}\n"
                with self.path.open("a", encoding="utf-8") as handle:
                    handle.write(line)
        for listener in list(self.listeners):
            listener(event)
        return event

    def types(self) -> list[str]:
        return [event["type"] for event in self.history]
