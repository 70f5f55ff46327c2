"""Scene suggestions derived from the uploaded artwork."""

from __future__ import annotations

import json
from typing import Any

from .errors import ConfigurationError, MalformedResponseError
from .image import SourceImage
from .options import AnalysisVibe
from .prompts import compose_analysis_prompt
from .providers.base import MockupProvider
from .retry import RetryPolicy
from .runs.events import EventWriter

MAX_SUGGESTIONS = 4

FALLBACK_SUGGESTIONS = (
    "A modern gallery wall with spot lighting",
    "A cozy bohemian bedroom with plants",
    "A professional office space with sleek furniture",
    "An industrial loft with exposed brick",
)
FALLBACK_SINGLE = "A creative environment suitable for this artwork."


def parse_suggestions(raw: str) -> list[str]:
    """Strictly parse a JSON array of strings (markdown fences tolerated)."""
    text = str(raw or "").strip()
    if text.startswith("```"):
        text = text.strip("`").strip()
        if text.lower().startswith("json"):
            text = text[4:].strip()
    try:
        payload: Any = json.loads(text)
    except ValueError as exc:
        raise MalformedResponseError("Suggestion response is not JSON.") from exc
    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        raise MalformedResponseError("Suggestion response is not a JSON array of strings.")
    cleaned = [" ".join(item.split()) for item in payload]
    return [item for item in cleaned if item]


class SuggestionEngine:
    """Never fails outward except for a missing credential.

    Remote failures, exhausted retries and malformed answers all degrade to a
    fixed set of generic scenes so the user can keep working.
    """

    def __init__(
        self,
        provider: MockupProvider,
        retry_policy: RetryPolicy,
        events: EventWriter | None = None,
    ) -> None:
        self.provider = provider
        self.retry_policy = retry_policy
        self.events = events

    async def suggest_prompts(self, image: SourceImage, vibe: AnalysisVibe) -> list[str]:
        try:
            suggestions = await self._ask(image, vibe, MAX_SUGGESTIONS)
        except ConfigurationError:
            raise
        except Exception as exc:
            self._emit("suggestions_fallback", vibe=vibe.value, error=str(exc))
            return list(FALLBACK_SUGGESTIONS)
        if not suggestions:
            self._emit("suggestions_fallback", vibe=vibe.value, error="empty suggestion list")
            return list(FALLBACK_SUGGESTIONS)
        trimmed = suggestions[:MAX_SUGGESTIONS]
        self._emit("suggestions_ready", vibe=vibe.value, count=len(trimmed))
        return trimmed

    async def regenerate_one(self, image: SourceImage, vibe: AnalysisVibe) -> str:
        try:
            suggestions = await self._ask(image, vibe, 1)
        except ConfigurationError:
            raise
        except Exception as exc:
            self._emit("suggestions_fallback", vibe=vibe.value, error=str(exc), single=True)
            return FALLBACK_SINGLE
        if not suggestions:
            self._emit("suggestions_fallback", vibe=vibe.value, error="empty suggestion list", single=True)
            return FALLBACK_SINGLE
        return suggestions[0]

    async def _ask(self, image: SourceImage, vibe: AnalysisVibe, count: int) -> list[str]:
        prompt = compose_analysis_prompt(vibe, count=count)
        raw = await self.retry_policy.run(lambda: self.provider.analyze_image(image, prompt))
        return parse_suggestions(raw)

    def _emit(self, event_type: str, **payload: Any) -> None:
        if self.events is not None:
            self.events.emit(event_type, **payload)
