"""Core mockup engine orchestration."""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path
from typing import Any

from .batch import BatchOrchestrator
from .config import EngineConfig
from .credentials import CredentialResolver
from .errors import ConfigurationError
from .image import SourceImage
from .memory.settings_store import SettingsStore
from .options import AnalysisVibe
from .providers import default_registry
from .providers.base import MockupProvider
from .results import MockupResult
from .retry import RetryPolicy, SleepFn
from .runs.events import EventWriter
from .runs.manifest import ResultManifest
from .scheduler import StaggerScheduler
from .state import AppState, PromptEntry
from .suggestions import SuggestionEngine


class MockupEngine:
    def __init__(
        self,
        run_dir: Path,
        events_path: Path | None = None,
        provider: MockupProvider | None = None,
        settings_store: SettingsStore | None = None,
        config: EngineConfig | None = None,
        credentials: CredentialResolver | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.config = config or EngineConfig.from_env()
        self.run_dir = run_dir
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.run_id = run_dir.name or str(uuid.uuid4())
        self.events = EventWriter(events_path or run_dir / "events.jsonl", self.run_id)
        self.settings_store = settings_store or SettingsStore(self.config.settings_path)
        self.credentials = credentials or CredentialResolver(store=self.settings_store)
        self.provider = provider or self._select_provider()
        self.retry_policy = RetryPolicy(
            max_attempts=self.config.retry_attempts,
            base_delay_ms=self.config.retry_base_delay_ms,
            timeout_s=self.config.call_timeout_s,
            sleep=sleep,
            on_retry=self._on_retry,
        )
        self.scheduler = StaggerScheduler(interval_ms=self.config.stagger_ms, sleep=sleep)
        self.suggestions = SuggestionEngine(self.provider, self.retry_policy, self.events)
        self.orchestrator = BatchOrchestrator(self.provider, self.retry_policy, self.scheduler, self.events)
        self.manifest_path = run_dir / "results.json"
        self.manifest = (
            ResultManifest.load(self.manifest_path) if self.manifest_path.exists() else ResultManifest(self.manifest_path)
        )
        self.state = AppState(settings=self.settings_store.load_settings())
        self.state.results.extend(self.manifest.load_results())
        self.events.emit("run_started", out_dir=str(self.run_dir), provider=self.provider.name)

    def _select_provider(self) -> MockupProvider:
        registry = default_registry(
            self.credentials,
            image_model=self.config.image_model,
            analysis_model=self.config.analysis_model,
        )
        name = "dryrun" if self.config.dry_run else "gemini"
        provider = registry.get(name)
        if provider is None:
            raise ConfigurationError(f"No provider available for {name}")
        return provider

    def _on_retry(self, attempt: int, max_attempts: int, delay_ms: int, error: BaseException) -> None:
        self.events.emit(
            "retry_scheduled",
            attempt=attempt,
            max_attempts=max_attempts,
            delay_ms=delay_ms,
            error=str(error),
        )

    async def load_image(self, image: SourceImage, *, suggest: bool = True) -> list[PromptEntry]:
        """Adopt a new artwork and, by default, seed the prompt list from it."""
        self.state.load_image(image)
        self.update_settings(aspect_ratio=self.state.settings.aspect_ratio)
        self.events.emit(
            "image_loaded",
            width=image.width,
            height=image.height,
            mime_type=image.mime_type,
            aspect_ratio=self.state.settings.aspect_ratio.value,
        )
        if not suggest:
            return self.state.prompts.entries
        return await self.suggest()

    async def suggest(self, vibe: AnalysisVibe | None = None) -> list[PromptEntry]:
        if vibe is not None:
            self.state.vibe = vibe
        image = self.state.require_image()
        texts = await self.suggestions.suggest_prompts(image, self.state.vibe)
        return self.state.prompts.replace_all(texts)

    async def regenerate_prompt(self, entry_id: str) -> PromptEntry | None:
        image = self.state.require_image()
        if not self.state.prompts.set_regenerating(entry_id, True):
            return None
        try:
            text = await self.suggestions.regenerate_one(image, self.state.vibe)
            self.state.prompts.update(entry_id, text)
        finally:
            self.state.prompts.set_regenerating(entry_id, False)
        return self.state.prompts.get(entry_id)

    def update_settings(self, **changes: Any) -> None:
        self.state.settings = self.state.settings.with_changes(**changes)
        self.settings_store.save_settings(self.state.settings)

    async def run_batch(self) -> list[MockupResult]:
        image = self.state.require_image()
        results = await self.orchestrator.run_batch(
            image,
            self.state.prompts.entries,
            self.state.constraints,
            self.state.settings,
        )
        self.state.results.extend(results)
        for result in results:
            self._persist(result)
        self.manifest.save()
        return results

    async def upscale(self, result_id: str) -> MockupResult:
        image = self.state.require_image()
        original = self.state.results.get(result_id)
        if original is None:
            raise KeyError(f"Unknown result: {result_id}")
        self.state.results.upscaling_id = result_id
        try:
            upscaled = await self.orchestrator.upscale(image, original, self.state.settings)
        finally:
            self.state.results.upscaling_id = None
        self.state.results.append(upscaled)
        self._persist(upscaled, parent_id=original.id)
        self.manifest.save()
        return upscaled

    def delete_result(self, result_id: str) -> bool:
        removed = self.state.results.remove(result_id)
        entry = self.manifest.get(result_id)
        if entry is not None:
            self._unlink(entry.get("image_path"))
            self.manifest.remove(result_id)
            self.manifest.save()
        if removed:
            self.events.emit("result_deleted", result_id=result_id)
        return removed

    def clear_results(self) -> int:
        count = len(self.state.results)
        for entry in self.manifest.entries:
            self._unlink(entry.get("image_path"))
        self.state.results.clear()
        self.manifest.clear()
        self.manifest.save()
        self.events.emit("results_cleared", count=count)
        return count

    def export_results(self, out_dir: Path) -> list[Path]:
        return [result.save(out_dir) for result in self.state.results]

    def finish(self) -> None:
        high_res = sum(1 for result in self.state.results if result.is_high_res)
        self.events.emit(
            "run_finished",
            total_results=len(self.state.results),
            high_res_results=high_res,
            manifest_path=str(self.manifest_path),
        )

    def _persist(self, result: MockupResult, parent_id: str | None = None) -> Path:
        image_path = result.save(self.run_dir)
        self.manifest.record(result, image_path, parent_id=parent_id)
        self.events.emit(
            "artifact_saved",
            result_id=result.id,
            image_path=str(image_path),
            parent_id=parent_id,
            is_high_res=result.is_high_res,
        )
        return image_path

    def _unlink(self, raw_path: Any) -> None:
        if not raw_path:
            return
        path = Path(str(raw_path))
        if not path.is_absolute():
            path = self.run_dir / path
        path.unlink(missing_ok=True)
