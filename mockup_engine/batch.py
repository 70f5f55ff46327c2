"""Batch orchestration: one staggered, concurrent job per prompt entry."""

from __future__ import annotations

import asyncio
from typing import Any, Sequence, Union

from .errors import BatchEmptyError, ConfigurationError, UpscaleError
from .generation import generate_images
from .image import SourceImage
from .options import FrameStyle, LightingStyle, ResolutionTier, WallTexture
from .providers.base import MockupProvider
from .results import MockupResult
from .retry import RetryPolicy
from .runs.events import EventWriter
from .scheduler import StaggerScheduler
from .settings import GenerationRequest
from .state import ConstraintSets, PromptEntry

PromptLike = Union[PromptEntry, str]


def assign_constraints(
    index: int,
    constraints: ConstraintSets,
) -> tuple[FrameStyle, LightingStyle, WallTexture]:
    return (
        constraints.frames.pick(index),
        constraints.lighting.pick(index),
        constraints.textures.pick(index),
    )


def build_job_requests(
    prompts: Sequence[PromptLike],
    constraints: ConstraintSets,
    base_settings: GenerationRequest,
) -> list[GenerationRequest]:
    requests: list[GenerationRequest] = []
    for index, entry in enumerate(prompts):
        frame, lighting, texture = assign_constraints(index, constraints)
        requests.append(
            base_settings.with_changes(
                prompt=entry.text if isinstance(entry, PromptEntry) else str(entry),
                frame_style=frame,
                lighting=lighting,
                wall_texture=texture,
                count=1,
            )
        )
    return requests


class BatchOrchestrator:
    def __init__(
        self,
        provider: MockupProvider,
        retry_policy: RetryPolicy,
        scheduler: StaggerScheduler | None = None,
        events: EventWriter | None = None,
    ) -> None:
        self.provider = provider
        self.retry_policy = retry_policy
        self.scheduler = scheduler or StaggerScheduler()
        self.events = events

    async def run_batch(
        self,
        image: SourceImage,
        prompts: Sequence[PromptLike],
        constraints: ConstraintSets,
        base_settings: GenerationRequest,
    ) -> list[MockupResult]:
        """Run every prompt as its own job and keep whatever succeeds.

        Results come back in job index order no matter which job finishes
        first. Only an entirely empty batch is an error.
        """
        if not prompts:
            raise ValueError("A batch needs at least one prompt entry.")
        requests = build_job_requests(prompts, constraints, base_settings)
        total = len(requests)
        self._emit("batch_started", jobs=total, provider=self.provider.name)
        tasks = [
            asyncio.create_task(self._run_job(index, total, image, request))
            for index, request in enumerate(requests)
        ]
        try:
            per_job = await asyncio.gather(*tasks)
        except ConfigurationError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        results = [result for job_results in per_job for result in job_results]
        failed = sum(1 for job_results in per_job if not job_results)
        if not results:
            self._emit("batch_empty", jobs=total)
            raise BatchEmptyError("Batch generation yielded no results.")
        self._emit("batch_finished", jobs=total, results=len(results), failed_jobs=failed)
        return results

    async def _run_job(
        self,
        index: int,
        total: int,
        image: SourceImage,
        request: GenerationRequest,
    ) -> list[MockupResult]:
        await self.scheduler.wait_turn(index)
        self._emit(
            "job_started",
            index=index,
            message=f"Generating variation {index + 1} of {total}...",
            frame_style=request.frame_style.value,
            lighting=request.lighting.value,
            wall_texture=request.wall_texture.value,
        )
        try:
            images = await generate_images(self.provider, image, request, self.retry_policy, self.events)
        except ConfigurationError:
            raise
        except Exception as exc:
            self._emit("job_failed", index=index, prompt=request.prompt, error=str(exc))
            return []
        results = [MockupResult.create(url, request.prompt, is_high_res=request.is_high_res) for url in images]
        for result in results:
            self._emit("result_created", index=index, result_id=result.id, is_high_res=result.is_high_res)
        return results

    async def upscale(
        self,
        image: SourceImage,
        result: MockupResult,
        base_settings: GenerationRequest | None = None,
    ) -> MockupResult:
        """Re-render ``result``'s scene at the high tier as a new sibling result."""
        request = (base_settings or GenerationRequest()).with_changes(
            prompt=result.prompt,
            resolution=ResolutionTier.UPSCALED,
            frame_style=FrameStyle.AUTO,
            lighting=LightingStyle.AUTO,
            wall_texture=WallTexture.AUTO,
            count=1,
        )
        self._emit("upscale_started", result_id=result.id)
        try:
            images = await generate_images(self.provider, image, request, self.retry_policy, self.events)
        except ConfigurationError:
            raise
        except Exception as exc:
            self._emit("upscale_failed", result_id=result.id, error=str(exc))
            raise UpscaleError("Upscale failed.", result_id=result.id) from exc
        upscaled = MockupResult.create(images[0], result.prompt, is_high_res=True)
        self._emit("upscale_finished", result_id=result.id, upscaled_id=upscaled.id)
        return upscaled

    def _emit(self, event_type: str, **payload: Any) -> None:
        if self.events is not None:
            self.events.emit(event_type, **payload)
