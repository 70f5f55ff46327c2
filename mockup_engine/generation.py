"""Single generation call: ``request.count`` independent image slots."""

from __future__ import annotations

import asyncio

from .errors import ConfigurationError, NoImagesError
from .image import SourceImage
from .prompts import compose_generation_prompt
from .providers.base import MockupProvider
from .retry import RetryPolicy
from .runs.events import EventWriter
from .settings import GenerationRequest


async def generate_images(
    provider: MockupProvider,
    image: SourceImage,
    request: GenerationRequest,
    retry_policy: RetryPolicy,
    events: EventWriter | None = None,
) -> list[str]:
    """Return one data URI per slot that produced image bytes.

    Each slot goes through the retry policy on its own, so one slot running
    out of attempts never blocks its siblings. A missing credential aborts
    the whole call.
    """
    prompt = compose_generation_prompt(request)
    errors: list[BaseException] = []

    async def _slot(index: int) -> str | None:
        try:
            generated = await retry_policy.run(
                lambda: provider.generate_image(image, prompt, request.aspect_ratio, request.resolution)
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            errors.append(exc)
            if events is not None:
                events.emit("image_slot_failed", slot=index, provider=provider.name, error=str(exc))
            return None
        if generated is None or not generated.data:
            return None
        if events is not None:
            events.emit(
                "image_generated",
                slot=index,
                provider=provider.name,
                mime_type=generated.mime_type,
                metadata=dict(generated.metadata or {}),
            )
        return generated.to_data_uri()

    slots = await asyncio.gather(*(_slot(idx) for idx in range(max(1, request.count))))
    images = [item for item in slots if item]
    if not images:
        cause = errors[-1] if errors else None
        raise NoImagesError("No images were generated. Please try a different prompt or image.") from cause
    return images
