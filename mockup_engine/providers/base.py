"""Provider base classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol

from ..image import SourceImage, to_data_uri
from ..options import AspectRatio, ResolutionTier


@dataclass
class GeneratedImage:
    data: bytes
    mime_type: str | None = "image/png"
    metadata: Mapping[str, Any] | None = None

    def to_data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)


class MockupProvider(Protocol):
    name: str

    async def generate_image(
        self,
        image: SourceImage,
        prompt: str,
        aspect_ratio: AspectRatio,
        resolution: ResolutionTier,
    ) -> GeneratedImage | None:
        """One image slot; ``None`` when the response carried no image bytes."""
        ...

    async def analyze_image(self, image: SourceImage, prompt: str) -> str:
        """Raw text answer of the vision model."""
        ...


class ProviderRegistry:
    def __init__(self, providers: Iterable[MockupProvider]) -> None:
        self._providers = {provider.name: provider for provider in providers}

    def get(self, name: str) -> MockupProvider | None:
        return self._providers.get(name)
