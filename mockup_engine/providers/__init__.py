"""Provider registry."""

from __future__ import annotations

from ..credentials import CredentialResolver
from .base import ProviderRegistry
from .dryrun import DryRunProvider
from .gemini import GeminiProvider


def default_registry(
    credentials: CredentialResolver | None = None,
    image_model: str | None = None,
    analysis_model: str | None = None,
) -> ProviderRegistry:
    return ProviderRegistry(
        [
            DryRunProvider(),
            GeminiProvider(credentials=credentials, image_model=image_model, analysis_model=analysis_model),
        ]
    )
