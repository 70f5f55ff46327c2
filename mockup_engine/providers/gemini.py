"""Gemini provider."""

from __future__ import annotations

import os
from typing import Any, Sequence

from google import genai
from google.genai import types

from ..credentials import CredentialResolver
from ..image import SourceImage
from ..options import AspectRatio, ResolutionTier
from .base import GeneratedImage

DEFAULT_IMAGE_MODEL = "gemini-3-pro-image-preview"
DEFAULT_ANALYSIS_MODEL = "gemini-2.5-flash"


class GeminiProvider:
    name = "gemini"

    def __init__(
        self,
        credentials: CredentialResolver | None = None,
        image_model: str | None = None,
        analysis_model: str | None = None,
    ) -> None:
        self.credentials = credentials or CredentialResolver()
        self.image_model = image_model or os.getenv("MOCKUP_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL
        self.analysis_model = analysis_model or os.getenv("MOCKUP_ANALYSIS_MODEL") or DEFAULT_ANALYSIS_MODEL

    def _client(self) -> genai.Client:
        return genai.Client(api_key=self.credentials.require())

    async def generate_image(
        self,
        image: SourceImage,
        prompt: str,
        aspect_ratio: AspectRatio,
        resolution: ResolutionTier,
    ) -> GeneratedImage | None:
        client = self._client()
        config = types.GenerateContentConfig(
            response_modalities=["IMAGE"],
            image_config=types.ImageConfig(
                aspect_ratio=aspect_ratio.value,
                image_size=resolution.value,
            ),
        )
        response = await client.aio.models.generate_content(
            model=self.image_model,
            contents=_build_parts(image, prompt),
            config=config,
        )
        blobs = _extract_image_bytes(getattr(response, "candidates", None) or [])
        if not blobs:
            return None
        first = blobs[0]
        return GeneratedImage(
            data=first["bytes"],
            mime_type=first.get("mime_type") or "image/png",
            metadata={"model": self.image_model, "usage": _extract_usage_summary(response)},
        )

    async def analyze_image(self, image: SourceImage, prompt: str) -> str:
        client = self._client()
        response = await client.aio.models.generate_content(
            model=self.analysis_model,
            contents=_build_parts(image, prompt),
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
        return _extract_text(response)


def _build_parts(image: SourceImage, prompt: str) -> list[types.Part]:
    return [
        types.Part(text=prompt),
        types.Part(inline_data=types.Blob(data=image.data, mime_type=image.mime_type or "image/jpeg")),
    ]


def _extract_image_bytes(candidates: Sequence[Any]) -> list[dict[str, Any]]:
    blobs: list[dict[str, Any]] = []
    for candidate in candidates:
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or getattr(candidate, "parts", None) or []
        for part in parts:
            inline_data = getattr(part, "inline_data", None)
            data = getattr(inline_data, "data", None) if inline_data else None
            if not data:
                continue
            mime_type = getattr(inline_data, "mime_type", None)
            if isinstance(data, str):
                data = data.encode("latin1")
            if isinstance(data, (bytes, bytearray)):
                blobs.append({"bytes": bytes(data), "mime_type": mime_type})
    return blobs


def _extract_text(response: Any) -> str:
    text = getattr(response, "text", None)
    if isinstance(text, str) and text.strip():
        return text
    chunks: list[str] = []
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or getattr(candidate, "parts", None) or []
        for part in parts:
            chunk = getattr(part, "text", None)
            if isinstance(chunk, str) and chunk.strip():
                chunks.append(chunk)
    return "".join(chunks)


def _extract_usage_summary(response: Any) -> dict[str, Any] | None:
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return None
    if hasattr(usage, "model_dump"):
        dumped = usage.model_dump(exclude_none=True)
        return dumped if isinstance(dumped, dict) else None
    return None
