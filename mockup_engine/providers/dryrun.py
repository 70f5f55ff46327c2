"""Dry-run provider (offline)."""

from __future__ import annotations

import asyncio
import hashlib
import json
import re
from io import BytesIO
from typing import Iterable

from PIL import Image, ImageDraw, ImageFont

from ..image import SourceImage
from ..options import AnalysisVibe, AspectRatio, ResolutionTier
from ..prompts import VIBE_FOCUS
from .base import GeneratedImage

_COUNT_RE = re.compile(r"exactly (\d+)", re.IGNORECASE)
_LONG_EDGE = {ResolutionTier.DRAFT: 512, ResolutionTier.UPSCALED: 1024}


class DryRunProvider:
    name = "dryrun"

    def __init__(self, latency_s: float = 0.0, fail_substrings: Iterable[str] = ()) -> None:
        self.latency_s = max(0.0, latency_s)
        self.fail_substrings = tuple(s.lower() for s in fail_substrings if s)
        self.calls: list[str] = []

    async def generate_image(
        self,
        image: SourceImage,
        prompt: str,
        aspect_ratio: AspectRatio,
        resolution: ResolutionTier,
    ) -> GeneratedImage | None:
        self.calls.append(prompt)
        if self.latency_s:
            await asyncio.sleep(self.latency_s)
        lowered = prompt.lower()
        if any(marker in lowered for marker in self.fail_substrings):
            raise RuntimeError("dryrun: 503 UNAVAILABLE (injected failure)")
        width, height = _resolve_size(aspect_ratio, resolution)
        canvas = Image.new("RGB", (width, height), _color_from_prompt(prompt))
        _paste_artwork(canvas, image)
        draw = ImageDraw.Draw(canvas)
        draw.text((12, 12), f"dryrun {resolution.value}", fill=(255, 255, 255), font=ImageFont.load_default())
        buf = BytesIO()
        canvas.save(buf, format="PNG")
        return GeneratedImage(data=buf.getvalue(), mime_type="image/png", metadata={"dryrun": True})

    async def analyze_image(self, image: SourceImage, prompt: str) -> str:
        self.calls.append(prompt)
        if self.latency_s:
            await asyncio.sleep(self.latency_s)
        match = _COUNT_RE.search(prompt)
        count = int(match.group(1)) if match else 4
        vibe = _vibe_from_prompt(prompt)
        places = _places_for(vibe)
        suggestions = [f"A photograph of the artwork in {places[idx % len(places)].lower()}" for idx in range(count)]
        return json.dumps(suggestions)


def _vibe_from_prompt(prompt: str) -> AnalysisVibe:
    for vibe, focus in VIBE_FOCUS.items():
        if focus in prompt:
            return vibe
    return AnalysisVibe.SURPRISE


def _places_for(vibe: AnalysisVibe) -> list[str]:
    if vibe is AnalysisVibe.SURPRISE:
        # One setting from every other vibe.
        return [_places_for(other)[0] for other in AnalysisVibe if other is not AnalysisVibe.SURPRISE]
    return [item.strip(" .") for item in VIBE_FOCUS[vibe].split(",") if item.strip(" .")]


def _resolve_size(aspect_ratio: AspectRatio, resolution: ResolutionTier) -> tuple[int, int]:
    long_edge = _LONG_EDGE[resolution]
    w_part, h_part = (int(p) for p in aspect_ratio.value.split(":"))
    if w_part >= h_part:
        return long_edge, max(1, round(long_edge * h_part / w_part))
    return max(1, round(long_edge * w_part / h_part)), long_edge


def _paste_artwork(canvas: Image.Image, image: SourceImage) -> None:
    try:
        with Image.open(BytesIO(image.data)) as artwork:
            art = artwork.convert("RGB")
    except OSError:
        return
    art.thumbnail((canvas.width // 2, canvas.height // 2))
    offset = ((canvas.width - art.width) // 2, (canvas.height - art.height) // 2)
    canvas.paste(art, offset)


def _color_from_prompt(prompt: str) -> tuple[int, int, int]:
    digest = hashlib.sha256(prompt.encode("utf-8")).digest()
    return digest[0], digest[1], digest[2]
