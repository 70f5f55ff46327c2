from __future__ import annotations

import asyncio
import json
from io import BytesIO

import pytest
from PIL import Image

from mockup_engine.image import SourceImage
from mockup_engine.options import AnalysisVibe, AspectRatio, ResolutionTier
from mockup_engine.prompts import compose_analysis_prompt
from mockup_engine.providers.dryrun import DryRunProvider, _resolve_size

SOURCE = SourceImage(data=b"not really a jpeg", mime_type="image/jpeg", width=300, height=400)


def test_resolve_size_follows_aspect_ratio() -> None:
    assert _resolve_size(AspectRatio.SQUARE, ResolutionTier.DRAFT) == (512, 512)
    assert _resolve_size(AspectRatio.LANDSCAPE, ResolutionTier.DRAFT) == (512, 384)
    assert _resolve_size(AspectRatio.PORTRAIT, ResolutionTier.UPSCALED) == (768, 1024)
    assert _resolve_size(AspectRatio.WIDE, ResolutionTier.UPSCALED) == (1024, 576)


def test_dryrun_generate_renders_png() -> None:
    provider = DryRunProvider()

    generated = asyncio.run(
        provider.generate_image(SOURCE, "A dramatic coastline", AspectRatio.TALL, ResolutionTier.DRAFT)
    )

    assert generated is not None
    assert generated.mime_type == "image/png"
    assert generated.metadata == {"dryrun": True}
    with Image.open(BytesIO(generated.data)) as image:
        assert image.size == (288, 512)
    assert provider.calls == ["A dramatic coastline"]


def test_dryrun_injected_failure_looks_transient() -> None:
    provider = DryRunProvider(fail_substrings=["coastline"])

    with pytest.raises(RuntimeError, match="503"):
        asyncio.run(provider.generate_image(SOURCE, "A dramatic Coastline", AspectRatio.SQUARE, ResolutionTier.DRAFT))


def test_dryrun_analysis_honours_count_and_vibe() -> None:
    provider = DryRunProvider()

    four = json.loads(asyncio.run(provider.analyze_image(SOURCE, compose_analysis_prompt(AnalysisVibe.INDUSTRIAL))))
    one = json.loads(asyncio.run(provider.analyze_image(SOURCE, compose_analysis_prompt(AnalysisVibe.STREET, 1))))
    surprise = json.loads(asyncio.run(provider.analyze_image(SOURCE, compose_analysis_prompt(AnalysisVibe.SURPRISE))))

    assert len(four) == 4
    assert "industrial lofts" in four[0]
    assert one == ["A photograph of the artwork in subway stations"]
    assert len(set(surprise)) == 4
