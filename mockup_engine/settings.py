"""Generation settings shared by batch jobs, upscales and persistence."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from .options import (
    AspectRatio,
    FrameStyle,
    LightingStyle,
    PrintSize,
    ResolutionTier,
    WallTexture,
    coerce_option,
)

INITIAL_PRESETS = (
    "A sun-drenched industrial loft wall with harsh shadows and dust motes",
    "A moody, dimly lit art gallery with a single spotlight hitting the frame",
    "A gritty subway station wall with peeling posters and fluorescent hum",
)

DEFAULT_NEGATIVE_PROMPT = (
    "people, animals, text, watermark, blurry, low quality, distortion, ugly, 3d render, plastic look"
)


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str = INITIAL_PRESETS[0]
    negative_prompt: str = DEFAULT_NEGATIVE_PROMPT
    frame_style: FrameStyle = FrameStyle.AUTO
    lighting: LightingStyle = LightingStyle.AUTO
    wall_texture: WallTexture = WallTexture.AUTO
    print_size: PrintSize = PrintSize.A3
    aspect_ratio: AspectRatio = AspectRatio.PORTRAIT
    resolution: ResolutionTier = ResolutionTier.DRAFT
    count: int = 1

    @property
    def is_high_res(self) -> bool:
        return self.resolution is ResolutionTier.UPSCALED

    def with_changes(self, **changes: Any) -> "GenerationRequest":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            payload[item.name] = value.value if hasattr(value, "value") else value
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "GenerationRequest":
        """Build settings from persisted values, falling back to defaults per field."""
        base = cls()
        if not isinstance(payload, Mapping):
            return base
        count = payload.get("count", base.count)
        try:
            count = max(1, int(count))
        except (TypeError, ValueError):
            count = base.count
        prompt = payload.get("prompt")
        negative = payload.get("negative_prompt")
        return cls(
            prompt=prompt if isinstance(prompt, str) else base.prompt,
            negative_prompt=negative if isinstance(negative, str) else base.negative_prompt,
            frame_style=coerce_option(FrameStyle, payload.get("frame_style"), base.frame_style),
            lighting=coerce_option(LightingStyle, payload.get("lighting"), base.lighting),
            wall_texture=coerce_option(WallTexture, payload.get("wall_texture"), base.wall_texture),
            print_size=coerce_option(PrintSize, payload.get("print_size"), base.print_size),
            aspect_ratio=coerce_option(AspectRatio, payload.get("aspect_ratio"), base.aspect_ratio),
            resolution=coerce_option(ResolutionTier, payload.get("resolution"), base.resolution),
            count=count,
        )
