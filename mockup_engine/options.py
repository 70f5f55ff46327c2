"""Closed option sets for mockup generation."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar


class FrameStyle(str, Enum):
    AUTO = "Auto"
    NONE = "None"
    SLEEK_BLACK = "Sleek Black"
    MODERN_WHITE = "Modern White"
    NATURAL_OAK = "Natural Oak"
    CLASSIC_GOLD = "Classic Gold"
    INDUSTRIAL_METAL = "Industrial Metal"


class LightingStyle(str, Enum):
    AUTO = "Auto"
    NATURAL_DAYLIGHT = "Natural Daylight"
    SOFT_MORNING = "Soft Morning"
    GOLDEN_HOUR = "Golden Hour"
    STUDIO_LIGHTING = "Studio Lighting"
    MOODY_DIM = "Moody Dim"


class WallTexture(str, Enum):
    AUTO = "Auto"
    CLEAN_DRYWALL = "Clean Drywall"
    SMOOTH_PLASTER = "Smooth Plaster"
    EXPOSED_BRICK = "Exposed Brick"
    RAW_CONCRETE = "Raw Concrete"
    WOODEN_PANELING = "Wooden Paneling"


class PrintSize(str, Enum):
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    A4 = "A4"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    WIDE = "16:9"
    TALL = "9:16"


class ResolutionTier(str, Enum):
    """Output tier; the value is the image size hint sent to the provider."""

    DRAFT = "1K"
    UPSCALED = "4K"


class AnalysisVibe(str, Enum):
    INDUSTRIAL = "Industrial & Raw"
    MINIMALIST = "Modern & Minimalist"
    BOHEMIAN = "Cozy & Bohemian"
    LUXURY = "Luxury & High-end"
    STREET = "Public & Street"
    SURPRISE = "Surprise Me"


E = TypeVar("E", bound=Enum)


def coerce_option(enum_cls: type[E], value: object, default: E) -> E:
    """Map a raw value (member, value, or member name) onto ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    raw = str(value).strip()
    for member in enum_cls:
        if raw == member.value or raw.upper() == member.name:
            return member
    return default


def parse_option(enum_cls: type[E], value: object) -> E:
    """Strict variant of :func:`coerce_option` for user input."""
    raw = str(value).strip()
    for member in enum_cls:
        if raw.lower() == str(member.value).lower() or raw.upper().replace("-", "_") == member.name:
            return member
    choices = ", ".join(str(member.value) for member in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__} {value!r}. Choose one of: {choices}")
