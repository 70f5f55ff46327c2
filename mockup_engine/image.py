"""Source artwork handling and data URI conventions."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import MalformedResponseError
from .options import AspectRatio

_GENERIC_DATA_URI_RE = re.compile(r"^data:(image/[a-z0-9.+-]+);base64,(.*)$", re.IGNORECASE | re.DOTALL)


def to_data_uri(data: bytes, mime_type: str | None = "image/png") -> str:
    mime = mime_type or "image/png"
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_uri(value: str) -> tuple[bytes, str]:
    match = _GENERIC_DATA_URI_RE.match(value.strip())
    if not match:
        raise MalformedResponseError("Expected a data:image/<fmt>;base64 payload.")
    mime_type = match.group(1).lower()
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"
    try:
        data = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedResponseError("Image payload is not valid base64.") from exc
    return data, mime_type


def extension_for_mime(mime_type: str | None) -> str:
    lowered = str(mime_type or "").strip().lower()
    if lowered in {"image/jpeg", "image/jpg"}:
        return "jpg"
    if lowered == "image/webp":
        return "webp"
    return "png"


def default_aspect_ratio(width: int | None, height: int | None) -> AspectRatio:
    if not width or not height:
        return AspectRatio.SQUARE
    if width > height:
        return AspectRatio.LANDSCAPE
    if height > width:
        return AspectRatio.PORTRAIT
    return AspectRatio.SQUARE


@dataclass(frozen=True)
class SourceImage:
    """The uploaded artwork, kept encoded."""

    data: bytes
    mime_type: str = "image/jpeg"
    width: int | None = None
    height: int | None = None

    @property
    def default_aspect_ratio(self) -> AspectRatio:
        return default_aspect_ratio(self.width, self.height)

    def to_data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)

    @classmethod
    def from_data_uri(cls, value: str, width: int | None = None, height: int | None = None) -> "SourceImage":
        data, mime_type = parse_data_uri(value)
        if width is None or height is None:
            width, height = _measure(data)
        return cls(data=data, mime_type=mime_type, width=width, height=height)

    @classmethod
    def from_path(cls, path: Path, *, max_dim: int | None = None) -> "SourceImage":
        """Load an artwork file, re-encoding to JPEG when needed."""
        raw = path.read_bytes()
        try:
            with Image.open(BytesIO(raw)) as image:
                image.load()
                fmt = (image.format or "").upper()
                if fmt == "JPEG" and max_dim is None:
                    return cls(data=raw, mime_type="image/jpeg", width=image.width, height=image.height)
                # Flatten alpha for JPEG.
                rgba = image.convert("RGBA")
                background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
                background.alpha_composite(rgba)
                rgb = background.convert("RGB")
                if max_dim:
                    rgb.thumbnail((max_dim, max_dim))
                buf = BytesIO()
                rgb.save(buf, format="JPEG", quality=92)
                return cls(data=buf.getvalue(), mime_type="image/jpeg", width=rgb.width, height=rgb.height)
        except UnidentifiedImageError as exc:
            raise ValueError(f"Not a readable image: {path}") from exc


def _measure(data: bytes) -> tuple[int | None, int | None]:
    try:
        with Image.open(BytesIO(data)) as image:
            return image.width, image.height
    except (UnidentifiedImageError, OSError):
        return None, None
