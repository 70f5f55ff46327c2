"""Generated mockups and the ordered store that owns them."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from .image import extension_for_mime, parse_data_uri, to_data_uri
from .utils import ensure_dir, new_id, now_utc_iso


@dataclass(frozen=True)
class MockupResult:
    id: str
    image_url: str
    prompt: str
    created_at: str
    is_high_res: bool = False

    @classmethod
    def create(cls, image_url: str, prompt: str, *, is_high_res: bool = False) -> "MockupResult":
        return cls(id=new_id(), image_url=image_url, prompt=prompt, created_at=now_utc_iso(), is_high_res=is_high_res)

    def image_bytes(self) -> bytes:
        data, _ = parse_data_uri(self.image_url)
        return data

    @property
    def mime_type(self) -> str:
        _, mime_type = parse_data_uri(self.image_url)
        return mime_type

    def filename(self) -> str:
        return f"mockup-{self.id}.{extension_for_mime(self.mime_type)}"

    def save(self, out_dir: Path) -> Path:
        ensure_dir(out_dir)
        path = out_dir / self.filename()
        path.write_bytes(self.image_bytes())
        return path

    def to_dict(self, image_path: Path | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "prompt": self.prompt,
            "created_at": self.created_at,
            "is_high_res": self.is_high_res,
        }
        if image_path is not None:
            payload["image_path"] = str(image_path)
        else:
            payload["image_url"] = self.image_url
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], base_dir: Path | None = None) -> "MockupResult":
        image_url = payload.get("image_url")
        if not image_url:
            image_path = Path(str(payload["image_path"]))
            if base_dir is not None and not image_path.is_absolute():
                image_path = base_dir / image_path
            suffix = image_path.suffix.lower().lstrip(".")
            mime_type = "image/jpeg" if suffix in {"jpg", "jpeg"} else f"image/{suffix or 'png'}"
            image_url = to_data_uri(image_path.read_bytes(), mime_type)
        return cls(
            id=str(payload["id"]),
            image_url=str(image_url),
            prompt=str(payload.get("prompt", "")),
            created_at=str(payload.get("created_at", "")),
            is_high_res=bool(payload.get("is_high_res", False)),
        )


@dataclass
class ResultStore:
    """Ordered results; only appends, explicit deletes, and clear mutate it."""

    _items: list[MockupResult] = field(default_factory=list)
    upscaling_id: str | None = None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[MockupResult]:
        return iter(list(self._items))

    @property
    def items(self) -> list[MockupResult]:
        return list(self._items)

    def newest_first(self) -> list[MockupResult]:
        return list(reversed(self._items))

    def append(self, result: MockupResult) -> None:
        self._items.append(result)

    def extend(self, results: Iterable[MockupResult]) -> None:
        self._items.extend(results)

    def get(self, result_id: str) -> MockupResult | None:
        for result in self._items:
            if result.id == result_id:
                return result
        return None

    def remove(self, result_id: str) -> bool:
        before = len(self._items)
        self._items = [result for result in self._items if result.id != result_id]
        return len(self._items) != before

    def clear(self) -> None:
        self._items = []

    def is_upscaling(self, result_id: str) -> bool:
        return self.upscaling_id == result_id
