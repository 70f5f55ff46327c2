"""Run manifest listing the results saved to a run directory."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any

from ..results import MockupResult
from ..utils import now_utc_iso, read_json, write_json


class ResultManifest:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.schema_version = 1
        self.run_id = str(uuid.uuid4())
        self.created_at = now_utc_iso()
        self.entries: list[dict[str, Any]] = []

    @classmethod
    def load(cls, path: Path) -> "ResultManifest":
        payload = read_json(path, {})
        manifest = cls(path)
        if not isinstance(payload, dict):
            return manifest
        manifest.schema_version = payload.get("schema_version", 1)
        manifest.run_id = payload.get("run_id", manifest.run_id)
        manifest.created_at = payload.get("created_at", manifest.created_at)
        results = payload.get("results", [])
        if isinstance(results, list):
            manifest.entries = [item for item in results if isinstance(item, dict) and item.get("id")]
        return manifest

    def record(self, result: MockupResult, image_path: Path, parent_id: str | None = None) -> dict[str, Any]:
        if image_path.parent.resolve() == self.path.parent.resolve():
            image_path = Path(image_path.name)
        entry = result.to_dict(image_path=image_path)
        entry["parent_id"] = parent_id
        self.entries = [item for item in self.entries if item.get("id") != result.id]
        self.entries.append(entry)
        return entry

    def remove(self, result_id: str) -> bool:
        before = len(self.entries)
        self.entries = [item for item in self.entries if item.get("id") != result_id]
        return len(self.entries) != before

    def clear(self) -> None:
        self.entries = []

    def get(self, result_id: str) -> dict[str, Any] | None:
        for item in self.entries:
            if item.get("id") == result_id:
                return item
        return None

    def load_results(self) -> list[MockupResult]:
        """Rehydrate results whose image files are still on disk."""
        results: list[MockupResult] = []
        for item in self.entries:
            image_path = Path(str(item.get("image_path", "")))
            if not image_path.is_absolute():
                image_path = self.path.parent / image_path
            if not image_path.exists():
                continue
            results.append(MockupResult.from_dict(item, base_dir=self.path.parent))
        return results

    def save(self) -> None:
        payload = {
            "schema_version": self.schema_version,
            "run_id": self.run_id,
            "created_at": self.created_at,
            "results": self.entries,
        }
        write_json(self.path, payload)
