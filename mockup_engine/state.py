"""Explicit application state and its transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterable, Iterator, Sequence, TypeVar

from .image import SourceImage
from .options import AnalysisVibe, FrameStyle, LightingStyle, WallTexture
from .results import ResultStore
from .settings import INITIAL_PRESETS, GenerationRequest
from .utils import new_id

NEW_PROMPT_TEXT = "Describe a new environment..."

O = TypeVar("O", FrameStyle, LightingStyle, WallTexture)


@dataclass
class PromptEntry:
    id: str
    text: str
    regenerating: bool = False


class PromptList:
    """Editable scene prompts; never empty."""

    def __init__(self, entries: Iterable[PromptEntry] | None = None) -> None:
        self._entries: list[PromptEntry] = list(entries or [])
        if not self._entries:
            self._entries.append(PromptEntry(id="1", text=INITIAL_PRESETS[0]))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PromptEntry]:
        return iter(list(self._entries))

    @property
    def entries(self) -> list[PromptEntry]:
        return list(self._entries)

    def texts(self) -> list[str]:
        return [entry.text for entry in self._entries]

    def get(self, entry_id: str) -> PromptEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def add(self, text: str = NEW_PROMPT_TEXT) -> PromptEntry:
        existing = {entry.id for entry in self._entries}
        entry_id = new_id()
        while entry_id in existing:
            entry_id = new_id()
        entry = PromptEntry(id=entry_id, text=text)
        self._entries.append(entry)
        return entry

    def remove(self, entry_id: str) -> bool:
        """Drop an entry; removing the last remaining one is refused."""
        if len(self._entries) <= 1:
            return False
        before = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        return len(self._entries) != before

    def update(self, entry_id: str, text: str) -> bool:
        entry = self.get(entry_id)
        if entry is None:
            return False
        entry.text = text
        return True

    def set_regenerating(self, entry_id: str, flag: bool) -> bool:
        entry = self.get(entry_id)
        if entry is None:
            return False
        entry.regenerating = flag
        return True

    def replace_all(self, texts: Sequence[str]) -> list[PromptEntry]:
        """Swap the whole set for fresh entries; an empty input keeps the current set."""
        if not texts:
            return self.entries
        self._entries = [PromptEntry(id=new_id(), text=text) for text in texts]
        return self.entries


class SelectionSet(Generic[O]):
    """Non-empty ordered selection where Auto excludes every other value."""

    def __init__(self, auto: O, values: Iterable[O] | None = None) -> None:
        self.auto = auto
        self._values: list[O] = []
        for value in values or ():
            self.toggle(value)
        if not self._values:
            self._values = [auto]

    @property
    def values(self) -> tuple[O, ...]:
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> O:
        return self._values[index]

    def toggle(self, value: O) -> bool:
        """Apply one pill click; returns False when the click is rejected."""
        if value in self._values:
            if len(self._values) == 1:
                return False
            self._values.remove(value)
            return True
        if value == self.auto:
            self._values = [self.auto]
        else:
            self._values = [item for item in self._values if item != self.auto]
            self._values.append(value)
        return True

    def select(self, value: O) -> None:
        """Add ``value`` if absent; never deselects."""
        if value == self.auto:
            self._values = [self.auto]
        elif value not in self._values:
            self._values = [item for item in self._values if item != self.auto]
            self._values.append(value)

    def pick(self, index: int) -> O:
        """Round-robin choice for job ``index``."""
        return self._values[index % len(self._values)]


@dataclass
class ConstraintSets:
    frames: SelectionSet[FrameStyle] = field(default_factory=lambda: SelectionSet(FrameStyle.AUTO))
    lighting: SelectionSet[LightingStyle] = field(default_factory=lambda: SelectionSet(LightingStyle.AUTO))
    textures: SelectionSet[WallTexture] = field(default_factory=lambda: SelectionSet(WallTexture.AUTO))

    @classmethod
    def of(
        cls,
        frames: Iterable[FrameStyle] = (),
        lighting: Iterable[LightingStyle] = (),
        textures: Iterable[WallTexture] = (),
    ) -> "ConstraintSets":
        return cls(
            frames=SelectionSet(FrameStyle.AUTO, frames),
            lighting=SelectionSet(LightingStyle.AUTO, lighting),
            textures=SelectionSet(WallTexture.AUTO, textures),
        )


@dataclass
class AppState:
    settings: GenerationRequest = field(default_factory=GenerationRequest)
    prompts: PromptList = field(default_factory=PromptList)
    constraints: ConstraintSets = field(default_factory=ConstraintSets)
    vibe: AnalysisVibe = AnalysisVibe.SURPRISE
    results: ResultStore = field(default_factory=ResultStore)
    source_image: SourceImage | None = None

    def load_image(self, image: SourceImage) -> None:
        """Adopt a new artwork and pick the aspect ratio that matches it."""
        self.source_image = image
        self.settings = self.settings.with_changes(aspect_ratio=image.default_aspect_ratio)

    def require_image(self) -> SourceImage:
        if self.source_image is None:
            raise ValueError("Upload an artwork image first.")
        return self.source_image
