"""Error taxonomy for the mockup engine."""

from __future__ import annotations


class MockupError(RuntimeError):
    """Base class for failures surfaced to callers."""


class ConfigurationError(MockupError):
    """No usable credential or configuration; never retried."""


class MalformedResponseError(MockupError):
    """The remote capability answered with an unexpected shape."""


class NoImagesError(MockupError):
    """Every image slot of a generation call came back empty."""


class BatchEmptyError(MockupError):
    """All jobs in a batch failed."""


class UpscaleError(MockupError):
    """Upscaling a single result failed; the original result is untouched."""

    def __init__(self, message: str, result_id: str | None = None) -> None:
        super().__init__(message)
        self.result_id = result_id
