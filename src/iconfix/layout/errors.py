from __future__ import annotations

from pathlib import Path


class LayoutError(ValueError):
    pass


class LayoutLoadError(LayoutError):
    """The layout document is missing, unreadable, or cannot be decoded."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = None if path is None else Path(path)
        if self.path is not None:
            message = f"{message} path={self.path}"
        super().__init__(message)


class LayoutFormatError(LayoutLoadError):
    """The top-level record does not have the shape of a layout document."""
