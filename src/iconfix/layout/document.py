from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from iconfix.layout.entries import (
    ICON_LISTS_KEY,
    Entry,
    Opaque,
    Page,
    page_lists_to_raw,
    parse_page,
    parse_page_lists,
)
from iconfix.layout.errors import LayoutFormatError

DOCK_KEY = "buttonBar"


def _is_nested_dock(raw: list[Any]) -> bool:
    return bool(raw) and all(isinstance(item, list) for item in raw)


@dataclass(frozen=True)
class LayoutDocument:
    """A parsed layout record.

    The dock is always held as a sequence of page lists. A bare `buttonBar`
    list is wrapped into a single page and unwrapped again by `to_dict`.
    """

    dock_lists: list[Page] = field(default_factory=lambda: [[]])
    pages: list[Page] = field(default_factory=list)
    dock_nested: bool = False
    extra: dict[str, Any] = field(default_factory=dict)
    key_order: tuple[str, ...] = (DOCK_KEY, ICON_LISTS_KEY)

    @property
    def dock(self) -> list[Entry]:
        return [entry for page in self.dock_lists if not isinstance(page, Opaque) for entry in page]

    def replace(self, *, dock_lists: list[Page], pages: list[Page]) -> "LayoutDocument":
        return LayoutDocument(
            dock_lists=dock_lists,
            pages=pages,
            dock_nested=self.dock_nested,
            extra=copy.deepcopy(self.extra),
            key_order=self.key_order,
        )

    @staticmethod
    def from_dict(raw: Any) -> "LayoutDocument":
        if not isinstance(raw, Mapping):
            raise LayoutFormatError(f"layout must be a mapping, got {type(raw).__name__}")
        dock_raw = raw.get(DOCK_KEY, [])
        if not isinstance(dock_raw, list):
            raise LayoutFormatError(f"{DOCK_KEY} must be a list, got {type(dock_raw).__name__}")
        nested = _is_nested_dock(dock_raw)
        dock_lists = parse_page_lists(dock_raw) if nested else [parse_page(dock_raw)]
        pages = parse_page_lists(raw.get(ICON_LISTS_KEY, []))
        extra = {k: copy.deepcopy(v) for k, v in raw.items() if k not in (DOCK_KEY, ICON_LISTS_KEY)}
        return LayoutDocument(
            dock_lists=dock_lists,
            pages=pages,
            dock_nested=nested,
            extra=extra,
            key_order=tuple(raw.keys()),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key in self.key_order:
            if key == DOCK_KEY:
                dock = page_lists_to_raw(self.dock_lists)
                out[key] = dock if self.dock_nested else [item for page in dock for item in page]
            elif key == ICON_LISTS_KEY:
                out[key] = page_lists_to_raw(self.pages)
            elif key in self.extra:
                out[key] = copy.deepcopy(self.extra[key])
        for key, value in self.extra.items():
            if key not in out:
                out[key] = copy.deepcopy(value)
        return out
