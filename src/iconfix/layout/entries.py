from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from iconfix.layout.errors import LayoutFormatError

ICON_LISTS_KEY = "iconLists"


@dataclass(frozen=True)
class Icon:
    identifier: str

    def to_raw(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class Folder:
    """A container entry.

    `attrs` holds every folder key except `iconLists` (title, colour,
    list type, ...). `key_order` remembers where `iconLists` sat among them
    so the record is re-emitted with the same layout.
    """

    icon_lists: list["Page"]
    attrs: dict[str, Any] = field(default_factory=dict)
    key_order: tuple[str, ...] = (ICON_LISTS_KEY,)

    @property
    def title(self) -> str | None:
        value = self.attrs.get("displayName")
        return value if isinstance(value, str) else None

    def with_icon_lists(self, icon_lists: list["Page"]) -> "Folder":
        return Folder(icon_lists=icon_lists, attrs=copy.deepcopy(self.attrs), key_order=self.key_order)

    def to_raw(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key in self.key_order:
            if key == ICON_LISTS_KEY:
                out[key] = page_lists_to_raw(self.icon_lists)
            elif key in self.attrs:
                out[key] = copy.deepcopy(self.attrs[key])
        for key, value in self.attrs.items():
            if key not in out:
                out[key] = copy.deepcopy(value)
        if ICON_LISTS_KEY not in out:
            out[ICON_LISTS_KEY] = page_lists_to_raw(self.icon_lists)
        return out


@dataclass(frozen=True)
class Opaque:
    """Anything that is neither an icon identifier nor a folder record.

    Also stands in for a whole page when an `iconLists` element is not a list.
    """

    value: Any

    def to_raw(self) -> Any:
        return copy.deepcopy(self.value)


Entry = Union[Icon, Folder, Opaque]
Page = Union[list[Entry], Opaque]


def _is_folder_shaped(raw: Any) -> bool:
    return isinstance(raw, Mapping) and isinstance(raw.get(ICON_LISTS_KEY), list)


def parse_entry(raw: Any) -> Entry:
    if isinstance(raw, str):
        return Icon(raw)
    if _is_folder_shaped(raw):
        attrs = {k: copy.deepcopy(v) for k, v in raw.items() if k != ICON_LISTS_KEY}
        return Folder(
            icon_lists=parse_page_lists(raw[ICON_LISTS_KEY]),
            attrs=attrs,
            key_order=tuple(raw.keys()),
        )
    return Opaque(copy.deepcopy(raw))


def parse_page(raw: Any) -> list[Entry]:
    if not isinstance(raw, list):
        raise LayoutFormatError(f"page must be a list, got {type(raw).__name__}")
    return [parse_entry(item) for item in raw]


def parse_page_lists(raw: Any) -> list[Page]:
    if not isinstance(raw, list):
        raise LayoutFormatError(f"page lists must be a list, got {type(raw).__name__}")
    return [parse_page(page) if isinstance(page, list) else Opaque(copy.deepcopy(page)) for page in raw]


def entry_to_raw(entry: Entry) -> Any:
    return entry.to_raw()


def page_lists_to_raw(page_lists: list[Page]) -> list[Any]:
    return [page.to_raw() if isinstance(page, Opaque) else [entry_to_raw(entry) for entry in page] for page in page_lists]
