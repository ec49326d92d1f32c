from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from iconfix.dedupe.registry import IdentifierRegistry
from iconfix.layout.document import DOCK_KEY, LayoutDocument
from iconfix.layout.entries import ICON_LISTS_KEY, Entry, Folder, Icon, Opaque, Page

Location = tuple[Union[str, int], ...]


@dataclass(frozen=True)
class RemovedIcon:
    identifier: str
    location: Location


@dataclass(frozen=True)
class DedupeResult:
    document: LayoutDocument
    found_any: bool
    removed: list[RemovedIcon] = field(default_factory=list)


def _dedupe_lists(
    page_lists: list[Page],
    registry: IdentifierRegistry,
    prefix: Location,
    removed: list[RemovedIcon],
) -> tuple[list[Page], bool]:
    found = False
    out_lists: list[Page] = []
    for page_idx, page in enumerate(page_lists):
        if isinstance(page, Opaque):
            out_lists.append(Opaque(page.to_raw()))
            continue
        out_page: list[Entry] = []
        for entry_idx, entry in enumerate(page):
            loc = prefix + (page_idx, entry_idx)
            if isinstance(entry, Folder):
                nested, nested_found = _dedupe_lists(
                    entry.icon_lists, registry, loc + (ICON_LISTS_KEY,), removed
                )
                found = found or nested_found
                out_page.append(entry.with_icon_lists(nested))
            elif isinstance(entry, Icon):
                if registry.add_if_new(entry.identifier):
                    out_page.append(entry)
                else:
                    found = True
                    removed.append(RemovedIcon(entry.identifier, loc))
            else:
                out_page.append(Opaque(entry.to_raw()))
        out_lists.append(out_page)
    return out_lists, found


def dedupe(
    page_lists: list[Page],
    registry: IdentifierRegistry,
) -> tuple[list[Page], bool]:
    """Drop every icon whose identifier is already in `registry`.

    Returns fresh page lists and whether anything was dropped. Folders are
    descended into with the same registry; the input is left untouched.
    """
    return _dedupe_lists(page_lists, registry, (), [])


def dedupe_dock(
    document: LayoutDocument,
    registry: IdentifierRegistry,
) -> tuple[list[Page], bool, list[RemovedIcon]]:
    removed: list[RemovedIcon] = []
    dock_lists, found = _dedupe_lists(document.dock_lists, registry, (DOCK_KEY,), removed)
    if not document.dock_nested:
        # A bare buttonBar was wrapped in one page; drop the synthetic page index.
        removed = [RemovedIcon(r.identifier, (r.location[0],) + r.location[2:]) for r in removed]
    return dock_lists, found, removed


def dedupe_pages(
    document: LayoutDocument,
    registry: IdentifierRegistry,
) -> tuple[list[Page], bool, list[RemovedIcon]]:
    removed: list[RemovedIcon] = []
    pages, found = _dedupe_lists(document.pages, registry, (ICON_LISTS_KEY,), removed)
    return pages, found, removed


def dedupe_document(
    document: LayoutDocument,
    registry: IdentifierRegistry | None = None,
) -> DedupeResult:
    """Dedupe dock and pages through one registry, dock first."""
    if registry is None:
        registry = IdentifierRegistry()
    dock_lists, dock_found, dock_removed = dedupe_dock(document, registry)
    pages, pages_found, pages_removed = dedupe_pages(document, registry)
    return DedupeResult(
        document=document.replace(dock_lists=dock_lists, pages=pages),
        found_any=dock_found or pages_found,
        removed=dock_removed + pages_removed,
    )
