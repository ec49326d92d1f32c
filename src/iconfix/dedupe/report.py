from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator

from iconfix.dedupe.core import Location
from iconfix.layout.document import DOCK_KEY, LayoutDocument
from iconfix.layout.entries import ICON_LISTS_KEY, Folder, Icon, Opaque, Page


def _walk(page_lists: list[Page], prefix: Location) -> Iterator[tuple[str, Location]]:
    for page_idx, page in enumerate(page_lists):
        if isinstance(page, Opaque):
            continue
        for entry_idx, entry in enumerate(page):
            loc = prefix + (page_idx, entry_idx)
            if isinstance(entry, Folder):
                yield from _walk(entry.icon_lists, loc + (ICON_LISTS_KEY,))
            elif isinstance(entry, Icon):
                yield entry.identifier, loc


def iter_icons(document: LayoutDocument) -> Iterator[tuple[str, Location]]:
    """Yield (identifier, location) for every icon, dock first."""
    for identifier, loc in _walk(document.dock_lists, (DOCK_KEY,)):
        if not document.dock_nested:
            loc = (loc[0],) + loc[2:]
        yield identifier, loc
    yield from _walk(document.pages, (ICON_LISTS_KEY,))


def count_icons(document: LayoutDocument) -> int:
    return sum(1 for _ in iter_icons(document))


def find_duplicates(document: LayoutDocument) -> dict[str, list[Location]]:
    locations: dict[str, list[Location]] = defaultdict(list)
    for identifier, loc in iter_icons(document):
        locations[identifier].append(loc)
    return {ident: locs for ident, locs in locations.items() if len(locs) > 1}


def format_location(loc: Location) -> str:
    return "".join(f"[{part}]" if isinstance(part, int) else f".{part}" for part in loc).lstrip(".")
