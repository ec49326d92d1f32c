from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Protocol, Union

from pydantic import BaseModel, Field

from iconfix.dedupe.core import dedupe_dock, dedupe_pages
from iconfix.dedupe.registry import IdentifierRegistry
from iconfix.dedupe.report import format_location
from iconfix.layout.document import LayoutDocument
from iconfix.layout.errors import LayoutLoadError


class LayoutHost(Protocol):
    def load_current_layout(self) -> LayoutDocument | None:
        ...

    def layout_storage_path(self) -> Path:
        ...

    def persist(self, document: LayoutDocument, path: Path) -> bool | None:
        """Write `document`; return False when nothing was written."""
        ...

    def notify_layout_changed_externally(self) -> None:
        ...

    def original_reset_behavior(self) -> None:
        ...


class PassState(str, Enum):
    START = "start"
    LOADED = "loaded"
    DOCK_PROCESSED = "dock_processed"
    PAGES_PROCESSED = "pages_processed"
    PERSISTED = "persisted"
    NOTIFIED = "notified"
    ORIGINAL_FALLBACK = "original_fallback"
    END = "end"


class RemovedEntry(BaseModel):
    identifier: str
    location: list[Union[str, int]]


class PassOutcome(BaseModel):
    states: list[PassState] = Field(default_factory=list)
    found_any: bool = False
    removed: list[RemovedEntry] = Field(default_factory=list)
    fell_back: bool = False
    persisted_path: str | None = None


def _fallback(host: LayoutHost, outcome: PassOutcome) -> PassOutcome:
    outcome.states.append(PassState.ORIGINAL_FALLBACK)
    outcome.fell_back = True
    host.original_reset_behavior()
    outcome.states.append(PassState.END)
    return outcome


def run_dedupe_pass(host: LayoutHost, logger: logging.Logger | None = None) -> PassOutcome:
    """Run one load/dedupe/persist cycle against `host`.

    Duplicates found: the corrected copy is persisted and the host is told
    to reload. Nothing found, or nothing loadable: the host's original reset
    behaviour runs instead.
    """
    logger = logger or logging.getLogger(__name__)
    outcome = PassOutcome(states=[PassState.START])

    try:
        document = host.load_current_layout()
    except LayoutLoadError as exc:
        logger.warning("dedupe_pass load_failed error=%s", exc)
        document = None
    if document is None:
        logger.info("dedupe_pass layout_unavailable fallback=true")
        return _fallback(host, outcome)
    outcome.states.append(PassState.LOADED)

    registry = IdentifierRegistry()
    dock_lists, dock_found, dock_removed = dedupe_dock(document, registry)
    outcome.states.append(PassState.DOCK_PROCESSED)
    pages, pages_found, pages_removed = dedupe_pages(document, registry)
    outcome.states.append(PassState.PAGES_PROCESSED)

    removed = dock_removed + pages_removed
    outcome.found_any = dock_found or pages_found
    outcome.removed = [RemovedEntry(identifier=r.identifier, location=list(r.location)) for r in removed]
    for r in removed:
        logger.debug("dedupe_pass removed identifier=%s at=%s", r.identifier, format_location(r.location))

    if not outcome.found_any:
        logger.info("dedupe_pass found_any=false icons=%d fallback=true", len(registry))
        return _fallback(host, outcome)

    corrected = document.replace(dock_lists=dock_lists, pages=pages)
    path = host.layout_storage_path()
    written = host.persist(corrected, path) is not False
    outcome.states.append(PassState.PERSISTED)
    if written:
        outcome.persisted_path = str(path)
    logger.info(
        "dedupe_pass found_any=true removed=%d path=%s written=%s",
        len(removed),
        path,
        str(written).lower(),
    )
    host.notify_layout_changed_externally()
    outcome.states.append(PassState.NOTIFIED)
    outcome.states.append(PassState.END)
    return outcome
