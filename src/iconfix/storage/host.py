from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from iconfix.layout.document import LayoutDocument
from iconfix.storage.plist_store import PlistLayoutStore


class FileLayoutHost:
    """Layout host backed by one file on disk."""

    def __init__(
        self,
        store: PlistLayoutStore,
        *,
        backup: bool = True,
        notify_command: list[str] | None = None,
        reset_on_clean: bool = False,
        dry_run: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.backup = backup
        self.notify_command = list(notify_command or [])
        self.reset_on_clean = reset_on_clean
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)

    def load_current_layout(self) -> LayoutDocument | None:
        if not self.store.exists():
            self.logger.info("layout_missing path=%s", self.store.path)
            return None
        return self.store.load()

    def layout_storage_path(self) -> Path:
        return self.store.path

    def persist(self, document: LayoutDocument, path: Path) -> bool:
        if self.dry_run:
            self.logger.info("persist dry_run=true path=%s", path)
            return False
        if self.backup:
            backup_path = self.store.backup()
            if backup_path is not None:
                self.logger.info("persist backup=%s", backup_path)
        self.store.save(document, path)
        return True

    def notify_layout_changed_externally(self) -> None:
        if not self.notify_command:
            self.logger.info("notify layout_changed command=<none>")
            return
        if self.dry_run:
            self.logger.info("notify dry_run=true command=%s", " ".join(self.notify_command))
            return
        result = subprocess.run(self.notify_command, capture_output=True, text=True)
        if result.returncode != 0:
            self.logger.warning(
                "notify command_failed code=%d stderr=%s",
                result.returncode,
                (result.stderr or "").strip(),
            )

    def original_reset_behavior(self) -> None:
        if not self.reset_on_clean:
            self.logger.info("reset skipped reset_on_clean=false path=%s", self.store.path)
            return
        if self.dry_run:
            self.logger.info("reset dry_run=true path=%s", self.store.path)
            return
        if self.store.delete():
            self.logger.info("reset deleted path=%s", self.store.path)
