from __future__ import annotations

import json
import os
import plistlib
import shutil
import tempfile
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from iconfix.layout.document import LayoutDocument
from iconfix.layout.errors import LayoutLoadError

BINARY_MAGIC = b"bplist00"


def _encode(raw: dict[str, Any], fmt: str) -> bytes:
    if fmt == "json":
        return (json.dumps(raw, ensure_ascii=False, indent=2) + "\n").encode("utf-8")
    plist_fmt = plistlib.FMT_BINARY if fmt == "binary" else plistlib.FMT_XML
    return plistlib.dumps(raw, fmt=plist_fmt, sort_keys=False)


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class PlistLayoutStore:
    """Reads and writes a layout document kept in a single file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.format = "json" if self.path.suffix.lower() == ".json" else "xml"

    @property
    def backup_path(self) -> Path:
        return self.path.with_name(self.path.name + ".bak")

    def exists(self) -> bool:
        return self.path.is_file()

    def load_raw(self) -> Any:
        try:
            payload = self.path.read_bytes()
        except OSError as exc:
            raise LayoutLoadError(f"cannot read layout: {exc.strerror or exc}", self.path) from exc
        if self.format == "json":
            try:
                return json.loads(payload.decode("utf-8"))
            except (UnicodeDecodeError, ValueError) as exc:
                raise LayoutLoadError(f"invalid json layout: {exc}", self.path) from exc
        if payload.startswith(BINARY_MAGIC):
            self.format = "binary"
        try:
            return plistlib.loads(payload)
        except (ValueError, ExpatError) as exc:
            raise LayoutLoadError(f"invalid plist layout: {exc}", self.path) from exc

    def load(self) -> LayoutDocument:
        raw = self.load_raw()
        try:
            return LayoutDocument.from_dict(raw)
        except LayoutLoadError as exc:
            if exc.path is None:
                exc.path = self.path
            raise

    def save(self, document: LayoutDocument, path: str | Path | None = None) -> Path:
        target = self.path if path is None else Path(path)
        atomic_write_bytes(target, _encode(document.to_dict(), self.format))
        return target

    def backup(self) -> Path | None:
        if not self.exists():
            return None
        shutil.copy2(self.path, self.backup_path)
        return self.backup_path

    def delete(self) -> bool:
        if not self.exists():
            return False
        self.path.unlink()
        return True
