import plistlib
import sys
from pathlib import Path

from iconfix.dedupe.passes import run_dedupe_pass
from iconfix.storage.host import FileLayoutHost
from iconfix.storage.plist_store import PlistLayoutStore

DUPED = {"buttonBar": ["a"], "iconLists": [["a", "b"], ["b"]]}
CLEAN = {"buttonBar": ["a"], "iconLists": [["b"]]}


def _write(path: Path, raw: dict) -> Path:
    path.write_bytes(plistlib.dumps(raw))
    return path


def test_pass_rewrites_file_and_keeps_backup(tmp_path: Path) -> None:
    path = _write(tmp_path / "IconState.plist", DUPED)
    original = path.read_bytes()
    host = FileLayoutHost(PlistLayoutStore(path))
    outcome = run_dedupe_pass(host)
    assert outcome.found_any
    assert outcome.persisted_path == str(path)
    assert plistlib.loads(path.read_bytes()) == {"buttonBar": ["a"], "iconLists": [["b"], []]}
    assert (tmp_path / "IconState.plist.bak").read_bytes() == original


def test_dry_run_writes_nothing(tmp_path: Path) -> None:
    path = _write(tmp_path / "IconState.plist", DUPED)
    original = path.read_bytes()
    host = FileLayoutHost(PlistLayoutStore(path), dry_run=True, reset_on_clean=True)
    outcome = run_dedupe_pass(host)
    assert outcome.found_any
    assert outcome.persisted_path is None
    assert path.read_bytes() == original
    assert not (tmp_path / "IconState.plist.bak").exists()


def test_clean_layout_kept_unless_reset_enabled(tmp_path: Path) -> None:
    path = _write(tmp_path / "IconState.plist", CLEAN)
    assert run_dedupe_pass(FileLayoutHost(PlistLayoutStore(path))).fell_back
    assert path.exists()
    assert run_dedupe_pass(FileLayoutHost(PlistLayoutStore(path), reset_on_clean=True)).fell_back
    assert not path.exists()


def test_missing_file_falls_back(tmp_path: Path) -> None:
    host = FileLayoutHost(PlistLayoutStore(tmp_path / "nope.plist"), reset_on_clean=True)
    outcome = run_dedupe_pass(host)
    assert outcome.fell_back
    assert host.load_current_layout() is None


def test_corrupt_file_falls_back_and_reset_deletes_it(tmp_path: Path) -> None:
    path = tmp_path / "IconState.plist"
    path.write_bytes(b"<plist><dict><key>iconLists")
    outcome = run_dedupe_pass(FileLayoutHost(PlistLayoutStore(path), reset_on_clean=True))
    assert outcome.fell_back
    assert not path.exists()


def test_notify_command_runs(tmp_path: Path) -> None:
    path = _write(tmp_path / "IconState.plist", DUPED)
    marker = tmp_path / "notified"
    cmd = [sys.executable, "-c", f"open({str(marker)!r}, 'w').write('ok')"]
    host = FileLayoutHost(PlistLayoutStore(path), notify_command=cmd, backup=False)
    run_dedupe_pass(host)
    assert marker.read_text() == "ok"


def test_failing_notify_command_is_logged(tmp_path: Path, caplog) -> None:
    path = _write(tmp_path / "IconState.plist", DUPED)
    cmd = [sys.executable, "-c", "import sys; sys.exit(3)"]
    host = FileLayoutHost(PlistLayoutStore(path), notify_command=cmd)
    with caplog.at_level("WARNING"):
        outcome = run_dedupe_pass(host)
    assert outcome.found_any
    assert "command_failed code=3" in caplog.text
