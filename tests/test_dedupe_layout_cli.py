from __future__ import annotations

import importlib.util
import json
import plistlib
from pathlib import Path

from typer.testing import CliRunner


def _load_script_module(script_path: Path):
    spec = importlib.util.spec_from_file_location("dedupe_layout_script", script_path)
    if spec is None or spec.loader is None:
        raise AssertionError("failed to load dedupe_layout.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _module():
    repo_root = Path(__file__).resolve().parents[1]
    return _load_script_module(repo_root / "scripts" / "dedupe_layout.py")


def test_cli_fixes_layout_and_writes_report(tmp_path: Path) -> None:
    layout = tmp_path / "IconState.plist"
    layout.write_bytes(plistlib.dumps({"buttonBar": ["A"], "iconLists": [["A", "B"], ["B", "C"]]}))
    report = tmp_path / "out" / "report.json"
    result = CliRunner().invoke(_module().app, ["--layout", str(layout), "--report", str(report), "--no-backup"])
    assert result.exit_code == 0, result.output
    assert "found_any=true removed=2" in result.output
    assert plistlib.loads(layout.read_bytes()) == {"buttonBar": ["A"], "iconLists": [["B"], ["C"]]}
    data = json.loads(report.read_text())
    assert data["found_any"] is True
    assert data["states"][-1] == "end"
    assert not (tmp_path / "IconState.plist.bak").exists()


def test_cli_options_override_config(tmp_path: Path) -> None:
    layout = tmp_path / "IconState.plist"
    layout.write_bytes(plistlib.dumps({"iconLists": [["A", "A"]]}))
    cfg = tmp_path / "iconfix.yaml"
    cfg.write_text(f"layout_path: {tmp_path / 'other.plist'}\nbackup: true\n")
    result = CliRunner().invoke(_module().app, ["--config", str(cfg), "--layout", str(layout), "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "found_any=true" in result.output
    assert plistlib.loads(layout.read_bytes()) == {"iconLists": [["A", "A"]]}


def test_cli_clean_layout_falls_back(tmp_path: Path) -> None:
    layout = tmp_path / "IconState.plist"
    layout.write_bytes(plistlib.dumps({"iconLists": [["A", "B"]]}))
    result = CliRunner().invoke(_module().app, ["--layout", str(layout)])
    assert result.exit_code == 0, result.output
    assert "fell_back=true" in result.output
    assert layout.exists()


def test_cli_without_layout_is_config_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(_module().app, [])
    assert result.exit_code == 2


def test_cli_flags_can_switch_off_config_values(tmp_path: Path) -> None:
    layout = tmp_path / "IconState.plist"
    layout.write_bytes(plistlib.dumps({"iconLists": [["A", "A"]]}))
    clean = tmp_path / "Clean.plist"
    clean.write_bytes(plistlib.dumps({"iconLists": [["A"]]}))
    cfg = tmp_path / "iconfix.yaml"
    cfg.write_text("dry_run: true\nreset_on_clean: true\nbackup: false\n")
    runner = CliRunner()

    result = runner.invoke(_module().app, ["--config", str(cfg), "--layout", str(layout), "--no-dry-run"])
    assert result.exit_code == 0, result.output
    assert plistlib.loads(layout.read_bytes()) == {"iconLists": [["A"]]}

    result = runner.invoke(
        _module().app,
        ["--config", str(cfg), "--layout", str(clean), "--no-dry-run", "--no-reset-on-clean"],
    )
    assert result.exit_code == 0, result.output
    assert "fell_back=true" in result.output
    assert clean.exists()
