from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from iconfix.dedupe.passes import run_dedupe_pass
from iconfix.storage.host import FileLayoutHost
from iconfix.storage.plist_store import PlistLayoutStore
from iconfix.util.config import build_config, load_config, merge_config
from iconfix.util.logging import configure_logging, get_logger

app = typer.Typer(add_completion=False)


@app.command()
def main(
    config: str = "",
    layout: str | None = typer.Option(None, "--layout", help="Layout file (.plist or .json)."),
    dry_run: bool | None = typer.Option(None, "--dry-run/--no-dry-run", help="Report only; never write or delete."),
    backup: bool | None = typer.Option(None, "--backup/--no-backup"),
    notify_cmd: list[str] | None = typer.Option(
        None,
        "--notify-cmd",
        help="Notify command argv, one option per argument.",
    ),
    reset_on_clean: bool | None = typer.Option(
        None,
        "--reset-on-clean/--no-reset-on-clean",
        help="Delete the layout when it holds no duplicates.",
    ),
    report: str | None = typer.Option(None, "--report", help="Write the pass outcome as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    cfg: dict[str, Any] = {}
    try:
        if config:
            cfg = load_config(config)
        merged = merge_config(
            cfg,
            {
                "layout_path": layout,
                "dry_run": dry_run,
                "backup": backup,
                "notify_command": list(notify_cmd) if notify_cmd else None,
                "reset_on_clean": reset_on_clean,
                "report_path": report,
                "log_level": "DEBUG" if verbose else None,
            },
        )
        settings = build_config(merged)
        configure_logging(settings.log_level)
    except (ValueError, OSError) as exc:
        typer.echo(f"invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2)

    logger = get_logger(__name__)
    logger.info(
        "dedupe_layout layout=%s dry_run=%s backup=%s reset_on_clean=%s",
        settings.layout_path,
        str(settings.dry_run).lower(),
        str(settings.backup).lower(),
        str(settings.reset_on_clean).lower(),
    )
    host = FileLayoutHost(
        PlistLayoutStore(settings.layout_path),
        backup=settings.backup,
        notify_command=settings.notify_command,
        reset_on_clean=settings.reset_on_clean,
        dry_run=settings.dry_run,
        logger=get_logger("iconfix.host"),
    )
    outcome = run_dedupe_pass(host, logger=logger)
    if settings.report_path:
        out = Path(settings.report_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(outcome.model_dump_json(indent=2) + "\n", encoding="utf-8")
        logger.info("dedupe_layout report=%s", out)
    typer.echo(
        f"found_any={str(outcome.found_any).lower()} removed={len(outcome.removed)} "
        f"fell_back={str(outcome.fell_back).lower()}"
    )


if __name__ == "__main__":
    app()
