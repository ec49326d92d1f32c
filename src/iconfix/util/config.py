from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ConfigError(ValueError):
    pass


class DedupeConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    layout_path: str
    backup: bool = True
    notify_command: list[str] = Field(default_factory=list)
    reset_on_clean: bool = False
    dry_run: bool = False
    report_path: str | None = None
    log_level: str = "INFO"


def load_config(path: str | Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid yaml in {path}: {exc}") from exc
    if not isinstance(cfg, dict):
        raise ConfigError(f"config must be a mapping: {path}")
    return cfg


def merge_config(cfg: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(cfg)
    for key, value in overrides.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def build_config(cfg: dict[str, Any]) -> DedupeConfig:
    try:
        return DedupeConfig.model_validate(cfg)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
