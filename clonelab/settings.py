"""Project settings read from .clonelab/config.yaml."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

PROJECT_DIR = ".clonelab"
CONFIG_FILE = "config.yaml"


def project_dir(cwd: str | Path) -> Path:
    return Path(cwd) / PROJECT_DIR


@dataclass
class Settings:
    root: Path
    database: str = "state.db"
    questions: str = "questions.yaml"
    log_level: str = "INFO"
    log_format: str = "console"
    enforce_transitions: bool = True

    @property
    def database_path(self) -> Path:
        return self.root / self.database

    @property
    def questions_path(self) -> Path:
        return self.root / self.questions


def load_settings(cwd: str | Path) -> Settings:
    """Read config.yaml if present, then apply CLONELAB_* environment overrides.

    Relative paths in the config are resolved against the .clonelab/ directory.
    """
    root = project_dir(cwd)
    raw: dict = {}
    config_path = root / CONFIG_FILE
    if config_path.exists():
        loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(f"{config_path}: expected a mapping")
        raw = loaded or {}

    settings = Settings(root=root)
    for key in ("database", "questions", "log_level", "log_format"):
        if raw.get(key):
            setattr(settings, key, str(raw[key]))
    if "enforce_transitions" in raw:
        settings.enforce_transitions = bool(raw["enforce_transitions"])

    settings.log_level = os.environ.get("CLONELAB_LOG_LEVEL", settings.log_level)
    settings.log_format = os.environ.get("CLONELAB_LOG_FORMAT", settings.log_format)
    return settings
