"""clonelab init: create .clonelab/ with a config and a sample question bank."""
from __future__ import annotations

import shutil
from pathlib import Path

from clonelab.settings import CONFIG_FILE, project_dir

# Templates bundled with the package
TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

TEMPLATE_FILES = (CONFIG_FILE, "questions.yaml")


def init_project(target_dir: Path | None = None) -> str:
    root = project_dir(target_dir or Path.cwd())
    if (root / CONFIG_FILE).exists():
        return f"Already initialized: {root / CONFIG_FILE} exists"

    root.mkdir(parents=True, exist_ok=True)
    for name in TEMPLATE_FILES:
        src = TEMPLATES_DIR / name
        if not src.exists():
            return f"Template file not found: {src}"
        dest = root / name
        if not dest.exists():
            shutil.copy(src, dest)

    return f"""Initialized clonelab project:
  {root}/
  ├── {CONFIG_FILE}
  └── questions.yaml

Next steps:
  1. Edit questions.yaml, then run: clonelab check
  2. Run: clonelab assign <student> <clone>
"""


def cmd_init(cwd: str):
    print(init_project(Path(cwd)))
