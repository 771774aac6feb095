"""rosgen ``init`` command.

Copies the built-in template set into ``<root>/templates`` and writes a
default configuration file to ``<root>/.rosgen/config.toml``.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

from rosgen.cli.config import DEFAULT_CONFIG_DIR, DEFAULT_CONFIG_FILE, default_config_toml
from rosgen.cli.errors import CLIError
from rosgen.scaffold import TEMPLATES_DIRNAME

BUILTIN_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


def _copy_templates(templates_dir: Path) -> list[Path]:
    """Copy every built-in template into *templates_dir*."""
    templates_dir.mkdir(parents=True)
    copied: list[Path] = []
    for template in sorted(BUILTIN_TEMPLATES_DIR.iterdir()):
        if template.is_file() and template.suffix in (".tmpl", ".dt"):
            copied.append(Path(shutil.copy2(template, templates_dir / template.name)))
    return copied


def _write_default_config(root: Path) -> Path:
    config_path = root / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE
    if config_path.exists():
        return config_path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(default_config_toml())
    return config_path


def run_init(path: Optional[Path] = None) -> list[Path]:
    """Execute the init command logic.

    Parameters
    ----------
    path:
        Generation root.  Defaults to the current working directory.

    Returns
    -------
    list[Path]
        The template files written.
    """
    root = (path or Path.cwd()).resolve()

    if not root.is_dir():
        raise CLIError(f"Not a directory: {root}")

    templates_dir = root / TEMPLATES_DIRNAME
    if templates_dir.exists():
        raise CLIError(
            f"Templates already present: {templates_dir} exists.\n"
            "Remove it first or use a different directory."
        )

    copied = _copy_templates(templates_dir)
    _write_default_config(root)
    return copied
