"""rosgen CLI configuration management.

Loads configuration from TOML files with environment variable overrides
(``ROSGEN_`` prefix).  Uses :mod:`tomllib` on Python 3.11+.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from rosgen.cli.errors import ConfigError

# ---------------------------------------------------------------------------
# Default paths
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_DIR = ".rosgen"
DEFAULT_CONFIG_FILE = "config.toml"

# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class RosgenConfig(BaseModel):
    """Generator configuration with sensible defaults.

    All fields can be overridden via environment variables with the
    ``ROSGEN_`` prefix.  For example ``ROSGEN_RENDERER_COMMAND=/opt/bin/dot``.
    """

    templates_dir: Optional[Path] = None
    renderer_command: str = "dot"
    diagram_format: str = "png"
    atomic: bool = False
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    model_config = {"extra": "ignore"}


# ---------------------------------------------------------------------------
# Loader helpers
# ---------------------------------------------------------------------------


def _apply_env_overrides(data: dict) -> dict:
    """Apply ROSGEN_ environment variable overrides to *data*."""
    prefix = "ROSGEN_"
    field_names = set(RosgenConfig.model_fields.keys())
    for key, value in os.environ.items():
        if key.startswith(prefix):
            field = key[len(prefix):].lower()
            if field in field_names:
                data[field] = value
    return data


def load_config(config_path: Path | None = None, project_dir: Path | None = None) -> RosgenConfig:
    """Load configuration from a TOML file with env-var overrides.

    Parameters
    ----------
    config_path:
        Explicit path to a TOML file.  When *None*, looks for
        ``<project_dir>/.rosgen/config.toml``.
    project_dir:
        Project root directory.  Defaults to :func:`Path.cwd`.

    Returns
    -------
    RosgenConfig
        Parsed and validated configuration.

    Raises
    ------
    ConfigError
        If an explicit *config_path* is missing, or the file is not valid
        TOML, or a value fails validation.
    """
    project = project_dir or Path.cwd()
    path = config_path or (project / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE)

    if config_path is not None and not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    data: dict = {}
    if path.exists():
        try:
            with open(path, "rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    # Flatten nested TOML sections if present
    flat: dict = {}
    for k, v in data.items():
        if isinstance(v, dict):
            flat.update(v)
        else:
            flat[k] = v

    flat = _apply_env_overrides(flat)
    try:
        return RosgenConfig(**flat)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def default_config_toml() -> str:
    """Return default configuration as a TOML string."""
    return """\
# rosgen configuration

[render]
renderer_command = "dot"
diagram_format = "png"
atomic = false

[logging]
log_level = "INFO"
"""
