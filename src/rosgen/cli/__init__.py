"""rosgen CLI – command-line interface built with Typer and Rich.

- :data:`app` – The main Typer application
- :class:`RosgenConfig` – Configuration model
- :func:`configure_logging` – Stage-aware logging setup
- :class:`CLIError` – Structured error handling
"""

from rosgen.cli.app import app
from rosgen.cli.config import RosgenConfig, load_config
from rosgen.cli.errors import CLIError, ConfigError, error_handler
from rosgen.cli.logging_setup import configure_logging

__all__ = [
    "CLIError",
    "ConfigError",
    "RosgenConfig",
    "app",
    "configure_logging",
    "error_handler",
    "load_config",
]
