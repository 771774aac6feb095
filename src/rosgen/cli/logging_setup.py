"""rosgen CLI logging infrastructure.

Logging is configured from a :class:`~rosgen.cli.config.RosgenConfig`.
Every record is tagged with the generation stage that emitted it (see
:data:`rosgen.scaffold.current_stage`). The Rich console shows the stage
as a prefix while a run is in progress, and the optional log file carries
it as its own column, so a failed run can be traced stage by stage.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from rosgen.cli.config import RosgenConfig
from rosgen.cli.errors import ConfigError
from rosgen.scaffold import current_stage

LOGGER_NAME = "rosgen"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(stage)s | %(name)s | %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class StageFilter(logging.Filter):
    """Attach the running generation stage to each record as ``record.stage``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.stage = current_stage.get()
        return True


class _StagePrefixFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        stage = getattr(record, "stage", "-")
        return message if stage == "-" else f"[{stage}] {message}"


def resolve_level(config: RosgenConfig, verbose: bool = False) -> int:
    """Return the numeric level for *config*; ``verbose`` forces DEBUG.

    Raises:
        ConfigError: If ``log_level`` is not a standard level name.
    """
    if verbose:
        return logging.DEBUG
    name = config.log_level.upper()
    if name not in _LEVELS:
        raise ConfigError(
            f"Unknown log_level '{config.log_level}' (expected one of {', '.join(_LEVELS)})"
        )
    return getattr(logging, name)


def configure_logging(
    config: RosgenConfig,
    *,
    verbose: bool = False,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``rosgen`` logger for one CLI invocation.

    Handlers from an earlier call are closed and replaced, so a log file
    is never held open across invocations.
    """
    level = resolve_level(config, verbose)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    stage_filter = StageFilter()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    rich_handler.addFilter(stage_filter)
    rich_handler.setFormatter(_StagePrefixFormatter("%(message)s"))
    logger.addHandler(rich_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.addFilter(stage_filter)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        logger.addHandler(file_handler)

    return logger
