"""rosgen CLI application entry point.

Built with `Typer <https://typer.tiangolo.com/>`_ and
`Rich <https://rich.readthedocs.io/>`_.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from rosgen.cli.config import RosgenConfig, load_config
from rosgen.cli.errors import CLIError, error_handler
from rosgen.cli.init_cmd import run_init
from rosgen.cli.logging_setup import configure_logging
from rosgen.loader import load_description
from rosgen.scaffold import TEMPLATES_DIRNAME, generate_application, missing_templates

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="rosgen",
    help="rosgen – scaffold ROS 2 executor projects from task-chain graphs.",
    add_completion=False,
    no_args_is_help=True,
)

_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from rosgen import __version__

        _console.print(f"rosgen {__version__}")
        raise typer.Exit()


def _settings(ctx: typer.Context, root: Path | None = None) -> RosgenConfig:
    """Load configuration and (re)configure logging for a command."""
    options = ctx.obj or {}
    config = load_config(options.get("config_path"), project_dir=root)
    configure_logging(config, verbose=bool(options.get("verbose")))
    return config


# ---------------------------------------------------------------------------
# Main callback (global options)
# ---------------------------------------------------------------------------


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) output.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration TOML file.",
    ),
) -> None:
    """Global options for rosgen."""
    ctx.obj = {"verbose": verbose, "config_path": config}


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def init(
    path: Optional[Path] = typer.Argument(
        None,
        help="Generation root to initialise. Defaults to current directory.",
    ),
) -> None:
    """Copy the built-in templates into ``<root>/templates``."""
    with error_handler(_console):
        copied = run_init(path)
        _console.print(f"[green]Wrote {len(copied)} templates[/green]")
        for template in copied:
            _console.print(f"  {template}")


@app.command()
def validate(
    ctx: typer.Context,
    description: Path = typer.Argument(..., help="Application description (.yaml or .json)."),
) -> None:
    """Load a description and summarise it without generating anything."""
    with error_handler(_console):
        _settings(ctx)
        request = load_description(description)
        graph_data = request.graph_data

        table = Table(title=f"Application '{request.application.name}'")
        table.add_column("Property")
        table.add_column("Value", justify="right")
        table.add_row("Executors", str(len(request.application.executors)))
        table.add_row("Chains", str(len(graph_data.chains)))
        table.add_row("Chain nodes", str(graph_data.chain_node_count))
        table.add_row("Sync nodes", str(graph_data.sync_node_count))
        table.add_row("Edges", str(graph_data.graph.edge_count))
        table.add_row("Logging mode", request.metadata.logging_mode.name)
        Console().print(table)


@app.command()
def generate(
    ctx: typer.Context,
    description: Path = typer.Argument(..., help="Application description (.yaml or .json)."),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        "-r",
        help="Directory the project is generated in. Defaults to current directory.",
    ),
    templates: Optional[Path] = typer.Option(
        None,
        "--templates",
        "-t",
        help="Template directory. Defaults to <root>/templates.",
    ),
    atomic: bool = typer.Option(
        False,
        "--atomic",
        help="Only move the project into place once every stage succeeded.",
    ),
) -> None:
    """Generate a ROS 2 project from an application description."""
    with error_handler(_console):
        root_dir = root or Path.cwd()
        config = _settings(ctx, root_dir)
        request = load_description(description)

        templates_dir = templates or config.templates_dir or root_dir / TEMPLATES_DIRNAME
        missing = missing_templates(templates_dir, request.metadata.logging_mode)
        if missing:
            raise CLIError(
                f"Missing templates in {templates_dir}: {', '.join(missing)}\n"
                "Run 'rosgen init' to install the built-in set."
            )

        result = generate_application(
            request.application,
            root_dir,
            request.metadata,
            request.graph_data,
            templates_dir=templates_dir,
            renderer_command=config.renderer_command,
            diagram_format=config.diagram_format,
            atomic=atomic or config.atomic,
        )

        _console.print(f"[green]Generated project at {result.project_root}[/green]")
        for path in [*result.generated, *result.staged, *result.diagrams]:
            _console.print(f"  {path.relative_to(result.project_root)}")
