"""Template rendering to files and into external processes.

Templates are Jinja2 text files executed against a :class:`Renderable`
record (or a plain mapping) with :class:`~jinja2.StrictUndefined`, so any
placeholder naming a field the record lacks is an error rather than an
empty string.

Example::

    renderer = TemplateRenderer()
    renderer.render_to_file(build, Path("templates/package.tmpl"), Path("package.xml"))
    renderer.render_to_command(
        diagram, Path("templates/graph.dt"), "dot", ["-Tpng", "-o", "graph.png"]
    )
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError

from rosgen.exceptions import (
    FileIOError,
    InvalidArgumentError,
    NotFoundError,
    RenderProcessError,
    TemplateError,
)
from rosgen.models.base import Renderable

logger = logging.getLogger(__name__)

# Keep only the tail of a failing renderer's stderr in error messages.
_STDERR_TAIL = 2000


def dot_escape(value: Any) -> str:
    """Escape *value* for use inside a double-quoted DOT attribute."""
    return str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _template_context(data: Any) -> dict[str, Any]:
    """Turn *data* into the variable mapping a template executes against."""
    if data is None:
        raise InvalidArgumentError("bad argument: template data is None")
    if isinstance(data, Renderable):
        return data.template_context()
    if isinstance(data, Mapping):
        return dict(data)
    raise InvalidArgumentError(
        f"Template data must be a record or a mapping, got {type(data).__name__}"
    )


def _drain_process(process: subprocess.Popen) -> tuple[int, str]:
    """Collect the consumer's stderr and wait for it to exit."""
    stderr = process.stderr.read() if process.stderr is not None else ""
    return process.wait(), stderr


class TemplateRenderer:
    """Compile Jinja2 template files and execute them against records.

    The ``dot_escape`` filter is registered on whichever environment is used.

    Args:
        environment: Optional pre-configured Jinja2 environment. The default
            uses ``StrictUndefined`` and preserves trailing newlines.
    """

    def __init__(self, environment: Environment | None = None) -> None:
        self._env = environment or Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )
        self._env.filters.setdefault("dot_escape", dot_escape)

    @property
    def environment(self) -> Environment:
        """The Jinja2 environment used to compile templates."""
        return self._env

    def load(self, template_path: Path) -> Template:
        """Read and compile the template at *template_path*.

        Raises:
            FileIOError: If the template file cannot be read.
            TemplateError: If the template has a syntax error.
        """
        try:
            source = Path(template_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise FileIOError(str(template_path), f"unable to read template: {exc}") from exc

        try:
            return self._env.from_string(source)
        except TemplateSyntaxError as exc:
            raise TemplateError(
                f"Unable to parse template '{template_path}' (line {exc.lineno}): "
                f"{exc.message}"
            ) from exc

    def render_to_file(self, data: Any, template_path: Path, output_path: Path) -> Path:
        """Render *template_path* against *data* into *output_path*.

        The output file is created (or truncated) only after the template
        compiled, and is flushed and closed before this method returns.

        Returns:
            The path written.

        Raises:
            InvalidArgumentError: If *data* is None or both paths are the same.
            FileIOError: If the template cannot be read or the output written.
            TemplateError: If the template fails to parse or execute.
        """
        context = _template_context(data)
        template_path, output_path = Path(template_path), Path(output_path)
        if os.path.abspath(template_path) == os.path.abspath(output_path):
            raise InvalidArgumentError(
                f"Template and output are the same file: {template_path}"
            )

        template = self.load(template_path)

        try:
            with open(output_path, "w", encoding="utf-8") as out:
                for chunk in template.generate(**context):
                    out.write(chunk)
        except OSError as exc:
            raise FileIOError(str(output_path), f"unable to write output: {exc}") from exc
        except Exception as exc:
            raise TemplateError(
                f"Error executing template '{template_path}': {exc}"
            ) from exc

        logger.debug("Rendered %s -> %s", template_path.name, output_path)
        return output_path

    def render_to_command(
        self,
        data: Any,
        template_path: Path,
        command: str,
        args: Sequence[str] = (),
    ) -> None:
        """Stream the rendered template into the standard input of *command*.

        The command starts before rendering begins and reads while the
        template is still being executed; the pipe's write end is closed
        once rendering stops, on every path, so the command sees
        end-of-input. The command is then waited for.

        Raises:
            NotFoundError: If *command* is not on the search path.
            InvalidArgumentError: If *data* is None.
            FileIOError: If the template cannot be read, the command cannot be
                started, or writing to its input fails.
            TemplateError: If the template fails to parse or execute.
            RenderProcessError: If the command exits with a non-zero status.
        """
        executable = shutil.which(command)
        if executable is None:
            raise NotFoundError(command, "command not found on PATH")

        context = _template_context(data)
        template = self.load(Path(template_path))

        try:
            process = subprocess.Popen(
                [executable, *args],
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
            )
        except OSError as exc:
            raise FileIOError(command, f"unable to start command: {exc}") from exc

        logger.debug("Started %s (pid=%d) for %s", command, process.pid, template_path)

        render_error: Exception | None = None
        write_error: OSError | None = None
        with ThreadPoolExecutor(max_workers=1) as pool:
            outcome = pool.submit(_drain_process, process)
            try:
                for chunk in template.generate(**context):
                    process.stdin.write(chunk)
            except BrokenPipeError:
                logger.debug("%s closed its input before rendering finished", command)
            except OSError as exc:
                write_error = exc
            except Exception as exc:
                render_error = exc
            finally:
                try:
                    process.stdin.close()
                except BrokenPipeError:
                    logger.debug("%s closed its input before the final flush", command)
            returncode, stderr = outcome.result()

        if write_error is not None:
            raise FileIOError(
                command, f"unable to write to command input: {write_error}"
            ) from write_error
        if render_error is not None:
            raise TemplateError(
                f"Error executing template '{template_path}': {render_error}"
            ) from render_error

        if returncode != 0:
            logger.warning("%s exited with status %d", command, returncode)
            raise RenderProcessError(command, returncode, stderr[-_STDERR_TAIL:])


_default_renderer = TemplateRenderer()


def render_to_file(data: Any, template_path: Path, output_path: Path) -> Path:
    """Render with the default :class:`TemplateRenderer`. See its method."""
    return _default_renderer.render_to_file(data, template_path, output_path)


def render_to_command(
    data: Any, template_path: Path, command: str, args: Sequence[str] = ()
) -> None:
    """Render with the default :class:`TemplateRenderer`. See its method."""
    _default_renderer.render_to_command(data, template_path, command, args)
