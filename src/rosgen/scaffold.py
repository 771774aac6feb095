"""Scaffolding orchestrator: lay out a ROS 2 project and render every artifact.

A run creates the project tree under ``<root>/<app name>``, renders one
source file per executor, the build manifest, the package descriptor and
the launch script, copies supplied libraries/headers/sources into place,
and pipes the two diagram templates through the external renderer.

Example::

    result = generate_application(app, Path("/work"), metadata, graph_data)
    for path in result.generated:
        print(path)
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path
from typing import Generator, Optional

from pydantic import BaseModel, ConfigDict, Field

from rosgen.exceptions import (
    FileIOError,
    GenerationError,
    InvalidArgumentError,
    StageError,
)
from rosgen.models.application import Application
from rosgen.models.metadata import GenerationMetadata, GraphData, LoggingMode
from rosgen.models.records import BuildDescriptor, ExecutorRecord
from rosgen.rendering import TemplateRenderer
from rosgen.staging import copy_files_to, filenames_from_paths
from rosgen.visualization import application_to_diagram, graph_to_diagram

logger = logging.getLogger(__name__)

TEMPLATES_DIRNAME = "templates"
MANIFEST_TEMPLATE = "CMakeLists.tmpl"
PACKAGE_TEMPLATE = "package.tmpl"
LAUNCH_TEMPLATE = "launch.tmpl"
GRAPH_TEMPLATE = "graph.dt"
APPLICATION_TEMPLATE = "application.dt"

DEFAULT_RENDERER_COMMAND = "dot"
DEFAULT_DIAGRAM_FORMAT = "png"

# Name of the stage currently running, "-" outside a generation run.
current_stage: ContextVar[str] = ContextVar("rosgen_stage", default="-")


def executor_template_name(logging_mode: LoggingMode) -> str:
    """Return the executor template for *logging_mode*, e.g. ``executor_0.tmpl``."""
    return f"executor_{int(logging_mode)}.tmpl"


def required_templates(logging_mode: LoggingMode) -> list[str]:
    """Return the template file names a run with *logging_mode* reads."""
    return [
        executor_template_name(logging_mode),
        MANIFEST_TEMPLATE,
        PACKAGE_TEMPLATE,
        LAUNCH_TEMPLATE,
        GRAPH_TEMPLATE,
        APPLICATION_TEMPLATE,
    ]


def missing_templates(templates_dir: Path, logging_mode: LoggingMode) -> list[str]:
    """Return the required templates that are absent from *templates_dir*."""
    return [
        name
        for name in required_templates(logging_mode)
        if not (Path(templates_dir) / name).is_file()
    ]


# ---------------------------------------------------------------------------
# Layout and result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectLayout:
    """Fixed directory tree of a generated project."""

    name: str
    root: Path
    src: Path
    include: Path
    include_package: Path
    lib: Path
    launch: Path
    assets: Path

    @classmethod
    def under(cls, base: Path, name: str) -> ProjectLayout:
        root = base / name
        include = root / "include"
        return cls(
            name=name,
            root=root,
            src=root / "src",
            include=include,
            include_package=include / name,
            lib=root / "lib",
            launch=root / "launch",
            assets=root / "assets",
        )

    @property
    def directories(self) -> list[Path]:
        """Directories in creation order (parents first)."""
        return [
            self.root,
            self.src,
            self.include,
            self.include_package,
            self.lib,
            self.launch,
            self.assets,
        ]

    @property
    def manifest(self) -> Path:
        return self.root / "CMakeLists.txt"

    @property
    def package_descriptor(self) -> Path:
        return self.root / "package.xml"

    @property
    def launch_script(self) -> Path:
        return self.launch / f"{self.name}_launch.py"


class GenerationResult(BaseModel):
    """Files produced by a generation run.

    Attributes:
        project_root: The generated project directory.
        generated: Files rendered from templates.
        staged: Files copied in from metadata paths.
        diagrams: Diagram images produced by the external renderer.
    """

    model_config = ConfigDict(frozen=True)

    project_root: Path
    generated: list[Path] = Field(default_factory=list)
    staged: list[Path] = Field(default_factory=list)
    diagrams: list[Path] = Field(default_factory=list)

    def relocated(self, old_root: Path, new_root: Path) -> GenerationResult:
        """Return a copy with every path moved from *old_root* to *new_root*."""

        def move(path: Path) -> Path:
            return new_root / path.relative_to(old_root)

        return GenerationResult(
            project_root=new_root,
            generated=[move(p) for p in self.generated],
            staged=[move(p) for p in self.staged],
            diagrams=[move(p) for p in self.diagrams],
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@contextmanager
def _stage(name: str) -> Generator[None, None, None]:
    """Wrap generation errors raised inside the block in a :class:`StageError`."""
    token = current_stage.set(name)
    logger.debug("Stage: %s", name)
    try:
        yield
    except StageError:
        raise
    except GenerationError as exc:
        raise StageError(name, exc) from exc
    finally:
        current_stage.reset(token)


def _normalize_root(root_path: str | Path) -> Path:
    text = os.fspath(root_path)
    if len(text) > 1 and text.endswith(("/", os.sep)):
        text = text[:-1]
    return Path(text)


def _make_directories(directories: list[Path]) -> None:
    for directory in directories:
        try:
            os.mkdir(directory)
        except OSError as exc:
            raise FileIOError(str(directory), f"cannot make directory: {exc}") from exc


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectScaffolder:
    """Generate a complete ROS 2 project from an application description.

    Args:
        renderer: Template renderer to use. Defaults to a fresh
            :class:`TemplateRenderer`.
        renderer_command: External graph renderer, fed a dot document on
            stdin and invoked as ``<command> -T<format> -o <output>``.
        diagram_format: Output format of both diagrams.
    """

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        *,
        renderer_command: str = DEFAULT_RENDERER_COMMAND,
        diagram_format: str = DEFAULT_DIAGRAM_FORMAT,
    ) -> None:
        self._renderer = renderer or TemplateRenderer()
        self._command = renderer_command
        self._format = diagram_format

    def generate(
        self,
        application: Optional[Application],
        root_path: str | Path,
        metadata: GenerationMetadata,
        graph_data: GraphData,
        *,
        templates_dir: Path | None = None,
        atomic: bool = False,
    ) -> GenerationResult:
        """Generate the project for *application* under *root_path*.

        Args:
            application: The application to generate.
            root_path: Directory the project directory is created in.
            metadata: Run-wide generation settings.
            graph_data: Task graph used for the diagrams.
            templates_dir: Template directory; defaults to
                ``<root_path>/templates``.
            atomic: Build in a hidden staging directory and move the project
                into place only if every stage succeeds.

        Returns:
            A :class:`GenerationResult` describing the produced files.

        Raises:
            InvalidArgumentError: If *application* is None.
            StageError: If any stage fails; the cause is chained.
        """
        if application is None:
            raise InvalidArgumentError("bad argument: application is None")

        base = _normalize_root(root_path)
        templates = Path(templates_dir) if templates_dir else base / TEMPLATES_DIRNAME
        logger.info(
            "Generating '%s' (%d executors) in %s",
            application.name,
            len(application.executors),
            base,
        )

        if not atomic:
            result = self._build(application, base, metadata, graph_data, templates)
        else:
            result = self._build_atomic(application, base, metadata, graph_data, templates)

        logger.info(
            "Generated %s: %d files, %d staged, %d diagrams",
            result.project_root,
            len(result.generated),
            len(result.staged),
            len(result.diagrams),
        )
        return result

    def _build_atomic(
        self,
        application: Application,
        base: Path,
        metadata: GenerationMetadata,
        graph_data: GraphData,
        templates: Path,
    ) -> GenerationResult:
        final_root = base / application.name
        with _stage("directories"):
            if final_root.exists():
                raise FileIOError(str(final_root), "project directory already exists")
            try:
                staging = Path(tempfile.mkdtemp(prefix=f".{application.name}-", dir=base))
            except OSError as exc:
                raise FileIOError(str(base), f"cannot make staging directory: {exc}") from exc

        try:
            result = self._build(application, staging, metadata, graph_data, templates)
            with _stage("publish"):
                try:
                    os.rename(result.project_root, final_root)
                except OSError as exc:
                    raise FileIOError(str(final_root), f"cannot move project into place: {exc}") from exc
        except BaseException:
            logger.info("Removing staging directory %s", staging)
            shutil.rmtree(staging, ignore_errors=True)
            raise

        staging.rmdir()
        return result.relocated(result.project_root, final_root)

    def _build(
        self,
        application: Application,
        base: Path,
        metadata: GenerationMetadata,
        graph_data: GraphData,
        templates: Path,
    ) -> GenerationResult:
        layout = ProjectLayout.under(base, application.name)
        generated: list[Path] = []
        staged: list[Path] = []
        diagrams: list[Path] = []

        with _stage("directories"):
            _make_directories(layout.directories)

        records: list[ExecutorRecord] = []
        with _stage("executor sources"):
            template = templates / executor_template_name(metadata.logging_mode)
            for index, executor in enumerate(application.executors):
                record = ExecutorRecord.from_metadata(index, executor, metadata)
                records.append(record)
                generated.append(
                    self._renderer.render_to_file(
                        record, template, layout.src / record.source_name
                    )
                )

        with _stage("build descriptor"):
            build = BuildDescriptor(
                name=application.name,
                packages=metadata.packages,
                sources=filenames_from_paths(metadata.sources),
                libraries=filenames_from_paths(metadata.libraries),
                executors=records,
            )

        with _stage("build manifest"):
            generated.append(
                self._renderer.render_to_file(
                    build, templates / MANIFEST_TEMPLATE, layout.manifest
                )
            )

        with _stage("package descriptor"):
            generated.append(
                self._renderer.render_to_file(
                    build, templates / PACKAGE_TEMPLATE, layout.package_descriptor
                )
            )

        with _stage("libraries"):
            staged.extend(copy_files_to(metadata.libraries, layout.lib))
        with _stage("headers"):
            staged.extend(copy_files_to(metadata.headers, layout.include_package))
        with _stage("sources"):
            staged.extend(copy_files_to(metadata.sources, layout.src))

        with _stage("launch script"):
            generated.append(
                self._renderer.render_to_file(
                    build, templates / LAUNCH_TEMPLATE, layout.launch_script
                )
            )

        with _stage("graph diagram"):
            diagrams.append(
                self._render_diagram(
                    graph_to_diagram(graph_data),
                    templates / GRAPH_TEMPLATE,
                    layout.assets / f"graph.{self._format}",
                )
            )

        with _stage("application diagram"):
            diagrams.append(
                self._render_diagram(
                    application_to_diagram(application, graph_data.graph),
                    templates / APPLICATION_TEMPLATE,
                    layout.assets / f"application.{self._format}",
                )
            )

        return GenerationResult(
            project_root=layout.root,
            generated=generated,
            staged=staged,
            diagrams=diagrams,
        )

    def _render_diagram(self, diagram: object, template: Path, output: Path) -> Path:
        self._renderer.render_to_command(
            diagram, template, self._command, [f"-T{self._format}", "-o", str(output)]
        )
        logger.debug("Rendered diagram %s", output)
        return output


def generate_application(
    application: Optional[Application],
    root_path: str | Path,
    metadata: GenerationMetadata,
    graph_data: GraphData,
    *,
    templates_dir: Path | None = None,
    renderer: TemplateRenderer | None = None,
    renderer_command: str = DEFAULT_RENDERER_COMMAND,
    diagram_format: str = DEFAULT_DIAGRAM_FORMAT,
    atomic: bool = False,
) -> GenerationResult:
    """Generate a project with a one-off :class:`ProjectScaffolder`."""
    scaffolder = ProjectScaffolder(
        renderer, renderer_command=renderer_command, diagram_format=diagram_format
    )
    return scaffolder.generate(
        application,
        root_path,
        metadata,
        graph_data,
        templates_dir=templates_dir,
        atomic=atomic,
    )
