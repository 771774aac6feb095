"""rosgen – scaffold ROS 2 executor projects from task-chain graphs."""

from rosgen.exceptions import (
    DescriptionError,
    FileIOError,
    GenerationError,
    InvalidArgumentError,
    NotFoundError,
    RenderProcessError,
    StageError,
    TemplateError,
)
from rosgen.rendering import TemplateRenderer, render_to_command, render_to_file
from rosgen.scaffold import GenerationResult, ProjectScaffolder, generate_application
from rosgen.visualization import application_to_diagram, graph_to_diagram

__version__ = "0.1.0"

__all__ = [
    "DescriptionError",
    "FileIOError",
    "GenerationError",
    "GenerationResult",
    "InvalidArgumentError",
    "NotFoundError",
    "ProjectScaffolder",
    "RenderProcessError",
    "StageError",
    "TemplateError",
    "TemplateRenderer",
    "__version__",
    "application_to_diagram",
    "generate_application",
    "graph_to_diagram",
    "render_to_command",
    "render_to_file",
]
