"""rosgen data models."""

from rosgen.models.application import Application, Callback, Executor
from rosgen.models.base import Renderable, TemplateRecord
from rosgen.models.diagram import (
    ApplicationDiagram,
    DiagramLink,
    DiagramNode,
    GraphDiagram,
)
from rosgen.models.metadata import GenerationMetadata, GraphData, LoggingMode
from rosgen.models.records import BuildDescriptor, ExecutorRecord

__all__ = [
    "Application",
    "ApplicationDiagram",
    "BuildDescriptor",
    "Callback",
    "DiagramLink",
    "DiagramNode",
    "Executor",
    "ExecutorRecord",
    "GenerationMetadata",
    "GraphData",
    "GraphDiagram",
    "LoggingMode",
    "Renderable",
    "TemplateRecord",
]
