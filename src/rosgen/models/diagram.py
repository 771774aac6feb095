"""Presentation models consumed by the diagram templates."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from rosgen.models.application import Application
from rosgen.models.base import TemplateRecord


class DiagramNode(BaseModel):
    """A drawable node."""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    style: str = Field(description="Border style")
    fill: str = Field(description="Fill color")
    shape: str


class DiagramLink(BaseModel):
    """A drawable directed link."""

    model_config = ConfigDict(frozen=True)

    source: int
    target: int
    color: str
    label: str


class GraphDiagram(TemplateRecord):
    """The raw chain graph: filtered, styled nodes plus every edge."""

    nodes: list[DiagramNode] = Field(default_factory=list)
    links: list[DiagramLink] = Field(default_factory=list)


class ApplicationDiagram(TemplateRecord):
    """Application topology: executors come straight from the application."""

    application: Application
    links: list[DiagramLink] = Field(default_factory=list)
