"""Load an application description document into generation inputs.

A description is a YAML or JSON document with three sections::

    application:
      name: demo
      executors:
        - name: sensors
          callbacks:
            - {id: 0, node: 0, priority: 2, wcet_us: 150, period_us: 10000}
    metadata:
      packages: [rclcpp, std_msgs]
      msg_type: std_msgs::msg::Int64
      logging_mode: 0
    graph:
      chains: [2]
      wcet: {0: 150, 1: 300}
      priority: {0: 2, 1: 1}
      edges:
        - {source: 0, target: 1, tag: 0, num: 0, color: red}

``graph.nodes`` defaults to the number of chain nodes. Relative paths in
``metadata.libraries``/``headers``/``sources`` are resolved against the
directory holding the document.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from rosgen.exceptions import DescriptionError
from rosgen.graph.ops import node_count
from rosgen.graph.task_graph import TaskGraph
from rosgen.models.application import Application
from rosgen.models.metadata import GenerationMetadata, GraphData

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}
_STAGED_KEYS = ("libraries", "headers", "sources")


@dataclass(frozen=True)
class GenerationRequest:
    """Everything one generation run needs, parsed from a description."""

    application: Application
    metadata: GenerationMetadata
    graph_data: GraphData


def _read_document(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DescriptionError(str(path), f"cannot read file: {exc}") from exc

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        elif path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            raise DescriptionError(
                str(path), f"unsupported file type '{path.suffix}' (use .yaml or .json)"
            )
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise DescriptionError(str(path), f"cannot parse document: {exc}") from exc

    if not isinstance(data, dict):
        raise DescriptionError(str(path), "top level must be a mapping")
    return data


def _resolve_staged_paths(metadata: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    resolved = dict(metadata)
    for key in _STAGED_KEYS:
        paths = resolved.get(key) or []
        if not isinstance(paths, list):
            raise ValueError(f"metadata.{key} must be a list of paths")
        resolved[key] = [
            str(p) if Path(p).is_absolute() else str(base_dir / p) for p in paths
        ]
    return resolved


def build_graph_data(section: dict[str, Any]) -> GraphData:
    """Build :class:`GraphData` from the ``graph`` section of a description.

    Raises:
        ValueError: If the section is malformed (includes pydantic
            validation errors).
    """
    chains = list(section.get("chains") or [])
    total = section.get("nodes", node_count(chains))
    graph = TaskGraph(int(total))
    for edge in section.get("edges") or []:
        graph.add_edge(
            int(edge["source"]),
            int(edge["target"]),
            tag=int(edge.get("tag", 0)),
            num=int(edge.get("num", 0)),
            color=str(edge.get("color", "black")),
        )
    return GraphData(
        chains=chains,
        node_wcet={int(k): int(v) for k, v in (section.get("wcet") or {}).items()},
        node_priority={int(k): int(v) for k, v in (section.get("priority") or {}).items()},
        graph=graph,
    )


def load_description(path: str | Path) -> GenerationRequest:
    """Load and validate the description document at *path*.

    Raises:
        DescriptionError: If the file cannot be read, parsed or validated.
    """
    path = Path(path)
    data = _read_document(path)

    for section in ("application", "graph"):
        if not isinstance(data.get(section), dict):
            raise DescriptionError(str(path), f"missing '{section}' section")

    try:
        application = Application.model_validate(data["application"])
        metadata = GenerationMetadata.model_validate(
            _resolve_staged_paths(data.get("metadata") or {}, path.parent)
        )
        graph_data = build_graph_data(data["graph"])
    except (ValidationError, ValueError, KeyError, TypeError) as exc:
        raise DescriptionError(str(path), str(exc)) from exc

    logger.debug(
        "Loaded %s: %d executors, %d graph nodes",
        path,
        len(application.executors),
        len(graph_data.graph),
    )
    return GenerationRequest(
        application=application, metadata=metadata, graph_data=graph_data
    )
