"""Run-wide generation settings and task graph inputs."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

from rosgen.graph.ops import node_count
from rosgen.graph.task_graph import TaskGraph


class LoggingMode(IntEnum):
    """Instrumentation compiled into the generated executors."""

    NONE = 0
    CALLBACKS = 1
    CHAINS = 2


class GenerationMetadata(BaseModel):
    """Configuration bundle for a single generation run.

    Attributes:
        packages: ROS packages the build manifest depends on.
        includes: Include directives for each executor source file.
        msg_type: Message type used by generated publishers/subscribers.
        filter_policy: Message filter synchronization policy.
        ppe: Whether to use priority-preserving executor semantics.
        ppe_levels: Number of priority levels when ``ppe`` is enabled.
        libraries: Static libraries to copy into ``lib/`` and link.
        headers: Header files to copy into ``include/<name>/``.
        sources: Source files to copy into ``src/`` and compile.
        duration_us: How long each executor runs (microseconds).
        logging_mode: Which executor template variant to render.
    """

    model_config = ConfigDict(frozen=True)

    packages: list[str] = Field(default_factory=list)
    includes: list[str] = Field(default_factory=list)
    msg_type: str = ""
    filter_policy: str = ""
    ppe: bool = False
    ppe_levels: int = Field(default=0, ge=0)
    libraries: list[str] = Field(default_factory=list)
    headers: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    duration_us: int = Field(default=0, ge=0)
    logging_mode: LoggingMode = LoggingMode.NONE


class GraphData(BaseModel):
    """Task graph plus the per-node data used to label it.

    Nodes ``0 .. node_count(chains) - 1`` belong to declared chains; any
    higher index is a synchronization node.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    chains: list[PositiveInt] = Field(default_factory=list)
    node_wcet: dict[int, int] = Field(default_factory=dict)
    node_priority: dict[int, int] = Field(default_factory=dict)
    graph: TaskGraph

    @model_validator(mode="after")
    def _check_node_ids(self) -> GraphData:
        total = len(self.graph)
        chained = node_count(self.chains)
        if chained > total:
            raise ValueError(
                f"Chains declare {chained} nodes but the graph has only {total}"
            )
        for label, mapping in (("wcet", self.node_wcet), ("priority", self.node_priority)):
            bad = sorted(n for n in mapping if n < 0 or n >= total)
            if bad:
                raise ValueError(f"{label} map references unknown nodes: {bad}")
        return self

    @property
    def chain_node_count(self) -> int:
        """Number of nodes that belong to a declared chain."""
        return node_count(self.chains)

    @property
    def sync_node_count(self) -> int:
        """Number of synthetic synchronization nodes."""
        return len(self.graph) - self.chain_node_count
