"""Template data records for generated project files."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field

from rosgen.models.application import Executor
from rosgen.models.base import TemplateRecord
from rosgen.models.metadata import GenerationMetadata


class ExecutorRecord(TemplateRecord):
    """Run-wide metadata merged with one executor; renders one source file."""

    index: int = Field(ge=0, description="Position of the executor in the application")
    includes: list[str] = Field(default_factory=list)
    msg_type: str = ""
    filter_policy: str = ""
    ppe: bool = False
    ppe_levels: int = 0
    executor: Executor
    duration_us: int = 0

    @classmethod
    def from_metadata(
        cls, index: int, executor: Executor, metadata: GenerationMetadata
    ) -> ExecutorRecord:
        """Build the record for the executor at *index*."""
        return cls(
            index=index,
            includes=metadata.includes,
            msg_type=metadata.msg_type,
            filter_policy=metadata.filter_policy,
            ppe=metadata.ppe,
            ppe_levels=metadata.ppe_levels,
            executor=executor,
            duration_us=metadata.duration_us,
        )

    @property
    def source_name(self) -> str:
        """File name of the generated source, e.g. ``executor_0.cpp``."""
        return f"executor_{self.index}.cpp"

    @property
    def target_name(self) -> str:
        """Build target / executable name, e.g. ``executor_0``."""
        return Path(self.source_name).stem


class BuildDescriptor(TemplateRecord):
    """Aggregate record shared by the manifest, descriptor and launch templates."""

    name: str
    packages: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list, description="Staged source basenames")
    libraries: list[str] = Field(
        default_factory=list, description="Staged library basenames"
    )
    executors: list[ExecutorRecord] = Field(default_factory=list)
