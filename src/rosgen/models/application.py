"""Application domain model: an application and its executors."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Callback(BaseModel):
    """A single callback hosted by an executor.

    Callbacks map one-to-one onto task graph nodes through ``node``.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Callback identifier, unique within the application")
    node: int = Field(ge=0, description="Index of the task graph node it implements")
    priority: int = Field(default=0, description="Scheduling priority")
    wcet_us: int = Field(default=0, ge=0, description="Worst-case execution time (us)")
    period_us: Optional[int] = Field(
        default=None, gt=0, description="Timer period (us); None for event-driven"
    )
    subscriptions: list[str] = Field(default_factory=list)
    publications: list[str] = Field(default_factory=list)

    @property
    def is_timer(self) -> bool:
        """True when the callback is driven by a periodic timer."""
        return self.period_us is not None


class Executor(BaseModel):
    """One executor of the generated application.

    The generator treats an executor as opaque: it is handed to the
    executor template as-is. Fields beyond the declared ones are kept.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(default="", description="Executor name")
    callbacks: list[Callback] = Field(default_factory=list)


class Application(BaseModel):
    """A named application made of an ordered sequence of executors."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Application (and ROS package) name")
    executors: list[Executor] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Application name must not be empty")
        if "/" in value or "\\" in value:
            raise ValueError(
                f"Application name must not contain path separators: {value!r}"
            )
        return value
