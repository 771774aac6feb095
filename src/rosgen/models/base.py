"""Base class for records that are rendered through templates."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


@runtime_checkable
class Renderable(Protocol):
    """Anything that can supply the variables a template is executed against."""

    def template_context(self) -> dict[str, Any]: ...


class TemplateRecord(BaseModel):
    """Immutable record whose fields become template variables.

    Top-level fields are exposed by name; nested models are kept as objects
    so templates can use attribute access (``{{ executor.name }}``).
    """

    model_config = ConfigDict(frozen=True)

    def template_context(self) -> dict[str, Any]:
        """Return the template variables for this record."""
        return {name: getattr(self, name) for name in type(self).model_fields}
