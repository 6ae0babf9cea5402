"""Build context threaded through the iOS build pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class BuildOptions(BaseModel):
    """Caller-supplied options; unknown keys are passed through untouched."""

    model_config = {"extra": "allow", "frozen": True}

    release: bool = False
    verbose: bool = False


class XcodeProject(BaseModel):
    """A located Xcode workspace or project."""

    model_config = {"frozen": True}

    name: str
    is_workspace: bool = False


class Device(BaseModel):
    """A deployable device or simulator."""

    model_config = {"frozen": True}

    name: str
    version: str = ""
    id: str = ""
    is_simulator: bool = False


class BuildContext(BaseModel):
    """Runtime state passed through the build chain.

    Fields are only ever added: once set, a field keeps its value for the
    rest of the pipeline.
    """

    model_config = {"frozen": True}

    options: BuildOptions = Field(default_factory=BuildOptions)
    root_path: Path | None = None
    native_root: Path | None = None
    xcode_project: XcodeProject | None = None
    configs: dict[str, Any] | None = None
    scheme: str | None = None
    devices: list[Device] | None = None
    device: Device | None = None

    def is_set(self, name: str) -> bool:
        """Return True if the named field has been assigned by a stage."""
        return name in self.model_fields_set

    def enrich(self, **fields: Any) -> BuildContext:
        """Return a copy with additional fields set.

        Raises ValueError when a field that is already set would change.
        """
        for name, value in fields.items():
            if name not in type(self).model_fields:
                raise ValueError(f"Unknown context field: '{name}'")
            if self.is_set(name) and getattr(self, name) != value:
                raise ValueError(f"Context field '{name}' is already set")
        data = {name: getattr(self, name) for name in self.model_fields_set}
        data.update(fields)
        return type(self).model_validate(data)

    def extends(self, previous: BuildContext) -> bool:
        """Return True if every field set on previous is unchanged here."""
        return all(
            self.is_set(name) and getattr(self, name) == getattr(previous, name)
            for name in previous.model_fields_set
        )
