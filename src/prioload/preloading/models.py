"""Start-up manifest and preload stage models.

A StartupManifest lists the resource groups the application needs at
start-up and per route. It is usually shipped as JSON next to the build:

    {
        "critical": [
            {"url": "/assets/css/critical.css", "type": "style", "priority": "critical", "timeout": 1.0},
            {"url": "/assets/js/runtime.js", "type": "script", "priority": "critical"}
        ],
        "essential": [{"url": "/assets/css/components.css", "type": "style", "priority": "high"}],
        "non_critical": [{"url": "/assets/js/features.chunk.js", "type": "script", "priority": "low"}],
        "routes": {"/tactics": [{"url": "/assets/js/tactics.chunk.js", "type": "script", "priority": "high"}]}
    }
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from prioload.core.models import Priority, ResourceDescriptor, ResourceType


class PreloadStage(Enum):
    """Start-up sequence states, in order. FAILED ends a failed critical path."""

    NOT_STARTED = "not_started"
    LOADING_CRITICAL = "loading_critical"
    CRITICAL_READY = "critical_ready"
    LOADING_ESSENTIAL = "loading_essential"
    LOADING_NON_CRITICAL = "loading_non_critical"
    COMPLETE = "complete"
    FAILED = "failed"


STAGE_PROGRESS: dict[PreloadStage, int] = {
    PreloadStage.NOT_STARTED: 0,
    PreloadStage.LOADING_CRITICAL: 0,
    PreloadStage.CRITICAL_READY: 40,
    PreloadStage.LOADING_ESSENTIAL: 40,
    PreloadStage.LOADING_NON_CRITICAL: 70,
    PreloadStage.COMPLETE: 100,
}
"""Progress percentage reported on entering each stage. FAILED keeps the last value."""


ProgressListener = Callable[[PreloadStage, int], None]
"""Signature: (stage, progress_percent) -> None"""


class ManifestEntry(BaseModel):
    """One resource in a manifest group. Mirrors ResourceDescriptor."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(min_length=1)
    type: str = ResourceType.FETCH.value
    priority: Priority = Priority.MEDIUM
    timeout: float | None = Field(default=None, gt=0)
    max_retries: int = Field(default=0, ge=0)
    options: dict[str, Any] = Field(default_factory=dict)

    def to_descriptor(self) -> ResourceDescriptor:
        return ResourceDescriptor(
            url=self.url,
            priority=self.priority,
            type=self.type,
            timeout=self.timeout,
            max_retries=self.max_retries,
            options=self.options,
        )


class StartupManifest(BaseModel):
    """Resource groups for start-up sequencing and route prefetch."""

    model_config = ConfigDict(extra="forbid")

    critical: list[ManifestEntry] = Field(default_factory=list)
    essential: list[ManifestEntry] = Field(default_factory=list)
    non_critical: list[ManifestEntry] = Field(default_factory=list)
    routes: dict[str, list[ManifestEntry]] = Field(default_factory=dict)

    @classmethod
    def from_json_file(cls, path: str | Path) -> StartupManifest:
        """Load and validate a manifest from a JSON file."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))

    def route(self, name: str) -> list[ResourceDescriptor]:
        """Descriptors for a route. Unknown routes have none."""
        return [entry.to_descriptor() for entry in self.routes.get(name, [])]

    def group(self, name: str) -> list[ResourceDescriptor]:
        """Descriptors for "critical", "essential" or "non_critical"."""
        if name not in ("critical", "essential", "non_critical"):
            raise KeyError(f"Unknown manifest group: {name}")
        entries: list[ManifestEntry] = getattr(self, name)
        return [entry.to_descriptor() for entry in entries]
