"""goalseq - run declared plugin goals as an ordered sequence of steps."""
from __future__ import annotations

from importlib import metadata

from goalseq.core import (
    ConfigTree,
    CoordinateResolver,
    DeclaredPlugin,
    PluginRegistry,
    SequenceContext,
    StepRunner,
    StepSpec,
    merge,
)
from goalseq.settings import Settings

__all__ = [
    "__version__",
    "ConfigTree",
    "CoordinateResolver",
    "DeclaredPlugin",
    "PluginRegistry",
    "SequenceContext",
    "Settings",
    "StepRunner",
    "StepSpec",
    "create_default_context",
    "merge",
]


def __getattr__(name: str):  # pragma: no cover - passthrough to package metadata
    if name == "__version__":
        try:
            return metadata.version("goalseq")
        except metadata.PackageNotFoundError:
            return "0.0.0"
    raise AttributeError(name)


def create_default_context(settings: Settings | None = None) -> SequenceContext:
    """Construct a default :class:`SequenceContext` for command-line runs."""

    settings = settings or Settings.load()
    return SequenceContext(sequence_id=settings.sequence_id, name=settings.sequence_name)
