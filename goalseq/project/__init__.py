"""YAML-backed project descriptors and step declarations."""
from __future__ import annotations

from .descriptor import ProjectDescriptor, build_registry, load_project, parse_configuration
from .steps import SequenceDefinition, load_sequence, parse_sequence, parse_step

__all__ = [
    "ProjectDescriptor",
    "SequenceDefinition",
    "build_registry",
    "load_project",
    "load_sequence",
    "parse_configuration",
    "parse_sequence",
    "parse_step",
]
