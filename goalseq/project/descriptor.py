"""Project descriptor loader: declared plugins, executions and goals."""
from __future__ import annotations

import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from goalseq.core.config_tree import ConfigTree
from goalseq.core.errors import ProjectFileError
from goalseq.core.registry import DeclaredPlugin, GoalDescriptor, NamedExecution, PluginRegistry

PLUGIN_KEYS = {"group", "artifact", "version", "executions", "goals"}


@dataclass(slots=True)
class ProjectDescriptor:
    """Plugins declared by a project, loaded from YAML."""

    registry: PluginRegistry

    def describe_goal(self, group: str, artifact: str, goal: str) -> Optional[GoalDescriptor]:
        return self.registry.describe_goal(group, artifact, goal)


def read_yaml(path: Path, kind: str) -> Mapping[str, Any]:
    """Read a YAML mapping from *path*, raising :class:`ProjectFileError` on problems."""

    if not path.exists():
        raise ProjectFileError(f"{kind} not found at {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ProjectFileError(f"Failed to parse {kind} {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ProjectFileError(f"{kind} {path} must contain a mapping at the top level")
    return payload


def parse_configuration(raw: Any, where: str) -> Optional[ConfigTree]:
    """Turn a YAML configuration value (mapping or XML string) into a tree."""

    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return ConfigTree.from_mapping(raw)
    if isinstance(raw, str):
        try:
            return ConfigTree.from_xml(raw)
        except ElementTree.ParseError as exc:
            raise ProjectFileError(f"Invalid XML configuration for {where}: {exc}") from exc
    raise ProjectFileError(f"Configuration for {where} must be a mapping or an XML string")


def _parse_goals(raw: Any, where: str) -> Dict[str, GoalDescriptor]:
    if raw is None:
        return {}
    if isinstance(raw, (list, tuple)):
        return {str(name): GoalDescriptor(name=str(name)) for name in raw}
    if not isinstance(raw, Mapping):
        raise ProjectFileError(f"'goals' of {where} must be a list or a mapping")
    goals: Dict[str, GoalDescriptor] = {}
    for name, payload in raw.items():
        payload = payload or {}
        if not isinstance(payload, Mapping):
            raise ProjectFileError(f"Goal '{name}' of {where} must be a mapping")
        goals[str(name)] = GoalDescriptor(
            name=str(name),
            default_configuration=parse_configuration(
                payload.get("configuration"), f"{where} goal {name}"
            ),
            description=str(payload.get("description") or ""),
        )
    return goals


def _parse_executions(raw: Any, where: str) -> Optional[Tuple[NamedExecution, ...]]:
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise ProjectFileError(f"'executions' of {where} must be a list")
    executions: List[NamedExecution] = []
    for entry in raw:
        if not isinstance(entry, Mapping) or not entry.get("id"):
            raise ProjectFileError(f"Every execution of {where} needs an 'id'")
        execution_id = str(entry["id"])
        executions.append(
            NamedExecution(
                id=execution_id,
                configuration=parse_configuration(
                    entry.get("configuration"), f"{where} execution {execution_id}"
                ),
                goals=tuple(str(goal) for goal in entry.get("goals") or ()),
            )
        )
    return tuple(executions)


def _validate(entry: Any) -> DeclaredPlugin:
    if not isinstance(entry, Mapping):
        raise ProjectFileError("Plugin declarations must be mappings")
    missing = {"group", "artifact"} - set(entry)
    if missing:
        raise ProjectFileError(f"Missing required keys {sorted(missing)} for plugin declaration")
    unknown = set(entry) - PLUGIN_KEYS
    if unknown:
        raise ProjectFileError(f"Unknown keys {sorted(unknown)} for plugin declaration")
    where = f"{entry['group']}:{entry['artifact']}"
    return DeclaredPlugin(
        group=str(entry["group"]),
        artifact=str(entry["artifact"]),
        version=str(entry["version"]) if entry.get("version") is not None else None,
        executions=_parse_executions(entry.get("executions"), where),
        goals=_parse_goals(entry.get("goals"), where),
    )


def build_registry(payload: Mapping[str, Any]) -> PluginRegistry:
    """Create a registry from an already-parsed descriptor mapping."""

    registry = PluginRegistry()
    try:
        for entry in payload.get("plugins") or ():
            registry.register(_validate(entry))
        for entry in payload.get("plugin_management") or ():
            registry.register(_validate(entry), managed=True)
    except ValueError as exc:
        raise ProjectFileError(str(exc)) from exc
    return registry


def load_project(path: Path) -> ProjectDescriptor:
    """Load the project descriptor located at *path*."""

    payload = read_yaml(path, "Project descriptor")
    registry = build_registry(payload)
    if not len(registry):
        raise ProjectFileError(
            f"Project descriptor {path} does not declare any plugins under 'plugins'"
        )
    return ProjectDescriptor(registry=registry)
