"""Declared plugin registry for the goalseq runtime."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from .config_tree import ConfigTree


@dataclass(slots=True, frozen=True)
class GoalDescriptor:
    """Metadata about a goal exposed by a plugin."""

    name: str
    default_configuration: Optional[ConfigTree] = None
    description: str = ""


@dataclass(slots=True, frozen=True)
class NamedExecution:
    """A previously configured invocation of a plugin under an identifier."""

    id: str
    configuration: Optional[ConfigTree] = None
    goals: Tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class DeclaredPlugin:
    """A plugin entry declared in the enclosing project."""

    group: str
    artifact: str
    version: Optional[str] = None
    executions: Optional[Tuple[NamedExecution, ...]] = None
    goals: Mapping[str, GoalDescriptor] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return f"{self.group}:{self.artifact}"

    def execution(self, execution_id: str) -> Optional[NamedExecution]:
        """Return the first named execution called *execution_id*."""

        for execution in self.executions or ():
            if execution.id == execution_id:
                return execution
        return None


class GoalMetadataProvider(Protocol):
    """Looks up goal metadata for a declared plugin."""

    def describe_goal(self, group: str, artifact: str, goal: str) -> Optional[GoalDescriptor]:
        """Return the goal descriptor or ``None`` when the goal is unknown."""


class PluginRegistry:
    """Keeps track of build plugins and plugin-management entries."""

    def __init__(self) -> None:
        self._plugins: Dict[str, DeclaredPlugin] = {}
        self._managed: Dict[str, DeclaredPlugin] = {}

    def register(self, plugin: DeclaredPlugin, managed: bool = False) -> DeclaredPlugin:
        """Register *plugin* in the build section or the management section."""

        target = self._managed if managed else self._plugins
        if plugin.key in target:
            section = "plugin management" if managed else "build plugins"
            raise ValueError(f"Plugin '{plugin.key}' is already declared in {section}")
        target[plugin.key] = plugin
        return plugin

    def lookup(self, group: str, artifact: str) -> Optional[DeclaredPlugin]:
        """Return the build plugin declared for ``group:artifact``."""

        return self._plugins.get(f"{group}:{artifact}")

    def plugins(self) -> List[DeclaredPlugin]:
        return list(self._plugins.values())

    def managed_plugins(self) -> List[DeclaredPlugin]:
        return list(self._managed.values())

    def describe_goal(self, group: str, artifact: str, goal: str) -> Optional[GoalDescriptor]:
        """Describe *goal* from the goals declared on the build plugin."""

        plugin = self.lookup(group, artifact) or self._managed.get(f"{group}:{artifact}")
        if plugin is None:
            return None
        return plugin.goals.get(goal)

    def __len__(self) -> int:
        return len(self._plugins) + len(self._managed)

    @classmethod
    def from_plugins(
        cls, plugins: Sequence[DeclaredPlugin], managed: Sequence[DeclaredPlugin] = ()
    ) -> "PluginRegistry":
        registry = cls()
        for plugin in plugins:
            registry.register(plugin)
        for plugin in managed:
            registry.register(plugin, managed=True)
        return registry


__all__ = [
    "DeclaredPlugin",
    "GoalDescriptor",
    "GoalMetadataProvider",
    "NamedExecution",
    "PluginRegistry",
]
