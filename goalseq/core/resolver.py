"""Resolution of step references into fully-qualified targets."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from .config_tree import ConfigTree, merge
from .errors import (
    AmbiguousPluginError,
    ConflictingSpecificationError,
    MalformedReferenceError,
    PluginNotFoundError,
    UnknownExecutionError,
    VersionUnresolvedError,
)
from .formatting import PLUGIN_PREFIX, PLUGIN_SUFFIX, THIRD_PARTY_SUFFIX
from .registry import DeclaredPlugin, PluginRegistry
from .step import ResolvedTarget, StepSpec, is_present

logger = logging.getLogger(__name__)

EXPECTED_FORMAT = "<group>:<artifact>:<goal>[@<executionId>] or <identifier>:<goal>[@<executionId>]"


@dataclass(slots=True, frozen=True)
class ParsedReference:
    """A terse reference split into its colon-separated parts."""

    parts: Tuple[str, ...]
    execution_id: Optional[str] = None


def candidate_artifact_ids(identifier: str) -> FrozenSet[str]:
    """Return the artifact names a short plugin identifier may stand for."""

    candidates = {identifier}
    if not identifier.startswith(PLUGIN_PREFIX):
        candidates.add(f"{PLUGIN_PREFIX}{identifier}{PLUGIN_SUFFIX}")
    if not identifier.endswith(THIRD_PARTY_SUFFIX):
        candidates.add(f"{identifier}{THIRD_PARTY_SUFFIX}")
    return frozenset(candidates)


def parse_reference(text: str) -> ParsedReference:
    """Split ``a:b[:c][@id]`` into parts and an optional execution id."""

    reference = text.strip()
    execution_id: Optional[str] = None
    if "@" in reference:
        reference, _, suffix = reference.rpartition("@")
        execution_id = suffix.strip()
        if not execution_id:
            raise MalformedReferenceError(
                f"Missing execution id after '@' in '{text}'. Expected: {EXPECTED_FORMAT}"
            )
    parts = tuple(part.strip() for part in reference.split(":"))
    if len(parts) not in (2, 3) or not all(parts):
        raise MalformedReferenceError(
            f"Invalid plugin coordinates '{text}'. Expected: {EXPECTED_FORMAT}"
        )
    return ParsedReference(parts=parts, execution_id=execution_id)


class CoordinateResolver:
    """Resolve steps against the plugins declared in a project."""

    def __init__(self, registry: PluginRegistry) -> None:
        self._registry = registry

    def resolve(self, step: StepSpec) -> ResolvedTarget:
        """Return the fully-qualified target for *step*."""

        if step.has_coordinates:
            if step.has_explicit_fields():
                raise ConflictingSpecificationError(
                    "Invalid step configuration: configure either coordinates or individual "
                    "fields (group, artifact, goal, ...), not both"
                )
            group, artifact, goal, version, execution_id = self._from_reference(step.coordinates)
        else:
            group, artifact, goal, version, execution_id = self._from_fields(step)

        if not is_present(version):
            version = self._declared_version(group, artifact)
        target = ResolvedTarget(
            group=group,
            artifact=artifact,
            goal=goal,
            version=version,
            execution_id=execution_id or None,
        )
        logger.debug("Resolved step %r to %s", step.coordinates or step.id, target)
        return target

    def step_configuration(self, step: StepSpec, target: ResolvedTarget) -> Optional[ConfigTree]:
        """Return the step configuration with its named execution layered beneath it."""

        if not target.execution_id:
            return step.configuration
        plugin = self._registry.lookup(target.group, target.artifact)
        if plugin is None or plugin.executions is None:
            return step.configuration
        execution = plugin.execution(target.execution_id)
        if execution is None:
            known = ", ".join(item.id for item in plugin.executions) or "none"
            raise UnknownExecutionError(
                f"Execution '{target.execution_id}' is not declared for {plugin.key} "
                f"(declared: {known})"
            )
        logger.debug("Layering configuration of execution %s beneath step", execution.id)
        return merge(step.configuration, execution.configuration)

    def find_plugins(self, identifier: str) -> List[DeclaredPlugin]:
        """Return declared plugins whose artifact matches *identifier*."""

        candidates = candidate_artifact_ids(identifier)
        matches: Dict[str, DeclaredPlugin] = {}
        for plugin in self._registry.plugins() + self._registry.managed_plugins():
            if plugin.artifact in candidates and plugin.key not in matches:
                matches[plugin.key] = plugin
        return list(matches.values())

    def _from_reference(self, text: str):
        parsed = parse_reference(text)
        if len(parsed.parts) == 3:
            group, artifact, goal = parsed.parts
            return group, artifact, goal, None, parsed.execution_id

        identifier, goal = parsed.parts
        matches = self.find_plugins(identifier)
        if not matches:
            raise PluginNotFoundError(identifier)
        if len(matches) > 1:
            raise AmbiguousPluginError(identifier, tuple(plugin.key for plugin in matches))
        plugin = matches[0]
        return plugin.group, plugin.artifact, goal, plugin.version, parsed.execution_id

    def _from_fields(self, step: StepSpec):
        missing = [
            name
            for name, value in (("group", step.group), ("artifact", step.artifact), ("goal", step.goal))
            if not is_present(value)
        ]
        if missing:
            raise MalformedReferenceError(
                f"Step is missing {', '.join(missing)}; "
                f"set coordinates ({EXPECTED_FORMAT}) or group, artifact and goal"
            )
        execution_id = step.execution_id.strip() if is_present(step.execution_id) else None
        return (
            step.group.strip(),
            step.artifact.strip(),
            step.goal.strip(),
            step.version.strip() if is_present(step.version) else None,
            execution_id,
        )

    def _declared_version(self, group: str, artifact: str) -> str:
        plugin = self._registry.lookup(group, artifact)
        if plugin is None or not is_present(plugin.version):
            raise VersionUnresolvedError(
                "Version not specified in coordinates and no version found in the project "
                f"for {group}:{artifact}"
            )
        return plugin.version


__all__ = [
    "CoordinateResolver",
    "ParsedReference",
    "candidate_artifact_ids",
    "parse_reference",
]
