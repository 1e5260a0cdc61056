from __future__ import annotations

import pytest

from goalseq.core.config_tree import ConfigTree
from goalseq.core.registry import DeclaredPlugin, GoalDescriptor, NamedExecution, PluginRegistry
from goalseq.core.step import SequenceContext
from goalseq.executors import RecordingExecutor


@pytest.fixture
def registry() -> PluginRegistry:
    """A project declaring a few plugins, one only under plugin management."""

    resources = DeclaredPlugin(
        group="org.apache.maven.plugins",
        artifact="maven-resources-plugin",
        version="3.3.1",
        executions=(
            NamedExecution(
                id="copy-docs",
                configuration=ConfigTree.from_mapping(
                    {"outputDirectory": "target/docs", "encoding": "UTF-8"}
                ),
            ),
        ),
        goals={
            "copy-resources": GoalDescriptor(
                name="copy-resources",
                default_configuration=ConfigTree.from_mapping(
                    {"encoding": "ISO-8859-1", "overwrite": False}
                ),
            ),
            "resources": GoalDescriptor(name="resources"),
        },
    )
    exec_plugin = DeclaredPlugin(
        group="org.codehaus.mojo",
        artifact="exec-maven-plugin",
        version="3.1.0",
        goals={"java": GoalDescriptor(name="java"), "exec": GoalDescriptor(name="exec")},
    )
    jar = DeclaredPlugin(
        group="org.apache.maven.plugins",
        artifact="maven-jar-plugin",
        version="3.3.0",
        executions=(),
        goals={"jar": GoalDescriptor(name="jar")},
    )
    managed = DeclaredPlugin(
        group="org.apache.maven.plugins",
        artifact="maven-antrun-plugin",
        version="3.1.0",
        goals={"run": GoalDescriptor(name="run")},
    )
    return PluginRegistry.from_plugins([resources, exec_plugin, jar], managed=[managed])


@pytest.fixture
def context() -> SequenceContext:
    return SequenceContext(sequence_id="build-all", name="run")


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()
