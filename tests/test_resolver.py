from __future__ import annotations

import pytest

from goalseq.core.config_tree import ConfigTree
from goalseq.core.errors import (
    AmbiguousPluginError,
    ConflictingSpecificationError,
    MalformedReferenceError,
    PluginNotFoundError,
    UnknownExecutionError,
    VersionUnresolvedError,
)
from goalseq.core.registry import DeclaredPlugin, NamedExecution, PluginRegistry
from goalseq.core.resolver import CoordinateResolver, candidate_artifact_ids, parse_reference
from goalseq.core.step import StepSpec


def test_candidate_artifact_ids_follow_naming_conventions() -> None:
    assert candidate_artifact_ids("foo") == {"foo", "maven-foo-plugin", "foo-maven-plugin"}
    assert candidate_artifact_ids("maven-foo-plugin") == {
        "maven-foo-plugin",
        "maven-foo-plugin-maven-plugin",
    }
    assert candidate_artifact_ids("foo-maven-plugin") == {
        "foo-maven-plugin",
        "maven-foo-maven-plugin-plugin",
    }


def test_parse_reference_splits_on_last_at_sign() -> None:
    parsed = parse_reference(" org.example:tool-maven-plugin:gen @ first@second ")

    assert parsed.parts == ("org.example", "tool-maven-plugin", "gen @ first")
    assert parsed.execution_id == "second"


@pytest.mark.parametrize("reference", ["resources", "a:b:c:d", "a::b", "resources:copy@", ":goal"])
def test_parse_reference_rejects_malformed(reference: str) -> None:
    with pytest.raises(MalformedReferenceError):
        parse_reference(reference)


def test_three_part_reference_takes_version_from_declared_plugin(registry) -> None:
    resolver = CoordinateResolver(registry)

    target = resolver.resolve(
        StepSpec(coordinates="org.codehaus.mojo:exec-maven-plugin:java")
    )

    assert (target.group, target.artifact, target.goal, target.version) == (
        "org.codehaus.mojo",
        "exec-maven-plugin",
        "java",
        "3.1.0",
    )
    assert target.execution_id is None


def test_short_identifier_resolves_single_match(registry) -> None:
    target = CoordinateResolver(registry).resolve(
        StepSpec(coordinates="resources:copy-resources@copy-docs")
    )

    assert target.key == "org.apache.maven.plugins:maven-resources-plugin"
    assert target.version == "3.3.1"
    assert target.execution_id == "copy-docs"


def test_short_identifier_searches_plugin_management(registry) -> None:
    target = CoordinateResolver(registry).resolve(StepSpec(coordinates="antrun:run"))

    assert target.artifact == "maven-antrun-plugin"
    assert target.version == "3.1.0"


def test_short_identifier_matching_two_plugins_is_ambiguous() -> None:
    registry = PluginRegistry.from_plugins(
        [
            DeclaredPlugin(group="org.a", artifact="maven-foo-plugin", version="1"),
            DeclaredPlugin(group="org.b", artifact="foo-maven-plugin", version="2"),
        ]
    )

    with pytest.raises(AmbiguousPluginError) as excinfo:
        CoordinateResolver(registry).resolve(StepSpec(coordinates="foo:bar"))

    assert excinfo.value.identifier == "foo"
    assert "group:artifact:goal" in str(excinfo.value)


def test_plugin_declared_in_build_and_management_is_not_ambiguous() -> None:
    plugin = DeclaredPlugin(group="org.a", artifact="maven-foo-plugin", version="1")
    registry = PluginRegistry.from_plugins([plugin], managed=[plugin])

    target = CoordinateResolver(registry).resolve(StepSpec(coordinates="foo:bar"))

    assert target.artifact == "maven-foo-plugin"


def test_unknown_identifier_fails(registry) -> None:
    with pytest.raises(PluginNotFoundError) as excinfo:
        CoordinateResolver(registry).resolve(StepSpec(coordinates="unknown:bar"))

    assert excinfo.value.identifier == "unknown"


def test_reference_and_explicit_fields_conflict(registry) -> None:
    step = StepSpec(coordinates="resources:resources", goal="resources")

    with pytest.raises(ConflictingSpecificationError):
        CoordinateResolver(registry).resolve(step)


def test_explicit_fields_resolve_with_version_fallback(registry) -> None:
    step = StepSpec(group="org.apache.maven.plugins", artifact="maven-jar-plugin", goal="jar")

    target = CoordinateResolver(registry).resolve(step)

    assert str(target) == "org.apache.maven.plugins:maven-jar-plugin:3.3.0:jar"


def test_explicit_fields_require_goal(registry) -> None:
    with pytest.raises(MalformedReferenceError):
        CoordinateResolver(registry).resolve(
            StepSpec(group="org.apache.maven.plugins", artifact="maven-jar-plugin")
        )


def test_missing_version_fails() -> None:
    registry = PluginRegistry.from_plugins([DeclaredPlugin(group="org.a", artifact="tool")])

    with pytest.raises(VersionUnresolvedError):
        CoordinateResolver(registry).resolve(StepSpec(coordinates="org.a:tool:gen"))
    with pytest.raises(VersionUnresolvedError):
        CoordinateResolver(registry).resolve(StepSpec(coordinates="org.b:other:gen"))


def test_execution_configuration_is_layered_beneath_step(registry) -> None:
    resolver = CoordinateResolver(registry)
    step = StepSpec(
        coordinates="resources:copy-resources@copy-docs",
        configuration=ConfigTree.from_mapping({"encoding": "UTF-16"}),
    )

    configuration = resolver.step_configuration(step, resolver.resolve(step))

    assert configuration.to_mapping() == {"encoding": "UTF-16", "outputDirectory": "target/docs"}


def test_execution_configuration_without_step_overlay(registry) -> None:
    resolver = CoordinateResolver(registry)
    step = StepSpec(coordinates="resources:copy-resources@copy-docs")

    configuration = resolver.step_configuration(step, resolver.resolve(step))

    assert configuration.to_mapping() == {"outputDirectory": "target/docs", "encoding": "UTF-8"}


def test_plugin_without_executions_uses_step_configuration(registry) -> None:
    resolver = CoordinateResolver(registry)
    overlay = ConfigTree.from_mapping({"mainClass": "app.Main"})
    step = StepSpec(coordinates="exec:java@anything", configuration=overlay)

    assert resolver.step_configuration(step, resolver.resolve(step)) is overlay


def test_unknown_execution_id_fails(registry) -> None:
    resolver = CoordinateResolver(registry)
    step = StepSpec(coordinates="jar:jar@missing")

    with pytest.raises(UnknownExecutionError):
        resolver.step_configuration(step, resolver.resolve(step))


def test_registry_rejects_duplicate_declarations() -> None:
    registry = PluginRegistry()
    registry.register(DeclaredPlugin(group="org.a", artifact="tool", version="1"))

    with pytest.raises(ValueError):
        registry.register(DeclaredPlugin(group="org.a", artifact="tool", version="2"))

    registry.register(
        DeclaredPlugin(
            group="org.a",
            artifact="tool",
            version="2",
            executions=(NamedExecution(id="x"),),
        ),
        managed=True,
    )
    assert len(registry) == 2
    assert registry.lookup("org.a", "tool").version == "1"
