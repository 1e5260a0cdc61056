from __future__ import annotations

from pathlib import Path

import pytest

from scripts import goalseq_cli

PROJECT_YAML = """
plugins:
  - group: org.apache.maven.plugins
    artifact: maven-jar-plugin
    version: 3.3.0
    goals: [jar]
  - group: org.codehaus.mojo
    artifact: exec-maven-plugin
    version: 3.1.0
    goals: [java]
"""


@pytest.fixture
def project_file(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOGGING_CONFIG", raising=False)
    path = tmp_path / "project.yaml"
    path.write_text(PROJECT_YAML, encoding="utf-8")
    return path


def test_run_command_executes_steps(project_file: Path, tmp_path: Path, capsys) -> None:
    steps = tmp_path / "steps.yaml"
    steps.write_text("steps:\n  - jar:jar\n  - exec:java\n", encoding="utf-8")

    code = goalseq_cli.main(["--project", str(project_file), "run", "--steps", str(steps)])

    assert code == 0
    assert capsys.readouterr().out == ""


def test_run_command_reports_errors(project_file: Path, tmp_path: Path, capsys) -> None:
    steps = tmp_path / "steps.yaml"
    steps.write_text("steps:\n  - surefire:test\n", encoding="utf-8")

    code = goalseq_cli.main(["--project", str(project_file), "run", "--steps", str(steps)])

    assert code == 1
    assert "No plugin found in the project for identifier: surefire" in capsys.readouterr().out


def test_resolve_command_prints_targets(project_file: Path, capsys) -> None:
    code = goalseq_cli.main(["--project", str(project_file), "resolve", "exec:java@cli"])

    assert code == 0
    assert capsys.readouterr().out.strip() == (
        "exec:java@cli -> org.codehaus.mojo:exec-maven-plugin:3.1.0:java@cli"
    )


def test_plugins_command_lists_declarations(project_file: Path, capsys) -> None:
    code = goalseq_cli.main(["--project", str(project_file), "plugins"])

    out = capsys.readouterr().out
    assert code == 0
    assert "- org.apache.maven.plugins:maven-jar-plugin:3.3.0 goals: jar" in out
    assert "Plugin management:" not in out


def test_settings_come_from_environment(project_file: Path, monkeypatch) -> None:
    monkeypatch.setenv("GOALSEQ_PROJECT_FILE", str(project_file))
    monkeypatch.setenv("GOALSEQ_SEQUENCE_ID", "nightly")

    settings = goalseq_cli.Settings.load()

    assert settings.project_file == project_file
    assert settings.sequence_id == "nightly"
    assert settings.sequence_name == "run"
