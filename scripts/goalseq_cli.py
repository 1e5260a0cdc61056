"""Command line interface for goalseq."""
from __future__ import annotations

import argparse
import logging
import logging.config
import os
from pathlib import Path
from typing import List, Optional

import yaml

from goalseq import Settings, StepRunner, create_default_context
from goalseq.core import SequenceError, StepSpec
from goalseq.executors import DryRunExecutor
from goalseq.project import load_project, load_sequence

logger = logging.getLogger(__name__)


def load_environment() -> None:
    candidates = []
    if env_file := os.getenv("ENV_FILE"):
        candidates.append(Path(env_file))
    candidates.append(Path(".env"))

    for path in candidates:
        if not path.exists():
            continue
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, _, value = line.partition("=")
                os.environ.setdefault(key.strip(), value.strip().strip('"'))


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging using YAML/INI files or basic configuration."""

    config_candidates = []
    if config_env := os.getenv("LOGGING_CONFIG"):
        config_candidates.append(Path(config_env))
    config_candidates.extend(
        Path(name) for name in ("logging.yaml", "logging.yml", "logging.ini")
    )

    for config_path in config_candidates:
        if not config_path.exists():
            continue
        suffix = config_path.suffix.lower()
        try:
            if suffix in {".ini", ".cfg"}:
                logging.config.fileConfig(config_path, disable_existing_loggers=False)
            elif suffix in {".yaml", ".yml"}:
                with config_path.open("r", encoding="utf-8") as handle:
                    logging.config.dictConfig(yaml.safe_load(handle))
            else:
                print(f"Skipping unsupported logging config {config_path}.")
                continue
            return
        except (OSError, ValueError, TypeError, KeyError, yaml.YAMLError) as exc:
            print(
                f"Failed to load logging config {config_path}: {exc}. Falling back to basic logging."
            )
            break

    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _settings(args: argparse.Namespace) -> Settings:
    settings = Settings.load()
    if getattr(args, "project", None):
        settings.project_file = Path(args.project)
    if getattr(args, "steps", None):
        settings.steps_file = Path(args.steps)
    if getattr(args, "sequence_id", None):
        settings.sequence_id = args.sequence_id
    if getattr(args, "label", None):
        settings.label = args.label
    return settings


def command_run(args: argparse.Namespace) -> int:
    settings = _settings(args)
    try:
        project = load_project(settings.project_file)
        sequence = load_sequence(settings.steps_file)
        runner = StepRunner(
            project.registry,
            project,
            context=create_default_context(settings),
            label=settings.label or sequence.label,
        )
        logger.info(
            "Running %d step(s) from %s against %s",
            len(sequence.steps),
            settings.steps_file,
            settings.project_file,
        )
        runner.run(sequence.steps, DryRunExecutor())
    except SequenceError as exc:
        print(f"Error: {exc}")
        return 1
    return 0


def command_plugins(args: argparse.Namespace) -> int:
    settings = _settings(args)
    try:
        project = load_project(settings.project_file)
    except SequenceError as exc:
        print(f"Error: {exc}")
        return 1
    print("Declared plugins:")
    for plugin in project.registry.plugins():
        goals = ", ".join(plugin.goals) or "-"
        print(f"- {plugin.key}:{plugin.version or '?'} goals: {goals}")
    managed = project.registry.managed_plugins()
    if managed:
        print("Plugin management:")
        for plugin in managed:
            print(f"- {plugin.key}:{plugin.version or '?'}")
    return 0


def command_resolve(args: argparse.Namespace) -> int:
    settings = _settings(args)
    try:
        project = load_project(settings.project_file)
        runner = StepRunner(project.registry, project)
        for reference, target in zip(
            args.references, runner.plan([StepSpec(coordinates=ref) for ref in args.references])
        ):
            print(f"{reference} -> {target}")
    except SequenceError as exc:
        print(f"Error: {exc}")
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run declared plugin goals in sequence.")
    parser.add_argument("--project", help="Project descriptor (YAML).")
    parser.add_argument("--log-level", help="Override LOG_LEVEL.")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    parser_run = subparsers.add_parser("run", help="Run the declared steps")
    parser_run.add_argument("--steps", help="Step declarations (YAML).")
    parser_run.add_argument("--label", help="Label shown in progress lines.")
    parser_run.add_argument("--sequence-id", help="Prefix for generated step ids.")
    parser_run.set_defaults(func=command_run)

    parser_plugins = subparsers.add_parser("plugins", help="List declared plugins")
    parser_plugins.set_defaults(func=command_plugins)

    parser_resolve = subparsers.add_parser("resolve", help="Resolve step references")
    parser_resolve.add_argument("references", nargs="+", help="e.g. resources:copy-resources@docs")
    parser_resolve.set_defaults(func=command_resolve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_environment()
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover - entry point for CLI usage
    raise SystemExit(main())
