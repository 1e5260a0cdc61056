"""Sequential step runner for goalseq."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .config_tree import effective, merge
from .errors import (
    GoalNotFoundError,
    ParameterBindingError,
    PluginNotConfiguredError,
    SequenceError,
    StepExecutionError,
    StepParameterError,
)
from .formatting import format_coordinates, format_duration
from .registry import GoalMetadataProvider, PluginRegistry
from .resolver import CoordinateResolver
from .step import ExecutionRecord, Executor, ResolvedTarget, SequenceContext, StepSpec

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


@dataclass(slots=True)
class SequenceOutcome:
    """Records produced by a run, in step order."""

    records: List[ExecutionRecord] = field(default_factory=list)
    elapsed_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return all(record.status != "failed" for record in self.records)

    @property
    def executed(self) -> List[ExecutionRecord]:
        return [record for record in self.records if not record.skipped]


class StepRunner:
    """Resolve and execute declared steps one after another."""

    def __init__(
        self,
        registry: PluginRegistry,
        goals: Optional[GoalMetadataProvider] = None,
        *,
        context: Optional[SequenceContext] = None,
        label: Optional[str] = None,
    ) -> None:
        self._registry = registry
        self._goals = goals if goals is not None else registry
        self._resolver = CoordinateResolver(registry)
        self._context = context or SequenceContext()
        self._label = label

    @property
    def resolver(self) -> CoordinateResolver:
        return self._resolver

    def _label_prefix(self) -> str:
        return f"'{self._label}' " if self._label else ""

    def run(self, steps: Sequence[StepSpec], executor: Executor) -> SequenceOutcome:
        """Run each step in *steps* with *executor*, stopping at the first failure."""

        outcome = SequenceOutcome()
        if not steps:
            logger.info("No steps defined - nothing to do.")
            return outcome

        started = time.monotonic()
        for index, step in enumerate(steps, start=1):
            display_id = step.id or f"{self._context.sequence_id}-{index}"
            try:
                self._run_step(index, display_id, step, executor, outcome)
            except SequenceError as exc:
                outcome.elapsed_ms = _elapsed_ms(started)
                exc.outcome = outcome
                if exc.index is None:
                    exc.locate(index, display_id)
                    logger.error("%s", exc)
                raise
        outcome.elapsed_ms = _elapsed_ms(started)
        logger.info(
            "---- %s: %s%d step(s) completed in %s",
            self._context.name,
            self._label_prefix(),
            len(outcome.records),
            format_duration(outcome.elapsed_ms),
        )
        return outcome

    def _run_step(
        self,
        index: int,
        display_id: str,
        step: StepSpec,
        executor: Executor,
        outcome: SequenceOutcome,
    ) -> None:
        target = self._resolver.resolve(step)

        plugin = self._registry.lookup(target.group, target.artifact)
        if plugin is None:
            raise PluginNotConfiguredError(f"Plugin {target.key} is not configured in the project")
        logger.debug("Found plugin %s for step %d", plugin.key, index)

        descriptor = self._goals.describe_goal(target.group, target.artifact, target.goal)
        if descriptor is None:
            raise GoalNotFoundError(f"Goal '{target.goal}' not found on plugin {target.key}")

        step_configuration = self._resolver.step_configuration(step, target)
        configuration = effective(merge(step_configuration, descriptor.default_configuration))
        if configuration is not None:
            logger.debug("Applying merged configuration for %s: %s", display_id, configuration)
        else:
            logger.debug("No configuration provided for %s; using goal defaults", display_id)

        logger.info(
            "---- %s: %s%sstep %d (%s) %s starting",
            self._context.name,
            self._label_prefix(),
            "SKIPPING " if step.skip else "",
            index,
            display_id,
            format_coordinates(target, step.configuration),
        )
        record = ExecutionRecord(
            index=index,
            display_id=display_id,
            target=target,
            configuration=configuration,
            skipped=step.skip,
            started_at=datetime.now(timezone.utc),
        )
        outcome.records.append(record)
        started = time.monotonic()
        try:
            if not step.skip:
                # Executors get their own copy so declared defaults stay untouched
                handed = configuration.copy() if configuration is not None else None
                record.result = executor.execute(target, handed, display_id)
        except ParameterBindingError as exc:
            self._fail(record, started, exc)
            logger.error("Parameter injection failed for %s: %s", target.goal, exc)
            raise StepParameterError(
                f"Parameter injection failed for step {index} ({display_id}) "
                f"{target.artifact}:{target.goal}: {exc}",
                index,
                display_id,
                target,
            ) from exc
        except Exception as exc:
            self._fail(record, started, exc)
            logger.error("Execution failed for %s: %s", target.goal, exc)
            raise StepExecutionError(
                f"Failed to execute {target.artifact}:{target.goal} "
                f"(step {index}, {display_id}): {exc}",
                index,
                display_id,
                target,
            ) from exc

        record.elapsed_ms = _elapsed_ms(started)
        record.completed_at = datetime.now(timezone.utc)
        record.status = "skipped" if step.skip else "success"
        logger.info(
            "---- %s: %sstep %d (%s) completed in %s",
            self._context.name,
            self._label_prefix(),
            index,
            display_id,
            format_duration(record.elapsed_ms),
        )

    @staticmethod
    def _fail(record: ExecutionRecord, started: float, exc: Exception) -> None:
        record.elapsed_ms = _elapsed_ms(started)
        record.completed_at = datetime.now(timezone.utc)
        record.status = "failed"
        record.error = str(exc)

    def plan(self, steps: Sequence[StepSpec]) -> List[ResolvedTarget]:
        """Resolve every step without executing anything."""

        return [self._resolver.resolve(step) for step in steps]


__all__ = ["SequenceOutcome", "StepRunner"]
