"""Executors usable without a host build tool."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from goalseq.core.config_tree import ConfigTree
from goalseq.core.errors import ParameterBindingError
from goalseq.core.step import ResolvedTarget

logger = logging.getLogger(__name__)


class DryRunExecutor:
    """Log what would be executed instead of running it."""

    def execute(
        self, target: ResolvedTarget, configuration: Optional[ConfigTree], display_id: str
    ) -> None:
        logger.info("[dry-run] %s (%s)", target, display_id)
        if configuration is not None:
            logger.info("[dry-run] configuration: %s", configuration.to_xml())


@dataclass
class RecordingExecutor:
    """Remember every call; optionally fail for selected goals."""

    calls: List[Tuple[ResolvedTarget, Optional[ConfigTree], str]] = field(default_factory=list)
    failing_goals: Set[str] = field(default_factory=set)
    binding_failures: Set[str] = field(default_factory=set)

    def execute(
        self, target: ResolvedTarget, configuration: Optional[ConfigTree], display_id: str
    ) -> str:
        self.calls.append((target, configuration, display_id))
        if target.goal in self.binding_failures:
            raise ParameterBindingError(f"Cannot bind parameters of {target.goal}")
        if target.goal in self.failing_goals:
            raise RuntimeError(f"Goal {target.goal} failed")
        return display_id

    @property
    def display_ids(self) -> List[str]:
        return [display_id for _, _, display_id in self.calls]
