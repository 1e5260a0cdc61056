"""Environment-driven configuration for goalseq."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from goalseq.core.step import DEFAULT_SEQUENCE_ID, DEFAULT_SEQUENCE_NAME


@dataclass(slots=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    project_file: Path
    steps_file: Path
    sequence_id: str
    sequence_name: str
    label: str
    log_level: str

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment variables with sensible defaults."""

        project_file = Path(os.getenv("GOALSEQ_PROJECT_FILE", "goalseq-project.yaml"))
        steps_file = Path(os.getenv("GOALSEQ_STEPS_FILE", "goalseq-steps.yaml"))
        sequence_id = os.getenv("GOALSEQ_SEQUENCE_ID", DEFAULT_SEQUENCE_ID)
        sequence_name = os.getenv("GOALSEQ_SEQUENCE_NAME", DEFAULT_SEQUENCE_NAME)
        label = os.getenv("GOALSEQ_LABEL", "")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        return cls(
            project_file=project_file,
            steps_file=steps_file,
            sequence_id=sequence_id,
            sequence_name=sequence_name,
            label=label,
            log_level=log_level,
        )
