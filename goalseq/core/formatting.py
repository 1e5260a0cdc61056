"""Display helpers for progress lines."""
from __future__ import annotations

from typing import Optional

from .config_tree import ConfigTree
from .step import ResolvedTarget

PLUGIN_PREFIX = "maven-"
PLUGIN_SUFFIX = "-plugin"
THIRD_PARTY_SUFFIX = "-maven-plugin"
OVERLAY_MARKER = " (overlay configuration used)"


def format_duration(elapsed_ms: int) -> str:
    """Render *elapsed_ms* as ``1h 2m 3s``, ``4.567s`` or ``45s``."""

    elapsed_ms = max(int(elapsed_ms), 0)
    total_seconds, millis = divmod(elapsed_ms, 1000)
    minutes_total, seconds = divmod(total_seconds, 60)
    hours, minutes = divmod(minutes_total, 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if hours > 0 or minutes > 0:
        parts.append(f"{minutes}m")
    if hours == 0 and minutes == 0 and millis > 0:
        # Milliseconds only below one minute
        parts.append(f"{seconds}.{millis:03d}s")
    else:
        parts.append(f"{seconds}s")
    return " ".join(parts)


def short_name(artifact: str) -> Optional[str]:
    """Return ``foo`` for ``maven-foo-plugin`` or ``foo-maven-plugin``."""

    if (
        artifact.startswith(PLUGIN_PREFIX)
        and artifact.endswith(PLUGIN_SUFFIX)
        and len(artifact) > len(PLUGIN_PREFIX) + len(PLUGIN_SUFFIX)
    ):
        return artifact[len(PLUGIN_PREFIX):-len(PLUGIN_SUFFIX)]
    if artifact.endswith(THIRD_PARTY_SUFFIX) and len(artifact) > len(THIRD_PARTY_SUFFIX):
        return artifact[: -len(THIRD_PARTY_SUFFIX)]
    return None


def format_coordinates(target: ResolvedTarget, overlay: Optional[ConfigTree] = None) -> str:
    """Short human-readable form of *target* for progress lines."""

    name = short_name(target.artifact)
    if name is not None:
        text = f"{name}:{target.goal}"
    else:
        text = f"{target.group}:{target.artifact}:{target.version}:{target.goal}"
    if target.execution_id:
        text += f"@{target.execution_id}"
    if overlay is not None and not overlay.is_empty:
        text += OVERLAY_MARKER
    return text


__all__ = ["format_coordinates", "format_duration", "short_name"]
