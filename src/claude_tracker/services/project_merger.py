"""Merge scanned projects from both sources by resolved filesystem path."""

import logging
from dataclasses import replace

from claude_tracker.types import ScannedProject
from claude_tracker.utils.path_codec import normalize_path

logger = logging.getLogger(__name__)


def merge_projects(*groups: list[ScannedProject]) -> list[ScannedProject]:
    """Combine containers that resolve to the same normalized path.

    The first container seen for a path keeps its id and dir; later ones
    contribute their session handles and sources. Containers whose path
    could not be resolved simply never collide and stay separate.
    Output follows first-appearance order.
    """
    by_path: dict[str, ScannedProject] = {}

    for group in groups:
        for project in group:
            key = normalize_path(project.dir)
            existing = by_path.get(key)
            if existing is None:
                by_path[key] = replace(
                    project,
                    sources=list(project.sources),
                    session_handles=list(project.session_handles),
                )
                continue

            logger.debug("Merging %s into %s (%s)", project.id, existing.id, key)
            existing.session_handles.extend(project.session_handles)
            for source in project.sources:
                if source not in existing.sources:
                    existing.sources.append(source)

    return list(by_path.values())
