"""Merge a project with its chain of parent POMs."""

from __future__ import annotations

import logging
from collections.abc import Callable

from deps_size_analyzer.exceptions import (
    DependencyCycleError,
    DependencyDownloadError,
    DependencyResolutionError,
)
from deps_size_analyzer.models import Project

logger = logging.getLogger(__name__)

PomLoader = Callable[[str], Project]


def merge_with_parent(project: Project, parent: Project) -> Project:
    """Merge `project` with its already flattened `parent`.

    Rules:
      - groupId/version: the child's own value wins, the parent's fills the gap
      - properties: union, the child's value wins on key collision
      - dependencies and dependencyManagement: child entries first, then the parent's
    """
    return Project(
        group_id=project.group_id if project.group_id is not None else parent.group_id,
        artifact_id=project.artifact_id,
        version=project.version if project.version is not None else parent.version,
        parent=None,
        properties={**parent.properties, **project.properties},
        dependencies=[*project.dependencies, *parent.dependencies],
        dependency_management=[*project.dependency_management, *parent.dependency_management],
    )


def flatten_parents(project: Project, load_pom: PomLoader, chain: tuple[str, ...] = ()) -> Project:
    """Flatten the parent chain of `project` into a single parent-less project.

    Args:
        project: Project as parsed from its POM.
        load_pom: Returns the parsed project for a `group:artifact:version` id.
            Callers pass a memoized loader so shared ancestors are fetched once.
        chain: Ids of the descendants currently being flattened.

    Raises:
        DependencyDownloadError: If a parent POM cannot be fetched or parsed.
        DependencyCycleError: If the parent chain loops back on itself.

    Returns:
        The project itself when it has no parent, otherwise the merged project.
    """
    if project.parent is None:
        return project

    chain = (*chain, project.full_id)
    parent_id = project.parent.full_id
    if parent_id in chain:
        raise DependencyCycleError(chain, parent_id)

    logger.debug(f"Downloading the parent of {project.full_id}")
    try:
        parent = load_pom(parent_id)
    except DependencyResolutionError as exc:
        logger.debug(f"Failed to download the parent of {project.full_id}: {exc}")
        raise DependencyDownloadError(parent_id, exc) from exc

    return merge_with_parent(project, flatten_parents(parent, load_pom, chain))
