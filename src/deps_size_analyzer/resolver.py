"""Resolve dependency versions of a flattened project.

Versions come from two sources: the project's merged dependencyManagement
(itself interpolated first) and the project's properties for `${...}`
placeholders. `${project.version}` always means the version of the project
being resolved, even when the managed entry was declared by an ancestor.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from deps_size_analyzer.config import UnresolvedPolicy
from deps_size_analyzer.exceptions import NoVersionDependencyError, UnresolvedDependencyError
from deps_size_analyzer.models import PROJECT_VERSION_PLACEHOLDER, Dependency, Project

logger = logging.getLogger(__name__)


def interpolate(project: Project, dependency: Dependency, properties: Mapping[str, str]) -> Dependency:
    """Substitute a `${name}` version placeholder.

    Raises:
        NoVersionDependencyError: If the version is absent or the property is unknown.
    """
    if dependency.version is None:
        logger.debug(f"Can't find a version info of {dependency} dependency")
        raise NoVersionDependencyError(project.full_id, dependency.full_id)

    placeholder = dependency.version_placeholder
    if placeholder is None:
        return dependency
    if placeholder == PROJECT_VERSION_PLACEHOLDER:
        return dependency.with_version(project.inherited_version)

    version = properties.get(placeholder)
    if version is None:
        logger.debug(f"Can't find a version info of {dependency} dependency")
        raise NoVersionDependencyError(project.full_id, dependency.full_id)
    return dependency.with_version(version)


def resolve_dependency_management(project: Project) -> list[Dependency]:
    return [interpolate(project, dep, project.properties) for dep in project.dependency_management]


def _managed_versions(managed: Iterable[Dependency]) -> dict[str, str | None]:
    # The nearest declaration wins: child entries precede the parent's.
    versions: dict[str, str | None] = {}
    for dep in managed:
        versions.setdefault(dep.artifact_name, dep.version)
    return versions


def resolve_dependency_versions(
    project: Project,
    policy: UnresolvedPolicy = UnresolvedPolicy.FAIL,
) -> Project:
    """Give every dependency of a flattened project a concrete version.

    Args:
        project: A project without parent (see `flatten_parents`).
        policy: FAIL raises on a dependency whose version cannot be found,
            SKIP logs a warning and drops it.

    Raises:
        NoVersionDependencyError: If a dependencyManagement entry cannot be interpolated.
        UnresolvedDependencyError: If a dependency has no resolvable version (FAIL policy).

    Returns:
        A copy of the project with resolved dependencies and no dependencyManagement.
    """
    resolved = [dep for dep in project.dependencies if not dep.needs_version]
    unresolved = [dep for dep in project.dependencies if dep.needs_version]
    if not unresolved:
        return project.model_copy(update={"dependency_management": []})

    managed = _managed_versions(resolve_dependency_management(project))
    found: list[Dependency] = []
    for dep in unresolved:
        if dep.artifact_name in managed:
            found.append(dep.with_version(managed[dep.artifact_name]))
            continue
        try:
            found.append(interpolate(project, dep, project.properties))
        except NoVersionDependencyError:
            if policy is UnresolvedPolicy.SKIP:
                logger.warning(f"Skipping {dep.full_id} of {project.full_id}: version is not resolvable")
                continue
            raise UnresolvedDependencyError(project.full_id, dep.full_id) from None

    return project.model_copy(
        update={"dependencies": [*resolved, *found], "dependency_management": []}
    )
