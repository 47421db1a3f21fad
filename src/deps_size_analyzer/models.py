"""Pydantic models for Maven coordinates, projects and analysis results."""

from __future__ import annotations

import re
from enum import Enum
from functools import cached_property

from pydantic import BaseModel, ConfigDict, Field

from deps_size_analyzer.exceptions import IllegalDependencyFormatError


_COORDINATE_RE = re.compile(r"([^:]+):([^:]+):([^:]+)")
_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

PROJECT_VERSION_PLACEHOLDER = "project.version"


class DependencyScope(str, Enum):
    """Maven dependency scopes."""

    COMPILE = "compile"
    PROVIDED = "provided"
    RUNTIME = "runtime"
    TEST = "test"
    SYSTEM = "system"
    IMPORT = "import"

    @classmethod
    def parse(cls, value: str | None) -> DependencyScope | None:
        """Return the scope matching `value` case-insensitively, or None."""
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


IGNORED_SCOPES = frozenset({DependencyScope.TEST, DependencyScope.PROVIDED, DependencyScope.SYSTEM})


class Dependency(BaseModel):
    """A Maven dependency entry (coordinates plus scope).

    Identity is `(group_id, artifact_id, version)`; the scope is carried along
    but two entries differing only in scope compare equal.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str | None = None
    scope: DependencyScope = DependencyScope.COMPILE

    @classmethod
    def parse(cls, coordinate: str) -> Dependency:
        """Parse a `group:artifact:version` coordinate.

        Raises:
            IllegalDependencyFormatError: If the string has any other shape.
        """
        match = _COORDINATE_RE.fullmatch(coordinate or "")
        if match is None:
            raise IllegalDependencyFormatError(coordinate)
        group_id, artifact_id, version = match.groups()
        return cls(group_id=group_id, artifact_id=artifact_id, version=version)

    @property
    def artifact_name(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def full_id(self) -> str:
        """Return the Gradle-style `group:artifact:version` id."""
        return f"{self.artifact_name}:{self.version}"

    @property
    def version_placeholder(self) -> str | None:
        """Return `name` when the version is exactly `${name}`, otherwise None."""
        if self.version is None:
            return None
        match = _PLACEHOLDER_RE.fullmatch(self.version)
        return match.group(1) if match else None

    @property
    def needs_version(self) -> bool:
        return self.version is None or self.version_placeholder is not None

    def with_version(self, version: str | None) -> Dependency:
        return self.model_copy(update={"version": version})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dependency):
            return NotImplemented
        return (self.group_id, self.artifact_id, self.version) == (
            other.group_id,
            other.artifact_id,
            other.version,
        )

    def __hash__(self) -> int:
        return hash((self.group_id, self.artifact_id, self.version))

    def __str__(self) -> str:
        return f"{self.full_id} ({self.scope.value})"


class Project(BaseModel):
    """A parsed Maven project model.

    `group_id` and `version` may be absent, in which case they are inherited
    from `parent`. A flattened project has no parent and a resolved project
    additionally has an empty `dependency_management`.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str | None = None
    artifact_id: str = Field(..., min_length=1)
    version: str | None = None
    parent: Dependency | None = None
    properties: dict[str, str] = Field(default_factory=dict)
    dependencies: list[Dependency] = Field(default_factory=list)
    dependency_management: list[Dependency] = Field(default_factory=list)

    @property
    def inherited_group(self) -> str | None:
        if self.group_id is not None:
            return self.group_id
        return self.parent.group_id if self.parent is not None else None

    @property
    def inherited_version(self) -> str | None:
        if self.version is not None:
            return self.version
        return self.parent.version if self.parent is not None else None

    @property
    def full_id(self) -> str:
        return f"{self.inherited_group}:{self.artifact_id}:{self.inherited_version}"

    def coordinate(self) -> Dependency:
        """Return the project's own identity as a dependency entry."""
        return Dependency(
            group_id=self.inherited_group,
            artifact_id=self.artifact_id,
            version=self.inherited_version,
        )


class AnalysisNode(BaseModel):
    """A node of the analyzed dependency tree.

    Equality is deep and structural over `dependency`, `size` and
    `children`; `pom_url` does not take part. Identical subtrees reached
    through different branches therefore collapse into a single entry of a
    parent's `children` set.
    """

    model_config = ConfigDict(frozen=True)

    dependency: Dependency
    pom_url: str
    children: frozenset[AnalysisNode] = frozenset()
    size: int = Field(default=0, ge=0)

    @cached_property
    def total_size(self) -> int:
        """Own size plus the own size of every descendant."""
        return self.size + sum(child.total_size for child in self.children)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnalysisNode):
            return NotImplemented
        if self is other:
            return True
        return (
            self.dependency == other.dependency
            and self.size == other.size
            and self.children == other.children
        )

    def __hash__(self) -> int:
        return hash((self.dependency, self.size, self.children))

    def __str__(self) -> str:
        from deps_size_analyzer.report import format_report

        return format_report(self)
