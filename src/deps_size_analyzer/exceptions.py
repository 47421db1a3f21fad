"""Custom exceptions for the dependency size analyzer."""


class DependencyResolutionError(Exception):
    """Base exception for dependency resolution failures."""


class DependencyNotFoundError(DependencyResolutionError):
    """Raised when no configured repository serves a POM for a coordinate."""

    def __init__(self, dependency_id: str) -> None:
        super().__init__(f"Dependency {dependency_id} is not found")
        self.dependency_id = dependency_id


class DependencyDownloadError(DependencyResolutionError):
    """Raised when a parent POM cannot be downloaded or decoded."""

    def __init__(self, dependency_id: str, cause: Exception) -> None:
        super().__init__(f"Failed to download {dependency_id}: {cause}")
        self.dependency_id = dependency_id
        self.__cause__ = cause


class PomParseError(DependencyResolutionError):
    """Raised when a POM document cannot be parsed."""


class PomEmptyError(PomParseError):
    """Raised when a POM document was fetched but has no content."""


class IllegalDependencyFormatError(DependencyResolutionError):
    """Raised when a coordinate does not follow the Gradle notation."""

    def __init__(self, dependency: str) -> None:
        super().__init__(
            f"Format of {dependency!r} is invalid. Please use the Gradle notation (group:artifact:version)."
        )
        self.dependency = dependency


class NoVersionDependencyError(DependencyResolutionError):
    """Raised when a managed dependency has no version that can be inferred."""

    def __init__(self, project_id: str, dependency_id: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Dependency management of {project_id} has no version of {dependency_id}"
        )
        self.project_id = project_id
        self.dependency_id = dependency_id


class UnresolvedDependencyError(NoVersionDependencyError):
    """Raised when a direct dependency has neither a managed version nor a known property."""

    def __init__(self, project_id: str, dependency_id: str) -> None:
        super().__init__(
            project_id,
            dependency_id,
            f"Can't resolve the version of {dependency_id} declared by {project_id}",
        )


class DependencyCycleError(DependencyResolutionError):
    """Raised when a coordinate is reached again while it is still being resolved."""

    def __init__(self, path: tuple[str, ...], dependency_id: str) -> None:
        cycle = " -> ".join((*path, dependency_id))
        super().__init__(f"Dependency cycle detected: {cycle}")
        self.path = path
        self.dependency_id = dependency_id
