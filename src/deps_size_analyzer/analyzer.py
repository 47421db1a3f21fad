"""Recursive dependency analysis: turns one coordinate into a sized tree."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from deps_size_analyzer.cache import SingleFlightCache
from deps_size_analyzer.config import AnalyzerConfig, UnresolvedPolicy
from deps_size_analyzer.exceptions import DependencyCycleError
from deps_size_analyzer.flatten import flatten_parents
from deps_size_analyzer.models import IGNORED_SCOPES, AnalysisNode, Dependency, Project
from deps_size_analyzer.parser import parse_pom
from deps_size_analyzer.repository import RepositoryClient, artifact_url
from deps_size_analyzer.resolver import resolve_dependency_versions

logger = logging.getLogger(__name__)


@dataclass
class AnalysisContext:
    """Caches shared by every node of a single `analyze` call.

    poms: coordinate -> (pom url, project as parsed)
    projects: coordinate -> (pom url, flattened project)
    sizes: coordinate -> (own identity, artifact size in bytes)
    network: bounds the repository requests in flight across all worker threads
    """

    poms: SingleFlightCache[str, tuple[str, Project]] = field(default_factory=SingleFlightCache)
    projects: SingleFlightCache[str, tuple[str, Project]] = field(default_factory=SingleFlightCache)
    sizes: SingleFlightCache[str, tuple[Dependency, int]] = field(default_factory=SingleFlightCache)
    network: threading.BoundedSemaphore = field(default_factory=lambda: threading.BoundedSemaphore(1))


class DependencyAnalyzer:
    """Compute the transitive dependency tree and sizes of a Maven artifact.

    Example:
        with RepositoryClient() as client:
            node = DependencyAnalyzer(client).analyze("com.squareup.okhttp3:okhttp:3.12.0")
            print(node)
    """

    def __init__(
        self,
        client: RepositoryClient,
        *,
        max_workers: int = 1,
        unresolved_policy: UnresolvedPolicy = UnresolvedPolicy.FAIL,
        artifact_extension: str = "jar",
    ) -> None:
        self.client = client
        self.max_workers = max(1, max_workers)
        self.unresolved_policy = unresolved_policy
        self.artifact_extension = artifact_extension

    @classmethod
    def from_config(cls, config: AnalyzerConfig) -> DependencyAnalyzer:
        config.validate()
        client = RepositoryClient(config.repositories, timeout=config.timeout)
        return cls(
            client,
            max_workers=config.max_workers,
            unresolved_policy=config.unresolved_policy,
            artifact_extension=config.artifact_extension,
        )

    def analyze(self, coordinate: str) -> AnalysisNode:
        """Analyze `coordinate` (`group:artifact:version`) and its transitive dependencies.

        Raises:
            DependencyResolutionError: On the first failure anywhere in the graph.
        """
        Dependency.parse(coordinate)
        logger.info(f"Analyzing {coordinate}")
        return self._analyze(coordinate, self._new_context(), ())

    def effective_project(self, coordinate: str) -> tuple[str, Project]:
        """Return the POM url and the flattened, version-resolved project of `coordinate`."""
        Dependency.parse(coordinate)
        pom_location, project = self._load_project(coordinate, self._new_context())
        return pom_location, resolve_dependency_versions(project, self.unresolved_policy)

    def _analyze(self, coordinate: str, ctx: AnalysisContext, path: tuple[str, ...]) -> AnalysisNode:
        if coordinate in path:
            raise DependencyCycleError(path, coordinate)
        path = (*path, coordinate)

        pom_location, project = self._load_project(coordinate, ctx)
        current, size = ctx.sizes.get_or_compute(
            coordinate, lambda: (project.coordinate(), self._artifact_size(pom_location, ctx))
        )

        resolved = resolve_dependency_versions(project, self.unresolved_policy)
        children = [
            dep.full_id
            for dep in resolved.dependencies
            if dep.scope not in IGNORED_SCOPES and dep.full_id != coordinate
        ]

        return AnalysisNode(
            dependency=current,
            pom_url=pom_location,
            children=frozenset(self._analyze_children(children, ctx, path)),
            size=size,
        )

    def _analyze_children(
        self, children: list[str], ctx: AnalysisContext, path: tuple[str, ...]
    ) -> list[AnalysisNode]:
        if self.max_workers == 1 or len(children) < 2:
            return [self._analyze(child, ctx, path) for child in children]

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(children))) as executor:
            futures = [executor.submit(self._analyze, child, ctx, path) for child in children]
        return [future.result() for future in futures]

    def _load_project(self, coordinate: str, ctx: AnalysisContext) -> tuple[str, Project]:
        def download(dependency_id: str) -> tuple[str, Project]:
            return ctx.poms.get_or_compute(dependency_id, lambda: self._download_pom(dependency_id, ctx))

        def flatten() -> tuple[str, Project]:
            pom_location, project = download(coordinate)
            return pom_location, flatten_parents(project, lambda parent_id: download(parent_id)[1])

        return ctx.projects.get_or_compute(coordinate, flatten)

    def _new_context(self) -> AnalysisContext:
        return AnalysisContext(network=threading.BoundedSemaphore(self.max_workers))

    def _download_pom(self, coordinate: str, ctx: AnalysisContext) -> tuple[str, Project]:
        with ctx.network:
            pom_location, content = self.client.fetch_pom(Dependency.parse(coordinate))
        return pom_location, parse_pom(content, source=coordinate)

    def _artifact_size(self, pom_location: str, ctx: AnalysisContext) -> int:
        with ctx.network:
            size = self.client.fetch_size(artifact_url(pom_location, self.artifact_extension))
        return size if size is not None else 0
