"""Pytest configuration and fixtures for the dependency size analyzer tests.

HTTP is replaced by `FakeSession`, an in-memory double exposing the subset of
`requests.Session` used by `RepositoryClient`.
"""
from __future__ import annotations

import threading
from collections import Counter

import pytest
import requests

from deps_size_analyzer.models import Dependency
from deps_size_analyzer.repository import RepositoryClient, artifact_url, pom_url

REPO = "https://repo.test/maven2"
MIRROR = "https://mirror.test/releases/"


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", headers: dict | None = None) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


class FakeSession:
    """Serves registered POMs for GET and artifact sizes for HEAD."""

    def __init__(self) -> None:
        self.headers: dict[str, str] = {}
        self.documents: dict[str, bytes] = {}
        self.sizes: dict[str, int | None] = {}
        self.failing: set[str] = set()
        self.calls: Counter[tuple[str, str]] = Counter()
        self.closed = False
        self._lock = threading.Lock()

    def _record(self, method: str, url: str) -> None:
        with self._lock:
            self.calls[(method, url)] += 1
        if url in self.failing:
            raise requests.ConnectionError(f"connection refused: {url}")

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        self._record("GET", url)
        if url in self.documents:
            return FakeResponse(200, self.documents[url])
        return FakeResponse(404)

    def head(self, url: str, timeout: float | None = None, allow_redirects: bool = False) -> FakeResponse:
        self._record("HEAD", url)
        if url not in self.sizes:
            return FakeResponse(404)
        size = self.sizes[url]
        return FakeResponse(200, headers={} if size is None else {"Content-Length": str(size)})

    def close(self) -> None:
        self.closed = True

    def add_pom(
        self,
        coordinate: str,
        document: str | bytes,
        size: int | None = 0,
        repository: str = REPO,
    ) -> str:
        """Register a POM (and its jar size) and return the POM url."""
        url = pom_url(repository, Dependency.parse(coordinate))
        self.documents[url] = document.encode("utf-8") if isinstance(document, str) else document
        self.sizes[artifact_url(url)] = size
        return url

    def gets(self, coordinate: str, repository: str = REPO) -> int:
        return self.calls[("GET", pom_url(repository, Dependency.parse(coordinate)))]


def _dependency_xml(notation: str, scope: str | None = None) -> str:
    parts = notation.split(":")
    xml = f"<groupId>{parts[0]}</groupId><artifactId>{parts[1]}</artifactId>"
    if len(parts) > 2:
        xml += f"<version>{parts[2]}</version>"
    if scope:
        xml += f"<scope>{scope}</scope>"
    return f"<dependency>{xml}</dependency>"


def make_pom(
    coordinate: str,
    *,
    parent: str | None = None,
    properties: dict[str, str] | None = None,
    dependencies: list[str | tuple[str, str]] | None = None,
    managed: list[str] | None = None,
) -> str:
    """Build a POM document.

    `coordinate` may omit group and/or version (`:a:` style parts left empty)
    so that they are inherited from `parent`. Dependencies are `g:a[:v]`
    strings or `(notation, scope)` tuples.
    """
    group, artifact, version = coordinate.split(":")
    body = []
    if parent:
        p_group, p_artifact, p_version = parent.split(":")
        body.append(
            f"<parent><groupId>{p_group}</groupId><artifactId>{p_artifact}</artifactId>"
            f"<version>{p_version}</version></parent>"
        )
    if group:
        body.append(f"<groupId>{group}</groupId>")
    body.append(f"<artifactId>{artifact}</artifactId>")
    if version:
        body.append(f"<version>{version}</version>")
    if properties:
        props = "".join(f"<{k}>{v}</{k}>" for k, v in properties.items())
        body.append(f"<properties>{props}</properties>")
    if managed:
        entries = "".join(_dependency_xml(m) for m in managed)
        body.append(f"<dependencyManagement><dependencies>{entries}</dependencies></dependencyManagement>")
    if dependencies:
        entries = "".join(
            _dependency_xml(*d) if isinstance(d, tuple) else _dependency_xml(d) for d in dependencies
        )
        body.append(f"<dependencies>{entries}</dependencies>")

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<project xmlns="http://maven.apache.org/POM/4.0.0">'
        "<modelVersion>4.0.0</modelVersion>" + "".join(body) + "</project>"
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> RepositoryClient:
    return RepositoryClient([REPO], session=session)  # type: ignore[arg-type]
