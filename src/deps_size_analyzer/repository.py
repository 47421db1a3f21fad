"""Client for fetching POMs and artifact sizes from Maven repositories."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import requests

from deps_size_analyzer.config import MAVEN_CENTRAL
from deps_size_analyzer.exceptions import DependencyNotFoundError
from deps_size_analyzer.models import Dependency

logger = logging.getLogger(__name__)

POM_EXTENSION = "pom"


def pom_url(repository: str, dependency: Dependency) -> str:
    """Build the POM location of `dependency` inside `repository`.

    Returns:
        A URL like `<repo>/org/acme/lib/1.0/lib-1.0.pom`.
    """
    path = "/".join(
        (
            dependency.group_id.replace(".", "/"),
            dependency.artifact_id,
            str(dependency.version),
            f"{dependency.artifact_id}-{dependency.version}.{POM_EXTENSION}",
        )
    )
    return f"{repository.rstrip('/')}/{path}"


def artifact_url(pom_location: str, extension: str = "jar") -> str:
    """Swap the POM extension of a location for the binary artifact extension."""
    suffix = f".{POM_EXTENSION}"
    if pom_location.endswith(suffix):
        pom_location = pom_location[: -len(suffix)]
    return f"{pom_location}.{extension}"


class RepositoryClient:
    """Client for downloading POM documents and measuring artifacts."""

    def __init__(
        self,
        repositories: Iterable[str] = (MAVEN_CENTRAL,),
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            repositories: Repository base URLs, tried in the given order.
            session: Optional preconfigured session (mainly for tests).
            timeout: Per-request timeout in seconds.
        """
        self.repositories = list(dict.fromkeys(repositories))
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "deps-size-analyzer/0.1.0"})

    def fetch_pom(self, dependency: Dependency) -> tuple[str, bytes]:
        """Download the POM of `dependency` from the first repository that has it.

        A transport error or an unsuccessful response from one repository is
        logged and the next repository is tried.

        Returns:
            The POM URL and the raw response body.

        Raises:
            DependencyNotFoundError: If no repository returns the POM.
        """
        logger.debug(f"Downloading {dependency.full_id} POM")
        for repository in self.repositories:
            url = pom_url(repository, dependency)
            logger.debug(f"  GET {url}")
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                logger.info(f"Failed to fetch a POM from {url}: {e}")
                continue

            if response.ok:
                return url, response.content

            logger.debug(f"Request to {url} resolved as HTTP {response.status_code}")

        raise DependencyNotFoundError(dependency.full_id)

    def fetch_size(self, url: str) -> int | None:
        """Return the Content-Length of `url` using a HEAD request.

        Returns:
            The declared size in bytes, or None when it cannot be determined.
        """
        logger.debug(f"Getting size of {url}")
        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.warning(f"Failed to get size of {url}: {e}")
            return None

        if not response.ok:
            logger.warning(f"The size of {url} is undefined: HTTP {response.status_code}")
            return None

        raw = response.headers.get("Content-Length")
        try:
            size = int(raw) if raw is not None else None
        except ValueError:
            size = None
        if size is not None and size < 0:
            size = None

        if size is None:
            logger.warning(f"The size of {url} is undefined")
        else:
            logger.debug(f"Got size of {url}: {size} bytes")
        return size

    def close(self) -> None:
        """Close the session and clean up resources."""
        self.session.close()

    def __enter__(self) -> RepositoryClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
