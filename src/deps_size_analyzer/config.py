"""Analyzer configuration module.

Configuration is read from environment variables; CLI options override it.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum


MAVEN_CENTRAL = "https://repo1.maven.org/maven2"


class UnresolvedPolicy(str, Enum):
    """What to do with a dependency whose version cannot be resolved."""

    FAIL = "fail"
    SKIP = "skip"


@dataclass
class AnalyzerConfig:
    """Analyzer configuration container.

    Attributes:
        repositories: Repository base URLs, tried in order.
        timeout: Per-request network timeout in seconds.
        max_workers: Maximum repository requests in flight; 1 means sequential traversal.
        unresolved_policy: Fail on, or warn and drop, unresolvable dependencies.
        artifact_extension: Extension of the binary artifact whose size is measured.
    """

    repositories: list[str] = field(default_factory=lambda: [MAVEN_CENTRAL])
    timeout: float = 30.0
    max_workers: int = 1
    unresolved_policy: UnresolvedPolicy = UnresolvedPolicy.FAIL
    artifact_extension: str = "jar"

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        """Create configuration from environment variables.

        Environment variables:
            DEPS_SIZE_REPOSITORIES: Comma-separated repository URLs (default: Maven Central)
            DEPS_SIZE_TIMEOUT: Request timeout in seconds (default: 30)
            DEPS_SIZE_WORKERS: Number of concurrent lookups (default: 1)
            DEPS_SIZE_UNRESOLVED: "fail" or "skip" (default: "fail")
            DEPS_SIZE_ARTIFACT_EXTENSION: Artifact extension (default: "jar")
        """
        raw_repos = os.getenv("DEPS_SIZE_REPOSITORIES", "")
        repositories = [r.strip() for r in raw_repos.split(",") if r.strip()] or [MAVEN_CENTRAL]

        return cls(
            repositories=repositories,
            timeout=float(os.getenv("DEPS_SIZE_TIMEOUT", "30")),
            max_workers=int(os.getenv("DEPS_SIZE_WORKERS", "1")),
            unresolved_policy=UnresolvedPolicy(os.getenv("DEPS_SIZE_UNRESOLVED", "fail").lower()),
            artifact_extension=os.getenv("DEPS_SIZE_ARTIFACT_EXTENSION", "jar").lstrip("."),
        )

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If a setting is missing or out of range.
        """
        if not self.repositories:
            raise ValueError("At least one repository is required")
        if self.timeout <= 0:
            raise ValueError("DEPS_SIZE_TIMEOUT must be positive")
        if self.max_workers < 1:
            raise ValueError("DEPS_SIZE_WORKERS must be at least 1")
        if not self.artifact_extension:
            raise ValueError("DEPS_SIZE_ARTIFACT_EXTENSION must not be empty")
