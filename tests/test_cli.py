from __future__ import annotations

import pytest
from typer.testing import CliRunner

from conftest import REPO, FakeSession, make_pom
from deps_size_analyzer import analyzer as analyzer_module
from deps_size_analyzer.cli import app
from deps_size_analyzer.repository import RepositoryClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def fake_repository(monkeypatch: pytest.MonkeyPatch, session: FakeSession) -> FakeSession:
    """Route every client built by the CLI to the in-memory session."""
    seen: list[list[str]] = []

    def build(repositories, timeout=30.0):
        seen.append(list(repositories))
        return RepositoryClient(repositories, session=session, timeout=timeout)  # type: ignore[arg-type]

    monkeypatch.setattr(analyzer_module, "RepositoryClient", build)
    monkeypatch.setenv("DEPS_SIZE_REPOSITORIES", REPO)
    session.repositories_seen = seen  # type: ignore[attr-defined]
    session.add_pom("g:a:1.0", make_pom("g:a:1.0", dependencies=["g:b:1.0"]), size=100)
    session.add_pom("g:b:1.0", make_pom("g:b:1.0"), size=50)
    return session


def test_analyze_plain_report() -> None:
    result = runner.invoke(app, ["analyze", "g:a:1.0", "--plain"])

    assert result.exit_code == 0, result.output
    assert "g:a:1.0 (100)\n  g:b:1.0 (50)\nTotal size: 0 Kb (150)" in result.output


def test_analyze_rich_tree() -> None:
    result = runner.invoke(app, ["analyze", "g:a:1.0", "--workers", "2"])

    assert result.exit_code == 0, result.output
    assert "g:a:1.0 (100 bytes)" in result.output
    assert "g:b:1.0 (50 bytes)" in result.output
    assert "Total size: 0 Kb (150)" in result.output


def test_analyze_repo_option_overrides_env(fake_repository: FakeSession) -> None:
    result = runner.invoke(app, ["analyze", "g:a:1.0", "--repo", "https://other.test/repo"])

    assert result.exit_code == 1
    assert "Dependency g:a:1.0 is not found" in result.output
    assert fake_repository.repositories_seen == [["https://other.test/repo"]]  # type: ignore[attr-defined]


def test_analyze_illegal_coordinate() -> None:
    result = runner.invoke(app, ["analyze", "not-a-coordinate"])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert "not-a-coordinate" in result.output


def test_effective_prints_resolved_dependencies() -> None:
    result = runner.invoke(app, ["effective", "g:a:1.0"])

    assert result.exit_code == 0, result.output
    assert '"artifact_id": "a"' in result.output
    assert '"version": "1.0"' in result.output
    assert '"artifact_id": "b"' in result.output
