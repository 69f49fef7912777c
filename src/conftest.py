from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from cigate.ui.console import Console


def _git(repo: Path, *args: str) -> None:
    subprocess.run(
        [
            "git",
            "-c", "user.name=cigate",
            "-c", "user.email=cigate@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=repo,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def git_repo(tmp_path, monkeypatch) -> Path:
    """A committed repository with README.md and an `app/` subdirectory; cwd is set to it."""
    repo = tmp_path / "repo"
    (repo / "app").mkdir(parents=True)
    (repo / "README.md").write_text("hello\n")
    (repo / "app" / "main.txt").write_text("app\n")

    _git(repo, "init", "-q")
    _git(repo, "add", ".")
    _git(repo, "commit", "-q", "-m", "init")

    monkeypatch.chdir(repo)
    return repo


@pytest.fixture
def markers(tmp_path) -> Path:
    """Directory outside the repository for step side-effect markers."""
    d = tmp_path / "markers"
    d.mkdir()
    return d


@pytest.fixture
def console() -> Console:
    return Console(debug=True)


@pytest.fixture
def commit_all():
    """Stage and commit everything in a repository."""
    def _commit(repo: Path, message: str = "update") -> None:
        _git(repo, "add", "-A")
        _git(repo, "commit", "-q", "-m", message)
    return _commit
