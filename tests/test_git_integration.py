"""Integration tests against a throwaway git repository."""

import shutil
import subprocess

import pytest

from repository.git import GitRepository
from versioning.errors import InconsistentHistoryError
from versioning.models import SemanticVersion
from versioning.service import resolve

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


@pytest.fixture
def git_env(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for role in ("AUTHOR", "COMMITTER"):
        monkeypatch.setenv(f"GIT_{role}_NAME", "Test User")
        monkeypatch.setenv(f"GIT_{role}_EMAIL", "test@example.com")
    return tmp_path


@pytest.fixture
def repo(git_env):
    path = git_env / "work"
    path.mkdir()
    subprocess.run(["git", "init", "-q", "-b", "main", str(path)], check=True)
    return GitRepository(str(path))


def commit(repo, message):
    subprocess.run(
        ["git", "commit", "-q", "--allow-empty", "-m", message],
        cwd=repo.path,
        check=True,
    )
    return subprocess.run(
        ["git", "rev-parse", "HEAD"], cwd=repo.path, check=True, capture_output=True, text=True
    ).stdout.strip()


def test_lightweight_and_annotated_tags(repo):
    first = commit(repo, "chore: init")
    subprocess.run(["git", "tag", "v0.1.0"], cwd=repo.path, check=True)
    second = commit(repo, "fix: a")
    subprocess.run(["git", "tag", "-a", "v0.1.1", "-m", "Release"], cwd=repo.path, check=True)

    tags = dict(repo.list_tags())

    assert tags == {"v0.1.0": first, "v0.1.1": second}


def test_resolution_from_real_history(repo):
    commit(repo, "chore: init")
    subprocess.run(["git", "tag", "v1.2.0"], cwd=repo.path, check=True)
    commit(repo, "fix: bug\n\nDetails here.")
    commit(repo, "feat: feature")

    result = resolve(repo.local_tags(), repo)

    assert result.current == SemanticVersion(1, 2, 0)
    assert [c.subject for c in result.commits] == ["feat: feature", "fix: bug"]
    assert result.candidate == SemanticVersion(1, 3, 0)
    assert repo.current_branch() == "main"


def test_tag_on_unrelated_branch(repo):
    commit(repo, "chore: init")
    subprocess.run(["git", "checkout", "-q", "--orphan", "other"], cwd=repo.path, check=True)
    orphan = commit(repo, "feat: orphan")
    subprocess.run(["git", "checkout", "-q", "main"], cwd=repo.path, check=True)

    with pytest.raises(InconsistentHistoryError):
        repo.commits_between("HEAD", orphan)


def test_create_tag(repo):
    head = commit(repo, "feat: first")

    repo.create_tag("v0.1.0", "Release v0.1.0")

    assert repo.list_tags() == [("v0.1.0", head)]
