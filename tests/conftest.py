"""Shared fixtures and fakes for the tagge test-suite."""

from typing import Dict, List, Optional, Sequence

import pytest

from common import http_client
from constants import Constants
from versioning.errors import InconsistentHistoryError
from versioning.models import CommitRecord, TagRecord


def make_tag(name: str, commit_hash: str) -> TagRecord:
    """TagRecord with the name parsed the same way tag sources do."""
    return TagRecord.from_name(name, commit_hash)


class MemoryHistory:
    """In-memory commit source: a linear or branching history keyed by hash.

    ``commits`` are given newest first; each commit's parents must appear
    later in the list (or be absent for roots).
    """

    def __init__(self, commits: Sequence[CommitRecord], head: Optional[str] = None):
        self.commits: Dict[str, CommitRecord] = {c.hash: c for c in commits}
        self.order: List[str] = [c.hash for c in commits]
        self.head = head or (commits[0].hash if commits else None)
        self.calls = []

    def _resolve(self, rev: str) -> Optional[str]:
        return self.head if rev == "HEAD" else rev

    def _reachable(self, start: Optional[str]) -> set:
        seen = set()
        stack = [start] if start else []
        while stack:
            h = stack.pop()
            if h in seen or h not in self.commits:
                continue
            seen.add(h)
            stack.extend(self.commits[h].parents)
        return seen

    def commits_between(self, start: str, stop: Optional[str]) -> List[CommitRecord]:
        self.calls.append((start, stop))
        reachable = self._reachable(self._resolve(start))
        if stop is not None:
            if stop not in reachable:
                raise InconsistentHistoryError(f"commit {stop[:7]} is not reachable from {start}", commit_hash=stop)
            reachable -= self._reachable(stop)
        return [self.commits[h] for h in self.order if h in reachable]


def linear_history(messages: Sequence[str], base: Optional[str] = None) -> List[CommitRecord]:
    """Build a linear history newest first; hashes are c<index> counted from the oldest."""
    commits = []
    parent = base
    for index, message in enumerate(reversed(messages)):
        commit_hash = f"c{index:039d}"
        commits.append(CommitRecord(hash=commit_hash, message=message, parents=(parent,) if parent else ()))
        parent = commit_hash
    return list(reversed(commits))


@pytest.fixture(autouse=True)
def _restore_constants():
    """Undo any Constants mutation done by config/CLI code under test."""
    saved = {
        k: v for k, v in vars(Constants).items()
        if k.isupper()
    }
    yield
    for k in [k for k in vars(Constants) if k.isupper()]:
        if k not in saved:
            delattr(Constants, k)
    for k, v in saved.items():
        setattr(Constants, k, v)


@pytest.fixture(autouse=True)
def _clear_http_cache():
    http_client.clear_cache()
    yield
    http_client.clear_cache()
