"""Remote URL parsing.

Turns a git remote URL (https, ssh://, scp-like git@host:path) into a
host / owner / repo reference usable with the hosting APIs.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

_SCP_LIKE_RE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


@dataclass(frozen=True)
class RepoRef:
    """Normalized repository reference."""
    host: str
    owner: str
    repo: str

    @property
    def path(self) -> str:
        """'owner/repo' (owner may contain GitLab subgroups)."""
        return f"{self.owner}/{self.repo}"


def _split_path(path: str) -> Optional[tuple]:
    path = path.strip().strip("/")
    if path.endswith(".git"):
        path = path[:-4]
    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        return None
    return "/".join(parts[:-1]), parts[-1]


def normalize_repo_url(url: Optional[str]) -> Optional[RepoRef]:
    """Parse a remote URL; return None when it does not name a hosted repository."""
    if not url or not isinstance(url, str):
        return None
    url = url.strip()

    if "://" in url:
        try:
            parts = urlsplit(url)
        except ValueError:
            return None
        if parts.scheme not in ("http", "https", "ssh", "git", "git+ssh"):
            return None
        host = (parts.hostname or "").lower()
        split = _split_path(parts.path)
    else:
        m = _SCP_LIKE_RE.match(url)
        if not m:
            return None
        host = m.group("host").lower()
        split = _split_path(m.group("path"))

    if not host or split is None:
        return None
    owner, repo = split
    return RepoRef(host=host, owner=owner, repo=repo)
