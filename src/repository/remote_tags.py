"""Remote tag retrieval.

Materializes the remote tag set from the configured source (git ls-remote,
GitHub or GitLab) as TagRecords, ready for reconciliation.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from constants import Constants, RemoteSources
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from repository.git import GitRepository
from repository.github import GitHubClient
from repository.gitlab import GitLabClient
from repository.url_normalize import RepoRef, normalize_repo_url
from versioning.errors import GitCommandError, RemoteSourceError
from versioning.models import TagRecord
from versioning.parser import parse_tags

logger = logging.getLogger(__name__)


def _pairs_from_api(items: Iterable[Dict[str, Any]], hash_key: str) -> List[Tuple[str, str]]:
    """Extract (name, commit hash) from hosting API tag objects, skipping incomplete ones."""
    pairs = []
    for item in items:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        commit = item.get("commit") or {}
        commit_hash = commit.get(hash_key) if isinstance(commit, dict) else None
        if isinstance(name, str) and name and isinstance(commit_hash, str) and commit_hash:
            pairs.append((name, commit_hash))
    return pairs


def _repo_ref(repo: GitRepository, remote: str) -> RepoRef:
    try:
        url = repo.remote_url(remote)
    except GitCommandError as exc:
        raise RemoteSourceError(f"Could not find git remote {remote}: {exc}") from exc
    ref = normalize_repo_url(url)
    if ref is None:
        raise RemoteSourceError(f"Remote {remote} URL is not a hosted repository: {safe_url(url)}")
    return ref


def fetch_remote_tags(
    repo: GitRepository,
    source: Optional[str] = None,
    remote: Optional[str] = None,
    github_token: Optional[str] = None,
    gitlab_token: Optional[str] = None,
) -> Optional[List[TagRecord]]:
    """Return the remote tag set, or None when the source is 'none'.

    Raises:
        RemoteSourceError: the remote could not be queried.
    """
    source = (source or Constants.REMOTE_SOURCE).lower()
    remote = remote or Constants.REMOTE_NAME

    if source == RemoteSources.NONE.value:
        return None

    target = remote
    if source == RemoteSources.GIT.value:
        try:
            pairs = repo.ls_remote_tags(remote)
        except GitCommandError as exc:
            raise RemoteSourceError(f"git ls-remote {remote} failed: {exc.stderr.strip() or exc}") from exc
    elif source == RemoteSources.GITHUB.value:
        ref = _repo_ref(repo, remote)
        target = ref.path
        client = GitHubClient(token=github_token)
        pairs = _pairs_from_api(client.get_tags(ref.owner, ref.repo), "sha")
    elif source == RemoteSources.GITLAB.value:
        ref = _repo_ref(repo, remote)
        target = ref.path
        client = GitLabClient(token=gitlab_token)
        pairs = _pairs_from_api(client.get_tags(ref.owner, ref.repo), "id")
    else:
        raise ValueError(f"Unsupported remote source: {source}")

    if is_debug_enabled(logger):
        logger.debug(
            "Fetched remote tags",
            extra=extra_context(
                event="function_exit",
                component="remote_tags",
                action=source,
                target=target,
                count=len(pairs),
            ),
        )
    return parse_tags(pairs)
