"""GitLab API client for remote tag retrieval.

Lists the tags of a GitLab project, following the x-page / x-total-pages
pagination headers.
"""
from __future__ import annotations

import os
from typing import List, Optional, Dict, Any
from urllib.parse import quote

from constants import Constants
from common.http_client import get_json
from versioning.errors import RemoteSourceError


def _int_header(headers: Dict[str, str], name: str) -> Optional[int]:
    """Case-insensitive lookup of an integer header; None when absent or malformed."""
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            try:
                return int(value)
            except (TypeError, ValueError):
                return None
    return None


class GitLabClient:
    """Lightweight REST client for the GitLab tags endpoint.

    Authenticates with a personal access token when one is configured
    (argument, --gitlab-token, or the GITLAB_TOKEN environment variable).
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        self.base_url = (base_url or Constants.GITLAB_API_BASE).rstrip("/")
        self.token = token or Constants.GITLAB_TOKEN or os.environ.get(Constants.ENV_GITLAB_TOKEN)

    def _get_headers(self) -> Dict[str, str]:
        return {'Private-Token': self.token} if self.token else {}

    def get_tags(self, owner: str, repo: str) -> List[Dict[str, Any]]:
        """Fetch all tags of ``owner/repo``.

        Args:
            owner: Project namespace (may include subgroups)
            repo: Project name

        Returns:
            Tag objects as returned by the API ({'name': ..., 'commit': {'id': ...}})

        Raises:
            RemoteSourceError: on any non-200 response or transport failure
        """
        project = quote(f"{owner}/{repo}", safe='')
        endpoint = f"{self.base_url}/projects/{project}/repository/tags?per_page={Constants.REPO_API_PER_PAGE}"

        tags: List[Dict[str, Any]] = []
        url: Optional[str] = endpoint
        while url:
            status, headers, data = get_json(url, headers=self._get_headers())
            if status != 200:
                detail = data if status == 0 else f"HTTP {status}"
                raise RemoteSourceError(f"GitLab tag request failed: {detail}", status_code=status or None)
            if not data:
                break
            tags.extend(data)

            page = _int_header(headers, 'x-page')
            total = _int_header(headers, 'x-total-pages')
            url = f"{endpoint}&page={page + 1}" if page and total and page < total else None
        return tags
