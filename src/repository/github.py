"""GitHub API client for remote tag retrieval.

Provides a lightweight REST client for listing repository tags, following
the Link header for pagination.
"""
from __future__ import annotations

import os
import re
from typing import List, Optional, Dict, Any

from constants import Constants
from common.http_client import get_json
from versioning.errors import RemoteSourceError

_NEXT_LINK_RE = re.compile(r'<([^>]+)>\s*;\s*rel="next"')


class GitHubClient:
    """Lightweight REST client for GitHub API operations.

    Supports optional authentication via GITHUB_TOKEN environment variable.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """Initialize GitHub client.

        Args:
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            token: GitHub token (defaults to GITHUB_TOKEN env var)
        """
        self.base_url = (base_url or Constants.GITHUB_API_BASE).rstrip("/")
        self.token = token or Constants.GITHUB_TOKEN or os.environ.get(Constants.ENV_GITHUB_TOKEN)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
        }
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def get_tags(self, owner: str, repo: str) -> List[Dict[str, Any]]:
        """Fetch repository tags across all pages.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            List of tag dictionaries ({'name': ..., 'commit': {'sha': ...}})

        Raises:
            RemoteSourceError: on any non-200 response or transport failure
        """
        url: Optional[str] = (
            f"{self.base_url}/repos/{owner}/{repo}/tags?per_page={Constants.REPO_API_PER_PAGE}"
        )
        results: List[Dict[str, Any]] = []
        while url:
            status, headers, data = get_json(url, headers=self._get_headers())
            if status != 200:
                detail = data if status == 0 else f"HTTP {status}"
                if status in (401, 403):
                    detail += " (check GITHUB_TOKEN or --gh-token)"
                raise RemoteSourceError(f"GitHub tag request failed: {detail}", status_code=status or None)
            if not data:
                break
            results.extend(data)
            url = self._next_page_url(headers)
        return results

    @staticmethod
    def _next_page_url(headers: Dict[str, str]) -> Optional[str]:
        """Extract the rel="next" URL from a Link header, if any."""
        for key, value in headers.items():
            if key.lower() == 'link' and value:
                m = _NEXT_LINK_RE.search(value)
                if m:
                    return m.group(1)
        return None
