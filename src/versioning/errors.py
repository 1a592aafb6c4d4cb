"""Exceptions raised during tag resolution.

Per-tag and per-commit parse problems are never raised; they are absorbed
by the parser and the classifier. Only structural failures surface here.
"""

from typing import Optional, Sequence


class TaggeError(Exception):
    """Base class for all tagge errors."""


class InconsistentHistoryError(TaggeError):
    """The selected tag's commit cannot be reached from the traversal start."""

    def __init__(self, message: str, tag_name: Optional[str] = None, commit_hash: Optional[str] = None):
        super().__init__(message)
        self.tag_name = tag_name
        self.commit_hash = commit_hash


class ExternalSourceError(TaggeError):
    """A collaborator (git, hosting API, network) failed."""


class GitCommandError(ExternalSourceError):
    """A git invocation exited non-zero."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = ""):
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"git {' '.join(command)} failed: {detail}")
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class RemoteSourceError(ExternalSourceError):
    """Remote tag retrieval failed (HTTP status, transport error, bad remote URL)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
