"""Local git repository access through the git executable.

Serves as the local tag source and the commit source for resolution, and
performs the few write actions the CLI needs (fetch, tag, push).
"""
from __future__ import annotations

import logging
import os
import subprocess
from typing import List, Optional, Sequence, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from versioning.errors import GitCommandError, InconsistentHistoryError
from versioning.models import CommitRecord, TagRecord
from versioning.parser import parse_tags

logger = logging.getLogger(__name__)

# Field / record separators for git log output
_FS = "\x1f"
_RS = "\x1e"


class GitRepository:
    """Thin wrapper around `git` invocations scoped to one working tree."""

    def __init__(self, path: str = ".", git: Optional[str] = None):
        self.path = os.path.abspath(path)
        self.git = git or Constants.GIT_EXECUTABLE

    @classmethod
    def discover(cls, path: str = ".") -> "GitRepository":
        """Open the repository containing ``path`` (walking up to its top level).

        Raises:
            GitCommandError: if ``path`` is not inside a git work tree.
        """
        probe = cls(path)
        top = probe._run(["rev-parse", "--show-toplevel"]).strip()
        return cls(top or path, git=probe.git)

    def _run(self, args: Sequence[str], *, ok_codes: Sequence[int] = (0,)) -> str:
        """Run git with ``args`` and return stdout; raise on unexpected exit codes."""
        return self._run_status(args, ok_codes=ok_codes)[1]

    def _run_status(self, args: Sequence[str], *, ok_codes: Sequence[int] = (0,)) -> Tuple[int, str]:
        command = [self.git, *args]
        with Timer() as t:
            try:
                completed = subprocess.run(
                    command,
                    cwd=self.path,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    check=False,
                )
            except FileNotFoundError as exc:
                raise GitCommandError(args, 127, f"{self.git} executable not found") from exc
            except OSError as exc:
                raise GitCommandError(args, 126, str(exc)) from exc
        if is_debug_enabled(logger):
            logger.debug(
                "git command finished",
                extra=extra_context(
                    event="subprocess",
                    component="git",
                    action=args[0] if args else None,
                    outcome=completed.returncode,
                    duration_ms=t.duration_ms(),
                ),
            )
        if completed.returncode not in ok_codes:
            raise GitCommandError(args, completed.returncode, completed.stderr or "")
        return completed.returncode, completed.stdout

    # ---- branch / remote information -------------------------------------------------

    def current_branch(self) -> Optional[str]:
        """Short name of the checked-out branch, or None on a detached HEAD."""
        code, out = self._run_status(["symbolic-ref", "--quiet", "--short", "HEAD"], ok_codes=(0, 1))
        if code != 0:
            return None
        return out.strip() or None

    def remote_url(self, remote: str) -> str:
        """URL configured for ``remote``."""
        return self._run(["remote", "get-url", remote]).strip()

    # ---- tag source ------------------------------------------------------------------

    def list_tags(self) -> List[Tuple[str, str]]:
        """Return (tag name, commit hash) pairs; annotated tags are peeled to their commit."""
        out = self._run([
            "for-each-ref",
            "--format=%(refname:strip=2)%00%(objectname)%00%(*objectname)",
            "refs/tags",
        ])
        pairs = []
        for line in out.splitlines():
            if not line.strip():
                continue
            fields = line.split("\x00")
            if len(fields) < 2:
                continue
            name, obj = fields[0], fields[1]
            peeled = fields[2] if len(fields) > 2 else ""
            pairs.append((name, peeled or obj))
        return pairs

    def local_tags(self) -> List[TagRecord]:
        """Local tags as TagRecords (unparseable names included)."""
        return parse_tags(self.list_tags())

    def ls_remote_tags(self, remote: str) -> List[Tuple[str, str]]:
        """Tags advertised by ``remote`` as (name, commit hash), peeled where possible."""
        out = self._run(["ls-remote", "--tags", remote])
        direct = {}
        peeled = {}
        for line in out.splitlines():
            if "\t" not in line:
                continue
            commit_hash, ref = line.split("\t", 1)
            ref = ref.strip()
            if not ref.startswith("refs/tags/"):
                continue
            name = ref[len("refs/tags/"):]
            if name.endswith("^{}"):
                peeled[name[:-3]] = commit_hash.strip()
            else:
                direct[name] = commit_hash.strip()
        return sorted((name, peeled.get(name, h)) for name, h in direct.items())

    # ---- commit source ---------------------------------------------------------------

    def commit_exists(self, commit_hash: str) -> bool:
        """True when ``commit_hash`` names a commit object in this repository."""
        code, _ = self._run_status(["cat-file", "-e", f"{commit_hash}^{{commit}}"], ok_codes=(0, 1, 128))
        return code == 0

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """True when ``ancestor`` is reachable from ``descendant``."""
        code, _ = self._run_status(["merge-base", "--is-ancestor", ancestor, descendant], ok_codes=(0, 1))
        return code == 0

    def commits_between(self, start: str, stop: Optional[str]) -> List[CommitRecord]:
        """Commits reachable from ``start`` but not from ``stop``, newest first.

        Raises:
            InconsistentHistoryError: ``stop`` is missing or not an ancestor of ``start``.
            GitCommandError: git failed for any other reason.
        """
        revs = [start]
        if stop:
            if not self.commit_exists(stop):
                raise InconsistentHistoryError(
                    f"tagged commit {stop[:7]} no longer exists in this repository",
                    commit_hash=stop,
                )
            if not self.is_ancestor(stop, start):
                raise InconsistentHistoryError(
                    f"commit {stop[:7]} is not reachable from {start}",
                    commit_hash=stop,
                )
            revs.append(f"^{stop}")

        out = self._run(["log", f"--format=%H{_FS}%P{_FS}%B{_RS}", *revs, "--"])
        return parse_log(out)

    # ---- actions ---------------------------------------------------------------------

    def fetch(self, remote: str) -> None:
        """Fetch tags and branches from ``remote`` without overwriting local tags."""
        logger.info("Performing git fetch to get latest tags!")
        self._run([
            "fetch",
            remote,
            "refs/tags/*:refs/tags/*",
            f"refs/heads/*:refs/remotes/{remote}/*",
        ])

    def create_tag(self, name: str, message: str, *, sign: bool = False, target: str = "HEAD") -> None:
        """Create an annotated (optionally signed) tag."""
        self._run(["tag", "-s" if sign else "-a", name, "-m", message, target])

    def push_tag(self, remote: str, name: str) -> None:
        """Push a single tag to ``remote``."""
        self._run(["push", remote, f"refs/tags/{name}"])


def parse_log(out: str) -> List[CommitRecord]:
    """Parse ``git log --format=%H<FS>%P<FS>%B<RS>`` output into CommitRecords."""
    commits = []
    for block in out.split(_RS):
        item = block.strip("\n")
        if not item.strip():
            continue
        parts = item.split(_FS, 2)
        if len(parts) < 3:
            continue
        commit_hash, parents, message = parts
        commits.append(
            CommitRecord(
                hash=commit_hash.strip(),
                message=message.strip(),
                parents=tuple(parents.split()),
            )
        )
    return commits
