"""Reconciliation of local tag state against a remote tag set."""

from typing import Dict, Iterable, List

from .models import DivergenceEntry, DivergenceKind, TagRecord


def _index(tags: Iterable[TagRecord]) -> Dict[str, str]:
    """Map tag name to commit hash; on duplicate names the last record wins."""
    return {t.raw_name: t.commit_hash for t in tags}


def reconcile(local: Iterable[TagRecord], remote: Iterable[TagRecord]) -> List[DivergenceEntry]:
    """Compare two tag sets by name and commit.

    Tags present on both sides with the same commit are convergent and
    omitted. Output is sorted by tag name. Inputs are only read.
    """
    local_map = _index(local)
    remote_map = _index(remote)

    entries = []
    for name in sorted(set(local_map) | set(remote_map)):
        local_hash = local_map.get(name)
        remote_hash = remote_map.get(name)
        if remote_hash is None:
            kind = DivergenceKind.LOCAL_ONLY
        elif local_hash is None:
            kind = DivergenceKind.REMOTE_ONLY
        elif local_hash != remote_hash:
            kind = DivergenceKind.MISMATCH
        else:
            continue
        entries.append(
            DivergenceEntry(
                tag_name=name,
                local_hash=local_hash,
                remote_hash=remote_hash,
                kind=kind,
            )
        )
    return entries
