"""Selection of the current version from a tag set."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from .models import DivergenceEntry, DivergenceKind, SemanticVersion, TagRecord


def _parsed(tags: Iterable[TagRecord]) -> List[TagRecord]:
    return [t for t in tags if t.parsed is not None]


def select_tag(tags: Iterable[TagRecord]) -> Optional[TagRecord]:
    """Return the tag carrying the highest semantic version.

    When several tags carry that version the lexicographically smallest
    name wins, so the pick does not depend on input order.
    """
    candidates = _parsed(tags)
    if not candidates:
        return None
    highest = max(t.parsed for t in candidates)
    return min(
        (t for t in candidates if t.parsed == highest),
        key=lambda t: (t.raw_name, t.commit_hash),
    )


def select(tags: Iterable[TagRecord]) -> Optional[Tuple[SemanticVersion, str]]:
    """Return (version, commit_hash) of the latest tag, or None without any version tag."""
    tag = select_tag(tags)
    if tag is None:
        return None
    return tag.parsed, tag.commit_hash


def find_version_conflicts(tags: Iterable[TagRecord]) -> List[DivergenceEntry]:
    """Report versions carried by tags on two or more distinct commits.

    Each version's representative is its lexicographically smallest tag; every
    other tag of that version pointing at a different commit yields one entry.
    """
    by_version: Dict[SemanticVersion, List[TagRecord]] = defaultdict(list)
    for tag in _parsed(tags):
        by_version[tag.parsed].append(tag)

    entries = []
    for group in by_version.values():
        if len({t.commit_hash for t in group}) < 2:
            continue
        group = sorted(group, key=lambda t: (t.raw_name, t.commit_hash))
        representative = group[0]
        for other in group[1:]:
            if other.commit_hash == representative.commit_hash:
                continue
            entries.append(
                DivergenceEntry(
                    tag_name=other.raw_name,
                    local_hash=other.commit_hash,
                    remote_hash=None,
                    kind=DivergenceKind.CONFLICTING_VERSION,
                    conflicts_with=representative.raw_name,
                )
            )
    entries.sort(key=lambda e: (e.tag_name, e.conflicts_with or ""))
    return entries
