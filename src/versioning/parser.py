"""Tag name parsing utilities.

Turns raw tag names into semantic versions. Malformed names yield None so
one bad tag never stops a scan of the whole tag set.
"""

import logging
from typing import Iterable, List, Optional, Tuple

import semantic_version

from common.logging_utils import extra_context, is_debug_enabled
from .models import SemanticVersion, TagRecord

logger = logging.getLogger(__name__)


def strip_prefix(raw_name: str) -> str:
    """Drop surrounding whitespace and a single leading non-digit character."""
    s = raw_name.strip()
    if s and not s[0].isdigit():
        return s[1:]
    return s


def parse_tag(raw_name: Optional[str]) -> Optional[SemanticVersion]:
    """Parse a tag name such as 'v1.2.3-rc.1+build.5'.

    Returns None for anything that is not a strict semantic version after
    prefix removal; never raises.
    """
    if not isinstance(raw_name, str) or not raw_name.strip():
        return None
    text = strip_prefix(raw_name)
    try:
        parsed = semantic_version.Version(text)
    except ValueError:
        return None
    return SemanticVersion(
        major=parsed.major,
        minor=parsed.minor,
        patch=parsed.patch,
        prerelease=tuple(parsed.prerelease),
        build=".".join(parsed.build) if parsed.build else None,
    )


def parse_tags(pairs: Iterable[Tuple[str, str]]) -> List[TagRecord]:
    """Build TagRecords from (name, commit_hash) pairs, keeping unparseable ones."""
    records = []
    for name, commit_hash in pairs:
        record = TagRecord.from_name(name, commit_hash)
        if record.parsed is None and is_debug_enabled(logger):
            logger.debug(
                "Skipping non-semver tag",
                extra=extra_context(
                    event="parse",
                    component="parser",
                    action="parse_tag",
                    outcome="unparseable",
                    target=name,
                ),
            )
        records.append(record)
    return records


def format_tag(version: SemanticVersion, prefix: str = "v") -> str:
    """Render a version as a tag name, e.g. 'v1.4.0'."""
    return f"{prefix}{version}"
