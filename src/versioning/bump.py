"""Next-version computation from the current version and a bump category."""

from typing import Optional

import semantic_version

from .models import BumpCategory, SemanticVersion

# Baselines used when no prior version tag exists.
INITIAL_VERSION = SemanticVersion(0, 1, 0)
INITIAL_STABLE_VERSION = SemanticVersion(1, 0, 0)


def bump(current: Optional[SemanticVersion], category: BumpCategory) -> SemanticVersion:
    """Return the candidate next version.

    Pure and total. A NONE category returns ``current`` unchanged, which the
    caller reads as "no new version warranted". Below 1.0.0 a breaking change
    bumps minor and a feature bumps patch.
    """
    if current is None:
        if category == BumpCategory.MAJOR:
            return INITIAL_STABLE_VERSION
        return INITIAL_VERSION

    if category == BumpCategory.NONE:
        return current

    base = current.release()
    if base.major == 0:
        if category == BumpCategory.MAJOR:
            return SemanticVersion(0, base.minor + 1, 0)
        return SemanticVersion(0, base.minor, base.patch + 1)

    if category == BumpCategory.MAJOR:
        return SemanticVersion(base.major + 1, 0, 0)
    if category == BumpCategory.MINOR:
        return SemanticVersion(base.major, base.minor + 1, 0)
    return SemanticVersion(base.major, base.minor, base.patch + 1)


def with_prerelease(version: SemanticVersion, suffix: str) -> SemanticVersion:
    """Attach a pre-release suffix such as 'rc.1' (a leading '-' is tolerated).

    Raises:
        ValueError: if the suffix is not a valid pre-release identifier list
            (build metadata such as "+build5" included).
    """
    text = (suffix or "").strip().lstrip("-")
    if not text:
        raise ValueError("Pre-release suffix must not be empty")
    if "+" in text:
        raise ValueError("Pre-release suffix must not carry build metadata")
    # Let semantic_version validate the identifiers (no empties, no leading zeros)
    parsed = semantic_version.Version(f"{version.major}.{version.minor}.{version.patch}-{text}")
    return SemanticVersion(
        version.major,
        version.minor,
        version.patch,
        prerelease=tuple(parsed.prerelease),
    )
