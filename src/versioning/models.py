"""Data models for tag discovery, commit classification and resolution."""

import functools
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Tuple

import semantic_version


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """Immutable semantic version.

    Equality, hashing and ordering ignore build metadata. Ordering follows
    semver precedence, delegated to the semantic_version library.
    """
    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()
    build: Optional[str] = None
    _key: Any = field(default=None, init=False, repr=False)

    def __post_init__(self):
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        # Accept lists and numeric identifiers but store a tuple of str so the value stays hashable
        prerelease = tuple(str(p) for p in (self.prerelease or ()))
        object.__setattr__(self, "prerelease", prerelease)
        text = f"{self.major}.{self.minor}.{self.patch}"
        if prerelease:
            text += "-" + ".".join(prerelease)
        try:
            parsed = semantic_version.Version(text)
        except ValueError as exc:
            raise ValueError(f"invalid pre-release identifiers {prerelease!r}: {exc}") from exc
        if prerelease and tuple(parsed.prerelease) != prerelease:
            raise ValueError(f"invalid pre-release identifiers {prerelease!r}")
        object.__setattr__(self, "_key", parsed.precedence_key)

    @property
    def is_prerelease(self) -> bool:
        """True when pre-release identifiers are present."""
        return bool(self.prerelease)

    def release(self) -> "SemanticVersion":
        """Return the same major.minor.patch without pre-release or build."""
        return SemanticVersion(self.major, self.minor, self.patch)

    def _identity(self) -> Tuple[int, int, int, Tuple[str, ...]]:
        return (self.major, self.minor, self.patch, self.prerelease)

    def __eq__(self, other):
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._identity() == other._identity()

    def __lt__(self, other):
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key < other._key

    def __hash__(self):
        return hash(self._identity())

    def __str__(self):
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + self.build
        return text


@dataclass(frozen=True)
class TagRecord:
    """A tag as found in a tag source, parsed or not."""
    raw_name: str
    commit_hash: str
    parsed: Optional[SemanticVersion] = None

    @classmethod
    def from_name(cls, raw_name: str, commit_hash: str) -> "TagRecord":
        """Build a record, parsing the name (None when it is not a version)."""
        from .parser import parse_tag  # pylint: disable=import-outside-toplevel
        return cls(raw_name, commit_hash, parse_tag(raw_name))


@dataclass(frozen=True)
class CommitRecord:
    """A commit from history traversal (newest first)."""
    hash: str
    message: str
    parents: Tuple[str, ...] = ()

    @property
    def subject(self) -> str:
        """First line of the message."""
        lines = (self.message or "").strip().splitlines()
        return lines[0].strip() if lines else ""

    @property
    def body(self) -> str:
        """Everything after the subject line."""
        lines = (self.message or "").strip().splitlines()
        return "\n".join(lines[1:]).strip()

    @property
    def short_hash(self) -> str:
        """Seven-character abbreviated hash."""
        return self.hash[:7]


class BumpCategory(IntEnum):
    """Severity of change, ordered so that max() yields the strongest bump."""
    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @classmethod
    def from_name(cls, name: str) -> "BumpCategory":
        """Map 'patch' / 'minor' / 'major' / 'none' (any case) to a category."""
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown bump category: {name!r}") from exc


class DivergenceKind(Enum):
    """Kinds of tag divergence."""
    LOCAL_ONLY = "local-only"
    REMOTE_ONLY = "remote-only"
    MISMATCH = "mismatch"
    CONFLICTING_VERSION = "conflicting-version"


@dataclass(frozen=True)
class DivergenceEntry:
    """One disagreement about a tag name (or a version carried by two commits)."""
    tag_name: str
    local_hash: Optional[str]
    remote_hash: Optional[str]
    kind: DivergenceKind
    conflicts_with: Optional[str] = None

    def describe(self) -> str:
        """Single-line human readable description."""
        if self.kind == DivergenceKind.LOCAL_ONLY:
            return f"{self.tag_name}: only present locally ({_short(self.local_hash)})"
        if self.kind == DivergenceKind.REMOTE_ONLY:
            return f"{self.tag_name}: only present on remote ({_short(self.remote_hash)})"
        if self.kind == DivergenceKind.MISMATCH:
            return (
                f"{self.tag_name}: local {_short(self.local_hash)} "
                f"differs from remote {_short(self.remote_hash)}"
            )
        return (
            f"{self.tag_name}: same version as {self.conflicts_with} "
            f"on a different commit ({_short(self.local_hash)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "tag_name": self.tag_name,
            "kind": self.kind.value,
            "local_hash": self.local_hash,
            "remote_hash": self.remote_hash,
            "conflicts_with": self.conflicts_with,
        }


def _short(commit_hash: Optional[str]) -> str:
    return commit_hash[:7] if commit_hash else "-"


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one resolution call. Never persisted."""
    current: Optional[SemanticVersion]
    candidate: SemanticVersion
    bump: BumpCategory
    divergences: Tuple[DivergenceEntry, ...] = ()
    current_tag: Optional[TagRecord] = None
    commits: Tuple[CommitRecord, ...] = ()
    skipped_tags: Tuple[TagRecord, ...] = ()

    @property
    def has_new_version(self) -> bool:
        """True when a new tag is warranted."""
        return self.current is None or self.candidate != self.current

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation used by the CLI export."""
        return {
            "current": str(self.current) if self.current is not None else None,
            "current_tag": self.current_tag.raw_name if self.current_tag else None,
            "current_commit": self.current_tag.commit_hash if self.current_tag else None,
            "candidate": str(self.candidate),
            "bump": self.bump.name.lower(),
            "has_new_version": self.has_new_version,
            "commits": [
                {"hash": c.hash, "subject": c.subject} for c in self.commits
            ],
            "divergences": [d.to_dict() for d in self.divergences],
            "skipped_tags": [t.raw_name for t in self.skipped_tags],
        }
