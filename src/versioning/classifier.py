"""Commit message classification into bump categories.

Classification is table driven: an ordered list of rules, each pairing a
predicate over a commit message with the category it implies. The first
matching rule decides a commit's category; the strongest category across
all commits decides the bump.
"""

import logging
import re
from typing import Callable, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from .models import BumpCategory, CommitRecord

logger = logging.getLogger(__name__)


class ClassificationRule(NamedTuple):
    """A named predicate over a commit message and the category it implies."""
    name: str
    predicate: Callable[[str], bool]
    category: BumpCategory


def _split(message: str):
    lines = message.strip().splitlines()
    if not lines:
        return "", ""
    return lines[0].strip(), "\n".join(lines[1:])


_BREAKING_FOOTER_RE = re.compile(r"^\s*BREAKING[ -]CHANGE\s*:", re.IGNORECASE | re.MULTILINE)
_BREAKING_SUBJECT_RE = re.compile(r"^[a-z][\w-]*(?:\([^)]*\))?!:", re.IGNORECASE)
_FEATURE_SUBJECT_RE = re.compile(r"^(?:feat|feature)(?:\([^)]*\))?:", re.IGNORECASE)
_FIX_SUBJECT_RE = re.compile(r"^(?:fix|patch)(?:\([^)]*\))?:", re.IGNORECASE)


def _breaking_footer(message: str) -> bool:
    _, body = _split(message)
    return bool(_BREAKING_FOOTER_RE.search(body))


def _subject_matches(pattern: "re.Pattern[str]") -> Callable[[str], bool]:
    def predicate(message: str) -> bool:
        subject, _ = _split(message)
        return bool(pattern.match(subject))
    return predicate


DEFAULT_RULES: Sequence[ClassificationRule] = (
    ClassificationRule("breaking-footer", _breaking_footer, BumpCategory.MAJOR),
    ClassificationRule("breaking-subject", _subject_matches(_BREAKING_SUBJECT_RE), BumpCategory.MAJOR),
    ClassificationRule("feature", _subject_matches(_FEATURE_SUBJECT_RE), BumpCategory.MINOR),
    ClassificationRule("fix", _subject_matches(_FIX_SUBJECT_RE), BumpCategory.PATCH),
)


def _pattern_rule(name: str, pattern: str, category: BumpCategory) -> Optional[ClassificationRule]:
    try:
        compiled = re.compile(pattern, re.IGNORECASE | re.MULTILINE)
    except re.error as exc:
        logger.warning("Ignoring invalid %s classifier pattern %r: %s", category.name.lower(), pattern, exc)
        return None
    return ClassificationRule(name, lambda message: bool(compiled.search(message)), category)


def build_rules(extra: Optional[Mapping[str, Iterable[str]]] = None) -> List[ClassificationRule]:
    """Return the rule table with user patterns added ahead of the defaults.

    Args:
        extra: Mapping of 'major' / 'minor' / 'patch' to regular expressions,
            matched case-insensitively against the full commit message.

    Returns:
        Rules ordered by category severity, user patterns first within a category.
    """
    custom: List[ClassificationRule] = []
    for key, patterns in (extra or {}).items():
        try:
            category = BumpCategory.from_name(key)
        except ValueError:
            logger.warning("Ignoring classifier patterns for unknown category %r", key)
            continue
        if category == BumpCategory.NONE:
            continue
        if isinstance(patterns, str):
            patterns = [patterns]
        for index, pattern in enumerate(patterns or []):
            rule = _pattern_rule(f"custom-{category.name.lower()}-{index}", str(pattern), category)
            if rule is not None:
                custom.append(rule)
    rules = custom + list(DEFAULT_RULES)
    # sorted() is stable: user rules stay ahead of defaults of the same category
    return sorted(rules, key=lambda r: -int(r.category))


def classify_message(message: Optional[str], rules: Sequence[ClassificationRule] = DEFAULT_RULES) -> BumpCategory:
    """Classify one commit message; anything unrecognised is NONE."""
    if not isinstance(message, str) or not message.strip():
        return BumpCategory.NONE
    for rule in rules:
        if rule.predicate(message):
            return rule.category
    return BumpCategory.NONE


def classify(commits: Iterable[CommitRecord], rules: Sequence[ClassificationRule] = DEFAULT_RULES) -> BumpCategory:
    """Return the most severe category across all commits (NONE when empty)."""
    return max(
        (classify_message(c.message, rules) for c in commits),
        default=BumpCategory.NONE,
    )
