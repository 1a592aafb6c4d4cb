"""Tag resolution service orchestrating selection, classification, bump and reconciliation."""

import logging
from typing import Iterable, List, Optional, Protocol, Sequence

from common.logging_utils import extra_context, is_debug_enabled
from .bump import bump
from .classifier import DEFAULT_RULES, ClassificationRule, classify
from .errors import InconsistentHistoryError
from .models import BumpCategory, CommitRecord, DivergenceEntry, DivergenceKind, ResolutionResult, TagRecord
from .reconcile import reconcile
from .selector import find_version_conflicts, select_tag

logger = logging.getLogger(__name__)

_KIND_ORDER = {kind: index for index, kind in enumerate(DivergenceKind)}


class CommitSource(Protocol):
    """Traversal primitive yielding commits newest first."""

    def commits_between(self, start: str, stop: Optional[str]) -> List[CommitRecord]:
        """Return commits reachable from ``start`` down to (excluding) ``stop``.

        ``stop=None`` means the whole history reachable from ``start``.

        Raises:
            InconsistentHistoryError: if ``stop`` is not reachable from ``start``.
        """
        ...


class TagResolutionService:  # pylint: disable=too-few-public-methods
    """Computes a ResolutionResult from materialized tag sets and a commit source.

    Holds only the classification rule table; every call is independent.
    """

    def __init__(self, rules: Optional[Sequence[ClassificationRule]] = None):
        self.rules = tuple(rules) if rules is not None else tuple(DEFAULT_RULES)

    def resolve(
        self,
        local_tags: Iterable[TagRecord],
        commit_source: CommitSource,
        remote_tags: Optional[Iterable[TagRecord]] = None,
        head: str = "HEAD",
        bump_override: Optional[BumpCategory] = None,
    ) -> ResolutionResult:
        """Run one resolution.

        Args:
            local_tags: Local tag records (parsed or not).
            commit_source: History traversal collaborator.
            remote_tags: Remote tag records; None skips reconciliation.
            head: Traversal start.
            bump_override: Forces the bump category instead of classifying.

        Returns:
            ResolutionResult

        Raises:
            InconsistentHistoryError: selected tag's commit unreachable from ``head``.
            ExternalSourceError: propagated unchanged from the commit source.
        """
        local_tags = list(local_tags)
        current_tag = select_tag(local_tags)
        current = current_tag.parsed if current_tag else None
        stop = current_tag.commit_hash if current_tag else None

        try:
            commits = commit_source.commits_between(head, stop)
        except InconsistentHistoryError as exc:
            if exc.tag_name is None and current_tag is not None:
                exc.tag_name = current_tag.raw_name
            raise

        if bump_override is not None:
            category = bump_override
        else:
            category = classify(commits, self.rules)
        candidate = bump(current, category)

        divergences: List[DivergenceEntry] = find_version_conflicts(local_tags)
        if remote_tags is not None:
            divergences.extend(reconcile(local_tags, list(remote_tags)))
        divergences.sort(key=lambda d: (d.tag_name, _KIND_ORDER[d.kind]))

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved candidate version",
                extra=extra_context(
                    event="decision",
                    component="service",
                    action="resolve",
                    outcome=category.name.lower(),
                    current=str(current) if current else None,
                    candidate=str(candidate),
                    commit_count=len(commits),
                    divergence_count=len(divergences),
                ),
            )

        return ResolutionResult(
            current=current,
            candidate=candidate,
            bump=category,
            divergences=tuple(divergences),
            current_tag=current_tag,
            commits=tuple(commits),
            skipped_tags=tuple(t for t in local_tags if t.parsed is None),
        )


def resolve(
    local_tags: Iterable[TagRecord],
    commit_source: CommitSource,
    remote_tags: Optional[Iterable[TagRecord]] = None,
    head: str = "HEAD",
    bump_override: Optional[BumpCategory] = None,
    rules: Optional[Sequence[ClassificationRule]] = None,
) -> ResolutionResult:
    """Module-level convenience around TagResolutionService.resolve."""
    return TagResolutionService(rules).resolve(
        local_tags,
        commit_source,
        remote_tags=remote_tags,
        head=head,
        bump_override=bump_override,
    )
