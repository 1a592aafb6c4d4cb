"""Tests for local/remote tag reconciliation."""

from conftest import make_tag
from versioning.models import DivergenceEntry, DivergenceKind
from versioning.reconcile import reconcile


def tags(mapping):
    return {make_tag(name, h) for name, h in mapping.items()}


_SWAPPED = {
    DivergenceKind.LOCAL_ONLY: DivergenceKind.REMOTE_ONLY,
    DivergenceKind.REMOTE_ONLY: DivergenceKind.LOCAL_ONLY,
    DivergenceKind.MISMATCH: DivergenceKind.MISMATCH,
}


class TestReconcile:
    """Divergence detection between two tag sets."""

    def test_mismatch_and_remote_only(self):
        result = reconcile(tags({"a": "h1"}), tags({"a": "h2", "b": "h3"}))
        assert result == [
            DivergenceEntry("a", "h1", "h2", DivergenceKind.MISMATCH),
            DivergenceEntry("b", None, "h3", DivergenceKind.REMOTE_ONLY),
        ]

    def test_local_only(self):
        result = reconcile(tags({"v1.0.0": "h1", "v1.1.0": "h2"}), tags({"v1.0.0": "h1"}))
        assert result == [DivergenceEntry("v1.1.0", "h2", None, DivergenceKind.LOCAL_ONLY)]

    def test_convergent_sets(self):
        both = tags({"v1.0.0": "h1", "nightly": "h9"})
        assert reconcile(both, both) == []
        assert reconcile(set(), set()) == []

    def test_sorted_by_name(self):
        result = reconcile(tags({"c": "1", "a": "1"}), tags({"b": "2"}))
        assert [e.tag_name for e in result] == ["a", "b", "c"]

    def test_swapping_inputs_swaps_labels(self):
        local = tags({"a": "h1", "c": "h4", "d": "h5"})
        remote = tags({"a": "h2", "b": "h3", "d": "h5"})
        forward = reconcile(local, remote)
        backward = reconcile(remote, local)
        assert backward == [
            DivergenceEntry(e.tag_name, e.remote_hash, e.local_hash, _SWAPPED[e.kind]) for e in forward
        ]

    def test_inputs_not_mutated(self):
        local = [make_tag("a", "h1")]
        remote = [make_tag("a", "h2"), make_tag("b", "h3")]
        before = (list(local), list(remote))
        reconcile(local, remote)
        assert (local, remote) == before

    def test_accepts_generators(self):
        result = reconcile((t for t in [make_tag("a", "h1")]), iter([]))
        assert result[0].kind == DivergenceKind.LOCAL_ONLY
