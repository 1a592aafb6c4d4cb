"""Tests for next-version computation."""

import pytest

from versioning.bump import bump, with_prerelease
from versioning.models import BumpCategory, SemanticVersion

SV = SemanticVersion
STARTS = [SV(1, 0, 0), SV(1, 2, 3), SV(4, 0, 9), SV(2, 3, 4, ("rc", "1")), SV(0, 4, 2), SV(0, 0, 0), SV(3, 1, 4, (), "b1")]


class TestNoPriorVersion:
    """Without a tag the baseline is pre-1.0."""

    @pytest.mark.parametrize("category", [BumpCategory.NONE, BumpCategory.PATCH, BumpCategory.MINOR])
    def test_initial_version(self, category):
        assert bump(None, category) == SV(0, 1, 0)

    def test_breaking_graduates_to_one(self):
        assert bump(None, BumpCategory.MAJOR) == SV(1, 0, 0)


class TestStable:
    """major >= 1 follows ordinary semver increments."""

    def test_major(self):
        assert bump(SV(1, 2, 3), BumpCategory.MAJOR) == SV(2, 0, 0)

    def test_minor(self):
        assert bump(SV(1, 3, 0), BumpCategory.MINOR) == SV(1, 4, 0)
        assert bump(SV(1, 3, 7), BumpCategory.MINOR) == SV(1, 4, 0)

    def test_patch(self):
        assert bump(SV(1, 2, 3), BumpCategory.PATCH) == SV(1, 2, 4)

    @pytest.mark.parametrize("start", [s for s in STARTS if s.major >= 1])
    def test_monotonic(self, start):
        assert bump(start, BumpCategory.PATCH) < bump(start, BumpCategory.MINOR) < bump(start, BumpCategory.MAJOR)

    def test_prerelease_basis_is_stripped(self):
        assert bump(SV(2, 3, 4, ("rc", "1")), BumpCategory.PATCH) == SV(2, 3, 5)
        assert bump(SV(2, 3, 4, ("rc", "1")), BumpCategory.MINOR) == SV(2, 4, 0)

    def test_build_metadata_dropped(self):
        assert bump(SV(3, 1, 4, (), "b1"), BumpCategory.PATCH).build is None


class TestPreOne:
    """major == 0: breaking bumps minor, features and fixes bump patch."""

    @pytest.mark.parametrize("x, y", [(0, 0), (4, 2), (9, 13)])
    def test_breaking_bumps_minor(self, x, y):
        assert bump(SV(0, x, y), BumpCategory.MAJOR) == SV(0, x + 1, 0)

    def test_feature_bumps_patch(self):
        assert bump(SV(0, 4, 2), BumpCategory.MINOR) == SV(0, 4, 3)

    def test_fix_bumps_patch(self):
        assert bump(SV(0, 4, 2), BumpCategory.PATCH) == SV(0, 4, 3)


class TestNoneCategory:
    """NONE is a valid no-op outcome."""

    @pytest.mark.parametrize("start", STARTS)
    def test_identity(self, start):
        assert bump(start, BumpCategory.NONE) == start
        assert bump(start, BumpCategory.NONE) is start


class TestWithPrerelease:
    """--suffix support."""

    def test_suffix(self):
        assert str(with_prerelease(SV(1, 4, 0), "rc.1")) == "1.4.0-rc.1"

    def test_leading_dash_tolerated(self):
        assert with_prerelease(SV(1, 4, 0), "-beta").prerelease == ("beta",)

    @pytest.mark.parametrize("suffix", ["", "rc..1", "rc.01", "bad suffix", "rc.1+build5", "+build5"])
    def test_invalid(self, suffix):
        with pytest.raises(ValueError):
            with_prerelease(SV(1, 4, 0), suffix)
