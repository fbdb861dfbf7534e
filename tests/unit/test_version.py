"""Tests for the version model."""

from __future__ import annotations

import pytest

from tagbump.core.version import BumpType, Version, parse_last_tag, parse_version
from tagbump.exceptions import InvalidVersionFormat


class TestVersionParse:
    """Tests for Version.parse()."""

    def test_parse_plain(self):
        """Parse a bare version."""
        assert Version.parse("1.2.3") == Version(1, 2, 3)

    def test_parse_with_v_prefix(self):
        """Leading 'v' is accepted and discarded."""
        v = Version.parse("v1.2.3")
        assert v == Version(1, 2, 3)
        assert str(v) == "1.2.3"

    def test_parse_with_word_prefix(self):
        """Any non-numeric prefix is accepted."""
        assert Version.parse("release-2.0.0") == Version(2, 0, 0)

    def test_parse_prerelease(self):
        """Pre-release suffix after '-' is kept."""
        v = Version.parse("v2.0.0-rc.1")
        assert v.prerelease == "rc.1"
        assert v.is_prerelease

    def test_parse_strips_whitespace(self):
        assert Version.parse(" 0.4.1\n") == Version(0, 4, 1)

    @pytest.mark.parametrize(
        "text",
        ["not-a-version", "1.2", "1.2.3.4", "v1.x.3", "", "1.2.3-", "1.2.3+build"],
    )
    def test_parse_invalid(self, text: str):
        """Malformed strings raise InvalidVersionFormat."""
        with pytest.raises(InvalidVersionFormat):
            Version.parse(text)

    def test_parse_version_function(self):
        assert parse_version("v0.1.0") == Version(0, 1, 0)


class TestParseLastTag:
    """Tests for parse_last_tag()."""

    def test_no_tag_is_zero(self):
        """No tag means baseline 0.0.0."""
        assert parse_last_tag(None) == Version(0, 0, 0)

    def test_malformed_tag_raises(self):
        """A malformed tag is an error, not 0.0.0."""
        with pytest.raises(InvalidVersionFormat, match="not-a-version"):
            parse_last_tag("not-a-version")

    def test_valid_tag(self):
        assert parse_last_tag("v1.4.0") == Version(1, 4, 0)


class TestVersionRender:
    """Tests for rendering versions."""

    def test_str_is_canonical(self):
        """str() never adds prefix or pre-release."""
        assert str(Version(1, 2, 3, "beta")) == "1.2.3"

    def test_render_with_prefix_and_prerelease(self):
        v = Version(1, 2, 3, "beta.2")
        assert v.render(prefix="v", with_prerelease=True) == "v1.2.3-beta.2"

    def test_render_prerelease_only_when_present(self):
        assert Version(1, 0, 0).render(with_prerelease=True) == "1.0.0"


class TestVersionOrdering:
    """Tests for version comparison."""

    def test_numeric_ordering(self):
        assert Version(1, 2, 3) < Version(1, 2, 4)
        assert Version(1, 2, 9) < Version(1, 3, 0)
        assert Version(1, 9, 9) < Version(2, 0, 0)
        assert Version(1, 10, 0) > Version(1, 9, 0)

    def test_prerelease_sorts_before_release(self):
        assert Version(1, 0, 0, "rc.1") < Version(1, 0, 0)
        assert not Version(1, 0, 0) < Version(1, 0, 0, "rc.1")

    def test_prerelease_identifiers(self):
        assert Version(1, 0, 0, "alpha") < Version(1, 0, 0, "beta")
        assert Version(1, 0, 0, "rc.2") < Version(1, 0, 0, "rc.10")
        assert Version(1, 0, 0, "1") < Version(1, 0, 0, "alpha")

    def test_equality(self):
        assert Version(1, 0, 0) == Version.parse("v1.0.0")
        assert Version(1, 0, 0) != Version(1, 0, 0, "rc.1")

    def test_sorting(self):
        versions = [Version(2, 0, 0), Version(1, 0, 0, "rc.1"), Version(1, 0, 0), Version(0, 9, 9)]
        assert sorted(versions) == [
            Version(0, 9, 9),
            Version(1, 0, 0, "rc.1"),
            Version(1, 0, 0),
            Version(2, 0, 0),
        ]

    def test_negative_component_rejected(self):
        with pytest.raises(InvalidVersionFormat):
            Version(-1, 0, 0)


class TestVersionBump:
    """Tests for Version.bump()."""

    def test_patch(self):
        assert Version(1, 2, 3).bump(BumpType.PATCH) == Version(1, 2, 4)

    def test_minor(self):
        assert Version(1, 2, 3).bump(BumpType.MINOR) == Version(1, 3, 0)

    def test_major(self):
        assert Version(1, 2, 3).bump(BumpType.MAJOR) == Version(2, 0, 0)

    def test_major_before_1_0_bumps_minor(self):
        """Breaking changes before 1.0.0 bump the minor component."""
        assert Version(0, 4, 1).bump(BumpType.MAJOR) == Version(0, 5, 0)
        assert Version(0, 0, 0).bump(BumpType.MAJOR) == Version(0, 1, 0)

    def test_bump_drops_prerelease(self):
        """Graduating out of a pre-release drops the label."""
        assert Version(1, 2, 0, "rc.1").bump(BumpType.MINOR).prerelease is None

    @pytest.mark.parametrize(
        ("current", "bump_type", "expected"),
        [
            (Version(1, 3, 0, "rc.1"), BumpType.PATCH, Version(1, 3, 0)),
            (Version(1, 3, 0, "rc.1"), BumpType.MINOR, Version(1, 3, 0)),
            (Version(1, 3, 0, "rc.1"), BumpType.MAJOR, Version(2, 0, 0)),
            (Version(2, 0, 0, "rc.1"), BumpType.MAJOR, Version(2, 0, 0)),
            (Version(1, 2, 4, "beta"), BumpType.PATCH, Version(1, 2, 4)),
            (Version(1, 2, 4, "beta"), BumpType.MINOR, Version(1, 3, 0)),
            (Version(0, 3, 0, "rc"), BumpType.MAJOR, Version(0, 3, 0)),
            (Version(0, 0, 0, "dev"), BumpType.PATCH, Version(0, 0, 1)),
        ],
    )
    def test_prerelease_graduates_to_its_release(
        self, current: Version, bump_type: BumpType, expected: Version
    ):
        """A pre-release is followed by its own release when that covers the bump."""
        assert current.bump(bump_type) == expected

    def test_bump_none_raises(self):
        with pytest.raises(ValueError):
            Version(1, 0, 0).bump(BumpType.NONE)

    def test_with_prerelease(self):
        v = Version(1, 0, 0).with_prerelease("beta")
        assert v.prerelease == "beta"
        assert v.with_prerelease(None).prerelease is None
