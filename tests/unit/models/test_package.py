"""Unit tests for package version and spec models."""

from datetime import UTC, datetime

import pytest
from mirrorctl.core.errors import UnsupportedFormatError
from mirrorctl.models.package import (
    NO_VERSION,
    CommitVersion,
    NoVersion,
    PackageSpec,
    PackageStatus,
    is_from_source,
    normalize_name,
    parse_version,
)
from mirrorctl.models.profile import CratePackage, GitHubSource, SourcePackage


class TestParseVersion:
    """Tests for parse_version."""

    def test_strips_leading_v(self) -> None:
        """'v14.1.0' and '14.1.0' are the same version."""
        assert parse_version("v14.1.0") == parse_version("14.1.0")
        assert str(parse_version("v14.1.0")) == "14.1.0"

    def test_prerelease(self) -> None:
        """Pre-release versions parse and order below the release."""
        assert parse_version("0.9.5-alpha.1") < parse_version("0.9.5")

    def test_ordering(self) -> None:
        """Versions compare numerically, not lexically."""
        assert parse_version("0.10.0") > parse_version("0.9.9")

    @pytest.mark.parametrize("text", ["1.0.0-nightly", "0.1.0-alpha.1.2", "2.0.0-x.7.z.92"])
    def test_semver_prerelease_labels(self, text: str) -> None:
        """Arbitrary dot-separated pre-release labels are valid."""
        assert str(parse_version(text)) == text
        assert parse_version(text) < parse_version(text.split("-")[0])

    def test_prerelease_identifiers_order(self) -> None:
        """Numeric identifiers sort below alphanumeric ones."""
        assert parse_version("1.0.0-alpha") < parse_version("1.0.0-alpha.1")
        assert parse_version("1.0.0-alpha.beta") < parse_version("1.0.0-beta")
        assert parse_version("1.0.0-beta.2") < parse_version("1.0.0-beta.11")

    def test_build_metadata_ignored(self) -> None:
        """Build metadata does not take part in comparison."""
        assert parse_version("1.0.0+build.5") == parse_version("1.0.0")

    @pytest.mark.parametrize(
        "text",
        ["", "latest", "1.2.3.x!", "1.0", "1", "1.0.0.0", "1!2.0.0", "1.0.0.post1", "1.0.0a0"],
    )
    def test_invalid(self, text: str) -> None:
        """Unparsable versions are unsupported-format errors."""
        with pytest.raises(UnsupportedFormatError, match="version string"):
            parse_version(text)


class TestCommitVersion:
    """Tests for CommitVersion equality."""

    def test_equality_ignores_timestamp(self) -> None:
        """Commits are equal by id only."""
        now = datetime.now(UTC)
        assert CommitVersion("a" * 40, now) == CommitVersion("a" * 40)

    def test_abbreviated_id_matches(self) -> None:
        """An abbreviated id equals the full id it prefixes."""
        full = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"
        assert CommitVersion("a1b2c3d4") == CommitVersion(full)
        assert hash(CommitVersion("a1b2c3d4")) == hash(CommitVersion(full))

    def test_different_commits(self) -> None:
        """Different ids are different commits."""
        assert CommitVersion("a1b2c3d4") != CommitVersion("a1b2c3d5")

    def test_very_short_ids_compare_exactly(self) -> None:
        """Ids shorter than seven characters never prefix-match."""
        assert CommitVersion("a1b") != CommitVersion("a1b2c3d4")

    def test_str(self) -> None:
        """Commits render as a short id with an optional date."""
        commit = CommitVersion("a1b2c3d4e5f6", datetime(2025, 1, 2, tzinfo=UTC))
        assert str(commit) == "a1b2c3d4 (2025-01-02)"
        assert str(CommitVersion("a1b2c3d4e5f6")) == "a1b2c3d4"


class TestNeedUpdate:
    """Tests for PackageStatus.need_update."""

    def test_newer_latest(self) -> None:
        """A different latest version needs an update."""
        status = PackageStatus(parse_version("1.0.0"), NO_VERSION, parse_version("1.1.0"))
        assert status.need_update

    def test_same_version(self) -> None:
        """Equal versions need no update, even spelled differently."""
        status = PackageStatus(parse_version("v1.0.0"), NO_VERSION, parse_version("1.0.0"))
        assert not status.need_update

    def test_not_installed(self) -> None:
        """A missing install with a published version needs an update."""
        assert PackageStatus(NO_VERSION, NO_VERSION, parse_version("1.0.0")).need_update

    def test_nothing_published(self) -> None:
        """Without a latest version there is nothing to update to."""
        assert not PackageStatus(parse_version("1.0.0"), NO_VERSION, NO_VERSION).need_update
        assert not PackageStatus(NO_VERSION, NO_VERSION, NO_VERSION).need_update

    def test_commit_vs_semver(self) -> None:
        """A semver install tracked against a branch head needs an update."""
        status = PackageStatus(parse_version("25.1.0"), NO_VERSION, CommitVersion("a1b2c3d4"))
        assert status.need_update

    def test_same_commit(self) -> None:
        """The installed commit being the branch head needs no update."""
        status = PackageStatus(CommitVersion("a1b2c3d4"), NO_VERSION, CommitVersion("a1b2c3d4ff"))
        assert not status.need_update

    def test_no_version_never_equals_concrete(self) -> None:
        """NoVersion only equals itself."""
        assert NoVersion() == NO_VERSION
        assert NO_VERSION != parse_version("1.0.0")
        assert NO_VERSION != CommitVersion("a1b2c3d4")


class TestPackageSpec:
    """Tests for PackageSpec."""

    def test_name_normalized(self) -> None:
        """Underscores become dashes."""
        assert PackageSpec("zellij_plugin").name == "zellij-plugin"
        assert normalize_name("a_b-c") == "a-b-c"

    def test_empty_name_rejected(self) -> None:
        """Specs need a name."""
        with pytest.raises(ValueError):
            PackageSpec("")

    def test_from_crate_package(self) -> None:
        """crate_name overrides the profile key."""
        spec = PackageSpec.from_package("helix", CratePackage(crate_name="helix-term"))
        assert spec == PackageSpec("helix-term")

    def test_from_source_package(self) -> None:
        """Source packages use the profile key and their repository."""
        package = SourcePackage.model_validate(
            {"type": "source", "source": {"github": "o/tool"}, "config_dir": {}}
        )
        spec = PackageSpec.from_package("tool", package)
        assert spec.source == GitHubSource(github="o/tool")
        assert is_from_source(package)
        assert not is_from_source(CratePackage())

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (None, "crates.io/helix-term"),
            (
                GitHubSource(github="helix-editor/helix", branch="master"),
                "github.com/helix-editor/helix/branches/master/crates/helix-term",
            ),
            (
                GitHubSource(github="helix-editor/helix", tag="25.01"),
                "github.com/helix-editor/helix/tags/25.01/crates/helix-term",
            ),
            (
                GitHubSource(github="helix-editor/helix", rev="a1b2c3d"),
                "github.com/helix-editor/helix/revs/a1b2c3d/crates/helix-term",
            ),
            (
                GitHubSource(github="helix-editor/helix"),
                "github.com/helix-editor/helix/default/crates/helix-term",
            ),
        ],
    )
    def test_cache_name(self, source: GitHubSource | None, expected: str) -> None:
        """Cache names are unique per source, ref and crate."""
        assert PackageSpec("helix-term", source).cache_name == expected
