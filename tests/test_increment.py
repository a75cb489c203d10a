"""Tests for increment resolution and label synthesis."""

from datetime import UTC, datetime

import pytest

from gitsemver.calculation import (
    BaseVersionCandidate,
    IncrementResolver,
    LabelSynthesizer,
    find_message_increment,
)
from gitsemver.config import GitVersionConfiguration
from gitsemver.git.models import Commit
from gitsemver.models import IncrementStrategy, SemanticVersion, VersionSource
from gitsemver.resolver import resolve

HEAD = "h" * 40
BASE = "b" * 40


def _commit(message: str, sha: str = HEAD, merge: bool = False) -> Commit:
    parents = ("p" * 40, "q" * 40) if merge else ("p" * 40,)
    return Commit(
        sha=sha,
        parents=parents,
        message=message,
        timestamp=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
    )


def _base(
    version: str = "1.0.0",
    source: VersionSource = VersionSource.EXACT_TAG,
    sha: str = BASE,
    should_increment: bool = True,
) -> BaseVersionCandidate:
    return BaseVersionCandidate(
        version=SemanticVersion.parse(version),
        sha=sha,
        source=source,
        distance=2,
        should_increment=should_increment,
    )


def _config(**branch_fields: object):
    cfg = GitVersionConfiguration(**branch_fields.pop("globals", {})).with_branch(
        "main", **branch_fields
    )
    return resolve("main", cfg)


class TestMessageMarkers:
    """Tests for +semver: markers in commit messages."""

    def test_highest_marker_wins(self) -> None:
        """Test major beats minor beats patch."""
        commits = [_commit("fix +semver: patch"), _commit("+semver: breaking"), _commit("+semver: feature")]
        assert find_message_increment(commits, _config()) is IncrementStrategy.MAJOR

    def test_only_skip_markers(self) -> None:
        """Test none/skip markers alone give None."""
        commits = [_commit("docs +semver: skip"), _commit("plain")]
        assert find_message_increment(commits, _config()) is IncrementStrategy.NONE

    def test_skip_does_not_cancel_bump(self) -> None:
        """Test a bump marker wins over a skip marker."""
        commits = [_commit("+semver: none"), _commit("+semver: minor")]
        assert find_message_increment(commits, _config()) is IncrementStrategy.MINOR

    def test_no_markers(self) -> None:
        """Test messages without markers give no opinion."""
        assert find_message_increment([_commit("just a change")], _config()) is None

    def test_disabled(self) -> None:
        """Test markers are ignored when message incrementing is disabled."""
        cfg = _config(globals={"commit_message_incrementing": "Disabled"})
        assert find_message_increment([_commit("+semver: major")], cfg) is None

    def test_merge_message_only(self) -> None:
        """Test only merge commits count in MergeMessageOnly mode."""
        cfg = _config(globals={"commit_message_incrementing": "MergeMessageOnly"})
        assert find_message_increment([_commit("+semver: major")], cfg) is None
        assert find_message_increment([_commit("+semver: major", merge=True)], cfg) is IncrementStrategy.MAJOR

    def test_custom_pattern(self) -> None:
        """Test the marker patterns are configurable."""
        cfg = _config(globals={"minor_version_bump_message": r"^feat(\(.+\))?:"})
        assert find_message_increment([_commit("feat(api): add")], cfg) is IncrementStrategy.MINOR


class TestIncrementResolver:
    """Tests for IncrementResolver.resolve_increment."""

    def test_exact_tag_at_head(self) -> None:
        """Test a tag on HEAD is never incremented."""
        base = _base(sha=HEAD)
        resolved = IncrementResolver().resolve_increment(base, [_commit("+semver: major")], _config(increment="Major"), HEAD)
        assert resolved is IncrementStrategy.NONE

    def test_zero_commits(self) -> None:
        """Test no commits since the base gives None."""
        resolved = IncrementResolver().resolve_increment(_base(), [], _config(increment="Minor"), HEAD)
        assert resolved is IncrementStrategy.NONE

    def test_candidate_not_to_increment(self) -> None:
        """Test a candidate that already carries its bump is left alone."""
        base = _base(source=VersionSource.MERGE_POINT, should_increment=False)
        resolved = IncrementResolver().resolve_increment(base, [_commit("x")], _config(increment="Minor"), HEAD)
        assert resolved is IncrementStrategy.NONE

    def test_pre_release_base(self) -> None:
        """Test a pre-release base only advances its counter."""
        base = _base(version="1.1.0-beta.1")
        resolved = IncrementResolver().resolve_increment(base, [_commit("x")], _config(increment="Minor"), HEAD)
        assert resolved is IncrementStrategy.NONE

    def test_message_overrides_configuration(self) -> None:
        """Test markers take precedence over the configured increment."""
        resolved = IncrementResolver().resolve_increment(
            _base(), [_commit("+semver: major")], _config(increment="Patch"), HEAD
        )
        assert resolved is IncrementStrategy.MAJOR

    @pytest.mark.parametrize(
        "increment",
        [IncrementStrategy.NONE, IncrementStrategy.PATCH, IncrementStrategy.MINOR, IncrementStrategy.MAJOR],
    )
    def test_configured_increment(self, increment: IncrementStrategy) -> None:
        """Test the configured increment applies without markers."""
        resolved = IncrementResolver().resolve_increment(
            _base(), [_commit("x")], _config(increment=increment.value), HEAD
        )
        assert resolved is increment


class TestLabelSynthesizer:
    """Tests for pre-release label and build metadata synthesis."""

    def _synthesize(self, core: str, base: BaseVersionCandidate, commits: int, **branch_fields: object) -> SemanticVersion:
        return LabelSynthesizer().synthesize(
            SemanticVersion.parse(core),
            base,
            _config(**branch_fields),
            commits,
            _commit("head"),
            "main",
        )

    def test_no_label(self) -> None:
        """Test a null label gives no pre-release."""
        version = self._synthesize("1.1.0", _base(), 2, label=None, mode="ContinuousDelivery")
        assert version.sem_ver == "1.1.0"
        assert version.full_sem_ver == "1.1.0+2"

    def test_continuous_delivery_counter(self) -> None:
        """Test ContinuousDelivery counts commits since the base."""
        version = self._synthesize("1.1.0", _base(), 2, label="beta", mode="ContinuousDelivery")
        assert version.sem_ver == "1.1.0-beta.2"
        assert version.full_sem_ver == "1.1.0-beta.2+2"

    def test_continuous_delivery_continues_base_counter(self) -> None:
        """Test the counter continues from a same-label base."""
        base = _base(version="1.1.0-beta.3")
        version = self._synthesize("1.1.0", base, 2, label="beta", mode="ContinuousDelivery")
        assert version.sem_ver == "1.1.0-beta.5"

    def test_continuous_deployment_hides_count(self) -> None:
        """Test ContinuousDeployment shows no +N."""
        version = self._synthesize("1.1.0", _base(), 3, label="ci", mode="ContinuousDeployment")
        assert version.sem_ver == "1.1.0-ci.3"
        assert version.full_sem_ver == "1.1.0-ci.3"
        assert version.build_metadata.commits_since_version_source == 3

    def test_continuous_deployment_without_label_keeps_count(self) -> None:
        """Test ContinuousDeployment without a label keeps +N in FullSemVer."""
        version = self._synthesize("1.0.1", _base(), 3, label=None, mode="ContinuousDeployment")
        assert version.sem_ver == "1.0.1"
        assert version.full_sem_ver == "1.0.1+3"
        assert version.build_metadata.commits_since_tag == 3

    def test_manual_deployment(self) -> None:
        """Test ManualDeployment keeps the counter at 1 and shows the count."""
        version = self._synthesize("1.1.0", _base(), 4, label="beta", mode="ManualDeployment")
        assert version.sem_ver == "1.1.0-beta.1"
        assert version.full_sem_ver == "1.1.0-beta.1+4"

    def test_manual_deployment_keeps_base_number(self) -> None:
        """Test ManualDeployment reuses a same-label base number."""
        base = _base(version="1.1.0-beta.3")
        version = self._synthesize("1.1.0", base, 4, label="beta", mode="ManualDeployment")
        assert version.sem_ver == "1.1.0-beta.3"

    def test_manual_deployment_zero_commits(self) -> None:
        """Test ManualDeployment leaves the counter unset at the base."""
        version = self._synthesize("1.1.0", _base(), 0, label="beta", mode="ManualDeployment")
        assert version.sem_ver == "1.1.0-beta"

    def test_empty_label(self) -> None:
        """Test an empty label gives a number-only pre-release."""
        version = self._synthesize("1.1.0", _base(), 2, label="", mode="ContinuousDelivery")
        assert version.sem_ver == "1.1.0-2"

    def test_exact_tag_returned_verbatim(self) -> None:
        """Test a tag on HEAD is returned as tagged."""
        base = _base(version="2.0.0-rc.1", sha=HEAD)
        version = self._synthesize("2.0.0", base, 0, label="beta", mode="ContinuousDelivery")
        assert version.sem_ver == "2.0.0-rc.1"
        assert version.full_sem_ver == "2.0.0-rc.1"

    def test_build_metadata_recorded(self) -> None:
        """Test metadata records branch, shas and commit date."""
        version = self._synthesize("1.1.0", _base(), 2, label=None)
        metadata = version.build_metadata
        assert metadata.branch == "main"
        assert metadata.sha == HEAD
        assert metadata.short_sha == HEAD[:7]
        assert metadata.version_source_sha == BASE
        assert metadata.commit_date.isoformat() == "2024-03-01"
