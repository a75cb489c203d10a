"""Tests for branch configuration resolution."""

import pytest

from gitsemver.config import BranchConfiguration, GitVersionConfiguration
from gitsemver.errors import ConfigurationError
from gitsemver.models import DeploymentMode, IncrementStrategy
from gitsemver.resolver import ConfigurationResolver, normalize_branch_name, resolve
from gitsemver.workflows import (
    CATCH_ALL_KEY,
    effective_branches,
    get_workflow_branches,
)


class TestNormalizeBranchName:
    """Tests for branch name normalization."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("main", "main"),
            ("refs/heads/main", "main"),
            ("refs/heads/feature/login", "feature/login"),
            ("refs/remotes/upstream/develop", "develop"),
            ("origin/release/1.2.0", "release/1.2.0"),
        ],
    )
    def test_normalize(self, name: str, expected: str) -> None:
        """Test ref prefixes are stripped."""
        assert normalize_branch_name(name) == expected


class TestResolve:
    """Tests for resolving a branch's effective configuration."""

    def test_first_match_wins(self) -> None:
        """Test branches are matched in declared order."""
        cfg = (
            GitVersionConfiguration()
            .with_branch("hotfix", regex=r"^hotfix/", increment="Patch")
            .with_branch("anything", regex=r".*", increment="Major")
        )
        assert resolve("hotfix/crash", cfg).key == "hotfix"
        assert resolve("other", cfg).key == "anything"

    def test_literal_key_without_regex(self) -> None:
        """Test a branch without regex matches its key literally."""
        cfg = GitVersionConfiguration().with_branch("main", increment="Minor")
        assert resolve("main", cfg).increment is IncrementStrategy.MINOR
        with pytest.raises(ConfigurationError):
            resolve("mainline", cfg)

    def test_no_match_raises(self) -> None:
        """Test an unmatched branch without catch-all raises ConfigurationError."""
        cfg = GitVersionConfiguration().with_branch("main")
        with pytest.raises(ConfigurationError, match="No branch configuration matches"):
            resolve("feature/x", cfg)

    def test_globals_fill_unset_fields(self) -> None:
        """Test unset branch fields come from the globals."""
        cfg = GitVersionConfiguration(mode="ManualDeployment", label="pre").with_branch("main")
        effective = resolve("main", cfg)
        assert effective.mode is DeploymentMode.MANUAL_DEPLOYMENT
        assert effective.label == "pre"
        assert effective.increment is IncrementStrategy.PATCH

    def test_explicit_null_label_overrides_global(self) -> None:
        """Test label: null disables a global label."""
        cfg = GitVersionConfiguration(label="pre").with_branch("main", label=None)
        assert resolve("main", cfg).label is None

    def test_inherit_uses_global_increment(self) -> None:
        """Test Inherit resolves to the global increment."""
        cfg = GitVersionConfiguration(increment="Minor").with_branch("main", increment="Inherit")
        assert resolve("main", cfg).increment is IncrementStrategy.MINOR

    def test_global_inherit_resolves_to_patch(self) -> None:
        """Test a global Inherit falls back to Patch."""
        cfg = GitVersionConfiguration(increment="Inherit").with_branch("main", increment="Inherit")
        assert resolve("main", cfg).increment is IncrementStrategy.PATCH

    def test_label_placeholder_from_group(self) -> None:
        """Test {BranchName} is filled from the named group and sanitized."""
        cfg = GitVersionConfiguration().with_branch(
            "feature", regex=r"^features?/(?P<BranchName>.+)", label="{BranchName}"
        )
        assert resolve("feature/login_page", cfg).label == "login-page"

    def test_label_placeholder_falls_back_to_branch_name(self) -> None:
        """Test {BranchName} uses the whole branch name without a group."""
        cfg = GitVersionConfiguration().with_branch("any", regex=r".+", label="{BranchName}")
        assert resolve("origin/spike/x", cfg).label == "spike-x"

    def test_pull_request_number_placeholder(self) -> None:
        """Test other named groups fill their placeholders."""
        cfg = GitVersionConfiguration(workflow="GitHubFlow/v1")
        assert resolve("pull/42", cfg).label == "PullRequest42"

    def test_branch_name_recorded(self) -> None:
        """Test the normalized branch name is kept on the result."""
        cfg = GitVersionConfiguration().with_branch("main")
        assert resolve("refs/heads/main", cfg).branch_name == "main"

    def test_deterministic(self) -> None:
        """Test resolution is repeatable and hashable."""
        cfg = GitVersionConfiguration(workflow="GitFlow/v1")
        first = resolve("feature/a", cfg)
        second = resolve("feature/a", cfg)
        assert first == second
        assert hash(first) == hash(second)

    def test_invalid_regex_raises(self) -> None:
        """Test a regex that does not compile raises ConfigurationError."""
        cfg = GitVersionConfiguration().with_branch("main", regex="^(unclosed")
        with pytest.raises(ConfigurationError, match="Invalid regex"):
            ConfigurationResolver(cfg)

    def test_invalid_tag_prefix_raises(self) -> None:
        """Test a bad tag prefix is rejected up front."""
        with pytest.raises(ConfigurationError):
            ConfigurationResolver(GitVersionConfiguration(tag_prefix="[v"))

    def test_unknown_source_branch_raises(self) -> None:
        """Test source branches must name configured keys."""
        cfg = GitVersionConfiguration().with_branch("feature", source_branches=["nowhere"])
        with pytest.raises(ConfigurationError, match="unknown source branches"):
            ConfigurationResolver(cfg)


class TestWorkflows:
    """Tests for the workflow presets."""

    @pytest.mark.parametrize("workflow", ["GitFlow/v1", "GitHubFlow/v1", "TrunkBased/preview1"])
    def test_presets_are_valid(self, workflow: str) -> None:
        """Test every preset flattens and ends with the catch-all."""
        resolver = ConfigurationResolver(GitVersionConfiguration(workflow=workflow))
        assert resolver.keys[-1] == CATCH_ALL_KEY
        assert resolver.match_key("main") == "main"
        assert resolver.match_key("some/random-branch") == CATCH_ALL_KEY

    def test_workflow_name_case_insensitive(self) -> None:
        """Test preset lookup ignores case."""
        assert "develop" in get_workflow_branches("gitflow/V1")

    def test_unknown_workflow(self) -> None:
        """Test an unknown preset raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Unknown workflow"):
            get_workflow_branches("CvsFlow/v9")

    def test_user_override_merges_field_by_field(self) -> None:
        """Test a user entry overrides only the fields it sets."""
        cfg = GitVersionConfiguration(workflow="GitFlow/v1").with_branch("develop", label="nightly")
        branches = effective_branches(cfg)
        develop = branches["develop"]
        assert develop.label == "nightly"
        assert develop.increment is IncrementStrategy.MINOR
        assert develop.tracks_release_branches is True

    def test_new_user_keys_before_catch_all(self) -> None:
        """Test new keys are matched after the preset but before the catch-all."""
        cfg = GitVersionConfiguration(workflow="GitHubFlow/v1").with_branch(
            "experiment", regex=r"^exp/", source_branches=["main"]
        )
        keys = list(effective_branches(cfg))
        assert keys[-2:] == ["experiment", CATCH_ALL_KEY]
        assert resolve("exp/faster", cfg).key == "experiment"

    def test_no_workflow_uses_only_user_branches(self) -> None:
        """Test without a workflow only the user's branches exist."""
        cfg = GitVersionConfiguration(branches={"main": BranchConfiguration()})
        assert list(effective_branches(cfg)) == ["main"]

    def test_release_branch_flags(self) -> None:
        """Test GitFlow marks release branches and develop tracks them."""
        resolver = ConfigurationResolver(GitVersionConfiguration(workflow="GitFlow/v1"))
        assert resolver.resolve("release/1.2.0").is_release_branch
        assert resolver.resolve("develop").tracks_release_branches
        assert resolver.resolve("release/1.2.0").label == "beta"
