"""Built-in branch presets selected by the ``workflow`` setting.

Each preset is an ordered mapping of branch key to BranchConfiguration.
Order is match priority, so the catch-all ``unknown`` key always comes last.
"""

from __future__ import annotations

from collections.abc import Callable

from gitsemver.config import BranchConfiguration, GitVersionConfiguration
from gitsemver.errors import ConfigurationError
from gitsemver.models import DeploymentMode, IncrementStrategy

CATCH_ALL_KEY = "unknown"

MAIN_REGEX = r"^(master|main)$"
DEVELOP_REGEX = r"^dev(elop)?(ment)?$"
RELEASE_REGEX = r"^releases?[/-](?P<BranchName>.+)"
FEATURE_REGEX = r"^features?[/-](?P<BranchName>.+)"
HOTFIX_REGEX = r"^hotfix(es)?[/-](?P<BranchName>.+)"
SUPPORT_REGEX = r"^support[/-](?P<BranchName>.+)"
PULL_REQUEST_REGEX = r"^(pull-requests|pull|pr)[/-](?P<Number>\d*)"
UNKNOWN_REGEX = r"(?P<BranchName>.+)"


def _git_flow() -> dict[str, BranchConfiguration]:
    return {
        "develop": BranchConfiguration(
            regex=DEVELOP_REGEX,
            increment=IncrementStrategy.MINOR,
            label="alpha",
            mode=DeploymentMode.CONTINUOUS_DELIVERY,
            source_branches=("main",),
            tracks_release_branches=True,
        ),
        "main": BranchConfiguration(
            regex=MAIN_REGEX,
            increment=IncrementStrategy.PATCH,
            label=None,
            source_branches=(),
        ),
        "release": BranchConfiguration(
            regex=RELEASE_REGEX,
            increment=IncrementStrategy.NONE,
            label="beta",
            mode=DeploymentMode.MANUAL_DEPLOYMENT,
            source_branches=("main", "support", "develop"),
            is_release_branch=True,
        ),
        "feature": BranchConfiguration(
            regex=FEATURE_REGEX,
            increment=IncrementStrategy.INHERIT,
            label="{BranchName}",
            mode=DeploymentMode.MANUAL_DEPLOYMENT,
            source_branches=("develop", "main", "release", "support", "hotfix"),
        ),
        "pull-request": BranchConfiguration(
            regex=PULL_REQUEST_REGEX,
            increment=IncrementStrategy.INHERIT,
            label="PullRequest{Number}",
            mode=DeploymentMode.CONTINUOUS_DELIVERY,
            source_branches=("develop", "main", "release", "feature", "support", "hotfix"),
        ),
        "hotfix": BranchConfiguration(
            regex=HOTFIX_REGEX,
            increment=IncrementStrategy.INHERIT,
            label="beta",
            mode=DeploymentMode.MANUAL_DEPLOYMENT,
            source_branches=("main", "support"),
        ),
        "support": BranchConfiguration(
            regex=SUPPORT_REGEX,
            increment=IncrementStrategy.PATCH,
            label=None,
            source_branches=("main",),
        ),
        CATCH_ALL_KEY: BranchConfiguration(
            regex=UNKNOWN_REGEX,
            increment=IncrementStrategy.INHERIT,
            label="{BranchName}",
            mode=DeploymentMode.MANUAL_DEPLOYMENT,
            source_branches=("main", "develop", "release", "feature", "pull-request", "hotfix", "support"),
        ),
    }


def _github_flow() -> dict[str, BranchConfiguration]:
    return {
        "main": BranchConfiguration(
            regex=MAIN_REGEX,
            increment=IncrementStrategy.PATCH,
            label=None,
            source_branches=(),
        ),
        "release": BranchConfiguration(
            regex=RELEASE_REGEX,
            increment=IncrementStrategy.NONE,
            label="beta",
            mode=DeploymentMode.MANUAL_DEPLOYMENT,
            source_branches=("main",),
            is_release_branch=True,
        ),
        "feature": BranchConfiguration(
            regex=FEATURE_REGEX,
            increment=IncrementStrategy.INHERIT,
            label="{BranchName}",
            mode=DeploymentMode.MANUAL_DEPLOYMENT,
            source_branches=("main", "release"),
        ),
        "pull-request": BranchConfiguration(
            regex=PULL_REQUEST_REGEX,
            increment=IncrementStrategy.INHERIT,
            label="PullRequest{Number}",
            mode=DeploymentMode.CONTINUOUS_DELIVERY,
            source_branches=("main", "release", "feature"),
        ),
        CATCH_ALL_KEY: BranchConfiguration(
            regex=UNKNOWN_REGEX,
            increment=IncrementStrategy.INHERIT,
            label="{BranchName}",
            mode=DeploymentMode.MANUAL_DEPLOYMENT,
            source_branches=("main", "release", "feature", "pull-request"),
        ),
    }


def _trunk_based() -> dict[str, BranchConfiguration]:
    return {
        "main": BranchConfiguration(
            regex=MAIN_REGEX,
            increment=IncrementStrategy.PATCH,
            label=None,
            mode=DeploymentMode.CONTINUOUS_DEPLOYMENT,
            source_branches=(),
        ),
        "feature": BranchConfiguration(
            regex=FEATURE_REGEX,
            increment=IncrementStrategy.MINOR,
            label="{BranchName}",
            mode=DeploymentMode.CONTINUOUS_DELIVERY,
            source_branches=("main",),
        ),
        "hotfix": BranchConfiguration(
            regex=HOTFIX_REGEX,
            increment=IncrementStrategy.PATCH,
            label="{BranchName}",
            mode=DeploymentMode.CONTINUOUS_DELIVERY,
            source_branches=("main",),
        ),
        "pull-request": BranchConfiguration(
            regex=PULL_REQUEST_REGEX,
            increment=IncrementStrategy.INHERIT,
            label="PullRequest{Number}",
            mode=DeploymentMode.CONTINUOUS_DELIVERY,
            source_branches=("main", "feature", "hotfix"),
        ),
        CATCH_ALL_KEY: BranchConfiguration(
            regex=UNKNOWN_REGEX,
            increment=IncrementStrategy.PATCH,
            label="{BranchName}",
            mode=DeploymentMode.CONTINUOUS_DELIVERY,
            source_branches=("main",),
        ),
    }


WORKFLOWS: dict[str, Callable[[], dict[str, BranchConfiguration]]] = {
    "GitFlow/v1": _git_flow,
    "GitHubFlow/v1": _github_flow,
    "TrunkBased/preview1": _trunk_based,
}


def get_workflow_branches(workflow: str) -> dict[str, BranchConfiguration]:
    """Get the preset branches of a workflow.

    Args:
        workflow: Preset name, e.g. "GitHubFlow/v1" (case-insensitive).

    Returns:
        Fresh ordered mapping of branch key to configuration.

    Raises:
        ConfigurationError: If the workflow is unknown.
    """
    for name, factory in WORKFLOWS.items():
        if name.lower() == workflow.lower():
            return factory()
    known = ", ".join(WORKFLOWS)
    raise ConfigurationError(f"Unknown workflow '{workflow}' (expected one of: {known})")


def effective_branches(config: GitVersionConfiguration) -> dict[str, BranchConfiguration]:
    """Combine a workflow preset with the user's branch entries.

    Preset keys keep their order; user entries with the same key are layered
    over the preset field by field. New user keys go after the preset keys
    but before the preset's catch-all, so the catch-all still matches last.

    Args:
        config: The configuration to expand.

    Returns:
        Ordered mapping of branch key to configuration.
    """
    if not config.workflow:
        return dict(config.branches)

    preset = get_workflow_branches(config.workflow)
    catch_all = preset.pop(CATCH_ALL_KEY, None)

    merged: dict[str, BranchConfiguration] = {}
    for key, branch in preset.items():
        user = config.branches.get(key)
        merged[key] = user.merged_over(branch) if user is not None else branch

    for key, branch in config.branches.items():
        if key not in merged and key != CATCH_ALL_KEY:
            merged[key] = branch

    if catch_all is not None:
        user = config.branches.get(CATCH_ALL_KEY)
        merged[CATCH_ALL_KEY] = user.merged_over(catch_all) if user is not None else catch_all
    elif CATCH_ALL_KEY in config.branches:
        merged[CATCH_ALL_KEY] = config.branches[CATCH_ALL_KEY]

    return merged
