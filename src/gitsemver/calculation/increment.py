"""Increment strategy resolution.

Decides which version component advances, from the branch configuration
and any ``+semver:`` markers in the commits since the base version.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from loguru import logger

from gitsemver.calculation.models import BaseVersionCandidate
from gitsemver.git.models import Commit
from gitsemver.models import CommitMessageIncrementMode, IncrementStrategy, VersionSource
from gitsemver.resolver import EffectiveConfiguration


def find_message_increment(
    commits: Sequence[Commit],
    configuration: EffectiveConfiguration,
) -> IncrementStrategy | None:
    """Scan commit messages for bump markers.

    Args:
        commits: Commits since the base version.
        configuration: Settings holding the marker regexes and mode.

    Returns:
        The highest marker found, IncrementStrategy.NONE when only
        "none"/"skip" markers were found, or None when there were no markers
        (or message incrementing is disabled).
    """
    mode = configuration.commit_message_incrementing
    if mode is CommitMessageIncrementMode.DISABLED:
        return None
    if mode is CommitMessageIncrementMode.MERGE_MESSAGE_ONLY:
        commits = [c for c in commits if c.is_merge]

    markers = [
        (IncrementStrategy.MAJOR, re.compile(configuration.major_version_bump_message, re.IGNORECASE)),
        (IncrementStrategy.MINOR, re.compile(configuration.minor_version_bump_message, re.IGNORECASE)),
        (IncrementStrategy.PATCH, re.compile(configuration.patch_version_bump_message, re.IGNORECASE)),
    ]
    no_bump = re.compile(configuration.no_bump_message, re.IGNORECASE)

    found: IncrementStrategy | None = None
    for commit in commits:
        for strategy, pattern in markers:
            if pattern.search(commit.message):
                if found is None or strategy.rank > found.rank:
                    found = strategy
                break
        else:
            if found is None and no_bump.search(commit.message):
                found = IncrementStrategy.NONE

    return found


class IncrementResolver:
    """Choose the increment applied to a base version."""

    def resolve_increment(
        self,
        base: BaseVersionCandidate,
        commits: Sequence[Commit],
        configuration: EffectiveConfiguration,
        head_sha: str,
    ) -> IncrementStrategy:
        """Resolve the increment strategy.

        Args:
            base: The selected base version.
            commits: Commits reachable from HEAD but not from the base.
            configuration: Effective configuration of the branch.
            head_sha: The commit being versioned.

        Returns:
            The increment to apply; never Inherit.
        """
        if base.source is VersionSource.EXACT_TAG and base.sha == head_sha:
            return IncrementStrategy.NONE
        if not commits or not base.should_increment:
            return IncrementStrategy.NONE
        if base.version.is_pre_release:
            # The pre-release already names the upcoming version
            return IncrementStrategy.NONE

        from_messages = find_message_increment(commits, configuration)
        if from_messages is not None:
            logger.debug("Commit messages request a {} increment", from_messages.value)
            return from_messages

        increment = configuration.increment
        if increment is IncrementStrategy.INHERIT:
            increment = IncrementStrategy.PATCH
        return increment
