"""Pre-release label and build metadata synthesis."""

from __future__ import annotations

from gitsemver.calculation.models import BaseVersionCandidate
from gitsemver.git.models import Commit
from gitsemver.models import (
    BuildMetadata,
    DeploymentMode,
    SemanticVersion,
    VersionSource,
)
from gitsemver.resolver import EffectiveConfiguration


class LabelSynthesizer:
    """Attach the pre-release tag and build metadata to an incremented core."""

    def synthesize(
        self,
        core: SemanticVersion,
        base: BaseVersionCandidate,
        configuration: EffectiveConfiguration,
        commits_since_base: int,
        head: Commit,
        branch: str,
    ) -> SemanticVersion:
        """Build the final version.

        Args:
            core: Base version core after the increment.
            base: The selected base version.
            configuration: Effective configuration of the branch.
            commits_since_base: Commits reachable from HEAD but not the base.
            head: The commit being versioned.
            branch: Normalized branch name.

        Returns:
            The version with pre-release tag (if labelled) and build metadata.
        """
        metadata = BuildMetadata(
            commits_since_tag=commits_since_base,
            commits_since_version_source=commits_since_base,
            branch=branch,
            sha=head.sha,
            version_source_sha=base.sha,
            commit_date=head.timestamp.date(),
        )

        if base.source is VersionSource.EXACT_TAG and base.sha == head.sha:
            return base.version.with_build_metadata(metadata.model_copy(update={"commits_since_tag": None}))

        mode = configuration.mode
        label = configuration.label
        if label is None:
            return core.with_build_metadata(metadata)

        base_number = None
        base_tag = base.version.pre_release_tag
        if base_tag is not None and base_tag.name == label:
            base_number = base_tag.number

        if mode is DeploymentMode.MANUAL_DEPLOYMENT:
            if base_number is not None:
                number = base_number
            else:
                number = 1 if commits_since_base else None
        else:
            number = commits_since_base + (base_number or 0)

        if not label and number is None:
            return core.with_build_metadata(metadata)

        if mode is DeploymentMode.CONTINUOUS_DEPLOYMENT:
            # The promoted counter already makes each commit's version unique
            metadata = metadata.model_copy(update={"commits_since_tag": None})
        return core.with_pre_release(label, number).with_build_metadata(metadata)
