"""Base version discovery.

Collects candidate "last known version" points reachable from HEAD and
selects the authoritative one.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from loguru import logger

from gitsemver.calculation.models import BaseVersionCandidate, CalculationContext, VersionResult
from gitsemver.errors import AmbiguousBaseVersionWarning, RepositoryStateError, UnparseableTagWarning
from gitsemver.git import CommitGraph
from gitsemver.models import SemanticVersion, VersionSource
from gitsemver.resolver import ConfigurationResolver, normalize_branch_name

# (merge-base sha, source branch name, context) -> version of that branch there
SourceVersionLookup = Callable[[str, str, CalculationContext], VersionResult | None]

_VERSION_IN_NAME = re.compile(r"\d+\.\d+(?:\.\d+)?")

ZERO_VERSION = SemanticVersion()


def version_from_branch_name(branch_name: str) -> SemanticVersion | None:
    """Extract a version embedded in a branch name.

    Example: "release/1.2.0" gives 1.2.0 and "release-2.1" gives 2.1.0.
    """
    match = _VERSION_IN_NAME.search(normalize_branch_name(branch_name))
    if match is None:
        return None
    return SemanticVersion.try_parse(match.group(0), tag_prefix="")


class BaseVersionCalculator:
    """Find and select base version candidates."""

    def __init__(
        self,
        graph: CommitGraph,
        resolver: ConfigurationResolver,
        source_version: SourceVersionLookup,
    ) -> None:
        """Initialize the calculator.

        Args:
            graph: Commit graph to read.
            resolver: Resolver for matching other branches to their keys.
            source_version: Callback calculating a source branch's version at
                a merge-base. Returns None when the lookup would recurse into
                itself or too deep.
        """
        self.graph = graph
        self.resolver = resolver
        self._source_version = source_version

    def find_base_versions(self, context: CalculationContext) -> list[BaseVersionCandidate]:
        """Collect candidates from every strategy.

        A version tag on HEAD short-circuits the other strategies.

        Args:
            context: The calculation in progress.

        Returns:
            Distinct candidates, unordered.
        """
        tagged = self._tagged_versions(context)
        exact = [c for c in tagged if c.sha == context.head.sha]
        if exact:
            logger.debug("HEAD {} is tagged {}", context.head.short_sha, exact[0].version.sem_ver)
            return exact

        candidates = [
            *tagged,
            *self._fallback_versions(context),
            *self._branch_name_versions(context),
            *self._merge_point_versions(context),
            *self._tracked_release_versions(context),
        ]

        unique: dict[tuple[str, VersionSource, str], BaseVersionCandidate] = {}
        for candidate in candidates:
            unique.setdefault((candidate.sha, candidate.source, candidate.version.sem_ver), candidate)
        return list(unique.values())

    def select_base(
        self,
        candidates: list[BaseVersionCandidate],
        context: CalculationContext,
    ) -> BaseVersionCandidate:
        """Select the authoritative candidate.

        Candidates whose commit is an ancestor of another candidate's commit
        are dominated. The rest are ordered by distance from HEAD, source
        priority, highest version and finally sha.

        Raises:
            RepositoryStateError: If there are no candidates at all.
        """
        if not candidates:
            raise RepositoryStateError(f"No base version found for {context.head.short_sha}")

        dominated = self.graph.strict_ancestors_of({c.sha for c in candidates})
        remaining = [c for c in candidates if c.sha not in dominated]

        remaining.sort(key=lambda c: c.sha)
        remaining.sort(key=lambda c: c.version.comparison_key, reverse=True)
        remaining.sort(key=lambda c: (c.distance, c.source.priority))
        chosen = remaining[0]

        tied = sorted({c.sha for c in remaining if c.distance == chosen.distance})
        if len(tied) > 1:
            warning = AmbiguousBaseVersionWarning(tied, chosen.sha)
            context.warn(warning)

        logger.debug("Base version for {}: {}", context.branch, chosen)
        return chosen

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _tagged_versions(self, context: CalculationContext) -> list[BaseVersionCandidate]:
        """Every reachable commit carrying a version tag (highest tag per commit)."""
        tag_prefix = context.configuration.tag_prefix
        candidates: list[BaseVersionCandidate] = []

        for sha, distance in context.distances.items():
            tags = self.graph.tags_at(sha)
            if not tags:
                continue

            parsed: list[tuple[SemanticVersion, str]] = []
            for tag in sorted(tags):
                version = SemanticVersion.try_parse(tag, tag_prefix)
                if version is None:
                    context.warn(UnparseableTagWarning(tag, sha))
                    continue
                parsed.append((version, tag))

            if parsed:
                version, tag = max(parsed, key=lambda item: item[0].comparison_key)
                candidates.append(
                    BaseVersionCandidate(
                        version=version,
                        sha=sha,
                        source=VersionSource.EXACT_TAG,
                        distance=distance,
                        description=f"Git tag '{tag}'",
                    )
                )

        return candidates

    def _fallback_versions(self, context: CalculationContext) -> list[BaseVersionCandidate]:
        """0.0.0 at the root commit farthest from HEAD."""
        roots = [sha for sha in context.distances if self.graph.get_commit(sha).is_root]
        if not roots:
            return []
        root = max(roots, key=lambda sha: (context.distances[sha], sha))
        return [
            BaseVersionCandidate(
                version=ZERO_VERSION,
                sha=root,
                source=VersionSource.FALLBACK,
                distance=context.distances[root],
                description="Fallback base version",
            )
        ]

    def _source_branch_tips(self, context: CalculationContext) -> list[tuple[str, str]]:
        """Other branches that resolve to one of the configured source keys."""
        sources = set(context.configuration.source_branches)
        if not sources:
            return []

        tips: list[tuple[str, str]] = []
        for name, sha in sorted(self.graph.branches().items()):
            if normalize_branch_name(name) == context.branch:
                continue
            if self.resolver.match_key(name) in sources:
                tips.append((name, sha))
        return tips

    def _merge_point_versions(self, context: CalculationContext) -> list[BaseVersionCandidate]:
        """Versions of source branches where this branch split from them."""
        candidates: list[BaseVersionCandidate] = []

        for name, tip in self._source_branch_tips(context):
            merge_base = self.graph.merge_base(context.head.sha, tip)
            if merge_base is None:
                continue

            result = self._source_version(merge_base, name, context)
            if result is None:
                continue

            # A source version that already moved past its own base is not bumped again
            should_increment = (
                result.increment.rank == 0 and not result.version.is_pre_release
            )
            candidates.append(
                BaseVersionCandidate(
                    version=result.version.core,
                    sha=merge_base,
                    source=VersionSource.MERGE_POINT,
                    distance=context.distances[merge_base],
                    should_increment=should_increment,
                    description=f"Merge base with '{name}'",
                )
            )

        return candidates

    def _branch_point(self, context: CalculationContext) -> str | None:
        """Nearest merge-base with any source branch."""
        points = [
            merge_base
            for _, tip in self._source_branch_tips(context)
            if (merge_base := self.graph.merge_base(context.head.sha, tip)) is not None
        ]
        if not points:
            return None
        return min(points, key=lambda sha: (context.distances[sha], sha))

    def _branch_name_versions(self, context: CalculationContext) -> list[BaseVersionCandidate]:
        """Version embedded in a release branch's own name."""
        if not context.configuration.is_release_branch:
            return []

        version = version_from_branch_name(context.branch)
        if version is None:
            return []

        anchor = self._branch_point(context)
        if anchor is None:
            roots = [sha for sha in context.distances if self.graph.get_commit(sha).is_root]
            anchor = max(roots, key=lambda sha: (context.distances[sha], sha))

        return [
            BaseVersionCandidate(
                version=version,
                sha=anchor,
                source=VersionSource.BRANCH_NAME,
                distance=context.distances[anchor],
                should_increment=False,
                description=f"Version in branch name '{context.branch}'",
            )
        ]

    def _tracked_release_versions(self, context: CalculationContext) -> list[BaseVersionCandidate]:
        """Versions of release branches cut from this branch."""
        if not context.configuration.tracks_release_branches:
            return []

        candidates: list[BaseVersionCandidate] = []
        for name, tip in sorted(self.graph.branches().items()):
            if normalize_branch_name(name) == context.branch:
                continue
            key = self.resolver.match_key(name)
            if key is None or not self.resolver.get(key).is_release_branch:
                continue

            version = version_from_branch_name(name)
            merge_base = self.graph.merge_base(context.head.sha, tip)
            if version is None or merge_base is None:
                continue

            candidates.append(
                BaseVersionCandidate(
                    version=version,
                    sha=merge_base,
                    source=VersionSource.BRANCH_NAME,
                    distance=context.distances[merge_base],
                    description=f"Tracked release branch '{name}'",
                )
            )

        return candidates
