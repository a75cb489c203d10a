"""Next version calculation.

Orchestrates configuration resolution, base version discovery, increment
resolution and label synthesis into one result.
"""

from __future__ import annotations

from loguru import logger

from gitsemver.cache import VersionCache
from gitsemver.calculation.base_version import BaseVersionCalculator
from gitsemver.calculation.increment import IncrementResolver
from gitsemver.calculation.labels import LabelSynthesizer
from gitsemver.calculation.models import CalculationContext, VersionResult
from gitsemver.config import DEFAULT_WORKFLOW, GitVersionConfiguration
from gitsemver.errors import RepositoryStateError
from gitsemver.git import CommitGraph
from gitsemver.resolver import ConfigurationResolver, normalize_branch_name

# Maximum nesting of merge-base lookups into source branches
MAX_DEPTH = 16


class NextVersionCalculator:
    """Calculate versions for commits of one repository snapshot.

    A calculator owns its cache, so results computed for a snapshot are
    reused by later calls on the same calculator (and by nested merge-base
    lookups) but never leak into another snapshot. Safe to call from
    several threads.

    Example:
        ```python
        calculator = NextVersionCalculator(GitRepository("."), load_config())
        print(calculator.calculate().full_sem_ver)
        ```
    """

    def __init__(
        self,
        graph: CommitGraph,
        configuration: GitVersionConfiguration | None = None,
        cache: VersionCache | None = None,
    ) -> None:
        """Initialize the calculator.

        Args:
            graph: Read-only commit graph.
            configuration: Configuration model. The default workflow preset
                is used when None.
            cache: Result cache. A fresh one is created when None.

        Raises:
            ConfigurationError: If the configuration cannot be flattened.
        """
        self.graph = graph
        self.configuration = configuration or GitVersionConfiguration(workflow=DEFAULT_WORKFLOW)
        self.resolver = ConfigurationResolver(self.configuration)
        self.cache = cache if cache is not None else VersionCache()
        self.base_versions = BaseVersionCalculator(graph, self.resolver, self._source_version)
        self.increments = IncrementResolver()
        self.labels = LabelSynthesizer()

    def calculate(self, target_ref: str | None = None, branch: str | None = None) -> VersionResult:
        """Calculate the version of a commit.

        Args:
            target_ref: Commit, tag or branch to version. Defaults to HEAD.
            branch: Branch whose configuration applies. Defaults to the
                target ref when it names a branch, else the current branch.

        Returns:
            The calculation result.

        Raises:
            ConfigurationError: If no branch configuration matches.
            RepositoryStateError: If the ref is unknown or no branch can be
                determined (detached HEAD without an explicit branch).
        """
        sha = self.graph.resolve_ref(target_ref or "HEAD")
        branch_name = self._branch_name(target_ref, branch)

        result, _ = self._calculate_at(sha, branch_name, ())
        for warning in result.warnings:
            logger.warning(str(warning))
        logger.info(
            "{} at {} on '{}' -> {}",
            result.full_sem_ver,
            result.commit.short_sha,
            branch_name,
            result.base,
        )
        return result

    def _branch_name(self, target_ref: str | None, branch: str | None) -> str:
        if branch:
            return normalize_branch_name(branch)

        if target_ref:
            branches = self.graph.branches()
            name = target_ref.removeprefix("refs/heads/").removeprefix("refs/remotes/")
            if target_ref in branches or name in branches:
                return normalize_branch_name(target_ref)

        current = self.graph.current_branch
        if current:
            return normalize_branch_name(current)
        raise RepositoryStateError("HEAD is detached; pass the branch to use for configuration")

    def _calculate_at(
        self,
        sha: str,
        branch_name: str,
        stack: tuple[tuple[str, str], ...],
    ) -> tuple[VersionResult, bool]:
        """Calculate the version of a commit as seen from a branch.

        Returns:
            The result and whether a nested lookup was cut short by the cycle
            guard or depth limit (such results are not cached).
        """
        configuration = self.resolver.resolve(branch_name)
        cached = self.cache.get(sha, configuration)
        if cached is not None:
            return cached, False

        head = self.graph.get_commit(sha)
        context = CalculationContext(
            head=head,
            branch=branch_name,
            configuration=configuration,
            distances=self.graph.distances_from(sha),
            stack=(*stack, (sha, configuration.key)),
        )

        candidates = self.base_versions.find_base_versions(context)
        base = self.base_versions.select_base(candidates, context)

        commits = self.graph.commits_between(base.sha, sha)
        increment = self.increments.resolve_increment(base, commits, configuration, sha)
        core = base.version.increment(increment)
        version = self.labels.synthesize(core, base, configuration, len(commits), head, branch_name)

        result = VersionResult(
            version=version,
            branch=branch_name,
            commit=head,
            configuration=configuration,
            base=base,
            increment=increment,
            commits_since_base=len(commits),
            warnings=tuple(context.warnings),
        )

        if not context.truncated:
            self.cache.set(sha, configuration, result)
        return result, context.truncated

    def _source_version(
        self,
        sha: str,
        branch_name: str,
        context: CalculationContext,
    ) -> VersionResult | None:
        """Version of a source branch at a merge-base, for merge-point candidates."""
        key = self.resolver.match_key(branch_name)
        if (sha, key) in context.stack or context.depth >= MAX_DEPTH:
            logger.debug("Skipping '{}' at {}: recursion limit", branch_name, sha[:7])
            context.truncated = True
            return None

        result, truncated = self._calculate_at(sha, normalize_branch_name(branch_name), context.stack)
        if truncated:
            context.truncated = True
        for warning in result.warnings:
            context.warn(warning)
        return result


def calculate(
    graph: CommitGraph,
    target_ref: str | None = None,
    configuration: GitVersionConfiguration | None = None,
    branch: str | None = None,
) -> VersionResult:
    """Calculate the version of a commit with a one-off calculator."""
    return NextVersionCalculator(graph, configuration).calculate(target_ref, branch)
