"""Read-only commit graph interface.

Provides the abstract reader the version engine consumes plus the graph
queries (ancestry, distances, merge-bases) built on its primitives.
Implementations must not change a snapshot while it is being read.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable, Iterator
from typing import Any

from gitsemver.git.models import Commit


class CommitGraph(ABC):
    """Base class for commit graph readers.

    Subclasses supply ref resolution, commit lookup, tags and branches;
    everything else is derived here. All queries are read-only.
    """

    def __init__(self) -> None:
        self._ancestor_memo: dict[str, frozenset[str]] = {}

    @abstractmethod
    def resolve_ref(self, ref: str) -> str:
        """Resolve a branch, tag, "HEAD" or sha to a full commit sha.

        Raises:
            RepositoryStateError: If the ref does not exist.
        """

    @abstractmethod
    def get_commit(self, sha: str) -> Commit:
        """Get a commit by full sha.

        Raises:
            RepositoryStateError: If the commit is not in the snapshot.
        """

    @abstractmethod
    def tags_at(self, sha: str) -> set[str]:
        """Get the names of tags pointing at a commit."""

    @abstractmethod
    def branches(self) -> dict[str, str]:
        """Get all branch names mapped to their tip shas."""

    @property
    @abstractmethod
    def current_branch(self) -> str | None:
        """Name of the checked-out branch, or None when HEAD is detached."""

    def _sort_key(self, commit: Commit) -> Any:
        """Key ordering commits oldest to newest."""
        return (commit.timestamp, commit.sha)

    def parents(self, sha: str) -> tuple[str, ...]:
        """Get the ordered parent shas of a commit."""
        return self.get_commit(self.resolve_ref(sha)).parents

    def strict_ancestors_of(self, shas: Iterable[str]) -> set[str]:
        """Get every commit reachable from the parents of the given commits."""
        seen: set[str] = set()
        stack = [parent for sha in shas for parent in self.get_commit(sha).parents]
        while stack:
            sha = stack.pop()
            if sha in seen:
                continue
            seen.add(sha)
            stack.extend(self.get_commit(sha).parents)
        return seen

    def ancestors(self, sha: str) -> frozenset[str]:
        """Get a commit and everything reachable from it."""
        cached = self._ancestor_memo.get(sha)
        if cached is None:
            cached = frozenset(self.strict_ancestors_of([sha]) | {sha})
            self._ancestor_memo[sha] = cached
        return cached

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """Check whether ``ancestor`` is reachable from ``descendant`` (inclusive)."""
        return ancestor in self.ancestors(descendant)

    def distances_from(self, sha: str) -> dict[str, int]:
        """Get the shortest parent-path length from a commit to each ancestor."""
        distances = {sha: 0}
        queue = deque([sha])
        while queue:
            current = queue.popleft()
            for parent in self.get_commit(current).parents:
                if parent not in distances:
                    distances[parent] = distances[current] + 1
                    queue.append(parent)
        return distances

    def _newest_first(self, shas: Iterable[str]) -> list[Commit]:
        commits = [self.get_commit(sha) for sha in shas]
        commits.sort(key=self._sort_key, reverse=True)
        return commits

    def commits_reachable_from(self, ref: str) -> Iterator[Commit]:
        """Yield every commit reachable from a ref, newest first."""
        yield from self._newest_first(self.ancestors(self.resolve_ref(ref)))

    def commits_between(self, base: str, head: str) -> list[Commit]:
        """Get commits reachable from ``head`` but not from ``base``, newest first."""
        return self._newest_first(self.ancestors(head) - self.ancestors(base))

    def merge_base(self, ref_a: str, ref_b: str) -> str | None:
        """Get the best common ancestor of two refs.

        When several common ancestors are equally good (criss-cross merges),
        the newest one is returned.

        Returns:
            Sha of the merge-base, or None for unrelated histories.
        """
        common = self.ancestors(self.resolve_ref(ref_a)) & self.ancestors(self.resolve_ref(ref_b))
        if not common:
            return None

        # common is closed under ancestry, so anything that is a parent of a
        # member is an ancestor of a better candidate
        dominated = {parent for sha in common for parent in self.get_commit(sha).parents}
        best = self._newest_first(common - dominated)
        return best[0].sha
