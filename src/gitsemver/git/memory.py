"""In-memory commit graph.

Holds a snapshot of commits, tags and branches. Besides serving as the
storage behind the git reader, it works as a repository fixture: make a
commit, apply a tag, create and check out branches, merge.

Example:
    ```python
    repo = InMemoryCommitGraph()
    repo.make_a_commit("A")
    repo.apply_tag("1.0.0")
    repo.make_a_commit("B")
    repo.branch_to("feature/login")
    repo.make_a_commit("C")
    ```
"""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime, timedelta
from typing import Any

from gitsemver.errors import RepositoryStateError
from gitsemver.git.graph import CommitGraph
from gitsemver.git.models import Commit

DEFAULT_START = datetime(2024, 1, 1, tzinfo=UTC)
MIN_SHA_PREFIX = 4


class InMemoryCommitGraph(CommitGraph):
    """Commit graph stored in dictionaries."""

    def __init__(self, default_branch: str = "main", start: datetime | None = None) -> None:
        super().__init__()
        self._commits: dict[str, Commit] = {}
        self._positions: dict[str, int] = {}
        self._tags: dict[str, str] = {}
        self._branches: dict[str, str] = {}
        self._head_branch: str | None = default_branch
        self._detached_sha: str | None = None
        self._start = start or DEFAULT_START

    # ------------------------------------------------------------------
    # Snapshot construction
    # ------------------------------------------------------------------

    def add_commit(
        self,
        sha: str,
        parents: tuple[str, ...] | list[str] = (),
        message: str = "",
        timestamp: datetime | None = None,
    ) -> Commit:
        """Add a commit whose parents are already present.

        Raises:
            RepositoryStateError: If the sha exists or a parent is missing.
        """
        if sha in self._commits:
            raise RepositoryStateError(f"Commit {sha[:7]} already exists")
        missing = [p for p in parents if p not in self._commits]
        if missing:
            raise RepositoryStateError(
                f"Commit {sha[:7]} references unknown parents: {', '.join(p[:7] for p in missing)}"
            )
        if timestamp is None:
            timestamp = self._start + timedelta(minutes=len(self._commits))

        commit = Commit(sha=sha, parents=tuple(parents), message=message, timestamp=timestamp)
        self._commits[sha] = commit
        self._positions[sha] = len(self._positions)
        return commit

    def set_tag(self, name: str, sha: str) -> None:
        """Point a tag at a commit, moving it if it already exists."""
        sha = self.resolve_ref(sha)
        previous = self._tags.get(name)
        if previous is not None:
            old = self._commits[previous]
            self._commits[previous] = old.model_copy(update={"tags": old.tags - {name}})
        self._tags[name] = sha
        commit = self._commits[sha]
        self._commits[sha] = commit.model_copy(update={"tags": commit.tags | {name}})

    def set_branch(self, name: str, sha: str) -> None:
        """Point a branch at a commit."""
        self._branches[name] = self.resolve_ref(sha)

    def set_head(self, branch: str | None = None, sha: str | None = None) -> None:
        """Attach HEAD to a branch, or detach it at a commit."""
        if branch is not None:
            self._head_branch = branch
            self._detached_sha = None
        else:
            self._head_branch = None
            self._detached_sha = self.resolve_ref(sha) if sha else None

    # ------------------------------------------------------------------
    # Fixture helpers
    # ------------------------------------------------------------------

    @property
    def head_sha(self) -> str | None:
        """Sha HEAD points at, or None in an empty repository."""
        if self._head_branch is not None:
            return self._branches.get(self._head_branch)
        return self._detached_sha

    def _advance_head(self, sha: str) -> None:
        if self._head_branch is not None:
            self._branches[self._head_branch] = sha
        else:
            self._detached_sha = sha

    def _new_sha(self, *parts: Any) -> str:
        seed = "\0".join(str(p) for p in (len(self._commits), *parts))
        return hashlib.sha1(seed.encode("utf-8")).hexdigest()

    def make_a_commit(self, message: str | None = None) -> str:
        """Commit on top of HEAD and advance the current branch.

        Returns:
            Sha of the new commit.
        """
        parent = self.head_sha
        message = message or f"Commit {len(self._commits) + 1}"
        sha = self._new_sha(message, parent)
        self.add_commit(sha, (parent,) if parent else (), message)
        self._advance_head(sha)
        return sha

    def make_commits(self, count: int) -> list[str]:
        """Make several commits in a row."""
        return [self.make_a_commit() for _ in range(count)]

    def apply_tag(self, name: str, ref: str = "HEAD") -> None:
        """Tag a commit (HEAD by default)."""
        self.set_tag(name, ref)

    def create_branch(self, name: str, ref: str = "HEAD") -> str:
        """Create a branch at a commit without checking it out."""
        sha = self.resolve_ref(ref)
        self._branches[name] = sha
        return sha

    def checkout(self, ref: str) -> None:
        """Check out a branch, or detach HEAD at any other ref."""
        if ref in self._branches:
            self.set_head(branch=ref)
        else:
            self.set_head(sha=ref)

    def branch_to(self, name: str, ref: str = "HEAD") -> str:
        """Create a branch and check it out."""
        sha = self.create_branch(name, ref)
        self.checkout(name)
        return sha

    def merge(self, ref: str, message: str | None = None) -> str:
        """Create a merge commit of ``ref`` into HEAD (always a real merge).

        Returns:
            Sha of the merge commit.
        """
        head = self.resolve_ref("HEAD")
        other = self.resolve_ref(ref)
        message = message or f"Merge {ref} into {self._head_branch or head[:7]}"
        sha = self._new_sha(message, head, other)
        self.add_commit(sha, (head, other), message)
        self._advance_head(sha)
        return sha

    # ------------------------------------------------------------------
    # CommitGraph
    # ------------------------------------------------------------------

    def resolve_ref(self, ref: str) -> str:
        if ref == "HEAD":
            sha = self.head_sha
            if sha is None:
                raise RepositoryStateError("HEAD does not point at a commit (empty repository?)")
            return sha

        for prefix in ("refs/heads/", "refs/tags/"):
            if ref.startswith(prefix):
                ref = ref[len(prefix) :]
                break

        if ref in self._branches:
            return self._branches[ref]
        if ref in self._tags:
            return self._tags[ref]
        if ref in self._commits:
            return ref

        if len(ref) >= MIN_SHA_PREFIX:
            matches = [sha for sha in self._commits if sha.startswith(ref)]
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                raise RepositoryStateError(f"Ambiguous ref '{ref}'")

        raise RepositoryStateError(f"Unknown ref '{ref}'")

    def get_commit(self, sha: str) -> Commit:
        try:
            return self._commits[sha]
        except KeyError:
            raise RepositoryStateError(f"Commit {sha[:7]} is not in the repository") from None

    def tags_at(self, sha: str) -> set[str]:
        return set(self.get_commit(sha).tags)

    def tags(self) -> dict[str, str]:
        """Get all tag names mapped to the shas they point at."""
        return dict(self._tags)

    def branches(self) -> dict[str, str]:
        return dict(self._branches)

    @property
    def current_branch(self) -> str | None:
        return self._head_branch

    def _sort_key(self, commit: Commit) -> Any:
        return (commit.timestamp, self._positions.get(commit.sha, 0))

    def __len__(self) -> int:
        return len(self._commits)
