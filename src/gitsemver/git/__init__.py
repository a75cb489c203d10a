"""Commit graph readers."""

from gitsemver.git.client import GitRepository
from gitsemver.git.graph import CommitGraph
from gitsemver.git.memory import InMemoryCommitGraph
from gitsemver.git.models import Commit

__all__ = [
    "Commit",
    "CommitGraph",
    "GitRepository",
    "InMemoryCommitGraph",
]
