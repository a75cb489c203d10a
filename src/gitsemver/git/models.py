"""Data models for commit graph snapshots."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Commit(BaseModel):
    """A commit as seen by the version engine."""

    model_config = ConfigDict(frozen=True)

    sha: str
    parents: tuple[str, ...] = ()
    message: str = ""
    timestamp: datetime
    tags: frozenset[str] = Field(default_factory=frozenset)

    @property
    def short_sha(self) -> str:
        """First seven characters of the sha."""
        return self.sha[:7]

    @property
    def is_merge(self) -> bool:
        """Whether this commit has more than one parent."""
        return len(self.parents) > 1

    @property
    def is_root(self) -> bool:
        """Whether this commit has no parents."""
        return not self.parents

    @property
    def subject(self) -> str:
        """First line of the message."""
        return self.message.splitlines()[0] if self.message else ""
