"""Data models for version calculation."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from gitsemver.errors import CalculationWarning
from gitsemver.git.models import Commit
from gitsemver.models import IncrementStrategy, SemanticVersion, VersionSource
from gitsemver.resolver import EffectiveConfiguration


class BaseVersionCandidate(BaseModel):
    """A possible starting point for the version calculation."""

    model_config = ConfigDict(frozen=True)

    version: SemanticVersion
    sha: str
    source: VersionSource
    distance: int
    should_increment: bool = True
    description: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    def __str__(self) -> str:
        return f"{self.source.value} {self.version.sem_ver} at {self.short_sha} (distance {self.distance})"


class VersionResult(BaseModel):
    """Outcome of one calculation.

    Exposes the main string projections of the version directly, so
    ``result.full_sem_ver`` and ``result.version.full_sem_ver`` agree.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    version: SemanticVersion
    branch: str
    commit: Commit
    configuration: EffectiveConfiguration
    base: BaseVersionCandidate
    increment: IncrementStrategy
    commits_since_base: int
    warnings: tuple[CalculationWarning, ...] = ()

    @property
    def major_minor_patch(self) -> str:
        return self.version.major_minor_patch

    @property
    def sem_ver(self) -> str:
        return self.version.sem_ver

    @property
    def full_sem_ver(self) -> str:
        return self.version.full_sem_ver

    @property
    def informational_version(self) -> str:
        return self.version.informational_version

    @property
    def is_exact_tag(self) -> bool:
        """Whether HEAD carried the version tag that was returned."""
        return self.base.source is VersionSource.EXACT_TAG and self.base.sha == self.commit.sha


@dataclass
class CalculationContext:
    """Working state of a single calculation. Never shared."""

    head: Commit
    branch: str
    configuration: EffectiveConfiguration
    distances: dict[str, int]
    stack: tuple[tuple[str, str], ...] = ()
    warnings: list[CalculationWarning] = field(default_factory=list)
    truncated: bool = False

    @property
    def depth(self) -> int:
        """Number of enclosing merge-base lookups."""
        return len(self.stack)

    def warn(self, warning: CalculationWarning) -> None:
        """Record a warning once."""
        if not any(type(w) is type(warning) and str(w) == str(warning) for w in self.warnings):
            self.warnings.append(warning)
