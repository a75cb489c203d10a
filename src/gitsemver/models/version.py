"""Semantic version data models."""

from __future__ import annotations

import re
from datetime import date
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gitsemver.models.enums import IncrementStrategy
from gitsemver.models.mixins import VersionFormatsMixin

DEFAULT_TAG_PREFIX = "[vV]?"

_UNSAFE_CHARS = re.compile(r"[^0-9A-Za-z-]")


def sanitize_identifier(value: str) -> str:
    """Replace characters not allowed in semver identifiers with dashes."""
    return _UNSAFE_CHARS.sub("-", value)


@lru_cache(maxsize=32)
def _version_pattern(tag_prefix: str) -> re.Pattern[str]:
    return re.compile(
        rf"^(?:{tag_prefix})"
        r"(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?"
        r"(?:-(?P<pre>[0-9A-Za-z.-]+))?"
        r"(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
    )


class PreReleaseTag(BaseModel):
    """Pre-release identifier: a name and an optional numeric counter."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    number: int | None = Field(default=None, ge=0)

    def __str__(self) -> str:
        if self.number is None:
            return self.name
        if not self.name:
            return str(self.number)
        return f"{self.name}.{self.number}"

    @classmethod
    def parse(cls, value: str) -> PreReleaseTag:
        """Parse "beta.3", "beta" or "3" into a tag."""
        head, _, tail = value.rpartition(".")
        if tail.isdigit():
            return cls(name=head, number=int(tail))
        return cls(name=value)


class BuildMetadata(BaseModel):
    """Build metadata attached to a calculated version."""

    model_config = ConfigDict(frozen=True)

    commits_since_tag: int | None = Field(default=None, ge=0)
    commits_since_version_source: int = Field(default=0, ge=0)
    branch: str | None = None
    sha: str | None = None
    version_source_sha: str | None = None
    commit_date: date | None = None

    @property
    def short_sha(self) -> str | None:
        """First seven characters of the commit sha."""
        if self.sha is None:
            return None
        return self.sha[:7]

    def __str__(self) -> str:
        if self.commits_since_tag:
            return str(self.commits_since_tag)
        return ""

    @property
    def full(self) -> str:
        """Full form, e.g. "2.Branch.main.Sha.<sha>"."""
        parts: list[str] = []
        if self.commits_since_tag:
            parts.append(str(self.commits_since_tag))
        if self.branch:
            parts.extend(["Branch", sanitize_identifier(self.branch)])
        if self.sha:
            parts.extend(["Sha", self.sha])
        return ".".join(parts)


class SemanticVersion(VersionFormatsMixin, BaseModel):
    """An immutable semantic version.

    Ordering follows semantic-versioning precedence: the core numbers first,
    then a release sorts above any pre-release of the same core, then the
    pre-release name and number. Build metadata never affects ordering.
    """

    model_config = ConfigDict(frozen=True)

    major: int = Field(default=0, ge=0)
    minor: int = Field(default=0, ge=0)
    patch: int = Field(default=0, ge=0)
    pre_release_tag: PreReleaseTag | None = None
    build_metadata: BuildMetadata | None = None

    @classmethod
    def parse(cls, value: str, tag_prefix: str = DEFAULT_TAG_PREFIX) -> SemanticVersion:
        """Parse a version string, optionally behind a tag prefix.

        Args:
            value: Version text such as "v1.2.3-beta.1" or "1.2".
            tag_prefix: Regex matched (and discarded) before the version.

        Returns:
            The parsed version. Build metadata in the text is ignored.

        Raises:
            ValueError: If the text is not a semantic version.
        """
        match = _version_pattern(tag_prefix).match(value.strip())
        if not match:
            raise ValueError(f"Invalid semantic version: {value}")

        pre = match.group("pre")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch") or 0),
            pre_release_tag=PreReleaseTag.parse(pre) if pre else None,
        )

    @classmethod
    def try_parse(cls, value: str, tag_prefix: str = DEFAULT_TAG_PREFIX) -> SemanticVersion | None:
        """Parse a version string, returning None instead of raising."""
        try:
            return cls.parse(value, tag_prefix)
        except ValueError:
            return None

    @property
    def core(self) -> SemanticVersion:
        """The MAJOR.MINOR.PATCH part alone."""
        return SemanticVersion(major=self.major, minor=self.minor, patch=self.patch)

    @property
    def is_pre_release(self) -> bool:
        return self.pre_release_tag is not None

    def increment(self, strategy: IncrementStrategy) -> SemanticVersion:
        """Return the core version bumped by the given strategy.

        Major resets minor and patch, Minor resets patch. None (and an
        unresolved Inherit) return the core unchanged.
        """
        if strategy is IncrementStrategy.MAJOR:
            return SemanticVersion(major=self.major + 1)
        if strategy is IncrementStrategy.MINOR:
            return SemanticVersion(major=self.major, minor=self.minor + 1)
        if strategy is IncrementStrategy.PATCH:
            return SemanticVersion(major=self.major, minor=self.minor, patch=self.patch + 1)
        return self.core

    def with_pre_release(self, name: str, number: int | None) -> SemanticVersion:
        """Return a copy carrying the given pre-release tag."""
        return self.model_copy(update={"pre_release_tag": PreReleaseTag(name=name, number=number)})

    def with_build_metadata(self, metadata: BuildMetadata | None) -> SemanticVersion:
        """Return a copy carrying the given build metadata."""
        return self.model_copy(update={"build_metadata": metadata})

    @property
    def comparison_key(self) -> tuple[Any, ...]:
        """Key implementing semantic-versioning precedence."""
        if self.pre_release_tag is None:
            return (self.major, self.minor, self.patch, 1, "", -1)
        number = self.pre_release_tag.number
        return (
            self.major,
            self.minor,
            self.patch,
            0,
            self.pre_release_tag.name,
            -1 if number is None else number,
        )

    def __lt__(self, other: SemanticVersion) -> bool:
        return self.comparison_key < other.comparison_key

    def __le__(self, other: SemanticVersion) -> bool:
        return self.comparison_key <= other.comparison_key

    def __gt__(self, other: SemanticVersion) -> bool:
        return self.comparison_key > other.comparison_key

    def __ge__(self, other: SemanticVersion) -> bool:
        return self.comparison_key >= other.comparison_key

    def __str__(self) -> str:
        return self.sem_ver
