"""Mixin classes for Pydantic models.

Provides the named string projections shared by version-like models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitsemver.models.version import BuildMetadata, PreReleaseTag


class VersionFormatsMixin:
    """Mixin providing the derived version strings.

    Requires the model to have major, minor, patch, pre_release_tag and
    build_metadata fields.

    Example:
        ```python
        class Version(VersionFormatsMixin, BaseModel):
            major: int
            minor: int
            patch: int
            pre_release_tag: PreReleaseTag | None = None
            build_metadata: BuildMetadata | None = None

        v = Version(major=1, minor=2, patch=3)
        print(v.major_minor_patch)  # "1.2.3"
        ```
    """

    major: int
    minor: int
    patch: int
    pre_release_tag: PreReleaseTag | None
    build_metadata: BuildMetadata | None

    @property
    def major_minor_patch(self) -> str:
        """Get the core version, e.g. "1.2.3"."""
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def pre_release_tag_with_dash(self) -> str:
        """Get the pre-release tag with a leading dash, or an empty string."""
        if self.pre_release_tag is None:
            return ""
        return f"-{self.pre_release_tag}"

    @property
    def pre_release_label(self) -> str:
        """Get the pre-release name, or an empty string."""
        if self.pre_release_tag is None:
            return ""
        return self.pre_release_tag.name

    @property
    def pre_release_number(self) -> int | None:
        """Get the pre-release counter, if any."""
        if self.pre_release_tag is None:
            return None
        return self.pre_release_tag.number

    @property
    def sem_ver(self) -> str:
        """Get the version with pre-release, e.g. "1.2.3-beta.4"."""
        return f"{self.major_minor_patch}{self.pre_release_tag_with_dash}"

    @property
    def build_meta_data(self) -> str:
        """Get the short build metadata (the displayed commit count)."""
        if self.build_metadata is None:
            return ""
        return str(self.build_metadata)

    @property
    def full_build_meta_data(self) -> str:
        """Get the full build metadata including branch and sha."""
        if self.build_metadata is None:
            return ""
        return self.build_metadata.full

    @property
    def full_sem_ver(self) -> str:
        """Get MAJOR.MINOR.PATCH[-PRERELEASE][+METADATA]."""
        if self.build_meta_data:
            return f"{self.sem_ver}+{self.build_meta_data}"
        return self.sem_ver

    @property
    def informational_version(self) -> str:
        """Get the version with full build metadata attached."""
        if self.full_build_meta_data:
            return f"{self.sem_ver}+{self.full_build_meta_data}"
        return self.sem_ver
