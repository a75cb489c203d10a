"""Shared models, enumerations and mixins."""

from gitsemver.models.enums import (
    AssemblyVersioningScheme,
    CommitMessageIncrementMode,
    DeploymentMode,
    IncrementStrategy,
    VersionSource,
)
from gitsemver.models.mixins import VersionFormatsMixin
from gitsemver.models.version import (
    DEFAULT_TAG_PREFIX,
    BuildMetadata,
    PreReleaseTag,
    SemanticVersion,
    sanitize_identifier,
)

__all__ = [
    # Enumerations
    "AssemblyVersioningScheme",
    "CommitMessageIncrementMode",
    "DeploymentMode",
    "IncrementStrategy",
    "VersionSource",
    # Versions
    "DEFAULT_TAG_PREFIX",
    "BuildMetadata",
    "PreReleaseTag",
    "SemanticVersion",
    "VersionFormatsMixin",
    "sanitize_identifier",
]
