"""gitsemver - Semantic versions derived from git history and branch configuration."""

from loguru import logger

from gitsemver._version import __version__
from gitsemver.calculation import NextVersionCalculator, VersionResult, calculate
from gitsemver.config import GitVersionConfiguration, load_config
from gitsemver.errors import (
    AmbiguousBaseVersionWarning,
    CalculationWarning,
    ConfigurationError,
    RepositoryStateError,
    UnparseableTagWarning,
    VersionError,
)
from gitsemver.git import CommitGraph, GitRepository, InMemoryCommitGraph
from gitsemver.models import SemanticVersion
from gitsemver.resolver import resolve
from gitsemver.variables import get_variables

# Silent as a library; logging_config.setup_logging turns it on
logger.disable("gitsemver")

__all__ = [
    "__version__",
    "AmbiguousBaseVersionWarning",
    "CalculationWarning",
    "CommitGraph",
    "ConfigurationError",
    "GitRepository",
    "GitVersionConfiguration",
    "InMemoryCommitGraph",
    "NextVersionCalculator",
    "RepositoryStateError",
    "SemanticVersion",
    "UnparseableTagWarning",
    "VersionError",
    "VersionResult",
    "calculate",
    "get_variables",
    "load_config",
    "resolve",
]
