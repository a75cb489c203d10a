"""Enumerations shared by configuration and calculation models.

Values match the spelling used in configuration files; lookups by value are
case-insensitive so ``minor`` and ``Minor`` both parse.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class _CaseInsensitiveEnum(str, Enum):
    """String enum that also accepts values in any letter case."""

    @classmethod
    def _missing_(cls, value: Any) -> Any:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class IncrementStrategy(_CaseInsensitiveEnum):
    """Which version component advances relative to the base version."""

    NONE = "None"
    PATCH = "Patch"
    MINOR = "Minor"
    MAJOR = "Major"
    INHERIT = "Inherit"

    @property
    def rank(self) -> int:
        """Ordering used when several increments compete (higher wins)."""
        return {
            IncrementStrategy.NONE: 0,
            IncrementStrategy.PATCH: 1,
            IncrementStrategy.MINOR: 2,
            IncrementStrategy.MAJOR: 3,
        }.get(self, 0)


class DeploymentMode(_CaseInsensitiveEnum):
    """How the pre-release counter advances."""

    MANUAL_DEPLOYMENT = "ManualDeployment"
    CONTINUOUS_DELIVERY = "ContinuousDelivery"
    CONTINUOUS_DEPLOYMENT = "ContinuousDeployment"


class CommitMessageIncrementMode(_CaseInsensitiveEnum):
    """Whether ``+semver:`` markers in commit messages are honoured."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"
    MERGE_MESSAGE_ONLY = "MergeMessageOnly"


class AssemblyVersioningScheme(_CaseInsensitiveEnum):
    """Shape of the four-part assembly version projection."""

    MAJOR_MINOR_PATCH_TAG = "MajorMinorPatchTag"
    MAJOR_MINOR_PATCH = "MajorMinorPatch"
    MAJOR_MINOR = "MajorMinor"
    MAJOR = "Major"
    NONE = "None"


class VersionSource(str, Enum):
    """Where a base version candidate came from."""

    EXACT_TAG = "ExactTag"
    BRANCH_NAME = "VersionInBranchName"
    MERGE_POINT = "ParentBranchMergePoint"
    FALLBACK = "Fallback"

    @property
    def priority(self) -> int:
        """Tie-break priority (lower wins)."""
        return list(VersionSource).index(self)
