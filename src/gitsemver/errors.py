"""Exception and warning hierarchy for gitsemver.

Errors abort a calculation and propagate unchanged to the caller.
Warnings never abort; they are collected on the calculation result.
"""

from __future__ import annotations


class VersionError(Exception):
    """Base exception for all gitsemver errors.

    Both configuration and repository errors inherit from this class, so
    callers that only care about "the version could not be calculated" can
    catch a single type.
    """

    pass


class ConfigurationError(VersionError):
    """Configuration cannot be resolved for a branch.

    Raised when no branch pattern matches and no catch-all exists, when a
    regex or enum value is malformed, or when a source branch refers to an
    unknown branch key.
    """

    pass


class RepositoryStateError(VersionError):
    """The repository snapshot cannot answer a query.

    Raised for unknown refs, missing commits, empty or shallow repositories,
    and failures of the underlying git executable.
    """

    pass


class CalculationWarning(UserWarning):
    """Base class for non-fatal findings during a calculation."""

    pass


class AmbiguousBaseVersionWarning(CalculationWarning):
    """Several base version candidates tied after dominance and distance.

    Attributes:
        shas: Commits holding the tied candidates.
        chosen: Commit of the candidate that was selected.
    """

    def __init__(self, shas: list[str], chosen: str, message: str | None = None) -> None:
        self.shas = shas
        self.chosen = chosen
        if message is None:
            short = ", ".join(sha[:7] for sha in shas)
            message = f"Ambiguous base version between commits {short}; using {chosen[:7]}"
        super().__init__(message)


class UnparseableTagWarning(CalculationWarning):
    """A tag name did not parse as a semantic version and was ignored.

    Attributes:
        tag: The tag name.
        sha: Commit the tag points at.
    """

    def __init__(self, tag: str, sha: str) -> None:
        self.tag = tag
        self.sha = sha
        super().__init__(f"Tag '{tag}' on {sha[:7]} is not a semantic version")
