"""Branch configuration resolution.

Flattens the global defaults, the workflow preset and the per-branch entries
into one concrete configuration per branch key, once, and then matches
branch names against it.
"""

from __future__ import annotations

import re

from loguru import logger
from pydantic import BaseModel, ConfigDict

from gitsemver.config import BranchConfiguration, GitVersionConfiguration
from gitsemver.errors import ConfigurationError
from gitsemver.models import (
    AssemblyVersioningScheme,
    CommitMessageIncrementMode,
    DeploymentMode,
    IncrementStrategy,
    sanitize_identifier,
)
from gitsemver.workflows import effective_branches

_REF_PREFIXES = ("refs/heads/", "refs/tags/")
_REMOTE_PREFIX = re.compile(r"^(refs/remotes/[^/]+/|origin/)")
_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class EffectiveConfiguration(BaseModel):
    """Fully concrete settings used for one calculation.

    Nothing here is left to inherit. Instances are frozen and hashable so
    they can be part of a cache key.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    branch_name: str = ""
    regex: str
    increment: IncrementStrategy
    label: str | None
    mode: DeploymentMode
    source_branches: tuple[str, ...] = ()
    is_release_branch: bool = False
    tracks_release_branches: bool = False
    tag_prefix: str
    commit_message_incrementing: CommitMessageIncrementMode
    major_version_bump_message: str
    minor_version_bump_message: str
    patch_version_bump_message: str
    no_bump_message: str
    assembly_versioning_scheme: AssemblyVersioningScheme
    assembly_file_versioning_scheme: AssemblyVersioningScheme


def normalize_branch_name(name: str) -> str:
    """Strip ref prefixes: "refs/heads/main" and "origin/main" become "main"."""
    for prefix in _REF_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix) :]
    return _REMOTE_PREFIX.sub("", name)


def _compile(pattern: str, what: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Invalid regex for {what}: {pattern!r} ({e})") from e


def _render_label(template: str | None, match: re.Match[str], branch_name: str) -> str | None:
    """Fill {Name} placeholders from the regex groups and sanitize."""
    if template is None:
        return None

    groups = match.groupdict()

    def replace(placeholder: re.Match[str]) -> str:
        name = placeholder.group(1)
        value = groups.get(name)
        if value is None and name == "BranchName":
            value = branch_name
        return value or ""

    return sanitize_identifier(_PLACEHOLDER.sub(replace, template))


class ConfigurationResolver:
    """Resolve the effective configuration for branch names.

    The constructor performs the single flattening pass: every branch key is
    merged with the globals, its regex is compiled and its source branches
    are checked. ``resolve`` is then a lookup plus label rendering.
    """

    def __init__(self, configuration: GitVersionConfiguration) -> None:
        self.configuration = configuration
        _compile(f"^(?:{configuration.tag_prefix})", "tag-prefix")
        for setting in (
            "major_version_bump_message",
            "minor_version_bump_message",
            "patch_version_bump_message",
            "no_bump_message",
        ):
            _compile(getattr(configuration, setting), setting.replace("_", "-"))

        branches = effective_branches(configuration)
        self._patterns: dict[str, re.Pattern[str]] = {}
        self._flattened: dict[str, EffectiveConfiguration] = {}
        for key, branch in branches.items():
            regex = branch.regex or f"^{re.escape(key)}$"
            self._patterns[key] = _compile(regex, f"branch '{key}'")
            self._flattened[key] = self._flatten(key, regex, branch)

        for key, flat in self._flattened.items():
            unknown = [s for s in flat.source_branches if s not in self._flattened]
            if unknown:
                raise ConfigurationError(
                    f"Branch '{key}' lists unknown source branches: {', '.join(unknown)}"
                )

    @property
    def keys(self) -> list[str]:
        """Branch keys in match priority order."""
        return list(self._flattened)

    def _flatten(self, key: str, regex: str, branch: BranchConfiguration) -> EffectiveConfiguration:
        glob = self.configuration

        increment = branch.increment
        if increment is None or increment is IncrementStrategy.INHERIT:
            increment = glob.increment
        if increment is IncrementStrategy.INHERIT:
            increment = IncrementStrategy.PATCH

        return EffectiveConfiguration(
            key=key,
            regex=regex,
            increment=increment,
            label=branch.label if branch.is_set("label") else glob.label,
            mode=branch.mode or glob.mode,
            source_branches=branch.source_branches or (),
            is_release_branch=bool(branch.is_release_branch),
            tracks_release_branches=bool(branch.tracks_release_branches),
            tag_prefix=glob.tag_prefix,
            commit_message_incrementing=glob.commit_message_incrementing,
            major_version_bump_message=glob.major_version_bump_message,
            minor_version_bump_message=glob.minor_version_bump_message,
            patch_version_bump_message=glob.patch_version_bump_message,
            no_bump_message=glob.no_bump_message,
            assembly_versioning_scheme=glob.assembly_versioning_scheme,
            assembly_file_versioning_scheme=glob.assembly_file_versioning_scheme,
        )

    def _match(self, branch_name: str) -> tuple[str, re.Match[str]] | None:
        name = normalize_branch_name(branch_name)
        for key, pattern in self._patterns.items():
            match = pattern.match(name)
            if match:
                return key, match
        return None

    def match_key(self, branch_name: str) -> str | None:
        """Get the branch key a branch name resolves to, if any."""
        found = self._match(branch_name)
        return found[0] if found else None

    def get(self, key: str) -> EffectiveConfiguration:
        """Get the flattened configuration of a branch key."""
        try:
            return self._flattened[key]
        except KeyError:
            raise ConfigurationError(f"No branch configuration named '{key}'") from None

    def resolve(self, branch_name: str) -> EffectiveConfiguration:
        """Resolve the effective configuration for a branch.

        Args:
            branch_name: Branch name, optionally with a ref prefix.

        Returns:
            The first matching branch's settings merged over the globals.

        Raises:
            ConfigurationError: If no configured branch matches.
        """
        found = self._match(branch_name)
        if found is None:
            raise ConfigurationError(
                f"No branch configuration matches '{branch_name}' and no catch-all is configured"
            )

        key, match = found
        name = normalize_branch_name(branch_name)
        flat = self._flattened[key]
        effective = flat.model_copy(
            update={"branch_name": name, "label": _render_label(flat.label, match, name)}
        )
        logger.debug(
            "Branch '{}' uses configuration '{}' (increment={}, mode={}, label={!r})",
            name,
            key,
            effective.increment.value,
            effective.mode.value,
            effective.label,
        )
        return effective


def resolve(branch_name: str, configuration: GitVersionConfiguration) -> EffectiveConfiguration:
    """Resolve the effective configuration for one branch name."""
    return ConfigurationResolver(configuration).resolve(branch_name)
