"""Configuration management for gitsemver."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gitsemver.errors import ConfigurationError
from gitsemver.models import (
    DEFAULT_TAG_PREFIX,
    AssemblyVersioningScheme,
    CommitMessageIncrementMode,
    DeploymentMode,
    IncrementStrategy,
)

CONFIG_FILE_NAMES = (
    "GitVersion.yml",
    "GitVersion.yaml",
    ".GitVersion.yml",
    ".GitVersion.yaml",
)

DEFAULT_MAJOR_MESSAGE = r"\+semver:\s?(breaking|major)"
DEFAULT_MINOR_MESSAGE = r"\+semver:\s?(feature|minor)"
DEFAULT_PATCH_MESSAGE = r"\+semver:\s?(fix|patch)"
DEFAULT_NO_BUMP_MESSAGE = r"\+semver:\s?(none|skip)"

DEFAULT_WORKFLOW = "GitHubFlow/v1"


def _kebab(name: str) -> str:
    return name.replace("_", "-")


_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=_kebab,
    populate_by_name=True,
    extra="forbid",
)


def _coerce_enum(enum_cls: type, value: Any) -> Any:
    """Parse enum strings case-insensitively before field validation."""
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            return value  # Let pydantic report the bad value
    return value


class BranchConfiguration(BaseModel):
    """Settings for branches matching one pattern.

    A field left out of the document (or the constructor) inherits the global
    value. ``label`` is special: explicitly setting it to None means "no
    pre-release suffix", which is different from leaving it out.
    """

    model_config = _MODEL_CONFIG

    regex: str | None = None
    increment: IncrementStrategy | None = None
    label: str | None = None
    mode: DeploymentMode | None = None
    source_branches: tuple[str, ...] | None = None
    is_release_branch: bool | None = None
    tracks_release_branches: bool | None = None

    @field_validator("increment", mode="before")
    @classmethod
    def _parse_increment(cls, value: Any) -> Any:
        return _coerce_enum(IncrementStrategy, value)

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> Any:
        return _coerce_enum(DeploymentMode, value)

    def is_set(self, field: str) -> bool:
        """Check whether a field was given explicitly."""
        return field in self.model_fields_set

    def explicit_fields(self) -> dict[str, Any]:
        """Get only the explicitly set fields, keyed by field name."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def merged_over(self, base: BranchConfiguration) -> BranchConfiguration:
        """Layer this configuration's explicit fields over another's."""
        return BranchConfiguration(**{**base.explicit_fields(), **self.explicit_fields()})


class GitVersionConfiguration(BaseModel):
    """Global defaults plus ordered per-branch settings.

    The order of ``branches`` is the match priority. When ``workflow`` names
    a preset, its branches come first and user branches with the same key
    override them field by field.
    """

    model_config = _MODEL_CONFIG

    workflow: str | None = None
    assembly_versioning_scheme: AssemblyVersioningScheme = AssemblyVersioningScheme.MAJOR_MINOR_PATCH
    assembly_file_versioning_scheme: AssemblyVersioningScheme = (
        AssemblyVersioningScheme.MAJOR_MINOR_PATCH
    )
    mode: DeploymentMode = DeploymentMode.CONTINUOUS_DEPLOYMENT
    increment: IncrementStrategy = IncrementStrategy.PATCH
    label: str | None = None
    tag_prefix: str = DEFAULT_TAG_PREFIX
    commit_message_incrementing: CommitMessageIncrementMode = CommitMessageIncrementMode.ENABLED
    major_version_bump_message: str = DEFAULT_MAJOR_MESSAGE
    minor_version_bump_message: str = DEFAULT_MINOR_MESSAGE
    patch_version_bump_message: str = DEFAULT_PATCH_MESSAGE
    no_bump_message: str = DEFAULT_NO_BUMP_MESSAGE
    branches: dict[str, BranchConfiguration] = Field(default_factory=dict)

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> Any:
        return _coerce_enum(DeploymentMode, value)

    @field_validator("increment", mode="before")
    @classmethod
    def _parse_increment(cls, value: Any) -> Any:
        return _coerce_enum(IncrementStrategy, value)

    @field_validator("commit_message_incrementing", mode="before")
    @classmethod
    def _parse_message_mode(cls, value: Any) -> Any:
        return _coerce_enum(CommitMessageIncrementMode, value)

    @field_validator("assembly_versioning_scheme", "assembly_file_versioning_scheme", mode="before")
    @classmethod
    def _parse_scheme(cls, value: Any) -> Any:
        return _coerce_enum(AssemblyVersioningScheme, value)

    @field_validator("branches", mode="before")
    @classmethod
    def _empty_branches(cls, value: Any) -> Any:
        # "branches:" with nothing under it loads as None
        return {} if value is None else value

    def with_branch(self, key: str, **fields: Any) -> GitVersionConfiguration:
        """Return a copy with one branch configuration added or updated.

        Fields passed here are layered over the existing explicit fields of
        the same key. Passing ``label=None`` explicitly disables the label.

        Example:
            ```python
            cfg = GitVersionConfiguration(workflow="TrunkBased/preview1")
            cfg = cfg.with_branch("main", increment="Minor", label=None)
            ```

        Raises:
            ConfigurationError: If a field value is malformed.
        """
        existing = self.branches.get(key)
        try:
            update = BranchConfiguration(**fields)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration for branch '{key}': {e}") from e
        branch = update.merged_over(existing) if existing is not None else update
        branches = dict(self.branches)
        branches[key] = branch
        return self.model_copy(update={"branches": branches})

    def with_global(self, **fields: Any) -> GitVersionConfiguration:
        """Return a copy with global settings replaced (re-validated).

        Raises:
            ConfigurationError: If a field value is malformed.
        """
        data = {name: getattr(self, name) for name in self.model_fields_set}
        data.update(fields)
        try:
            return GitVersionConfiguration(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def find_config_file(repo_dir: Path | None = None) -> Path | None:
    """Find the first existing config file in a repository directory.

    Args:
        repo_dir: Directory to search. Defaults to the current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    base = repo_dir or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        path = base / name
        if path.exists():
            return path
    return None


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and $VAR syntax.

    Args:
        value: Config value (string, dict, list, or other).

    Returns:
        Value with environment variables expanded.
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or $VAR
        pattern = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, "")

        return pattern.sub(replace, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def parse_config(data: dict[str, Any] | None) -> GitVersionConfiguration:
    """Validate a raw configuration document.

    Args:
        data: Parsed YAML document (kebab-case keys).

    Returns:
        The typed configuration.

    Raises:
        ConfigurationError: If a key is unknown or a value is malformed.
    """
    try:
        return GitVersionConfiguration.model_validate(_expand_env_vars(data or {}))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_config(path: Path | None = None, repo_dir: Path | None = None) -> GitVersionConfiguration:
    """Load configuration from a YAML file.

    Environment variables are expanded in all values using ${VAR} syntax.

    Args:
        path: Explicit path to config file. If None, searches ``repo_dir``.
        repo_dir: Repository directory to search when no path is given.

    Returns:
        Loaded configuration, or the default workflow when no file exists.

    Raises:
        ConfigurationError: If the file cannot be parsed or validated.
    """
    if path is None:
        path = find_config_file(repo_dir)

    if path is None or not path.exists():
        return GitVersionConfiguration(workflow=DEFAULT_WORKFLOW)

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse {path}: {e}") from e

    if raw is not None and not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")

    return parse_config(raw)


def dump_config(config: GitVersionConfiguration) -> str:
    """Serialize a configuration to YAML using kebab-case keys."""
    data = config.model_dump(mode="json", by_alias=True, exclude_unset=True)
    branches = {
        key: branch.model_dump(mode="json", by_alias=True, exclude_unset=True)
        for key, branch in config.branches.items()
    }
    if branches:
        data["branches"] = branches
    return yaml.safe_dump(data, sort_keys=False)


def save_default_config(path: Path | None = None, workflow: str = DEFAULT_WORKFLOW) -> Path:
    """Save a starter GitVersion.yml.

    Args:
        path: Where to save. Defaults to ./GitVersion.yml.
        workflow: Workflow preset to reference.

    Returns:
        Path to saved config file.
    """
    if path is None:
        path = Path.cwd() / CONFIG_FILE_NAMES[0]

    default_config = f"""\
# gitsemver configuration
# You can use environment variables with ${{VAR}} syntax

# Branch presets: GitFlow/v1, GitHubFlow/v1 or TrunkBased/preview1
workflow: {workflow}

# Defaults for every branch (a branch entry overrides them)
mode: ContinuousDeployment
increment: Patch
tag-prefix: '[vV]?'
assembly-versioning-scheme: MajorMinorPatch
commit-message-incrementing: Enabled

branches:
  # main:
  #   increment: Minor
  #   label: null
  # feature:
  #   regex: ^features?[/-](?P<BranchName>.+)
  #   label: '{{BranchName}}'
  #   mode: ManualDeployment
  #   source-branches: [main]
"""

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)

    return path
