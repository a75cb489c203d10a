"""Output formatting for calculated versions.

Provides unified output handling for version results in text, JSON, dotenv
and generated Python module formats.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from gitsemver.variables import get_variables

if TYPE_CHECKING:
    from gitsemver.calculation.models import VersionResult


console = Console()

OUTPUT_FORMATS = ("text", "json", "env")

ENV_PREFIX = "GitVersion_"


class VersionFormatter:
    """Formatter for version calculation results."""

    def __init__(self, result: VersionResult) -> None:
        self.result = result
        self.variables = get_variables(result)

    def to_json(self) -> str:
        """Convert the variables to a JSON string."""
        return json.dumps(self.variables, indent=2)

    def to_env(self) -> str:
        """Convert the variables to dotenv lines (``GitVersion_SemVer=1.2.3``)."""
        lines = [f"{ENV_PREFIX}{name}={value}" for name, value in self.variables.items()]
        return "\n".join(lines) + "\n"

    def render(self, format: str) -> str:
        """Render the variables in a machine-readable format.

        Raises:
            ValueError: If the format is not "json" or "env".
        """
        if format == "json":
            return self.to_json()
        if format == "env":
            return self.to_env()
        raise ValueError(f"Unsupported output format: {format}")

    def to_text(self, verbose: bool = False, output: Console | None = None) -> None:
        """Output the result as formatted text to the console."""
        out = output or console
        result = self.result

        out.print()
        out.print(f"[bold blue]{result.full_sem_ver}[/bold blue]")
        out.print(
            f"[dim]Branch:[/dim] {result.branch} "
            f"[dim]Commit:[/dim] {result.commit.short_sha} "
            f"[dim]Config:[/dim] {result.configuration.key}"
        )
        out.print(f"[dim]Base:[/dim] {result.base}")
        out.print(
            f"[dim]Increment:[/dim] {result.increment.value} "
            f"[dim]Commits since base:[/dim] {result.commits_since_base}"
        )

        if verbose:
            table = Table(title="Variables")
            table.add_column("Name", style="cyan")
            table.add_column("Value")
            for name, value in self.variables.items():
                table.add_row(name, value)
            out.print()
            out.print(table)
        out.print()

    def render_version_module(self) -> str:
        """Render a Python module exposing the version."""
        variables = self.variables
        return (
            '"""Version information, generated by gitsemver. Do not edit."""\n'
            "\n"
            f"__version__ = {variables['SemVer']!r}\n"
            f"__full_version__ = {variables['FullSemVer']!r}\n"
            f"__informational_version__ = {variables['InformationalVersion']!r}\n"
            f"__commit__ = {variables['Sha']!r}\n"
        )

    def save(self, path: Path, format: str = "json") -> Path:
        """Save the rendered variables to a file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render(format))
        return path

    def save_version_module(self, path: Path) -> Path:
        """Write the generated version module and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render_version_module())
        return path
