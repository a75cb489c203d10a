"""Command-line interface for gitsemver."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from gitsemver._version import __version__
from gitsemver.calculation import NextVersionCalculator
from gitsemver.config import (
    CONFIG_FILE_NAMES,
    DEFAULT_WORKFLOW,
    dump_config,
    find_config_file,
    load_config,
    save_default_config,
)
from gitsemver.errors import VersionError
from gitsemver.git import GitRepository
from gitsemver.logging_config import setup_logging
from gitsemver.output import OUTPUT_FORMATS, VersionFormatter
from gitsemver.variables import VARIABLE_NAMES
from gitsemver.workflows import WORKFLOWS

# Load environment variables from .env file
load_dotenv()

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="gitsemver")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (errors only)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """gitsemver - Calculate semantic versions from git history."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if verbose:
        setup_logging("DEBUG", err_console)
    elif quiet:
        setup_logging("ERROR", err_console)
    else:
        setup_logging("WARNING", err_console)


@main.command()
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option("--branch", "-b", default=None, help="Branch whose configuration applies")
@click.option("--commit", "-c", default=None, help="Commit, tag or branch to version (default: HEAD)")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: GitVersion.yml in PATH)",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    help="Output format",
)
@click.option(
    "--show-variable",
    type=click.Choice(VARIABLE_NAMES, case_sensitive=False),
    default=None,
    help="Print a single variable, e.g. FullSemVer",
)
@click.option(
    "--output-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write the variables to a file (json or env format)",
)
@click.option(
    "--version-module",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a Python module exposing __version__",
)
@click.pass_context
def calculate(
    ctx: click.Context,
    path: Path,
    branch: str | None,
    commit: str | None,
    config_file: Path | None,
    format: str,
    show_variable: str | None,
    output_file: Path | None,
    version_module: Path | None,
) -> None:
    """Calculate the version of a commit in the repository at PATH."""
    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)

    try:
        configuration = load_config(config_file, repo_dir=path)
        repository = GitRepository(path)
        result = NextVersionCalculator(repository, configuration).calculate(commit, branch)
    except VersionError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(130)

    formatter = VersionFormatter(result)

    if show_variable:
        click.echo(formatter.variables[show_variable])
    elif format == "text":
        if quiet:
            click.echo(result.full_sem_ver)
        else:
            formatter.to_text(verbose=verbose, output=console)
    else:
        click.echo(formatter.render(format), nl=format == "json")

    if output_file:
        file_format = "env" if output_file.suffix == ".env" or format == "env" else "json"
        saved = formatter.save(output_file, file_format)
        if not quiet:
            err_console.print(f"[dim]Variables written to {saved}[/dim]")

    if version_module:
        saved = formatter.save_version_module(version_module)
        if not quiet:
            err_console.print(f"[dim]Version module written to {saved}[/dim]")


@main.group()
def config() -> None:
    """Manage gitsemver configuration."""
    pass


@config.command(name="show")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
def config_show(path: Path) -> None:
    """Show the configuration that applies in PATH."""
    from gitsemver.resolver import ConfigurationResolver

    config_file = find_config_file(path)
    try:
        cfg = load_config(config_file)
        resolver = ConfigurationResolver(cfg)
    except VersionError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print("[bold]Current Configuration[/bold]")
    console.print()
    if config_file:
        console.print(f"[dim]Config file:[/dim] {config_file}")
    else:
        console.print(f"[dim]Config file:[/dim] (none - using {DEFAULT_WORKFLOW} defaults)")
    console.print()

    click.echo(dump_config(cfg))

    console.print("[bold]Branches (in match order):[/bold]")
    for key in resolver.keys:
        branch = resolver.get(key)
        label = "(none)" if branch.label is None else repr(branch.label)
        console.print(
            f"  [cyan]{key}[/cyan] {escape(branch.regex)}  "
            f"increment={branch.increment.value} mode={branch.mode.value} label={escape(label)}",
            highlight=False,
        )


@config.command(name="path")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
def config_path(path: Path) -> None:
    """Show configuration file paths."""
    console.print("[bold]Configuration paths (in priority order):[/bold]")
    config_file = find_config_file(path)

    for name in CONFIG_FILE_NAMES:
        candidate = path / name
        if candidate == config_file:
            console.print(f"  [green]{candidate}[/green] (active)")
        elif candidate.exists():
            console.print(f"  {candidate} (exists)")
        else:
            console.print(f"  [dim]{candidate}[/dim]")

    console.print()
    console.print("[bold]Other paths:[/bold]")
    console.print(f"  .env file: {Path.cwd() / '.env'}")


@config.command(name="init")
@click.argument(
    "path",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--workflow",
    type=click.Choice(list(WORKFLOWS)),
    default=DEFAULT_WORKFLOW,
    help="Branch preset to start from",
)
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def config_init(path: Path, workflow: str, force: bool) -> None:
    """Create a default GitVersion.yml in PATH."""
    config_file = path / CONFIG_FILE_NAMES[0]

    if config_file.exists() and not force:
        console.print(f"[yellow]Config file already exists:[/yellow] {config_file}")
        console.print("Use --force to overwrite.")
        sys.exit(1)

    saved = save_default_config(config_file, workflow=workflow)
    console.print(f"[green]Created config file:[/green] {saved}")


if __name__ == "__main__":
    main()
