"""Tests for the logging configuration."""

from rich.console import Console

from gitsemver.calculation import calculate
from gitsemver.config import GitVersionConfiguration
from gitsemver.git import InMemoryCommitGraph
from gitsemver.logging_config import setup_logging
from gitsemver.output import VersionFormatter


def _calculate_with_ambiguity():
    repo = InMemoryCommitGraph()
    repo.make_a_commit()
    repo.branch_to("hotfix")
    repo.make_a_commit()
    repo.apply_tag("1.0.1")
    repo.checkout("main")
    repo.make_a_commit()
    repo.apply_tag("1.1.0")
    repo.merge("hotfix")
    return calculate(repo, configuration=GitVersionConfiguration().with_branch("main"))


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_routes_to_console(self) -> None:
        """Test library messages reach the shared console once enabled."""
        console = Console(record=True, width=200)
        setup_logging("DEBUG", console)

        _calculate_with_ambiguity()

        text = console.export_text()
        assert "Ambiguous base version" in text
        assert "DEBUG" in text

    def test_level_filters(self) -> None:
        """Test messages below the level are dropped."""
        console = Console(record=True, width=200)
        setup_logging("ERROR", console)

        _calculate_with_ambiguity()

        assert "Ambiguous base version" not in console.export_text()

    def test_stderr_fallback(self, capsys) -> None:
        """Test logging goes to stderr without a console."""
        setup_logging("WARNING")

        _calculate_with_ambiguity()

        assert "Ambiguous base version" in capsys.readouterr().err

    def test_warning_reported_once(self) -> None:
        """Test a calculation warning appears once alongside the text output."""
        console = Console(record=True, width=200)
        setup_logging("WARNING", console)

        result = _calculate_with_ambiguity()
        VersionFormatter(result).to_text(output=console)

        text = console.export_text()
        assert result.warnings
        assert text.count("Ambiguous base version") == 1
