"""Tests for version variables and output formatting."""

import json
import tempfile
from pathlib import Path

import pytest
from rich.console import Console

from gitsemver.calculation import calculate
from gitsemver.config import GitVersionConfiguration
from gitsemver.git import InMemoryCommitGraph
from gitsemver.models import AssemblyVersioningScheme, SemanticVersion
from gitsemver.output import VersionFormatter
from gitsemver.variables import VARIABLE_NAMES, format_assembly_version, get_variables


def _beta_result():
    repo = InMemoryCommitGraph()
    base = repo.make_a_commit("A")
    repo.apply_tag("1.0.0")
    repo.make_a_commit("B")
    head = repo.make_a_commit("C")
    cfg = GitVersionConfiguration(assembly_versioning_scheme="MajorMinorPatchTag").with_branch(
        "main", increment="Minor", label="beta", mode="ContinuousDelivery"
    )
    return calculate(repo, configuration=cfg), base, head


class TestAssemblyVersion:
    """Tests for the assembly version schemes."""

    @pytest.mark.parametrize(
        ("scheme", "expected"),
        [
            (AssemblyVersioningScheme.MAJOR, "1.0.0.0"),
            (AssemblyVersioningScheme.MAJOR_MINOR, "1.2.0.0"),
            (AssemblyVersioningScheme.MAJOR_MINOR_PATCH, "1.2.3.0"),
            (AssemblyVersioningScheme.MAJOR_MINOR_PATCH_TAG, "1.2.3.4"),
            (AssemblyVersioningScheme.NONE, ""),
        ],
    )
    def test_schemes(self, scheme: AssemblyVersioningScheme, expected: str) -> None:
        """Test each scheme's shape."""
        version = SemanticVersion.parse("1.2.3-beta.4")
        assert format_assembly_version(version, scheme) == expected

    def test_tag_scheme_without_pre_release(self) -> None:
        """Test a release uses 0 as the fourth part."""
        version = SemanticVersion.parse("1.2.3")
        assert format_assembly_version(version, AssemblyVersioningScheme.MAJOR_MINOR_PATCH_TAG) == "1.2.3.0"


class TestVariables:
    """Tests for get_variables."""

    def test_all_names_present(self) -> None:
        """Test every documented variable is produced."""
        result, _, _ = _beta_result()
        assert list(get_variables(result)) == list(VARIABLE_NAMES)

    def test_values(self) -> None:
        """Test variable values for a labelled version."""
        result, base, head = _beta_result()
        variables = get_variables(result)

        assert variables["Major"] == "1"
        assert variables["Minor"] == "1"
        assert variables["Patch"] == "0"
        assert variables["PreReleaseTag"] == "beta.2"
        assert variables["PreReleaseTagWithDash"] == "-beta.2"
        assert variables["PreReleaseLabel"] == "beta"
        assert variables["PreReleaseNumber"] == "2"
        assert variables["BuildMetaData"] == "2"
        assert variables["FullBuildMetaData"] == f"2.Branch.main.Sha.{head}"
        assert variables["MajorMinorPatch"] == "1.1.0"
        assert variables["SemVer"] == "1.1.0-beta.2"
        assert variables["FullSemVer"] == "1.1.0-beta.2+2"
        assert variables["InformationalVersion"] == f"1.1.0-beta.2+2.Branch.main.Sha.{head}"
        assert variables["AssemblySemVer"] == "1.1.0.2"
        assert variables["AssemblySemFileVer"] == "1.1.0.0"
        assert variables["BranchName"] == "main"
        assert variables["Sha"] == head
        assert variables["ShortSha"] == head[:7]
        assert variables["CommitsSinceVersionSource"] == "2"
        assert variables["VersionSourceSha"] == base
        assert variables["CommitDate"] == "2024-01-01"

    def test_release_has_empty_pre_release(self) -> None:
        """Test pre-release variables are empty for a release."""
        repo = InMemoryCommitGraph()
        repo.make_a_commit()
        repo.apply_tag("2.0.0")
        result = calculate(repo, configuration=GitVersionConfiguration().with_branch("main"))
        variables = get_variables(result)

        assert variables["PreReleaseTag"] == ""
        assert variables["PreReleaseNumber"] == ""
        assert variables["FullSemVer"] == "2.0.0"
        assert variables["CommitsSinceVersionSource"] == "0"


class TestVersionFormatter:
    """Tests for VersionFormatter."""

    def test_to_json(self) -> None:
        """Test JSON output holds the variables."""
        result, _, _ = _beta_result()
        data = json.loads(VersionFormatter(result).to_json())
        assert data["SemVer"] == "1.1.0-beta.2"

    def test_to_env(self) -> None:
        """Test dotenv output lines."""
        result, _, _ = _beta_result()
        lines = VersionFormatter(result).to_env().splitlines()
        assert "GitVersion_FullSemVer=1.1.0-beta.2+2" in lines
        assert len(lines) == len(VARIABLE_NAMES)

    def test_render_unknown_format(self) -> None:
        """Test an unsupported format raises ValueError."""
        result, _, _ = _beta_result()
        with pytest.raises(ValueError):
            VersionFormatter(result).render("xml")

    def test_to_text(self) -> None:
        """Test text output mentions the version and base."""
        result, _, _ = _beta_result()
        output = Console(record=True, width=200)
        VersionFormatter(result).to_text(verbose=True, output=output)
        text = output.export_text()
        assert "1.1.0-beta.2+2" in text
        assert "InformationalVersion" in text

    def test_version_module(self) -> None:
        """Test the generated module defines the version."""
        result, _, head = _beta_result()
        source = VersionFormatter(result).render_version_module()
        namespace: dict[str, object] = {}
        exec(compile(source, "_version.py", "exec"), namespace)
        assert namespace["__version__"] == "1.1.0-beta.2"
        assert namespace["__commit__"] == head

    def test_save(self) -> None:
        """Test saving variables and the version module."""
        result, _, _ = _beta_result()
        formatter = VersionFormatter(result)
        with tempfile.TemporaryDirectory() as tmpdir:
            env_path = formatter.save(Path(tmpdir) / "out" / "version.env", "env")
            module_path = formatter.save_version_module(Path(tmpdir) / "pkg" / "_version.py")
            assert env_path.read_text(encoding="utf-8").startswith("GitVersion_Major=1")
            assert "__version__ = '1.1.0-beta.2'" in module_path.read_text(encoding="utf-8")
