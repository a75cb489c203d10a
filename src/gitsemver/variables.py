"""Named version variables.

Flattens a calculation result into the string map build tooling consumes
(``SemVer``, ``FullSemVer``, ``AssemblySemVer`` and friends).
"""

from __future__ import annotations

from gitsemver.calculation.models import VersionResult
from gitsemver.models import AssemblyVersioningScheme, SemanticVersion

VARIABLE_NAMES = (
    "Major",
    "Minor",
    "Patch",
    "PreReleaseTag",
    "PreReleaseTagWithDash",
    "PreReleaseLabel",
    "PreReleaseNumber",
    "BuildMetaData",
    "FullBuildMetaData",
    "MajorMinorPatch",
    "SemVer",
    "FullSemVer",
    "InformationalVersion",
    "AssemblySemVer",
    "AssemblySemFileVer",
    "BranchName",
    "Sha",
    "ShortSha",
    "CommitsSinceVersionSource",
    "VersionSourceSha",
    "CommitDate",
)


def format_assembly_version(version: SemanticVersion, scheme: AssemblyVersioningScheme) -> str:
    """Render the four-part assembly version for a scheme.

    Example: 1.2.3-beta.4 gives "1.2.3.4" for MajorMinorPatchTag and
    "1.2.0.0" for MajorMinor. The None scheme gives an empty string.
    """
    if scheme is AssemblyVersioningScheme.MAJOR:
        return f"{version.major}.0.0.0"
    if scheme is AssemblyVersioningScheme.MAJOR_MINOR:
        return f"{version.major}.{version.minor}.0.0"
    if scheme is AssemblyVersioningScheme.MAJOR_MINOR_PATCH:
        return f"{version.major_minor_patch}.0"
    if scheme is AssemblyVersioningScheme.MAJOR_MINOR_PATCH_TAG:
        return f"{version.major_minor_patch}.{version.pre_release_number or 0}"
    return ""


def get_variables(result: VersionResult) -> dict[str, str]:
    """Get every named variable of a result as strings.

    Missing values (no pre-release number, no commit date) are empty strings.
    """
    version = result.version
    metadata = version.build_metadata
    configuration = result.configuration
    number = version.pre_release_number
    commit_date = metadata.commit_date if metadata else None

    return {
        "Major": str(version.major),
        "Minor": str(version.minor),
        "Patch": str(version.patch),
        "PreReleaseTag": str(version.pre_release_tag or ""),
        "PreReleaseTagWithDash": version.pre_release_tag_with_dash,
        "PreReleaseLabel": version.pre_release_label,
        "PreReleaseNumber": "" if number is None else str(number),
        "BuildMetaData": version.build_meta_data,
        "FullBuildMetaData": version.full_build_meta_data,
        "MajorMinorPatch": version.major_minor_patch,
        "SemVer": version.sem_ver,
        "FullSemVer": version.full_sem_ver,
        "InformationalVersion": version.informational_version,
        "AssemblySemVer": format_assembly_version(version, configuration.assembly_versioning_scheme),
        "AssemblySemFileVer": format_assembly_version(
            version, configuration.assembly_file_versioning_scheme
        ),
        "BranchName": result.branch,
        "Sha": result.commit.sha,
        "ShortSha": result.commit.short_sha,
        "CommitsSinceVersionSource": str(result.commits_since_base),
        "VersionSourceSha": result.base.sha,
        "CommitDate": commit_date.isoformat() if commit_date else "",
    }
