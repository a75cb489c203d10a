"""Git repository reader backed by the ``git`` executable.

Reads commits, tags and branches once into an in-memory snapshot; later
queries never touch the repository again.
"""

from __future__ import annotations

import subprocess
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger

from gitsemver.errors import RepositoryStateError
from gitsemver.git.memory import InMemoryCommitGraph

# Field and record separators for git log output
_FS = "\x1f"
_RS = "\x1e"

LOG_FORMAT = "%H%x1f%P%x1f%ct%x1f%B%x1e"


class GitRepository(InMemoryCommitGraph):
    """Read-only snapshot of a git repository."""

    def __init__(self, path: Path | str = ".", timeout: float = 30.0) -> None:
        """Load the repository snapshot.

        Args:
            path: Repository working directory.
            timeout: Seconds to wait for each git invocation.

        Raises:
            RepositoryStateError: If git fails, the repository is empty, or it
                is a shallow clone (history is incomplete).
        """
        super().__init__()
        self.path = Path(path)
        self.timeout = timeout
        self._load()

    def _run_git(self, *args: str, check: bool = True) -> str:
        """Run a git command in the repository and return its stdout."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except (subprocess.SubprocessError, OSError, UnicodeDecodeError) as e:
            raise RepositoryStateError(f"Unable to run git in {self.path}: {e}") from e

        if check and result.returncode != 0:
            raise RepositoryStateError(f"git {args[0]} failed: {result.stderr.strip()}")
        return result.stdout if result.returncode == 0 else ""

    def _load(self) -> None:
        if self._run_git("rev-parse", "--is-shallow-repository").strip() == "true":
            raise RepositoryStateError(
                f"{self.path} is a shallow clone; fetch the full history to calculate versions"
            )

        head = self._run_git("rev-parse", "--verify", "-q", "HEAD", check=False).strip()
        if not head:
            raise RepositoryStateError(f"{self.path} has no commits")

        self._load_commits()
        self._load_tags()
        self._load_branches()

        branch = self._run_git("symbolic-ref", "--short", "-q", "HEAD", check=False).strip()
        if branch:
            self.set_head(branch=branch)
            if branch not in self._branches:
                self._branches[branch] = head
        else:
            self.set_head(sha=head)

        logger.debug(
            "Loaded {} commits, {} tags, {} branches from {}",
            len(self._commits),
            len(self._tags),
            len(self._branches),
            self.path,
        )

    def _load_commits(self) -> None:
        # --topo-order --reverse lists parents before their children
        output = self._run_git("log", "--all", "--topo-order", "--reverse", f"--format={LOG_FORMAT}")
        for record in output.split(_RS):
            record = record.lstrip("\n")
            if not record:
                continue
            try:
                sha, parents, timestamp, message = record.split(_FS, 3)
                committed = datetime.fromtimestamp(int(timestamp), tz=UTC)
            except (ValueError, OverflowError, OSError) as e:
                raise RepositoryStateError(f"Unreadable git log record: {record[:60]!r}") from e
            self.add_commit(sha, tuple(parents.split()), message.rstrip(), committed)

    def _load_tags(self) -> None:
        # Annotated tags report the tagged commit as *objectname
        output = self._run_git(
            "for-each-ref", "refs/tags", "--format=%(objectname) %(*objectname) %(refname:short)"
        )
        for line in output.splitlines():
            parts = line.split(" ", 2)
            if len(parts) != 3:
                continue
            target = parts[1] or parts[0]
            if target in self._commits:
                self.set_tag(parts[2], target)

    def _load_branches(self) -> None:
        output = self._run_git(
            "for-each-ref", "refs/heads", "refs/remotes", "--format=%(objectname) %(refname) %(symref)"
        )
        for line in output.splitlines():
            parts = line.split(" ")
            if len(parts) < 2 or (len(parts) > 2 and parts[2]):
                continue  # symbolic refs such as origin/HEAD
            sha, refname = parts[0], parts[1]
            if sha not in self._commits:
                continue
            if refname.startswith("refs/heads/"):
                name = refname[len("refs/heads/") :]
            else:
                name = refname[len("refs/remotes/") :]
            self._branches[name] = sha
