"""Git collaborator.

Finds the repository root, checks the diff branch and produces per-file
diffs. Uses subprocess to call git directly.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from todoctx.errors import GitError

logger = logging.getLogger(__name__)


class GitRepository:
    """Read-only git queries run from one working directory."""

    def __init__(self, cwd: Path | str = ".") -> None:
        self._cwd = str(cwd)

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        """Run a git command and return the result."""
        cmd = ["git", *args]
        try:
            return subprocess.run(
                cmd,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                check=check,
                timeout=30,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {' '.join(args)} failed: {e.stderr.strip()}") from e

    def toplevel(self) -> Path:
        """Root of the repository containing the working directory.

        Raises:
            GitError: If the working directory is not inside a repository.
        """
        result = self._run("rev-parse", "--show-toplevel", check=False)
        if result.returncode != 0:
            raise GitError(f"Not a git repository: {self._cwd}")
        return Path(result.stdout.strip())

    def branch_exists(self, branch: str) -> bool:
        result = self._run("rev-parse", "--verify", "--quiet", branch, check=False)
        return result.returncode == 0

    def verify_branch(self, branch: str) -> None:
        """Raise GitError unless ``branch`` resolves to a commit."""
        if not self.branch_exists(branch):
            raise GitError(f"Branch '{branch}' does not exist.")

    def is_tracked(self, path: Path | str) -> bool:
        result = self._run("ls-files", "--error-unmatch", str(path), check=False)
        return result.returncode == 0

    def diff_file(self, path: Path | str, branch: str) -> str | None:
        """Diff of ``path`` against ``branch``.

        Returns:
            The trimmed diff text, or None when the file is untracked or
            has no changes.

        Raises:
            GitError: If git fails to produce the diff.
        """
        if not self.is_tracked(path):
            logger.debug("%s is untracked, no diff", path)
            return None
        result = self._run("diff", branch, "--", str(path))
        diff = result.stdout.strip()
        return diff or None
