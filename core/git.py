"""Local git operations."""

import logging
import subprocess
from pathlib import Path

from .errors import GitError

logger = logging.getLogger(__name__)


class GitRepo:
    """A local clone whose ``origin`` remote is the hosted repository."""

    def __init__(self, path: Path | str, base_branch: str = "main", timeout: float = 120):
        self.path = Path(path)
        self.base_branch = base_branch
        self.timeout = timeout

    def _run(self, *args: str) -> str:
        command = ["git", *args]
        logger.debug("Running %s in %s", " ".join(command), self.path)
        try:
            result = subprocess.run(
                command,
                cwd=self.path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            raise GitError(f"git {args[0]} failed: {e}", command) from e

        if result.returncode != 0:
            message = (result.stderr or result.stdout).strip()
            raise GitError(message or f"git {args[0]} exited with {result.returncode}", command)
        return result.stdout

    def ensure_clean(self) -> None:
        """Raise ``GitError`` when the working tree has uncommitted changes."""
        changes = self._run("status", "--porcelain").strip()
        if changes:
            raise GitError(
                f"Working tree at {self.path} has uncommitted changes, refusing to merge",
                ["git", "status", "--porcelain"],
            )

    def merge_branch(self, branch_name: str) -> None:
        """Fast-forward the base branch to ``branch_name`` and push it.

        The clone must have a clean working tree; local changes are never
        discarded.

        Raises:
            GitError: If any step fails; the message is git's stderr
        """
        self.ensure_clean()
        self._run("fetch", "origin")
        self._run("checkout", "-B", branch_name, f"origin/{branch_name}")
        self._run("checkout", "-B", self.base_branch, f"origin/{self.base_branch}")
        self._run("merge", "--ff-only", branch_name)
        self._run("push", "origin", self.base_branch)
        logger.debug("Merged %s into %s", branch_name, self.base_branch)
