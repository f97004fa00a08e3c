"""
Git client implementation for gitscribe.

This module wraps the handful of Git operations the commit message
pipeline needs: listing staged and unstaged paths, reading per-file
diffs and porcelain status lines, and creating the final commit. All
subprocess calls go through :meth:`GitClient._run` so that unit tests
can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from gitscribe.summary.models import FileStatus


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


_STATUS_CODES = {
    "A": FileStatus.NEW,
    "C": FileStatus.NEW,
    "?": FileStatus.NEW,
    "M": FileStatus.MODIFIED,
    "T": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
}


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


def status_from_porcelain(line: Optional[str], staged: bool) -> FileStatus:
    """Translate a ``git status --porcelain`` line into a :class:`FileStatus`.

    The index column (X) describes staged changes and the worktree
    column (Y) unstaged ones. Untracked files (``??``) are new in both.
    Anything else, including a missing line, is ``UNKNOWN``.
    """
    if not line or len(line) < 2:
        return FileStatus.UNKNOWN
    code = line[0] if staged else line[1]
    return _STATUS_CODES.get(code, FileStatus.UNKNOWN)


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is inside a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If Git cannot be started, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.error("Failed to execute Git: %s", exc)
            raise GitError(f"Failed to execute Git: {exc}") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    @staticmethod
    def _split_nul(output: str) -> List[str]:
        return [path for path in output.split("\0") if path]

    # ------------------------------------------------------------------
    # Change detection
    # ------------------------------------------------------------------
    def list_changed_paths(self, staged: bool) -> List[str]:
        """Return the repository-relative paths with staged or unstaged changes.

        Unstaged paths include untracked files that are not ignored.

        Raises
        ------
        GitError
            If a git command fails.
        """
        if staged:
            result = self._run(["diff", "--name-only", "-z", "--cached"])
            return self._split_nul(result.stdout)

        paths = self._split_nul(self._run(["diff", "--name-only", "-z"]).stdout)
        untracked = self._run(["ls-files", "--others", "--exclude-standard", "-z"])
        for path in self._split_nul(untracked.stdout):
            if path not in paths:
                paths.append(path)
        return paths

    def get_status_line(self, path: str) -> Optional[str]:
        """Return the ``git status --porcelain`` line for ``path``, if any."""
        result = self._run(["status", "--porcelain", "--", path])
        for line in result.stdout.splitlines():
            if line.strip():
                return line
        return None

    def get_status(self, path: str, staged: bool) -> FileStatus:
        """Return the status of ``path`` as seen by the index or the worktree."""
        return status_from_porcelain(self.get_status_line(path), staged)

    def get_diff(self, path: str, staged: bool = False) -> str:
        """Return the unified diff of ``path``.

        ``staged`` selects the index (``--cached``) instead of the
        working tree. Untracked files are diffed against ``/dev/null``.

        Raises
        ------
        GitError
            If the git command fails.
        """
        args = ["diff", "--no-color"]
        if staged:
            args.append("--cached")
        result = self._run(args + ["--", path])
        if result.stdout.strip() or staged:
            return result.stdout

        status_line = self.get_status_line(path)
        if status_line and status_line.startswith("??"):
            # --no-index exits with 1 when the files differ
            result = self._run(
                ["diff", "--no-color", "--no-index", "--", "/dev/null", path],
                check=False,
            )
            if result.returncode > 1:
                raise GitError(result.stderr.strip() or "git diff --no-index failed")
        return result.stdout

    # ------------------------------------------------------------------
    # Committing
    # ------------------------------------------------------------------
    def commit(self, message: str) -> None:
        """Create a commit from the index with the given message.

        Multi-line commit messages are supported. If the commit fails,
        a GitError is raised.
        """
        self._run(["commit", "-m", message], check=True)

    def stage_all(self) -> None:
        """Stage every change in the working tree, including new files."""
        self._run(["add", "--all"], check=True)
