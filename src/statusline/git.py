"""Git working tree status for the status line."""

import logging
import re
import subprocess
from pathlib import Path

from statusline.models import GitChanges, GitStatus

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 2

_INSERTIONS = re.compile(r"(\d+) insertion")
_DELETIONS = re.compile(r"(\d+) deletion")


class GitError(Exception):
    """Raised when a git command fails."""


def run_git(args: list[str], cwd: str | Path) -> str:
    """Run a git command and return its stdout.

    Raises:
        GitError: If git is missing, times out, or exits non-zero.
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise GitError(f"git {' '.join(args)}: {e}") from e

    if result.returncode != 0:
        raise GitError(f"git {' '.join(args)} exited with {result.returncode}")
    return result.stdout


def parse_shortstat(output: str) -> tuple[int, int]:
    """Extract (insertions, deletions) from ``git diff --shortstat`` output."""
    insertions = _INSERTIONS.search(output)
    deletions = _DELETIONS.search(output)
    return (
        int(insertions.group(1)) if insertions else 0,
        int(deletions.group(1)) if deletions else 0,
    )


def count_porcelain(output: str) -> tuple[int, int]:
    """Count (staged, unstaged) files in ``git status --porcelain`` output."""
    staged = unstaged = 0
    for line in output.splitlines():
        if len(line) < 2:
            continue
        if line.startswith("??"):
            unstaged += 1
            continue
        index, worktree = line[0], line[1]
        if index in "MADRC":
            staged += 1
        if worktree in "MD":
            unstaged += 1
    return staged, unstaged


def get_git_status(cwd: str | Path) -> GitStatus | None:
    """Collect branch and change counts for the repository containing ``cwd``.

    Returns None when ``cwd`` is not inside a git work tree or git is
    unavailable.
    """
    try:
        branch = run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd).strip()
        porcelain = run_git(["status", "--porcelain"], cwd)
        staged_stat = run_git(["diff", "--cached", "--shortstat"], cwd)
        unstaged_stat = run_git(["diff", "--shortstat"], cwd)
    except GitError as e:
        logger.debug(f"No git status for {cwd}: {e}")
        return None

    staged_files, unstaged_files = count_porcelain(porcelain)
    staged_added, staged_deleted = parse_shortstat(staged_stat)
    unstaged_added, unstaged_deleted = parse_shortstat(unstaged_stat)

    return GitStatus(
        branch=branch,
        dirty=bool(porcelain.strip()),
        staged=GitChanges(added=staged_added, deleted=staged_deleted, files=staged_files),
        unstaged=GitChanges(added=unstaged_added, deleted=unstaged_deleted, files=unstaged_files),
    )
