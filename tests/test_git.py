"""Tests for git status collection."""

import shutil
import subprocess
from pathlib import Path

import pytest

from statusline import git as git_module
from statusline.git import GitError, count_porcelain, get_git_status, parse_shortstat, run_git
from statusline.models import GitChanges, GitStatus


class TestParsers:
    def test_shortstat(self) -> None:
        assert parse_shortstat(" 3 files changed, 10 insertions(+), 5 deletions(-)\n") == (10, 5)
        assert parse_shortstat(" 1 file changed, 1 insertion(+)\n") == (1, 0)
        assert parse_shortstat(" 1 file changed, 2 deletions(-)\n") == (0, 2)
        assert parse_shortstat("") == (0, 0)

    def test_porcelain(self) -> None:
        output = " M a.txt\nA  b.txt\nMM c.txt\n?? d.txt\nR  e.txt -> f.txt\n D g.txt\n"
        assert count_porcelain(output) == (3, 4)

    def test_porcelain_empty(self) -> None:
        assert count_porcelain("") == (0, 0)


class TestGetGitStatus:
    def test_assembles_status(self, monkeypatch: pytest.MonkeyPatch) -> None:
        outputs = {
            ("rev-parse", "--abbrev-ref", "HEAD"): "feature\n",
            ("status", "--porcelain"): " M a.txt\nA  b.txt\n",
            ("diff", "--cached", "--shortstat"): " 1 file changed, 4 insertions(+)\n",
            ("diff", "--shortstat"): " 1 file changed, 2 insertions(+), 1 deletion(-)\n",
        }
        monkeypatch.setattr(git_module, "run_git", lambda args, cwd: outputs[tuple(args)])

        assert get_git_status("/repo") == GitStatus(
            branch="feature",
            dirty=True,
            staged=GitChanges(added=4, deleted=0, files=1),
            unstaged=GitChanges(added=2, deleted=1, files=1),
        )

    def test_clean_tree(self, monkeypatch: pytest.MonkeyPatch) -> None:
        outputs = {("rev-parse", "--abbrev-ref", "HEAD"): "main\n"}
        monkeypatch.setattr(git_module, "run_git", lambda args, cwd: outputs.get(tuple(args), ""))
        assert get_git_status("/repo") == GitStatus("main")

    def test_git_failure_returns_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(args: list[str], cwd: str) -> str:
            raise GitError("not a repository")

        monkeypatch.setattr(git_module, "run_git", fail)
        assert get_git_status("/repo") is None

    def test_missing_directory_raises_git_error(self, temp_dir: Path) -> None:
        with pytest.raises(GitError):
            run_git(["status"], temp_dir / "does-not-exist")


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestRealRepository:
    @staticmethod
    def git(repo: Path, *args: str) -> None:
        subprocess.run(
            ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", "-c", "commit.gpgsign=false", *args],
            cwd=repo,
            check=True,
            capture_output=True,
        )

    def test_outside_repository(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(temp_dir.parent))
        assert get_git_status(temp_dir) is None

    def test_working_tree(self, temp_dir: Path) -> None:
        repo = temp_dir / "repo"
        repo.mkdir()
        self.git(repo, "init", "-q")
        (repo / "a.txt").write_text("1\n2\n3\n")
        self.git(repo, "add", "a.txt")
        self.git(repo, "commit", "-q", "-m", "initial")
        self.git(repo, "branch", "-M", "main")

        (repo / "a.txt").write_text("1\n2\n3\n4\n")
        (repo / "b.txt").write_text("x\n")
        self.git(repo, "add", "b.txt")
        (repo / "c.txt").write_text("untracked\n")

        assert get_git_status(repo) == GitStatus(
            branch="main",
            dirty=True,
            staged=GitChanges(added=1, deleted=0, files=1),
            unstaged=GitChanges(added=1, deleted=0, files=2),
        )
