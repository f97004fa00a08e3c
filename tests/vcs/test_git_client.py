import subprocess
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from gitscribe.summary.models import FileStatus
from gitscribe.vcs.git_client import GitClient, GitError, status_from_porcelain


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class TestStatusFromPorcelain(unittest.TestCase):
    def test_index_column_for_staged(self) -> None:
        self.assertEqual(status_from_porcelain("A  new.py", staged=True), FileStatus.NEW)
        self.assertEqual(status_from_porcelain("MM both.py", staged=True), FileStatus.MODIFIED)
        self.assertEqual(status_from_porcelain("D  gone.py", staged=True), FileStatus.DELETED)
        self.assertEqual(status_from_porcelain("R  a.py -> b.py", staged=True), FileStatus.RENAMED)

    def test_worktree_column_for_unstaged(self) -> None:
        self.assertEqual(status_from_porcelain(" M edit.py", staged=False), FileStatus.MODIFIED)
        self.assertEqual(status_from_porcelain(" D gone.py", staged=False), FileStatus.DELETED)
        self.assertEqual(status_from_porcelain("A  new.py", staged=False), FileStatus.UNKNOWN)

    def test_untracked_is_new(self) -> None:
        self.assertEqual(status_from_porcelain("?? tmp.txt", staged=False), FileStatus.NEW)

    def test_missing_line(self) -> None:
        self.assertEqual(status_from_porcelain(None, staged=True), FileStatus.UNKNOWN)
        self.assertEqual(status_from_porcelain("", staged=False), FileStatus.UNKNOWN)


class TestGitClient(unittest.TestCase):
    def test_list_staged_paths(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="src/a.py\0dir with space/b.txt\0", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            paths = GitClient(Path("/repo")).list_changed_paths(staged=True)
        self.assertEqual(paths, ["src/a.py", "dir with space/b.txt"])
        self.assertEqual(calls, [["diff", "--name-only", "-z", "--cached"]])

    def test_list_unstaged_paths_includes_untracked(self) -> None:
        def fake_run(self, args, check=True):
            if args[0] == "diff":
                return DummyProc(returncode=0, stdout="a.py\0", stderr="")
            if args[0] == "ls-files":
                return DummyProc(returncode=0, stdout="new.txt\0a.py\0", stderr="")
            raise AssertionError(f"Unexpected git command: {args}")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            paths = GitClient(Path("/repo")).list_changed_paths(staged=False)
        self.assertEqual(paths, ["a.py", "new.txt"])

    def test_get_status(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="AM foo.txt\n", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            self.assertEqual(client.get_status("foo.txt", staged=True), FileStatus.NEW)
            self.assertEqual(client.get_status("foo.txt", staged=False), FileStatus.MODIFIED)
        self.assertEqual(calls[0], ["status", "--porcelain", "--", "foo.txt"])

    def test_staged_diff(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="@@ -1 +1 @@\n-a\n+b\n", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            diff = GitClient(Path("/repo")).get_diff("a.py", staged=True)
        self.assertIn("+b", diff)
        self.assertEqual(calls, [["diff", "--no-color", "--cached", "--", "a.py"]])

    def test_untracked_file_is_diffed_against_dev_null(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append((args, check))
            if "--no-index" in args:
                return DummyProc(returncode=1, stdout="new file mode 100644\n+hello\n", stderr="")
            if args[0] == "status":
                return DummyProc(returncode=0, stdout="?? notes.txt\n", stderr="")
            return DummyProc(returncode=0, stdout="", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            diff = GitClient(Path("/repo")).get_diff("notes.txt", staged=False)
        self.assertIn("+hello", diff)
        self.assertIn(
            (["diff", "--no-color", "--no-index", "--", "/dev/null", "notes.txt"], False),
            calls,
        )

    def test_no_index_failure_raises(self) -> None:
        def fake_run(self, args, check=True):
            if "--no-index" in args:
                return DummyProc(returncode=2, stdout="", stderr="error: could not access")
            if args[0] == "status":
                return DummyProc(returncode=0, stdout="?? notes.txt\n", stderr="")
            return DummyProc(returncode=0, stdout="", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            with self.assertRaises(GitError):
                GitClient(Path("/repo")).get_diff("notes.txt")

    def test_commit_and_stage_all(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            client.stage_all()
            client.commit("Add foo\n\n- bar")
        self.assertEqual(calls, [["add", "--all"], ["commit", "-m", "Add foo\n\n- bar"]])

    def test_run_raises_git_error_on_failure(self) -> None:
        proc = subprocess.CompletedProcess(["git"], 128, stdout="", stderr="fatal: bad revision\n")
        with patch("gitscribe.vcs.git_client.subprocess.run", return_value=proc):
            with self.assertRaises(GitError) as ctx:
                GitClient(Path("/repo"))._run(["diff"])
        self.assertEqual(str(ctx.exception), "fatal: bad revision")

    def test_run_wraps_missing_git(self) -> None:
        with patch("gitscribe.vcs.git_client.subprocess.run", side_effect=FileNotFoundError("git")):
            with self.assertRaises(GitError):
                GitClient(Path("/repo"))._run(["status"])

    def test_find_repo_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / ".git").mkdir()
            nested = root / "src" / "pkg"
            nested.mkdir(parents=True)
            self.assertEqual(GitClient.find_repo_root(nested), root)
            self.assertTrue(GitClient.is_repo(root))
            self.assertFalse(GitClient.is_repo(nested))


if __name__ == "__main__":
    unittest.main()
