"""Pytest fixtures for worktree-wizard tests"""
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import git
import pytest

from worktree_wizard.config import Config, FrameConfig
from worktree_wizard.services.git.repo_context import RepoContext
from worktree_wizard.utils.process import CommandResult, ProcessRunner


class FakeRunner(ProcessRunner):
    """ProcessRunner that records calls and replays scripted results.

    Responses are keyed by the full argv tuple; ``handler`` (if set) is asked
    first and may return None to fall through. Unscripted commands succeed
    with empty output.
    """

    def __init__(self):
        super().__init__()
        self.calls: List[Tuple[str, ...]] = []
        self.cwds: List[Optional[str]] = []
        self.responses: Dict[Tuple[str, ...], CommandResult] = {}
        self.handler: Optional[Callable[[Tuple[str, ...]], Optional[CommandResult]]] = None

    def respond(self, argv: Sequence[str], stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        self.responses[tuple(argv)] = CommandResult(stdout, stderr, exit_code)

    def run(self, command, args=(), cwd=None, timeout=None) -> CommandResult:
        argv = (command, *args)
        self.calls.append(argv)
        self.cwds.append(cwd)
        if self.handler:
            result = self.handler(argv)
            if result is not None:
                return result
        return self.responses.get(argv, CommandResult("", "", 0))

    def called(self, *argv: str) -> bool:
        return tuple(argv) in self.calls


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def repo_context():
    """Context for a repository that only exists in FakeRunner's answers."""
    return RepoContext(Path("/work/myrepo"))


@pytest.fixture
def config():
    """A Config with setup disabled and both panes enabled."""
    return Config(
        repository_path="/work/myrepo",
        terminal_type="iterm",
        frame1=FrameConfig(True, "npm run dev"),
        frame2=FrameConfig(True, "claude"),
        setup_commands=None,
    )


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository on a main branch."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_branches(git_repo):
    """A repository with one merged and one unmerged branch."""
    repo = git_repo
    repo_path = Path(repo.working_dir)

    repo.git.checkout('-b', 'feature/unmerged')
    (repo_path / "feature.txt").write_text("Feature content\n")
    repo.index.add(["feature.txt"])
    repo.index.commit("Add feature")

    repo.git.checkout('main')
    repo.git.checkout('-b', 'feature/merged')
    (repo_path / "merge.txt").write_text("Merge content\n")
    repo.index.add(["merge.txt"])
    repo.index.commit("Feature to merge")

    repo.git.checkout('main')
    repo.git.merge('feature/merged', '--no-ff', '-m', 'Merge feature/merged')

    yield repo
