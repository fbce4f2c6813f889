"""Tests for WorktreeRepository and the porcelain parser"""
from pathlib import Path

import pytest

from worktree_wizard.core.orchestrator import WorkflowStep, WorktreeOrchestrator
from worktree_wizard.exceptions import CommandError, GitOperationError
from worktree_wizard.models.issue import Issue
from worktree_wizard.models.worktree import MergeStatus
from worktree_wizard.services.git.repo_context import RepoContext
from worktree_wizard.services.git.worktrees import (
    WorktreeRepository,
    clean_git_error,
    parse_worktree_porcelain,
)
from worktree_wizard.services.github_service import GitHubService
from worktree_wizard.services.setup_service import SetupService
from worktree_wizard.services.terminal import ITermAdapter
from worktree_wizard.utils.process import CommandResult, ProcessRunner

MAIN_RECORD = "worktree /work/myrepo\nHEAD aaa111\nbranch refs/heads/main\n"
ISSUE_RECORD = "worktree /work/myrepo-issue-42-add-feature\nHEAD bbb222\nbranch refs/heads/issue-42-add-feature\n"


class TestPorcelainParser:
    """Test parsing of `git worktree list --porcelain`."""

    def test_main_and_issue_worktree(self):
        worktrees = parse_worktree_porcelain(MAIN_RECORD + "\n" + ISSUE_RECORD + "\n")

        assert len(worktrees) == 2
        main, issue = worktrees
        assert main.path == "/work/myrepo"
        assert main.branch == "main"
        assert main.commit == "aaa111"
        assert main.is_main is True
        assert main.issue_number is None
        assert issue.branch == "issue-42-add-feature"
        assert issue.issue_number == 42
        assert issue.is_main is False

    def test_missing_trailing_blank_line(self):
        worktrees = parse_worktree_porcelain(MAIN_RECORD + "\n" + ISSUE_RECORD.rstrip("\n"))
        assert [wt.branch for wt in worktrees] == ["main", "issue-42-add-feature"]

    def test_locked_with_reason(self):
        output = "worktree /w/a\nHEAD abc\nbranch refs/heads/feature\nlocked Work in progress\n\n"
        (worktree,) = parse_worktree_porcelain(output)
        assert worktree.is_locked is True
        assert worktree.lock_reason == "Work in progress"

    def test_locked_without_reason(self):
        output = "worktree /w/a\nHEAD abc\nbranch refs/heads/feature\nlocked\n"
        (worktree,) = parse_worktree_porcelain(output)
        assert worktree.is_locked is True
        assert worktree.lock_reason is None

    def test_prunable(self):
        output = (
            "worktree /w/gone\nHEAD abc\nbranch refs/heads/gone\n"
            "prunable gitdir file points to non-existent location\n\n"
        )
        (worktree,) = parse_worktree_porcelain(output)
        assert worktree.is_prunable is True
        assert worktree.is_locked is False

    def test_detached_head(self):
        output = "worktree /w/d\nHEAD abc\ndetached\n\n"
        (worktree,) = parse_worktree_porcelain(output)
        assert worktree.branch == "detached"
        assert worktree.issue_number is None

    def test_master_is_main(self):
        (worktree,) = parse_worktree_porcelain("worktree /w\nHEAD a\nbranch refs/heads/master\n")
        assert worktree.is_main is True

    def test_record_without_branch_is_dropped(self):
        output = (
            MAIN_RECORD + "\n"
            "worktree /w/bare\nbare\n\n"
            + ISSUE_RECORD + "\n"
        )
        worktrees = parse_worktree_porcelain(output)
        assert [wt.path for wt in worktrees] == ["/work/myrepo", "/work/myrepo-issue-42-add-feature"]

    def test_record_without_path_is_dropped(self):
        output = MAIN_RECORD + "\nHEAD ccc\nbranch refs/heads/orphan\n\n" + ISSUE_RECORD
        worktrees = parse_worktree_porcelain(output)
        assert [wt.branch for wt in worktrees] == ["main", "issue-42-add-feature"]
        assert worktrees[1].commit == "bbb222"

    def test_preserves_order_of_many_records(self):
        records = [
            f"worktree /w/{i}\nHEAD {i:040d}\nbranch refs/heads/issue-{i}-x\n" for i in range(1, 6)
        ]
        worktrees = parse_worktree_porcelain("\n".join(records))
        assert [wt.issue_number for wt in worktrees] == [1, 2, 3, 4, 5]

    def test_parsing_is_repeatable(self):
        output = MAIN_RECORD + "\n" + ISSUE_RECORD
        assert parse_worktree_porcelain(output) == parse_worktree_porcelain(output)

    def test_empty_output(self):
        assert parse_worktree_porcelain("") == []


class TestCleanGitError:
    """Test git error cleanup."""

    def test_strips_fatal_prefix(self):
        assert clean_git_error("fatal: 'x' is not a working tree") == "'x' is not a working tree"

    def test_strips_fatal_case_insensitively(self):
        assert clean_git_error("FATAL:   something broke  \n") == "something broke"

    def test_already_locked(self):
        assert clean_git_error("fatal: '/w/a' is already locked, reason: wip") == "Worktree is already locked"

    def test_not_locked(self):
        assert clean_git_error("fatal: '/w/a' is not locked") == "Worktree is not locked"

    def test_passthrough(self):
        assert clean_git_error("error: something else") == "error: something else"

    def test_empty(self):
        assert clean_git_error("") == ""


@pytest.fixture
def repository(repo_context, fake_runner):
    return WorktreeRepository(repo_context, fake_runner)


class TestWorktreeCommands:
    """Test the git commands issued by WorktreeRepository."""

    def test_list_runs_porcelain_in_repo_root(self, repository, fake_runner):
        fake_runner.respond(["git", "worktree", "list", "--porcelain"], stdout=MAIN_RECORD)
        worktrees = repository.list()
        assert len(worktrees) == 1
        assert fake_runner.cwds[-1] == "/work/myrepo"

    def test_list_failure_raises(self, repository, fake_runner):
        fake_runner.respond(["git", "worktree", "list", "--porcelain"], stderr="fatal: boom", exit_code=128)
        with pytest.raises(CommandError, match="fatal: boom"):
            repository.list()

    def test_create_uses_sibling_path(self, repository, fake_runner):
        created = repository.create(42, "Add Feature")
        assert created.branch == "issue-42-add-feature"
        assert created.path == "/work/myrepo-issue-42-add-feature"
        assert fake_runner.called(
            "git", "worktree", "add", "-b", "issue-42-add-feature",
            "/work/myrepo-issue-42-add-feature", "main",
        )

    def test_create_custom_with_base_branch(self, repository, fake_runner):
        created = repository.create_custom("spike", "develop")
        assert created == ("/work/myrepo-spike", "spike")
        assert fake_runner.called("git", "worktree", "add", "-b", "spike", "/work/myrepo-spike", "develop")

    def test_create_collision_raises_command_error(self, repository, fake_runner):
        fake_runner.respond(
            ["git", "worktree", "add", "-b", "spike", "/work/myrepo-spike", "main"],
            stderr="fatal: a branch named 'spike' already exists", exit_code=128,
        )
        with pytest.raises(CommandError, match="already exists"):
            repository.create_custom("spike")

    def test_remove_forces(self, repository, fake_runner):
        repository.remove("/work/myrepo-spike")
        assert fake_runner.called("git", "worktree", "remove", "/work/myrepo-spike", "--force")

    def test_lock_with_reason(self, repository, fake_runner):
        repository.lock("/w/a", "wip")
        assert fake_runner.called("git", "worktree", "lock", "/w/a", "--reason", "wip")

    def test_lock_without_reason(self, repository, fake_runner):
        repository.lock("/w/a")
        assert fake_runner.called("git", "worktree", "lock", "/w/a")

    def test_lock_already_locked(self, repository, fake_runner):
        fake_runner.respond(
            ["git", "worktree", "lock", "/w/a"],
            stderr="fatal: '/w/a' is already locked", exit_code=128,
        )
        with pytest.raises(GitOperationError) as exc_info:
            repository.lock("/w/a")
        assert str(exc_info.value) == "Worktree is already locked"
        assert exc_info.value.operation == "lock"

    def test_unlock_not_locked(self, repository, fake_runner):
        fake_runner.respond(
            ["git", "worktree", "unlock", "/w/a"],
            stderr="fatal: '/w/a' is not locked", exit_code=128,
        )
        with pytest.raises(GitOperationError, match="^Worktree is not locked$"):
            repository.unlock("/w/a")

    def test_unlock_other_error_is_cleaned(self, repository, fake_runner):
        fake_runner.respond(
            ["git", "worktree", "unlock", "/w/a"],
            stderr="fatal: '/w/a' is not a working tree\n", exit_code=128,
        )
        with pytest.raises(GitOperationError, match="^'/w/a' is not a working tree$"):
            repository.unlock("/w/a")

    def test_move_repair_prune(self, repository, fake_runner):
        repository.move("/w/a", "/w/b")
        repository.repair()
        repository.repair("/w/b")
        repository.prune()
        assert fake_runner.calls == [
            ("git", "worktree", "move", "/w/a", "/w/b"),
            ("git", "worktree", "repair"),
            ("git", "worktree", "repair", "/w/b"),
            ("git", "worktree", "prune"),
        ]

    def test_branch_deletion_flags(self, repository, fake_runner):
        repository.delete_branch("old")
        repository.force_delete_branch("older")
        assert fake_runner.called("git", "branch", "-d", "old")
        assert fake_runner.called("git", "branch", "-D", "older")

    def test_current_branch(self, repository, fake_runner):
        fake_runner.respond(["git", "branch", "--show-current"], stdout="main\n")
        assert repository.get_current_branch() == "main"

    def test_has_uncommitted_changes_runs_in_worktree(self, repository, fake_runner):
        fake_runner.respond(["git", "status", "--porcelain"], stdout=" M file.txt\n")
        assert repository.has_uncommitted_changes("/w/a") is True
        assert fake_runner.cwds[-1] == "/w/a"

    def test_no_uncommitted_changes(self, repository, fake_runner):
        fake_runner.respond(["git", "status", "--porcelain"], stdout="\n")
        assert repository.has_uncommitted_changes("/w/a") is False


class TestMergeStatus:
    """Test merge detection with scripted git output."""

    def test_missing_branch_is_not_merged(self, repository, fake_runner):
        fake_runner.respond(["git", "rev-parse", "--verify", "ghost"], exit_code=128)
        assert repository.merge_status("ghost") is MergeStatus.MISSING
        assert repository.is_branch_merged("ghost") is False
        assert not fake_runner.called("git", "branch", "--merged", "main")

    def test_merged_branch_with_markers(self, repository, fake_runner):
        fake_runner.respond(["git", "branch", "--merged", "main"], stdout="* main\n+ feature\n  other\n")
        assert repository.is_branch_merged("feature") is True
        assert repository.is_branch_merged("main") is True

    def test_unmerged_branch(self, repository, fake_runner):
        fake_runner.respond(["git", "branch", "--merged", "main"], stdout="* main\n  feature-longer\n")
        assert repository.merge_status("feature") is MergeStatus.UNMERGED

    def test_listing_failure_is_not_merged(self, repository, fake_runner):
        fake_runner.respond(["git", "branch", "--merged", "main"], stderr="fatal: bad", exit_code=129)
        assert repository.merge_status("feature") is MergeStatus.UNKNOWN
        assert repository.is_branch_merged("feature") is False


class TestDefaultBranch:
    """Test default branch detection fallbacks."""

    def test_from_origin_head(self, repository, fake_runner):
        fake_runner.respond(
            ["git", "symbolic-ref", "refs/remotes/origin/HEAD"], stdout="refs/remotes/origin/trunk\n"
        )
        assert repository.get_default_branch() == "trunk"

    def test_falls_back_to_local_main(self, repository, fake_runner):
        fake_runner.respond(["git", "symbolic-ref", "refs/remotes/origin/HEAD"], exit_code=128)
        assert repository.get_default_branch() == "main"

    def test_falls_back_to_master(self, repository, fake_runner):
        fake_runner.respond(["git", "symbolic-ref", "refs/remotes/origin/HEAD"], exit_code=128)
        fake_runner.respond(["git", "rev-parse", "--verify", "main"], exit_code=128)
        assert repository.get_default_branch() == "master"

    def test_last_resort_warns(self, repository, fake_runner, caplog):
        fake_runner.respond(["git", "symbolic-ref", "refs/remotes/origin/HEAD"], exit_code=128)
        fake_runner.respond(["git", "rev-parse", "--verify", "main"], exit_code=128)
        fake_runner.respond(["git", "rev-parse", "--verify", "master"], exit_code=128)
        with caplog.at_level("WARNING"):
            assert repository.get_default_branch() == "main"
        assert "assuming 'main'" in caplog.text


class TestWorktreeRepositoryIntegration:
    """Exercise WorktreeRepository against a real repository."""

    @pytest.fixture
    def real_repository(self, git_repo_with_branches):
        runner = ProcessRunner()
        context = RepoContext.discover(runner, cwd=git_repo_with_branches.working_dir)
        return WorktreeRepository(context, runner)

    def test_discover_finds_root(self, real_repository, git_repo_with_branches):
        assert real_repository.context.root == Path(git_repo_with_branches.working_dir).resolve()
        assert real_repository.context.name == "test_repo"

    def test_create_list_remove(self, real_repository):
        created = real_repository.create(42, "Add feature")
        try:
            assert Path(created.path).is_dir()
            assert Path(created.path).name == "test_repo-issue-42-add-feature"

            worktrees = real_repository.list()
            assert [wt.branch for wt in worktrees] == ["main", "issue-42-add-feature"]
            assert worktrees[1].issue_number == 42
            assert worktrees[1].commit
        finally:
            real_repository.remove(created.path)

        assert not Path(created.path).exists()
        assert [wt.branch for wt in real_repository.list()] == ["main"]

    def test_lock_and_unlock(self, real_repository):
        created = real_repository.create_custom("locking")
        try:
            real_repository.lock(created.path, "Work in progress")
            locked = [wt for wt in real_repository.list() if wt.branch == "locking"][0]
            assert locked.is_locked is True
            assert locked.lock_reason == "Work in progress"

            with pytest.raises(GitOperationError, match="^Worktree is already locked$"):
                real_repository.lock(created.path)

            real_repository.unlock(created.path)
            with pytest.raises(GitOperationError, match="^Worktree is not locked$"):
                real_repository.unlock(created.path)
        finally:
            real_repository.remove(created.path)

    def test_uncommitted_changes(self, real_repository):
        created = real_repository.create_custom("dirty")
        try:
            assert real_repository.has_uncommitted_changes(created.path) is False
            (Path(created.path) / "new.txt").write_text("x\n")
            assert real_repository.has_uncommitted_changes(created.path) is True
        finally:
            real_repository.remove(created.path)

    def test_merge_status_real(self, real_repository):
        assert real_repository.is_branch_merged("feature/merged") is True
        assert real_repository.is_branch_merged("feature/unmerged") is False
        assert real_repository.merge_status("no-such-branch") is MergeStatus.MISSING

    def test_default_and_current_branch(self, real_repository):
        assert real_repository.get_default_branch() == "main"
        assert real_repository.get_current_branch() == "main"

    def test_delete_branch(self, real_repository, git_repo_with_branches):
        real_repository.delete_branch("feature/merged")
        with pytest.raises(CommandError):
            real_repository.delete_branch("feature/unmerged")
        real_repository.force_delete_branch("feature/unmerged")
        assert [head.name for head in git_repo_with_branches.heads] == ["main"]

    def test_duplicate_branch_fails(self, real_repository):
        created = real_repository.create_custom("twice")
        try:
            with pytest.raises(CommandError):
                real_repository.create_custom("twice")
        finally:
            real_repository.remove(created.path)

    def test_summon_keeps_worktree_when_terminal_fails(self, real_repository, config, fake_runner):
        config.setup_commands = ["true"]
        fake_runner.handler = lambda argv: CommandResult("", "iTerm got an error", 1)
        orchestrator = WorktreeOrchestrator(
            config,
            real_repository,
            GitHubService(real_repository.context, fake_runner),
            SetupService(),
            ITermAdapter(fake_runner),
        )

        result = orchestrator.summon_issue(Issue(number=42, title="Add feature"))
        try:
            assert result.success is False
            assert result.failed_step is WorkflowStep.TERMINAL
            assert Path(result.path).is_dir()
            assert "issue-42-add-feature" in [wt.branch for wt in real_repository.list()]
        finally:
            real_repository.remove(result.path)
