"""
Git repository operations used by the commit workflow.
"""

from pathlib import Path
from typing import Optional
from git import Repo, InvalidGitRepositoryError, NoSuchPathError
from git.exc import GitError
from loguru import logger

from ..exceptions import CommitAIError


class GitRepository:
    """Thin interface over the git CLI for diff, commit and push."""

    def __init__(self, repo_path: Optional[Path] = None):
        """Initialize Git repository."""
        self.repo_path = repo_path or Path.cwd()
        self.repo: Optional[Repo] = None
        self._initialize_repo()

    def _initialize_repo(self) -> None:
        """Initialize the Git repository object."""
        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
            logger.debug(f"Initialized Git repository at {self.repo.working_dir}")
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise ExternalCommandError(f"Not a Git repository: {self.repo_path}")
        except GitError as e:
            raise ExternalCommandError(f"Git is not available: {e}")

    @property
    def current_branch(self) -> Optional[str]:
        """Name of the checked-out branch, or None when HEAD is detached."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            return None

    def get_diff(self) -> str:
        """Return `git diff` output for the working tree."""
        try:
            diff = self.repo.git.diff()
        except GitError as e:
            raise ExternalCommandError(f"Failed to get git diff: {e}")

        logger.debug(f"git diff returned {len(diff)} characters")
        return diff

    def stage_and_commit(self, message: str) -> str:
        """Stage every working-tree change and commit it with the given message."""
        try:
            self.repo.git.add("--all")
            logger.info("Staged all changes")
        except GitError as e:
            raise ExternalCommandError(f"Failed to stage changes: {e}")

        try:
            # Commit through the CLI so hooks run
            self.repo.git.commit("-m", message)
        except GitError as e:
            raise ExternalCommandError(f"Failed to create commit: {e}")

        commit_hash = self.repo.head.commit.hexsha
        logger.info(f"Created commit {commit_hash[:8]}: {message}")
        return commit_hash[:8]

    def push(self) -> None:
        """Push the current branch to its configured remote."""
        try:
            self.repo.git.push()
            logger.info(f"Pushed {self.current_branch or 'HEAD'}")
        except GitError as e:
            raise ExternalCommandError(f"Failed to push: {e}")


class ExternalCommandError(CommitAIError):
    """A git command failed or git could not be run."""
    pass
