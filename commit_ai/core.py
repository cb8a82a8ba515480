"""
Core commit-ai engine that sequences the commit workflow.
"""

from enum import Enum
from typing import List, Optional
from pathlib import Path
from loguru import logger

from .config.settings import Settings
from .config.credentials import CredentialStore
from .git_ops.repository import GitRepository, ExternalCommandError
from .ai_backends.base import AIBackend, GenerationError
from .ai_backends.openai_backend import OpenAIBackend
from .ui.console import CommitAIConsole


class WorkflowState(str, Enum):
    """States of a `start` run."""

    IDLE = "idle"
    DIFF_FETCHED = "diff_fetched"
    NO_CHANGES = "no_changes"
    MESSAGES_GENERATED = "messages_generated"
    MESSAGE_CHOSEN = "message_chosen"
    COMMITTED = "committed"
    PUSHED = "pushed"
    PUSH_SKIPPED = "push_skipped"
    PUSH_FAILED = "push_failed"
    FAILED = "failed"

    @property
    def is_failure(self) -> bool:
        return self is WorkflowState.FAILED


class CommitAI:
    """Core commit-ai application engine."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        repo_path: Optional[Path] = None,
        git_repo: Optional[GitRepository] = None,
        ai_backend: Optional[AIBackend] = None,
        console: Optional[CommitAIConsole] = None,
    ):
        """Wire up the repository, the AI backend and the console."""
        self.settings = settings or Settings()
        self.git_repo = git_repo or GitRepository(repo_path)
        self.console = console or CommitAIConsole(self.settings)
        self.ai_backend = ai_backend or self._create_backend()
        self.state = WorkflowState.IDLE

        logger.info("commit-ai initialized")

    def _create_backend(self) -> AIBackend:
        """Build the OpenAI backend from settings and the stored credential."""
        api_key = CredentialStore(self.settings.credentials_file).load()
        return OpenAIBackend(
            api_key=api_key,
            api_url=self.settings.ai.api_url,
            model=self.settings.ai.model,
            timeout=self.settings.ai.timeout,
            temperature=self.settings.ai.temperature,
        )

    def _transition(self, state: WorkflowState) -> WorkflowState:
        logger.debug(f"Workflow state: {self.state.value} -> {state.value}")
        self.state = state
        return state

    async def run_start(self, auto: bool = False) -> WorkflowState:
        """Run the commit workflow and return the terminal state."""
        logger.info(f"Running commit workflow (auto={auto})")
        self.state = WorkflowState.IDLE

        try:
            diff = self.git_repo.get_diff()
        except ExternalCommandError as e:
            self.console.print_error(f"Error getting git diff: {e}")
            return self._transition(WorkflowState.FAILED)
        self._transition(WorkflowState.DIFF_FETCHED)

        if not diff.strip():
            self.console.print_warning("No changes to commit.")
            return self._transition(WorkflowState.NO_CHANGES)

        try:
            with self.console.show_progress_spinner("Generating commit messages"):
                candidates = await self.ai_backend.generate(diff)
        except GenerationError as e:
            self.console.print_error(f"Error generating commit messages: {e}")
            return self._transition(WorkflowState.FAILED)
        self._transition(WorkflowState.MESSAGES_GENERATED)

        message = self._choose_message(candidates, auto)
        self._transition(WorkflowState.MESSAGE_CHOSEN)

        try:
            with self.console.show_progress_spinner("Creating commit"):
                commit_hash = self.git_repo.stage_and_commit(message)
        except ExternalCommandError as e:
            self.console.print_error(f"Error committing changes: {e}")
            return self._transition(WorkflowState.FAILED)
        self._transition(WorkflowState.COMMITTED)
        self.console.print_success(f'Committed {commit_hash} with message: "{message}"')

        return self._push_commit()

    def _choose_message(self, candidates: List[str], auto: bool) -> str:
        """Pick the first candidate in auto mode, otherwise let the user choose."""
        if auto:
            message = candidates[0]
            self.console.print_info(f'Auto-selected commit message: "{message}"')
            return message

        message = self.console.choose_message(candidates)
        self.console.show_commit_message_preview(message)
        return message

    def _push_commit(self) -> WorkflowState:
        """Offer to push; a failed push is reported but does not fail the run."""
        if not self.console.confirm_push():
            logger.info("Push declined by user")
            return self._transition(WorkflowState.PUSH_SKIPPED)

        try:
            with self.console.show_progress_spinner("Pushing to remote"):
                self.git_repo.push()
        except ExternalCommandError as e:
            self.console.print_error(f"Error pushing changes: {e}")
            logger.error(f"Push failed: {e}")
            return self._transition(WorkflowState.PUSH_FAILED)

        self.console.print_success("Changes pushed successfully!")
        return self._transition(WorkflowState.PUSHED)
