"""Tests for the commit workflow orchestration."""

import asyncio
from typing import List

import pytest

from commit_ai.ai_backends.base import AIBackend, AIResponse, GenerationError
from commit_ai.ai_backends.openai_backend import OpenAIBackend
from commit_ai.core import CommitAI, WorkflowState
from commit_ai.git_ops.repository import ExternalCommandError


CANDIDATES = ["fix: add foo", "feat: foo", "chore: foo"]


class FakeGitRepository:
    """Records calls instead of running git."""

    def __init__(self, diff="+foo", diff_error=None, commit_error=None, push_error=None):
        self.diff = diff
        self.diff_error = diff_error
        self.commit_error = commit_error
        self.push_error = push_error
        self.calls = []
        self.current_branch = "main"

    def get_diff(self) -> str:
        self.calls.append("get_diff")
        if self.diff_error:
            raise self.diff_error
        return self.diff

    def stage_and_commit(self, message: str) -> str:
        self.calls.append(("stage_and_commit", message))
        if self.commit_error:
            raise self.commit_error
        return "abc12345"

    def push(self) -> None:
        self.calls.append("push")
        if self.push_error:
            raise self.push_error


class FakeBackend(AIBackend):

    def __init__(self, candidates=None, error=None):
        super().__init__("https://api.example.com/v1", "test-model")
        self.candidates = candidates or list(CANDIDATES)
        self.error = error
        self.diffs = []

    async def call_api(self, prompt: str) -> AIResponse:
        raise AssertionError("call_api is not used by these tests")

    async def generate(self, diff: str) -> List[str]:
        self.diffs.append(diff)
        if self.error:
            raise self.error
        return self.candidates


@pytest.fixture
def prompts(ui, monkeypatch):
    """Script the interactive answers and record which prompts were shown."""
    calls = {"choose_message": [], "confirm_push": 0}
    answers = {"choice": 1, "push": True}

    def choose_message(candidates):
        calls["choose_message"].append(list(candidates))
        return candidates[answers["choice"]]

    def confirm_push():
        calls["confirm_push"] += 1
        return answers["push"]

    monkeypatch.setattr(ui, "choose_message", choose_message)
    monkeypatch.setattr(ui, "confirm_push", confirm_push)
    return calls, answers


def make_app(settings, ui, git_repo=None, backend=None):
    return CommitAI(
        settings,
        git_repo=git_repo or FakeGitRepository(),
        ai_backend=backend or FakeBackend(),
        console=ui,
    )


class TestRunStart:

    def test_auto_commits_first_candidate_then_asks_to_push(self, settings, ui, prompts, output):
        calls, _ = prompts
        git_repo = FakeGitRepository(diff="+foo")
        backend = FakeBackend()

        state = asyncio.run(make_app(settings, ui, git_repo, backend).run_start(auto=True))

        assert state is WorkflowState.PUSHED
        assert backend.diffs == ["+foo"]
        assert git_repo.calls == ["get_diff", ("stage_and_commit", "fix: add foo"), "push"]
        assert calls["choose_message"] == []
        assert calls["confirm_push"] == 1
        assert 'Auto-selected commit message: "fix: add foo"' in output.getvalue()

    def test_interactive_mode_uses_selected_candidate(self, settings, ui, prompts):
        calls, answers = prompts
        answers["choice"] = 2
        git_repo = FakeGitRepository()

        state = asyncio.run(make_app(settings, ui, git_repo).run_start(auto=False))

        assert state is WorkflowState.PUSHED
        assert calls["choose_message"] == [CANDIDATES]
        assert ("stage_and_commit", "chore: foo") in git_repo.calls

    @pytest.mark.parametrize("diff", ["", "   \n\t\n"])
    def test_empty_diff_stops_after_fetch(self, settings, ui, prompts, output, diff):
        calls, _ = prompts
        git_repo = FakeGitRepository(diff=diff)
        backend = FakeBackend()

        state = asyncio.run(make_app(settings, ui, git_repo, backend).run_start(auto=False))

        assert state is WorkflowState.NO_CHANGES
        assert not state.is_failure
        assert git_repo.calls == ["get_diff"]
        assert backend.diffs == []
        assert calls == {"choose_message": [], "confirm_push": 0}
        assert "No changes to commit." in output.getvalue()

    def test_diff_failure_fails_run(self, settings, ui, prompts, output):
        git_repo = FakeGitRepository(diff_error=ExternalCommandError("git not found"))
        backend = FakeBackend()

        state = asyncio.run(make_app(settings, ui, git_repo, backend).run_start(auto=True))

        assert state is WorkflowState.FAILED
        assert backend.diffs == []
        assert "git not found" in output.getvalue()

    def test_generation_failure_fails_run_without_commit(self, settings, ui, prompts, output):
        calls, _ = prompts
        git_repo = FakeGitRepository()
        backend = FakeBackend(error=GenerationError("schema violation"))

        state = asyncio.run(make_app(settings, ui, git_repo, backend).run_start(auto=False))

        assert state is WorkflowState.FAILED
        assert git_repo.calls == ["get_diff"]
        assert calls == {"choose_message": [], "confirm_push": 0}
        assert "schema violation" in output.getvalue()

    def test_generate_called_once_per_run(self, settings, ui, prompts):
        backend = FakeBackend()
        app = make_app(settings, ui, backend=backend)

        asyncio.run(app.run_start(auto=True))

        assert len(backend.diffs) == 1

    def test_commit_failure_prevents_push_prompt(self, settings, ui, prompts, output):
        calls, _ = prompts
        git_repo = FakeGitRepository(commit_error=ExternalCommandError("hook rejected"))

        state = asyncio.run(make_app(settings, ui, git_repo).run_start(auto=True))

        assert state is WorkflowState.FAILED
        assert calls["confirm_push"] == 0
        assert "push" not in git_repo.calls
        assert "hook rejected" in output.getvalue()

    def test_declined_push_is_success(self, settings, ui, prompts):
        _, answers = prompts
        answers["push"] = False
        git_repo = FakeGitRepository()

        state = asyncio.run(make_app(settings, ui, git_repo).run_start(auto=True))

        assert state is WorkflowState.PUSH_SKIPPED
        assert not state.is_failure
        assert "push" not in git_repo.calls

    def test_push_failure_is_reported_but_not_fatal(self, settings, ui, prompts, output):
        git_repo = FakeGitRepository(push_error=ExternalCommandError("rejected (non-fast-forward)"))

        state = asyncio.run(make_app(settings, ui, git_repo).run_start(auto=True))

        assert state is WorkflowState.PUSH_FAILED
        assert not state.is_failure
        assert "rejected (non-fast-forward)" in output.getvalue()

    def test_state_tracks_terminal_state(self, settings, ui, prompts):
        app = make_app(settings, ui)
        assert app.state is WorkflowState.IDLE

        state = asyncio.run(app.run_start(auto=True))

        assert app.state is state


class TestBackendWiring:

    def test_stored_credential_passed_to_backend(self, settings, ui):
        from commit_ai.config.credentials import CredentialStore

        CredentialStore(settings.credentials_file).save("sk-stored")
        app = CommitAI(settings, git_repo=FakeGitRepository(), console=ui)

        assert app.ai_backend.api_key == "sk-stored"
        assert app.ai_backend.model == settings.ai.model

    def test_no_credential_leaves_backend_without_key(self, settings, ui):
        app = CommitAI(settings, git_repo=FakeGitRepository(), console=ui)
        assert app.ai_backend.api_key is None

    def test_malformed_service_response_fails_run_without_commit(self, settings, ui, prompts, output, monkeypatch):
        calls, _ = prompts
        git_repo = FakeGitRepository()
        backend = OpenAIBackend("sk-test", "https://api.example.com/v1", "m")

        async def post(path, payload):
            return {"choices": [{"message": None}]}

        monkeypatch.setattr(backend, "_post", post)

        state = asyncio.run(make_app(settings, ui, git_repo, backend).run_start(auto=True))

        assert state is WorkflowState.FAILED
        assert git_repo.calls == ["get_diff"]
        assert calls["confirm_push"] == 0
        assert "no message" in output.getvalue()
