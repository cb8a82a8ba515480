"""
commit-ai - AI-drafted git commit messages.

A small CLI that sends your working-tree diff to an OpenAI model, lets you
pick one of the suggested commit messages, commits, and optionally pushes.
"""

__version__ = "1.0.0"

from commit_ai.core import CommitAI, WorkflowState
from commit_ai.config.settings import Settings

__all__ = ["CommitAI", "WorkflowState", "Settings"]
