"""
Exceptions shared across commit-ai.
"""


class CommitAIError(Exception):
    """Base class for errors commit-ai reports to the user."""
    pass
