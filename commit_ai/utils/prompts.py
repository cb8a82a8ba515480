"""
Prompt and response-format templates for commit message generation.
"""

from typing import Dict, Any


CANDIDATE_COUNT = 3


class PromptBuilder:
    """Build the generation prompt and the JSON schema the answer must follow."""

    def __init__(self, candidate_count: int = CANDIDATE_COUNT):
        self.candidate_count = candidate_count

    def build_commit_prompt(self, diff: str) -> str:
        """Build the user prompt that embeds the working-tree diff."""
        count = {3: "three"}.get(self.candidate_count, str(self.candidate_count))
        return f"Generate an array of {count} git commit messages for the following changes:\n{diff}"

    def build_response_format(self) -> Dict[str, Any]:
        """Structured-output response format: an object holding the message list.

        The schema only constrains the shape; the candidate count is
        enforced when the answer is validated.
        """
        return {
            "type": "json_schema",
            "json_schema": {
                "name": "prompt-response",
                "strict": True,
                "schema": {
                    "type": "object",
                    "properties": {
                        "messages": {
                            "type": "array",
                            "items": {"type": "string"},
                        }
                    },
                    "required": ["messages"],
                    "additionalProperties": False,
                },
            },
        }
