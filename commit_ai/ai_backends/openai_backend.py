"""
OpenAI chat-completions backend with structured (JSON schema) output.
"""

import asyncio
import time
import aiohttp
from typing import Dict, Any, List, Optional
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from .base import AIBackend, AIResponse, GenerationError
from ..utils.prompts import PromptBuilder, CANDIDATE_COUNT


class CommitSuggestions(BaseModel):
    """Shape the service is asked to answer with."""

    messages: List[str] = Field(min_length=CANDIDATE_COUNT, max_length=CANDIDATE_COUNT)


class OpenAIBackend(AIBackend):
    """OpenAI-compatible chat-completions backend."""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str,
        model: str,
        timeout: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        super().__init__(api_url, model, timeout)
        self.api_key = api_key
        self.temperature = temperature
        self.prompt_builder = PromptBuilder()

    async def generate(self, diff: str) -> List[str]:
        """Ask the service for candidate messages and validate the answer."""
        prompt = self.prompt_builder.build_commit_prompt(diff)

        start_time = time.time()
        response = await self.call_api(prompt)
        response.response_time = time.time() - start_time
        self._log_response(response)

        candidates = self._parse_candidates(response.content)
        logger.debug(f"Generated {len(candidates)} candidate messages")
        return candidates

    async def call_api(self, prompt: str) -> AIResponse:
        """Call the chat-completions endpoint."""
        if not self.api_key:
            raise GenerationError(
                "No OpenAI API token configured. Run 'commit-ai set token' first."
            )

        self._log_request(prompt)

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": self.prompt_builder.build_response_format(),
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature

        data = await self._post("/chat/completions", payload)

        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError):
            raise GenerationError("OpenAI response contained no choices")

        if not isinstance(message, dict):
            raise GenerationError("OpenAI response contained no message")

        if message.get("refusal"):
            raise GenerationError(f"OpenAI refused the request: {message['refusal']}")

        content = message.get("content")
        if not content or not isinstance(content, str):
            raise GenerationError("OpenAI response contained no message content")

        usage = data.get("usage")
        return AIResponse(
            content=content,
            model=data.get("model", self.model),
            tokens_used=usage.get("total_tokens") if isinstance(usage, dict) else None,
            backend_type=self.backend_type,
            raw_response=data
        )

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded JSON body."""
        headers = {"Authorization": f"Bearer {self.api_key}"}

        async with aiohttp.ClientSession() as session:
            try:
                async with session.post(
                    f"{self.api_url}{path}",
                    json=payload,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status >= 400:
                        detail = await self._error_detail(response)
                        logger.error(f"OpenAI API error {response.status}: {detail}")
                        raise GenerationError(f"OpenAI API returned HTTP {response.status}: {detail}")

                    try:
                        return await response.json()
                    except (aiohttp.ContentTypeError, ValueError) as e:
                        logger.error(f"OpenAI API returned a malformed body: {e}")
                        raise GenerationError(f"OpenAI API returned a malformed response body: {e}")

            except aiohttp.ClientError as e:
                logger.error(f"OpenAI API error: {e}")
                raise GenerationError(f"Could not reach OpenAI API: {e}")
            except asyncio.TimeoutError:
                logger.error(f"OpenAI API timeout after {self.timeout}s")
                raise GenerationError(f"OpenAI API timed out after {self.timeout}s")

    @staticmethod
    async def _error_detail(response: aiohttp.ClientResponse) -> str:
        """Pull the error message out of a failed response."""
        try:
            body = await response.json()
            return body.get("error", {}).get("message") or response.reason or "unknown error"
        except (aiohttp.ContentTypeError, ValueError, AttributeError):
            return response.reason or "unknown error"

    def _parse_candidates(self, content: str) -> List[str]:
        """Validate the structured answer into the candidate list."""
        try:
            suggestions = CommitSuggestions.model_validate_json(content)
        except ValidationError as e:
            logger.debug(f"Rejected response content: {content!r}")
            raise GenerationError(f"OpenAI response did not match the expected format: {e}")

        return suggestions.messages
