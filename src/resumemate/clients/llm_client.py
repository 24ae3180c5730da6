"""Claude API wrapper with async support.

Retries are owned by the gateway; this client makes exactly one call per
``generate`` so attempt counts and circuit accounting stay accurate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic

from resumemate.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client."""

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        kwargs: dict = {"max_retries": 0}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        temperature: float = 0.0,
        max_tokens: int = 8000,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        logger.debug("LLM call: model=%s", model)
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        try:
            message = await self.client.messages.create(**kwargs)
        except anthropic.APIError:
            logger.error("LLM call failed", exc_info=True)
            raise

        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))
        return LLMResponse(
            text=message.content[0].text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def generate_json(
        self,
        prompt: str,
        system: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        temperature: float = 0.0,
        max_tokens: int = 8000,
    ) -> dict:
        """Send a prompt and parse a JSON object from the response."""
        response = await self.generate(
            prompt=prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return extract_json_object(response.text)

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
