"""Anthropic Messages API answer generator (``anthropic`` extra)."""

from __future__ import annotations

import logging
from typing import Any

from pagerag.errors import GenerationError
from pagerag.llm.base import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicLLMProvider(LLMProvider):
    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        client: Any | None = None,
    ):
        if client is None:
            try:
                import anthropic
            except ImportError as exc:
                raise ImportError(
                    "anthropic package required: pip install page-aware-rag[anthropic]"
                ) from exc
            client = anthropic.Anthropic(api_key=api_key)

        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client

    def _complete(self, prompt: str, system: str | None) -> str:
        request: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request["system"] = system

        message = self._client.messages.create(**request)
        answer = "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
        if not answer and getattr(message, "stop_reason", None) == "refusal":
            raise GenerationError(f"{self.model} declined to answer")

        usage = getattr(message, "usage", None)
        if usage is not None:
            logger.debug(
                "Anthropic usage: %s input / %s output tokens",
                usage.input_tokens, usage.output_tokens,
            )
        return answer
