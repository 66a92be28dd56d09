"""OpenAI Chat Completions answer generator (``openai`` extra).

``base_url`` points it at any OpenAI-compatible server.
"""

from __future__ import annotations

import logging
from typing import Any

from pagerag.errors import GenerationError
from pagerag.llm.base import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAILLMProvider(LLMProvider):
    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        client: Any | None = None,
    ):
        if client is None:
            try:
                import openai
            except ImportError as exc:
                raise ImportError(
                    "openai package required: pip install page-aware-rag[openai]"
                ) from exc
            client = openai.OpenAI(api_key=api_key, base_url=base_url)

        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client

    def _complete(self, prompt: str, system: str | None) -> str:
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})

        completion = self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        if not completion.choices:
            raise GenerationError(f"{self.model} returned no choices")

        choice = completion.choices[0]
        if getattr(choice, "finish_reason", None) == "content_filter":
            raise GenerationError(f"{self.model} response was blocked by the content filter")

        usage = getattr(completion, "usage", None)
        if usage is not None:
            logger.debug(
                "OpenAI usage: %s prompt / %s completion tokens",
                usage.prompt_tokens, usage.completion_tokens,
            )
        return choice.message.content or ""
