"""Base class for answer generators.

Subclasses implement ``_complete``. ``generate`` is what the query
pipeline calls: it turns any SDK or transport failure into
``GenerationError`` carrying the original exception.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from pagerag.errors import GenerationError

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Answers a question from page-labelled document context."""

    model: str = "unknown"

    def generate(self, prompt: str, system: str | None = None) -> str:
        """Generate an answer for a prompt.

        Args:
            prompt: Question plus labelled context blocks.
            system: Optional system prompt.

        Raises:
            GenerationError: The model call failed.
        """
        try:
            answer = self._complete(prompt, system)
        except GenerationError:
            raise
        except Exception as exc:
            raise GenerationError(
                f"AI response generation failed ({self.provider_name()}, {self.model}): {exc}",
                cause=exc,
            ) from exc

        logger.debug("%s answered with %d chars", self.provider_name(), len(answer))
        return answer

    @abstractmethod
    def _complete(self, prompt: str, system: str | None) -> str:
        """Call the model and return its text."""

    @classmethod
    def provider_name(cls) -> str:
        return cls.__name__
