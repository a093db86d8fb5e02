"""Anthropic-backed reasoning service used by the analysis steps."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import anthropic

from nav_sentinel.config import Settings
from nav_sentinel.domain.repositories import ReasoningService

logger = logging.getLogger(__name__)

ReasoningErrorCode = Literal["AUTH", "RATE_LIMIT", "NETWORK", "UPSTREAM", "BAD_RESPONSE"]


@dataclass
class ReasoningServiceError(Exception):
    code: ReasoningErrorCode
    message: str
    status: int | None = None

    def __str__(self) -> str:
        return self.message


class AnthropicReasoningService(ReasoningService):
    def __init__(
        self,
        api_key: str,
        model: str,
        timeout_seconds: float = 30.0,
        max_tokens: int = 1500,
        temperature: float = 0.2,
    ) -> None:
        self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout_seconds)
        self.model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        logger.info("Initialized AnthropicReasoningService (model=%s)", model)

    def complete(self, prompt: str, system: str | None = None) -> str:
        kwargs: dict = {
            "model": self.model,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        try:
            response = self._client.messages.create(**kwargs)
        except anthropic.AuthenticationError as error:
            raise ReasoningServiceError("AUTH", "Anthropic authentication failed.", error.status_code) from error
        except anthropic.RateLimitError as error:
            raise ReasoningServiceError("RATE_LIMIT", "Anthropic rate limit reached.", error.status_code) from error
        except anthropic.APIConnectionError as error:
            raise ReasoningServiceError("NETWORK", f"Anthropic request failed: {error}") from error
        except anthropic.APIStatusError as error:
            raise ReasoningServiceError(
                "UPSTREAM",
                f"Anthropic request failed with status {error.status_code}.",
                error.status_code,
            ) from error

        texts = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        if not texts:
            raise ReasoningServiceError("BAD_RESPONSE", "Anthropic returned no text content.")
        return "\n".join(texts).strip()


def build_reasoning_service(settings: Settings) -> ReasoningService | None:
    """Return a configured service, or None when no API key is set."""
    if not settings.reasoning_enabled:
        logger.warning("Reasoning service not configured; analysis will use fallback results")
        return None
    return AnthropicReasoningService(
        api_key=settings.reasoning_api_key or "",
        model=settings.reasoning_model,
        timeout_seconds=settings.reasoning_timeout_seconds,
        max_tokens=settings.reasoning_max_tokens,
    )
