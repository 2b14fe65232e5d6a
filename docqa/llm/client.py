"""Reasoning service client with OpenAI-compatible gateway integration.

Security: Reads API key from settings only, never hardcoded.
Provides a deterministic stub when no key is present for testing.
"""

import json
import logging
from typing import Protocol

import openai
from openai import AsyncOpenAI

from docqa.config import Settings, get_settings
from docqa.errors import SynthesisError
from docqa.llm.prompts import build_user_message

logger = logging.getLogger(__name__)


class ReasoningClient(Protocol):
    """Protocol for reasoning service implementations."""

    async def complete(self, *, instruction: str, context: str, question: str) -> str:
        """Send one prompt and return the raw response text.

        Args:
            instruction: Fixed system instruction
            context: Assembled document context (may be empty)
            question: User question

        Returns:
            Raw response body, JSON or free text

        Raises:
            SynthesisError: If the service is unreachable or rejects the request
        """
        ...


class DeterministicStubClient:
    """Deterministic stub client for testing (no API key required)."""

    async def complete(self, *, instruction: str, context: str, question: str) -> str:
        """Generate deterministic stub answer."""
        if context:
            first_line = context.strip().splitlines()[0][:200]
            payload = {
                "answer": f"Stub answer for: {question}",
                "evidence": [first_line],
                "confidence_score": 50,
                "reasoning": "This is a stub response generated without a reasoning service.",
            }
        else:
            payload = {
                "answer": "The document does not contain passages matching the question.",
                "evidence": [],
                "confidence_score": 0,
                "reasoning": "No matching context was supplied to the stub client.",
            }
        return json.dumps(payload)


class OpenAIReasoningClient:
    """OpenAI-compatible chat completions client."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        model: str = "google/gemini-2.5-flash",
        timeout_seconds: float = 30.0,
    ):
        """Initialize client.

        Args:
            api_key: Gateway API key (read from settings)
            base_url: Gateway base URL; None means the OpenAI default
            model: Model name to request
            timeout_seconds: Per-request timeout; retries are disabled
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model

    async def complete(self, *, instruction: str, context: str, question: str) -> str:
        """Call the chat completions endpoint and return the message content."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instruction},
                    {"role": "user", "content": build_user_message(context, question)},
                ],
            )
        except openai.APITimeoutError as e:
            logger.error(f"Reasoning service timed out: {e}")
            raise SynthesisError("Reasoning service timed out") from e
        except openai.APIStatusError as e:
            logger.error(f"Reasoning service returned status {e.status_code}: {e.message}")
            raise SynthesisError(f"Reasoning service returned status {e.status_code}") from e
        except openai.APIConnectionError as e:
            logger.error(f"Reasoning service unreachable: {e}")
            raise SynthesisError("Reasoning service unreachable") from e
        except openai.APIError as e:
            logger.error(f"Reasoning service call failed: {type(e).__name__}: {e}")
            raise SynthesisError(f"Reasoning service call failed: {type(e).__name__}") from e

        if not response.choices:
            raise SynthesisError("Reasoning service returned no choices")

        return response.choices[0].message.content or ""


def get_reasoning_client(settings: Settings | None = None) -> ReasoningClient:
    """Factory function to get appropriate reasoning client based on config.

    Returns:
        OpenAIReasoningClient if API key is configured, DeterministicStubClient otherwise
    """
    settings = settings or get_settings()
    api_key = settings.llm_api_key

    if api_key and api_key.get_secret_value():
        logger.info(f"Using reasoning gateway {settings.llm_base_url} model={settings.llm_model}")
        return OpenAIReasoningClient(
            api_key=api_key.get_secret_value(),
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            timeout_seconds=settings.llm_timeout_seconds,
        )

    logger.warning("No reasoning API key configured, using deterministic stub client")
    return DeterministicStubClient()
