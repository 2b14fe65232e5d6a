"""Tests for reasoning service client.

All tests are deterministic and do not make real network calls.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest
from pydantic import SecretStr

from docqa.analysis.synthesizer import AnswerSynthesizer
from docqa.config import PipelineConfig, Settings
from docqa.errors import SynthesisError
from docqa.llm.client import (
    DeterministicStubClient,
    OpenAIReasoningClient,
    get_reasoning_client,
)
from docqa.llm.prompts import SYSTEM_INSTRUCTION, build_user_message
from docqa.models.exchange import OutcomeKind

_REQUEST = httpx.Request("POST", "https://gateway.test/v1/chat/completions")


def _mock_response(content: str | None) -> MagicMock:
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = content
    return mock_response


def _client_with(create: AsyncMock) -> OpenAIReasoningClient:
    mock_openai_client = AsyncMock()
    mock_openai_client.chat.completions.create = create

    client = OpenAIReasoningClient(api_key="test_key", base_url="https://gateway.test/v1")
    client.client = mock_openai_client
    return client


def test_user_message_layout() -> None:
    """Test that context and question are rendered in the agreed layout."""
    assert build_user_message("Line A", "Is it covered?") == (
        "Context from document:\nLine A\n\nQuestion: Is it covered?"
    )


def test_system_instruction_names_all_fields() -> None:
    for field in ("answer", "evidence", "confidence_score", "reasoning"):
        assert f'"{field}"' in SYSTEM_INSTRUCTION


@pytest.mark.asyncio
async def test_stub_client_is_deterministic() -> None:
    """Test that DeterministicStubClient returns the same JSON every time."""
    client = DeterministicStubClient()

    first = await client.complete(
        instruction=SYSTEM_INSTRUCTION, context="Line one\nLine two", question="Q?"
    )
    second = await client.complete(
        instruction=SYSTEM_INSTRUCTION, context="Line one\nLine two", question="Q?"
    )

    assert first == second
    payload = json.loads(first)
    assert payload["evidence"] == ["Line one"]
    assert payload["confidence_score"] == 50


@pytest.mark.asyncio
async def test_stub_client_handles_empty_context() -> None:
    """Test that the stub reports missing grounding when context is empty."""
    payload = json.loads(
        await DeterministicStubClient().complete(
            instruction=SYSTEM_INSTRUCTION, context="", question="Q?"
        )
    )

    assert payload["evidence"] == []
    assert payload["confidence_score"] == 0


@pytest.mark.asyncio
async def test_openai_client_sends_system_and_user_messages() -> None:
    """Test that OpenAIReasoningClient calls the API and returns the content (mocked)."""
    create = AsyncMock(return_value=_mock_response('{"answer": "yes"}'))
    client = _client_with(create)

    raw = await client.complete(instruction="SYS", context="ctx", question="q?")

    assert raw == '{"answer": "yes"}'
    create.assert_called_once()
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "google/gemini-2.5-flash"
    assert kwargs["messages"] == [
        {"role": "system", "content": "SYS"},
        {"role": "user", "content": "Context from document:\nctx\n\nQuestion: q?"},
    ]


@pytest.mark.asyncio
async def test_openai_client_none_content_returns_empty_string() -> None:
    client = _client_with(AsyncMock(return_value=_mock_response(None)))

    assert await client.complete(instruction="SYS", context="", question="q") == ""


@pytest.mark.asyncio
async def test_openai_client_no_choices_raises() -> None:
    response = MagicMock()
    response.choices = []
    client = _client_with(AsyncMock(return_value=response))

    with pytest.raises(SynthesisError, match="no choices"):
        await client.complete(instruction="SYS", context="", question="q")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "message"),
    [
        (openai.APITimeoutError(request=_REQUEST), "timed out"),
        (openai.APIConnectionError(request=_REQUEST), "unreachable"),
        (
            openai.APIStatusError(
                "rate limited",
                response=httpx.Response(429, request=_REQUEST),
                body=None,
            ),
            "status 429",
        ),
        (
            openai.APIResponseValidationError(
                response=httpx.Response(200, request=_REQUEST),
                body=None,
            ),
            "APIResponseValidationError",
        ),
    ],
)
async def test_openai_client_maps_sdk_errors(error: Exception, message: str) -> None:
    """Test that SDK failures surface as SynthesisError."""
    client = _client_with(AsyncMock(side_effect=error))

    with pytest.raises(SynthesisError, match=message):
        await client.complete(instruction="SYS", context="ctx", question="q")


def test_openai_client_disables_sdk_retries() -> None:
    client = OpenAIReasoningClient(api_key="test_key", timeout_seconds=5.0)

    assert client.client.max_retries == 0


def test_get_reasoning_client_returns_stub_when_no_api_key() -> None:
    """Test that the factory returns the stub when no API key is configured."""
    client = get_reasoning_client(Settings(llm_api_key=None))

    assert isinstance(client, DeterministicStubClient)


def test_get_reasoning_client_returns_stub_for_blank_key() -> None:
    client = get_reasoning_client(Settings(llm_api_key=SecretStr("")))

    assert isinstance(client, DeterministicStubClient)


def test_get_reasoning_client_returns_openai_when_api_key_present() -> None:
    """Test that the factory returns the gateway client when a key is present."""
    client = get_reasoning_client(
        Settings(llm_api_key=SecretStr("test_key"), llm_model="some/model")
    )

    assert isinstance(client, OpenAIReasoningClient)
    assert client.model == "some/model"


@pytest.mark.asyncio
async def test_malformed_gateway_body_becomes_failed_outcome() -> None:
    """Test that an unexpected SDK error ends the attempt as failed, not as a crash."""
    error = openai.APIResponseValidationError(
        response=httpx.Response(200, request=_REQUEST), body=None
    )
    client = _client_with(AsyncMock(side_effect=error))
    metrics = MagicMock()
    synthesizer = AnswerSynthesizer(
        client, PipelineConfig(), metrics=metrics, structured_logger=MagicMock()
    )

    outcome = await synthesizer.synthesize(question="q", context="ctx", matches=[])

    assert outcome.kind is OutcomeKind.failed
    assert outcome.error == "Reasoning service call failed: APIResponseValidationError"
    metrics.record_attempt.assert_called_once()
