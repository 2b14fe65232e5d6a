"""Shared pytest fixtures for all test suites."""

import asyncio
import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from docqa.config import PipelineConfig
from docqa.db.context import RequestContext
from docqa.db.models import Base
from docqa.errors import SynthesisError

SAMPLE_POLICY = (
    "Section 1: Knee surgery is covered under plan B. Section 2: Dental is excluded."
)


class ScriptedClient:
    """Reasoning client double that replays a fixed response."""

    def __init__(
        self,
        response: str = "",
        *,
        error: Exception | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self.response = response
        self.error = error
        self.delay_seconds = delay_seconds
        self.calls: list[dict[str, str]] = []

    async def complete(self, *, instruction: str, context: str, question: str) -> str:
        self.calls.append({"instruction": instruction, "context": context, "question": question})
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def sample_policy() -> str:
    """79-character insurance excerpt used across scenarios."""
    return SAMPLE_POLICY


@pytest.fixture
def scripted_client() -> type[ScriptedClient]:
    """Factory for scripted reasoning clients."""
    return ScriptedClient


@pytest.fixture
def unreachable_error() -> SynthesisError:
    """Error a reasoning client raises when the gateway is down."""
    return SynthesisError("Reasoning service unreachable")


@pytest.fixture
def ctx() -> RequestContext:
    """Request context for the primary test user."""
    return RequestContext(user_id=uuid.uuid4())


@pytest.fixture
def other_ctx() -> RequestContext:
    """Request context for a second, unrelated user."""
    return RequestContext(user_id=uuid.uuid4())


@pytest.fixture
def config() -> PipelineConfig:
    """Default pipeline configuration."""
    return PipelineConfig()


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()
