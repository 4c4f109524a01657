"""
Shared fixtures for the PurrPal tests.
"""

import asyncio

import pytest

from purrpal.config import Settings
from purrpal.services import PurrPalChatbot


class FakeGenerationProvider:
    """In-memory GenerationProvider with scripted behaviour."""

    def __init__(
        self,
        responses: list[str | None] | None = None,
        chunks: list[str | None] | None = None,
        default_response: str = "Kucing Anda baik-baik saja. Tetap pantau ya!",
    ) -> None:
        self.responses = list(responses or [])
        self.chunks = list(chunks) if chunks is not None else ["Halo ", "dari ", "PurrPal"]
        self.default_response = default_response
        self.error: Exception | None = None
        self.stream_error: Exception | None = None
        self.delay = 0.0
        self.prompts: list[str] = []
        self.generate_calls = 0
        self.stream_calls = 0
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def generate_once(self, prompt: str) -> str | None:
        self.generate_calls += 1
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return self.default_response

    async def generate_stream(self, prompt: str):
        self.stream_calls += 1
        self.prompts.append(prompt)
        for chunk in self.chunks:
            if self.delay:
                await asyncio.sleep(self.delay)
            yield chunk
            if self.stream_error is not None:
                raise self.stream_error

    async def close(self) -> None:
        self.closed = True

    def reset_calls(self) -> None:
        self.prompts.clear()
        self.generate_calls = 0
        self.stream_calls = 0


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_settings():
    """Build Settings with test-friendly defaults, overridable per test."""

    def factory(**overrides) -> Settings:
        values = {
            "llm_provider": "gemini",
            "gemini_api_key": "test-key",
            "response_timeout_seconds": 1.0,
            "cache_enabled": True,
            "cache_ttl_minutes": 30,
            "cache_max_entries": 1000,
            "rate_limit_requests": 100,
            "rate_limit_window_minutes": 15,
            "max_input_length": 2000,
            "block_suspicious_content": True,
            "metrics_enabled": True,
            "log_file": None,
        }
        values.update(overrides)
        return Settings(**values)

    return factory


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def fake_provider() -> FakeGenerationProvider:
    return FakeGenerationProvider()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def chatbot(settings, fake_provider, clock) -> PurrPalChatbot:
    """An uninitialized chatbot wired to the fake provider and clock."""
    return PurrPalChatbot(settings=settings, provider=fake_provider, clock=clock)


@pytest.fixture
def ready_chatbot(chatbot, fake_provider) -> PurrPalChatbot:
    """An initialized chatbot; the connection probe is not counted in provider calls."""
    asyncio.run(chatbot.initialize())
    fake_provider.reset_calls()
    return chatbot
