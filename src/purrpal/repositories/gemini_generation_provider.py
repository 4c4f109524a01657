"""Gemini-based generation provider.

Talks to Google's Generative Language REST API with an API key. Requests
carry the generation parameters and the safety settings the chatbot has
always used (medium-and-above blocking for the four harm categories).

Endpoints used:
    - POST {base_url}/models/{model}:generateContent
    - POST {base_url}/models/{model}:streamGenerateContent?alt=sse

Requirements:
    - GEMINI_API_KEY set in the environment (or passed explicitly)
"""

import json
from collections.abc import AsyncIterator
from typing import Any

import httpx

from purrpal.config import Settings, get_settings
from purrpal.errors import ConfigurationError
from purrpal.logging_config import get_logger
from purrpal.repositories.http_errors import provider_error_from_http

logger = get_logger(__name__)


def extract_candidate_text(payload: Any) -> str | None:
    """Pull the first candidate's text out of a Gemini response body.

    This is the only place that knows the response shape. Blocked prompts
    (``promptFeedback.blockReason``), safety-stopped candidates without
    content, and malformed bodies all come back as None.

    Args:
        payload: Decoded JSON body (or one SSE event) from the API

    Returns:
        The concatenated text parts of the first candidate, or None
    """
    if not isinstance(payload, dict):
        return None

    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None

    first = candidates[0]
    if not isinstance(first, dict):
        return None

    content = first.get("content")
    if not isinstance(content, dict):
        return None

    parts = content.get("parts")
    if not isinstance(parts, list):
        return None

    text = "".join(
        part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
    return text or None


class GeminiGenerationProvider:
    """Gemini implementation of the GenerationProvider protocol.

    This class satisfies the protocol through structural typing - no
    explicit inheritance needed.

    Example:
        ```python
        provider = GeminiGenerationProvider.create()
        text = await provider.generate_once("Halo!")
        ```
    """

    SAFETY_CATEGORIES = (
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_HARASSMENT",
    )
    SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash-001",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        max_output_tokens: int = 8192,
        temperature: float = 0.7,
        top_p: float = 0.95,
        top_k: int = 40,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Gemini generation provider.

        Args:
            api_key: Generative Language API key.
            model_name: Gemini model identifier.
            base_url: API base URL including the version segment.
            max_output_tokens: Maximum tokens to generate.
            temperature: Sampling temperature.
            top_p: Nucleus sampling probability.
            top_k: Top-k sampling cutoff.
            timeout: HTTP timeout in seconds.
            client: Optional pre-built async HTTP client (used in tests).
        """
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is required for the gemini provider")

        self._api_key = api_key
        self._model_name = model_name
        self._base_url = base_url.rstrip("/")
        self._generation_config = {
            "maxOutputTokens": max_output_tokens,
            "temperature": temperature,
            "topP": top_p,
            "topK": top_k,
        }
        self._timeout = timeout
        self._client = client

    @classmethod
    def create(cls, settings: Settings | None = None) -> "GeminiGenerationProvider":
        """Factory method to create GeminiGenerationProvider from settings.

        Args:
            settings: Settings to read from. If None, uses get_settings().

        Returns:
            Configured GeminiGenerationProvider

        Raises:
            ConfigurationError: If no API key is configured
        """
        settings = settings or get_settings()
        return cls(
            api_key=settings.gemini_api_key or "",
            model_name=settings.llm_model,
            base_url=settings.gemini_base_url,
            max_output_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
            top_p=settings.top_p,
            top_k=settings.top_k,
            # The chatbot enforces its own, usually shorter, deadline
            timeout=max(60.0, settings.response_timeout_seconds * 2),
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def model_name(self) -> str:
        return self._model_name

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": self._generation_config,
            "safetySettings": [
                {"category": category, "threshold": self.SAFETY_THRESHOLD}
                for category in self.SAFETY_CATEGORIES
            ],
        }

    @property
    def _headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self._api_key}

    async def generate_once(self, prompt: str) -> str | None:
        """Generate a complete response for a prompt.

        Args:
            prompt: The instruction prompt

        Returns:
            The first candidate's text, or None when there is none

        Raises:
            ProviderError: If the API request fails
        """
        url = f"{self._base_url}/models/{self._model_name}:generateContent"

        try:
            response = await self.client.post(
                url, json=self._build_payload(prompt), headers=self._headers
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise provider_error_from_http(e, self.name) from e

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Gemini returned a non-JSON body")
            return None

        text = extract_candidate_text(payload)
        if text is None:
            feedback = payload.get("promptFeedback") if isinstance(payload, dict) else None
            block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            logger.warning(f"Gemini returned no usable text (block_reason={block_reason})")
        return text

    async def generate_stream(self, prompt: str) -> AsyncIterator[str | None]:
        """Stream partial text for a prompt via server-sent events.

        Args:
            prompt: The instruction prompt

        Yields:
            Text of each event, or None for events without text

        Raises:
            ProviderError: If the API request fails
        """
        url = f"{self._base_url}/models/{self._model_name}:streamGenerateContent"

        try:
            async with self.client.stream(
                "POST",
                url,
                params={"alt": "sse"},
                json=self._build_payload(prompt),
                headers=self._headers,
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if not data:
                        continue
                    try:
                        event = json.loads(data)
                    except json.JSONDecodeError:
                        logger.warning("Skipping malformed Gemini stream event")
                        yield None
                        continue
                    yield extract_candidate_text(event)
        except httpx.HTTPError as e:
            raise provider_error_from_http(e, self.name) from e

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
