"""Ollama-based generation provider.

Uses Ollama's local API to generate text. Handy for development without
a Gemini API key.

Requirements:
    - Ollama installed: https://ollama.com
    - Model pulled: `ollama pull llama3.1:8b`
    - Ollama running: `ollama serve` (usually runs automatically)
"""

import json
from collections.abc import AsyncIterator
from typing import Any

import httpx

from purrpal.config import Settings, get_settings
from purrpal.errors import ProviderError
from purrpal.logging_config import get_logger
from purrpal.repositories.http_errors import provider_error_from_http

logger = get_logger(__name__)


def extract_ollama_text(payload: Any) -> str | None:
    """Pull the generated text out of an Ollama /api/generate body or stream line."""
    if not isinstance(payload, dict):
        return None
    text = payload.get("response")
    if not isinstance(text, str) or not text:
        return None
    return text


class OllamaGenerationProvider:
    """Ollama implementation of the GenerationProvider protocol.

    The API endpoint is http://localhost:11434/api/generate by default.

    Example:
        ```python
        provider = OllamaGenerationProvider.create()
        text = await provider.generate_once("Halo!")
        ```
    """

    def __init__(
        self,
        model_name: str = "llama3.1:8b",
        base_url: str = "http://localhost:11434",
        max_output_tokens: int = 8192,
        temperature: float = 0.7,
        top_p: float = 0.95,
        top_k: int = 40,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama generation provider.

        Args:
            model_name: Name of the Ollama model.
            base_url: Ollama API base URL.
            max_output_tokens: Maximum tokens to generate (num_predict).
            temperature: Sampling temperature.
            top_p: Nucleus sampling probability.
            top_k: Top-k sampling cutoff.
            timeout: Request timeout in seconds.
            client: Optional pre-built async HTTP client (used in tests).
        """
        self._model_name = model_name
        self._base_url = base_url.rstrip("/")
        self._options = {
            "num_predict": max_output_tokens,
            "temperature": temperature,
            "top_p": top_p,
            "top_k": top_k,
        }
        self._timeout = timeout
        self._client = client

    @classmethod
    def create(cls, settings: Settings | None = None) -> "OllamaGenerationProvider":
        """Factory method to create OllamaGenerationProvider from settings.

        Args:
            settings: Settings to read from. If None, uses get_settings().

        Returns:
            Configured OllamaGenerationProvider
        """
        settings = settings or get_settings()
        return cls(
            model_name=settings.ollama_model,
            base_url=settings.ollama_base_url,
            max_output_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
            top_p=settings.top_p,
            top_k=settings.top_k,
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
        return "ollama"

    @property
    def model_name(self) -> str:
        return self._model_name

    def _build_payload(self, prompt: str, stream: bool) -> dict[str, Any]:
        return {
            "model": self._model_name,
            "prompt": prompt,
            "stream": stream,
            "options": self._options,
        }

    async def generate_once(self, prompt: str) -> str | None:
        """Generate a complete response for a prompt.

        Raises:
            ProviderError: If the Ollama API request fails
        """
        url = f"{self._base_url}/api/generate"

        try:
            response = await self.client.post(url, json=self._build_payload(prompt, stream=False))
            response.raise_for_status()
        except httpx.HTTPError as e:
            error = provider_error_from_http(e, self.name)
            if "connection refused" in str(e).lower():
                error.details = f"{error.details} (is Ollama running? try: ollama serve)"
            raise error from e

        try:
            return extract_ollama_text(response.json())
        except ValueError:
            logger.warning("Ollama returned a non-JSON body")
            return None

    async def generate_stream(self, prompt: str) -> AsyncIterator[str | None]:
        """Stream partial text for a prompt (newline-delimited JSON).

        Raises:
            ProviderError: If the Ollama API request fails or reports an error
        """
        url = f"{self._base_url}/api/generate"

        try:
            async with self.client.stream(
                "POST", url, json=self._build_payload(prompt, stream=True)
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    try:
                        event = json.loads(line)
                    except json.JSONDecodeError:
                        logger.warning("Skipping malformed Ollama stream line")
                        yield None
                        continue
                    if isinstance(event, dict) and event.get("error"):
                        raise ProviderError("ollama stream reported an error", details=str(event["error"]))
                    yield extract_ollama_text(event)
                    if isinstance(event, dict) and event.get("done"):
                        break
        except httpx.HTTPError as e:
            raise provider_error_from_http(e, self.name) from e

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
