"""Generation provider protocol.

Defines the interface for any hosted or local text-generation service
the chatbot can call.

Implementations can include:
- Google Gemini via the Generative Language REST API (default)
- Ollama (local)
- Any other completion API
"""

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class GenerationProvider(Protocol):
    """Protocol for text-generation services.

    Implementations own all knowledge of the provider's response shape.
    Both generation methods report "no usable text" (empty, malformed or
    safety-blocked output) as ``None`` rather than raising, and raise
    ``ProviderError`` for transport, auth, quota or request failures.

    Example:
        ```python
        from purrpal.protocols import GenerationProvider

        provider: GenerationProvider = GeminiGenerationProvider.create()
        provider: GenerationProvider = OllamaGenerationProvider.create()
        ```
    """

    @property
    def name(self) -> str:
        """Return a short source tag for the provider (e.g. "gemini")."""
        ...

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def generate_once(self, prompt: str) -> str | None:
        """Generate a complete response for a prompt.

        Args:
            prompt: The instruction prompt

        Returns:
            The first candidate's text, or None when there is no usable text
        """
        ...

    def generate_stream(self, prompt: str) -> AsyncIterator[str | None]:
        """Stream partial text for a prompt.

        Args:
            prompt: The instruction prompt

        Returns:
            Async iterator over chunk texts (None for events without text)
        """
        ...

    async def close(self) -> None:
        """Release network resources held by the provider."""
        ...
