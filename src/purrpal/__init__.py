"""PurrPal - Cat-care chatbot backed by a hosted language model.

This package provides a layered architecture for the chatbot:

Layers:
    - protocols: Interface contracts (GenerationProvider)
    - repositories: Generation provider implementations (Gemini, Ollama)
    - services: Request pipeline (validation, urgency, cache, rate limit, metrics)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (envelopes and API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from purrpal.services import PurrPalChatbot

    chatbot = PurrPalChatbot.create()
    await chatbot.initialize()
    response = await chatbot.generate_response("Kucing saya bersin terus")
    ```

For HTTP API:
    ```python
    from purrpal.api.app import app
    ```
"""

from purrpal.config import Settings, get_settings
from purrpal.dto import ChatRequest, ChatResponse, ErrorResponse
from purrpal.entities import StreamChunk, UrgencyLevel
from purrpal.errors import PurrPalError
from purrpal.handlers import ChatHandler
from purrpal.protocols import GenerationProvider
from purrpal.repositories import GeminiGenerationProvider, OllamaGenerationProvider
from purrpal.services import PurrPalChatbot

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "GenerationProvider",
    # Services (business logic)
    "PurrPalChatbot",
    # Handlers (HTTP)
    "ChatHandler",
    # Repositories (providers)
    "GeminiGenerationProvider",
    "OllamaGenerationProvider",
    # Entities (domain models)
    "StreamChunk",
    "UrgencyLevel",
    # DTOs (API contracts)
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    # Errors
    "PurrPalError",
]
