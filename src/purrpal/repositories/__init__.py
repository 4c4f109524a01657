"""Repository layer for external services.

This layer wraps the text-generation APIs behind the GenerationProvider
protocol. This enables:
- Easy swapping of implementations (Gemini → Ollama, etc.)
- Unit testing with fake implementations
- Keeping provider response shapes out of the service layer

The providers are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from purrpal.protocols import GenerationProvider

from .gemini_generation_provider import GeminiGenerationProvider, extract_candidate_text
from .ollama_generation_provider import OllamaGenerationProvider, extract_ollama_text
from .provider_factory import create_generation_provider

__all__ = [
    "GenerationProvider",
    "GeminiGenerationProvider",
    "OllamaGenerationProvider",
    "create_generation_provider",
    "extract_candidate_text",
    "extract_ollama_text",
]
