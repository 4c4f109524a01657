"""Selection of the generation provider from settings."""

from purrpal.config import Settings
from purrpal.protocols import GenerationProvider

from .gemini_generation_provider import GeminiGenerationProvider
from .ollama_generation_provider import OllamaGenerationProvider


def create_generation_provider(settings: Settings) -> GenerationProvider:
    """Build the provider named by ``settings.llm_provider``.

    Raises:
        ConfigurationError: If the provider is missing required settings
    """
    if settings.llm_provider == "ollama":
        return OllamaGenerationProvider.create(settings)
    return GeminiGenerationProvider.create(settings)
