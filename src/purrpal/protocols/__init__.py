"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Gemini → Ollama, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from purrpal.protocols import GenerationProvider

    provider: GenerationProvider = GeminiGenerationProvider.create()  # works
    provider: GenerationProvider = OllamaGenerationProvider.create()  # also works
    ```
"""

from .generation_provider import GenerationProvider

__all__ = [
    "GenerationProvider",
]
