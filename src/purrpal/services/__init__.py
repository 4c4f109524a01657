"""Service layer for business logic.

This layer contains the request pipeline and its components.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Pipeline) -> (Generation API)

Usage:
    ```python
    from purrpal.services import PurrPalChatbot

    # Using factory method (recommended)
    chatbot = PurrPalChatbot.create()
    await chatbot.initialize()

    # Or with an explicit provider
    chatbot = PurrPalChatbot(settings=settings, provider=provider)
    ```
"""

from .chatbot_service import ChatbotState, PurrPalChatbot
from .conversation_store import ConversationStore
from .input_validator import InputValidator
from .metrics_collector import MetricsCollector
from .model_invoker import FALLBACK_MESSAGE, ModelInvoker
from .prompt_builder import PromptBuilder, classify_urgency
from .rate_limiter import ANONYMOUS_IDENTIFIER, SlidingWindowRateLimiter
from .response_cache import ResponseCache, normalize_text
from .response_formatter import RECOMMENDATIONS, SUGGESTIONS, ResponseFormatter

__all__ = [
    "ANONYMOUS_IDENTIFIER",
    "ChatbotState",
    "ConversationStore",
    "FALLBACK_MESSAGE",
    "InputValidator",
    "MetricsCollector",
    "ModelInvoker",
    "PromptBuilder",
    "PurrPalChatbot",
    "RECOMMENDATIONS",
    "ResponseCache",
    "ResponseFormatter",
    "SUGGESTIONS",
    "SlidingWindowRateLimiter",
    "classify_urgency",
    "normalize_text",
]
