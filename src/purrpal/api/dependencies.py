"""Lifespan and dependency wiring for the PurrPal API.

The chatbot and its HTTP handler are built once in the lifespan and kept
on app.state; route dependencies read them back from request.app.state.
Startup survives an unreachable model (degraded mode), but not bad config.
"""

from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from purrpal.config import get_settings
from purrpal.errors import InitializationError
from purrpal.handlers import ChatHandler
from purrpal.logging_config import get_logger, setup_logging
from purrpal.services import PurrPalChatbot

logger = get_logger(__name__)


def get_handler(request: Request) -> ChatHandler:
    """Dependency injection for ChatHandler from app.state.

    Raises:
        RuntimeError: If the handler is not set up
    """
    handler = getattr(request.app.state, "chat_handler", None)
    if handler is None:
        raise RuntimeError("ChatHandler not set up. Check lifespan setup.")
    return handler


def build_lifespan(chatbot_factory: Callable[[], PurrPalChatbot] | None = None):
    """Create the lifespan context manager for the FastAPI app.

    Args:
        chatbot_factory: Builds the chatbot. Defaults to one configured from
            the environment, with logging set up from the same settings.

    Returns:
        An async context manager suitable for ``FastAPI(lifespan=...)``
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the chatbot and handler, store them in app.state.

        A failed connectivity probe does not stop the app; /health reports
        ``not_initialized`` and chat endpoints return failure envelopes.
        Configuration errors propagate and abort startup.
        """
        if chatbot_factory is None:
            settings = get_settings()
            setup_logging(settings.log_level, settings.log_file)
            chatbot = PurrPalChatbot.create(settings)
        else:
            chatbot = chatbot_factory()

        try:
            await chatbot.initialize()
        except InitializationError as e:
            logger.error(f"Chatbot failed to initialize, serving in degraded mode: {e}")

        app.state.chatbot = chatbot
        app.state.chat_handler = ChatHandler(chatbot=chatbot)
        logger.info("✓ PurrPal API ready")

        yield

        await chatbot.shutdown()
        del app.state.chat_handler
        del app.state.chatbot
        logger.info("✓ PurrPal API shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ChatHandler, Depends(get_handler)]
