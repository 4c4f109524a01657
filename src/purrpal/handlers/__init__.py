"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on the chatbot service, not directly on providers.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Pipeline) -> (Generation API)
"""

from .chat_handler import ChatHandler

__all__ = [
    "ChatHandler",
]
