"""HTTP handlers for chatbot operations.

Handlers convert between DTOs (API contracts) and chatbot calls.
They handle HTTP concerns like status codes and streaming bodies.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse, StreamingResponse

from purrpal.dto import (
    ChatRequest,
    ConversationTurnResponse,
    Envelope,
    ErrorResponse,
    HealthCheckResponse,
    MetricsResponse,
)
from purrpal.entities import StreamChunk
from purrpal.services import PurrPalChatbot

ERROR_STATUS_CODES = {
    "VALIDATION_FAILED": status.HTTP_400_BAD_REQUEST,
    "RATE_LIMITED": status.HTTP_429_TOO_MANY_REQUESTS,
    "NOT_INITIALIZED": status.HTTP_503_SERVICE_UNAVAILABLE,
    "GENERATION_TIMEOUT": status.HTTP_504_GATEWAY_TIMEOUT,
    "PROVIDER_ERROR": status.HTTP_502_BAD_GATEWAY,
}


def envelope_to_json(envelope: Envelope) -> dict[str, Any]:
    """Serialize an envelope, leaving out fields that were not set."""
    return envelope.model_dump(mode="json", exclude_none=True)


class ChatHandler:
    """HTTP handlers for chatbot operations.

    This handler delegates the request pipeline to PurrPalChatbot
    and handles HTTP-specific concerns like:
    - Mapping failure envelopes to status codes
    - Streaming chunks as newline-delimited JSON
    - 404 for unknown sessions

    Example:
        ```python
        chatbot = PurrPalChatbot.create()
        handler = ChatHandler(chatbot=chatbot)

        @app.post("/chat")
        async def chat(request: ChatRequest):
            return await handler.chat(request)
        ```
    """

    def __init__(self, chatbot: PurrPalChatbot) -> None:
        """Initialize the chat handler.

        Args:
            chatbot: The chatbot service (required).
        """
        self._chatbot = chatbot

    @staticmethod
    def _respond(envelope: Envelope) -> JSONResponse:
        if isinstance(envelope, ErrorResponse):
            code = ERROR_STATUS_CODES.get(envelope.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        else:
            code = status.HTTP_200_OK
        return JSONResponse(status_code=code, content=envelope_to_json(envelope))

    async def chat(self, request: ChatRequest) -> JSONResponse:
        """Handle POST /chat requests."""
        envelope = await self._chatbot.generate_response(
            request.message,
            session_id=request.session_id,
            use_context=request.use_context,
            bypass_cache=request.bypass_cache,
        )
        return self._respond(envelope)

    async def stream_chat(self, request: ChatRequest) -> StreamingResponse:
        """Handle POST /chat/stream requests.

        The body is newline-delimited JSON: one ``{"type": "chunk", ...}``
        line per chunk, then one ``{"type": "final", "response": ...}`` line
        carrying the envelope.
        """
        queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue()

        def on_chunk(event: StreamChunk) -> None:
            queue.put_nowait(
                {
                    "type": "chunk",
                    "chunk": event.chunk,
                    "index": event.index,
                    "urgency_level": event.urgency_level.value,
                }
            )

        async def run() -> None:
            try:
                envelope = await self._chatbot.generate_streaming_response(
                    request.message,
                    session_id=request.session_id,
                    on_chunk=on_chunk,
                    use_context=request.use_context,
                )
                queue.put_nowait({"type": "final", "response": envelope_to_json(envelope)})
            finally:
                queue.put_nowait(None)

        async def body() -> AsyncIterator[str]:
            task = asyncio.create_task(run())
            try:
                while (item := await queue.get()) is not None:
                    yield json.dumps(item, ensure_ascii=False) + "\n"
                await task
            finally:
                if not task.done():
                    task.cancel()

        return StreamingResponse(body(), media_type="application/x-ndjson")

    async def health_check(self) -> JSONResponse:
        """Handle GET /health requests."""
        health: HealthCheckResponse = await self._chatbot.health_check()
        code = status.HTTP_200_OK if health.status == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(status_code=code, content=health.model_dump(mode="json", exclude_none=True))

    async def get_metrics(self) -> MetricsResponse:
        """Handle GET /metrics requests."""
        return self._chatbot.get_metrics()

    async def reset_metrics(self) -> dict:
        """Handle POST /metrics/reset requests."""
        self._chatbot.reset_metrics()
        return {"success": True, "message": "Metrics reset"}

    async def get_conversation(self, session_id: str) -> ConversationTurnResponse:
        """Handle GET /conversations/{session_id} requests.

        Raises:
            HTTPException: 404 if the session has no stored turn
        """
        turn = self._chatbot.get_conversation_history(session_id)
        if turn is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No conversation for session {session_id}",
            )

        return ConversationTurnResponse(
            session_id=session_id,
            last_message=turn.last_message,
            last_response=turn.last_response,
            timestamp=turn.timestamp.isoformat(),
            urgency_level=turn.urgency_level,
        )

    async def clear_conversation(self, session_id: str) -> dict:
        """Handle DELETE /conversations/{session_id} requests."""
        self._chatbot.clear_conversation_history(session_id)
        return {"success": True, "message": "Conversation history cleared"}

    async def clear_cache(self) -> dict:
        """Handle DELETE /cache requests."""
        self._chatbot.clear_cache()
        return {"success": True, "message": "Cache cleared successfully"}
