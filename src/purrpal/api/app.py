from collections.abc import Callable
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from purrpal.api.dependencies import HandlerDep, build_lifespan
from purrpal.config import get_settings
from purrpal.dto import ChatRequest, ConversationTurnResponse, MetricsResponse
from purrpal.services import PurrPalChatbot

API_VERSION = "0.1.0"


def create_app(chatbot_factory: Callable[[], PurrPalChatbot] | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        chatbot_factory: Optional chatbot builder (tests inject a fake provider here).

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="PurrPal API",
        description="Cat-care assistant backed by a hosted language model",
        version=API_VERSION,
        lifespan=build_lifespan(chatbot_factory),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "PurrPal API",
            "version": API_VERSION,
            "description": "Cat-care assistant backed by a hosted language model",
            "endpoints": {
                "chat": "/chat",
                "stream": "/chat/stream",
                "metrics": "/metrics",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health(handler: HandlerDep) -> JSONResponse:
        """Health check endpoint (probes the model when initialized)."""
        return await handler.health_check()

    @app.post("/chat")
    async def chat(request: ChatRequest, handler: HandlerDep) -> JSONResponse:
        """Answer a cat-care question."""
        return await handler.chat(request)

    @app.post("/chat/stream")
    async def chat_stream(request: ChatRequest, handler: HandlerDep) -> StreamingResponse:
        """Answer a cat-care question as a stream of NDJSON chunks."""
        return await handler.stream_chat(request)

    @app.get("/metrics", response_model=MetricsResponse)
    async def metrics(handler: HandlerDep) -> MetricsResponse:
        """Get request metrics."""
        return await handler.get_metrics()

    @app.post("/metrics/reset", response_model=dict[str, Any])
    async def reset_metrics(handler: HandlerDep) -> dict[str, Any]:
        """Reset request metrics."""
        return await handler.reset_metrics()

    @app.get("/conversations/{session_id}", response_model=ConversationTurnResponse)
    async def get_conversation(session_id: str, handler: HandlerDep) -> ConversationTurnResponse:
        """Get the last conversation turn of a session."""
        return await handler.get_conversation(session_id)

    @app.delete("/conversations/{session_id}", response_model=dict[str, Any])
    async def clear_conversation(session_id: str, handler: HandlerDep) -> dict[str, Any]:
        """Forget the conversation of a session."""
        return await handler.clear_conversation(session_id)

    @app.delete("/cache", response_model=dict[str, Any])
    async def clear_cache(handler: HandlerDep) -> dict[str, Any]:
        """Clear all cached responses."""
        return await handler.clear_cache()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "purrpal.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
