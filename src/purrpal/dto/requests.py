"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request DTO for chat endpoints.

    Length and content rules are enforced by the chatbot's own validator so
    that rejected messages still produce a failure envelope and are counted
    in metrics.
    """

    message: str = Field(..., description="The user's free-text message")
    session_id: str | None = Field(
        None,
        description="Opaque caller-chosen session identifier (shared 'anonymous' bucket if null)",
    )
    use_context: bool = Field(
        False,
        description="Continue from the session's previous answer if one exists",
    )
    bypass_cache: bool = Field(
        False,
        description="Skip the response cache lookup for this request",
    )
