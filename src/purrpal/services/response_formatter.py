"""Builds the success and failure envelopes returned to callers."""

import uuid
from datetime import datetime, timezone
from typing import Any

from purrpal.dto import ChatResponse, ErrorResponse
from purrpal.entities import UrgencyLevel
from purrpal.errors import (
    InternalError,
    NotInitializedError,
    PurrPalError,
    RateLimitError,
    ValidationError,
)
from purrpal.logging_config import get_logger

logger = get_logger(__name__)

RECOMMENDATIONS: dict[UrgencyLevel, list[str]] = {
    UrgencyLevel.EMERGENCY: [
        "Segera bawa kucing Anda ke dokter hewan atau klinik hewan darurat terdekat.",
        "Jangan menunggu gejala membaik dengan sendirinya - setiap menit sangat berarti.",
        "Hubungi dokter hewan dalam perjalanan agar mereka bisa bersiap menangani kucing Anda.",
    ],
    UrgencyLevel.SERIOUS: [
        "Jadwalkan pemeriksaan ke dokter hewan dalam 24-48 jam.",
        "Pantau gejala kucing Anda dan catat setiap perubahan untuk disampaikan ke dokter hewan.",
        "Segera ke dokter hewan lebih cepat jika gejala memburuk.",
    ],
}

SUGGESTIONS = [
    "Coba kirim ulang pertanyaan Anda dalam beberapa saat.",
    "Pastikan pesan Anda jelas dan tidak terlalu panjang.",
    "Jika kucing Anda dalam kondisi darurat, segera hubungi dokter hewan terdekat.",
]


def utc_timestamp() -> str:
    """Current UTC time in ISO-8601 format."""
    return datetime.now(timezone.utc).isoformat()


class ResponseFormatter:
    """Creates envelopes; failure detail goes to the log, not the caller."""

    def __init__(self, source: str = "gemini") -> None:
        self._source = source

    @staticmethod
    def recommendations_for(urgency: UrgencyLevel | None) -> list[str] | None:
        """Fixed directives for serious and emergency cases, None for normal."""
        if urgency in RECOMMENDATIONS:
            return list(RECOMMENDATIONS[urgency])
        return None

    def success(
        self,
        text: str,
        urgency_level: UrgencyLevel | None = None,
        cached: bool | None = None,
        response_time_ms: float | None = None,
        session_id: str | None = None,
        streaming: bool | None = None,
    ) -> ChatResponse:
        """Build the success envelope for generated text."""
        return ChatResponse(
            message=text.strip(),
            timestamp=utc_timestamp(),
            source=self._source,
            urgency_level=urgency_level,
            cached=cached,
            response_time_ms=response_time_ms,
            recommendations=self.recommendations_for(urgency_level),
            session_id=session_id,
            streaming=streaming,
        )

    def failure(self, error: Exception, **context: Any) -> ErrorResponse:
        """Build the failure envelope and log the full error under a correlation id.

        Args:
            error: The exception that ended the request
            **context: Extra fields for the log entry; ``session_id`` and
                ``streaming`` are also echoed in the envelope

        Returns:
            ErrorResponse with a fixed user-safe message
        """
        error_id = str(uuid.uuid4())

        if isinstance(error, PurrPalError):
            code = error.code
            recoverable = error.recoverable
            user_message = error.user_message
        else:
            code = InternalError.code
            recoverable = InternalError.recoverable
            user_message = InternalError.user_message

        log_context = ", ".join(f"{k}={v!r}" for k, v in context.items())
        if isinstance(error, (ValidationError, RateLimitError, NotInitializedError)):
            logger.warning(f"[{error_id}] {code}: {error} ({log_context})")
        else:
            logger.error(
                f"[{error_id}] {code}: {type(error).__name__}: {error} ({log_context})",
                exc_info=error,
            )

        return ErrorResponse(
            message=user_message,
            error_id=error_id,
            error_code=code,
            recoverable=recoverable,
            timestamp=utc_timestamp(),
            suggestions=list(SUGGESTIONS),
            errors=list(error.errors) if isinstance(error, ValidationError) else None,
            reset_time=error.reset_time if isinstance(error, RateLimitError) else None,
            session_id=context.get("session_id"),
            streaming=context.get("streaming"),
        )
