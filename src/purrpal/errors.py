"""Exception hierarchy for the PurrPal pipeline.

Every exception carries:
- code: stable machine-readable category
- message: internal message (logged, never returned to callers)
- details: optional extra context for logs
- recoverable: whether the caller can retry or fix the request
- user_message: fixed, user-safe text placed in failure envelopes
"""

from typing import Any

GENERIC_USER_MESSAGE = (
    "Maaf, saya sedang mengalami gangguan. Silakan coba lagi dalam beberapa saat."
)


class PurrPalError(Exception):
    """Base exception for all pipeline errors."""

    code: str = "INTERNAL_ERROR"
    recoverable: bool = False
    user_message: str = GENERIC_USER_MESSAGE

    def __init__(self, message: str, details: str | None = None, **context: Any) -> None:
        self.message = message
        self.details = details
        self.context = context or None
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigurationError(PurrPalError):
    """Invalid or missing configuration. Fatal at startup."""

    code = "CONFIGURATION_ERROR"


class InitializationError(PurrPalError):
    """The chatbot could not reach the ready state."""

    code = "INITIALIZATION_FAILED"


class NotInitializedError(PurrPalError):
    """A request operation was called before initialize() succeeded."""

    code = "NOT_INITIALIZED"
    user_message = "Layanan PurrPal belum siap. Silakan coba lagi dalam beberapa saat."


class ValidationError(PurrPalError):
    """User input was rejected by the validator."""

    code = "VALIDATION_FAILED"
    recoverable = True
    user_message = "Pesan Anda tidak valid. Periksa kembali pesan Anda lalu kirim ulang."

    def __init__(self, errors: list[str], **context: Any) -> None:
        self.errors = list(errors)
        super().__init__("Input validation failed", details=", ".join(self.errors), **context)


class RateLimitError(PurrPalError):
    """The caller exhausted its request quota for the current window."""

    code = "RATE_LIMITED"
    recoverable = True
    user_message = "Terlalu banyak permintaan. Silakan coba lagi nanti."

    def __init__(self, reset_time: float, **context: Any) -> None:
        self.reset_time = reset_time
        super().__init__("Rate limit exceeded", **context)


class GenerationTimeoutError(PurrPalError):
    """The model did not answer within the configured bound."""

    code = "GENERATION_TIMEOUT"
    recoverable = True


class ProviderError(PurrPalError):
    """Opaque failure reported by the upstream generation service.

    ``category`` is one of ``auth``, ``quota``, ``bad_request``,
    ``upstream`` or ``connection``.
    """

    code = "PROVIDER_ERROR"
    recoverable = True

    def __init__(
        self,
        message: str,
        category: str = "upstream",
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        self.category = category
        self.status_code = status_code
        super().__init__(message, details=details, category=category, status_code=status_code)


class InternalError(PurrPalError):
    """Unexpected failure inside the pipeline."""

    code = "INTERNAL_ERROR"
