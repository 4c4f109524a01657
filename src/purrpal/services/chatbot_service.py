"""PurrPal chatbot orchestration service.

Runs every request through the same pipeline:

    rate limit -> validate -> classify -> cache lookup
      -> (miss) build prompt -> generate -> format -> cache store
      -> conversation update -> metrics -> envelope

Any step may fail; failures are recorded in metrics and turned into an
ErrorResponse, leaving the cache and conversation store untouched.
"""

import time
from collections.abc import Callable
from enum import Enum

from purrpal.config import Settings, get_settings
from purrpal.dto import (
    ChatResponse,
    Envelope,
    HealthCheckResponse,
    MetricsResponse,
)
from purrpal.entities import ConversationTurn, StreamChunk, UrgencyLevel
from purrpal.errors import (
    ConfigurationError,
    InitializationError,
    InternalError,
    NotInitializedError,
    RateLimitError,
    ValidationError,
)
from purrpal.logging_config import get_logger
from purrpal.protocols import GenerationProvider
from purrpal.repositories import create_generation_provider

from .conversation_store import ConversationStore
from .input_validator import InputValidator
from .metrics_collector import MetricsCollector
from .model_invoker import ModelInvoker
from .prompt_builder import PromptBuilder, classify_urgency
from .rate_limiter import SlidingWindowRateLimiter
from .response_cache import ResponseCache
from .response_formatter import ResponseFormatter, utc_timestamp

logger = get_logger(__name__)

CONNECTION_PROBE_PROMPT = "Test connection"
HEALTH_PROBE_PROMPT = "Test kesehatan sistem"

StreamCallback = Callable[[StreamChunk], None]


class ChatbotState(str, Enum):
    """Lifecycle of a chatbot instance."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    INIT_FAILED = "init_failed"


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _preview(message: object, limit: int = 100) -> str | None:
    return message[:limit] if isinstance(message, str) else None


class PurrPalChatbot:
    """Cat-care chatbot: the public entry point of the pipeline.

    The chatbot depends on the GenerationProvider PROTOCOL, so tests can
    inject a fake and production code lets initialize() build the provider
    named in settings.

    Example:
        ```python
        chatbot = PurrPalChatbot.create()
        await chatbot.initialize()

        response = await chatbot.generate_response(
            "Kucing saya tidak mau makan sejak kemarin",
            session_id="user-42",
        )
        if response.success:
            print(response.message, response.recommendations)

        await chatbot.shutdown()
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        provider: GenerationProvider | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the chatbot and its in-memory components.

        Args:
            settings: Configuration. Defaults to get_settings().
            provider: Generation provider. If None, initialize() builds one
                from settings.
            clock: Time source (seconds) for cache TTL, rate windows and
                conversation timestamps.
        """
        self._settings = settings or get_settings()
        self._provider = provider
        self._invoker: ModelInvoker | None = None
        self._state = ChatbotState.UNINITIALIZED
        self._initialization_error: Exception | None = None

        s = self._settings
        self._validator = InputValidator(s)
        self._prompts = PromptBuilder()
        self._cache = ResponseCache(
            ttl_seconds=s.cache_ttl_seconds,
            max_entries=s.cache_max_entries,
            enabled=s.cache_enabled,
            clock=clock,
        )
        self._rate_limiter = SlidingWindowRateLimiter(
            max_requests=s.rate_limit_requests,
            window_seconds=s.rate_limit_window_seconds,
            clock=clock,
        )
        self._metrics = MetricsCollector(enabled=s.metrics_enabled)
        self._conversations = ConversationStore(clock=clock)
        self._formatter = ResponseFormatter(source=provider.name if provider else s.llm_provider)

        logger.info("PurrPal chatbot instance created")

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        provider: GenerationProvider | None = None,
    ) -> "PurrPalChatbot":
        """Factory method to create a chatbot with default components.

        Args:
            settings: Configuration. If None, uses get_settings().
            provider: Generation provider. If None, built on initialize().

        Returns:
            An uninitialized PurrPalChatbot
        """
        return cls(settings=settings, provider=provider)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Create the provider client and probe it once.

        Raises:
            ConfigurationError: If the provider settings are invalid
            InitializationError: If the connectivity probe fails
        """
        if self._state == ChatbotState.READY:
            return

        self._state = ChatbotState.INITIALIZING
        logger.info("Initializing PurrPal chatbot...")

        try:
            if self._provider is None:
                self._provider = create_generation_provider(self._settings)
            self._invoker = ModelInvoker(self._provider, self._settings.response_timeout_seconds)
            self._formatter = ResponseFormatter(source=self._provider.name)
            await self._test_connection()
        except ConfigurationError as e:
            self._mark_init_failed(e)
            raise
        except Exception as e:
            self._mark_init_failed(e)
            raise InitializationError("Chatbot initialization failed", details=str(e)) from e

        self._state = ChatbotState.READY
        self._initialization_error = None
        logger.info(
            f"PurrPal chatbot initialized (provider={self._provider.name}, "
            f"model={self._provider.model_name})"
        )

    async def _test_connection(self) -> None:
        await self._require_invoker().generate(CONNECTION_PROBE_PROMPT)
        logger.debug("Connection test successful")

    def _mark_init_failed(self, error: Exception) -> None:
        self._state = ChatbotState.INIT_FAILED
        self._initialization_error = error
        logger.error(f"Failed to initialize PurrPal chatbot: {error}", exc_info=error)

    async def shutdown(self) -> None:
        """Drop all in-memory state, close the provider and mark uninitialized."""
        logger.info("Shutting down PurrPal chatbot...")

        self._conversations.clear_all()
        self._cache.clear()
        self._rate_limiter.reset()

        logger.info(f"Final metrics before shutdown: {self._metrics.snapshot().to_dict()}")

        if self._provider is not None:
            await self._provider.close()

        self._invoker = None
        self._state = ChatbotState.UNINITIALIZED
        logger.info("PurrPal chatbot shutdown complete")

    def _require_invoker(self) -> ModelInvoker:
        if self._invoker is None:
            raise NotInitializedError("Chatbot not initialized. Call initialize() first.")
        return self._invoker

    def _require_ready(self) -> ModelInvoker:
        if self._state != ChatbotState.READY:
            details = str(self._initialization_error) if self._initialization_error else None
            raise NotInitializedError(
                "Chatbot not initialized. Call initialize() first.",
                details=details,
                state=self._state.value,
            )
        return self._require_invoker()

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    def _admit(self, message: object, session_id: str | None) -> tuple[str, UrgencyLevel]:
        """Rate-limit, validate and classify. Returns (sanitized, urgency)."""
        limit = self._rate_limiter.check(session_id)
        if not limit.allowed:
            raise RateLimitError(limit.reset_time, session_id=session_id)

        validation = self._validator.validate(message)
        if not validation.is_valid or validation.sanitized_input is None:
            raise ValidationError(validation.errors, session_id=session_id)

        sanitized = validation.sanitized_input
        urgency = classify_urgency(
            sanitized,
            self._settings.emergency_keywords,
            self._settings.serious_symptoms,
        )
        return sanitized, urgency

    def _build_prompt(
        self,
        sanitized: str,
        urgency: UrgencyLevel,
        session_id: str | None,
        use_context: bool,
    ) -> tuple[str, bool]:
        """Returns (prompt, is_follow_up)."""
        previous = self._conversations.get(session_id) if use_context else None
        if previous is not None:
            return self._prompts.build_follow_up(previous.last_response, sanitized, urgency), True
        return self._prompts.build_prompt(sanitized, urgency), False

    def _remember(self, session_id: str | None, message: str, response: str, urgency: UrgencyLevel) -> None:
        if session_id:
            self._conversations.record_turn(session_id, message, response, urgency)

    def _fail(
        self,
        error: Exception,
        start: float,
        urgency: UrgencyLevel | None,
        message: object,
        session_id: str | None,
        streaming: bool | None = None,
    ) -> Envelope:
        self._metrics.record(False, _elapsed_ms(start), cache_hit=False, urgency_level=urgency)
        return self._formatter.failure(
            error,
            session_id=session_id,
            streaming=streaming,
            message_preview=_preview(message),
        )

    async def generate_response(
        self,
        message: str,
        session_id: str | None = None,
        use_context: bool = False,
        bypass_cache: bool = False,
    ) -> Envelope:
        """Answer one message.

        Args:
            message: Raw user text
            session_id: Opaque session identifier (rate limiting and context)
            use_context: Continue from the session's previous answer
            bypass_cache: Skip the cache lookup (counted as a miss)

        Returns:
            ChatResponse on success, ErrorResponse otherwise
        """
        start = time.perf_counter()
        urgency: UrgencyLevel | None = None

        try:
            invoker = self._require_ready()
            sanitized, urgency = self._admit(message, session_id)
            cache_key = self._cache.key(sanitized)

            if not bypass_cache:
                cached: ChatResponse | None = self._cache.get(cache_key)
                if cached is not None:
                    elapsed = _elapsed_ms(start)
                    response = cached.model_copy(
                        update={"cached": True, "response_time_ms": elapsed, "session_id": session_id},
                        deep=True,
                    )
                    self._remember(session_id, sanitized, response.message, urgency)
                    self._metrics.record(True, elapsed, cache_hit=True, urgency_level=urgency)
                    logger.debug(f"Returning cached response (session={session_id}, key={cache_key[:12]})")
                    return response

            prompt, is_follow_up = self._build_prompt(sanitized, urgency, session_id, use_context)
            text = await invoker.generate(prompt)

            elapsed = _elapsed_ms(start)
            response = self._formatter.success(
                text,
                urgency_level=urgency,
                cached=False,
                response_time_ms=elapsed,
                session_id=session_id,
            )

            # Emergency answers must always come fresh from the model, and
            # follow-up answers depend on context the key does not capture
            if urgency != UrgencyLevel.EMERGENCY and not is_follow_up:
                self._cache.put(cache_key, response)

            self._remember(session_id, sanitized, response.message, urgency)
            self._metrics.record(True, elapsed, cache_hit=False, urgency_level=urgency)

            logger.info(
                f"Response generated (session={session_id}, urgency={urgency.value}, "
                f"time={elapsed:.0f}ms, message_len={len(sanitized)}, response_len={len(text)})"
            )
            return response

        except Exception as e:
            return self._fail(e, start, urgency, message, session_id)

    async def generate_streaming_response(
        self,
        message: str,
        session_id: str | None = None,
        on_chunk: StreamCallback | None = None,
        use_context: bool = False,
    ) -> Envelope:
        """Answer one message, handing each chunk to ``on_chunk`` as it arrives.

        Streaming requests never read or write the cache.

        Args:
            message: Raw user text
            session_id: Opaque session identifier
            on_chunk: Called synchronously with a StreamChunk per chunk
            use_context: Continue from the session's previous answer

        Returns:
            ChatResponse (``streaming=True``) on success, ErrorResponse otherwise
        """
        start = time.perf_counter()
        urgency: UrgencyLevel | None = None

        try:
            invoker = self._require_ready()
            sanitized, urgency = self._admit(message, session_id)
            prompt, _ = self._build_prompt(sanitized, urgency, session_id, use_context)
            level = urgency

            def forward(chunk: str, accumulated: str, index: int) -> None:
                if on_chunk is not None:
                    on_chunk(
                        StreamChunk(
                            chunk=chunk,
                            accumulated_text=accumulated,
                            index=index,
                            urgency_level=level,
                            session_id=session_id,
                        )
                    )

            text = await invoker.generate_streaming(prompt, on_chunk=forward)

            elapsed = _elapsed_ms(start)
            response = self._formatter.success(
                text,
                urgency_level=urgency,
                cached=False,
                response_time_ms=elapsed,
                session_id=session_id,
                streaming=True,
            )

            self._remember(session_id, sanitized, response.message, urgency)
            self._metrics.record(True, elapsed, cache_hit=False, urgency_level=urgency)

            logger.info(
                f"Streaming response completed (session={session_id}, urgency={urgency.value}, "
                f"time={elapsed:.0f}ms, response_len={len(text)})"
            )
            return response

        except Exception as e:
            return self._fail(e, start, urgency, message, session_id, streaming=True)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def health_check(self) -> HealthCheckResponse:
        """Report readiness, probing the model once when initialized."""
        metrics = self._metrics.snapshot().to_dict()

        if self._state != ChatbotState.READY:
            error = self._initialization_error
            return HealthCheckResponse(
                status="not_initialized",
                message="Chatbot not initialized",
                error_code=getattr(error, "code", None) if error else None,
                metrics=metrics,
                timestamp=utc_timestamp(),
            )

        try:
            probe_start = time.perf_counter()
            await self._require_invoker().generate(HEALTH_PROBE_PROMPT)
            probe_ms = _elapsed_ms(probe_start)
        except Exception as e:
            logger.error(f"Health check failed: {e}", exc_info=e)
            return HealthCheckResponse(
                status="error",
                message="Health check failed",
                error_code=getattr(e, "code", InternalError.code),
                metrics=self._metrics.snapshot().to_dict(),
                timestamp=utc_timestamp(),
            )

        return HealthCheckResponse(
            status="healthy",
            message="PurrPal chatbot is working properly",
            model=self._provider.model_name if self._provider else None,
            test_response_time_ms=probe_ms,
            cache_enabled=self._cache.enabled,
            rate_limit_enabled=self._rate_limiter.max_requests > 0,
            active_conversations=len(self._conversations),
            metrics=metrics,
            timestamp=utc_timestamp(),
        )

    def get_metrics(self) -> MetricsResponse:
        """Metrics snapshot extended with store sizes and readiness."""
        return MetricsResponse(
            **self._metrics.snapshot().to_dict(),
            active_conversations=len(self._conversations),
            cache_size=self._cache.size,
            initialized=self.initialized,
            timestamp=utc_timestamp(),
        )

    def reset_metrics(self) -> None:
        """Zero all metrics (maintenance or tests)."""
        self._metrics.reset()
        logger.info("Metrics reset by user")

    def clear_cache(self) -> None:
        """Drop every cached response."""
        self._cache.clear()
        logger.info("Cache cleared by user")

    def clear_conversation_history(self, session_id: str | None) -> None:
        """Forget a session's last turn."""
        if self._conversations.clear(session_id):
            logger.debug(f"Conversation history cleared (session={session_id})")

    def get_conversation_history(self, session_id: str | None) -> ConversationTurn | None:
        """Return a session's last turn, or None."""
        return self._conversations.get(session_id)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> ChatbotState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state == ChatbotState.READY

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def provider(self) -> GenerationProvider | None:
        """Get the underlying provider (for testing)."""
        return self._provider

    @property
    def cache(self) -> ResponseCache:
        """Get the response cache (for testing)."""
        return self._cache

    @property
    def rate_limiter(self) -> SlidingWindowRateLimiter:
        """Get the rate limiter (for testing)."""
        return self._rate_limiter
