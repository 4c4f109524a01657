import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from purrpal.errors import ConfigurationError

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


EMERGENCY_KEYWORDS = (
    "tidak bernapas",
    "kejang",
    "pingsan",
    "darah",
    "keracunan",
    "tidak sadar",
    "muntah darah",
    "diare berdarah",
    "lemas sekali",
    "emergency",
    "urgent",
    "gawat darurat",
)

SERIOUS_SYMPTOMS = (
    "tidak mau makan",
    "tidak minum",
    "demam tinggi",
    "sesak napas",
    "muntah terus",
    "diare parah",
    "bengkak",
    "luka parah",
)

SUSPICIOUS_PATTERNS = (
    "script",
    "javascript:",
    "vbscript:",
    "onload",
    "onerror",
    "alert(",
    "document.",
    "window.",
    "eval(",
)

SUPPORTED_PROVIDERS = ("gemini", "ollama")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Generation provider
    llm_provider: str = os.getenv("LLM_PROVIDER", "gemini")
    llm_model: str = os.getenv("LLM_MODEL", "gemini-2.0-flash-001")
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3.1:8b")

    # Generation parameters
    max_output_tokens: int = int(os.getenv("CHATBOT_MAX_TOKENS", "8192"))
    temperature: float = float(os.getenv("CHATBOT_TEMPERATURE", "0.7"))
    top_p: float = float(os.getenv("CHATBOT_TOP_P", "0.95"))
    top_k: int = int(os.getenv("CHATBOT_TOP_K", "40"))
    response_timeout_seconds: float = float(os.getenv("RESPONSE_TIMEOUT_SECONDS", "30"))

    # Cache
    cache_enabled: bool = _env_bool("ENABLE_CACHING", "true")
    cache_ttl_minutes: float = float(os.getenv("CACHE_TTL_MINUTES", "30"))
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "1000"))

    # Rate limiting
    rate_limit_requests: int = int(os.getenv("RATE_LIMIT_REQUESTS", "100"))
    rate_limit_window_minutes: float = float(os.getenv("RATE_LIMIT_WINDOW_MINUTES", "15"))

    # Input security
    max_input_length: int = int(os.getenv("MAX_INPUT_LENGTH", "2000"))
    block_suspicious_content: bool = _env_bool("BLOCK_SUSPICIOUS_CONTENT", "true")
    suspicious_patterns: tuple[str, ...] = SUSPICIOUS_PATTERNS

    # Cat care keyword sets (emergency is checked before serious)
    emergency_keywords: tuple[str, ...] = EMERGENCY_KEYWORDS
    serious_symptoms: tuple[str, ...] = SERIOUS_SYMPTOMS

    # Observability
    metrics_enabled: bool = _env_bool("ENABLE_METRICS", "true")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str | None = os.getenv("LOG_FILE")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = _env_bool("API_RELOAD", "false")

    @property
    def cache_ttl_seconds(self) -> float:
        """Cache TTL converted to seconds."""
        return self.cache_ttl_minutes * 60

    @property
    def rate_limit_window_seconds(self) -> float:
        """Rate limit window converted to seconds."""
        return self.rate_limit_window_minutes * 60

    @property
    def model_name(self) -> str:
        """Name of the model served by the configured provider."""
        if self.llm_provider == "ollama":
            return self.ollama_model
        return self.llm_model

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        checks = [
            (self.llm_provider not in SUPPORTED_PROVIDERS,
             f"LLM_PROVIDER must be one of {list(SUPPORTED_PROVIDERS)}, got {self.llm_provider!r}"),
            (not 0 <= self.temperature <= 1, "CHATBOT_TEMPERATURE must be between 0 and 1"),
            (not 0 <= self.top_p <= 1, "CHATBOT_TOP_P must be between 0 and 1"),
            (not 1 <= self.top_k <= 100, "CHATBOT_TOP_K must be between 1 and 100"),
            (not 1 <= self.max_output_tokens <= 32768,
             "CHATBOT_MAX_TOKENS must be between 1 and 32768"),
            (not 1 <= self.max_input_length <= 10000,
             "MAX_INPUT_LENGTH must be between 1 and 10000"),
            (not 1 <= self.cache_ttl_minutes <= 1440,
             "CACHE_TTL_MINUTES must be between 1 and 1440 (24 hours)"),
            (self.cache_max_entries < 1, "CACHE_MAX_ENTRIES must be at least 1"),
            (not 1 <= self.rate_limit_requests <= 10000,
             "RATE_LIMIT_REQUESTS must be between 1 and 10000"),
            (self.rate_limit_window_minutes <= 0, "RATE_LIMIT_WINDOW_MINUTES must be positive"),
            (self.response_timeout_seconds <= 0, "RESPONSE_TIMEOUT_SECONDS must be positive"),
        ]
        errors = [message for failed, message in checks if failed]
        if errors:
            raise ConfigurationError(
                "Configuration validation failed", details="; ".join(errors)
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
