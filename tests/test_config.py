"""
Tests for settings validation.
"""

import pytest

from purrpal.config import Settings
from purrpal.errors import ConfigurationError


def test_defaults_are_valid(settings):
    assert settings.cache_ttl_seconds == 30 * 60
    assert settings.rate_limit_window_seconds == 15 * 60
    assert settings.model_name == settings.llm_model


def test_model_name_follows_provider(make_settings):
    assert make_settings(llm_provider="ollama", ollama_model="llama-x").model_name == "llama-x"


@pytest.mark.parametrize(
    "overrides",
    [
        {"llm_provider": "openai"},
        {"temperature": 1.5},
        {"top_p": -0.1},
        {"top_k": 0},
        {"max_output_tokens": 0},
        {"max_input_length": 0},
        {"cache_ttl_minutes": 0},
        {"cache_ttl_minutes": 2000},
        {"rate_limit_requests": 0},
        {"rate_limit_window_minutes": 0},
        {"response_timeout_seconds": 0},
    ],
)
def test_invalid_settings(make_settings, overrides):
    with pytest.raises(ConfigurationError):
        make_settings(**overrides)


def test_all_violations_reported():
    with pytest.raises(ConfigurationError) as exc_info:
        Settings(temperature=5, top_k=500, gemini_api_key="key")

    assert "CHATBOT_TEMPERATURE" in exc_info.value.details
    assert "CHATBOT_TOP_K" in exc_info.value.details
