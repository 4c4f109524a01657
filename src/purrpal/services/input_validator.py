"""Sanitization and validation of raw user messages."""

import re
from typing import Any

from purrpal.config import Settings
from purrpal.entities import ValidationResult

MIN_INPUT_LENGTH = 3

ERROR_NOT_TEXT = "input must be text"
ERROR_TOO_SHORT = "input too short"
ERROR_TOO_LONG = "input too long"
ERROR_SUSPICIOUS = "input contains suspicious content"

# Characters commonly used to smuggle markup or template syntax
_DENYLIST = re.compile(r"[<>{}`]")
# C0/C1 control characters except tab, newline and carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_WHITESPACE = re.compile(r"\s+")


class InputValidator:
    """Sanitizes and validates raw text before it reaches the model.

    Example:
        ```python
        validator = InputValidator(settings)
        result = validator.validate("Kucing saya tidak mau makan")
        if result.is_valid:
            prompt_text = result.sanitized_input
        ```
    """

    def __init__(self, settings: Settings) -> None:
        self._max_length = settings.max_input_length
        self._block_suspicious = settings.block_suspicious_content
        self._patterns = tuple(p.lower() for p in settings.suspicious_patterns)

    def sanitize(self, raw: Any) -> str:
        """Clean raw input.

        Truncates to the maximum length, removes control and denylisted
        characters, collapses whitespace runs and trims. Non-string input
        yields an empty string.
        """
        if not isinstance(raw, str):
            return ""

        text = raw[: self._max_length]
        text = _CONTROL_CHARS.sub("", text)
        text = _DENYLIST.sub("", text)
        text = _WHITESPACE.sub(" ", text)
        return text.strip()

    def find_suspicious(self, raw: str) -> list[str]:
        """Return the configured patterns found in ``raw`` (case-insensitive)."""
        lowered = raw.lower()
        return [pattern for pattern in self._patterns if pattern in lowered]

    def validate(self, raw: Any) -> ValidationResult:
        """Validate raw input, accumulating every violation.

        Returns:
            ValidationResult; ``sanitized_input`` is set only when valid
        """
        if not isinstance(raw, str):
            return ValidationResult(is_valid=False, errors=[ERROR_NOT_TEXT])

        errors: list[str] = []
        sanitized = self.sanitize(raw)

        if len(sanitized) < MIN_INPUT_LENGTH:
            errors.append(ERROR_TOO_SHORT)

        if len(raw.strip()) > self._max_length:
            errors.append(ERROR_TOO_LONG)

        if self._block_suspicious and self.find_suspicious(raw):
            errors.append(ERROR_SUSPICIOUS)

        if errors:
            return ValidationResult(is_valid=False, errors=errors)

        return ValidationResult(is_valid=True, errors=[], sanitized_input=sanitized)
