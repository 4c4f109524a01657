"""Input validation result entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating raw user input.

    ``sanitized_input`` is only populated when ``is_valid`` is true.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    sanitized_input: str | None = None
