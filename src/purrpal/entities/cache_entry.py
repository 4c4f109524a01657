"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached response payload.

    Attributes:
        value: The cached response payload
        stored_at: When this entry was created (clock seconds)
    """

    value: Any
    stored_at: float
