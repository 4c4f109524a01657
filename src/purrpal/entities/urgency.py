"""Urgency level domain entity."""

from enum import Enum


class UrgencyLevel(str, Enum):
    """Severity tier derived from keyword matching on the user message.

    Drives prompt content, cache policy and recommendations.
    """

    NORMAL = "normal"
    SERIOUS = "serious"
    EMERGENCY = "emergency"
