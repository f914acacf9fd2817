"""
Exception hierarchy for Koshi Tween.

Configuration problems are raised synchronously when an animation is
built. Cancellation is not a fault: it is delivered through the
completion cell as AnimationCancelled so callers can tell the two apart.
"""

from typing import Any, Dict, Optional


class KoshiTweenError(Exception):
    """Base class for all tween errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class ConfigurationError(KoshiTweenError, ValueError):
    """Malformed keyframes, offsets, easing or timing options."""


class AnimationCancelled(KoshiTweenError):
    """Completion marker for an animation stopped by cancel()."""

    def __init__(self, message: str = "Animation cancelled", **details):
        super().__init__(message, details)


class InvalidStateError(KoshiTweenError):
    """Operation not valid in the current state (unsettled result, finishing an endless loop)."""


__all__ = [
    "KoshiTweenError",
    "ConfigurationError",
    "AnimationCancelled",
    "InvalidStateError",
]
