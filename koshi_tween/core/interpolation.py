"""Keyframe interpolation - progress in [0, 1] to an output value."""

from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from .easing import EasingFunction, linear
from .exceptions import ConfigurationError


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two values."""
    return a + (b - a) * t


def progress(start: float, end: float, value: float) -> float:
    """Inverse lerp. A zero-width range yields 0."""
    span = end - start
    if span == 0:
        return 0.0
    return (value - start) / span


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value to [low, high]."""
    return min(max(value, low), high)


def default_offset(length: int) -> np.ndarray:
    """Evenly spaced offsets for `length` keyframes."""
    return np.linspace(0.0, 1.0, length)


def validate_offsets(offsets: Sequence[float], length: int) -> np.ndarray:
    """Check keyframe offsets and return them as an array."""
    arr = np.asarray(offsets, dtype=float)
    if arr.ndim != 1 or arr.shape[0] != length:
        raise ConfigurationError(
            "Offsets must have one entry per keyframe",
            {"offsets": arr.size, "keyframes": length},
        )
    if not np.all(np.isfinite(arr)) or arr.min() < 0.0 or arr.max() > 1.0:
        raise ConfigurationError("Offsets must lie in [0, 1]", {"offsets": arr.tolist()})
    if np.any(np.diff(arr) < 0):
        raise ConfigurationError("Offsets must be non-decreasing", {"offsets": arr.tolist()})
    return arr


def interpolate(
    keyframes: Sequence[float],
    offsets: Optional[Sequence[float]] = None,
    easing: Union[EasingFunction, List[EasingFunction]] = linear,
) -> Callable[[float], float]:
    """
    Build a progress -> value function over keyframes.

    Progress is clamped to [0, 1]. The segment containing it is found by
    offset, its local progress eased, and the two bounding keyframes mixed.
    The last segment includes progress 1.

    Args:
        keyframes: Output values, at least two
        offsets: Optional per-keyframe positions; evenly spaced if omitted
        easing: One easing for every segment, or one per segment

    Returns:
        Interpolator callable
    """
    values = np.asarray(keyframes, dtype=float)
    count = values.shape[0]
    if count < 2:
        raise ConfigurationError("Interpolation needs at least two keyframes", {"keyframes": count})

    easings = easing if isinstance(easing, (list, tuple)) else None
    if easings is not None and len(easings) != count - 1:
        raise ConfigurationError(
            "Easing list length must match segment count",
            {"easings": len(easings), "segments": count - 1},
        )

    if count == 2 and offsets is None and easings is None:
        start, end = float(values[0]), float(values[1])

        def interpolate_pair(t: float) -> float:
            return lerp(start, end, easing(clamp(t)))

        return interpolate_pair

    stops = default_offset(count) if offsets is None else validate_offsets(offsets, count)
    last_segment = count - 2

    def interpolate_segments(t: float) -> float:
        t = clamp(t)
        i = int(np.searchsorted(stops, t, side="right")) - 1
        i = min(max(i, 0), last_segment)
        local = clamp(progress(float(stops[i]), float(stops[i + 1]), t))
        segment_easing = easings[i] if easings is not None else easing
        return float(lerp(values[i], values[i + 1], segment_easing(local)))

    return interpolate_segments


__all__ = [
    "lerp",
    "progress",
    "clamp",
    "default_offset",
    "validate_offsets",
    "interpolate",
]
