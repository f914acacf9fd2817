"""
Easing functions and easing resolution.

CSS-style cubic bezier curves with 30+ named presets, CSS steps(), and the
resolver that turns an easing definition (name, bezier tuple, steps string,
callable, per-segment list or generator) into concrete progress -> progress
functions.
"""

import math
import re
from numbers import Real
from typing import Any, Callable, Dict, List, Sequence, Tuple, Union

from .exceptions import ConfigurationError

EasingFunction = Callable[[float], float]
EasingDefinition = Union[str, EasingFunction, Sequence[float]]

_STEPS_PATTERN = re.compile(r"^steps\(\s*(\d+)\s*(?:,\s*(start|end)\s*)?\)$")


def cubic_bezier_point(t: float, p0: float, p1: float, p2: float, p3: float) -> float:
    """Calculate point on cubic bezier curve at parameter t."""
    mt = 1 - t
    return mt*mt*mt*p0 + 3*mt*mt*t*p1 + 3*mt*t*t*p2 + t*t*t*p3


def bezier_easing(x1: float, y1: float, x2: float, y2: float, t: float) -> float:
    """
    CSS-style cubic bezier easing.

    Control points: (0,0), (x1,y1), (x2,y2), (1,1)

    Args:
        x1, y1: First control point
        x2, y2: Second control point
        t: Input value 0-1 (normalized progress)

    Returns:
        Eased value, 0-1 for non-overshooting curves
    """
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0

    # Binary search for the curve parameter whose x equals t
    low, high = 0.0, 1.0
    for _ in range(30):
        mid = (low + high) / 2
        x = cubic_bezier_point(mid, 0, x1, x2, 1)
        if x < t:
            low = mid
        else:
            high = mid

    param = (low + high) / 2
    return cubic_bezier_point(param, 0, y1, y2, 1)


def linear(t: float) -> float:
    """Identity easing."""
    return t


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> EasingFunction:
    """Build a bezier easing function from four control values."""
    if x1 == y1 and x2 == y2:
        return linear

    def ease(t: float) -> float:
        return bezier_easing(x1, y1, x2, y2, t)

    return ease


def steps(count: int, position: str = "end") -> EasingFunction:
    """
    CSS steps() easing.

    With position="end" the value jumps at the end of each step, with
    "start" at the beginning.
    """
    if count < 1:
        raise ConfigurationError("steps() needs at least one step", {"count": count})
    if position not in ("start", "end"):
        raise ConfigurationError("steps() position must be 'start' or 'end'", {"position": position})

    def ease(t: float) -> float:
        if position == "end":
            expanded = min(t, 0.999) * count
            rounded = math.floor(expanded)
        else:
            expanded = max(t, 0.001) * count
            rounded = math.ceil(expanded)
        return min(max(rounded / count, 0.0), 1.0)

    return ease


# ============================================================================
# EASING PRESETS (CSS keywords + Penner approximations)
# Format: (x1, y1, x2, y2) control points
# ============================================================================

EASING_PRESETS: Dict[str, Tuple[float, float, float, float]] = {
    # Linear (no easing)
    "linear": (0.0, 0.0, 1.0, 1.0),

    # CSS keywords
    "ease": (0.25, 0.1, 0.25, 1.0),
    "ease-in": (0.42, 0.0, 1.0, 1.0),
    "ease-out": (0.0, 0.0, 0.58, 1.0),
    "ease-in-out": (0.42, 0.0, 0.58, 1.0),
    "easeIn": (0.42, 0.0, 1.0, 1.0),
    "easeOut": (0.0, 0.0, 0.58, 1.0),
    "easeInOut": (0.42, 0.0, 0.58, 1.0),

    # Sine
    "easeInSine": (0.12, 0.0, 0.39, 0.0),
    "easeOutSine": (0.61, 1.0, 0.88, 1.0),
    "easeInOutSine": (0.37, 0.0, 0.63, 1.0),

    # Quad
    "easeInQuad": (0.11, 0.0, 0.5, 0.0),
    "easeOutQuad": (0.5, 1.0, 0.89, 1.0),
    "easeInOutQuad": (0.45, 0.0, 0.55, 1.0),

    # Cubic
    "easeInCubic": (0.32, 0.0, 0.67, 0.0),
    "easeOutCubic": (0.33, 1.0, 0.68, 1.0),
    "easeInOutCubic": (0.65, 0.0, 0.35, 1.0),

    # Quart
    "easeInQuart": (0.5, 0.0, 0.75, 0.0),
    "easeOutQuart": (0.25, 1.0, 0.5, 1.0),
    "easeInOutQuart": (0.76, 0.0, 0.24, 1.0),

    # Quint
    "easeInQuint": (0.64, 0.0, 0.78, 0.0),
    "easeOutQuint": (0.22, 1.0, 0.36, 1.0),
    "easeInOutQuint": (0.83, 0.0, 0.17, 1.0),

    # Expo
    "easeInExpo": (0.7, 0.0, 0.84, 0.0),
    "easeOutExpo": (0.16, 1.0, 0.3, 1.0),
    "easeInOutExpo": (0.87, 0.0, 0.13, 1.0),

    # Circ
    "easeInCirc": (0.55, 0.0, 1.0, 0.45),
    "easeOutCirc": (0.0, 0.55, 0.45, 1.0),
    "easeInOutCirc": (0.85, 0.0, 0.15, 1.0),

    # Back (overshoot)
    "easeInBack": (0.36, 0.0, 0.66, -0.56),
    "easeOutBack": (0.34, 1.56, 0.64, 1.0),
    "easeInOutBack": (0.68, -0.6, 0.32, 1.6),

    # Custom
    "snap": (0.0, 1.0, 0.0, 1.0),
    "anticipate": (0.38, -0.4, 0.88, 1.0),
    "overshoot": (0.25, 0.0, 0.0, 1.4),
    "bounce": (0.34, 1.2, 0.64, 1.0),
}


def list_easings() -> List[str]:
    """Get list of available easing names."""
    return sorted(EASING_PRESETS.keys())


def is_bezier_definition(easing: Any) -> bool:
    """True for a 4-number (x1, y1, x2, y2) sequence."""
    return (
        isinstance(easing, (list, tuple))
        and len(easing) == 4
        and all(isinstance(v, Real) for v in easing)
    )


def is_easing_list(easing: Any) -> bool:
    """True for a per-segment list of easing definitions."""
    return (
        isinstance(easing, (list, tuple))
        and len(easing) > 0
        and not isinstance(easing[0], Real)
    )


def is_easing_generator(easing: Any) -> bool:
    """True for objects that compute their own animation."""
    return callable(getattr(easing, "create_animation", None))


def get_easing_function(definition: EasingDefinition) -> EasingFunction:
    """
    Resolve a single easing definition.

    Accepts a callable, a preset name, a "steps(n, start|end)" string or a
    4-number bezier tuple.

    Raises:
        ConfigurationError: unknown name or unsupported definition
    """
    if definition is None:
        return linear
    if is_easing_generator(definition):
        raise ConfigurationError("Easing generators cannot be used per segment")
    if callable(definition):
        return definition
    if is_bezier_definition(definition):
        return cubic_bezier(*(float(v) for v in definition))
    if isinstance(definition, str):
        name = definition.strip()
        if name in EASING_PRESETS:
            return cubic_bezier(*EASING_PRESETS[name])
        match = _STEPS_PATTERN.match(name)
        if match:
            return steps(int(match.group(1)), match.group(2) or "end")
        raise ConfigurationError("Unknown easing", {"easing": definition})
    raise ConfigurationError("Unsupported easing definition", {"easing": definition})


def resolve_easing(
    easing: Any,
    segment_count: int,
) -> Union[EasingFunction, List[EasingFunction]]:
    """
    Resolve an easing or per-segment easing list.

    A list must hold exactly one definition per keyframe segment.
    """
    if is_easing_list(easing):
        if len(easing) != segment_count:
            raise ConfigurationError(
                "Easing list length must match segment count",
                {"easings": len(easing), "segments": segment_count},
            )
        return [get_easing_function(e) for e in easing]
    return get_easing_function(easing)


__all__ = [
    "EasingFunction",
    "EasingDefinition",
    "cubic_bezier_point",
    "bezier_easing",
    "linear",
    "cubic_bezier",
    "steps",
    "EASING_PRESETS",
    "list_easings",
    "is_bezier_definition",
    "is_easing_list",
    "is_easing_generator",
    "get_easing_function",
    "resolve_easing",
]
