"""Core tween engine: easing, interpolation, timing and playback."""

from .exceptions import (
    KoshiTweenError,
    ConfigurationError,
    AnimationCancelled,
    InvalidStateError,
)
from .easing import (
    EASING_PRESETS,
    bezier_easing,
    cubic_bezier,
    get_easing_function,
    is_easing_generator,
    is_easing_list,
    list_easings,
    resolve_easing,
    steps,
)
from .generators import (
    EasingGenerator,
    GeneratedAnimation,
    SpringGenerator,
)
from .interpolation import (
    interpolate,
    default_offset,
    lerp,
    progress,
)
from .config import (
    DEFAULTS,
    AnimationConfig,
    AnimationOptions,
    Direction,
)
from .timing import (
    AnimationRuntime,
    PlayState,
    TimingSample,
    sample_timing,
)
from .clock import (
    FrameClock,
    ManualFrameClock,
)
from .completion import (
    Completion,
    CompletionState,
)
from .animation import Animation

__all__ = [
    # Errors
    "KoshiTweenError",
    "ConfigurationError",
    "AnimationCancelled",
    "InvalidStateError",
    # Easing
    "EASING_PRESETS",
    "bezier_easing",
    "cubic_bezier",
    "get_easing_function",
    "is_easing_generator",
    "is_easing_list",
    "list_easings",
    "resolve_easing",
    "steps",
    # Generators
    "EasingGenerator",
    "GeneratedAnimation",
    "SpringGenerator",
    # Interpolation
    "interpolate",
    "default_offset",
    "lerp",
    "progress",
    # Config
    "DEFAULTS",
    "AnimationConfig",
    "AnimationOptions",
    "Direction",
    # Timing
    "AnimationRuntime",
    "PlayState",
    "TimingSample",
    "sample_timing",
    # Clock
    "FrameClock",
    "ManualFrameClock",
    # Completion
    "Completion",
    "CompletionState",
    # Playback
    "Animation",
]
