"""
Animation configuration.

AnimationOptions is the loose, user-facing option set. AnimationConfig is
the validated, immutable result: easing resolved, generator applied and the
interpolator built exactly once.
"""

import logging
import math
from dataclasses import dataclass, field, fields
from enum import Enum
from numbers import Real
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Sequence, Tuple, Union

from .easing import EasingFunction, is_easing_generator, resolve_easing
from .exceptions import ConfigurationError
from .interpolation import interpolate, validate_offsets

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Playback direction per iteration."""
    NORMAL = "normal"
    REVERSE = "reverse"
    ALTERNATE = "alternate"
    ALTERNATE_REVERSE = "alternate-reverse"


# Durations are milliseconds
DEFAULTS: Dict[str, Any] = {
    "keyframes": (0.0, 1.0),
    "easing": "ease",
    "duration": 300.0,
    "delay": 0.0,
    "end_delay": 0.0,
    "repeat": 0,
    "offset": None,
    "direction": Direction.NORMAL,
}


@dataclass
class AnimationOptions:
    """
    Timing and easing options for one animation.

    Attributes:
        easing: Preset name, bezier tuple, steps string, callable,
            per-segment list, or an easing generator
        duration: Length of one iteration (ms)
        delay: Time before the first iteration starts (ms)
        end_delay: Time held after the last iteration before finishing (ms)
        repeat: Additional iterations after the first; math.inf loops forever
        offset: Optional per-keyframe positions in [0, 1]
        direction: normal, reverse, alternate or alternate-reverse
    """
    easing: Any = DEFAULTS["easing"]
    duration: float = DEFAULTS["duration"]
    delay: float = DEFAULTS["delay"]
    end_delay: float = DEFAULTS["end_delay"]
    repeat: float = DEFAULTS["repeat"]
    offset: Optional[Sequence[float]] = None
    direction: Union[str, Direction] = DEFAULTS["direction"]

    ALIASES: ClassVar[Dict[str, str]] = {"endDelay": "end_delay", "offsets": "offset"}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AnimationOptions':
        """Create from a mapping with snake_case or camelCase keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = cls.ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError("Unknown animation option", {"option": key})
            if value is not None or name == "offset":
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: Union['AnimationOptions', Mapping[str, Any], None]) -> 'AnimationOptions':
        """Accept options as an instance, a mapping or None."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            return cls.from_dict(options)
        raise ConfigurationError("Options must be AnimationOptions or a mapping", {"type": type(options).__name__})


def _check_duration(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value) or value < 0:
        raise ConfigurationError(f"{name} must be a finite, non-negative number of milliseconds", {name: value})
    return float(value)


def _check_repeat(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or value < 0:
        raise ConfigurationError("repeat must be a non-negative integer or math.inf", {"repeat": value})
    if math.isinf(value):
        return math.inf
    if not float(value).is_integer():
        raise ConfigurationError("repeat must be a whole number", {"repeat": value})
    return int(value)


def _check_keyframes(keyframes: Sequence[Any]) -> Tuple[float, ...]:
    if len(keyframes) < 2:
        raise ConfigurationError("At least two keyframes are required", {"keyframes": len(keyframes)})
    values = []
    for kf in keyframes:
        if isinstance(kf, bool) or not isinstance(kf, Real) or not math.isfinite(kf):
            raise ConfigurationError("Keyframes must be finite numbers", {"keyframe": kf})
        values.append(float(kf))
    return tuple(values)


def _check_direction(direction: Any) -> Direction:
    try:
        return Direction(direction)
    except ValueError:
        raise ConfigurationError(
            "Unknown direction",
            {"direction": direction, "expected": [d.value for d in Direction]},
        ) from None


@dataclass(frozen=True)
class AnimationConfig:
    """Validated, immutable animation configuration."""
    keyframes: Tuple[float, ...]
    offsets: Optional[Tuple[float, ...]]
    easing: Union[EasingFunction, Tuple[EasingFunction, ...]]
    duration: float
    delay: float
    end_delay: float
    repeat: float
    direction: Direction
    interpolate: Callable[[float], float] = field(repr=False, compare=False)

    @property
    def segment_count(self) -> int:
        return len(self.keyframes) - 1

    @property
    def total_duration(self) -> float:
        """Duration of every iteration together, excluding delays."""
        if self.duration == 0:
            return 0.0
        return self.duration * (self.repeat + 1)

    @classmethod
    def build(
        cls,
        keyframes: Sequence[Any] = DEFAULTS["keyframes"],
        options: Union[AnimationOptions, Mapping[str, Any], None] = None,
    ) -> 'AnimationConfig':
        """
        Validate options and build the interpolator.

        An easing generator runs here, once, and may replace the keyframes
        and duration before anything else is derived from them.

        Raises:
            ConfigurationError: on any malformed input
        """
        opts = AnimationOptions.coerce(options)
        keyframes = list(keyframes)
        easing = opts.easing
        duration = opts.duration
        offset = opts.offset

        if is_easing_generator(easing):
            custom = easing.create_animation(keyframes, lambda: "0", True)
            easing = custom.easing
            if custom.keyframes is not None:
                keyframes = list(custom.keyframes)
                if offset is not None:
                    logger.debug("Generator %r replaced keyframes; dropping offsets", opts.easing)
                    offset = None
            if custom.duration is not None:
                duration = custom.duration

        values = _check_keyframes(keyframes)
        offsets = None
        if offset is not None:
            offsets = tuple(validate_offsets(offset, len(values)).tolist())

        resolved = resolve_easing(easing, len(values) - 1)
        if isinstance(resolved, list):
            resolved = tuple(resolved)

        return cls(
            keyframes=values,
            offsets=offsets,
            easing=resolved,
            duration=_check_duration("duration", duration),
            delay=_check_duration("delay", opts.delay),
            end_delay=_check_duration("end_delay", opts.end_delay),
            repeat=_check_repeat(opts.repeat),
            direction=_check_direction(opts.direction),
            interpolate=interpolate(values, offsets, resolved),
        )


__all__ = [
    "Direction",
    "DEFAULTS",
    "AnimationOptions",
    "AnimationConfig",
]
