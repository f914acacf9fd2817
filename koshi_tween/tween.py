"""Koshi Tween nodes - bake keyframe animations into per-frame schedules."""

import logging
import re
from typing import Any, List, Optional

from .core import (
    Animation,
    AnimationOptions,
    ConfigurationError,
    Direction,
    ManualFrameClock,
    SpringGenerator,
    list_easings,
)

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,\s]+")


def parse_values(text: str) -> List[float]:
    """Parse '0, 0.5, 1' (commas and/or whitespace) into floats."""
    tokens = [tok for tok in _SEPARATORS.split(text.strip()) if tok]
    try:
        return [float(tok) for tok in tokens]
    except ValueError as e:
        raise ConfigurationError("Could not parse value list", {"text": text}) from e


def easing_label(easing: Any) -> str:
    """Human readable name for an easing input."""
    if isinstance(easing, str):
        return easing
    if isinstance(easing, (list, tuple)) and len(easing) == 4:
        return "cubic-bezier({})".format(", ".join(f"{v:g}" for v in easing))
    return repr(easing)


def bake_animation(
    keyframes: List[float],
    options: AnimationOptions,
    fps: float,
    max_frames: int,
) -> List[float]:
    """
    Drive an animation with a manual clock and collect one value per frame.

    Stops when the animation completes or after max_frames frames.
    """
    values: List[float] = []
    clock = ManualFrameClock()
    animation = Animation(values.append, keyframes, options, clock=clock)

    clock.advance(0.0)
    clock.run(1000.0 / fps, max_frames=max(max_frames - 1, 0))

    if not animation.finished.done():
        logger.warning("[Koshi] Tween still running after %d frames; truncating", len(values))
        animation.pause()
    return values


class KoshiTween:
    """Bake a keyframe animation (easing, repeat, direction) into a schedule."""
    COLOR = "#1a1a1a"
    BGCOLOR = "#2d2d2d"

    CATEGORY = "Koshi/Motion"
    FUNCTION = "bake"
    RETURN_TYPES = ("KOSHI_SCHEDULE",)
    RETURN_NAMES = ("schedule",)

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "keyframes": ("STRING", {"default": "0, 1"}),
                "fps": ("FLOAT", {"default": 30.0, "min": 1.0, "max": 240.0, "step": 1.0}),
                "duration": ("FLOAT", {"default": 1000.0, "min": 0.0, "max": 600000.0, "step": 10.0}),
                "easing": (list_easings(), {"default": "ease"}),
                "direction": ([d.value for d in Direction],),
                "repeat": ("INT", {"default": 0, "min": 0, "max": 1000}),
            },
            "optional": {
                "delay": ("FLOAT", {"default": 0.0, "min": 0.0, "max": 600000.0, "step": 10.0}),
                "end_delay": ("FLOAT", {"default": 0.0, "min": 0.0, "max": 600000.0, "step": 10.0}),
                "offsets": ("STRING", {"default": ""}),
                "easing_override": ("KOSHI_EASING",),
                "max_frames": ("INT", {"default": 10000, "min": 1, "max": 100000}),
                "parameter_name": ("STRING", {"default": "value"}),
            }
        }

    def bake(
        self,
        keyframes: str,
        fps: float,
        duration: float,
        easing: str,
        direction: str,
        repeat: int,
        delay: float = 0.0,
        end_delay: float = 0.0,
        offsets: str = "",
        easing_override: Optional[Any] = None,
        max_frames: int = 10000,
        parameter_name: str = "value",
    ):
        """Sample the animation once per frame at the given fps."""
        if fps <= 0:
            raise ConfigurationError("fps must be positive", {"fps": fps})

        chosen = easing_override if easing_override is not None else easing
        options = AnimationOptions(
            easing=chosen,
            duration=duration,
            delay=delay,
            end_delay=end_delay,
            repeat=repeat,
            offset=parse_values(offsets) if offsets.strip() else None,
            direction=direction,
        )
        values = bake_animation(parse_values(keyframes), options, fps, max_frames)

        schedule = {
            "name": parameter_name,
            "frames": len(values),
            "fps": fps,
            "values": values,
            "duration": duration,
            "direction": direction,
            "easing": easing_label(chosen),
            "raw": keyframes,
        }

        return (schedule,)


class KoshiTweenSpring:
    """Spring physics easing for Koshi Tween."""
    COLOR = "#1a1a1a"
    BGCOLOR = "#2d2d2d"

    CATEGORY = "Koshi/Motion"
    FUNCTION = "create"
    RETURN_TYPES = ("KOSHI_EASING",)
    RETURN_NAMES = ("easing",)

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "stiffness": ("FLOAT", {"default": 100.0, "min": 0.1, "max": 10000.0, "step": 1.0}),
                "damping": ("FLOAT", {"default": 10.0, "min": 0.0, "max": 1000.0, "step": 0.5}),
                "mass": ("FLOAT", {"default": 1.0, "min": 0.01, "max": 100.0, "step": 0.1}),
            },
            "optional": {
                "velocity": ("FLOAT", {"default": 0.0, "min": -10000.0, "max": 10000.0, "step": 1.0}),
            }
        }

    def create(self, stiffness: float, damping: float, mass: float, velocity: float = 0.0):
        return (SpringGenerator(stiffness=stiffness, damping=damping, mass=mass, velocity=velocity),)


class KoshiTweenBezier:
    """Custom cubic-bezier easing for Koshi Tween."""
    COLOR = "#1a1a1a"
    BGCOLOR = "#2d2d2d"

    CATEGORY = "Koshi/Motion"
    FUNCTION = "create"
    RETURN_TYPES = ("KOSHI_EASING",)
    RETURN_NAMES = ("easing",)

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "x1": ("FLOAT", {"default": 0.25, "min": 0.0, "max": 1.0, "step": 0.01}),
                "y1": ("FLOAT", {"default": 0.1, "min": -2.0, "max": 2.0, "step": 0.01}),
                "x2": ("FLOAT", {"default": 0.25, "min": 0.0, "max": 1.0, "step": 0.01}),
                "y2": ("FLOAT", {"default": 1.0, "min": -2.0, "max": 2.0, "step": 0.01}),
            }
        }

    def create(self, x1: float, y1: float, x2: float, y2: float):
        if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
            raise ConfigurationError("Bezier x control points must lie in [0, 1]", {"x1": x1, "x2": x2})
        return ((x1, y1, x2, y2),)


NODE_CLASS_MAPPINGS = {
    "Koshi_Tween": KoshiTween,
    "Koshi_TweenSpring": KoshiTweenSpring,
    "Koshi_TweenBezier": KoshiTweenBezier,
}

NODE_DISPLAY_NAME_MAPPINGS = {
    "Koshi_Tween": "▀▄▀ KN Tween",
    "Koshi_TweenSpring": "▀▄▀ KN Tween Spring",
    "Koshi_TweenBezier": "▀▄▀ KN Tween Bezier",
}
