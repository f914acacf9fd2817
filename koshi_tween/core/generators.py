"""
Easing generators - physically modelled motion.

A generator replaces the caller's easing, and optionally its keyframes and
duration, before the interpolator is built. The spring generator integrates
a damped harmonic oscillator and hands back the sampled trajectory as
linearly eased keyframes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np
from scipy.integrate import solve_ivp

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class GeneratedAnimation:
    """What a generator hands back: easing plus optional replacements."""
    easing: Any
    keyframes: Optional[List[float]] = None
    duration: Optional[float] = None  # milliseconds


@runtime_checkable
class EasingGenerator(Protocol):
    """Anything that can compute its own animation from keyframes."""

    def create_animation(
        self,
        keyframes: Sequence[Optional[float]],
        read_origin: Callable[[], str],
        is_last: bool,
    ) -> GeneratedAnimation:
        ...


class SpringGenerator:
    """
    Damped spring easing generator.

    Rest thresholds are relative to the travel distance so the same spring
    settles consistently whether it animates 0->1 or 0->500.

    Args:
        stiffness: Spring constant k
        damping: Damping coefficient c
        mass: Mass m
        velocity: Initial velocity (units/second)
        rest_speed: Speed, as a fraction of travel per second, counted as at rest
        rest_distance: Distance to target, as a fraction of travel, counted as at rest
    """

    SAMPLE_MS = 10.0
    MAX_DURATION_MS = 10000.0

    def __init__(
        self,
        stiffness: float = 100.0,
        damping: float = 10.0,
        mass: float = 1.0,
        velocity: float = 0.0,
        rest_speed: float = 0.02,
        rest_distance: float = 0.005,
    ):
        if stiffness <= 0 or mass <= 0:
            raise ConfigurationError(
                "Spring stiffness and mass must be positive",
                {"stiffness": stiffness, "mass": mass},
            )
        if damping < 0 or rest_speed <= 0 or rest_distance <= 0:
            raise ConfigurationError(
                "Spring damping must be non-negative and rest thresholds positive",
                {"damping": damping, "rest_speed": rest_speed, "rest_distance": rest_distance},
            )
        self.stiffness = float(stiffness)
        self.damping = float(damping)
        self.mass = float(mass)
        self.velocity = float(velocity)
        self.rest_speed = float(rest_speed)
        self.rest_distance = float(rest_distance)
        self._cache: Dict[Tuple[float, float], np.ndarray] = {}

    def __repr__(self) -> str:
        return (
            f"SpringGenerator(stiffness={self.stiffness}, damping={self.damping}, "
            f"mass={self.mass}, velocity={self.velocity})"
        )

    def simulate(self, origin: float, target: float) -> np.ndarray:
        """Sample spring position every SAMPLE_MS until it comes to rest."""
        k, c, m = self.stiffness, self.damping, self.mass

        def rhs(_t, y):
            x, v = y
            return [v, (-k * (x - target) - c * v) / m]

        t_eval = np.arange(0.0, self.MAX_DURATION_MS + self.SAMPLE_MS, self.SAMPLE_MS) / 1000.0
        solution = solve_ivp(
            rhs,
            (0.0, float(t_eval[-1])),
            [origin, self.velocity],
            t_eval=t_eval,
            rtol=1e-8,
            atol=1e-10,
        )
        positions, speeds = solution.y

        travel = max(abs(target - origin), 1e-9)
        at_rest = (
            (np.abs(speeds) <= self.rest_speed * travel)
            & (np.abs(positions - target) <= self.rest_distance * travel)
        )
        moving = np.flatnonzero(~at_rest)
        # Index of the first sample after which the spring never leaves rest
        end = int(moving[-1]) + 1 if moving.size else 1
        end = min(max(end, 1), len(positions) - 1)

        samples = positions[:end + 1].copy()
        samples[-1] = target
        return samples

    def create_animation(
        self,
        keyframes: Sequence[Optional[float]],
        read_origin: Callable[[], str],
        is_last: bool = True,
    ) -> GeneratedAnimation:
        """
        Build spring keyframes from the first keyframe to the last.

        A single keyframe, or a leading None, takes its origin from
        read_origin(). is_last is part of the generator contract; a spring
        always settles on the final keyframe.
        """
        if not keyframes:
            raise ConfigurationError("Spring needs at least a target keyframe")
        target = float(keyframes[-1])
        if len(keyframes) > 1 and keyframes[0] is not None:
            origin = float(keyframes[0])
        else:
            origin = float(read_origin())

        key = (origin, target)
        if key not in self._cache:
            self._cache[key] = self.simulate(origin, target)
            logger.debug(
                "Spring %r simulated %s -> %s in %d samples",
                self, origin, target, len(self._cache[key]),
            )
        samples = self._cache[key]

        return GeneratedAnimation(
            easing="linear",
            keyframes=samples.tolist(),
            duration=(len(samples) - 1) * self.SAMPLE_MS,
        )


__all__ = [
    "GeneratedAnimation",
    "EasingGenerator",
    "SpringGenerator",
]
