"""
Timing model - pure mapping from a frame timestamp to sampled progress.

Everything the sampler needs is passed in explicitly: the immutable
AnimationConfig and the mutable AnimationRuntime owned by one Animation.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from .config import AnimationConfig, Direction


class PlayState(str, Enum):
    """Coarse lifecycle phase of an animation."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass
class AnimationRuntime:
    """
    Mutable playback state.

    Attributes:
        play_state: Current lifecycle phase
        start_time: Clock timestamp of logical t=0 (ms)
        pause_time: Clock timestamp sampling is frozen at while paused
        hold_time: Elapsed time pinned by a seek while paused or at rate 0
        rate: Signed multiplier on elapsed time
        t: Last computed elapsed time, exposed as current_time
        cancel_timestamp: Timestamp resampled by cancel()
    """
    play_state: PlayState = PlayState.IDLE
    start_time: Optional[float] = None
    pause_time: Optional[float] = None
    hold_time: Optional[float] = None
    rate: float = 1.0
    t: float = 0.0
    cancel_timestamp: float = 0.0


class TimingSample(NamedTuple):
    """One evaluation of the timing model."""
    elapsed: float
    local_time: float
    iteration: int
    iteration_progress: float
    progress: float
    is_finished: bool


def elapsed_time(timestamp: float, runtime: AnimationRuntime) -> float:
    """Rate-scaled time since start, honouring pause and seek holds."""
    if runtime.hold_time is not None:
        return runtime.hold_time
    if runtime.pause_time is not None:
        timestamp = runtime.pause_time
    start = timestamp if runtime.start_time is None else runtime.start_time
    return (timestamp - start) * runtime.rate


def iteration_at(local_time: float, config: AnimationConfig) -> Tuple[int, float]:
    """
    Split local time into (iteration, iteration progress).

    Time past the active interval is clamped to its end. An exact
    iteration boundary counts as the end of the previous iteration, so the
    last frame of iteration N shows progress 1 rather than iteration N+1 at 0.
    """
    total = config.total_duration
    if config.duration > 0:
        progress = min(local_time, total) / config.duration
    elif math.isfinite(config.repeat):
        progress = float(config.repeat + 1)
    else:
        progress = 1.0

    iteration = math.floor(progress)
    iteration_progress = progress % 1.0
    if iteration_progress == 0 and progress >= 1:
        iteration_progress = 1.0
        iteration -= 1
    return iteration, iteration_progress


def is_reversed(direction: Direction, iteration: int) -> bool:
    """Whether this iteration plays its keyframes backwards."""
    odd = iteration % 2 == 1
    return (
        direction is Direction.REVERSE
        or (direction is Direction.ALTERNATE and odd)
        or (direction is Direction.ALTERNATE_REVERSE and not odd)
    )


def sample_timing(
    timestamp: float,
    config: AnimationConfig,
    runtime: AnimationRuntime,
) -> TimingSample:
    """
    Evaluate the timing model at a clock timestamp.

    Args:
        timestamp: Frame clock time (ms)
        config: Immutable timing configuration
        runtime: Playback state; read only

    Returns:
        TimingSample whose `progress` is ready for the interpolator
    """
    elapsed = elapsed_time(timestamp, runtime)

    # Rebase on delay; nothing before it produces negative progress
    local_time = max(elapsed - config.delay, 0.0)
    if runtime.play_state is PlayState.FINISHED:
        local_time = config.total_duration

    iteration, iteration_progress = iteration_at(local_time, config)

    directed = iteration_progress
    if is_reversed(config.direction, iteration):
        directed = 1.0 - iteration_progress

    # Past the active interval the last keyframe holds, whatever the direction
    if local_time >= config.total_duration:
        progress = 1.0
    else:
        progress = min(directed, 1.0)

    is_finished = (
        runtime.play_state is PlayState.FINISHED
        or local_time >= config.total_duration + config.end_delay
    )

    return TimingSample(
        elapsed=elapsed,
        local_time=local_time,
        iteration=iteration,
        iteration_progress=iteration_progress,
        progress=progress,
        is_finished=is_finished,
    )


__all__ = [
    "PlayState",
    "AnimationRuntime",
    "TimingSample",
    "elapsed_time",
    "iteration_at",
    "is_reversed",
    "sample_timing",
]
