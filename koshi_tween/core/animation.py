"""
Animation - playback controller for a single keyframe animation.

Owns the runtime state, registers with the injected frame clock, samples
the timing model and interpolator on every frame and hands each value to
the output callback. Completion is reported through a Completion cell.
"""

import logging
import math
from typing import Any, Callable, Hashable, Mapping, Optional, Sequence, Union

from .clock import FrameClock
from .completion import Completion
from .config import DEFAULTS, AnimationConfig, AnimationOptions
from .exceptions import AnimationCancelled, InvalidStateError
from .timing import AnimationRuntime, PlayState, TimingSample, elapsed_time, sample_timing

logger = logging.getLogger(__name__)

OutputCallback = Callable[[float], None]


class Animation:
    """
    Time-driven keyframe animation.

    The animation starts playing as soon as it is constructed. Values reach
    `output` once per frame, in timestamp order, until the animation
    finishes or is cancelled.

    Args:
        output: Receives every sampled value
        keyframes: Values to pass through, at least two
        options: AnimationOptions, a mapping of option names, or None
        clock: Frame clock that schedules ticks and supplies time (ms)

    Raises:
        ConfigurationError: malformed keyframes or options; nothing is scheduled
    """

    def __init__(
        self,
        output: OutputCallback,
        keyframes: Sequence[Any] = DEFAULTS["keyframes"],
        options: Union[AnimationOptions, Mapping[str, Any], None] = None,
        *,
        clock: FrameClock,
    ):
        self._output = output
        self._clock = clock
        self._config = AnimationConfig.build(keyframes, options)
        self._runtime = AnimationRuntime()
        self._frame_handle: Optional[Hashable] = None
        self._completion = Completion()
        self.play()

    def __repr__(self) -> str:
        return (
            f"<Animation {self._runtime.play_state.value} "
            f"t={self._runtime.t:.1f}ms rate={self._runtime.rate}>"
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def config(self) -> AnimationConfig:
        return self._config

    @property
    def finished(self) -> Completion:
        """Resolves with the final value, or rejects with AnimationCancelled."""
        return self._completion

    @property
    def play_state(self) -> PlayState:
        return self._runtime.play_state

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def play(self) -> None:
        """Start, or resume from pause without skipping the paused time."""
        rt = self._runtime
        if self._completion.done():
            logger.debug("play() ignored, animation already settled as %s", rt.play_state.value)
            return
        if rt.play_state is PlayState.RUNNING:
            return

        now = self._clock.now()
        if rt.hold_time is not None:
            if rt.rate != 0:
                rt.start_time = now - rt.hold_time / rt.rate
                rt.hold_time = None
        elif rt.pause_time is not None:
            rt.start_time = now - (rt.pause_time - rt.start_time)
        elif rt.start_time is None:
            rt.start_time = now

        rt.pause_time = None
        rt.play_state = PlayState.RUNNING
        logger.debug("Animation playing from t=%.1fms", rt.t)
        self._schedule()

    def pause(self) -> None:
        """Freeze sampling at the current instant. No output until play()."""
        rt = self._runtime
        if rt.play_state is PlayState.PAUSED:
            return
        if self._completion.done():
            logger.debug("pause() ignored, animation already settled as %s", rt.play_state.value)
            return

        rt.play_state = PlayState.PAUSED
        rt.pause_time = self._clock.now()
        self._cancel_frame()
        logger.debug("Animation paused at t=%.1fms", rt.t)

    def finish(self) -> None:
        """Jump to the end, deliver the final value now and resolve completion."""
        if math.isinf(self._config.total_duration):
            raise InvalidStateError("Cannot finish an endlessly repeating animation")
        if self._completion.done():
            logger.debug("finish() ignored, animation already settled")
            return

        self._runtime.play_state = PlayState.FINISHED
        self._cancel_frame()
        self._tick(self._clock.now())

    def cancel(self) -> None:
        """
        Stop immediately and restore the value at the cancel time.

        The cancel time is local time 0 unless commit() captured another.
        Completion is rejected with AnimationCancelled.
        """
        rt = self._runtime
        if rt.play_state is PlayState.IDLE and self._completion.done():
            logger.debug("cancel() ignored, animation already cancelled")
            return
        rt.play_state = PlayState.IDLE
        self._cancel_frame()

        rt.pause_time = None
        rt.hold_time = rt.cancel_timestamp
        _, value = self._render(self._clock.now())
        self._output(value)

        if self._completion.reject(AnimationCancelled(current_time=rt.t)):
            logger.debug("Animation cancelled, restored value %s", value)

    def reverse(self) -> None:
        """Flip the playback rate, continuing backwards from the current time."""
        self.playback_rate = -self._runtime.rate

    def commit(self) -> None:
        """Capture the current time so a later cancel() holds today's value."""
        rt = self._runtime
        rt.cancel_timestamp = elapsed_time(self._clock.now(), rt)

    # ------------------------------------------------------------------
    # Seekable properties
    # ------------------------------------------------------------------

    @property
    def current_time(self) -> float:
        """Elapsed time (ms) at the last sample, before delay and looping."""
        return self._runtime.t

    @current_time.setter
    def current_time(self, t: float) -> None:
        self._seek(float(t))

    @property
    def playback_rate(self) -> float:
        return self._runtime.rate

    @playback_rate.setter
    def playback_rate(self, rate: float) -> None:
        # Keep the elapsed time continuous; only future progress changes speed
        rt = self._runtime
        elapsed = elapsed_time(self._clock.now(), rt)
        rt.rate = float(rate)
        self._seek(elapsed)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def _seek(self, elapsed: float) -> None:
        rt = self._runtime
        if rt.play_state is PlayState.PAUSED or rt.rate == 0:
            rt.hold_time = elapsed
        else:
            rt.hold_time = None
            rt.start_time = self._clock.now() - elapsed / rt.rate
        rt.t = elapsed

    def _render(self, timestamp: float):
        sample: TimingSample = sample_timing(timestamp, self._config, self._runtime)
        self._runtime.t = sample.elapsed
        return sample, self._config.interpolate(sample.progress)

    def _tick(self, timestamp: float) -> None:
        self._frame_handle = None
        sample, value = self._render(timestamp)
        self._output(value)

        rt = self._runtime
        if sample.is_finished:
            rt.play_state = PlayState.FINISHED
            self._cancel_frame()
            if self._completion.resolve(value):
                logger.debug("Animation finished on iteration %d with value %s", sample.iteration, value)
        elif rt.play_state is PlayState.RUNNING:
            self._schedule()

    def _schedule(self) -> None:
        if self._frame_handle is None:
            self._frame_handle = self._clock.schedule_frame(self._tick)

    def _cancel_frame(self) -> None:
        if self._frame_handle is not None:
            self._clock.cancel_frame(self._frame_handle)
            self._frame_handle = None


__all__ = [
    "OutputCallback",
    "Animation",
]
