"""
Frame clock collaborator.

Animations never reach for a global scheduler; they are handed a FrameClock.
ManualFrameClock advances time synchronously, which makes it suitable both
for tests and for baking animations offline at a fixed frame rate.
"""

import itertools
from typing import Callable, Dict, Hashable, Protocol, runtime_checkable

FrameCallback = Callable[[float], None]


@runtime_checkable
class FrameClock(Protocol):
    """Per-refresh callback scheduler with a monotonic time source (ms)."""

    def now(self) -> float:
        ...

    def schedule_frame(self, callback: FrameCallback) -> Hashable:
        ...

    def cancel_frame(self, handle: Hashable) -> None:
        ...


class ManualFrameClock:
    """
    Deterministic frame clock driven by explicit time steps.

    Each advance() fires the callbacks that were scheduled before it, in
    registration order. Callbacks scheduled while firing wait for the next
    advance, as they would for the next display refresh.
    """

    def __init__(self, start: float = 0.0):
        self.time = float(start)
        self.frame_count = 0
        self._callbacks: Dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)

    def now(self) -> float:
        return self.time

    def schedule_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._callbacks)

    def advance(self, ms: float = 0.0) -> int:
        """Move time forward by `ms` and fire one frame. Returns callbacks run."""
        if ms < 0:
            raise ValueError("Clock time is monotonic; cannot advance by a negative amount")
        self.time += ms
        due = sorted(self._callbacks)
        fired = 0
        for handle in due:
            # A callback earlier in this frame may have cancelled this one
            callback = self._callbacks.pop(handle, None)
            if callback is None:
                continue
            callback(self.time)
            fired += 1
        self.frame_count += 1
        return fired

    def run(self, frame_ms: float, max_frames: int = 100000) -> int:
        """Fire frames every `frame_ms` until nothing is scheduled. Returns frames run."""
        frames = 0
        while self._callbacks and frames < max_frames:
            self.advance(frame_ms)
            frames += 1
        return frames


__all__ = [
    "FrameCallback",
    "FrameClock",
    "ManualFrameClock",
]
