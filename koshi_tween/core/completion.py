"""Single-writer completion cell for an animation's final value."""

import logging
from enum import Enum
from typing import Any, Callable, List, Optional

from .exceptions import AnimationCancelled, InvalidStateError

logger = logging.getLogger(__name__)


class CompletionState(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class Completion:
    """
    Set-once result: resolved with a value or rejected with an error.

    Only the first resolve()/reject() has any effect. Listeners added
    after settling are called immediately.
    """

    def __init__(self):
        self._state = CompletionState.PENDING
        self._value: Any = None
        self._error: Optional[BaseException] = None
        self._callbacks: List[Callable[['Completion'], None]] = []

    def __repr__(self) -> str:
        return f"<Completion {self._state.value}>"

    @property
    def state(self) -> CompletionState:
        return self._state

    def done(self) -> bool:
        return self._state is not CompletionState.PENDING

    def cancelled(self) -> bool:
        """True when rejected with AnimationCancelled."""
        return isinstance(self._error, AnimationCancelled)

    def resolve(self, value: Any) -> bool:
        if self.done():
            return False
        self._state = CompletionState.RESOLVED
        self._value = value
        self._notify()
        return True

    def reject(self, error: BaseException) -> bool:
        if self.done():
            return False
        self._state = CompletionState.REJECTED
        self._error = error
        self._notify()
        return True

    def result(self) -> Any:
        """Final value; raises the rejection error, or InvalidStateError if pending."""
        if self._state is CompletionState.PENDING:
            raise InvalidStateError("Completion has not settled")
        if self._error is not None:
            raise self._error
        return self._value

    def exception(self) -> Optional[BaseException]:
        if self._state is CompletionState.PENDING:
            raise InvalidStateError("Completion has not settled")
        return self._error

    def add_done_callback(self, fn: Callable[['Completion'], None]) -> None:
        if self.done():
            self._invoke(fn)
        else:
            self._callbacks.append(fn)

    def _notify(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            self._invoke(fn)

    def _invoke(self, fn: Callable[['Completion'], None]) -> None:
        try:
            fn(self)
        except Exception:
            logger.exception("Completion callback %r raised", fn)


__all__ = [
    "CompletionState",
    "Completion",
]
