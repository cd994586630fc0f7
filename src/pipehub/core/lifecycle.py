"""Process lifecycle handles.

``StopSignal`` is the explicit "please stop" handle created once at startup and
threaded to whoever may request shutdown (OS signal handlers, the async error
handler handed to the runtime). ``ShutdownContext`` is the cancellation handle
given to the runtime while it stops, optionally bounded by a deadline.

Both are safe to share between threads.
"""

from __future__ import annotations

import signal
import threading
import time
from typing import Callable, Iterable, Optional

from pipehub.core.logger import get_logger

logger = get_logger(__name__)

CANCELED = "canceled"
DEADLINE_EXCEEDED = "deadline exceeded"


class ShutdownContext:
    """Cancellation handle with an optional deadline.

    Observers poll :meth:`done` / :meth:`err` or block on :meth:`wait`. The
    first cause to finish the context (explicit cancel or deadline) is the one
    every observer sees; later causes have no effect.

    A context without a deadline never finishes on its own and its
    :meth:`cancel` is a no-op.

    Example:
        >>> with ShutdownContext.with_timeout(10) as ctx:
        ...     client.stop(ctx)
    """

    def __init__(self, timeout: Optional[float] = None, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._err: Optional[str] = None
        self._timer: Optional[threading.Timer] = None
        self.deadline: Optional[float] = None

        if timeout is not None:
            self.deadline = clock() + timeout
            # Timer waits are capped by the platform lock timeout.
            interval = min(max(timeout, 0.0), threading.TIMEOUT_MAX)
            self._timer = threading.Timer(interval, self._finish, args=(DEADLINE_EXCEEDED,))
            self._timer.daemon = True
            self._timer.start()

    @classmethod
    def background(cls) -> "ShutdownContext":
        """A context that never expires."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "ShutdownContext":
        return cls(timeout=seconds)

    def _finish(self, reason: str) -> None:
        with self._lock:
            if self._err is not None:
                return
            self._err = reason
            timer, self._timer = self._timer, None
        if timer is not None and reason != DEADLINE_EXCEEDED:
            timer.cancel()
        self._done.set()

    def cancel(self) -> None:
        if self.deadline is None:
            return
        self._finish(CANCELED)

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the context is finished or ``timeout`` elapses; returns :meth:`done`."""
        return self._done.wait(timeout)

    def err(self) -> Optional[str]:
        with self._lock:
            return self._err

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, ``None`` when there is no deadline."""
        if self.deadline is None:
            return None
        return max(self.deadline - self._clock(), 0.0)

    def __enter__(self) -> "ShutdownContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # type: ignore
        self.cancel()
        return False

    def __repr__(self) -> str:
        if self.deadline is None:
            return "ShutdownContext(background)"
        return f"ShutdownContext(remaining={self.remaining():.3f}s, err={self.err()!r})"


class StopSignal:
    """Idempotent, thread-safe "stop requested" flag carrying the first reason."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[str] = None

    def trigger(self, reason: str = "stop requested") -> bool:
        """Request a stop. Returns ``True`` only for the call that actually triggered it."""
        with self._lock:
            if self._reason is not None:
                return False
            self._reason = reason
        logger.info(f"Stop requested: {reason}")
        self._event.set()
        return True

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)

    @property
    def reason(self) -> Optional[str]:
        with self._lock:
            return self._reason


def install_signal_handlers(
    stop: StopSignal,
    signals: Iterable[int] = (signal.SIGINT, signal.SIGTERM),
) -> None:
    """Route OS signals to ``stop``. Must be called from the main thread."""

    def _handler(signum, frame):  # type: ignore
        stop.trigger(f"received {signal.Signals(signum).name}")

    for signum in signals:
        signal.signal(signum, _handler)
