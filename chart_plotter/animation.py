"""
animation.py — Animation driver: one cancellable frame task per chart

This file contains ONLY:
- FrameClock protocol + MonotonicClock (time source / frame pacing)
- AnimationTask: handle of one running animation (cancel, join, cancel_and_join)
- ChartAnimator: runs at most one AnimationTask at a time on a single worker thread

Cancellation is cooperative: the flag is checked before each frame, so a
cancelled task never publishes another frame once cancel() has returned and the
frame in progress (if any) has finished.
"""

from __future__ import annotations

import concurrent.futures
import threading
import time
from typing import Callable, Optional, Protocol

from .config import settings
from .errors import require
from .utils import setup_logger

logger = setup_logger(__name__)

FrameCallback = Callable[[float], None]


class FrameClock(Protocol):
    def now(self) -> float:
        """Seconds, monotonic."""
        ...

    def sleep(self, seconds: float) -> None:
        ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class AnimationTask:
    def __init__(self) -> None:
        self._future: Optional[concurrent.futures.Future] = None
        self._cancelled = threading.Event()
        self.thread_id: Optional[int] = None

    def attach(self, future: concurrent.futures.Future) -> None:
        self._future = future

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def is_done(self) -> bool:
        return self._future.done()

    def cancel(self) -> None:
        self._cancelled.set()
        # Not started yet -> never starts.
        self._future.cancel()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the task to exit. Errors raised by a frame are re-raised here."""
        if self.thread_id == threading.get_ident():
            # Called from one of our own frames; waiting would deadlock.
            return
        concurrent.futures.wait([self._future], timeout=timeout)
        if self._future.done() and not self._future.cancelled():
            self._future.result()

    def cancel_and_join(self, timeout: Optional[float] = None) -> None:
        self.cancel()
        self.join(timeout)


class ChartAnimator:
    def __init__(
        self,
        duration_ms: float = settings.ANIMATION_DURATION_MS,
        frame_interval_ms: float = settings.ANIMATION_FRAME_INTERVAL_MS,
        clock: Optional[FrameClock] = None,
    ):
        require(duration_ms >= 0, "Animation duration cannot be negative.")
        require(frame_interval_ms > 0, "Frame interval must be positive.")
        self.duration = duration_ms / 1000.0
        self.frame_interval = frame_interval_ms / 1000.0
        self.clock: FrameClock = clock or MonotonicClock()
        self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="chart-animation")
        self._lock = threading.Lock()
        self._task: Optional[AnimationTask] = None

    @property
    def current_task(self) -> Optional[AnimationTask]:
        return self._task

    def start(self, on_frame: FrameCallback) -> AnimationTask:
        """Cancel and join the running task (if any), then animate 0 -> 1 calling on_frame per frame."""
        with self._lock:
            self._cancel_and_join_locked()
            task = AnimationTask()
            task.attach(self._executor.submit(self._run, task, on_frame))
            self._task = task
            return task

    def cancel_and_join(self) -> None:
        with self._lock:
            self._cancel_and_join_locked()

    def _cancel_and_join_locked(self) -> None:
        task = self._task
        if task is None:
            return
        if not task.is_done:
            logger.debug("Cancelling the running animation")
        self._task = None
        try:
            task.cancel_and_join()
        except Exception as e:
            # A failed frame never blocks the next animation; join() on the task still raises.
            logger.error(f"Previous animation failed: {e}")

    def _run(self, task: AnimationTask, on_frame: FrameCallback) -> None:
        task.thread_id = threading.get_ident()

        start = self.clock.now()
        frames = 0
        while True:
            if task.is_cancelled:
                logger.debug(f"Animation cancelled after {frames} frames")
                return
            elapsed = self.clock.now() - start
            fraction = 1.0 if self.duration <= 0 else min(1.0, elapsed / self.duration)
            on_frame(fraction)
            frames += 1
            if fraction >= 1.0:
                logger.debug(f"Animation finished in {frames} frames")
                return
            self.clock.sleep(self.frame_interval)

    def shutdown(self) -> None:
        self.cancel_and_join()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "ChartAnimator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
