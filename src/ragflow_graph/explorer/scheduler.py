"""
Frame scheduling for the layout simulation.

The simulation advances one tick per frame. Frames are requested from a
scheduler and each request returns a handle whose ``cancel()`` guarantees the
callback never runs. Two schedulers are provided:

- AsyncioFrameScheduler: real frames on the running asyncio loop.
- ManualFrameScheduler: frames pumped explicitly, for headless layout
  before painting a static figure.
"""

import asyncio
import logging
from collections import deque
from typing import Callable, Deque, Optional, Protocol

logger = logging.getLogger(__name__)


class FrameHandle(Protocol):
    def cancel(self) -> None: ...


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> FrameHandle: ...


class AsyncioFrameScheduler:
    """Schedules frame callbacks on an asyncio event loop."""

    def __init__(self, fps: float = 60.0, loop: Optional[asyncio.AbstractEventLoop] = None):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.interval = 1.0 / fps
        self._loop = loop

    def request_frame(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(self.interval, callback)


class _ManualHandle:
    __slots__ = ("callback", "cancelled")

    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualFrameScheduler:
    """Runs frame callbacks only when pumped.

    Each ``run_frame()`` call runs the callbacks that were pending when it
    started; callbacks requested during the frame wait for the next one.
    """

    def __init__(self):
        self._queue: Deque[_ManualHandle] = deque()
        self.frames_run = 0

    def request_frame(self, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(callback)
        self._queue.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._queue if not h.cancelled)

    def run_frame(self) -> int:
        """Run one frame. Returns the number of callbacks executed."""
        batch = list(self._queue)
        self._queue.clear()
        ran = 0
        for handle in batch:
            if handle.cancelled:
                continue
            handle.callback()
            ran += 1
        self.frames_run += 1
        return ran

    def run_until_idle(self, max_frames: int = 1000) -> int:
        """Pump frames until nothing is pending or max_frames is reached.

        Returns the number of frames run.
        """
        frames = 0
        while self.pending and frames < max_frames:
            self.run_frame()
            frames += 1
        if self.pending:
            logger.debug(f"Scheduler still busy after {max_frames} frames")
        return frames
