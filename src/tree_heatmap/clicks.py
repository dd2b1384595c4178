"""Turn raw pointer hits into drill-down / drill-up intents.

A hit opens a short window. If no other hit arrives before the window
closes, the hit was a single click and drills down into the cell's node. If
one or more further hits arrive (on any cell), it was a double click and
drills up. Only one window is open at a time; hits during an open window are
counted, never rescheduled.

The deadline is driven by an injected scheduler so the state machine can run
on a real timer thread or be stepped by hand.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
from enum import Enum
from typing import Callable, Optional, Protocol

from .models import Cell, DrillDownIntent, DrillIntent, DrillUpIntent

logger = logging.getLogger(__name__)

DEFAULT_CLICK_WINDOW = 0.3


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs ``callback`` once after ``delay`` seconds unless cancelled."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class ThreadingScheduler:
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.name = "tree-heatmap-click"
        timer.start()
        return timer


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by :meth:`advance`, for single-threaded hosts.

    Nothing fires on its own; the host moves the clock forward and due
    callbacks run synchronously in deadline order.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        handle = _ManualHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _due, _seq, handle, _cb in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every callback now due.

        Returns the number of callbacks run.
        """
        self.now += seconds
        fired = 0
        while self._queue and self._queue[0][0] <= self.now:
            _due, _seq, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            callback()
            fired += 1
        return fired


class ClickState(Enum):
    IDLE = "idle"
    AWAITING_SECOND_CLICK = "awaiting_second_click"


class ClickDisambiguator:
    """Single-click vs double-click state machine for one chart.

    Args:
        on_intent: Receives the resolved intent when the window closes.
        scheduler: Deadline source; defaults to :class:`ThreadingScheduler`.
        window: Window length in seconds.
    """

    def __init__(
        self,
        on_intent: Callable[[DrillIntent], None],
        scheduler: Optional[Scheduler] = None,
        window: float = DEFAULT_CLICK_WINDOW,
    ) -> None:
        self._on_intent = on_intent
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self.window = window

        # Guards the fields below; the threaded scheduler fires off-thread
        self._lock = threading.RLock()
        self._state = ClickState.IDLE
        self._clicks = 0
        self._cell: Optional[Cell] = None
        self._handle: Optional[Cancellable] = None

    @property
    def state(self) -> ClickState:
        with self._lock:
            return self._state

    @property
    def clicks(self) -> int:
        with self._lock:
            return self._clicks

    def pointer_hit(self, cell: Cell) -> None:
        with self._lock:
            self._clicks += 1
            if self._state is ClickState.AWAITING_SECOND_CLICK:
                return
            self._state = ClickState.AWAITING_SECOND_CLICK
            self._cell = cell
            self._handle = self._scheduler.schedule(self.window, self._deadline)

    def cancel(self) -> None:
        """Close a pending window without emitting anything."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._reset()

    def _deadline(self) -> None:
        with self._lock:
            if self._state is ClickState.IDLE or self._cell is None:
                return
            clicks, cell = self._clicks, self._cell
            self._reset()

        intent: DrillIntent
        if clicks == 1:
            intent = DrillDownIntent(cell)
        else:
            intent = DrillUpIntent(cell)
        logger.debug("Resolved %d click(s) on cell %d as %s", clicks, cell.id, type(intent).__name__)
        self._on_intent(intent)

    def _reset(self) -> None:
        self._state = ClickState.IDLE
        self._clicks = 0
        self._cell = None
        self._handle = None
