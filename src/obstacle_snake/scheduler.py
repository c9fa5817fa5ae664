# scheduler.py
"""
Periodic tick schedulers.

Both implement the same two calls the session relies on:
    schedule_repeating(interval_ms, callback) -> handle
    cancel(handle)
A cancelled handle never fires again, including a tick that was already
due but not yet delivered.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

import pygame  # type: ignore

logger = logging.getLogger(__name__)

Callback = Callable[[], None]

TICK_EVENT = pygame.USEREVENT + 1


class PygameScheduler:
    """
    Timer backed by pygame.time.set_timer. Each schedule posts TICK_EVENT
    tagged with its handle; the main loop feeds events to dispatch(), which
    drops events belonging to cancelled handles.
    """

    def __init__(self, event_type: int = TICK_EVENT):
        self.event_type = event_type
        self._ids = itertools.count(1)
        self._callbacks: Dict[int, Callback] = {}

    def schedule_repeating(self, interval_ms: int, callback: Callback) -> int:
        handle = next(self._ids)
        self._callbacks[handle] = callback
        pygame.time.set_timer(pygame.event.Event(self.event_type, handle=handle), interval_ms)
        return handle

    def cancel(self, handle: int) -> None:
        if self._callbacks.pop(handle, None) is None:
            return
        pygame.time.set_timer(self.event_type, 0)
        # Drop ticks already sitting in the queue for the old interval
        pygame.event.clear(self.event_type)

    def dispatch(self, event) -> bool:
        """Run the callback for a tick event. Returns True if the event was a tick."""
        if event.type != self.event_type:
            return False
        callback = self._callbacks.get(getattr(event, "handle", None))
        if callback is not None:
            callback()
        return True


@dataclass
class _Timer:
    interval_ms: int
    callback: Callback
    next_due: int


class ManualScheduler:
    """Deterministic virtual clock: time only moves when advance() is called."""

    def __init__(self):
        self.now = 0
        self._ids = itertools.count(1)
        self._timers: Dict[int, _Timer] = {}
        self.fired: List[int] = []  # handle of every tick delivered, in order

    def schedule_repeating(self, interval_ms: int, callback: Callback) -> int:
        if interval_ms < 1:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        handle = next(self._ids)
        self._timers[handle] = _Timer(interval_ms, callback, self.now + interval_ms)
        return handle

    def cancel(self, handle: int) -> None:
        self._timers.pop(handle, None)

    @property
    def active(self) -> Dict[int, int]:
        """handle -> interval of every live timer."""
        return {h: t.interval_ms for h, t in self._timers.items()}

    def advance(self, ms: int) -> int:
        """Move the clock forward, firing due ticks in time order. Returns ticks fired."""
        end = self.now + ms
        count = 0
        while True:
            due = [(t.next_due, h) for h, t in self._timers.items() if t.next_due <= end]
            if not due:
                break
            when, handle = min(due)
            timer = self._timers[handle]
            self.now = when
            timer.next_due = when + timer.interval_ms
            self.fired.append(handle)
            count += 1
            timer.callback()
        self.now = end
        return count
