"""Playback threads that execute timed plans with cancellable waits."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence

from genius.sequence import PlaybackStep
from genius.symbols import Symbol


class PlaybackThread(threading.Thread):
    """Background thread that walks a playback plan step by step.

    For each step: on_highlight(symbol), wait highlight_ms, on_clear(),
    wait gap_ms. Calls on_done() after the last step. cancel() interrupts
    the current wait and suppresses every later callback.
    """

    def __init__(self, plan: Sequence[PlaybackStep],
                 on_highlight: Callable[[Symbol], None],
                 on_clear: Callable[[], None],
                 on_done: Callable[[], None]):
        super().__init__(daemon=True)
        self.plan = list(plan)
        self.on_highlight = on_highlight
        self.on_clear = on_clear
        self.on_done = on_done
        self._stop_event = threading.Event()

    def cancel(self):
        """Signal the playback to stop."""
        self._stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def _wait(self, ms: int) -> bool:
        """Sleep for ms; False if cancelled meanwhile."""
        if ms > 0:
            self._stop_event.wait(ms / 1000)
        return not self._stop_event.is_set()

    def run(self):
        for step in self.plan:
            if self.cancelled:
                return
            self.on_highlight(step.symbol)
            if not self._wait(step.highlight_ms):
                return
            self.on_clear()
            if not self._wait(step.gap_ms):
                return
        if not self.cancelled:
            self.on_done()


class DelayThread(threading.Thread):
    """One-shot cancellable delay, then callback()."""

    def __init__(self, delay_ms: int, callback: Callable[[], None]):
        super().__init__(daemon=True)
        self.delay_ms = delay_ms
        self.callback = callback
        self._stop_event = threading.Event()

    def cancel(self):
        self._stop_event.set()

    def run(self):
        if self.delay_ms > 0:
            self._stop_event.wait(self.delay_ms / 1000)
        if not self._stop_event.is_set():
            self.callback()


class ThreadScheduler:
    """Starts playback and delays on daemon threads.

    Both methods return a handle with cancel().
    """

    def play(self, plan: Sequence[PlaybackStep],
             on_highlight: Callable[[Symbol], None],
             on_clear: Callable[[], None],
             on_done: Callable[[], None]) -> PlaybackThread:
        thread = PlaybackThread(plan, on_highlight, on_clear, on_done)
        thread.start()
        return thread

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> DelayThread:
        thread = DelayThread(delay_ms, callback)
        thread.start()
        return thread
