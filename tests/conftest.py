"""Shared fixtures: a hand-cranked scheduler and a recording sound player."""

from unittest.mock import MagicMock

import pytest

from genius.controller import GameController, HighScore
from genius.sequence import SequenceEngine


class Handle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler that runs nothing until the test says so."""

    def __init__(self):
        self.playbacks: list[tuple] = []
        self.delays: list[tuple] = []

    def play(self, plan, on_highlight, on_clear, on_done):
        handle = Handle()
        self.playbacks.append((plan, on_highlight, on_clear, on_done, handle))
        return handle

    def call_later(self, delay_ms, callback):
        handle = Handle()
        self.delays.append((delay_ms, callback, handle))
        return handle

    def run_playbacks(self, include_cancelled=False):
        """Run every pending playback to completion."""
        pending, self.playbacks = self.playbacks, []
        for plan, on_highlight, on_clear, on_done, handle in pending:
            if handle.cancelled and not include_cancelled:
                continue
            for step in plan:
                on_highlight(step.symbol)
                on_clear()
            on_done()

    def run_delays(self, delay_ms=None, include_cancelled=False):
        """Fire pending delays (optionally only those of one duration)."""
        keep, fire = [], []
        for item in self.delays:
            (fire if delay_ms is None or item[0] == delay_ms else keep).append(item)
        self.delays = keep
        for _, callback, handle in fire:
            if handle.cancelled and not include_cancelled:
                continue
            callback()


class ScriptedRng:
    """Stands in for random.Random; choice() returns symbols from a script."""

    def __init__(self, symbols):
        self.symbols = list(symbols)

    def choice(self, seq):
        return self.symbols.pop(0)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sound():
    return MagicMock()


@pytest.fixture
def make_game(scheduler, sound):
    """Build a controller whose sequence follows the given symbols."""

    def _make(symbols, high_score=0, **kwargs):
        engine = SequenceEngine(rng=ScriptedRng(symbols))
        return GameController(
            engine=engine,
            sound=sound,
            scheduler=scheduler,
            high_score=HighScore(high_score),
            **kwargs,
        )

    return _make
