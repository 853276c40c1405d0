"""Sequence engine — grows the target sequence and plans its playback."""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass

from genius.symbols import ALPHABET, Symbol

HIGHLIGHT_DURATION = 300  # ms a symbol stays lit during playback
SEQUENCE_DELAY = 800      # ms from one symbol's start to the next


@dataclass(frozen=True)
class PlaybackStep:
    symbol: Symbol
    highlight_ms: int
    gap_ms: int


class SequenceEngine:
    """Owns the growing target sequence.

    Listeners registered with on_extend() are called with each new symbol
    right after it is appended.
    """

    def __init__(self, rng: random.Random | None = None,
                 highlight_ms: int = HIGHLIGHT_DURATION,
                 sequence_delay_ms: int = SEQUENCE_DELAY):
        self.rng = rng or random.Random()
        self.highlight_ms = highlight_ms
        self.sequence_delay_ms = sequence_delay_ms
        self._sequence: list[Symbol] = []
        self._listeners: list[Callable[[Symbol], None]] = []

    @property
    def symbols(self) -> tuple[Symbol, ...]:
        return tuple(self._sequence)

    def __len__(self) -> int:
        return len(self._sequence)

    def __getitem__(self, index: int) -> Symbol:
        return self._sequence[index]

    def on_extend(self, callback: Callable[[Symbol], None]) -> None:
        self._listeners.append(callback)

    def generate_next(self) -> Symbol:
        """Append one uniformly random symbol (repeats allowed) and return it."""
        symbol = self.rng.choice(ALPHABET)
        self._sequence.append(symbol)
        for callback in list(self._listeners):
            callback(symbol)
        return symbol

    def build_playback_plan(self) -> list[PlaybackStep]:
        """One step per symbol; no trailing gap after the last one."""
        gap = self.sequence_delay_ms - self.highlight_ms
        last = len(self._sequence) - 1
        return [
            PlaybackStep(symbol, self.highlight_ms, 0 if i == last else gap)
            for i, symbol in enumerate(self._sequence)
        ]

    def reset(self) -> None:
        self._sequence.clear()
