"""Game controller — the Idle / Watching / Playing / GameOver state machine.

Owns score, high score and the player's input buffer, drives the
SequenceEngine and a scheduler, and reports every mutation to the
presentation through on_change(Snapshot).

Round flow:
    start_game()           -> WATCHING, sequence grows by one
    sequence grows         -> playback plan runs on the scheduler
    playback done          -> PLAYING, buffer cleared
    submit_input() x N     -> each press checked against the same index
      full match           -> score + 1, WATCHING, pause, sequence grows
      mismatch             -> GAME_OVER, high score, on_game_over(notice)

Every scheduled continuation carries the round token current when it was
scheduled; start_game() and abort() bump the token so late callbacks from
an earlier round are dropped.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from genius.scheduler import ThreadScheduler
from genius.sequence import HIGHLIGHT_DURATION, SequenceEngine
from genius.sound import SilentSoundPlayer, SoundPlayer
from genius.symbols import ERROR_SOUND, Symbol

logger = logging.getLogger(__name__)

ROUND_PAUSE = 1000                          # ms between a completed round and the next symbol
INPUT_HIGHLIGHT = HIGHLIGHT_DURATION // 2   # ms a pressed zone stays lit


class GameState(Enum):
    IDLE = "idle"
    WATCHING = "watching"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Snapshot:
    state: GameState
    score: int
    high_score: int
    active_symbol: Symbol | None
    sequence_length: int


@dataclass(frozen=True)
class GameOverNotice:
    final_score: int
    high_score: int


class HighScore:
    """Best score seen during this process. Never decreases."""

    def __init__(self, value: int = 0):
        self.value = value

    def record(self, score: int) -> int:
        """Keep score if it beats the current best; return the best."""
        if score > self.value:
            self.value = score
        return self.value


class GameController:
    def __init__(self, engine: SequenceEngine | None = None,
                 sound: SoundPlayer | None = None,
                 scheduler=None,
                 high_score: HighScore | None = None,
                 round_pause_ms: int = ROUND_PAUSE,
                 input_highlight_ms: int = INPUT_HIGHLIGHT,
                 on_change: Callable[[Snapshot], None] | None = None,
                 on_game_over: Callable[[GameOverNotice], None] | None = None):
        self.engine = engine if engine is not None else SequenceEngine()
        self.sound = sound if sound is not None else SilentSoundPlayer()
        self.scheduler = scheduler if scheduler is not None else ThreadScheduler()
        self.high_score = high_score if high_score is not None else HighScore()
        self.round_pause_ms = round_pause_ms
        self.input_highlight_ms = input_highlight_ms
        self.on_change = on_change
        self.on_game_over = on_game_over

        self.state = GameState.IDLE
        self.score = 0
        self.player_buffer: list[Symbol] = []
        self.active_symbol: Symbol | None = None
        self.lock = threading.RLock()

        self._round_token = 0
        self._playback = None
        self._advance = None
        self._flash = None

        self.engine.on_extend(self._on_sequence_extended)

    # ── public API ──────────────────────────────────────────────────

    @property
    def sequence(self) -> tuple[Symbol, ...]:
        return self.engine.symbols

    def snapshot(self) -> Snapshot:
        with self.lock:
            return Snapshot(
                state=self.state,
                score=self.score,
                high_score=self.high_score.value,
                active_symbol=self.active_symbol,
                sequence_length=len(self.engine),
            )

    def start_game(self) -> bool:
        """Begin a new game from IDLE or GAME_OVER. Ignored otherwise."""
        with self.lock:
            if self.state not in (GameState.IDLE, GameState.GAME_OVER):
                logger.debug("start_game ignored in state %s", self.state.value)
                return False
            self._round_token += 1
            self._cancel_pending()
            self.engine.reset()
            self.player_buffer.clear()
            self.score = 0
            self.active_symbol = None
            self.state = GameState.WATCHING
            logger.info("New game (round token %d)", self._round_token)
            self._emit()
            self.engine.generate_next()
            self._emit()
            return True

    def submit_input(self, symbol: Symbol) -> bool:
        """Handle one player press. Returns False when the press is ignored."""
        with self.lock:
            if self.state is not GameState.PLAYING:
                logger.debug("Input %s ignored in state %s", symbol.value, self.state.value)
                return False
            if len(self.player_buffer) >= len(self.engine):
                return False

            self._play_sound(symbol.value)
            self._flash_input(symbol)
            self.player_buffer.append(symbol)

            index = len(self.player_buffer) - 1
            expected = self.engine[index]
            if self.player_buffer[index] is not expected:
                self._sequence_mismatch(index, expected, symbol)
            elif len(self.player_buffer) == len(self.engine):
                self._round_complete()
            else:
                self._emit()
            return True

    def abort(self) -> None:
        """Drop back to IDLE, discarding playback and pending timers."""
        with self.lock:
            self._round_token += 1
            self._cancel_pending()
            self.player_buffer.clear()
            self.active_symbol = None
            self.state = GameState.IDLE
            self._emit()

    # ── transitions ─────────────────────────────────────────────────

    def _sequence_mismatch(self, index: int, expected: Symbol, got: Symbol):
        logger.info("Mismatch at position %d: expected %s, got %s",
                    index + 1, expected.value, got.value)
        self._play_sound(ERROR_SOUND)
        self.state = GameState.GAME_OVER
        best = self.high_score.record(self.score)
        self._emit()
        if self.on_game_over:
            self.on_game_over(GameOverNotice(final_score=self.score, high_score=best))

    def _round_complete(self):
        self.score += 1
        self.state = GameState.WATCHING
        logger.info("Round complete, score %d", self.score)
        self._emit()
        token = self._round_token
        self._advance = self.scheduler.call_later(
            self.round_pause_ms, lambda: self._advance_round(token))

    def _advance_round(self, token: int):
        with self.lock:
            if token != self._round_token or self.state is not GameState.WATCHING:
                return
            self._advance = None
            self.engine.generate_next()
            self._notify()

    def _on_sequence_extended(self, symbol: Symbol):
        with self.lock:
            if self.state is GameState.WATCHING and len(self.engine) > 0:
                self._begin_playback()

    # ── playback ────────────────────────────────────────────────────

    def _begin_playback(self):
        plan = self.engine.build_playback_plan()
        if not plan:
            return
        self._cancel(self._flash)
        self._cancel(self._playback)
        token = self._round_token
        logger.debug("Playing back %d symbols", len(plan))
        self._playback = self.scheduler.play(
            plan,
            on_highlight=lambda s: self._playback_highlight(token, s),
            on_clear=lambda: self._playback_clear(token),
            on_done=lambda: self._playback_done(token),
        )

    def _playback_highlight(self, token: int, symbol: Symbol):
        with self.lock:
            if token != self._round_token:
                return
            self.active_symbol = symbol
            self._play_sound(symbol.value)
            self._notify()

    def _playback_clear(self, token: int):
        with self.lock:
            if token != self._round_token:
                return
            self.active_symbol = None
            self._notify()

    def _playback_done(self, token: int):
        with self.lock:
            if token != self._round_token or self.state is not GameState.WATCHING:
                return
            self._playback = None
            self.player_buffer.clear()
            self.active_symbol = None
            self.state = GameState.PLAYING
            self._notify()

    def _flash_input(self, symbol: Symbol):
        self._cancel(self._flash)
        self.active_symbol = symbol
        token = self._round_token
        self._flash = self.scheduler.call_later(
            self.input_highlight_ms, lambda: self._clear_flash(token, symbol))

    def _clear_flash(self, token: int, symbol: Symbol):
        with self.lock:
            if token != self._round_token or self.active_symbol is not symbol:
                return
            if self.state is GameState.WATCHING and self._playback is not None:
                return
            self._flash = None
            self.active_symbol = None
            self._notify()

    # ── helpers ─────────────────────────────────────────────────────

    def _play_sound(self, sound_id: str):
        """Fire-and-forget; a failing sound never touches game state."""
        try:
            self.sound.play(sound_id)
        except Exception:
            logger.warning("Sound %r failed", sound_id, exc_info=True)

    def _emit(self):
        if self.on_change:
            self.on_change(self.snapshot())

    def _notify(self):
        """_emit() for scheduler threads, where no caller can see a listener error."""
        try:
            self._emit()
        except Exception:
            logger.exception("on_change listener failed")

    @staticmethod
    def _cancel(handle):
        if handle is not None:
            handle.cancel()

    def _cancel_pending(self):
        for handle in (self._playback, self._advance, self._flash):
            self._cancel(handle)
        self._playback = self._advance = self._flash = None
