"""Genius Deck: Simon-style memory game engine with a Stream Deck front end."""

from genius.controller import GameController, GameOverNotice, GameState, Snapshot
from genius.sequence import PlaybackStep, SequenceEngine
from genius.symbols import ALPHABET, ERROR_SOUND, Symbol

__all__ = [
    "ALPHABET",
    "ERROR_SOUND",
    "GameController",
    "GameOverNotice",
    "GameState",
    "PlaybackStep",
    "SequenceEngine",
    "Snapshot",
    "Symbol",
]
