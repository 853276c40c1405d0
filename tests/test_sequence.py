"""Tests for the sequence engine."""

import random

from genius.sequence import HIGHLIGHT_DURATION, SEQUENCE_DELAY, SequenceEngine
from genius.symbols import ALPHABET, Symbol


def test_generate_next_grows_by_one():
    engine = SequenceEngine(rng=random.Random(7))
    for n in range(1, 21):
        symbol = engine.generate_next()
        assert len(engine) == n
        assert symbol in ALPHABET
        assert engine[n - 1] is symbol
    assert all(s in ALPHABET for s in engine.symbols)


def test_seeded_engines_agree():
    a = SequenceEngine(rng=random.Random(42))
    b = SequenceEngine(rng=random.Random(42))
    for _ in range(10):
        a.generate_next()
        b.generate_next()
    assert a.symbols == b.symbols


def test_on_extend_sees_appended_symbol():
    engine = SequenceEngine(rng=random.Random(1))
    seen = []
    engine.on_extend(lambda symbol: seen.append((symbol, len(engine))))
    first = engine.generate_next()
    second = engine.generate_next()
    assert seen == [(first, 1), (second, 2)]


def test_playback_plan_timing():
    engine = SequenceEngine(rng=random.Random(3))
    for _ in range(3):
        engine.generate_next()

    plan = engine.build_playback_plan()

    assert [step.symbol for step in plan] == list(engine.symbols)
    assert all(step.highlight_ms == HIGHLIGHT_DURATION for step in plan)
    assert [step.gap_ms for step in plan] == [
        SEQUENCE_DELAY - HIGHLIGHT_DURATION,
        SEQUENCE_DELAY - HIGHLIGHT_DURATION,
        0,
    ]


def test_playback_plan_custom_timing():
    engine = SequenceEngine(rng=random.Random(3), highlight_ms=100, sequence_delay_ms=250)
    engine.generate_next()
    engine.generate_next()
    plan = engine.build_playback_plan()
    assert [(s.highlight_ms, s.gap_ms) for s in plan] == [(100, 150), (100, 0)]


def test_empty_plan():
    assert SequenceEngine().build_playback_plan() == []


def test_reset_clears_sequence():
    engine = SequenceEngine(rng=random.Random(5))
    engine.generate_next()
    engine.generate_next()
    engine.reset()
    assert len(engine) == 0
    assert engine.symbols == ()


def test_symbols_is_a_copy():
    engine = SequenceEngine(rng=random.Random(5))
    engine.generate_next()
    snapshot = engine.symbols
    engine.generate_next()
    assert len(snapshot) == 1


def test_alphabet_has_four_colors():
    assert ALPHABET == (Symbol.GREEN, Symbol.RED, Symbol.YELLOW, Symbol.BLUE)
