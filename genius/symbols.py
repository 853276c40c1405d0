"""The four game colors and the sound ids that go with them."""

from enum import Enum


class Symbol(Enum):
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"
    BLUE = "blue"


ALPHABET: tuple[Symbol, ...] = tuple(Symbol)

# Sound id for a wrong press. Symbols use their value as sound id.
ERROR_SOUND = "error"

# Zone colors: bright when lit, dim otherwise
SYMBOL_COLORS = {
    Symbol.GREEN:  {"color": "#22c55e", "dim": "#14532d"},
    Symbol.RED:    {"color": "#ef4444", "dim": "#7f1d1d"},
    Symbol.YELLOW: {"color": "#eab308", "dim": "#713f12"},
    Symbol.BLUE:   {"color": "#3b82f6", "dim": "#1e3a5f"},
}

# Tone frequency (Hz) per symbol
SYMBOL_NOTES = {
    Symbol.GREEN: 392,
    Symbol.RED: 264,
    Symbol.YELLOW: 523,
    Symbol.BLUE: 330,
}
