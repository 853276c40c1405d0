"""Genius on a Stream Deck — presentation and input for the game controller.

Layout (Stream Deck XL, 32 keys):
    row 1 (0-7):   HUD: title, score, best, sequence length, status
    rows 2-3:      four color zones, 2x2 keys each
    row 4 (24-31): START / TRY AGAIN on key 28

Usage:
    genius-deck --config config.yaml
"""

import argparse
import logging
import random
import sys
import threading
from pathlib import Path

from PIL import Image
from StreamDeck.DeviceManager import DeviceManager
from StreamDeck.ImageHelpers import PILHelper

from genius.config import AppConfig, load_config
from genius.controller import GameController, GameOverNotice, GameState, Snapshot
from genius.renderer import render_counter, render_empty, render_status, render_title, render_zone_tile
from genius.sequence import SequenceEngine
from genius.sound import ToneSoundPlayer
from genius.symbols import Symbol

logger = logging.getLogger(__name__)

ZONE_KEYS = {
    Symbol.GREEN:  [8, 9, 16, 17],
    Symbol.RED:    [10, 11, 18, 19],
    Symbol.YELLOW: [12, 13, 20, 21],
    Symbol.BLUE:   [14, 15, 22, 23],
}
KEY_TO_SYMBOL: dict[int, Symbol] = {
    k: symbol for symbol, keys in ZONE_KEYS.items() for k in keys
}
BOTTOM_KEYS = list(range(24, 32))
STATUS_KEY = 7
START_KEY = 28


def find_deck():
    """Find first visual Stream Deck device."""
    decks = DeviceManager().enumerate()
    for deck in decks:
        if deck.is_visual():
            return deck
    return None


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


class DeckGame:
    """Draws controller snapshots on the deck and feeds key presses back."""

    def __init__(self, deck, controller: GameController | None = None):
        self.deck = deck
        self.controller = controller
        self._lit: Symbol | None = None
        self._last: Snapshot | None = None

    def set_key(self, pos: int, img: Image.Image):
        native = PILHelper.to_native_key_format(self.deck, img)
        with self.deck:
            self.deck.set_key_image(pos, native)

    def _draw_zone(self, symbol: Symbol, lit: bool):
        tile = render_zone_tile(symbol, lit)
        for k in ZONE_KEYS[symbol]:
            self.set_key(k, tile)

    def _draw_hud(self, snap: Snapshot):
        self.set_key(0, render_title())
        self.set_key(1, render_counter("SCORE", snap.score))
        self.set_key(2, render_counter("BEST", snap.high_score, "#34d399"))
        self.set_key(3, render_counter("SEQ", snap.sequence_length, "#a78bfa"))
        for k in range(4, STATUS_KEY):
            self.set_key(k, render_empty())

    def _draw_status(self, snap: Snapshot):
        if snap.state is GameState.WATCHING:
            self.set_key(STATUS_KEY, render_status("watch"))
        elif snap.state is GameState.PLAYING:
            self.set_key(STATUS_KEY, render_status("your_turn"))
        elif snap.state is GameState.GAME_OVER:
            self.set_key(STATUS_KEY, render_status("game_over"))
        else:
            self.set_key(STATUS_KEY, render_empty())

        for k in BOTTOM_KEYS:
            if k == START_KEY and snap.state in (GameState.IDLE, GameState.GAME_OVER):
                self.set_key(k, render_status("retry" if snap.state is GameState.GAME_OVER else "start"))
            else:
                self.set_key(k, render_empty())

    def draw_all(self, snap: Snapshot):
        self._lit = snap.active_symbol
        for symbol in ZONE_KEYS:
            self._draw_zone(symbol, symbol is snap.active_symbol)
        self._draw_hud(snap)
        self._draw_status(snap)
        self._last = snap

    def render(self, snap: Snapshot):
        """on_change handler; redraws only what changed."""
        last = self._last
        if last is None:
            self.draw_all(snap)
            return
        if snap.active_symbol is not self._lit:
            if self._lit is not None:
                self._draw_zone(self._lit, False)
            if snap.active_symbol is not None:
                self._draw_zone(snap.active_symbol, True)
            self._lit = snap.active_symbol
        if (snap.score, snap.high_score, snap.sequence_length) != (
                last.score, last.high_score, last.sequence_length):
            self._draw_hud(snap)
        if snap.state is not last.state:
            self._draw_status(snap)
        self._last = snap

    def on_game_over(self, notice: GameOverNotice):
        logger.info("Game over: score %d, best %d", notice.final_score, notice.high_score)
        self.set_key(1, render_counter("SCORE", notice.final_score, "#f87171"))
        self.set_key(2, render_counter("BEST", notice.high_score, "#34d399"))

    def on_key(self, _deck, key: int, pressed: bool):
        if not pressed or self.controller is None:
            return

        if key == START_KEY:
            self.controller.start_game()
            return

        symbol = KEY_TO_SYMBOL.get(key)
        if symbol:
            self.controller.submit_input(symbol)


def build_controller(config: AppConfig, game: DeckGame, sound=None) -> GameController:
    """Wire a controller to the deck with timings from config."""
    timing = config.timing
    engine = SequenceEngine(
        rng=random.Random(),
        highlight_ms=timing.highlight_ms,
        sequence_delay_ms=timing.sequence_delay_ms,
    )
    controller = GameController(
        engine=engine,
        sound=sound,
        round_pause_ms=timing.round_pause_ms,
        input_highlight_ms=timing.input_highlight_ms,
        on_change=game.render,
        on_game_over=game.on_game_over,
    )
    game.controller = controller
    return controller


def main():
    parser = argparse.ArgumentParser(description="Genius memory game for Stream Deck")
    parser.add_argument("--config", default=None, help="Config file path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Config not found: {config_path}")
            sys.exit(1)
        try:
            config = load_config(config_path)
        except (TypeError, ValueError) as exc:
            print(f"Invalid config {config_path}: {exc}")
            sys.exit(1)
    else:
        config = AppConfig()

    deck = find_deck()
    if deck is None:
        print("No Stream Deck found. Is it plugged in?")
        sys.exit(1)

    sound = ToneSoundPlayer(
        command=config.sound.command,
        volume=config.sound.volume,
        enabled=config.sound.enabled,
    )
    if config.sound.enabled:
        try:
            sound.prepare()
            print("Sound effects: ON")
        except OSError as exc:
            logger.warning("Sound generation failed: %s", exc)
            print("Sound effects: OFF")

    deck.open()
    deck.reset()
    deck.set_brightness(config.deck.brightness)
    print(f"Connected: {deck.deck_type()} ({deck.key_count()} keys)")
    print("GENIUS! Press START to begin.")

    game = DeckGame(deck)
    controller = build_controller(config, game, sound=sound)
    game.draw_all(controller.snapshot())
    deck.set_key_callback(game.on_key)

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        print(f"\nBye! Best: {controller.high_score.value} rounds")
    finally:
        controller.abort()
        deck.reset()
        deck.close()
        sound.close()


if __name__ == "__main__":
    main()
