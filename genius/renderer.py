"""PIL-based key renderers for the game board and HUD."""

from PIL import Image, ImageDraw, ImageFont

from genius.symbols import SYMBOL_COLORS, Symbol

SIZE = (96, 96)
FONT_PATH = "/System/Library/Fonts/Helvetica.ttc"
BG = "#111827"

# Status tiles: background plus (text, font size, color) per line
STATUS_TILES = {
    "start":     ("#065f46", [("PRESS", 16, "white"), ("START", 16, "#34d399")]),
    "retry":     ("#065f46", [("TRY", 16, "white"), ("AGAIN", 16, "#34d399")]),
    "watch":     ("#4c1d95", [("WATCH", 18, "#c4b5fd"), ("...", 18, "#a78bfa")]),
    "your_turn": ("#065f46", [("YOUR", 16, "white"), ("TURN!", 16, "#34d399")]),
    "game_over": ("#7c2d12", [("GAME", 18, "white"), ("OVER", 18, "white")]),
}


def _font(size: int) -> ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(FONT_PATH, size)
    except OSError:
        return ImageFont.load_default()


def _text_tile(bg: str, lines: list[tuple[str, int, str]], size=SIZE, spacing: int = 20) -> Image.Image:
    """Tile with lines stacked `spacing` px apart around the vertical center."""
    img = Image.new("RGB", size, bg)
    d = ImageDraw.Draw(img)
    cx, cy = size[0] // 2, size[1] // 2
    top = cy - spacing * (len(lines) - 1) // 2
    for i, (text, font_size, color) in enumerate(lines):
        d.text((cx, top + spacing * i), text, font=_font(font_size), fill=color, anchor="mm")
    return img


def zone_color(symbol: Symbol, lit: bool) -> str:
    """Bright color when lit, dim otherwise."""
    colors = SYMBOL_COLORS[symbol]
    return colors["color"] if lit else colors["dim"]


def render_zone_tile(symbol: Symbol, lit: bool = False, size=SIZE) -> Image.Image:
    return Image.new("RGB", size, zone_color(symbol, lit))


def render_status(kind: str, size=SIZE) -> Image.Image:
    """One of STATUS_TILES: start, retry, watch, your_turn, game_over."""
    bg, lines = STATUS_TILES[kind]
    return _text_tile(bg, lines, size)


def render_counter(label: str, value: int, color: str = "#ffffff", size=SIZE) -> Image.Image:
    """HUD tile: small gray label over a big number."""
    value_size = 32 if value < 100 else 24
    return _text_tile(BG, [(label, 14, "#9ca3af"), (str(value), value_size, color)], size, spacing=34)


def render_title(size=SIZE) -> Image.Image:
    return _text_tile(BG, [("GENIUS", 16, "#a78bfa")], size)


def render_empty(size=SIZE) -> Image.Image:
    return Image.new("RGB", size, BG)
