"""Config loader — YAML to dataclasses."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class DeckConfig:
    brightness: int = 80


@dataclass
class TimingConfig:
    highlight_ms: int = 300
    sequence_delay_ms: int = 800
    round_pause_ms: int = 1000
    input_highlight_ms: int = 150

    def validate(self) -> None:
        for name in ("highlight_ms", "sequence_delay_ms", "round_pause_ms", "input_highlight_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"timing.{name} must not be negative")
        if self.sequence_delay_ms < self.highlight_ms:
            raise ValueError("timing.sequence_delay_ms must be >= timing.highlight_ms")


@dataclass
class SoundConfig:
    enabled: bool = True
    volume: float = 0.3
    command: str = "afplay"


@dataclass
class AppConfig:
    deck: DeckConfig = field(default_factory=DeckConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    sound: SoundConfig = field(default_factory=SoundConfig)


def load_config(path: Path) -> AppConfig:
    """Load config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(raw).__name__}")

    deck = DeckConfig(**(raw.get("deck") or {}))
    timing = TimingConfig(**(raw.get("timing") or {}))
    sound = SoundConfig(**(raw.get("sound") or {}))
    timing.validate()

    return AppConfig(deck=deck, timing=timing, sound=sound)
