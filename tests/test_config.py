"""Tests for config loader — YAML to dataclasses."""

import tempfile
from pathlib import Path

import pytest
import yaml


def _write(raw) -> Path:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(raw, f)
        return Path(f.name)


def test_load_config_parses_sections():
    """load_config should parse YAML into the config dataclasses."""
    path = _write({
        "deck": {"brightness": 50},
        "timing": {"highlight_ms": 200, "sequence_delay_ms": 600, "round_pause_ms": 500},
        "sound": {"enabled": False, "volume": 0.5, "command": "aplay"},
    })

    from genius.config import load_config

    cfg = load_config(path)
    assert cfg.deck.brightness == 50
    assert cfg.timing.highlight_ms == 200
    assert cfg.timing.sequence_delay_ms == 600
    assert cfg.timing.round_pause_ms == 500
    assert cfg.timing.input_highlight_ms == 150
    assert cfg.sound.enabled is False
    assert cfg.sound.command == "aplay"


def test_load_config_defaults():
    """Missing sections should get defaults."""
    path = _write({"deck": {}})

    from genius.config import load_config

    cfg = load_config(path)
    assert cfg.deck.brightness == 80
    assert cfg.timing.highlight_ms == 300
    assert cfg.timing.sequence_delay_ms == 800
    assert cfg.timing.round_pause_ms == 1000
    assert cfg.sound.enabled is True
    assert cfg.sound.command == "afplay"


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    from genius.config import load_config

    cfg = load_config(path)
    assert cfg.timing.highlight_ms == 300


def test_load_config_rejects_short_sequence_delay():
    path = _write({"timing": {"highlight_ms": 500, "sequence_delay_ms": 400}})

    from genius.config import load_config

    with pytest.raises(ValueError, match="sequence_delay_ms"):
        load_config(path)


def test_load_config_rejects_negative_timing():
    path = _write({"timing": {"round_pause_ms": -1}})

    from genius.config import load_config

    with pytest.raises(ValueError, match="round_pause_ms"):
        load_config(path)


def test_load_config_unknown_key():
    path = _write({"sound": {"loudness": 11}})

    from genius.config import load_config

    with pytest.raises(TypeError):
        load_config(path)


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- deck\n- timing\n")

    from genius.config import load_config

    with pytest.raises(ValueError, match="mapping"):
        load_config(path)
