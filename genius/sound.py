"""8-bit game sound: synthesized tones played via an external player.

One triangle-wave tone per color plus a square-wave error buzz, written
as WAV files into a temp dir. play() spawns the player command and never
waits for it. Failures are logged and ignored.
"""

from __future__ import annotations

import logging
import os
import shutil
import struct
import subprocess
import tempfile
import threading
import wave
from typing import Protocol

from genius.symbols import ERROR_SOUND, SYMBOL_NOTES

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050
_MAX_CONCURRENT = 4


class SoundPlayer(Protocol):
    def play(self, sound_id: str) -> None: ...


class SilentSoundPlayer:
    """Sound player that plays nothing."""

    def play(self, sound_id: str) -> None:
        pass


# ── waveforms ────────────────────────────────────────────────────────

WAVES = {
    "triangle": lambda phase: 4 * abs(phase - 0.5) - 1,
    "square": lambda phase: 1.0 if phase < 0.5 else -1.0,
}


def tone(freq: float, dur: float, vol: float = 1.0,
         wave_shape: str = "triangle", decay: float = 0.5) -> list[float]:
    """One note: 3ms attack, then a linear fade to (1 - decay) at the end.

    freq 0 gives silence of the same length.
    """
    n = int(SAMPLE_RATE * dur)
    if freq == 0:
        return [0.0] * n
    shape = WAVES[wave_shape]
    attack = SAMPLE_RATE * 0.003
    return [
        shape((i * freq / SAMPLE_RATE) % 1.0) * vol
        * min(1.0, i / attack) * (1.0 - decay * i / n)
        for i in range(n)
    ]


def write_wav(path: str, samples: list[float]):
    with wave.open(path, "w") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(SAMPLE_RATE)
        w.writeframes(b"".join(
            struct.pack("<h", int(max(-0.95, min(0.95, s)) * 32767)) for s in samples
        ))


# ── player ───────────────────────────────────────────────────────────

class ToneSoundPlayer:
    """Plays generated tones through `command` (afplay by default).

    Keeps at most _MAX_CONCURRENT player processes alive, killing the
    oldest when a new one would exceed the limit.
    """

    def __init__(self, command: str = "afplay", volume: float = 0.3, enabled: bool = True):
        self.command = command
        self.volume = volume
        self.enabled = enabled
        self.files: dict[str, str] = {}
        self._dir = ""
        self._processes: list[subprocess.Popen] = []
        self._lock = threading.Lock()

    def prepare(self):
        """Synthesize all sounds into a fresh temp dir."""
        self._dir = tempfile.mkdtemp(prefix="genius-sfx-")
        v = self.volume
        for symbol, freq in SYMBOL_NOTES.items():
            path = os.path.join(self._dir, f"{symbol.value}.wav")
            write_wav(path, tone(freq, 0.25, v * 0.6))
            self.files[symbol.value] = path

        path = os.path.join(self._dir, f"{ERROR_SOUND}.wav")
        write_wav(path, tone(150, 0.4, v * 0.5, "square", decay=0.8))
        self.files[ERROR_SOUND] = path
        logger.debug("Generated %d sounds in %s", len(self.files), self._dir)

    def _reap(self):
        """Forget finished processes."""
        self._processes[:] = [p for p in self._processes if p.poll() is None]

    def play(self, sound_id: str) -> None:
        if not self.enabled:
            return
        wav = self.files.get(sound_id)
        if not wav or not os.path.exists(wav):
            logger.debug("No sound for %r", sound_id)
            return
        with self._lock:
            self._reap()
            while len(self._processes) >= _MAX_CONCURRENT:
                old = self._processes.pop(0)
                try:
                    old.kill()
                    old.wait()
                except OSError:
                    pass
            try:
                p = subprocess.Popen(
                    [self.command, wav],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except OSError as exc:
                logger.warning("Could not play %s with %s: %s", sound_id, self.command, exc)
                return
            self._processes.append(p)

    def close(self):
        """Kill running audio and remove generated files."""
        with self._lock:
            for p in self._processes:
                try:
                    p.kill()
                    p.wait()
                except OSError:
                    pass
            self._processes.clear()
        if self._dir and os.path.isdir(self._dir):
            shutil.rmtree(self._dir, ignore_errors=True)
        self.files.clear()
        self._dir = ""
