"""Audio amplitude analysis feeding the soul renderer.

``AudioAnalyzer`` turns a 128-bin byte frequency spectrum into smoothed
bass/mid/high levels in [0, 1] and detects bass attacks. Each detected
attack queues a ring burst that the renderer expands and fades.

Attack Detection:
    trigger when bass - last_bass > 0.08
             and bass > 0.7 * threshold
    threshold = 0.995 * threshold + 0.005 * bass   (every sample)
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

# Spectrum bands over a 128-bin byte spectrum (end exclusive)
SPECTRUM_BINS = 128
BASS_BAND = (0, 7)
MID_BAND = (7, 31)
HIGH_BAND = (31, 80)

# Exponential smoothing: new = old * keep + raw * (1 - keep)
BASS_KEEP = 0.3
MID_KEEP = 0.4
HIGH_KEEP = 0.5

ATTACK_DELTA = 0.08
ATTACK_THRESHOLD_RATIO = 0.7
INITIAL_BASS_THRESHOLD = 0.4
THRESHOLD_KEEP = 0.995
HIT_DECAY = 0.82
IDLE_LEVEL_DECAY = 0.95
IDLE_HIT_DECAY = 0.92

MAX_RINGS = 5
RING_LIFETIME_SECONDS = 2.0


@dataclass(frozen=True)
class AudioLevels:
    """Smoothed amplitude snapshot."""

    bass: float = 0.0
    mid: float = 0.0
    high: float = 0.0
    hit: float = 0.0

    @classmethod
    def silent(cls) -> AudioLevels:
        return cls()

    @property
    def is_silent(self) -> bool:
        return self.bass == 0 and self.mid == 0 and self.high == 0 and self.hit == 0


@dataclass(frozen=True)
class HitRing:
    """A bass-attack ring burst."""

    birth: float
    intensity: float

    def age(self, now: float) -> float:
        return now - self.birth

    def is_alive(self, now: float) -> bool:
        return self.age(now) <= RING_LIFETIME_SECONDS


def band_levels(freq_data: npt.ArrayLike) -> tuple[float, float, float]:
    """Average the bass, mid and high bands of a byte spectrum into [0, 1]."""
    spectrum = np.asarray(freq_data, dtype=np.float64)
    if spectrum.shape[0] < HIGH_BAND[1]:
        spectrum = np.pad(spectrum, (0, HIGH_BAND[1] - spectrum.shape[0]))

    def band(bounds: tuple[int, int]) -> float:
        lo, hi = bounds
        return float(spectrum[lo:hi].sum() / ((hi - lo) * 255.0))

    return band(BASS_BAND), band(MID_BAND), band(HIGH_BAND)


class AudioAnalyzer:
    """Stateful smoother and attack detector for one playback stream."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Forget all state, e.g. when the audio source changes."""
        self.bass = 0.0
        self.mid = 0.0
        self.high = 0.0
        self.hit = 0.0
        self.last_bass = 0.0
        self.bass_threshold = INITIAL_BASS_THRESHOLD
        self._rings: deque[HitRing] = deque(maxlen=MAX_RINGS)

    @property
    def levels(self) -> AudioLevels:
        return AudioLevels(bass=self.bass, mid=self.mid, high=self.high, hit=self.hit)

    def sample(
        self,
        freq_data: npt.ArrayLike | None,
        playing: bool,
        now: float,
    ) -> AudioLevels:
        """Advance the analyzer by one frame.

        Args:
            freq_data: Byte frequency spectrum, or None when unavailable.
            playing: Whether audio is currently playing.
            now: Current time in seconds (monotonic).

        Returns:
            The updated levels.
        """
        if freq_data is None or not playing:
            self.bass *= IDLE_LEVEL_DECAY
            self.mid *= IDLE_LEVEL_DECAY
            self.high *= IDLE_LEVEL_DECAY
            self.hit *= IDLE_HIT_DECAY
            return self.levels

        raw_bass, raw_mid, raw_high = band_levels(freq_data)
        self.bass = self.bass * BASS_KEEP + raw_bass * (1 - BASS_KEEP)
        self.mid = self.mid * MID_KEEP + raw_mid * (1 - MID_KEEP)
        self.high = self.high * HIGH_KEEP + raw_high * (1 - HIGH_KEEP)

        if (
            raw_bass - self.last_bass > ATTACK_DELTA
            and raw_bass > self.bass_threshold * ATTACK_THRESHOLD_RATIO
        ):
            self.hit = 1.0
            self._rings.append(HitRing(birth=now, intensity=raw_bass))

        self.last_bass = raw_bass
        self.hit *= HIT_DECAY
        self.bass_threshold = self.bass_threshold * THRESHOLD_KEEP + raw_bass * (1 - THRESHOLD_KEEP)
        return self.levels

    def rings(self, now: float) -> Sequence[HitRing]:
        """Return live rings, dropping those older than their lifetime."""
        alive = [ring for ring in self._rings if ring.is_alive(now)]
        if len(alive) != len(self._rings):
            self._rings = deque(alive, maxlen=MAX_RINGS)
        return tuple(alive)
