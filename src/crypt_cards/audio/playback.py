"""Exclusive playback session.

A single audio element exists per process. ``PlaybackSession`` owns it
together with its analyzer and hands playback to one owner (usually a
card id) at a time. Switching tracks swaps the source, rewinds and
transfers ownership in one step under a lock, so two owners never see
live amplitude data at the same time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import numpy as np

from crypt_cards.audio.analysis import AudioAnalyzer, AudioLevels, HitRing
from crypt_cards.audio.audius import Track

logger = logging.getLogger(__name__)


class AudioBackend(Protocol):
    """The external audio element driven by the session."""

    @property
    def is_playing(self) -> bool: ...

    async def load(self, url: str) -> None: ...

    async def play(self) -> None: ...

    async def pause(self) -> None: ...

    def seek(self, position: float) -> None: ...

    def frequency_data(self) -> np.ndarray | None: ...


class PlaybackState(Enum):
    """Session state."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class PlaybackStats:
    """Statistics for the playback session."""

    tracks_loaded: int = 0
    toggles: int = 0
    handoffs: int = 0


class PlaybackSession:
    """Owns the audio backend and routes its analysis to one owner.

    Example:
        ```python
        session = PlaybackSession(backend)
        await session.play(track, owner=card.id)
        levels = session.levels_for(card.id, now=time.monotonic())
        ```
    """

    def __init__(self, backend: AudioBackend, analyzer: AudioAnalyzer | None = None) -> None:
        self._backend = backend
        self._analyzer = analyzer or AudioAnalyzer()
        self._lock = asyncio.Lock()
        self._track: Track | None = None
        self._owner: Hashable | None = None
        self._state = PlaybackState.IDLE
        self._stats = PlaybackStats()

    @property
    def owner(self) -> Hashable | None:
        return self._owner

    @property
    def track(self) -> Track | None:
        return self._track

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def stats(self) -> PlaybackStats:
        return self._stats

    def is_owner(self, owner: Hashable) -> bool:
        return self._owner is not None and self._owner == owner

    async def play(self, track: Track, owner: Hashable) -> bool:
        """Play ``track`` for ``owner``, or toggle it if it is already loaded.

        Args:
            track: Track to play.
            owner: Identity of the requesting surface.

        Returns:
            True if the track is playing after the call.
        """
        async with self._lock:
            if self._track is not None and self._track.id == track.id:
                self._owner = owner
                self._stats.toggles += 1
                if self._state == PlaybackState.PLAYING:
                    await self._backend.pause()
                    self._state = PlaybackState.PAUSED
                    return False
                await self._backend.play()
                self._state = PlaybackState.PLAYING
                return True

            if self._state == PlaybackState.PLAYING:
                await self._backend.pause()
            previous = self._owner
            self._analyzer.reset()
            try:
                await self._backend.load(track.stream_url)
                self._backend.seek(0.0)
                await self._backend.play()
            except Exception as e:
                logger.warning("Failed to play %r for owner %s: %s", track.title, owner, e)
                self._track = None
                self._owner = None
                self._state = PlaybackState.IDLE
                return False
            self._track = track
            self._owner = owner
            self._stats.tracks_loaded += 1
            if previous is not None and previous != owner:
                self._stats.handoffs += 1
            self._state = PlaybackState.PLAYING
            logger.info("Playing %r for owner %s", track.title, owner)
            return True

    async def stop(self) -> None:
        """Pause playback and release ownership."""
        async with self._lock:
            if self._state == PlaybackState.PLAYING:
                await self._backend.pause()
            self._analyzer.reset()
            self._track = None
            self._owner = None
            self._state = PlaybackState.IDLE

    def levels_for(self, owner: Hashable, now: float) -> AudioLevels:
        """Advance the analyzer for the owner and return its levels.

        Non-owners always get silent levels and never advance the analyzer.
        """
        if not self.is_owner(owner):
            return AudioLevels.silent()
        playing = self._state == PlaybackState.PLAYING and self._backend.is_playing
        freq_data = self._backend.frequency_data() if playing else None
        return self._analyzer.sample(freq_data, playing, now)

    def rings_for(self, owner: Hashable, now: float) -> Sequence[HitRing]:
        """Return live hit rings for the owner, none for anyone else."""
        if not self.is_owner(owner):
            return ()
        return self._analyzer.rings(now)
