"""Audio layer - Soundtrack search, playback ownership and amplitude analysis."""

from crypt_cards.audio.analysis import AudioAnalyzer, AudioLevels, HitRing
from crypt_cards.audio.audius import AudiusClient, AudiusClientError, Track
from crypt_cards.audio.playback import AudioBackend, PlaybackSession, PlaybackState
from crypt_cards.audio.soundtrack import MOOD_QUERIES, SoundtrackPicker

__all__ = [
    "MOOD_QUERIES",
    "AudioAnalyzer",
    "AudioBackend",
    "AudioLevels",
    "AudiusClient",
    "AudiusClientError",
    "HitRing",
    "PlaybackSession",
    "PlaybackState",
    "SoundtrackPicker",
    "Track",
]
