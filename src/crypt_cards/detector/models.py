"""Data models for the detector module."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoreResult:
    """Narrative-interest score for a single transaction.

    Attributes:
        score: Integer score, may be negative.
        tags: Qualitative labels in emission order. A label can repeat when
            several token transfers match (e.g. one "memecoin" per leg).
        sol: Magnitude of the largest native transfer, in SOL.
        net: Signed net SOL delta to the scanned wallet.
        factors: Named score contributions that sum to ``score``.
    """

    score: int
    tags: tuple[str, ...]
    sol: float
    net: float
    factors: dict[str, int] = field(default_factory=dict, compare=False)

    @property
    def tag_set(self) -> frozenset[str]:
        """Return the distinct tags."""
        return frozenset(self.tags)

    def has_any(self, *tags: str) -> bool:
        """Return True if any of the given tags was emitted."""
        return any(tag in self.tags for tag in tags)

    @property
    def is_story_worthy(self) -> bool:
        """Return True if the transaction is eligible for selection."""
        return self.score > 0

    def to_dict(self) -> dict[str, object]:
        """Serialize to a dictionary for CLI JSON output."""
        return {
            "score": self.score,
            "tags": list(self.tags),
            "sol": self.sol,
            "net": self.net,
            "factors": dict(self.factors),
        }
