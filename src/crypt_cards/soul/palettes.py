"""Rarity palettes and bone colors for the soul renderer."""

from __future__ import annotations

from dataclasses import dataclass

from crypt_cards.cards.models import Rarity
from crypt_cards.soul.traits import RGB


@dataclass(frozen=True)
class Palette:
    """Colors driving a card's animated backdrop."""

    bg: RGB
    energy: RGB
    energy_alt: RGB
    accent: RGB
    glow: RGB


PALETTES: dict[Rarity, Palette] = {
    Rarity.LEGENDARY: Palette(
        bg=(8, 2, 12),
        energy=(150, 90, 255),
        energy_alt=(200, 120, 255),
        accent=(255, 180, 50),
        glow=(150, 90, 255),
    ),
    Rarity.RARE: Palette(
        bg=(2, 6, 10),
        energy=(0, 212, 176),
        energy_alt=(0, 160, 200),
        accent=(0, 255, 160),
        glow=(0, 212, 176),
    ),
    Rarity.COMMON: Palette(
        bg=(4, 6, 4),
        energy=(0, 180, 120),
        energy_alt=(0, 140, 100),
        accent=(0, 200, 130),
        glow=(0, 180, 120),
    ),
}

# Trait code -> bone color. "G" (glowing socket) takes the palette glow.
BONE: dict[str, RGB] = {
    "L": (235, 225, 205),
    "M": (200, 190, 170),
    "S": (150, 140, 125),
    "D": (90, 80, 70),
    "B": (25, 20, 18),
    "T": (220, 215, 195),
    "X": (220, 180, 60),
}


def palette_for(rarity: Rarity | str) -> Palette:
    """Return the palette for a rarity tier (common for unknown values)."""
    try:
        return PALETTES[Rarity(rarity)]
    except ValueError:
        return PALETTES[Rarity.COMMON]


def bone_color(code: str, palette: Palette) -> RGB | None:
    """Return the color for a grid trait code, or None for empty cells."""
    if code == "G":
        return palette.glow
    return BONE.get(code)
