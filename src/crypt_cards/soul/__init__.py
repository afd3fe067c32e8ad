"""Soul layer - Seeded skull identities and their animated rendering."""

from crypt_cards.soul.loop import RedrawLoop
from crypt_cards.soul.palettes import PALETTES, Palette, palette_for
from crypt_cards.soul.renderer import SoulRenderer, SoulScene, SoulSurface, build_scene
from crypt_cards.soul.rng import Mulberry32, hash_to_seeds, rng_from_hash, string_hash
from crypt_cards.soul.seed import derive_soul_seed, soul_seed_hex
from crypt_cards.soul.skull import (
    SkullGenerationError,
    SkullIdentity,
    SkullTraits,
    generate_skull,
    generate_skull_identity,
)

__all__ = [
    "PALETTES",
    "Mulberry32",
    "Palette",
    "RedrawLoop",
    "SkullGenerationError",
    "SkullIdentity",
    "SkullTraits",
    "SoulRenderer",
    "SoulScene",
    "SoulSurface",
    "build_scene",
    "derive_soul_seed",
    "generate_skull",
    "generate_skull_identity",
    "hash_to_seeds",
    "palette_for",
    "rng_from_hash",
    "soul_seed_hex",
    "string_hash",
]
