"""crypt-cards - Solana wallet history as narrated, rarity-tiered trading cards."""

__version__ = "0.1.0"
