"""32-byte soul seed derivation.

The soul seed is a compact fingerprint of a transaction hash that travels
with a minted card (memo payload, mint ledger) and is printed by the
``soul`` CLI command.
"""

SOUL_SEED_SIZE = 32

_MASK_64 = 0xFFFFFFFFFFFFFFFF
_MIX_MULTIPLIER_A = 0x517CC1B727220A95
_MIX_MULTIPLIER_B = 0x6C62272E07BB0142
_FORWARD_SALT = 37
_BACKWARD_SALT = 53


def _mix_byte(value: int) -> int:
    h = (value * _MIX_MULTIPLIER_A) & _MASK_64
    h ^= h >> 17
    h = (h * _MIX_MULTIPLIER_B) & _MASK_64
    h ^= h >> 11
    return h & 0xFF


def derive_soul_seed(tx_hash: str) -> bytes:
    """Derive a deterministic 32-byte seed from a transaction hash.

    The hash bytes are XOR-folded into 32 bytes, each byte is passed
    through a 64-bit multiply/xorshift mix, then two diffusion passes
    (forward and backward) spread every input byte across the seed.

    Args:
        tx_hash: Transaction signature or any seed string.

    Returns:
        32 bytes, identical for identical inputs.
    """
    seed = bytearray(SOUL_SEED_SIZE)
    for i, byte in enumerate(tx_hash.encode("utf-8")):
        seed[i % SOUL_SEED_SIZE] ^= byte

    for i in range(SOUL_SEED_SIZE):
        seed[i] = _mix_byte(seed[i])

    for i in range(1, SOUL_SEED_SIZE):
        seed[i] ^= (seed[i - 1] + _FORWARD_SALT) & 0xFF
    for i in range(SOUL_SEED_SIZE - 2, -1, -1):
        seed[i] ^= (seed[i + 1] + _BACKWARD_SALT) & 0xFF

    return bytes(seed)


def soul_seed_hex(tx_hash: str) -> str:
    """Return the soul seed as a lowercase hex string."""
    return derive_soul_seed(tx_hash).hex()
