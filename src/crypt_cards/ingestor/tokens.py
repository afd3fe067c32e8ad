"""Token metadata lookup keyed by SPL mint address."""

from __future__ import annotations

from dataclasses import dataclass

SOL_MINT = "So11111111111111111111111111111111111111112"


@dataclass(frozen=True)
class TokenInfo:
    """Display metadata for a token mint."""

    symbol: str
    icon: str


SOL = TokenInfo(symbol="SOL", icon="◎")
UNKNOWN_TOKEN = TokenInfo(symbol="???", icon="?")

KNOWN_TOKENS: dict[str, TokenInfo] = {
    SOL_MINT: SOL,
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v": TokenInfo("USDC", "$"),
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB": TokenInfo("USDT", "$"),
    "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263": TokenInfo("BONK", "$"),
    "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN": TokenInfo("JUP", "♃"),
    "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm": TokenInfo("WIF", "$"),
    "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr": TokenInfo("POPCAT", "$"),
    "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So": TokenInfo("mSOL", "◎"),
    "7dHbWXmci3dT8UFYWYZweBLXgycu7Y3iL6trKn1Y7ARj": TokenInfo("stSOL", "◎"),
    "HZ1JovNiVvGrGNiiYvEozEVgZ58xaU3RKwX8eACQBCt3": TokenInfo("PYTH", "$"),
    "hntyVP6YFm1Hg25TN9WGLqM12b8TQmcknKrdu1oxWux": TokenInfo("HNT", "$"),
    "rndrizKT3MK1iimdxRdWabcF7Zg7AR5T4nud4EkHBof": TokenInfo("RNDR", "$"),
    "DUSTawucrTsGU8hcqRdHDCbuYhCPADMLM2VcCb8VnFnQ": TokenInfo("DUST", "$"),
    "TNSRxcUxoT9xBG3de7PiJyTDYu7kskLqcpddxnEJAS6": TokenInfo("TNSR", "$"),
    "jtojtomepa8beP8AuQc6eXt5FriJwfFMwQx2v2f9mCL": TokenInfo("JTO", "⚡"),
    "WENWENvqqNya429ubCdR81ZmD69brwQaaBYY6p3LCpk": TokenInfo("WEN", "$"),
    "MEW1gQWJ3nEXg2qgERiKu7FAFj79PHvQVREQUzScPP5": TokenInfo("MEW", "$"),
    "A3eME5CetyZPBoWbRUwY3tSe25S6tb18ba9ZPbWk9eFJ": TokenInfo("PENG", "$"),
    "7vfCXTUXx5WJV5JADk17DUJ4ksgau7utNKj4b963voxs": TokenInfo("RAY", "☀"),
    "orcaEKTdK7LKz57vaAYr9QeNsVEPfiu6QeMU1kektZE": TokenInfo("ORCA", "$"),
    "bSo13r4TkiE4KumL71LsHTPpL2euBYLFx6h9HP3piy1": TokenInfo("bSOL", "◎"),
    "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R": TokenInfo("RAY", "☀"),
}

MEMECOINS: frozenset[str] = frozenset({"BONK", "WIF", "POPCAT", "MEW", "PENG", "WEN", "DUST"})

DEFI_SOURCES: frozenset[str] = frozenset(
    {"JUPITER", "RAYDIUM", "ORCA", "MARINADE", "DRIFT", "MANGO", "TENSOR", "MAGIC_EDEN"}
)


def lookup_token(mint: str | None) -> TokenInfo:
    """Resolve a mint address to display metadata.

    Unknown mints get a truncated-address pseudo-symbol (``abcd..xyz``);
    a missing mint resolves to ``???``.
    """
    if not mint:
        return UNKNOWN_TOKEN
    known = KNOWN_TOKENS.get(mint)
    if known is not None:
        return known
    return TokenInfo(symbol=f"{mint[:4]}..{mint[-3:]}", icon="$")


def is_memecoin(mint: str | None) -> bool:
    """Check if a mint resolves to a known memecoin symbol."""
    return lookup_token(mint).symbol in MEMECOINS


def is_defi_source(source: str | None) -> bool:
    """Check if a source label is a known DeFi venue."""
    return bool(source) and source in DEFI_SOURCES
