"""Command-line entry point for crypt-cards.

Subcommands:
    scan   Scan a wallet and print its cards
    soul   Print the skull identity and soul seed of a transaction hash
    score  Show the score breakdown of a synthetic transaction
    stats  Print mint ledger statistics
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

from crypt_cards.cards.builder import classify_rarity
from crypt_cards.cards.models import Card, Rarity
from crypt_cards.config import Settings, get_settings
from crypt_cards.detector.scorer import score_transaction
from crypt_cards.ingestor.models import (
    LAMPORTS_PER_SOL,
    NativeTransfer,
    RawTransaction,
    TokenTransfer,
    TxType,
)
from crypt_cards.pipeline import WalletScanner
from crypt_cards.soul.seed import soul_seed_hex
from crypt_cards.soul.skull import generate_skull_identity
from crypt_cards.storage.database import DatabaseManager

logger = logging.getLogger(__name__)

# Synthetic accounts for the score command
CLI_WALLET = "CRYPTwa11et1111111111111111111111111111111"
CLI_COUNTERPARTY = "CRYPTcounterparty111111111111111111111111111"
BONK_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.get_logging_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def format_card(card: Card) -> str:
    """Render a card as a short text block."""
    flow = f"{card.t_in.amount} {card.t_in.symbol} -> {card.t_out.amount} {card.t_out.symbol}"
    return "\n".join(
        [
            f"#{card.id} [{card.rarity.value.upper()}] {card.type.value}  {card.title}",
            f"  {card.narration}",
            f"  {flow}  {card.pnl}  {card.usd}",
            f"  {card.tx}  {card.platform}  {card.date} ({card.ago})",
        ]
    )


async def _scan(settings: Settings, args: argparse.Namespace) -> int:
    scanner = WalletScanner.from_settings(settings)
    if args.limit is not None:
        scanner.history_limit = args.limit
    try:
        cards = await scanner.scan(args.address)
    finally:
        await scanner.close()

    if args.min_rarity:
        floor = Rarity(args.min_rarity)
        cards = [c for c in cards if c.rarity >= floor]

    if args.format == "json":
        print(json.dumps([c.to_dict() for c in cards], indent=2, ensure_ascii=False))
    elif not cards:
        print(f"No story-worthy transactions for {args.address}")
    else:
        print("\n\n".join(format_card(c) for c in cards))
    return 0


def _soul(args: argparse.Namespace) -> int:
    identity = generate_skull_identity(args.tx_hash)
    seed = soul_seed_hex(args.tx_hash)
    print(identity.to_text())
    print()
    for name, value in identity.traits.to_dict().items():
        print(f"{name:>12}: {value}")
    print(f"{'laser_eyes':>12}: {identity.has_laser_eyes}")
    print(f"{'soul_seed':>12}: {seed if args.verbose else seed[:16] + '...'}")
    return 0


def build_synthetic_transaction(
    tx_type: str,
    *,
    sol: float = 0.0,
    net: float | None = None,
    memecoin: bool = False,
    defi: bool = False,
) -> RawTransaction:
    """Build a transaction for the score command.

    ``sol`` moves from the wallet to a counterparty unless ``net`` is given,
    in which case the wallet receives (positive) or sends (negative) it.
    """
    amount = net if net is not None else -sol
    native = []
    if amount:
        lamports = round(abs(amount) * LAMPORTS_PER_SOL)
        sender, receiver = (
            (CLI_COUNTERPARTY, CLI_WALLET) if amount > 0 else (CLI_WALLET, CLI_COUNTERPARTY)
        )
        native.append(NativeTransfer(sender, receiver, lamports))
    if net is not None and sol > abs(net):
        native.append(NativeTransfer(CLI_COUNTERPARTY, CLI_COUNTERPARTY, round(sol * LAMPORTS_PER_SOL)))
    tokens = (
        [TokenTransfer(CLI_COUNTERPARTY, CLI_WALLET, BONK_MINT, 1_000_000.0)] if memecoin else []
    )
    return RawTransaction(
        type=tx_type.upper(),
        source="JUPITER" if defi else "CLI",
        signature="",
        timestamp=0,
        native_transfers=tuple(native),
        token_transfers=tuple(tokens),
    )


def _score(args: argparse.Namespace) -> int:
    tx = build_synthetic_transaction(
        args.tx_type, sol=args.sol, net=args.net, memecoin=args.memecoin, defi=args.defi
    )
    result = score_transaction(tx, CLI_WALLET)
    if tx.tx_type == TxType.OTHER:
        print(f"warning: unrecognized type {tx.type!r}", file=sys.stderr)
    print(f"type:    {tx.type or '(empty)'}")
    print(f"score:   {result.score}")
    print(f"rarity:  {classify_rarity(result).value}")
    print(f"sol:     {result.sol:.4f}")
    print(f"net:     {result.net:+.4f}")
    print(f"tags:    {', '.join(result.tags) or '-'}")
    for factor, delta in result.factors.items():
        print(f"  {factor:<16} {delta:+d}")
    return 0


async def _stats(settings: Settings) -> int:
    db = DatabaseManager.from_settings(settings)
    try:
        await db.init_schema_async()
        async with db.ledger() as repo:
            total = await repo.total()
            counts = await repo.rarity_counts()
    finally:
        await db.dispose_async()

    print(f"minted: {total}")
    for rarity in Rarity:
        print(f"  {rarity.value:<10} {counts.get(rarity.value, 0)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crypt-cards", description="Turn Solana wallet history into trading cards"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Scan a wallet and print its cards")
    scan.add_argument("-a", "--address", required=True, help="Wallet address")
    scan.add_argument("-l", "--limit", type=int, default=None, help="History size (default: settings)")
    scan.add_argument("-f", "--format", choices=("cards", "json"), default="cards")
    scan.add_argument(
        "-m", "--min-rarity", choices=[r.value for r in Rarity], default=None, help="Rarity floor"
    )

    soul = sub.add_parser("soul", help="Print the skull identity of a transaction hash")
    soul.add_argument("-t", "--tx-hash", required=True)
    soul.add_argument("-v", "--verbose", action="store_true", help="Print the full soul seed")

    score = sub.add_parser("score", help="Score a synthetic transaction")
    score.add_argument("-t", "--tx-type", required=True, help="e.g. SWAP, NFT_MINT, TRANSFER")
    score.add_argument("-s", "--sol", type=float, default=0.0, help="Largest SOL movement")
    score.add_argument("-n", "--net", type=float, default=None, help="Signed SOL delta to the wallet")
    score.add_argument("-m", "--memecoin", action="store_true", help="Include a memecoin leg")
    score.add_argument("-d", "--defi", action="store_true", help="Route through a DeFi venue")

    sub.add_parser("stats", help="Print mint ledger statistics")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings)

    if args.command == "scan":
        return asyncio.run(_scan(settings, args))
    if args.command == "soul":
        return _soul(args)
    if args.command == "score":
        return _score(args)
    return asyncio.run(_stats(settings))


if __name__ == "__main__":
    sys.exit(main())
