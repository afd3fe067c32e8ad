"""On-chain memo recorder for minted cards.

A mint is a single memo-program instruction carrying the card's memo
payload, signed by the minting keypair and sent over Solana JSON-RPC.
Successful mints are written to the mint ledger.

Mint flow:
    balance check (devnet airdrop) → blockhash → sign → send → confirm → ledger
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import base58
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from crypt_cards.cards.models import Card
from crypt_cards.minting.metadata import build_memo_payload, card_tx_hash, encode_memo
from crypt_cards.soul.seed import soul_seed_hex
from crypt_cards.storage.repos import MintedCardDTO

if TYPE_CHECKING:
    from crypt_cards.config import Settings
    from crypt_cards.storage.database import DatabaseManager

logger = logging.getLogger(__name__)

MEMO_PROGRAM_ID = Pubkey.from_string("MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr")
LOW_BALANCE_LAMPORTS = 10_000
AIRDROP_LAMPORTS = 100_000_000  # 0.1 SOL
EXPLORER_BASE_URL = "https://explorer.solana.com/tx"
DEVNET = "devnet"
MAINNET = "mainnet-beta"


class MintRecorderError(Exception):
    """Base exception for mint recorder errors."""


@dataclass(frozen=True)
class MintResult:
    """Outcome of a mint attempt."""

    success: bool
    signature: str | None = None
    error: str | None = None
    explorer_url: str | None = None
    dry_run: bool = False
    metadata: dict[str, Any] | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "signature": self.signature,
            "error": self.error,
            "explorer_url": self.explorer_url,
            "dry_run": self.dry_run,
        }


def load_keypair(raw: str) -> Keypair:
    """Load a keypair from a JSON array of 64 bytes or a base58 secret.

    Raises:
        MintRecorderError: If the secret cannot be decoded.
    """
    raw = raw.strip()
    try:
        if raw.startswith("["):
            values = json.loads(raw)
            return Keypair.from_bytes(bytes(values[:64]))
        return Keypair.from_bytes(base58.b58decode(raw))
    except (ValueError, TypeError) as e:
        raise MintRecorderError(f"Invalid minting keypair: {e}") from e


def explorer_url(signature: str, cluster: str = DEVNET) -> str:
    """Return the Solana explorer link for a signature."""
    if cluster == MAINNET:
        return f"{EXPLORER_BASE_URL}/{signature}"
    return f"{EXPLORER_BASE_URL}/{signature}?cluster={cluster}"


def build_memo_instruction(data: bytes, signer: Pubkey) -> Instruction:
    """Build a memo-program instruction signed by ``signer``."""
    return Instruction(
        MEMO_PROGRAM_ID,
        data,
        [AccountMeta(signer, is_signer=True, is_writable=True)],
    )


class MemoMintRecorder:
    """Records card mints as memo transactions.

    Example:
        ```python
        recorder = MemoMintRecorder.from_settings(settings, ledger=db)
        result = await recorder.mint(card, build_card_metadata(card))
        print(result.explorer_url if result.success else result.error)
        ```
    """

    def __init__(
        self,
        rpc: AsyncClient,
        keypair: Keypair | None,
        *,
        ledger: DatabaseManager | None = None,
        cluster: str = DEVNET,
        airdrop_on_low_balance: bool = True,
        dry_run: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the recorder.

        Args:
            rpc: Solana async RPC client.
            keypair: Minting keypair. Without it every mint fails softly.
            ledger: Optional database for recording successful mints.
            cluster: Cluster name used for explorer links and airdrops.
            airdrop_on_low_balance: Request a devnet airdrop when nearly empty.
            dry_run: Build and sign transactions without touching the network.
            clock: Wall-clock source in epoch seconds.
        """
        self._rpc = rpc
        self._keypair = keypair
        self._ledger = ledger
        self._cluster = cluster
        self._airdrop = airdrop_on_low_balance and cluster == DEVNET
        self._dry_run = dry_run
        self._clock = clock

    @classmethod
    def from_settings(
        cls, settings: Settings, *, ledger: DatabaseManager | None = None
    ) -> MemoMintRecorder:
        """Build a recorder from application settings.

        Raises:
            MintRecorderError: If a configured keypair cannot be decoded.
        """
        secret = settings.solana.keypair
        keypair = load_keypair(secret.get_secret_value()) if secret else None
        return cls(
            AsyncClient(settings.solana.rpc_url),
            keypair,
            ledger=ledger,
            cluster=DEVNET if settings.solana.is_devnet else MAINNET,
            airdrop_on_low_balance=settings.solana.airdrop_on_low_balance,
            dry_run=settings.dry_run,
        )

    @property
    def payer(self) -> Pubkey | None:
        return self._keypair.pubkey() if self._keypair else None

    async def close(self) -> None:
        await self._rpc.close()

    async def __aenter__(self) -> MemoMintRecorder:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _ensure_balance(self, payer: Pubkey) -> None:
        """Top up a nearly empty devnet wallet. Failures are logged and ignored."""
        balance = (await self._rpc.get_balance(payer, commitment=Confirmed)).value
        if balance >= LOW_BALANCE_LAMPORTS:
            return
        logger.info("Balance of %s is %d lamports; requesting airdrop", str(payer)[:10] + "...", balance)
        try:
            airdrop = await self._rpc.request_airdrop(payer, AIRDROP_LAMPORTS, commitment=Confirmed)
            await self._rpc.confirm_transaction(airdrop.value, commitment=Confirmed)
        except Exception as e:
            logger.warning("Airdrop failed, proceeding anyway: %s", e)

    def build_transaction(self, card: Card, blockhash: Hash) -> Transaction:
        """Build and sign the memo transaction for a card.

        Raises:
            MintRecorderError: If no keypair is configured.
        """
        if self._keypair is None:
            raise MintRecorderError("No minting keypair configured")
        payer = self._keypair.pubkey()
        payload = build_memo_payload(card, str(payer), int(self._clock() * 1000))
        instruction = build_memo_instruction(encode_memo(payload), payer)
        message = Message.new_with_blockhash([instruction], payer, blockhash)
        tx = Transaction.new_unsigned(message)
        tx.sign([self._keypair], blockhash)
        return tx

    async def mint(self, card: Card, metadata: dict[str, Any] | None = None) -> MintResult:
        """Mint a card.

        Args:
            card: Card to record on-chain.
            metadata: NFT-style metadata travelling with the result.

        Returns:
            MintResult; failures are reported in ``error``, never raised.
        """
        if self._keypair is None:
            return MintResult(success=False, error="No minting keypair configured", metadata=metadata)
        payer = self._keypair.pubkey()

        if self._dry_run:
            tx = self.build_transaction(card, Hash.default())
            signature = str(tx.signatures[0])
            logger.info("Dry run: built mint for card %d (%s)", card.id, signature[:10] + "...")
            return MintResult(success=True, signature=signature, dry_run=True, metadata=metadata)

        try:
            if self._airdrop:
                await self._ensure_balance(payer)
            latest = (await self._rpc.get_latest_blockhash(commitment=Confirmed)).value
            tx = self.build_transaction(card, latest.blockhash)
            sent = await self._rpc.send_raw_transaction(
                bytes(tx), opts=TxOpts(skip_preflight=False, preflight_commitment=Confirmed)
            )
            await self._rpc.confirm_transaction(
                sent.value,
                commitment=Confirmed,
                last_valid_block_height=latest.last_valid_block_height,
            )
        except Exception as e:
            logger.warning("Mint failed for card %d: %s", card.id, e)
            return MintResult(success=False, error=str(e), metadata=metadata)

        signature = str(sent.value)
        url = explorer_url(signature, self._cluster)
        logger.info("Minted card %d on-chain: %s", card.id, signature)
        await self._record(card, signature, str(payer), url)
        return MintResult(success=True, signature=signature, explorer_url=url, metadata=metadata)

    async def _record(self, card: Card, signature: str, owner: str, url: str) -> None:
        if self._ledger is None:
            return
        tx_hash = card_tx_hash(card)
        dto = MintedCardDTO(
            signature=signature,
            tx_hash=tx_hash,
            soul_seed=soul_seed_hex(tx_hash),
            owner=owner,
            card_id=card.id,
            card_type=card.type.value,
            rarity=card.rarity.value,
            title=card.title,
            platform=card.platform,
            explorer_url=url,
        )
        try:
            async with self._ledger.ledger() as repo:
                await repo.add(dto)
        except Exception as e:
            logger.warning("Failed to record mint %s in ledger: %s", signature[:10] + "...", e)
