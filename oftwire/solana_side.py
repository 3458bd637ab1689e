"""Adapter operations on the Solana program."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from .constants import DEFAULT_INIT_METHOD, DEFAULT_SET_PEER_METHOD, DEFAULT_SHARED_DECIMALS
from .executor import TransactionExecutor, load_keypair
from .instructions import (
    InitAdapterArgs,
    SetPeerArgs,
    build_instruction,
    init_adapter_accounts,
    set_peer_accounts,
)
from .pda import DerivedAccount, oft_config_address, peer_config_address
from .selectors import ensure_distinct

logger = logging.getLogger(__name__)


class SolanaAdapterClient:
    def __init__(
        self,
        executor: TransactionExecutor,
        program_id: Pubkey,
        wallet_path: str | Path,
        *,
        shared_decimals: int = DEFAULT_SHARED_DECIMALS,
        init_method: str = DEFAULT_INIT_METHOD,
        set_peer_method: str = DEFAULT_SET_PEER_METHOD,
    ) -> None:
        self.executor = executor
        self.program_id = program_id
        self.wallet_path = wallet_path
        self.shared_decimals = shared_decimals
        selectors = ensure_distinct({"init": init_method, "set_peer": set_peer_method})
        self.init_selector = selectors["init"]
        self.set_peer_selector = selectors["set_peer"]
        self._signer: Optional[Keypair] = None

    @property
    def signer(self) -> Keypair:
        # Read on first use so a rotated wallet is picked up by the next run.
        if self._signer is None:
            self._signer = load_keypair(self.wallet_path)
            logger.info("Loaded Solana wallet %s", self._signer.pubkey())
        return self._signer

    def adapter_config(self, mint: Pubkey) -> DerivedAccount:
        return oft_config_address(mint, self.program_id)

    def init_adapter(self, mint: Pubkey) -> DerivedAccount:
        config = self.adapter_config(mint)
        logger.info(
            "Initializing Solana adapter for mint %s: config %s (bump %d)",
            mint,
            config.address,
            config.bump,
        )
        ix = build_instruction(
            self.program_id,
            self.init_selector,
            InitAdapterArgs(self.shared_decimals),
            init_adapter_accounts(self.signer.pubkey(), config.address, mint),
        )
        signature = self.executor.execute(ix, self.signer, allow_already_initialized=True)
        if signature is not None:
            logger.info("Adapter initialized: %s", signature)
        return config

    def set_peer(self, oft_config: Pubkey, remote_eid: int, peer: bytes) -> Optional[Signature]:
        peer_config = peer_config_address(oft_config, remote_eid, self.program_id)
        logger.info("Setting Solana peer for eid %d to 0x%s", remote_eid, peer.hex())
        ix = build_instruction(
            self.program_id,
            self.set_peer_selector,
            SetPeerArgs(remote_eid, peer),
            set_peer_accounts(self.signer.pubkey(), peer_config.address, oft_config),
        )
        signature = self.executor.execute(ix, self.signer)
        logger.info("Solana peer set: %s", signature)
        return signature
