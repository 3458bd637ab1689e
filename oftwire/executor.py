"""Signed submission of single-instruction transactions to Solana."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import re
from typing import Iterable, List, Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.core import RPCException, TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import Transaction

from .constants import DEFAULT_COMMITMENT
from .errors import ChainSubmissionError, ConfigurationError, TransactionFailed
from .instructions import describe_instruction

logger = logging.getLogger(__name__)

# System Program refusal to allocate an account that already exists.
_ALREADY_IN_USE_RE = re.compile(
    r"(?:Create Account|Allocate): account Address \{ address: (?P<address>[1-9A-HJ-NP-Za-km-z]+), "
    r"base: [^}]*\} already in use"
)

SUBMISSION_ERRORS = (
    RPCException,
    SolanaRpcException,
    UnconfirmedTxError,
    TransactionExpiredBlockheightExceededError,
    ChainSubmissionError,
)


def load_keypair(path: str | Path) -> Keypair:
    resolved = Path(path).expanduser()
    try:
        raw = json.loads(resolved.read_text())
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Wallet keypair not found: {resolved}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Wallet keypair is not valid JSON: {resolved}") from exc
    if not isinstance(raw, list) or len(raw) != 64:
        raise ConfigurationError(f"Wallet keypair must be a JSON array of 64 bytes: {resolved}")
    return Keypair.from_bytes(bytes(raw))


def is_already_initialized(ix: Instruction, lines: Iterable[str]) -> bool:
    """True when the System Program refused to allocate the instruction's own target account."""
    targets = {str(meta.pubkey) for meta in ix.accounts if meta.is_writable and not meta.is_signer}
    for line in lines:
        match = _ALREADY_IN_USE_RE.search(line)
        if match and match.group("address") in targets:
            return True
    return False


class TransactionExecutor:
    def __init__(self, client: Client, commitment: str = DEFAULT_COMMITMENT) -> None:
        self.client = client
        self.commitment = commitment

    def build_transaction(self, ix: Instruction, signer: Keypair) -> Transaction:
        blockhash = self.client.get_latest_blockhash().value.blockhash
        return Transaction.new_signed_with_payer([ix], signer.pubkey(), [signer], blockhash)

    def execute(
        self,
        ix: Instruction,
        signer: Keypair,
        *,
        allow_already_initialized: bool = False,
    ) -> Optional[Signature]:
        """Submit ``ix`` and return its signature.

        Returns None when ``allow_already_initialized`` is set and the ledger
        reports the target account as already allocated. Any other failure is
        re-run as a simulation to collect program logs, then raised as
        TransactionFailed.
        """
        try:
            tx = self.build_transaction(ix, signer)
        except SUBMISSION_ERRORS as exc:
            logger.error("Could not prepare transaction: %s", exc)
            logger.error("Failing instruction:\n%s", describe_instruction(ix))
            raise TransactionFailed(exc, []) from exc
        try:
            return self._submit(tx)
        except SUBMISSION_ERRORS as exc:
            cause = exc

        logs = self._diagnostic_logs(tx)
        evidence = [*logs, *str(cause).splitlines()]
        if allow_already_initialized and is_already_initialized(ix, evidence):
            logger.warning("Target account already initialized; continuing (%s)", cause)
            return None

        logger.error("Transaction failed: %s", cause)
        logger.error("Failing instruction:\n%s", describe_instruction(ix))
        if logs:
            logger.error("Simulation logs:\n%s", "\n".join(logs))
        else:
            logger.error("Simulation returned no logs")
        raise TransactionFailed(cause, logs) from cause

    def simulate(self, tx: Transaction):
        return self.client.simulate_transaction(tx, sig_verify=False, commitment=self.commitment).value

    def _submit(self, tx: Transaction) -> Signature:
        opts = TxOpts(skip_preflight=False, preflight_commitment=self.commitment)
        signature = self.client.send_raw_transaction(bytes(tx), opts=opts).value
        logger.info("Submitted %s", signature)
        resp = self.client.confirm_transaction(signature, commitment=self.commitment)
        status = resp.value[0] if resp.value else None
        if status is not None and status.err is not None:
            raise ChainSubmissionError(f"transaction {signature} failed on-chain: {status.err}")
        return signature

    def _diagnostic_logs(self, tx: Transaction) -> List[str]:
        try:
            result = self.simulate(tx)
        except SUBMISSION_ERRORS as exc:
            logger.warning("Diagnostic simulation failed: %s", exc)
            return []
        if result.err is not None:
            logger.info("Simulation error: %s", result.err)
        return list(result.logs or [])
