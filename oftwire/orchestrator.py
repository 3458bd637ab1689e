"""Four-step cross-chain wiring.

1. InitRemoteAdapter: initialize the Solana adapter config account.
2. DeployLocalAdapter: deploy the EVM adapter with forge.
3. WireRemoteToLocal: point the Solana adapter at the EVM adapter.
4. WireLocalToRemote: point the EVM adapter at the Solana adapter.

Steps run strictly in order. A failure stops the run and leaves completed
steps on-chain; each step is safe to re-run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Callable, List, Optional, TypeVar

from solders.pubkey import Pubkey

from .addresses import account_peer_bytes, evm_peer_bytes, to_hex
from .errors import OftWireError, WiringFailed
from .evm import EvmAdapterClient
from .pda import DerivedAccount
from .solana_side import SolanaAdapterClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WiringStep(Enum):
    INIT_REMOTE_ADAPTER = "InitRemoteAdapter"
    DEPLOY_LOCAL_ADAPTER = "DeployLocalAdapter"
    WIRE_REMOTE_TO_LOCAL = "WireRemoteToLocal"
    WIRE_LOCAL_TO_REMOTE = "WireLocalToRemote"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class WiringTarget:
    mint: Pubkey
    evm_chain_id: int
    evm_endpoint: str
    remote_eid: int


@dataclass
class WiringResult:
    remote_adapter: Optional[DerivedAccount] = None
    local_adapter: Optional[str] = None
    completed: List[WiringStep] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return len(self.completed) == len(WiringStep)


class WiringOrchestrator:
    def __init__(self, solana: SolanaAdapterClient, evm: EvmAdapterClient) -> None:
        self.solana = solana
        self.evm = evm

    def run(self, target: WiringTarget) -> WiringResult:
        result = WiringResult()

        remote = self._step(result, WiringStep.INIT_REMOTE_ADAPTER, self.solana.init_adapter, target.mint)
        result.remote_adapter = remote

        local = self._step(
            result,
            WiringStep.DEPLOY_LOCAL_ADAPTER,
            self.evm.deploy,
            target.evm_chain_id,
            target.evm_endpoint,
        )
        result.local_adapter = local

        self._step(
            result,
            WiringStep.WIRE_REMOTE_TO_LOCAL,
            self._wire_remote_to_local,
            remote,
            local,
            target.remote_eid,
        )
        self._step(
            result,
            WiringStep.WIRE_LOCAL_TO_REMOTE,
            self._wire_local_to_remote,
            remote,
            local,
            target,
        )
        logger.info("Cross-chain setup complete")
        return result

    def _wire_remote_to_local(self, remote: DerivedAccount, local: str, remote_eid: int) -> None:
        self.solana.set_peer(remote.address, remote_eid, evm_peer_bytes(local))

    def _wire_local_to_remote(self, remote: DerivedAccount, local: str, target: WiringTarget) -> None:
        peer = account_peer_bytes(remote.address)
        logger.info("Solana adapter as peer: %s", to_hex(peer))
        self.evm.set_peer(target.evm_chain_id, local, target.remote_eid, peer)

    def _step(self, result: WiringResult, step: WiringStep, func: Callable[..., T], *args) -> T:
        index = list(WiringStep).index(step) + 1
        logger.info("[%d/%d] %s", index, len(WiringStep), step.label)
        try:
            value = func(*args)
        except OftWireError as exc:
            logger.error("%s failed: %s", step.label, exc)
            if result.completed:
                logger.error(
                    "Completed steps are left in place: %s",
                    ", ".join(s.label for s in result.completed),
                )
            raise WiringFailed(step, exc) from exc
        result.completed.append(step)
        return value
