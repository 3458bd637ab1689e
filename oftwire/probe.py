"""Selector discovery by simulation.

Each candidate method name is turned into a trial instruction and simulated.
Nothing is broadcast. The report only advises which selector the deployed
program accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional, Sequence

from solders.instruction import AccountMeta
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .errors import OftWireError
from .executor import SUBMISSION_ERRORS, TransactionExecutor
from .instructions import ArgsStruct, build_instruction
from .selectors import derive_selector

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    method_name: str
    selector: bytes
    accepted: bool
    error: Optional[str] = None
    logs: List[str] = field(default_factory=list)


class DiscriminatorProbe:
    def __init__(self, executor: TransactionExecutor, program_id: Pubkey) -> None:
        self.executor = executor
        self.program_id = program_id

    def run(
        self,
        candidates: Sequence[str],
        args: ArgsStruct,
        accounts: Sequence[AccountMeta],
        signer: Keypair,
    ) -> List[ProbeResult]:
        results: List[ProbeResult] = []
        for name in candidates:
            selector = derive_selector(name)
            ix = build_instruction(self.program_id, selector, args, accounts)
            try:
                tx = self.executor.build_transaction(ix, signer)
                sim = self.executor.simulate(tx)
            except (OftWireError, *SUBMISSION_ERRORS) as exc:
                logger.warning("probe %s: simulation request failed: %s", name, exc)
                results.append(ProbeResult(name, selector, False, error=str(exc)))
                continue
            accepted = sim.err is None
            result = ProbeResult(
                name,
                selector,
                accepted,
                error=None if accepted else str(sim.err),
                logs=list(sim.logs or []),
            )
            logger.info("probe %s (%s): %s", name, selector.hex(), "accepted" if accepted else "rejected")
            results.append(result)
        return results


def format_report(results: Sequence[ProbeResult]) -> str:
    if not results:
        return "no candidates probed"
    width = max(len(r.method_name) for r in results)
    lines = []
    for r in results:
        status = "ACCEPTED" if r.accepted else "rejected"
        line = f"{r.method_name:<{width}}  {r.selector.hex()}  {status}"
        if r.error:
            line += f"  {r.error}"
        lines.append(line)
    return "\n".join(lines)
