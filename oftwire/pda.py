"""Program-derived address search.

Mirrors the Solana runtime: for bump 255 down to 0, hash
``seeds || [bump] || program_id || "ProgramDerivedAddress"`` with sha256 and
accept the first digest that is not a valid ed25519 point.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
from typing import List, Optional, Sequence

from solders.pubkey import Pubkey

from .constants import MAX_SEED_LEN, MAX_SEEDS, PDA_MARKER, SEED_OFT_CONFIG, SEED_PEER
from .errors import EncodingError, NoValidBumpFound


@dataclass(frozen=True)
class DerivedAccount:
    address: Pubkey
    bump: int
    seeds: tuple

    @property
    def signer_seeds(self) -> List[bytes]:
        return [*self.seeds, bytes([self.bump])]


def _check_seeds(seeds: Sequence[bytes]) -> None:
    # The bump is appended as one more seed.
    if len(seeds) + 1 > MAX_SEEDS:
        raise EncodingError(f"at most {MAX_SEEDS - 1} seeds allowed (got {len(seeds)})")
    for idx, seed in enumerate(seeds):
        if not isinstance(seed, (bytes, bytearray)):
            raise EncodingError(f"seed {idx} must be bytes")
        if len(seed) > MAX_SEED_LEN:
            raise EncodingError(f"seed {idx} exceeds {MAX_SEED_LEN} bytes (got {len(seed)})")


def create_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Optional[Pubkey]:
    """Hash the seeds for one candidate; None when the digest lands on the curve."""
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(bytes(seed))
    hasher.update(bytes(program_id))
    hasher.update(PDA_MARKER)
    candidate = Pubkey.from_bytes(hasher.digest())
    if candidate.is_on_curve():
        return None
    return candidate


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> DerivedAccount:
    _check_seeds(seeds)
    for bump in range(255, -1, -1):
        address = create_program_address([*seeds, bytes([bump])], program_id)
        if address is not None:
            return DerivedAccount(address=address, bump=bump, seeds=tuple(bytes(s) for s in seeds))
    raise NoValidBumpFound(f"no off-curve bump for program {program_id}")


def oft_config_address(mint: Pubkey, program_id: Pubkey) -> DerivedAccount:
    return find_program_address([SEED_OFT_CONFIG, bytes(mint)], program_id)


def peer_config_address(oft_config: Pubkey, remote_eid: int, program_id: Pubkey) -> DerivedAccount:
    if remote_eid < 0 or remote_eid > 0xFFFF_FFFF:
        raise EncodingError("endpoint id must fit in u32")
    return find_program_address(
        [SEED_PEER, bytes(oft_config), remote_eid.to_bytes(4, "big")],
        program_id,
    )
