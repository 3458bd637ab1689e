"""Instruction assembly for the Solana adapter program.

Payload layout is ``selector || args`` where args are little-endian fixed-width
integers and fixed-length byte arrays, with no length prefixes.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
import struct
from typing import ClassVar, List, Sequence

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from .constants import PEER_SIZE, SELECTOR_SIZE, SYSTEM_PROGRAM_ID
from .errors import EncodingError, InvalidInputLength


@dataclass(frozen=True)
class ArgsStruct:
    """Base for instruction argument structs; ``LAYOUT`` is a struct format."""

    LAYOUT: ClassVar[str] = "<"

    def pack(self) -> bytes:
        values = [getattr(self, f.name) for f in fields(self)]
        try:
            return struct.pack(self.LAYOUT, *values)
        except struct.error as exc:
            raise EncodingError(f"{type(self).__name__}: {exc}") from exc


@dataclass(frozen=True)
class InitAdapterArgs(ArgsStruct):
    LAYOUT: ClassVar[str] = "<B"

    shared_decimals: int


@dataclass(frozen=True)
class SetPeerArgs(ArgsStruct):
    LAYOUT: ClassVar[str] = f"<I{PEER_SIZE}s"

    remote_eid: int
    peer: bytes

    def __post_init__(self) -> None:
        # struct would silently pad a short peer.
        if len(self.peer) != PEER_SIZE:
            raise InvalidInputLength(PEER_SIZE, len(self.peer), "peer")


def build_instruction(
    program_id: Pubkey,
    selector: bytes,
    args: ArgsStruct,
    accounts: Sequence[AccountMeta],
) -> Instruction:
    if len(selector) != SELECTOR_SIZE:
        raise InvalidInputLength(SELECTOR_SIZE, len(selector), "selector")
    return Instruction(program_id, bytes(selector) + args.pack(), list(accounts))


def init_adapter_accounts(payer: Pubkey, oft_config: Pubkey, mint: Pubkey) -> List[AccountMeta]:
    return [
        AccountMeta(payer, True, True),
        AccountMeta(oft_config, False, True),
        AccountMeta(mint, False, False),
        AccountMeta(Pubkey.from_string(SYSTEM_PROGRAM_ID), False, False),
    ]


def set_peer_accounts(admin: Pubkey, peer_config: Pubkey, oft_config: Pubkey) -> List[AccountMeta]:
    return [
        AccountMeta(admin, True, True),
        AccountMeta(peer_config, False, True),
        AccountMeta(oft_config, False, False),
        AccountMeta(Pubkey.from_string(SYSTEM_PROGRAM_ID), False, False),
    ]


def describe_instruction(ix: Instruction) -> str:
    data = bytes(ix.data)
    lines = [
        f"program: {ix.program_id}",
        f"selector: {data[:SELECTOR_SIZE].hex()}",
        f"payload: {data.hex()}",
    ]
    for idx, meta in enumerate(ix.accounts):
        flags = ("s" if meta.is_signer else "-") + ("w" if meta.is_writable else "-")
        lines.append(f"account[{idx}] {flags} {meta.pubkey}")
    return "\n".join(lines)
