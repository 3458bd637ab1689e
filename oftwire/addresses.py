"""Address encodings shared by both chains."""

from __future__ import annotations

from dataclasses import dataclass
import string

from solders.pubkey import Pubkey

from .constants import EVM_ADDRESS_SIZE, PEER_SIZE
from .errors import EncodingError, InvalidHexEncoding, InvalidInputLength

_HEX_DIGITS = set(string.hexdigits)


@dataclass(frozen=True)
class EvmAddress:
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != EVM_ADDRESS_SIZE:
            raise InvalidInputLength(EVM_ADDRESS_SIZE, len(self.raw), "EVM address")

    def to_peer(self) -> bytes:
        return zero_pad_left(self.raw)

    def __str__(self) -> str:
        return to_hex(self.raw)


@dataclass(frozen=True)
class AccountAddress:
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != PEER_SIZE:
            raise InvalidInputLength(PEER_SIZE, len(self.raw), "account address")

    @classmethod
    def from_pubkey(cls, pubkey: Pubkey) -> "AccountAddress":
        return cls(bytes(pubkey))

    def to_peer(self) -> bytes:
        return self.raw

    def to_pubkey(self) -> Pubkey:
        return Pubkey.from_bytes(self.raw)

    def __str__(self) -> str:
        return str(self.to_pubkey())


def zero_pad_left(addr: bytes) -> bytes:
    """Place a 20-byte EVM address in the low 20 bytes of a 32-byte word."""
    if len(addr) != EVM_ADDRESS_SIZE:
        raise InvalidInputLength(EVM_ADDRESS_SIZE, len(addr), "EVM address")
    return bytes(PEER_SIZE - EVM_ADDRESS_SIZE) + bytes(addr)


def to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def from_hex(text: str) -> bytes:
    body = text[2:] if text[:2] in ("0x", "0X") else text
    if len(body) % 2:
        raise InvalidHexEncoding(f"hex string has odd length: {text!r}")
    if any(ch not in _HEX_DIGITS for ch in body):
        raise InvalidHexEncoding(f"hex string has non-hex characters: {text!r}")
    return bytes.fromhex(body)


def parse_evm_address(text: str) -> EvmAddress:
    return EvmAddress(from_hex(text.strip()))


def parse_pubkey(text: str, what: str = "address") -> Pubkey:
    try:
        return Pubkey.from_string(text.strip())
    except ValueError as exc:
        raise EncodingError(f"invalid {what} {text!r}: {exc}") from exc


def evm_peer_bytes(text: str) -> bytes:
    return parse_evm_address(text).to_peer()


def account_peer_bytes(pubkey: Pubkey) -> bytes:
    return AccountAddress.from_pubkey(pubkey).to_peer()
