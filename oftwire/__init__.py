"""Cross-chain OFT adapter wiring between an EVM chain and Solana."""

__version__ = "0.1.0"
