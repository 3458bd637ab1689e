"""CLI entrypoint for oftwire."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from rich.logging import RichHandler
from solana.rpc.api import Client
from solders.instruction import AccountMeta

from .addresses import from_hex, parse_pubkey
from .config import WiringConfig, load_config, load_env_file
from .constants import DEFAULT_ENV_FILE, PEER_SIZE, PROBE_CANDIDATES
from .errors import InvalidInputLength, OftWireError, WiringFailed
from .evm import EvmAdapterClient
from .executor import TransactionExecutor, load_keypair
from .instructions import InitAdapterArgs, SetPeerArgs
from .orchestrator import WiringOrchestrator, WiringTarget
from .pda import oft_config_address
from .probe import DiscriminatorProbe, format_report
from .selectors import derive_selector
from .solana_side import SolanaAdapterClient


def _configure_logging(verbose: bool = False) -> None:
    root = logging.getLogger()
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(show_path=False, markup=False, rich_tracebacks=False))
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def _load_config(args: argparse.Namespace) -> WiringConfig:
    config = load_config(
        args.config,
        overrides={
            "program_id": args.program_id,
            "rpc_endpoint": args.rpc_url,
            "default_wallet_path": args.wallet,
        },
    )
    if config.env_file != os.environ.get("OFTWIRE_ENV_FILE", DEFAULT_ENV_FILE):
        load_env_file(config.env_file)
    return config


def _solana_client(config: WiringConfig) -> SolanaAdapterClient:
    executor = TransactionExecutor(Client(config.rpc_endpoint), config.commitment)
    return SolanaAdapterClient(
        executor,
        config.program_pubkey(),
        config.default_wallet_path,
        shared_decimals=config.shared_decimals,
        init_method=config.init_method,
        set_peer_method=config.set_peer_method,
    )


def _evm_client(config: WiringConfig) -> EvmAdapterClient:
    return EvmAdapterClient(
        config.evm_project_dir,
        config.deploy_script,
        config.evm_rpc_urls,
        rpc_url_override=config.evm_rpc_url,
        private_key_env=config.private_key_env,
    )


def _cmd_deploy(args: argparse.Namespace) -> int:
    config = _load_config(args)
    target = WiringTarget(
        mint=parse_pubkey(args.mint, "mint"),
        evm_chain_id=args.evm_chain_id,
        evm_endpoint=args.lz_endpoint,
        remote_eid=args.target_eid,
    )
    orchestrator = WiringOrchestrator(_solana_client(config), _evm_client(config))
    result = orchestrator.run(target)
    print(f"Solana adapter config: {result.remote_adapter.address}")
    print(f"EVM adapter: {result.local_adapter}")
    print("Cross-chain setup complete!")
    return 0


def _cmd_probe(args: argparse.Namespace) -> int:
    config = _load_config(args)
    program_id = config.program_pubkey()
    mint = parse_pubkey(args.mint, "mint")
    signer = load_keypair(config.default_wallet_path)
    oft_config = oft_config_address(mint, program_id)

    if args.args == "set-peer":
        peer = from_hex(args.peer) if args.peer else bytes(PEER_SIZE)
        if len(peer) != PEER_SIZE:
            raise InvalidInputLength(PEER_SIZE, len(peer), "--peer")
        trial_args = SetPeerArgs(args.target_eid, peer)
    else:
        trial_args = InitAdapterArgs(config.shared_decimals)
    accounts = [
        AccountMeta(signer.pubkey(), True, True),
        AccountMeta(oft_config.address, False, True),
    ]

    executor = TransactionExecutor(Client(config.rpc_endpoint), config.commitment)
    candidates = args.candidate or list(PROBE_CANDIDATES)
    results = DiscriminatorProbe(executor, program_id).run(candidates, trial_args, accounts, signer)
    print(format_report(results))
    return 0


def _cmd_selectors(args: argparse.Namespace) -> int:
    names = args.names or list(PROBE_CANDIDATES)
    width = max(len(name) for name in names)
    for name in names:
        print(f"{name:<{width}}  {derive_selector(name).hex()}")
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", help="Config file (default: ./oftwire.toml when present)")
    p.add_argument("--program-id", help="Solana adapter program id")
    p.add_argument("--rpc-url", help="Solana RPC URL override")
    p.add_argument("--wallet", help="Solana keypair file")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]) or "oftwire",
        description="Wire an EVM OFT adapter and a Solana OFT adapter as peers",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_deploy = sub.add_parser("deploy", help="Initialize, deploy, and wire both adapters")
    p_deploy.add_argument("-m", "--mint", required=True, help="Solana token mint")
    p_deploy.add_argument("-e", "--evm-chain-id", type=int, required=True, help="EVM chain id")
    p_deploy.add_argument("-l", "--lz-endpoint", required=True, help="EVM endpoint contract address")
    p_deploy.add_argument("--target-eid", type=int, required=True, help="Endpoint id used for peering")
    _add_common(p_deploy)
    p_deploy.set_defaults(func=_cmd_deploy)

    p_probe = sub.add_parser("probe", help="Simulate candidate selectors against the program (no broadcast)")
    p_probe.add_argument("-m", "--mint", required=True, help="Solana token mint")
    p_probe.add_argument(
        "--candidate",
        action="append",
        help="Method name to try (repeatable; defaults to a built-in list)",
    )
    p_probe.add_argument("--args", choices=["init", "set-peer"], default="init", help="Trial argument struct")
    p_probe.add_argument("--target-eid", type=int, default=0)
    p_probe.add_argument("--peer", help="32-byte peer as hex (set-peer args)")
    _add_common(p_probe)
    p_probe.set_defaults(func=_cmd_probe)

    p_selectors = sub.add_parser("selectors", help="Print computed selectors")
    p_selectors.add_argument("names", nargs="*", help="Method names")
    p_selectors.set_defaults(func=_cmd_selectors)
    return parser


def main(argv: list[str] | None = None) -> int:
    _configure_logging()
    load_env_file(os.environ.get("OFTWIRE_ENV_FILE", DEFAULT_ENV_FILE))

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        _configure_logging(verbose=True)
    try:
        return args.func(args)
    except WiringFailed as exc:
        print(f"Wiring failed at {exc.step.label}: {exc.cause}")
        return 1
    except OftWireError as exc:
        print(str(exc))
        return 1
    except FileNotFoundError as exc:
        print(str(exc))
        return 1
    except ValueError as exc:
        print(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
