"""Configuration resolution for oftwire.

Later sources win: defaults, Solana CLI config, TOML file, ``OFTWIRE_*``
environment variables, then explicit CLI overrides.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from solders.pubkey import Pubkey

from .constants import (
    DEFAULT_COMMITMENT,
    DEFAULT_CONFIG_FILE,
    DEFAULT_DEPLOY_SCRIPT,
    DEFAULT_ENV_FILE,
    DEFAULT_EVM_PROJECT_DIR,
    DEFAULT_INIT_METHOD,
    DEFAULT_PRIVATE_KEY_ENV,
    DEFAULT_RPC_ENDPOINT,
    DEFAULT_SET_PEER_METHOD,
    DEFAULT_SHARED_DECIMALS,
    DEFAULT_WALLET_PATH,
    EVM_RPC_URLS,
)
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_ENV_KEYS = {
    "OFTWIRE_PROGRAM_ID": "program_id",
    "OFTWIRE_RPC_URL": "rpc_endpoint",
    "OFTWIRE_WALLET": "default_wallet_path",
    "OFTWIRE_COMMITMENT": "commitment",
    "OFTWIRE_EVM_RPC_URL": "evm_rpc_url",
    "OFTWIRE_EVM_PROJECT_DIR": "evm_project_dir",
    "OFTWIRE_ENV_FILE": "env_file",
}

_TOML_KEYS = {
    "solana": {
        "program_id": "program_id",
        "rpc_url": "rpc_endpoint",
        "wallet": "default_wallet_path",
        "commitment": "commitment",
    },
    "evm": {
        "project_dir": "evm_project_dir",
        "deploy_script": "deploy_script",
        "env_file": "env_file",
        "private_key_env": "private_key_env",
        "rpc_url": "evm_rpc_url",
    },
    "adapter": {
        "shared_decimals": "shared_decimals",
        "init_method": "init_method",
        "set_peer_method": "set_peer_method",
    },
}


@dataclass
class WiringConfig:
    program_id: Optional[str] = None
    rpc_endpoint: str = DEFAULT_RPC_ENDPOINT
    default_wallet_path: str = DEFAULT_WALLET_PATH
    commitment: str = DEFAULT_COMMITMENT
    shared_decimals: int = DEFAULT_SHARED_DECIMALS
    init_method: str = DEFAULT_INIT_METHOD
    set_peer_method: str = DEFAULT_SET_PEER_METHOD
    evm_rpc_urls: Dict[int, str] = field(default_factory=lambda: dict(EVM_RPC_URLS))
    evm_rpc_url: Optional[str] = None
    evm_project_dir: str = DEFAULT_EVM_PROJECT_DIR
    deploy_script: str = DEFAULT_DEPLOY_SCRIPT
    env_file: str = DEFAULT_ENV_FILE
    private_key_env: str = DEFAULT_PRIVATE_KEY_ENV

    def program_pubkey(self) -> Pubkey:
        if not self.program_id:
            raise ConfigurationError(
                "adapter program id is not configured; pass --program-id, "
                "set OFTWIRE_PROGRAM_ID or [solana].program_id"
            )
        try:
            return Pubkey.from_string(self.program_id)
        except ValueError as exc:
            raise ConfigurationError(f"invalid program id {self.program_id!r}: {exc}") from exc

    def apply(self, overrides: Mapping[str, Any]) -> None:
        known = {f.name for f in fields(self)}
        for key, value in overrides.items():
            if key not in known:
                raise ConfigurationError(f"unknown config field: {key}")
            if value is None:
                continue
            setattr(self, key, value)
        self.validate()

    def validate(self) -> None:
        if isinstance(self.shared_decimals, bool) or not isinstance(self.shared_decimals, int):
            raise ConfigurationError("shared_decimals must be an integer")
        if self.shared_decimals < 0 or self.shared_decimals > 0xFF:
            raise ConfigurationError("shared_decimals must fit in u8")
        if self.commitment not in {"processed", "confirmed", "finalized"}:
            raise ConfigurationError("commitment must be processed, confirmed, or finalized")


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        import tomllib  # Python 3.11+
    except ImportError:  # pragma: no cover
        import tomli as tomllib  # type: ignore
    try:
        return tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"invalid config file {path}: {exc}") from exc


_SOLANA_CLI_KEYS = {"json_rpc_url": "rpc_endpoint", "keypair_path": "default_wallet_path"}


def solana_cli_overrides(env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """RPC URL and wallet path from the Solana CLI ``config.yml``, keyed by config field."""
    env = os.environ if env is None else env
    cfg_path = Path(env.get("SOLANA_CONFIG") or Path.home() / ".config" / "solana" / "cli" / "config.yml")
    try:
        lines = cfg_path.read_text().splitlines()
    except OSError:
        return {}
    found: Dict[str, str] = {}
    for line in lines:
        key, sep, value = line.partition(":")
        attr = _SOLANA_CLI_KEYS.get(key.strip())
        value = value.strip().strip("\"'")
        if sep and attr and value:
            found[attr] = value
    return found



def _toml_overrides(data: Dict[str, Any], path: Path) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for table, keys in _TOML_KEYS.items():
        section = data.get(table)
        if section is None:
            continue
        if not isinstance(section, dict):
            raise ConfigurationError(f"[{table}] in {path} must be a table")
        for key, attr in keys.items():
            if key in section:
                out[attr] = section[key]
    evm = data.get("evm") if isinstance(data.get("evm"), dict) else {}
    rpc_urls = evm.get("rpc_urls")
    if rpc_urls is not None:
        if not isinstance(rpc_urls, dict):
            raise ConfigurationError(f"[evm.rpc_urls] in {path} must be a table")
        parsed: Dict[int, str] = {}
        for chain_id, url in rpc_urls.items():
            try:
                parsed[int(chain_id)] = str(url)
            except ValueError as exc:
                raise ConfigurationError(f"evm.rpc_urls key {chain_id!r} is not a chain id") from exc
        out["evm_rpc_urls"] = {**EVM_RPC_URLS, **parsed}
    return out


def load_config(
    path: str | Path | None = None,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> WiringConfig:
    env = os.environ if env is None else env
    config = WiringConfig()

    config.apply(solana_cli_overrides(env))

    if path is not None:
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise ConfigurationError(f"Config file not found: {cfg_path}")
    else:
        cfg_path = Path(DEFAULT_CONFIG_FILE)
    if cfg_path.exists():
        logger.debug("Loading config from %s", cfg_path)
        config.apply(_toml_overrides(_load_toml(cfg_path), cfg_path))

    config.apply({attr: env.get(key) or None for key, attr in _ENV_KEYS.items()})
    if overrides:
        config.apply(overrides)
    return config


def load_env_file(path: str | Path) -> bool:
    env_path = Path(path)
    if not env_path.exists():
        logger.warning("%s not found; EVM signing key must come from the environment", env_path)
        return False
    load_dotenv(env_path)
    logger.debug("Loaded environment from %s", env_path)
    return True
