"""EVM side of the wiring: forge deployment and cast peer call."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from .addresses import parse_evm_address, to_hex
from .constants import DEFAULT_PRIVATE_KEY_ENV, DEPLOYED_ADDR_MARKER
from .errors import ConfigurationError, DeployedAddressNotFound
from .toolchain import cast_set_peer_command, extract_marker_value, forge_deploy_command, run_tool

logger = logging.getLogger(__name__)


class EvmAdapterClient:
    def __init__(
        self,
        project_dir: str | Path,
        deploy_script: str,
        rpc_urls: Mapping[int, str],
        *,
        rpc_url_override: Optional[str] = None,
        private_key_env: str = DEFAULT_PRIVATE_KEY_ENV,
        env: Optional[Dict[str, str]] = None,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.deploy_script = deploy_script
        self.rpc_urls = dict(rpc_urls)
        self.rpc_url_override = rpc_url_override
        self.private_key_env = private_key_env
        self.env = env

    def rpc_url(self, chain_id: int) -> str:
        if self.rpc_url_override:
            return self.rpc_url_override
        url = self.rpc_urls.get(chain_id)
        if not url:
            raise ConfigurationError(
                f"no EVM RPC URL configured for chain id {chain_id}; "
                "set [evm.rpc_urls] in the config file or OFTWIRE_EVM_RPC_URL"
            )
        return url

    def deploy(self, chain_id: int, endpoint_address: str) -> str:
        rpc_url = self.rpc_url(chain_id)
        logger.info("Deploying EVM adapter on chain %d via forge", chain_id)
        stdout = run_tool(
            self.project_dir,
            "forge",
            forge_deploy_command(self.deploy_script, endpoint_address, rpc_url),
            env=self._environ(),
        )
        value = extract_marker_value(stdout, DEPLOYED_ADDR_MARKER)
        if not value:
            raise DeployedAddressNotFound(
                f"Could not find {DEPLOYED_ADDR_MARKER} in forge output; check the stdout above"
            )
        address = str(parse_evm_address(value))
        logger.info("Captured EVM adapter address: %s", address)
        return address

    def set_peer(self, chain_id: int, oft_address: str, remote_eid: int, peer: bytes) -> str:
        rpc_url = self.rpc_url(chain_id)
        environ = self._environ()
        private_key = environ.get(self.private_key_env)
        if not private_key:
            raise ConfigurationError(f"{self.private_key_env} is not set; cannot sign the EVM peer call")
        logger.info("Setting EVM peer on %s for eid %d", oft_address, remote_eid)
        return run_tool(
            None,
            "cast",
            cast_set_peer_command(oft_address, remote_eid, to_hex(peer), rpc_url, private_key),
            env=environ,
        )

    def _environ(self) -> Dict[str, str]:
        # Read at call time so keys loaded from the env file are visible.
        return dict(self.env) if self.env is not None else os.environ.copy()
