"""Subprocess wrappers for the EVM toolchain (forge / cast)."""

from __future__ import annotations

import logging
from pathlib import Path
import subprocess
from typing import Dict, List, Optional, Sequence

from .constants import DEFAULT_DEPLOY_SIG, EVM_SET_PEER_SIG
from .errors import SubprocessExecutionError, SubprocessLaunchError

logger = logging.getLogger(__name__)

_SECRET_FLAGS = {"--private-key"}


def redact_command(cmd: Sequence[str]) -> str:
    out: List[str] = []
    hide_next = False
    for part in cmd:
        if hide_next:
            out.append("***")
            hide_next = False
            continue
        out.append(part)
        if part in _SECRET_FLAGS:
            hide_next = True
    return " ".join(out)


def run_tool(
    cwd: str | Path | None,
    executable: str,
    args: Sequence[str],
    env: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> str:
    """Run ``executable`` to completion and return its stdout.

    stdout and stderr are always written to the log before the exit status is
    checked, so a failed deploy can be diagnosed from the operator output.
    """
    cmd = [executable, *args]
    logger.info("Running: %s", redact_command(cmd))
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise SubprocessLaunchError(f"failed to run {executable}: {exc}") from exc

    if result.stdout:
        logger.info("--- %s stdout ---\n%s", executable, result.stdout.rstrip())
    if result.stderr:
        logger.info("--- %s stderr ---\n%s", executable, result.stderr.rstrip())
    if result.returncode != 0:
        raise SubprocessExecutionError(executable, result.returncode, result.stderr or result.stdout)
    return result.stdout


def extract_marker_value(text: str, marker: str) -> Optional[str]:
    for line in text.splitlines():
        if marker in line:
            return line.split(marker, 1)[1].strip()
    return None


def forge_deploy_command(script: str, endpoint_address: str, rpc_url: str) -> List[str]:
    return [
        "script",
        script,
        "--sig",
        DEFAULT_DEPLOY_SIG,
        endpoint_address,
        "--rpc-url",
        rpc_url,
        "--broadcast",
    ]


def cast_set_peer_command(
    oft_address: str,
    remote_eid: int,
    peer_hex: str,
    rpc_url: str,
    private_key: str,
) -> List[str]:
    return [
        "send",
        oft_address,
        EVM_SET_PEER_SIG,
        str(remote_eid),
        peer_hex,
        "--rpc-url",
        rpc_url,
        "--private-key",
        private_key,
    ]
