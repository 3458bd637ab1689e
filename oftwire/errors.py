"""Error taxonomy for oftwire."""

from __future__ import annotations

from typing import List, Optional


class OftWireError(Exception):
    """Base class for every failure raised by oftwire."""


class ConfigurationError(OftWireError, ValueError):
    """Bad CLI arguments, missing credentials or unusable config."""


class SelectorCollision(ConfigurationError):
    def __init__(self, first: str, second: str, selector: bytes) -> None:
        super().__init__(
            f"method names '{first}' and '{second}' share selector {selector.hex()}"
        )
        self.names = (first, second)
        self.selector = selector


class EncodingError(OftWireError, ValueError):
    """Malformed hex or wrong-length byte arrays."""


class InvalidInputLength(EncodingError):
    def __init__(self, expected: int, actual: int, what: str = "input") -> None:
        super().__init__(f"{what} must be exactly {expected} bytes (got {actual})")
        self.expected = expected
        self.actual = actual


class InvalidHexEncoding(EncodingError):
    pass


class InvalidMethodName(EncodingError):
    pass


class NoValidBumpFound(OftWireError):
    pass


class ExternalToolError(OftWireError, RuntimeError):
    """An external toolchain failed or produced unusable output."""


class SubprocessLaunchError(ExternalToolError):
    pass


class SubprocessExecutionError(ExternalToolError):
    def __init__(self, executable: str, exit_code: int, stderr: str) -> None:
        detail = stderr.strip() or "no stderr output"
        super().__init__(f"{executable} exited with code {exit_code}: {detail}")
        self.executable = executable
        self.exit_code = exit_code
        self.stderr = stderr


class DeployedAddressNotFound(ExternalToolError):
    pass


class ChainSubmissionError(OftWireError, RuntimeError):
    """A transaction was rejected by the ledger."""


class TransactionFailed(ChainSubmissionError):
    def __init__(self, cause: BaseException, logs: Optional[List[str]] = None) -> None:
        super().__init__(f"transaction failed: {cause}")
        self.cause = cause
        self.logs = list(logs or [])


class WiringFailed(OftWireError):
    """Terminal failure of a wiring run; earlier steps are left in place."""

    def __init__(self, step, cause: BaseException) -> None:
        super().__init__(f"{step.label} failed: {cause}")
        self.step = step
        self.cause = cause
