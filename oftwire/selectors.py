"""Instruction selector derivation.

A selector is the first 8 bytes of ``sha256("global:<name>")``. Selectors are
always computed from the method name; there is no table of pasted constants.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Dict, Mapping

from .constants import SELECTOR_NAMESPACE, SELECTOR_SIZE
from .errors import InvalidMethodName, SelectorCollision

logger = logging.getLogger(__name__)


def derive_selector(method_name: str) -> bytes:
    if not isinstance(method_name, str) or not method_name:
        raise InvalidMethodName("method name must be a non-empty string")
    preimage = f"{SELECTOR_NAMESPACE}:{method_name}".encode("utf-8")
    selector = hashlib.sha256(preimage).digest()[:SELECTOR_SIZE]
    logger.debug("selector %s:%s = %s", SELECTOR_NAMESPACE, method_name, selector.hex())
    return selector


def ensure_distinct(methods: Mapping[str, str]) -> Dict[str, bytes]:
    """Derive a selector per operation; fail if two operations share one."""
    seen: Dict[bytes, str] = {}
    out: Dict[str, bytes] = {}
    for operation, name in methods.items():
        selector = derive_selector(name)
        other = seen.get(selector)
        if other is not None:
            raise SelectorCollision(other, name, selector)
        seen[selector] = name
        out[operation] = selector
    return out
