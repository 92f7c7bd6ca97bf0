"""Condition-set fingerprints.

A payload's conditions must be byte-identical between encrypt time and
decrypt time, so condition sets are compared by a digest of their sorted,
compact JSON wire form rather than by object equality.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def conditions_fingerprint(wire_conditions: list[dict[str, Any]]) -> str:
    """Return ``sha256:<hex>`` over the ``evmContractConditions`` wire form.

    Two condition sets are structurally identical exactly when their
    fingerprints match; key order in the wire dicts does not matter.
    """
    body = json.dumps(
        {"evmContractConditions": wire_conditions},
        sort_keys=True,
        separators=(",", ":"),
    )
    return "sha256:" + hashlib.sha256(body.encode("utf-8")).hexdigest()
