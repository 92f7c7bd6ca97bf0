"""Ledger transaction models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TransactionHandle(BaseModel):
    """Reference to a submitted, not yet confirmed, transaction."""

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    function_name: str = ""


class TransactionReceipt(BaseModel):
    """Mined transaction as recorded by the ledger.

    ``effective_sender`` is the authoritative record of who paid.
    """

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    effective_sender: str
    status: int
    block_number: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1
