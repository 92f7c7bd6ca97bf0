"""Chain identity models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ChainEntry(BaseModel):
    """One row of the static chain table."""

    model_config = ConfigDict(frozen=True)

    name: str
    chain_id: int


class ChainContext(BaseModel):
    """A numeric chain id paired with the symbolic name the network expects.

    Obtained from ``lyricgate.core.chain_registry.resolve_chain``; there is
    no sensible default, so callers never build one by hand.
    """

    model_config = ConfigDict(frozen=True)

    chain_id: int
    chain_name: str
