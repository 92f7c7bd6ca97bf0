"""Access condition builder.

Builds the single contract-call condition that gates a song's lyrics:
``hasSongAccess(<caller>, songId) == true`` on the KaraokeAccess contract.

The builder is pure and deterministic.  The same inputs always produce a
structurally equal condition, so a condition can be rebuilt at decrypt time
and compared against the one stored with the payload.
"""

from __future__ import annotations

from web3 import Web3

from lyricgate.bridge.abi import HAS_SONG_ACCESS, HAS_SONG_ACCESS_ABI
from lyricgate.core.hasher import conditions_fingerprint
from lyricgate.models.chains import ChainContext
from lyricgate.models.conditions import (
    AccessCondition,
    CallerAddressPlaceholder,
    FunctionAbi,
    LiteralArg,
    ReturnValueTest,
)

_HAS_ACCESS_FUNCTION_ABI = FunctionAbi.from_wire(HAS_SONG_ACCESS_ABI)


def build_condition(
    song_id: int,
    chain: ChainContext,
    contract_address: str,
) -> AccessCondition:
    """Build the ``hasSongAccess`` condition for *song_id* on *chain*.

    Parameters
    ----------
    song_id:
        Non-negative content id, also the on-chain purchase-ledger key.
    chain:
        Resolved chain context; its symbolic name is embedded in the
        condition.
    contract_address:
        Address of the access contract.  Normalised to EIP-55 checksum
        form.

    Raises
    ------
    ValueError
        If *song_id* is negative or *contract_address* is not an address.
    """
    if song_id < 0:
        raise ValueError(f"song_id must be non-negative, got {song_id}")

    return AccessCondition(
        contract_address=Web3.to_checksum_address(contract_address),
        function_name=HAS_SONG_ACCESS,
        function_params=(
            CallerAddressPlaceholder(),
            LiteralArg(value=str(song_id)),
        ),
        function_abi=_HAS_ACCESS_FUNCTION_ABI,
        chain=chain.chain_name,
        return_value_test=ReturnValueTest(key="", comparator="=", value="true"),
    )


def build_conditions(
    song_id: int,
    chain: ChainContext,
    contract_address: str,
) -> tuple[AccessCondition, ...]:
    """The condition set bound to one encryption (a single condition)."""
    return (build_condition(song_id, chain, contract_address),)


def conditions_match(
    left: tuple[AccessCondition, ...] | list[AccessCondition],
    right: tuple[AccessCondition, ...] | list[AccessCondition],
) -> bool:
    """True when both condition sets serialize to the same canonical bytes."""
    return conditions_fingerprint([c.to_wire() for c in left]) == conditions_fingerprint(
        [c.to_wire() for c in right]
    )
