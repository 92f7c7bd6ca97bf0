"""Chain registry — numeric chain id to the symbolic name the network uses.

An incorrect chain name yields a condition that can never be satisfied, or
one evaluated against the wrong ledger, so an unknown id is a hard error.
"""

from __future__ import annotations

from lyricgate.models.chains import ChainContext, ChainEntry


class UnsupportedChainError(ValueError):
    """Raised when a numeric chain id has no entry in the chain table."""

    def __init__(self, chain_id: int) -> None:
        super().__init__(f"Unsupported chain ID: {chain_id}")
        self.chain_id = chain_id


# EVM chains understood by the Lit network, keyed by their Lit chain name.
KNOWN_CHAINS: tuple[ChainEntry, ...] = (
    ChainEntry(name="ethereum", chain_id=1),
    ChainEntry(name="polygon", chain_id=137),
    ChainEntry(name="fantom", chain_id=250),
    ChainEntry(name="xdai", chain_id=100),
    ChainEntry(name="bsc", chain_id=56),
    ChainEntry(name="arbitrum", chain_id=42161),
    ChainEntry(name="arbitrumSepolia", chain_id=421614),
    ChainEntry(name="avalanche", chain_id=43114),
    ChainEntry(name="fuji", chain_id=43113),
    ChainEntry(name="harmony", chain_id=1666600000),
    ChainEntry(name="mumbai", chain_id=80001),
    ChainEntry(name="goerli", chain_id=5),
    ChainEntry(name="cronos", chain_id=25),
    ChainEntry(name="optimism", chain_id=10),
    ChainEntry(name="celo", chain_id=42220),
    ChainEntry(name="aurora", chain_id=1313161554),
    ChainEntry(name="alfajores", chain_id=44787),
    ChainEntry(name="xdc", chain_id=50),
    ChainEntry(name="evmos", chain_id=9001),
    ChainEntry(name="bscTestnet", chain_id=97),
    ChainEntry(name="baseGoerli", chain_id=84531),
    ChainEntry(name="baseSepolia", chain_id=84532),
    ChainEntry(name="moonbeam", chain_id=1284),
    ChainEntry(name="moonriver", chain_id=1285),
    ChainEntry(name="moonbaseAlpha", chain_id=1287),
    ChainEntry(name="filecoin", chain_id=314),
    ChainEntry(name="sepolia", chain_id=11155111),
    ChainEntry(name="scrollSepolia", chain_id=534351),
    ChainEntry(name="scroll", chain_id=534352),
    ChainEntry(name="zksync", chain_id=324),
    ChainEntry(name="base", chain_id=8453),
    ChainEntry(name="lukso", chain_id=42),
    ChainEntry(name="zora", chain_id=7777777),
    ChainEntry(name="lineaSepolia", chain_id=59141),
    ChainEntry(name="chronicleTestnet", chain_id=175177),
    ChainEntry(name="yellowstone", chain_id=175188),
)


def resolve_chain_name(chain_id: int) -> str:
    """Return the symbolic name of the first table entry matching *chain_id*.

    Raises
    ------
    UnsupportedChainError
        If no entry has that numeric id.
    """
    for entry in KNOWN_CHAINS:
        if entry.chain_id == chain_id:
            return entry.name
    raise UnsupportedChainError(chain_id)


def resolve_chain(chain_id: int) -> ChainContext:
    """Look up *chain_id* and return its ``ChainContext``."""
    return ChainContext(chain_id=chain_id, chain_name=resolve_chain_name(chain_id))


def supported_chain_ids() -> list[int]:
    return [entry.chain_id for entry in KNOWN_CHAINS]
