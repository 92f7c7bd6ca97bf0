"""LyricGate data models — all Pydantic v2, all frozen (immutable)."""

from lyricgate.models.auth import AUTH_SIG_TTL, AuthorizationSig
from lyricgate.models.chains import ChainContext, ChainEntry
from lyricgate.models.conditions import (
    CALLER_ADDRESS_TOKEN,
    AbiParam,
    AccessCondition,
    CallerAddressPlaceholder,
    FunctionAbi,
    LiteralArg,
    PredicateArg,
    ReturnValueTest,
)
from lyricgate.models.ledger import TransactionHandle, TransactionReceipt
from lyricgate.models.payloads import EncryptedPayload, MalformedPayloadError, SongRecord

__all__ = [
    # auth
    "AUTH_SIG_TTL",
    "AuthorizationSig",
    # chains
    "ChainContext",
    "ChainEntry",
    # conditions
    "CALLER_ADDRESS_TOKEN",
    "AbiParam",
    "AccessCondition",
    "CallerAddressPlaceholder",
    "FunctionAbi",
    "LiteralArg",
    "PredicateArg",
    "ReturnValueTest",
    # ledger
    "TransactionHandle",
    "TransactionReceipt",
    # payloads
    "EncryptedPayload",
    "MalformedPayloadError",
    "SongRecord",
]
