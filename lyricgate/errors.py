"""Every LyricGate error type, importable from one place.

Each error is defined beside the code that raises it; this module only
re-exports them.
"""

from lyricgate.bridge.ledger import InsufficientFundsError, LedgerError, LedgerErrorKind
from lyricgate.bridge.lit_network import (
    NetworkErrorKind,
    ThresholdNetworkError,
    ThresholdNetworkUnavailable,
)
from lyricgate.config import ConfigurationError
from lyricgate.core.chain_registry import UnsupportedChainError
from lyricgate.core.content_store import SongStoreError
from lyricgate.core.decryption import AccessDeniedError, DecryptionFailedError
from lyricgate.core.encryption import AuthorizationExpiredError, EncryptionFailedError
from lyricgate.models.payloads import MalformedPayloadError

__all__ = [
    "AccessDeniedError",
    "AuthorizationExpiredError",
    "ConfigurationError",
    "DecryptionFailedError",
    "EncryptionFailedError",
    "InsufficientFundsError",
    "LedgerError",
    "LedgerErrorKind",
    "MalformedPayloadError",
    "NetworkErrorKind",
    "SongStoreError",
    "ThresholdNetworkError",
    "ThresholdNetworkUnavailable",
    "UnsupportedChainError",
]
