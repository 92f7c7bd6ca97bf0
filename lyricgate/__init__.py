"""LyricGate: pay-to-unlock song lyrics with condition-bound encryption.

Lyrics are encrypted through a threshold-encryption network (Lit Protocol)
under a contract-call condition, ``hasSongAccess(caller, songId) == true``.
Purchases happen on an EVM ledger; the network re-checks the condition
against live ledger state at every decrypt.
"""

__version__ = "0.1.0"
__description__ = "Pay-to-unlock song lyrics with condition-bound encryption"

from lyricgate.core.decryption import DecryptionGateway
from lyricgate.core.encryption import EncryptionGateway
from lyricgate.core.karaoke import KaraokeService
from lyricgate.core.orchestrator import PurchaseOrchestrator
from lyricgate.cli.app import app as cli

__all__ = [
    "DecryptionGateway",
    "EncryptionGateway",
    "KaraokeService",
    "PurchaseOrchestrator",
    "cli",
    "__version__",
]
