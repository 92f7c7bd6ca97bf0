"""Session wiring — builds every external handle once and passes it down.

A ``LyricGateSession`` owns the ledger client, the threshold-network
client, the song store, the wallet, and the authorization holder for one
logical session.  Nothing here is module-global; tests build sessions with
substitute clients.
"""

from __future__ import annotations

import logging

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys.exceptions import ValidationError as KeyValidationError

from lyricgate.bridge.ledger import LedgerClient, Web3LedgerClient
from lyricgate.bridge.lit_network import LitNetworkClient, ThresholdNetworkClient
from lyricgate.config import ConfigurationError, LyricGateSettings
from lyricgate.core.authorization import AuthorizationSession
from lyricgate.core.content_store import SongStore
from lyricgate.core.decryption import DecryptionGateway
from lyricgate.core.encryption import EncryptionGateway
from lyricgate.core.karaoke import KaraokeService
from lyricgate.core.orchestrator import PurchaseOrchestrator

logger = logging.getLogger(__name__)


class LyricGateSession:
    """All collaborators for one run of an entry point.

    Parameters
    ----------
    settings:
        Loaded configuration.
    ledger, network, store:
        Optional pre-built collaborators.  Production clients are built
        from *settings* when omitted.
    """

    def __init__(
        self,
        settings: LyricGateSettings,
        *,
        ledger: LedgerClient | None = None,
        network: ThresholdNetworkClient | None = None,
        store: SongStore | None = None,
    ) -> None:
        self.settings = settings
        self.signer = _load_signer(settings)

        self.ledger: LedgerClient = ledger or Web3LedgerClient(
            settings.contract_address,
            settings.rpc_url,
            confirmation_timeout=settings.confirmation_timeout_seconds,
        )
        self.network: ThresholdNetworkClient = network or LitNetworkClient(
            settings.lit_network,
            auth_token=settings.private_key.get_secret_value(),
        )
        self.store = store or SongStore(
            settings.song_db_path, settings.song_model_id, settings.context_id
        )
        self.authorizations = AuthorizationSession(
            self.signer,
            domain=settings.siwe_domain,
            uri=settings.siwe_uri,
            statement=settings.siwe_statement,
        )
        self.orchestrator = PurchaseOrchestrator(
            self.ledger, price_wei=settings.purchase_price_wei
        )
        self.service = KaraokeService(
            encryption=EncryptionGateway(self.network, settings.contract_address),
            decryption=DecryptionGateway(self.network, settings.contract_address),
            orchestrator=self.orchestrator,
            ledger=self.ledger,
            store=self.store,
            contract_address=settings.contract_address,
        )

    @property
    def address(self) -> str:
        return self.signer.address

    @property
    def chain_id(self) -> int:
        return self.ledger.chain_id

    def connect(self) -> None:
        """Connect to the threshold network."""
        self.network.connect()
        logger.info("Session ready for %s", self.signer.address)


def _load_signer(settings: LyricGateSettings) -> LocalAccount:
    try:
        return Account.from_key(settings.private_key.get_secret_value())
    except (ValueError, KeyValidationError) as exc:
        raise ConfigurationError(f"Invalid signing private key: {exc}") from exc


def build_session(settings: LyricGateSettings, **collaborators: object) -> LyricGateSession:
    """Build a ``LyricGateSession`` from *settings*."""
    return LyricGateSession(settings, **collaborators)  # type: ignore[arg-type]
