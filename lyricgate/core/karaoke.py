"""Karaoke service — the application-facing façade.

Wires the gateways, the purchase orchestrator, the ledger, and the song
store into the operations the entry points need: publish a song with
encrypted lyrics, find songs, buy access, and read lyrics.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable

from eth_account.signers.local import LocalAccount
from web3 import Web3

from lyricgate.bridge.ledger import LedgerClient
from lyricgate.core.content_store import SongStore
from lyricgate.core.decryption import DecryptionGateway
from lyricgate.core.encryption import EncryptionGateway
from lyricgate.core.orchestrator import PurchaseOrchestrator
from lyricgate.models.auth import AuthorizationSig
from lyricgate.models.payloads import SongRecord

logger = logging.getLogger(__name__)


class KaraokeService:
    """Publish, discover, purchase, and unlock song lyrics.

    Parameters
    ----------
    encryption:
        Gateway used when publishing lyrics.
    decryption:
        Gateway used when reading lyrics.
    orchestrator:
        Purchase orchestrator bound to the access contract.
    ledger:
        Ledger client (for balance and direct access checks).
    store:
        Song record store.
    contract_address:
        KaraokeAccess contract address.
    """

    def __init__(
        self,
        *,
        encryption: EncryptionGateway,
        decryption: DecryptionGateway,
        orchestrator: PurchaseOrchestrator,
        ledger: LedgerClient,
        store: SongStore,
        contract_address: str,
    ) -> None:
        self._encryption = encryption
        self._decryption = decryption
        self._orchestrator = orchestrator
        self._ledger = ledger
        self._store = store
        self._contract_address = contract_address

    def add_song(
        self,
        song_id: int,
        title: str,
        artist: str,
        lyrics: str,
        chain_id: int,
        authorization: AuthorizationSig,
    ) -> SongRecord:
        """Encrypt *lyrics* under song access and store the song record."""
        logger.info("Encrypting lyrics for song %d (%s by %s)...", song_id, title, artist)
        payload = self._encryption.encrypt(lyrics, song_id, chain_id, authorization)
        logger.info("Lyrics encrypted")

        record = SongRecord.from_payload(song_id, title, artist, payload)
        logger.info("Storing song %d...", song_id)
        return self._store.insert(record)

    def search_songs(self, query: str | None = None) -> list[SongRecord]:
        """Songs whose title or artist contains *query*; all songs if empty."""
        songs = self._store.search(query)
        logger.info("Found %d song(s) for query %r", len(songs), query)
        return songs

    def purchase_song_access(self, song_id: int, signer: LocalAccount) -> bool:
        return self._orchestrator.ensure_access(song_id, signer)

    def get_song_lyrics(
        self,
        song: SongRecord,
        chain_id: int,
        authorization: AuthorizationSig,
    ) -> str:
        """Decrypt the lyrics of *song* for the holder of *authorization*.

        The direct contract check is informational only; the threshold
        network performs the authoritative check.
        """
        payload = song.to_payload()
        payload.ensure_complete()

        has_access = self._orchestrator.has_access(authorization.address, song.song_id)
        logger.info(
            "Contract access check: address=%s song_id=%d has_access=%s",
            authorization.address,
            song.song_id,
            has_access,
        )
        return self._decryption.decrypt(
            payload, chain_id, authorization, expected_song_id=song.song_id
        )

    def unlock_song(
        self,
        song: SongRecord,
        chain_id: int,
        signer: LocalAccount,
        authorize: Callable[[], AuthorizationSig],
    ) -> str:
        """Make sure *signer* has access to *song*, then decrypt its lyrics.

        *authorize* is called after the purchase settles, so a wait for
        confirmation cannot leave the decrypt with a lapsed authorization.
        """
        if self.purchase_song_access(song.song_id, signer):
            logger.info("Song access confirmed for song %d", song.song_id)
        else:
            logger.warning(
                "Purchase of song %d confirmed but access is not yet visible.",
                song.song_id,
            )
        return self.get_song_lyrics(song, chain_id, authorize())

    def contract_balance(self) -> Decimal:
        """Ether held by the access contract."""
        wei = self._ledger.get_balance(self._contract_address)
        return Decimal(Web3.from_wei(wei, "ether"))
