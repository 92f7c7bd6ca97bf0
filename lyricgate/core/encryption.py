"""Encryption gateway — binds plaintext to a song's access condition.

The gateway resolves the chain, builds the condition set, and hands both
to the threshold network together with the caller's authorization.  It
keeps no state and never retries; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime

from lyricgate.bridge.lit_network import ThresholdNetworkClient, ThresholdNetworkError
from lyricgate.core.chain_registry import resolve_chain
from lyricgate.core.conditions import build_conditions
from lyricgate.models.auth import AuthorizationSig
from lyricgate.models.payloads import EncryptedPayload

logger = logging.getLogger(__name__)


class EncryptionFailedError(RuntimeError):
    """Raised when the threshold network fails to encrypt."""


class AuthorizationExpiredError(ValueError):
    """Raised when an expired authorization is presented for encryption."""


class EncryptionGateway:
    """Encrypts lyrics so only addresses with song access can decrypt.

    Parameters
    ----------
    network:
        Connected threshold-network client.
    contract_address:
        KaraokeAccess contract the condition calls.
    """

    def __init__(self, network: ThresholdNetworkClient, contract_address: str) -> None:
        self._network = network
        self._contract_address = contract_address

    def encrypt(
        self,
        plaintext: str,
        song_id: int,
        chain_id: int,
        authorization: AuthorizationSig,
        *,
        now: datetime | None = None,
    ) -> EncryptedPayload:
        """Encrypt *plaintext* under the access condition for *song_id*.

        Raises
        ------
        AuthorizationExpiredError
            If *authorization* has expired at *now*.
        UnsupportedChainError
            If *chain_id* is not in the chain table.
        EncryptionFailedError
            If the network rejects or fails the request.
        """
        if authorization.is_expired(now):
            raise AuthorizationExpiredError(
                f"Authorization for {authorization.address} expired at "
                f"{authorization.expires_at.isoformat()}"
            )

        chain = resolve_chain(chain_id)
        logger.debug("Chain name: %s", chain.chain_name)

        conditions = build_conditions(song_id, chain, self._contract_address)
        logger.debug("Access control conditions created for song %d", song_id)

        logger.info("Encrypting data for song %d on %s...", song_id, chain.chain_name)
        try:
            result = self._network.encrypt(
                plaintext.encode("utf-8"),
                [c.to_wire() for c in conditions],
                chain.chain_name,
                authorization.to_wire(),
            )
        except ThresholdNetworkError as exc:
            raise EncryptionFailedError(
                f"Encryption of song {song_id} failed ({exc.kind.value}): {exc}"
            ) from exc
        logger.info("Data encrypted")

        return EncryptedPayload(
            ciphertext=result.ciphertext,
            data_to_encrypt_hash=result.data_to_encrypt_hash,
            conditions=conditions,
        )
