"""Decryption gateway — asks the threshold network to release plaintext.

This module does not decide access.  It forwards the stored condition set,
the ciphertext, and the caller's authorization; the network re-evaluates
every condition against the ledger at request time.  Access can therefore
be granted or revoked purely by changing on-chain state, with no
re-encryption.

The gateway also does not check the authorization's expiry: the network
enforces it.
"""

from __future__ import annotations

import logging

from lyricgate.bridge.lit_network import (
    NetworkErrorKind,
    ThresholdNetworkClient,
    ThresholdNetworkError,
)
from lyricgate.core.chain_registry import resolve_chain
from lyricgate.core.conditions import build_conditions, conditions_match
from lyricgate.models.auth import AuthorizationSig
from lyricgate.models.payloads import EncryptedPayload, MalformedPayloadError

logger = logging.getLogger(__name__)


class DecryptionFailedError(RuntimeError):
    """Raised on transport or other non-access failures.  Safe to retry."""


class AccessDeniedError(RuntimeError):
    """Raised when the access condition evaluated false for the caller."""


class DecryptionGateway:
    """Requests decryption of condition-bound payloads.

    Parameters
    ----------
    network:
        Connected threshold-network client.
    contract_address:
        KaraokeAccess contract; used only when checking a payload's
        conditions against a rebuilt condition.
    """

    def __init__(
        self,
        network: ThresholdNetworkClient,
        contract_address: str | None = None,
    ) -> None:
        self._network = network
        self._contract_address = contract_address

    def decrypt(
        self,
        payload: EncryptedPayload,
        chain_id: int,
        authorization: AuthorizationSig,
        *,
        expected_song_id: int | None = None,
    ) -> str:
        """Return the plaintext of *payload* if the caller currently has access.

        Parameters
        ----------
        payload:
            Stored ciphertext, integrity hash, and condition set.
        chain_id:
            Numeric chain id; resolved to the network's chain name.
        authorization:
            The caller's signed challenge.
        expected_song_id:
            When given, the payload's conditions must equal the condition
            rebuilt for this song id.

        Raises
        ------
        MalformedPayloadError
            Missing fields, or conditions that do not match
            *expected_song_id*.  Raised before any network call.
        UnsupportedChainError
            If *chain_id* is not in the chain table.
        AccessDeniedError
            The network evaluated the conditions false for this caller.
        DecryptionFailedError
            Any other network failure, or plaintext that is not UTF-8.
        """
        payload.ensure_complete()
        chain = resolve_chain(chain_id)

        if expected_song_id is not None:
            self._check_conditions(payload, expected_song_id, chain_id)

        logger.info(
            "Requesting decryption on %s for %s", chain.chain_name, authorization.address
        )
        try:
            plaintext = self._network.decrypt(
                payload.ciphertext,
                payload.data_to_encrypt_hash,
                payload.conditions_wire(),
                chain.chain_name,
                authorization.to_wire(),
            )
        except ThresholdNetworkError as exc:
            if exc.kind is NetworkErrorKind.ACCESS_DENIED:
                raise AccessDeniedError(
                    f"{authorization.address} does not currently satisfy the "
                    f"access conditions: {exc}"
                ) from exc
            raise DecryptionFailedError(
                f"Decryption failed ({exc.kind.value}): {exc}"
            ) from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionFailedError(f"Decrypted lyrics are not UTF-8 text: {exc}") from exc

    def _check_conditions(
        self, payload: EncryptedPayload, song_id: int, chain_id: int
    ) -> None:
        if self._contract_address is None:
            raise ValueError("contract_address is required to check conditions")
        expected = build_conditions(song_id, resolve_chain(chain_id), self._contract_address)
        if not conditions_match(payload.conditions, expected):
            raise MalformedPayloadError(
                f"Payload conditions do not match the access condition for song {song_id}"
            )
