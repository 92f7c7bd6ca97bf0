"""Purchase/access orchestrator.

Drives one purchase attempt per call:

    Submit -> AwaitConfirmation -> Verify -> Success
       \\________________/
               | LedgerError(INSUFFICIENT_FUNDS)
               v
    InsufficientFundsRecovery -> Success | re-raise

A purchase is not idempotent at the transaction layer (a second attempt
spends funds again) but access is idempotent on-chain.  A purchase that
fails for lack of funds is treated as success only if the signer already
holds access.  Every other failure propagates unchanged and nothing is
retried.
"""

from __future__ import annotations

import logging

from eth_account.signers.local import LocalAccount

from lyricgate.bridge.abi import HAS_SONG_ACCESS, PURCHASE_SONG
from lyricgate.bridge.ledger import LedgerClient, LedgerError, LedgerErrorKind

logger = logging.getLogger(__name__)

# 0.001 ether
DEFAULT_PURCHASE_PRICE_WEI = 10**15


class PurchaseOrchestrator:
    """Purchases song access and confirms it on-chain.

    Parameters
    ----------
    ledger:
        Ledger client bound to the KaraokeAccess contract.
    price_wei:
        Value attached to every ``purchaseSong`` transaction.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        *,
        price_wei: int = DEFAULT_PURCHASE_PRICE_WEI,
    ) -> None:
        if price_wei < 0:
            raise ValueError(f"price_wei must be non-negative, got {price_wei}")
        self._ledger = ledger
        self._price_wei = price_wei

    @property
    def price_wei(self) -> int:
        return self._price_wei

    def has_access(self, address: str, song_id: int) -> bool:
        """Query ``hasSongAccess`` directly on the ledger."""
        return bool(self._ledger.call_read_only(HAS_SONG_ACCESS, [address, song_id]))

    def ensure_access(self, song_id: int, signer: LocalAccount) -> bool:
        """Purchase access to *song_id* for *signer* and verify it.

        Returns
        -------
        bool
            The on-chain access state after the purchase, or ``True`` when
            the purchase failed for lack of funds but access already exists.

        Raises
        ------
        InsufficientFundsError
            Funds were short and the signer does not hold access.
        LedgerError
            Any other submission or confirmation failure.
        """
        try:
            logger.info("Sending purchase transaction for song %d...", song_id)
            handle = self._ledger.submit_transaction(
                PURCHASE_SONG, [song_id], self._price_wei, signer
            )
            logger.info("Waiting for confirmation of %s...", handle.tx_hash)
            receipt = self._ledger.await_confirmation(handle)
        except LedgerError as exc:
            if exc.kind is not LedgerErrorKind.INSUFFICIENT_FUNDS:
                raise
            return self._recover_insufficient_funds(song_id, signer, exc)

        logger.info("Transaction confirmed in block %s", receipt.block_number)
        if receipt.effective_sender.lower() != signer.address.lower():
            logger.warning(
                "Receipt sender %s differs from signer %s; verifying access for "
                "the receipt sender.",
                receipt.effective_sender,
                signer.address,
            )

        granted = self.has_access(receipt.effective_sender, song_id)
        logger.info("Access verified for %s: %s", receipt.effective_sender, granted)
        return granted

    def _recover_insufficient_funds(
        self, song_id: int, signer: LocalAccount, original: LedgerError
    ) -> bool:
        # No receipt exists on this path, so the signer's own address is checked.
        if self.has_access(signer.address, song_id):
            logger.info(
                "Purchase of song %d failed for lack of funds, but %s already "
                "has access.",
                song_id,
                signer.address,
            )
            return True
        logger.error(
            "Purchase of song %d failed for lack of funds and %s has no access.",
            song_id,
            signer.address,
        )
        raise original
