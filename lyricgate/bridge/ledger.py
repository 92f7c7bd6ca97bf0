"""Ledger bridge — EVM access contract over web3.py.

Bridge boundary
---------------
Core code talks to the ledger through the ``LedgerClient`` protocol:
submit a transaction, wait for its receipt, make a read-only call, read a
balance.  ``Web3LedgerClient`` implements it for the KaraokeAccess contract
using ``web3.py`` and ``eth_account`` local signing.

Every node or transport failure is translated exactly once, in
``classify_ledger_error``, into a ``LedgerError`` carrying a
``LedgerErrorKind``.  Callers branch on the kind, never on message text.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from lyricgate.bridge.abi import CONTRACT_ABI
from lyricgate.models.ledger import TransactionHandle, TransactionReceipt

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class LedgerErrorKind(str, Enum):
    """Closed set of ledger failure classes."""

    INSUFFICIENT_FUNDS = "insufficient_funds"
    REVERTED = "reverted"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class LedgerError(RuntimeError):
    """Raised when a ledger submission, confirmation, or call fails."""

    def __init__(self, message: str, kind: LedgerErrorKind = LedgerErrorKind.UNKNOWN) -> None:
        super().__init__(message)
        self.kind = kind


class InsufficientFundsError(LedgerError):
    """The signer's balance cannot cover value plus gas."""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind=LedgerErrorKind.INSUFFICIENT_FUNDS)


def ledger_error(message: str, kind: LedgerErrorKind) -> LedgerError:
    """Build the ``LedgerError`` subclass matching *kind*."""
    if kind is LedgerErrorKind.INSUFFICIENT_FUNDS:
        return InsufficientFundsError(message)
    return LedgerError(message, kind=kind)


def classify_ledger_error(exc: BaseException) -> LedgerErrorKind:
    """Map a web3 / JSON-RPC exception onto ``LedgerErrorKind``.

    Nodes report a short balance as a JSON-RPC error whose message starts
    with ``insufficient funds``; this is the only place that text is read.
    """
    if isinstance(exc, LedgerError):
        return exc.kind
    if "insufficient funds" in str(exc).lower():
        return LedgerErrorKind.INSUFFICIENT_FUNDS
    if isinstance(exc, TimeExhausted):
        return LedgerErrorKind.TIMEOUT
    if isinstance(exc, ContractLogicError):
        return LedgerErrorKind.REVERTED
    if isinstance(exc, OSError):
        return LedgerErrorKind.TRANSPORT
    return LedgerErrorKind.UNKNOWN


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class LedgerClient(Protocol):
    """Interface of the external ledger as seen by the core."""

    @property
    def chain_id(self) -> int: ...

    def submit_transaction(
        self,
        function_name: str,
        args: list[Any],
        value_wei: int,
        signer: LocalAccount,
    ) -> TransactionHandle: ...

    def await_confirmation(self, handle: TransactionHandle) -> TransactionReceipt: ...

    def call_read_only(self, function_name: str, args: list[Any]) -> Any: ...

    def get_balance(self, address: str) -> int: ...


# ---------------------------------------------------------------------------
# web3.py implementation
# ---------------------------------------------------------------------------


class Web3LedgerClient:
    """``LedgerClient`` for the KaraokeAccess contract.

    Parameters
    ----------
    contract_address:
        Deployed KaraokeAccess address.
    rpc_url:
        JSON-RPC endpoint.  Ignored when *w3* is given.
    w3:
        Pre-built ``Web3`` instance (useful for custom providers).
    confirmation_timeout:
        Seconds handed to ``wait_for_transaction_receipt``.  The wait has
        no other bound.
    """

    def __init__(
        self,
        contract_address: str,
        rpc_url: str | None = None,
        *,
        w3: Web3 | None = None,
        abi: list[dict[str, Any]] | None = None,
        confirmation_timeout: float = 120.0,
    ) -> None:
        if w3 is None:
            if not rpc_url:
                raise ValueError("Either rpc_url or w3 is required.")
            w3 = Web3(Web3.HTTPProvider(rpc_url))
        self._w3 = w3
        self._contract = self._w3.eth.contract(
            address=Web3.to_checksum_address(contract_address),
            abi=abi or CONTRACT_ABI,
        )
        self._confirmation_timeout = confirmation_timeout
        self._chain_id: int | None = None

    @property
    def contract_address(self) -> str:
        return self._contract.address

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            try:
                self._chain_id = int(self._w3.eth.chain_id)
            except (Web3Exception, ValueError, OSError) as exc:
                raise self._translate(exc, "Could not read chain id") from exc
        return self._chain_id

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def submit_transaction(
        self,
        function_name: str,
        args: list[Any],
        value_wei: int,
        signer: LocalAccount,
    ) -> TransactionHandle:
        """Build, sign locally, and broadcast a contract transaction."""
        try:
            fn = self._contract.get_function_by_name(function_name)(*args)
            tx = fn.build_transaction({
                "from": signer.address,
                "value": value_wei,
                "nonce": self._w3.eth.get_transaction_count(signer.address),
                "chainId": self.chain_id,
            })
            signed = signer.sign_transaction(tx)
            tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, ValueError, OSError) as exc:
            raise self._translate(exc, f"Could not submit {function_name}") from exc

        handle = TransactionHandle(tx_hash=Web3.to_hex(tx_hash), function_name=function_name)
        logger.info("Transaction sent: %s", handle.tx_hash)
        return handle

    def await_confirmation(self, handle: TransactionHandle) -> TransactionReceipt:
        """Block until *handle* is mined and return its receipt.

        Raises
        ------
        LedgerError
            ``REVERTED`` if the receipt status is not 1, ``TIMEOUT`` if the
            wait exceeded ``confirmation_timeout``.
        """
        try:
            raw = self._w3.eth.wait_for_transaction_receipt(
                handle.tx_hash, timeout=self._confirmation_timeout
            )
        except (Web3Exception, ValueError, OSError) as exc:
            raise self._translate(exc, f"Waiting for {handle.tx_hash} failed") from exc

        receipt = TransactionReceipt(
            tx_hash=handle.tx_hash,
            effective_sender=raw["from"],
            status=int(raw["status"]),
            block_number=raw.get("blockNumber"),
        )
        if not receipt.succeeded:
            raise LedgerError(
                f"Transaction {handle.tx_hash} reverted (status={receipt.status})",
                kind=LedgerErrorKind.REVERTED,
            )
        return receipt

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def call_read_only(self, function_name: str, args: list[Any]) -> Any:
        try:
            return self._contract.get_function_by_name(function_name)(*args).call()
        except (Web3Exception, ValueError, OSError) as exc:
            raise self._translate(exc, f"Call to {function_name} failed") from exc

    def get_balance(self, address: str) -> int:
        try:
            return int(self._w3.eth.get_balance(Web3.to_checksum_address(address)))
        except (Web3Exception, ValueError, OSError) as exc:
            raise self._translate(exc, f"Could not read balance of {address}") from exc

    @staticmethod
    def _translate(exc: BaseException, context: str) -> LedgerError:
        kind = classify_ledger_error(exc)
        logger.debug("%s: %s (classified as %s)", context, exc, kind.value)
        return ledger_error(f"{context}: {exc}", kind)

    def __repr__(self) -> str:
        return f"Web3LedgerClient(contract={self.contract_address})"
