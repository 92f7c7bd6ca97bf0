"""Shared test fixtures for LyricGate.

The fake ledger keeps purchase state in memory.  The fake threshold network
behaves like the real one where it matters: it binds ciphertext to its
condition set and, at decrypt time, re-evaluates every condition against
the fake ledger using the requester's address.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount

from lyricgate.bridge.ledger import InsufficientFundsError, LedgerError
from lyricgate.bridge.lit_network import (
    NetworkCiphertext,
    NetworkErrorKind,
    ThresholdNetworkError,
)
from lyricgate.config import LyricGateSettings
from lyricgate.core.authorization import issue_authorization
from lyricgate.core.content_store import SongStore
from lyricgate.core.decryption import DecryptionGateway
from lyricgate.core.encryption import EncryptionGateway
from lyricgate.core.hasher import conditions_fingerprint
from lyricgate.core.karaoke import KaraokeService
from lyricgate.core.orchestrator import PurchaseOrchestrator
from lyricgate.models.auth import AuthorizationSig
from lyricgate.models.conditions import CALLER_ADDRESS_TOKEN
from lyricgate.models.ledger import TransactionHandle, TransactionReceipt

CONTRACT_ADDRESS = "0x83F569503ee532A60e90Ab00fF6BC265826556e0"
BASE_SEPOLIA = 84532
ONE_ETHER = 10**18

BUYER_KEY = "0x" + "11" * 32
STRANGER_KEY = "0x" + "22" * 32


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeLedger:
    """In-memory ``LedgerClient`` for the KaraokeAccess contract."""

    def __init__(self, chain_id: int = BASE_SEPOLIA) -> None:
        self._chain_id = chain_id
        self.access: set[tuple[str, int]] = set()
        self.balances: dict[str, int] = {}
        self.submit_error: LedgerError | None = None
        self.confirm_error: LedgerError | None = None
        self.receipt_sender: str | None = None
        self.submitted: list[TransactionHandle] = []
        self.read_calls: list[tuple[str, list[Any]]] = []
        self._pending: dict[str, tuple[str, int, int]] = {}

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def fund(self, address: str, wei: int) -> None:
        self.balances[address.lower()] = wei

    def grant(self, address: str, song_id: int) -> None:
        self.access.add((address.lower(), int(song_id)))

    def revoke(self, address: str, song_id: int) -> None:
        self.access.discard((address.lower(), int(song_id)))

    def submit_transaction(
        self, function_name: str, args: list[Any], value_wei: int, signer: LocalAccount
    ) -> TransactionHandle:
        if self.submit_error is not None:
            raise self.submit_error
        if self.balances.get(signer.address.lower(), 0) < value_wei:
            raise InsufficientFundsError("insufficient funds for gas * price + value")
        handle = TransactionHandle(
            tx_hash=f"0x{len(self.submitted) + 1:064x}", function_name=function_name
        )
        self._pending[handle.tx_hash] = (signer.address, int(args[0]), value_wei)
        self.submitted.append(handle)
        return handle

    def await_confirmation(self, handle: TransactionHandle) -> TransactionReceipt:
        if self.confirm_error is not None:
            raise self.confirm_error
        signer_address, song_id, value = self._pending.pop(handle.tx_hash)
        self.balances[signer_address.lower()] -= value
        sender = self.receipt_sender or signer_address
        self.grant(sender, song_id)
        return TransactionReceipt(
            tx_hash=handle.tx_hash,
            effective_sender=sender,
            status=1,
            block_number=len(self.submitted),
        )

    def call_read_only(self, function_name: str, args: list[Any]) -> Any:
        self.read_calls.append((function_name, list(args)))
        if function_name != "hasSongAccess":
            raise LedgerError(f"Unknown function {function_name}")
        address, song_id = args
        return (str(address).lower(), int(song_id)) in self.access

    def get_balance(self, address: str) -> int:
        return self.balances.get(address.lower(), 0)


class FakeThresholdNetwork:
    """In-memory ``ThresholdNetworkClient`` that checks conditions on decrypt."""

    def __init__(self, ledger: FakeLedger) -> None:
        self.ledger = ledger
        self.connected = False
        self.encrypt_calls = 0
        self.decrypt_calls = 0
        self.auth_sigs: list[dict[str, str]] = []
        self.fail_with: ThresholdNetworkError | None = None
        self._bindings: dict[str, str] = {}

    def connect(self) -> None:
        self.connected = True

    def encrypt(
        self,
        plaintext: bytes,
        conditions: list[dict[str, Any]],
        chain: str,
        auth_sig: dict[str, str],
    ) -> NetworkCiphertext:
        self.encrypt_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        ciphertext = base64.b64encode(plaintext[::-1]).decode("ascii")
        self._bindings[ciphertext] = conditions_fingerprint(conditions)
        return NetworkCiphertext(
            ciphertext=ciphertext,
            data_to_encrypt_hash=hashlib.sha256(plaintext).hexdigest(),
        )

    def decrypt(
        self,
        ciphertext: str,
        data_to_encrypt_hash: str,
        conditions: list[dict[str, Any]],
        chain: str,
        auth_sig: dict[str, str],
    ) -> bytes:
        self.decrypt_calls += 1
        self.auth_sigs.append(auth_sig)
        if self.fail_with is not None:
            raise self.fail_with
        if self._bindings.get(ciphertext) != conditions_fingerprint(conditions):
            raise ThresholdNetworkError(
                "Conditions do not match ciphertext", kind=NetworkErrorKind.INVALID_REQUEST
            )
        plaintext = base64.b64decode(ciphertext)[::-1]
        if hashlib.sha256(plaintext).hexdigest() != data_to_encrypt_hash:
            raise ThresholdNetworkError(
                "Integrity hash mismatch", kind=NetworkErrorKind.INVALID_REQUEST
            )
        for cond in conditions:
            if cond["chain"] != chain:
                raise ThresholdNetworkError(
                    "Chain mismatch", kind=NetworkErrorKind.INVALID_REQUEST
                )
            args = [
                auth_sig["address"] if p == CALLER_ADDRESS_TOKEN else p
                for p in cond["functionParams"]
            ]
            result = self.ledger.call_read_only(cond["functionName"], args)
            if str(result).lower() != cond["returnValueTest"]["value"]:
                raise ThresholdNetworkError(
                    "NodeAccessControlConditionsReturnedNotAuthorized",
                    kind=NetworkErrorKind.ACCESS_DENIED,
                )
        return plaintext


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def buyer() -> LocalAccount:
    return Account.from_key(BUYER_KEY)


@pytest.fixture
def stranger() -> LocalAccount:
    return Account.from_key(STRANGER_KEY)


@pytest.fixture
def fake_ledger(buyer: LocalAccount) -> FakeLedger:
    """A ledger where the buyer holds one ether and no access."""
    ledger = FakeLedger()
    ledger.fund(buyer.address, ONE_ETHER)
    return ledger


@pytest.fixture
def fake_network(fake_ledger: FakeLedger) -> FakeThresholdNetwork:
    network = FakeThresholdNetwork(fake_ledger)
    network.connect()
    return network


@pytest.fixture
def buyer_auth(buyer: LocalAccount) -> AuthorizationSig:
    return issue_authorization(buyer, now=datetime.now(timezone.utc))


@pytest.fixture
def stranger_auth(stranger: LocalAccount) -> AuthorizationSig:
    return issue_authorization(stranger, now=datetime.now(timezone.utc))


@pytest.fixture
def encryption_gateway(fake_network: FakeThresholdNetwork) -> EncryptionGateway:
    return EncryptionGateway(fake_network, CONTRACT_ADDRESS)


@pytest.fixture
def decryption_gateway(fake_network: FakeThresholdNetwork) -> DecryptionGateway:
    return DecryptionGateway(fake_network, CONTRACT_ADDRESS)


@pytest.fixture
def orchestrator(fake_ledger: FakeLedger) -> PurchaseOrchestrator:
    return PurchaseOrchestrator(fake_ledger)


@pytest.fixture
def song_store(tmp_path: Path) -> SongStore:
    """A fresh SongStore backed by a temp SQLite database."""
    return SongStore(tmp_path / "songs.db", "model-songs", "context-karaoke")


@pytest.fixture
def karaoke(
    encryption_gateway: EncryptionGateway,
    decryption_gateway: DecryptionGateway,
    orchestrator: PurchaseOrchestrator,
    fake_ledger: FakeLedger,
    song_store: SongStore,
) -> KaraokeService:
    return KaraokeService(
        encryption=encryption_gateway,
        decryption=decryption_gateway,
        orchestrator=orchestrator,
        ledger=fake_ledger,
        store=song_store,
        contract_address=CONTRACT_ADDRESS,
    )


@pytest.fixture
def settings(tmp_path: Path) -> LyricGateSettings:
    return LyricGateSettings(
        rpc_url="http://localhost:8545",
        environment_id="test-env",
        song_model_id="model-songs",
        context_id="context-karaoke",
        private_key=BUYER_KEY,
        content_db_path=tmp_path / "session-songs.db",
    )


@pytest.fixture
def contract_address() -> str:
    return CONTRACT_ADDRESS


@pytest.fixture
def chain_id() -> int:
    return BASE_SEPOLIA


@pytest.fixture(autouse=True)
def _reset_lyricgate_logger():
    """Undo ``configure_logging`` so caplog sees every record."""
    yield
    logger = logging.getLogger("lyricgate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
