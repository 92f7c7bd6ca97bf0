"""Tests for DecryptionGateway — access is decided by the network, not here."""

from __future__ import annotations

import pytest

from lyricgate.bridge.lit_network import NetworkErrorKind, ThresholdNetworkError
from lyricgate.core.chain_registry import UnsupportedChainError
from lyricgate.core.decryption import AccessDeniedError, DecryptionFailedError, DecryptionGateway
from lyricgate.core.encryption import EncryptionGateway
from lyricgate.models.auth import AuthorizationSig
from lyricgate.models.payloads import EncryptedPayload, MalformedPayloadError


@pytest.fixture
def payload(encryption_gateway: EncryptionGateway, buyer_auth: AuthorizationSig) -> EncryptedPayload:
    return encryption_gateway.encrypt("Never gonna give you up", 42, 84532, buyer_auth)


class TestDecrypt:
    def test_holder_gets_plaintext(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        buyer,
        buyer_auth: AuthorizationSig,
        fake_ledger,
    ):
        fake_ledger.grant(buyer.address, 42)
        assert decryption_gateway.decrypt(payload, 84532, buyer_auth) == "Never gonna give you up"

    def test_non_holder_is_denied(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        stranger_auth: AuthorizationSig,
    ):
        with pytest.raises(AccessDeniedError):
            decryption_gateway.decrypt(payload, 84532, stranger_auth)

    def test_access_to_other_song_does_not_help(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        buyer,
        buyer_auth: AuthorizationSig,
        fake_ledger,
    ):
        fake_ledger.grant(buyer.address, 41)
        with pytest.raises(AccessDeniedError):
            decryption_gateway.decrypt(payload, 84532, buyer_auth)

    def test_transport_failure_is_not_access_denied(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        buyer_auth: AuthorizationSig,
        fake_network,
    ):
        fake_network.fail_with = ThresholdNetworkError("timeout", kind=NetworkErrorKind.TRANSPORT)
        with pytest.raises(DecryptionFailedError):
            decryption_gateway.decrypt(payload, 84532, buyer_auth)

    def test_non_utf8_plaintext_is_decryption_failure(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        buyer_auth: AuthorizationSig,
        fake_network,
        monkeypatch,
    ):
        monkeypatch.setattr(fake_network, "decrypt", lambda *args: b"\xff\xfe")
        with pytest.raises(DecryptionFailedError, match="not UTF-8"):
            decryption_gateway.decrypt(payload, 84532, buyer_auth)

    def test_unsupported_chain(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        buyer_auth: AuthorizationSig,
        fake_network,
    ):
        with pytest.raises(UnsupportedChainError):
            decryption_gateway.decrypt(payload, 424242, buyer_auth)
        assert fake_network.decrypt_calls == 0


class TestMalformedPayload:
    @pytest.mark.parametrize("missing", ["ciphertext", "data_to_encrypt_hash", "conditions"])
    def test_missing_field_makes_no_network_call(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        buyer_auth: AuthorizationSig,
        fake_network,
        missing: str,
    ):
        empty = () if missing == "conditions" else ""
        broken = payload.model_copy(update={missing: empty})
        with pytest.raises(MalformedPayloadError, match=missing):
            decryption_gateway.decrypt(broken, 84532, buyer_auth)
        assert fake_network.decrypt_calls == 0

    def test_conditions_for_other_song_rejected_before_network(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        buyer_auth: AuthorizationSig,
        fake_network,
    ):
        with pytest.raises(MalformedPayloadError):
            decryption_gateway.decrypt(payload, 84532, buyer_auth, expected_song_id=7)
        assert fake_network.decrypt_calls == 0

    def test_expected_song_id_matches(
        self,
        decryption_gateway: DecryptionGateway,
        payload: EncryptedPayload,
        buyer,
        buyer_auth: AuthorizationSig,
        fake_ledger,
    ):
        fake_ledger.grant(buyer.address, 42)
        text = decryption_gateway.decrypt(payload, 84532, buyer_auth, expected_song_id=42)
        assert text == "Never gonna give you up"


class TestConditionBinding:
    def test_altered_conditions_fail(
        self,
        decryption_gateway: DecryptionGateway,
        encryption_gateway: EncryptionGateway,
        payload: EncryptedPayload,
        buyer,
        buyer_auth: AuthorizationSig,
        fake_ledger,
    ):
        # Swap in the conditions of a song the buyer does own.
        fake_ledger.grant(buyer.address, 1)
        other = encryption_gateway.encrypt("other", 1, 84532, buyer_auth)
        tampered = payload.model_copy(update={"conditions": other.conditions})
        with pytest.raises((AccessDeniedError, DecryptionFailedError)):
            decryption_gateway.decrypt(tampered, 84532, buyer_auth)
