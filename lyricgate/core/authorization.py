"""Authorization issuance — Sign-In with Ethereum challenges for the network.

An authorization is an EIP-4361 message (domain, statement, nonce,
issued-at, expiration) signed with the wallet's key via ``personal_sign``.
Expiration is fixed at 24 hours after issuance.

``AuthorizationSession`` holds one authorization in memory per session and
issues a fresh one once the cached signature has expired, so an expired
authorization is never handed out again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from siwe import SiweMessage, generate_nonce
from web3 import Web3

from lyricgate.models.auth import AUTH_SIG_TTL, AuthorizationSig

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "localhost"
DEFAULT_URI = "https://localhost/login"
DEFAULT_STATEMENT = "Sign this message to access encrypted lyrics with Lit Protocol."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_millis(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc).replace(microsecond=(dt.microsecond // 1000) * 1000)


def _iso8601(dt: datetime) -> str:
    """Format like JavaScript's ``toISOString``: ``2024-01-01T00:00:00.000Z``."""
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def issue_authorization(
    signer: LocalAccount,
    *,
    domain: str = DEFAULT_DOMAIN,
    uri: str = DEFAULT_URI,
    statement: str = DEFAULT_STATEMENT,
    chain_id: int = 1,
    now: datetime | None = None,
) -> AuthorizationSig:
    """Sign a fresh SIWE challenge with *signer*.

    Parameters
    ----------
    signer:
        Local account holding the wallet key.
    domain, uri, statement:
        SIWE message fields.
    chain_id:
        Chain id written into the message.
    now:
        Issued-at time (default: current UTC time).

    Returns
    -------
    AuthorizationSig
        Signature valid from *now* until *now* + 24h.
    """
    issued_at = _to_millis(now or _utcnow())
    expires_at = issued_at + AUTH_SIG_TTL

    message = SiweMessage(
        domain=domain,
        address=signer.address,
        statement=statement,
        uri=uri,
        version="1",
        chain_id=chain_id,
        nonce=generate_nonce(),
        issued_at=_iso8601(issued_at),
        expiration_time=_iso8601(expires_at),
    )
    text = message.prepare_message()
    signed = signer.sign_message(encode_defunct(text=text))

    logger.debug("Issued authorization for %s (expires %s)", signer.address, expires_at)
    return AuthorizationSig(
        sig=Web3.to_hex(signed.signature),
        signed_message=text,
        address=signer.address,
        issued_at=issued_at,
        expires_at=expires_at,
    )


def recover_signer(authorization: AuthorizationSig) -> str:
    """Recover the address that produced *authorization*'s signature."""
    return Account.recover_message(
        encode_defunct(text=authorization.signed_message),
        signature=authorization.sig,
    )


class AuthorizationSession:
    """Per-session holder of the current authorization.

    Parameters
    ----------
    signer:
        Wallet used to sign challenges.
    clock:
        Returns the current UTC time.  Injected for tests.
    refresh_margin:
        Re-issue this long before the cached authorization expires.
    """

    def __init__(
        self,
        signer: LocalAccount,
        *,
        domain: str = DEFAULT_DOMAIN,
        uri: str = DEFAULT_URI,
        statement: str = DEFAULT_STATEMENT,
        chain_id: int = 1,
        clock: Callable[[], datetime] = _utcnow,
        refresh_margin: timedelta = timedelta(0),
    ) -> None:
        self._signer = signer
        self._domain = domain
        self._uri = uri
        self._statement = statement
        self._chain_id = chain_id
        self._clock = clock
        self._refresh_margin = refresh_margin
        self._current: AuthorizationSig | None = None

    @property
    def address(self) -> str:
        return self._signer.address

    def current(self) -> AuthorizationSig:
        """Return a non-expired authorization, issuing one if needed."""
        now = self._clock()
        if self._current is not None and not self._current.is_expired(
            now + self._refresh_margin
        ):
            return self._current

        if self._current is not None:
            logger.info(
                "Authorization for %s expired at %s; issuing a new one.",
                self._signer.address,
                self._current.expires_at.isoformat(),
            )
        self._current = issue_authorization(
            self._signer,
            domain=self._domain,
            uri=self._uri,
            statement=self._statement,
            chain_id=self._chain_id,
            now=now,
        )
        return self._current

    def invalidate(self) -> None:
        """Drop the cached authorization."""
        self._current = None
