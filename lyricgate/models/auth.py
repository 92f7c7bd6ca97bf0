"""Authorization signature model."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict

# Lifetime of a signed challenge, from issued-at to expiration.
AUTH_SIG_TTL = timedelta(hours=24)


class AuthorizationSig(BaseModel):
    """A time-bounded, address-bound signed challenge.

    Produced once per session by signing a Sign-In with Ethereum message.
    Held in memory for the duration of a request and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    sig: str
    derived_via: str = "web3.eth.personal.sign"
    signed_message: str
    address: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, at: datetime | None = None) -> bool:
        """Whether the signature is past its expiration at *at* (default now)."""
        at = at or datetime.now(timezone.utc)
        return at >= self.expires_at

    def to_wire(self) -> dict[str, str]:
        """The ``authSig`` dict the threshold network accepts."""
        return {
            "sig": self.sig,
            "derivedVia": self.derived_via,
            "signedMessage": self.signed_message,
            "address": self.address,
        }

    def __repr__(self) -> str:
        return (
            f"AuthorizationSig(address={self.address!r}, "
            f"expires_at={self.expires_at.isoformat()})"
        )
