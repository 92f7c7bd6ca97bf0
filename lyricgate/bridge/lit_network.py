"""Threshold-network bridge — wraps the Lit Protocol Python SDK.

Bridge boundary
---------------
The threshold network encrypts data bound to access conditions and only
releases plaintext after re-evaluating those conditions against the live
ledger.  Core code depends on the ``ThresholdNetworkClient`` protocol, not
on the SDK, so gateways can be exercised against substitute clients.

``LitNetworkClient`` is the production implementation.  It requires the
optional ``lit-python-sdk`` distribution; when that is not installed,
constructing the client raises ``ThresholdNetworkUnavailable`` rather than
degrading to anything that pretends to encrypt.

Network failures are mapped once, here, onto the closed
``NetworkErrorKind`` enumeration so that callers can tell "predicate
evaluated false" apart from "try again".
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Try-import lit_python_sdk
# ---------------------------------------------------------------------------

_LIT_SDK_AVAILABLE: bool = False
_lit_connect: Any = None

try:
    from lit_python_sdk import connect as _lit_connect  # type: ignore[import-untyped]

    _LIT_SDK_AVAILABLE = True
    logger.debug("lit_python_sdk loaded — Lit network client available.")
except ImportError:
    logger.debug(
        "lit_python_sdk not found — install lyricgate[lit] to talk to the Lit network."
    )


def is_lit_sdk_available() -> bool:
    """Return ``True`` if the Lit Python SDK is importable."""
    return _LIT_SDK_AVAILABLE


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class NetworkErrorKind(str, Enum):
    """Closed set of failure classes reported by the threshold network."""

    ACCESS_DENIED = "access_denied"
    TRANSPORT = "transport"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


class ThresholdNetworkError(RuntimeError):
    """Raised by a ``ThresholdNetworkClient`` when a request fails."""

    def __init__(self, message: str, kind: NetworkErrorKind = NetworkErrorKind.UNKNOWN) -> None:
        super().__init__(message)
        self.kind = kind


class ThresholdNetworkUnavailable(RuntimeError):
    """Raised when no threshold-network backend can be constructed."""


# Markers the Lit nodes put in an error's code or message when the
# conditions evaluated false for the caller.  The SDK's local server only
# forwards ``{"error": {"message", "stack"}}``, so the message is searched.
_ACCESS_DENIED_MARKERS = (
    "NodeAccessControlConditionsReturnedNotAuthorized",
    "NodeNotAuthorized",
    "not_authorized",
    "not permitted to access",
)

_INVALID_REQUEST_MARKERS = (
    "InvalidArgumentException",
    "NodeInvalidAuthSig",
    "NodeInvalidAccessControlConditions",
    "invalid_argument",
)


def _error_text(error: Any) -> str:
    if isinstance(error, dict):
        parts = [
            error.get("errorCode"),
            error.get("errorKind"),
            error.get("code"),
            error.get("message"),
        ]
    elif isinstance(error, BaseException):
        parts = [getattr(error, "error_code", None), getattr(error, "code", None), str(error)]
    else:
        parts = [error]
    return " ".join(str(p) for p in parts if p)


def classify_network_error(error: Any) -> NetworkErrorKind:
    """Map a Lit error payload (dict, string or exception) onto ``NetworkErrorKind``.

    Error codes and message text are both searched, the same way
    ``classify_ledger_error`` reads node messages.
    """
    text = _error_text(error)
    lowered = text.lower()
    if any(marker.lower() in lowered for marker in _ACCESS_DENIED_MARKERS):
        return NetworkErrorKind.ACCESS_DENIED
    if any(marker.lower() in lowered for marker in _INVALID_REQUEST_MARKERS):
        return NetworkErrorKind.INVALID_REQUEST
    if isinstance(error, (ConnectionError, TimeoutError, OSError)):
        return NetworkErrorKind.TRANSPORT
    return NetworkErrorKind.UNKNOWN


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class NetworkCiphertext(BaseModel):
    """What the network returns from ``encrypt``."""

    model_config = ConfigDict(frozen=True)

    ciphertext: str
    data_to_encrypt_hash: str


@runtime_checkable
class ThresholdNetworkClient(Protocol):
    """Interface of a condition-bound threshold-encryption network."""

    def connect(self) -> None: ...

    def encrypt(
        self,
        plaintext: bytes,
        conditions: list[dict[str, Any]],
        chain: str,
        auth_sig: dict[str, str],
    ) -> NetworkCiphertext: ...

    def decrypt(
        self,
        ciphertext: str,
        data_to_encrypt_hash: str,
        conditions: list[dict[str, Any]],
        chain: str,
        auth_sig: dict[str, str],
    ) -> bytes: ...


# ---------------------------------------------------------------------------
# Lit implementation
# ---------------------------------------------------------------------------


class LitNetworkClient:
    """``ThresholdNetworkClient`` backed by the Lit Python SDK.

    The SDK drives a local Node.js server and reports most failures in the
    JSON it returns rather than by raising, so every SDK result goes through
    ``_raise_for_error``.  ``encrypt_string`` takes only the data and the
    condition set; the chain and authorization travel with
    ``decrypt_string``, where the nodes evaluate the conditions.

    Parameters
    ----------
    lit_network:
        Lit network name (e.g. ``"datil-test"``).
    auth_token:
        Private key handed to the SDK's local signing server.
    debug:
        Forwarded to the SDK.
    """

    def __init__(
        self,
        lit_network: str = "datil-test",
        *,
        auth_token: str = "",
        debug: bool = False,
    ) -> None:
        if not _LIT_SDK_AVAILABLE or _lit_connect is None:
            raise ThresholdNetworkUnavailable(
                "lit-python-sdk is not installed.  Install it with "
                "`pip install lyricgate[lit]`."
            )
        self._lit_network = lit_network
        self._auth_token = auth_token
        self._debug = debug
        self._client: Any | None = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        """Start the SDK and connect to the Lit network.

        Raises
        ------
        ThresholdNetworkError
            ``TRANSPORT`` if any setup step raises or reports an error.
        """
        logger.info("Connecting to Lit Protocol (%s)...", self._lit_network)
        try:
            client = _lit_connect()
            if self._auth_token:
                self._raise_for_error(client.set_auth_token(self._auth_token))
            self._raise_for_error(client.new(lit_network=self._lit_network, debug=self._debug))
            self._raise_for_error(client.connect())
        except Exception as exc:
            raise ThresholdNetworkError(
                f"Could not connect to Lit network {self._lit_network!r}: {exc}",
                kind=NetworkErrorKind.TRANSPORT,
            ) from exc
        self._client = client
        logger.info("Connected to Lit Protocol")

    def _require_client(self) -> Any:
        if self._client is None:
            raise ThresholdNetworkError(
                "LitNetworkClient.connect() must be called first.",
                kind=NetworkErrorKind.INVALID_REQUEST,
            )
        return self._client

    def encrypt(
        self,
        plaintext: bytes,
        conditions: list[dict[str, Any]],
        chain: str,
        auth_sig: dict[str, str],
    ) -> NetworkCiphertext:
        client = self._require_client()
        result = self._call(
            client.encrypt_string,
            data_to_encrypt=plaintext.decode("utf-8"),
            evm_contract_conditions=conditions,
        )
        return NetworkCiphertext(
            ciphertext=self._field(result, "ciphertext"),
            data_to_encrypt_hash=self._field(result, "dataToEncryptHash"),
        )

    def decrypt(
        self,
        ciphertext: str,
        data_to_encrypt_hash: str,
        conditions: list[dict[str, Any]],
        chain: str,
        auth_sig: dict[str, str],
    ) -> bytes:
        client = self._require_client()
        result = self._call(
            client.decrypt_string,
            ciphertext=ciphertext,
            data_to_encrypt_hash=data_to_encrypt_hash,
            chain=chain,
            evm_contract_conditions=conditions,
            auth_sig=auth_sig,
        )
        return self._field(result, "decryptedString").encode("utf-8")

    @classmethod
    def _call(cls, method: Any, **kwargs: Any) -> Any:
        """Invoke an SDK method and translate its failure signals."""
        try:
            result = method(**kwargs)
        except ThresholdNetworkError:
            raise
        except Exception as exc:
            raise ThresholdNetworkError(str(exc), kind=classify_network_error(exc)) from exc
        cls._raise_for_error(result)
        return result

    @staticmethod
    def _raise_for_error(result: Any) -> None:
        """Raise ``ThresholdNetworkError`` for an in-band SDK error result.

        The SDK server answers failures with ``{"error": {"message", "stack"}}``
        and some setup calls with ``{"success": false, "error": "..."}``.
        """
        if not isinstance(result, dict):
            return
        error = result.get("error")
        if not error and result.get("success") is not False:
            return
        error = error or "request was not successful"
        message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
        raise ThresholdNetworkError(message, kind=classify_network_error(error))

    @staticmethod
    def _field(result: Any, key: str) -> str:
        value = result.get(key) if isinstance(result, dict) else None
        if not isinstance(value, str):
            raise ThresholdNetworkError(
                f"Lit response has no string {key!r}: {result!r}",
                kind=NetworkErrorKind.UNKNOWN,
            )
        return value

    def __repr__(self) -> str:
        state = "connected" if self.is_connected else "disconnected"
        return f"LitNetworkClient(lit_network={self._lit_network!r}, {state})"
