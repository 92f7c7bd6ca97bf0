"""Encrypted payload and stored song record models."""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field

from lyricgate.models.conditions import AccessCondition


class MalformedPayloadError(ValueError):
    """Raised when a payload lacks ciphertext, hash, or conditions."""


class EncryptedPayload(BaseModel):
    """Ciphertext bound to a condition set by the threshold network.

    ``data_to_encrypt_hash`` is checked by the network at decrypt time, so
    any change to the ciphertext or the conditions after creation makes the
    payload undecryptable.
    """

    model_config = ConfigDict(frozen=True)

    ciphertext: str = ""
    data_to_encrypt_hash: str = ""
    conditions: tuple[AccessCondition, ...] = ()

    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        if not self.ciphertext:
            missing.append("ciphertext")
        if not self.data_to_encrypt_hash:
            missing.append("data_to_encrypt_hash")
        if not self.conditions:
            missing.append("conditions")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def ensure_complete(self) -> None:
        """Raise ``MalformedPayloadError`` unless every field is present."""
        missing = self.missing_fields()
        if missing:
            raise MalformedPayloadError(
                f"Encrypted payload is missing: {', '.join(missing)}"
            )

    def conditions_wire(self) -> list[dict]:
        return [c.to_wire() for c in self.conditions]


class SongRecord(BaseModel):
    """Song metadata plus encrypted lyrics, as kept by the content store.

    Conditions are stored as JSON text in the Lit wire shape so that they
    round-trip exactly.
    """

    model_config = ConfigDict(frozen=True)

    song_id: int = Field(ge=0)
    title: str
    artist: str
    encrypted_lyrics_ciphertext: str = ""
    encrypted_lyrics_hash: str = ""
    encrypted_lyrics_conditions: str = ""
    stream_id: str | None = None

    @classmethod
    def from_payload(
        cls,
        song_id: int,
        title: str,
        artist: str,
        payload: EncryptedPayload,
    ) -> SongRecord:
        return cls(
            song_id=song_id,
            title=title,
            artist=artist,
            encrypted_lyrics_ciphertext=payload.ciphertext,
            encrypted_lyrics_hash=payload.data_to_encrypt_hash,
            encrypted_lyrics_conditions=json.dumps(payload.conditions_wire()),
        )

    def to_payload(self) -> EncryptedPayload:
        """Rebuild the ``EncryptedPayload`` this record was created from.

        Raises
        ------
        MalformedPayloadError
            If the stored conditions are not valid condition JSON.
        """
        conditions: tuple[AccessCondition, ...] = ()
        if self.encrypted_lyrics_conditions:
            try:
                raw = json.loads(self.encrypted_lyrics_conditions)
                conditions = tuple(AccessCondition.from_wire(c) for c in raw)
            except (ValueError, KeyError, TypeError) as exc:
                raise MalformedPayloadError(
                    f"Stored conditions for song {self.song_id} are unreadable: {exc}"
                ) from exc
        return EncryptedPayload(
            ciphertext=self.encrypted_lyrics_ciphertext,
            data_to_encrypt_hash=self.encrypted_lyrics_hash,
            conditions=conditions,
        )
