"""Song content store backed by SQLite.

Records are scoped by a model id and a context id, the way the hosted
document store this replaces scopes its documents.  A store instance only
ever reads and writes rows for its own (model, context) pair.

Records are insert-only; a re-published song gets a new row and ``get``
returns the newest one.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from pathlib import Path

from lyricgate.models.payloads import SongRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_SONGS = """
CREATE TABLE IF NOT EXISTS songs (
    id                           INTEGER PRIMARY KEY AUTOINCREMENT,
    stream_id                    TEXT NOT NULL UNIQUE,
    model_id                     TEXT NOT NULL,
    context_id                   TEXT NOT NULL,
    song_id                      INTEGER NOT NULL,
    title                        TEXT NOT NULL,
    artist                       TEXT NOT NULL,
    encrypted_lyrics_ciphertext  TEXT NOT NULL DEFAULT '',
    encrypted_lyrics_hash        TEXT NOT NULL DEFAULT '',
    encrypted_lyrics_conditions  TEXT NOT NULL DEFAULT ''
);
"""

_CREATE_IDX_SCOPE = """
CREATE INDEX IF NOT EXISTS idx_songs_scope ON songs(model_id, context_id, id);
"""

_COLUMNS = (
    "stream_id, song_id, title, artist, encrypted_lyrics_ciphertext, "
    "encrypted_lyrics_hash, encrypted_lyrics_conditions"
)


class SongStoreError(RuntimeError):
    """Raised when a record cannot be stored."""


class SongStore:
    """Insert and query song records for one model/context.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Created if it does not exist.
    model_id:
        Identifier of the song model (record schema).
    context_id:
        Identifier of the application context the records belong to.
    """

    def __init__(self, db_path: Path, model_id: str, context_id: str) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._model_id = model_id
        self._context_id = context_id
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._db_path))

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_SONGS)
            conn.execute(_CREATE_IDX_SCOPE)
            conn.commit()

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def context_id(self) -> str:
        return self._context_id

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, record: SongRecord) -> SongRecord:
        """Store *record* and return it with its new ``stream_id``."""
        stored = record.model_copy(update={"stream_id": f"song-{uuid.uuid4().hex}"})
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO songs
                        (stream_id, model_id, context_id, song_id, title, artist,
                         encrypted_lyrics_ciphertext, encrypted_lyrics_hash,
                         encrypted_lyrics_conditions)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        stored.stream_id,
                        self._model_id,
                        self._context_id,
                        stored.song_id,
                        stored.title,
                        stored.artist,
                        stored.encrypted_lyrics_ciphertext,
                        stored.encrypted_lyrics_hash,
                        stored.encrypted_lyrics_conditions,
                    ),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise SongStoreError(f"Failed to store song data: {exc}") from exc

        logger.info("Song %d stored as %s", stored.song_id, stored.stream_id)
        return stored

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(self, query: str | None = None) -> list[SongRecord]:
        """Return records whose title or artist contains *query*.

        Matching is a case-insensitive substring test.  An empty or
        ``None`` query returns every record in this model/context, in
        insertion order.
        """
        logger.debug("Searching with query: %r", query)
        records = self._all()
        if not query:
            return records
        q = query.casefold()
        return [
            r for r in records
            if q in r.title.casefold() or q in r.artist.casefold()
        ]

    def get(self, song_id: int) -> SongRecord | None:
        """Return the most recent record for *song_id*, or ``None``."""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM songs "
                "WHERE model_id = ? AND context_id = ? AND song_id = ? "
                "ORDER BY id DESC LIMIT 1",
                (self._model_id, self._context_id, song_id),
            ).fetchone()
        return self._row_to_record(row) if row else None

    def count(self) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM songs WHERE model_id = ? AND context_id = ?",
                (self._model_id, self._context_id),
            ).fetchone()
        return row[0] if row else 0

    def _all(self) -> list[SongRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM songs "
                "WHERE model_id = ? AND context_id = ? ORDER BY id ASC",
                (self._model_id, self._context_id),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: tuple) -> SongRecord:
        stream_id, song_id, title, artist, ciphertext, data_hash, conditions = row
        return SongRecord(
            stream_id=stream_id,
            song_id=song_id,
            title=title,
            artist=artist,
            encrypted_lyrics_ciphertext=ciphertext,
            encrypted_lyrics_hash=data_hash,
            encrypted_lyrics_conditions=conditions,
        )
