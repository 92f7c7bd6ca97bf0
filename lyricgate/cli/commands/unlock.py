"""``lyricgate unlock`` — unlock an existing song as a purchaser.

Fetches every stored song, makes sure the configured wallet has access to
the first one (buying it if needed), and decrypts its lyrics.  A purchase
that fails for lack of funds still succeeds when access was bought
earlier.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.panel import Panel

from lyricgate.session import LyricGateSession

logger = logging.getLogger(__name__)


def run_unlock(session: LyricGateSession, console: Console) -> str | None:
    """Run the purchaser flow and return the decrypted lyrics."""
    logger.info("Starting unlock process...")
    session.connect()

    chain_id = session.chain_id
    logger.info("Connected to network: chain_id=%d address=%s", chain_id, session.address)

    authorization = session.authorizations.current()
    logger.info("Auth signature created for %s", authorization.address)

    logger.info("Fetching all songs...")
    songs = session.service.search_songs()
    if not songs:
        console.print("[yellow]Song not found[/yellow]")
        return None

    song = songs[0]
    logger.info("Found song %d: %s by %s", song.song_id, song.title, song.artist)

    logger.info("Checking/purchasing song access...")
    lyrics = session.service.unlock_song(
        song, chain_id, session.signer, session.authorizations.current
    )
    console.print(Panel(lyrics, title=f"[bold]{song.title}[/bold] — {song.artist}"))
    return lyrics
