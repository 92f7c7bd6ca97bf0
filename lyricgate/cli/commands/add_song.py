"""``lyricgate add-song`` — publish and exercise a song as the administrator.

Encrypts the sample song's lyrics under its access condition, stores the
record, finds it again by title, purchases access, and decrypts the
lyrics.  Configuration comes entirely from the environment.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.panel import Panel

from lyricgate.session import LyricGateSession

logger = logging.getLogger(__name__)

SAMPLE_SONG_ID = 1
SAMPLE_TITLE = "Song Title"
SAMPLE_ARTIST = "Artist Name"
SAMPLE_LYRICS = "Encrypted lyrics here..."


def run_add_song(session: LyricGateSession, console: Console) -> str | None:
    """Run the administrator flow and return the decrypted lyrics."""
    logger.info("Initializing Karaoke Service...")
    session.connect()

    chain_id = session.chain_id
    logger.info("Connected to network: chain_id=%d address=%s", chain_id, session.address)

    logger.info("Creating auth signature...")
    authorization = session.authorizations.current()
    logger.info("Auth signature created for %s", authorization.address)

    logger.info("Adding new song...")
    record = session.service.add_song(
        SAMPLE_SONG_ID,
        SAMPLE_TITLE,
        SAMPLE_ARTIST,
        SAMPLE_LYRICS,
        chain_id,
        authorization,
    )
    console.print(f"[bold green]Song added:[/bold green] {record.stream_id}")

    logger.info("Searching for songs...")
    songs = session.service.search_songs(SAMPLE_TITLE)
    if not songs:
        console.print("[yellow]No songs found[/yellow]")
        return None

    song = songs[0]
    logger.info("Found song %d: %s by %s", song.song_id, song.title, song.artist)

    logger.info("Purchasing song access...")
    session.service.purchase_song_access(song.song_id, session.signer)

    logger.info("Getting decrypted lyrics...")
    lyrics = session.service.get_song_lyrics(
        song, chain_id, session.authorizations.current()
    )
    console.print(Panel(lyrics, title=f"[bold]{song.title}[/bold] — {song.artist}"))
    return lyrics
