"""Main Typer application — the two batch entry points.

Entry point: ``lyricgate`` (configured via pyproject.toml scripts).

Commands take no options; configuration is read from the environment.
Any unrecovered error is reported and the process exits with status 1.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import typer
from rich.console import Console

from lyricgate.cli.commands.add_song import run_add_song
from lyricgate.cli.commands.unlock import run_unlock
from lyricgate.config import ConfigurationError, load_settings
from lyricgate.observability import configure_logging
from lyricgate.session import LyricGateSession, build_session

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="lyricgate",
    help="LyricGate: pay-to-unlock song lyrics with condition-bound encryption.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _run(flow: Callable[[LyricGateSession, Console], str | None]) -> None:
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    configure_logging(settings.log_level)
    try:
        session = build_session(settings)
        flow(session, console)
    except Exception as exc:
        logger.exception("Application failed")
        console.print(f"[bold red]Application failed:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc


@app.command(name="add-song", help="Add and exercise a song as the administrator.")
def add_song_cmd() -> None:
    """Encrypt, store, find, purchase, and decrypt the sample song."""
    _run(run_add_song)


@app.command(name="unlock", help="Unlock an existing song as a purchaser.")
def unlock_cmd() -> None:
    """Ensure access to the first stored song and decrypt its lyrics."""
    _run(run_unlock)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
