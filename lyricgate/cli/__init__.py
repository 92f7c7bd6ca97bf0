"""LyricGate CLI: Typer-based batch entry points.

Provides the ``lyricgate`` command with ``add-song`` (administrator) and
``unlock`` (purchaser).  Output uses Rich.
"""
