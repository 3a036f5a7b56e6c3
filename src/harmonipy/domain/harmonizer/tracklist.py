"""Tracklist summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harmonipy.domain.model import Release


def track_count_summary(release: Release) -> str:
    """Create a per medium track count summary, e.g. ``"10+2 tracks"``."""

    track_counts = [len(medium.tracklist) for medium in release.media] or [0]
    total = sum(track_counts)
    noun = "track" if total == 1 else "tracks"
    return f"{'+'.join(str(count) for count in track_counts)} {noun}"
